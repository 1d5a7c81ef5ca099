"""Reference-guided sequencing error models for synthetic-community amplicons."""

__version__ = "0.1.0"
