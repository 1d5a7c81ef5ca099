"""Utility functions for the project."""

from .fastq import read_fastq, write_fastq
from .references import read_references
from .serialization import (
    load_config,
    save_error_matrix,
    load_error_matrix,
    error_matrix_frame,
    reference_frame,
    assignment_frame,
)

__all__ = [
    "read_fastq",
    "write_fastq",
    "read_references",
    "load_config",
    "save_error_matrix",
    "load_error_matrix",
    "error_matrix_frame",
    "reference_frame",
    "assignment_frame",
]
