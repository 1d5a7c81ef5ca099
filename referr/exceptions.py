"""Exceptions raised while building an error model."""

from __future__ import annotations


class ReferrError(Exception):
    """Base exception for error-model runs."""


class ConfigurationError(ReferrError, ValueError):
    """Invalid run configuration."""


class SamplingSizeExceeded(ConfigurationError):
    """Requested sample size is larger than the number of raw reads."""

    def __init__(self, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        super().__init__(
            f"The sampling size {requested} exceeds the total number of reads "
            f"{available} in the input"
        )


class DataIntegrityError(ReferrError, ValueError):
    """Input data cannot support the requested computation."""


class WorkerFailure(ReferrError, RuntimeError):
    """A unit of parallel work failed; the whole phase is aborted."""


__all__ = [
    "ReferrError",
    "ConfigurationError",
    "SamplingSizeExceeded",
    "DataIntegrityError",
    "WorkerFailure",
]
