"""Custom exceptions for DICOM slice ingestion.

This module defines the exception hierarchy used while decoding and
ordering slices. Per-slice failures are raised inside the decoder and
turned into rejection records at the ``decode()`` boundary.
"""

from typing import Any


class DicomStackError(Exception):
    """Base exception for slice ingestion operations.

    Attributes:
        message: Human-readable error description
        error_code: Optional error code for categorization
        context: Additional context information

    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}


class ParsingError(DicomStackError):
    """Raised when the binary DICOM structure cannot be parsed."""

    pass


class ValidationError(DicomStackError):
    """Raised when a parsed data set lacks well-formed image elements."""

    pass


class ResourceExhaustedError(DicomStackError):
    """Raised when an input exceeds the configured resource limits."""

    pass
