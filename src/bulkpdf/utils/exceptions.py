"""
BulkPdf - Custom Exceptions Module

This module defines custom exception classes for specific error cases
in the BulkPdf application.
"""


class BulkPdfError(Exception):
    """Base exception for all BulkPdf errors.

    All custom exceptions should inherit from this class to allow
    catching any BulkPdf-specific error.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional technical details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class UserInputError(BulkPdfError):
    """Raised when an operation is triggered with unusable user input.

    Covers an empty file list, too few files to merge and page numbers
    that are not positive integers. Always raised before the codec is used.
    """


class LoadError(BulkPdfError):
    """Raised when a file cannot be opened as a PDF (corrupt, unsupported, encrypted)."""

    def __init__(self, file_name: str, reason: str | None = None) -> None:
        """Initialize the exception.

        Args:
            file_name: Name of the file that failed to load
            reason: Optional underlying error message
        """
        self.file_name = file_name
        self.reason = reason
        msg = f"Could not load '{file_name}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, details=f"file={file_name}")


class PageRangeError(BulkPdfError):
    """Raised when a page number does not fit a given file."""

    def __init__(
        self,
        file_name: str,
        page_number: int,
        page_count: int,
        reason: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            file_name: Name of the offending file
            page_number: The requested 1-based page number
            page_count: Actual number of pages in the file
            reason: Optional message overriding the default out-of-range text
        """
        self.file_name = file_name
        self.page_number = page_number
        self.page_count = page_count

        if reason is None:
            reason = f"page {page_number} doesn't exist (file has {page_count} pages)"
        self.reason = reason

        super().__init__(f"{file_name}: {reason}", details=f"pages={page_count}")


class ConfigurationError(BulkPdfError):
    """Raised when there's a configuration-related error."""

    def __init__(self, setting_name: str | None = None, reason: str | None = None) -> None:
        """Initialize the exception.

        Args:
            setting_name: Optional name of the problematic setting
            reason: Optional reason for the error
        """
        self.setting_name = setting_name
        self.reason = reason

        if setting_name:
            msg = f"Configuration error for '{setting_name}'"
        else:
            msg = "Configuration error"

        if reason:
            msg += f": {reason}"

        super().__init__(msg)


class ValidationError(BulkPdfError):
    """Raised when input validation fails."""

    def __init__(
        self,
        field: str,
        value: str | None = None,
        reason: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            field: Name of the field that failed validation
            value: Optional value that failed validation
            reason: Optional reason for the validation failure
        """
        self.field = field
        self.value = value
        self.reason = reason

        msg = f"Validation error for '{field}'"
        if reason:
            msg += f": {reason}"

        super().__init__(msg)


class ReorderError(ValidationError):
    """Raised when a reorder sequence is not a permutation of the list indices."""

    def __init__(self, order: list, reason: str) -> None:
        super().__init__("order", value=str(order), reason=reason)


class BusyError(BulkPdfError):
    """Raised when the workbench is asked to act while an operation is running."""

    def __init__(self, running: str) -> None:
        """Initialize the exception.

        Args:
            running: Name of the operation currently in flight
        """
        self.running = running
        super().__init__(f"Another operation is running: {running}")


# Exception hierarchy summary:
# BulkPdfError (base)
# ├── UserInputError
# ├── LoadError
# ├── PageRangeError
# ├── ConfigurationError
# ├── ValidationError
# │   └── ReorderError
# └── BusyError
