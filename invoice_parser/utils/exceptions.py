"""
Custom Exceptions Module.

This module defines the custom exceptions used throughout the invoice
parser. Field absence is never an exception: these cover malformed
input files, parsing primitives that fail on a candidate value, and
output failures.

Exception Hierarchy:
    InvoiceParsingError (base)
    ├── InputError
    │   ├── UnsupportedFileTypeError
    │   └── InputFileNotFoundError
    ├── ParsingError
    │   └── AmountParseError
    ├── OutputError
    │   ├── JSONExportError
    │   └── ExcelExportError
    └── ConfigurationError
"""


class InvoiceParsingError(Exception):
    """
    Base exception for all invoice parser errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# INPUT ERRORS
# =============================================================================

class InputError(InvoiceParsingError):
    """Base exception for input handling errors."""
    pass


class UnsupportedFileTypeError(InputError):
    """
    Raised when a file other than OCR text output is provided.

    Example:
        >>> raise UnsupportedFileTypeError(".pdf", [".txt"])
    """

    def __init__(self, file_type: str, supported_types: list):
        message = f"Unsupported file type: '{file_type}'"
        details = {"file_type": file_type, "supported_types": supported_types}
        super().__init__(message, details)


class InputFileNotFoundError(InputError):
    """Raised when an input file or directory cannot be found."""

    def __init__(self, filepath: str):
        message = f"Input not found: {filepath}"
        details = {"filepath": filepath}
        super().__init__(message, details)


# =============================================================================
# PARSING ERRORS
# =============================================================================

class ParsingError(InvoiceParsingError):
    """Base exception for parsing primitive failures."""
    pass


class AmountParseError(ParsingError):
    """
    Raised when a token shaped like an amount is not a valid number.

    Extractors catch this and treat the field as absent.
    """

    def __init__(self, value: str, reason: str = None):
        message = f"Could not parse amount: '{value}'"
        details = {"value": value, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# OUTPUT ERRORS
# =============================================================================

class OutputError(InvoiceParsingError):
    """Base exception for output handling errors."""
    pass


class JSONExportError(OutputError):
    """Raised when writing a JSON record fails."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"Failed to write JSON file: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


class ExcelExportError(OutputError):
    """Raised when Excel export fails."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"Failed to export Excel file: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(InvoiceParsingError):
    """Raised when the settings file lacks a section the parser reads."""

    def __init__(self, config_path: str, missing: list):
        message = f"Invalid configuration file: {config_path}"
        details = {"missing_sections": missing}
        super().__init__(message, details)


__all__ = [
    'InvoiceParsingError',
    'InputError',
    'UnsupportedFileTypeError',
    'InputFileNotFoundError',
    'ParsingError',
    'AmountParseError',
    'OutputError',
    'JSONExportError',
    'ExcelExportError',
    'ConfigurationError',
]
