"""Custom exception classes for statement processing.

This module defines a hierarchy of exceptions used throughout the
statement parsing pipeline. Each exception maps to a specific
error code defined in errors.py.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from statement_pipeline.core.banks import supported_bank_codes
from statement_pipeline.core.errors import get_definition, get_error

if TYPE_CHECKING:
    from statement_pipeline.schemas.internal import ParseStats


class StatementProcessingError(Exception):
    """Base exception for all statement processing errors.

    All custom exceptions inherit from this base class and include
    an error_code that maps to the error catalog.

    Attributes:
        error_code: Code from the error catalog (e.g., "PARSE_001")
        details: Additional context about the error (for logging)
        stats: Parse statistics gathered before the failure, if any
    """

    def __init__(
        self,
        error_code: str,
        details: dict[str, Any] | None = None,
        stats: ParseStats | None = None,
    ):
        """Initialize the exception.

        Args:
            error_code: Error code from errors.py
            details: Additional error context (not shown to users)
            stats: Statistics collected before the failure
        """
        self.error_code = error_code
        self.details = details or {}
        self.stats = stats
        super().__init__(f"{error_code}: {self.message}")

    @property
    def message(self) -> str:
        return get_error(self.error_code)["message"]

    @property
    def user_message(self) -> str:
        return get_error(self.error_code)["user_message"]

    def to_dict(self) -> dict[str, Any]:
        """Structured error payload: catalog entry plus any stats collected."""
        definition = get_definition(self.error_code)
        return {
            "error_code": self.error_code,
            "message": self.message,
            "user_message": definition.user_message,
            "suggestion": definition.suggestion,
            "retry_allowed": definition.retry_allowed,
            "stats": self.stats.model_dump() if self.stats is not None else None,
        }


class ExtractionError(StatementProcessingError):
    """Raised when text cannot be extracted from the input file.

    Common causes:
    - Missing or unreadable file (PARSE_005)
    - Corrupted PDF / not a PDF (PARSE_002)
    - Password-protected PDF (PARSE_003)
    - Incorrect password (PARSE_004)
    - Image-only PDF with no text layer (PARSE_006)
    """

    pass


class UnsupportedFormatError(StatementProcessingError):
    """Raised when extracted text matches no known statement dialect.

    Also raised by a dialect parser that cannot locate its transaction table.
    Maps to error code PARSE_001.
    """

    def __init__(
        self,
        error_code: str = "PARSE_001",
        details: dict[str, Any] | None = None,
        stats: ParseStats | None = None,
    ):
        self.supported_banks = supported_bank_codes()
        super().__init__(error_code, details, stats)

    @property
    def message(self) -> str:
        return (
            "Unsupported bank statement format. Currently supported banks: "
            + ", ".join(self.supported_banks)
        )


class DateFormatError(StatementProcessingError, ValueError):
    """Raised when a date substring matches none of the candidate formats."""

    def __init__(
        self,
        error_code: str = "DATE_001",
        details: dict[str, Any] | None = None,
        stats: ParseStats | None = None,
    ):
        super().__init__(error_code, details, stats)


class ImportPersistenceError(StatementProcessingError):
    """Raised when a downstream collaborator fails to store a parsed statement."""

    pass
