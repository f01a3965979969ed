"""Error codes and user-friendly messages.

This module defines the error catalog for statement processing.
Each error has:
- error_code: Unique identifier
- message: Technical description (for logs)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable
"""

from dataclasses import dataclass


@dataclass
class ErrorDefinition:
    """Definition of a single error type."""

    code: str
    message: str
    user_message: str
    suggestion: str
    retry_allowed: bool


# Error catalog for statement processing
ERROR_CATALOG: dict[str, dict] = {
    "PARSE_001": {
        "code": "PARSE_001",
        "message": "Unsupported bank statement format",
        "user_message": "We couldn't recognize this statement format.",
        "suggestion": "Please upload a statement from HDFC Bank or ICICI Bank.",
        "retry_allowed": False,
    },
    "PARSE_002": {
        "code": "PARSE_002",
        "message": "PDF extraction failed: corrupted or invalid file",
        "user_message": "This PDF appears to be corrupted or damaged.",
        "suggestion": "Try downloading the statement again from your bank's website.",
        "retry_allowed": True,
    },
    "PARSE_003": {
        "code": "PARSE_003",
        "message": "PDF is password-protected",
        "user_message": "This statement requires a password.",
        "suggestion": "Please provide the PDF password and try again.",
        "retry_allowed": True,
    },
    "PARSE_004": {
        "code": "PARSE_004",
        "message": "Incorrect password provided for encrypted PDF",
        "user_message": "The password you provided is incorrect.",
        "suggestion": "Check your password and try again.",
        "retry_allowed": True,
    },
    "PARSE_005": {
        "code": "PARSE_005",
        "message": "Statement file is missing or unreadable",
        "user_message": "We couldn't read the uploaded file.",
        "suggestion": "Please upload the statement again.",
        "retry_allowed": True,
    },
    "PARSE_006": {
        "code": "PARSE_006",
        "message": "PDF contains no extractable text",
        "user_message": "This statement looks like a scanned image.",
        "suggestion": "Please download a text-based PDF statement from your bank.",
        "retry_allowed": False,
    },
    "DATE_001": {
        "code": "DATE_001",
        "message": "Date value does not match any supported format",
        "user_message": "We couldn't read a date on this statement.",
        "suggestion": "Please contact support if this persists.",
        "retry_allowed": False,
    },
    "IMPORT_001": {
        "code": "IMPORT_001",
        "message": "Persisting parsed statement failed",
        "user_message": "We couldn't save your statement.",
        "suggestion": "Please try again in a few moments.",
        "retry_allowed": True,
    },
    "IMPORT_002": {
        "code": "IMPORT_002",
        "message": "Transaction categorization failed",
        "user_message": "Your transactions were saved without categories.",
        "suggestion": "Categories can be assigned later from the transactions page.",
        "retry_allowed": True,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details (a generic definition for unknown codes)
    """
    if error_code not in ERROR_CATALOG:
        # Return a generic error if code not found
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def get_definition(error_code: str) -> ErrorDefinition:
    """Get error definition by code as a typed record."""
    return ErrorDefinition(**get_error(error_code))


def get_user_message(error_code: str) -> str:
    """Get user-friendly message for an error code."""
    return get_error(error_code)["user_message"]


def get_suggestion(error_code: str) -> str:
    """Get actionable suggestion for an error code."""
    return get_error(error_code)["suggestion"]


def is_retryable(error_code: str) -> bool:
    """Check if an error is retryable.

    Args:
        error_code: Error code from the catalog

    Returns:
        True if the operation can be retried, False otherwise
    """
    return get_error(error_code)["retry_allowed"]
