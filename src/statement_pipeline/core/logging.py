"""
Shared logging utilities.

Statement text carries account numbers and holder names, so every handler
installed here runs records through PIIFilter before they are emitted.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Optional

from statement_pipeline.core.config import settings

# Configure logging format
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# PII patterns to filter from logs
PII_PATTERNS = [
    # Masked account numbers (XXXXXX1234)
    (re.compile(r"\b[Xx*]{2,}\d{2,6}\b"), "[ACCOUNT]"),
    # Bare account / card numbers (9-18 digits)
    (re.compile(r"\b\d{9,18}\b"), "[ACCOUNT]"),
    # Email addresses
    (re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"), "[EMAIL]"),
    # PAN card (5 letters, 4 digits, 1 letter)
    (re.compile(r"\b[A-Z]{5}\d{4}[A-Z]\b"), "[PAN]"),
    # Names after honorifics (MR JOHN DOE, MS. JANE DOE)
    (re.compile(r"\b(?:MR|MRS|MS|M/S)\.?\s+[A-Z][A-Z.]*(?:\s+[A-Z][A-Z.]*)*"), "[NAME]"),
]


def filter_pii(text: str) -> str:
    """Remove PII from text using regex patterns.

    Args:
        text: Input text that may contain PII

    Returns:
        Text with PII replaced by placeholders
    """
    if not text:
        return text

    filtered = text
    for pattern, replacement in PII_PATTERNS:
        filtered = pattern.sub(replacement, filtered)

    return filtered


class PIIFilter(logging.Filter):
    """Logging filter that rewrites the rendered message without PII."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = filter_pii(record.getMessage())
        record.args = None
        return True


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure root logger.

    Args:
        level: Log level ('DEBUG', 'INFO', 'WARNING', 'ERROR'), defaults to
            LOG_LEVEL, or DEBUG when the DEBUG setting is on
        log_file: Optional log file path, defaults to LOG_FILE
    """
    level = level or ("DEBUG" if settings.DEBUG else settings.LOG_LEVEL)
    log_file = log_file or settings.LOG_FILE
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(PIIFilter())

    # Root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)

    # File handler if specified
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(PIIFilter())
        root_logger.addHandler(file_handler)
