"""Bank statement text extraction and transaction recognition pipeline."""

__version__ = "0.1.0"
