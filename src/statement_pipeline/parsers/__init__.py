"""PDF parsing module for bank account statements.

This module extracts structured transactions from savings-account
statement PDFs using a layered architecture:
- PDFExtractor turns the PDF into plain text
- BankDetector decides which dialect the text is written in
- StatementParser scans the transaction table; dialects override only
  their vocabulary
"""

from statement_pipeline.parsers.base import StatementParser
from statement_pipeline.parsers.detector import BankDetector
from statement_pipeline.parsers.dialects import HDFCParser, ICICIParser
from statement_pipeline.parsers.extractor import PDFExtractor
from statement_pipeline.parsers.factory import (
    ParserFactory,
    parse_bank_statement,
    parse_multiple_bank_statements,
)

__all__ = [
    "PDFExtractor",
    "BankDetector",
    "StatementParser",
    "HDFCParser",
    "ICICIParser",
    "ParserFactory",
    "parse_bank_statement",
    "parse_multiple_bank_statements",
]
