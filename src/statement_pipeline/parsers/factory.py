"""Parser factory for routing statements to the right dialect parser.

This module orchestrates the parsing workflow:
1. Extract text using PDFExtractor
2. Detect the dialect using BankDetector
3. Delegate to the registered dialect parser
4. Return the statement with timing and success statistics

Single-file parsing raises a StatementProcessingError carrying whatever
statistics were gathered; batch parsing isolates every file so one bad
upload never aborts the others.
"""

import logging
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from statement_pipeline.core.banks import BankType
from statement_pipeline.core.config import settings
from statement_pipeline.core.exceptions import StatementProcessingError, UnsupportedFormatError
from statement_pipeline.parsers.base import StatementParser
from statement_pipeline.parsers.detector import BankDetector
from statement_pipeline.parsers.dialects import HDFCParser, ICICIParser
from statement_pipeline.parsers.extractor import PDFExtractor
from statement_pipeline.schemas.internal import (
    BatchParseResult,
    CombinedStats,
    ParsedStatement,
    ParseFailure,
    ParseResult,
    ParseStats,
)

logger = logging.getLogger(__name__)

DEFAULT_PARSERS: dict[BankType, type[StatementParser]] = {
    BankType.HDFC: HDFCParser,
    BankType.ICICI: ICICIParser,
}


class ParserFactory:
    """Factory for parsing bank statements.

    The factory handles the complete parsing workflow:
    - Extracts text from the PDF on disk
    - Detects which dialect the statement uses
    - Routes to the registered parser for that dialect
    - Returns a ParseResult with statistics

    Example:
        >>> factory = ParserFactory()
        >>> result = factory.parse_file("/tmp/uploads/april.pdf", owner_id=1, account_id=7)
        >>> print(result.statement.bank_type, result.stats.transaction_count)
    """

    def __init__(
        self,
        extractor: PDFExtractor | None = None,
        detector: BankDetector | None = None,
        parsers: dict[BankType, type[StatementParser]] | None = None,
    ):
        """Initialize the parser factory.

        Args:
            extractor: PDF extractor instance (default: new PDFExtractor)
            detector: Bank detector instance (default: new BankDetector)
            parsers: Dialect registry (default: HDFC and ICICI)
        """
        self.extractor = extractor or PDFExtractor()
        self.detector = detector or BankDetector()

        # Registry of dialect parsers
        # Format: {BankType: ParserClass}
        self._parsers: dict[BankType, type[StatementParser]] = dict(
            DEFAULT_PARSERS if parsers is None else parsers
        )

    def register_parser(self, bank_type: BankType, parser_class: type[StatementParser]) -> None:
        """Register a dialect parser.

        Args:
            bank_type: Dialect the parser handles
            parser_class: Parser class (must inherit from StatementParser)
        """
        if not issubclass(parser_class, StatementParser):
            raise ValueError(
                f"Parser class must inherit from StatementParser, got {parser_class}"
            )

        self._parsers[bank_type] = parser_class

    def unregister_parser(self, bank_type: BankType) -> None:
        """Remove a dialect parser; statements of that dialect become unsupported."""
        self._parsers.pop(bank_type, None)

    def get_registered_banks(self) -> list[BankType]:
        """Get list of dialects with registered parsers."""
        return list(self._parsers.keys())

    def parse_text(
        self, text: str, owner_id: int, account_id: int | None = None
    ) -> ParsedStatement:
        """Detect the dialect of extracted text and parse it.

        Raises:
            UnsupportedFormatError: If no registered dialect matches
        """
        bank_type, layer = self.detector.detect_with_layer(text)
        parser_class = self._parsers.get(bank_type)
        if parser_class is None:
            raise UnsupportedFormatError(details={"detected": bank_type.value})

        logger.info("Detected %s statement (matched on %s)", bank_type.value, layer)
        return parser_class().parse(text, owner_id, account_id)

    def parse_file(
        self,
        path: str | Path,
        owner_id: int,
        account_id: int | None = None,
        password: str | None = None,
    ) -> ParseResult:
        """Parse a bank statement PDF.

        Args:
            path: Location of the uploaded PDF
            owner_id: Caller-supplied user id
            account_id: Caller-supplied bank account id
            password: Optional password for encrypted PDFs

        Returns:
            ParseResult with the statement and its statistics

        Raises:
            ExtractionError: If the file cannot be read as a PDF
            UnsupportedFormatError: If the statement format is not recognized
            (both carry ``stats`` gathered before the failure)
        """
        start_time = time.perf_counter()
        total_lines = 0

        try:
            text = self.extractor.extract_text(path, password=password)
            total_lines = len(text.splitlines())
            logger.info("Extracted %d lines from %s", total_lines, Path(path).name)

            statement = self.parse_text(text, owner_id, account_id)
        except StatementProcessingError as e:
            e.stats = ParseStats.compute(0, total_lines, time.perf_counter() - start_time)
            logger.warning(
                "Failed to parse %s: %s", Path(path).name, e.error_code, extra={"error_code": e.error_code}
            )
            raise

        stats = ParseStats.compute(
            len(statement.transactions), total_lines, time.perf_counter() - start_time
        )
        logger.info(
            "Parsed %d transactions from %s in %.3fs",
            stats.transaction_count,
            Path(path).name,
            stats.processing_time,
        )
        return ParseResult(statement=statement, stats=stats, source_path=str(path))

    def parse_files(
        self,
        paths: Sequence[str | Path],
        owner_id: int,
        account_id: int | None = None,
        max_workers: int | None = None,
    ) -> BatchParseResult:
        """Parse several statement PDFs independently.

        Failed files are logged and left out of ``results``; they are listed
        in ``failures``. Results keep the input order.

        Args:
            paths: Uploaded PDF locations
            owner_id: Caller-supplied user id
            account_id: Caller-supplied bank account id
            max_workers: Thread pool size; 1 parses sequentially

        Returns:
            BatchParseResult with per-file results and combined statistics
        """
        start_time = time.perf_counter()
        workers = max_workers or settings.BATCH_MAX_WORKERS

        def parse_one(path: str | Path) -> ParseResult | ParseFailure:
            try:
                return self.parse_file(path, owner_id, account_id)
            except StatementProcessingError as e:
                return ParseFailure(
                    source_path=str(path), error_code=e.error_code, message=e.message, stats=e.stats
                )
            except Exception as e:
                logger.exception("Unexpected error parsing %s", Path(path).name)
                return ParseFailure(
                    source_path=str(path), error_code="UNKNOWN", message=type(e).__name__
                )

        if workers > 1 and len(paths) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                outcomes = list(executor.map(parse_one, paths))
        else:
            outcomes = [parse_one(path) for path in paths]

        results = [o for o in outcomes if isinstance(o, ParseResult)]
        failures = [o for o in outcomes if isinstance(o, ParseFailure)]

        combined = CombinedStats(
            file_count=len(results),
            total_transactions=sum(r.stats.transaction_count for r in results),
            average_success_rate=(
                sum(r.stats.success_rate for r in results) / len(results) if results else 0.0
            ),
            total_processing_time=time.perf_counter() - start_time,
        )
        logger.info(
            "Batch parsed %d/%d files, %d transactions",
            combined.file_count,
            len(paths),
            combined.total_transactions,
        )
        return BatchParseResult(results=results, combined_stats=combined, failures=failures)


# Singleton factory instance for global use
_factory_instance: ParserFactory | None = None


def get_parser_factory() -> ParserFactory:
    """Get or create the global ParserFactory instance."""
    global _factory_instance
    if _factory_instance is None:
        _factory_instance = ParserFactory()
    return _factory_instance


def parse_bank_statement(
    path: str | Path,
    owner_id: int,
    account_id: int | None = None,
    password: str | None = None,
) -> ParseResult:
    """Convenience function to parse one statement using the global factory."""
    return get_parser_factory().parse_file(path, owner_id, account_id, password=password)


def parse_multiple_bank_statements(
    paths: Sequence[str | Path],
    owner_id: int,
    account_id: int | None = None,
) -> BatchParseResult:
    """Convenience function to parse a batch of statements using the global factory."""
    return get_parser_factory().parse_files(paths, owner_id, account_id)
