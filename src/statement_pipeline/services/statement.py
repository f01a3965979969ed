"""Statement import service.

This module orchestrates the complete statement import workflow:
1. Parse uploaded PDFs (single file or batch)
2. Create a statement record and stamp its id on every transaction
3. Categorize transactions
4. Persist transactions and mark the statement processed
5. Delete the uploaded files

Persistence and categorization are supplied by the caller as
collaborators; this module holds no database or HTTP code.
"""

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from statement_pipeline.core.exceptions import ImportPersistenceError
from statement_pipeline.parsers.factory import ParserFactory, get_parser_factory
from statement_pipeline.schemas.internal import ParsedStatement, ParsedTransaction, ParseResult
from statement_pipeline.schemas.statement import StatementImportResult, StatementImportSummary

logger = logging.getLogger(__name__)


class StatementRepository(Protocol):
    """Persistence collaborator for imported statements."""

    async def create_statement(
        self, statement: ParsedStatement, owner_id: int, account_id: int | None
    ) -> int:
        """Store statement metadata and return its id."""
        ...

    async def create_transactions(self, transactions: list[ParsedTransaction]) -> int:
        """Bulk insert transactions and return the number stored."""
        ...

    async def mark_processed(self, statement_id: int) -> None:
        """Flag the statement as fully imported."""
        ...


class TransactionCategorizer(Protocol):
    """Categorization collaborator."""

    async def categorize(self, transactions: list[ParsedTransaction]) -> list[ParsedTransaction]:
        """Return transactions with ``category`` filled in."""
        ...


class StatementImportService:
    """Service for importing bank statements.

    This service coordinates between parsing, categorization and
    persistence to provide end-to-end statement import.
    """

    def __init__(
        self,
        repository: StatementRepository,
        categorizer: TransactionCategorizer | None = None,
        parser_factory: ParserFactory | None = None,
    ):
        """Initialize the service.

        Args:
            repository: Statement/transaction persistence
            categorizer: Optional transaction categorizer
            parser_factory: Parser factory (default: global instance)
        """
        self.repository = repository
        self.categorizer = categorizer
        self.parser_factory = parser_factory or get_parser_factory()

    async def import_statement(
        self,
        path: str | Path,
        owner_id: int,
        account_id: int | None = None,
        password: str | None = None,
    ) -> StatementImportResult:
        """Import a single uploaded statement.

        The uploaded file is deleted whether or not the import succeeds.

        Raises:
            StatementProcessingError: If the file cannot be parsed
            ImportPersistenceError: If the repository rejects the data
        """
        try:
            result = await asyncio.to_thread(
                self.parser_factory.parse_file, path, owner_id, account_id, password
            )
            return await self._store(result, owner_id, account_id)
        finally:
            self._cleanup([path])

    async def import_statements(
        self,
        paths: Sequence[str | Path],
        owner_id: int,
        account_id: int | None = None,
    ) -> StatementImportSummary:
        """Import a batch of uploaded statements.

        Files that fail to parse are reported in ``failures``; a persistence
        failure aborts the batch. Uploaded files are always deleted.
        """
        try:
            batch = await asyncio.to_thread(
                self.parser_factory.parse_files, paths, owner_id, account_id
            )
            imported = [await self._store(result, owner_id, account_id) for result in batch.results]
            return StatementImportSummary(
                imported=imported,
                failures=batch.failures,
                combined_stats=batch.combined_stats,
            )
        finally:
            self._cleanup(paths)

    async def _store(
        self, result: ParseResult, owner_id: int, account_id: int | None
    ) -> StatementImportResult:
        """Persist one parsed statement through the repository."""
        statement = result.statement

        try:
            statement_id = await self.repository.create_statement(statement, owner_id, account_id)
        except Exception as e:
            logger.error("Failed to create statement record", extra={"error_type": type(e).__name__})
            raise ImportPersistenceError("IMPORT_001", {"step": "create_statement"}, result.stats) from e

        for transaction in statement.transactions:
            transaction.bank_statement_id = statement_id

        transactions, categorized = await self._categorize(statement.transactions)

        try:
            stored = await self.repository.create_transactions(transactions)
            await self.repository.mark_processed(statement_id)
        except Exception as e:
            logger.error(
                "Failed to store transactions",
                extra={"statement_id": statement_id, "error_type": type(e).__name__},
            )
            raise ImportPersistenceError(
                "IMPORT_001", {"step": "create_transactions", "statement_id": statement_id}, result.stats
            ) from e

        logger.info("Imported statement %s with %d transactions", statement_id, stored)
        return StatementImportResult(
            statement_id=statement_id,
            source_path=result.source_path or "",
            bank=statement.bank_type,
            start_date=statement.start_date,
            end_date=statement.end_date,
            transactions_count=stored,
            categorized=categorized,
            stats=result.stats,
        )

    async def _categorize(
        self, transactions: list[ParsedTransaction]
    ) -> tuple[list[ParsedTransaction], bool]:
        """Categorize transactions; failures leave them uncategorized (IMPORT_002)."""
        if self.categorizer is None or not transactions:
            return transactions, self.categorizer is not None

        try:
            return await self.categorizer.categorize(transactions), True
        except Exception as e:
            logger.warning(
                "Categorization failed, storing uncategorized transactions",
                extra={"error_code": "IMPORT_002", "error_type": type(e).__name__},
            )
            return transactions, False

    def _cleanup(self, paths: Sequence[str | Path]) -> None:
        """Delete uploaded files; errors are logged, never raised."""
        for path in paths:
            try:
                Path(path).unlink(missing_ok=True)
            except OSError as e:
                logger.warning("Could not delete upload %s: %s", Path(path).name, e)
