"""Unit tests for StatementImportService."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest

from statement_pipeline.core.banks import BankType
from statement_pipeline.core.exceptions import ExtractionError, ImportPersistenceError
from statement_pipeline.parsers.factory import ParserFactory
from statement_pipeline.schemas.internal import (
    BatchParseResult,
    CombinedStats,
    ParsedStatement,
    ParsedTransaction,
    ParseFailure,
    ParseResult,
    ParseStats,
)
from statement_pipeline.services.statement import StatementImportService


def _make_result(source_path):
    statement = ParsedStatement(
        bank_type=BankType.HDFC,
        account_number="50100012345678",
        start_date=date(2023, 4, 1),
        end_date=date(2023, 4, 30),
        transactions=[
            ParsedTransaction(
                transaction_date=date(2023, 4, 1),
                description="SALARY CREDIT",
                amount=Decimal("50000.00"),
                transaction_type="credit",
                balance=Decimal("75000.00"),
                user_id=1,
                bank_account_id=7,
            ),
            ParsedTransaction(
                transaction_date=date(2023, 4, 3),
                description="UPI-SWIGGY",
                amount=Decimal("450.00"),
                transaction_type="debit",
                balance=Decimal("74550.00"),
                user_id=1,
                bank_account_id=7,
            ),
        ],
    )
    return ParseResult(
        statement=statement,
        stats=ParseStats.compute(2, 10, 0.01),
        source_path=str(source_path),
    )


@pytest.fixture
def upload(tmp_path):
    """An uploaded file on disk."""
    path = tmp_path / "upload.pdf"
    path.write_bytes(b"%PDF-1.4 placeholder")
    return path


@pytest.fixture
def mock_repository():
    """Create a mock statement repository."""
    repository = Mock()
    repository.create_statement = AsyncMock(return_value=101)
    repository.create_transactions = AsyncMock(side_effect=lambda transactions: len(transactions))
    repository.mark_processed = AsyncMock()
    return repository


@pytest.fixture
def mock_categorizer():
    """Create a categorizer that tags every transaction."""
    categorizer = Mock()

    async def categorize(transactions):
        for transaction in transactions:
            transaction.category = "income" if transaction.transaction_type == "credit" else "food"
        return transactions

    categorizer.categorize = AsyncMock(side_effect=categorize)
    return categorizer


@pytest.fixture
def mock_factory():
    factory = Mock(spec=ParserFactory)
    factory.parse_file.side_effect = lambda path, owner_id, account_id, password: _make_result(path)
    return factory


class TestImportStatement:
    """Tests for single-statement import."""

    @pytest.mark.asyncio
    async def test_import_success(self, upload, mock_repository, mock_categorizer, mock_factory):
        """Test successful import stores statement and transactions."""
        service = StatementImportService(mock_repository, mock_categorizer, mock_factory)

        result = await service.import_statement(upload, owner_id=1, account_id=7)

        assert result.statement_id == 101
        assert result.bank == BankType.HDFC
        assert result.transactions_count == 2
        assert result.categorized is True
        assert result.stats.transaction_count == 2
        mock_factory.parse_file.assert_called_once_with(upload, 1, 7, None)
        mock_repository.mark_processed.assert_awaited_once_with(101)

    @pytest.mark.asyncio
    async def test_statement_id_stamped(self, upload, mock_repository, mock_categorizer, mock_factory):
        """Every stored transaction carries the new statement id."""
        service = StatementImportService(mock_repository, mock_categorizer, mock_factory)

        await service.import_statement(upload, owner_id=1, account_id=7)

        stored = mock_repository.create_transactions.await_args.args[0]
        assert {t.bank_statement_id for t in stored} == {101}
        assert [t.category for t in stored] == ["income", "food"]

    @pytest.mark.asyncio
    async def test_categorization_failure_is_not_fatal(self, upload, mock_repository, mock_factory):
        """Categorization errors leave transactions uncategorized."""
        categorizer = Mock()
        categorizer.categorize = AsyncMock(side_effect=RuntimeError("model offline"))
        service = StatementImportService(mock_repository, categorizer, mock_factory)

        result = await service.import_statement(upload, owner_id=1)

        assert result.categorized is False
        assert result.transactions_count == 2
        stored = mock_repository.create_transactions.await_args.args[0]
        assert all(t.category is None for t in stored)

    @pytest.mark.asyncio
    async def test_without_categorizer(self, upload, mock_repository, mock_factory):
        """Without a categorizer transactions are stored as parsed."""
        service = StatementImportService(mock_repository, parser_factory=mock_factory)

        result = await service.import_statement(upload, owner_id=1)

        assert result.categorized is False
        mock_repository.create_transactions.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_upload_deleted_on_success(self, upload, mock_repository, mock_factory):
        """The uploaded file is removed after import."""
        service = StatementImportService(mock_repository, parser_factory=mock_factory)

        await service.import_statement(upload, owner_id=1)

        assert not upload.exists()

    @pytest.mark.asyncio
    async def test_upload_deleted_on_parse_failure(self, upload, mock_repository, mock_factory):
        """Parse errors propagate and the upload is still removed."""
        mock_factory.parse_file.side_effect = ExtractionError("PARSE_002")
        service = StatementImportService(mock_repository, parser_factory=mock_factory)

        with pytest.raises(ExtractionError):
            await service.import_statement(upload, owner_id=1)

        assert not upload.exists()
        mock_repository.create_statement.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_statement_failure(self, upload, mock_repository, mock_factory):
        """Repository failures become ImportPersistenceError."""
        mock_repository.create_statement.side_effect = RuntimeError("db down")
        service = StatementImportService(mock_repository, parser_factory=mock_factory)

        with pytest.raises(ImportPersistenceError) as exc_info:
            await service.import_statement(upload, owner_id=1)

        assert exc_info.value.error_code == "IMPORT_001"
        assert exc_info.value.details["step"] == "create_statement"
        assert not upload.exists()

    @pytest.mark.asyncio
    async def test_create_transactions_failure(self, upload, mock_repository, mock_factory):
        """Bulk insert failures are reported with the statement id."""
        mock_repository.create_transactions.side_effect = RuntimeError("constraint")
        service = StatementImportService(mock_repository, parser_factory=mock_factory)

        with pytest.raises(ImportPersistenceError) as exc_info:
            await service.import_statement(upload, owner_id=1)

        assert exc_info.value.details == {"step": "create_transactions", "statement_id": 101}
        mock_repository.mark_processed.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_upload_cleanup_does_not_raise(self, tmp_path, mock_repository, mock_factory):
        """Cleanup of an already-removed file is silent."""
        service = StatementImportService(mock_repository, parser_factory=mock_factory)

        result = await service.import_statement(tmp_path / "gone.pdf", owner_id=1)

        assert result.statement_id == 101


class TestImportStatements:
    """Tests for batch import."""

    @pytest.mark.asyncio
    async def test_batch_import(self, tmp_path, mock_repository, mock_categorizer):
        """Parsed files are stored; failures are reported; all uploads removed."""
        paths = [tmp_path / f"{i}.pdf" for i in range(3)]
        for path in paths:
            path.write_bytes(b"%PDF")

        factory = Mock(spec=ParserFactory)
        factory.parse_files.return_value = BatchParseResult(
            results=[_make_result(paths[0]), _make_result(paths[2])],
            combined_stats=CombinedStats(file_count=2, total_transactions=4),
            failures=[ParseFailure(source_path=str(paths[1]), error_code="PARSE_002", message="corrupted")],
        )
        mock_repository.create_statement.side_effect = [201, 202]
        service = StatementImportService(mock_repository, mock_categorizer, factory)

        summary = await service.import_statements(paths, owner_id=1, account_id=7)

        assert [r.statement_id for r in summary.imported] == [201, 202]
        assert summary.failures[0].error_code == "PARSE_002"
        assert summary.combined_stats.total_transactions == 4
        factory.parse_files.assert_called_once_with(paths, 1, 7)
        assert not any(path.exists() for path in paths)
