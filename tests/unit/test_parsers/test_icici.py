"""Tests for the ICICI statement dialect."""

from datetime import date
from decimal import Decimal

from statement_pipeline.core.banks import BankType
from statement_pipeline.parsers.dialects import ICICIParser, parse_icici_statement
from statement_pipeline.schemas.internal import TransactionType


class TestICICIParser:
    """Test suite for ICICIParser."""

    def test_header_fields(self, icici_text):
        """Account, holder and prose period are read from the header block."""
        statement = ICICIParser().parse(icici_text, owner_id=1, account_id=3)

        assert statement.bank_type == BankType.ICICI
        assert statement.account_number == "000401234567"
        assert statement.account_holder_name == "ANANYA SHARMA"
        assert statement.start_date == date(2023, 4, 1)
        assert statement.end_date == date(2023, 4, 30)

    def test_transactions(self, icici_text):
        """Deposits come before withdrawals; 0.00 marks the unused column."""
        statement = ICICIParser().parse(icici_text, owner_id=1, account_id=3)

        assert [
            (t.transaction_date, t.amount, t.transaction_type, t.balance)
            for t in statement.transactions
        ] == [
            (date(2023, 4, 5), Decimal("25000.00"), TransactionType.CREDIT, Decimal("70000.00")),
            (date(2023, 4, 8), Decimal("2000.00"), TransactionType.DEBIT, Decimal("68000.00")),
            (date(2023, 4, 12), Decimal("799.00"), TransactionType.DEBIT, Decimal("67201.00")),
        ]

    def test_mode_lines_become_references(self, icici_text):
        """MODE** lines set the reference of the row above them."""
        statement = parse_icici_statement(icici_text, owner_id=1)

        assert [t.reference for t in statement.transactions] == ["NEFT", "ATM", None]
        assert statement.transactions[0].description == "NEFT CREDIT"

    def test_serial_numbered_rows(self):
        """Rows prefixed with a serial number are still recognized."""
        text = (
            "S.No. Value Date Transaction Date Cheque Number Description Debit Credit Balance\n"
            "1 01/04/2023 01/04/2023 - UPI/312345/SWIGGY 450.00 - 9550.00\n"
            "2 03/04/2023 03/04/2023 - NEFT-SALARY - 50000.00 59550.00\n"
        )

        statement = parse_icici_statement(text, owner_id=1)

        assert [(t.transaction_date, t.transaction_type) for t in statement.transactions] == [
            (date(2023, 4, 1), TransactionType.DEBIT),
            (date(2023, 4, 3), TransactionType.CREDIT),
        ]
        assert statement.transactions[0].description == "UPI/312345/SWIGGY"
        assert statement.transactions[0].reference is None
        assert statement.transactions[1].description == "NEFT-SALARY"

    def test_leading_reference_token(self):
        """With a cheque/ref column the leading token is the reference."""
        text = (
            "Date Particulars Chq.No Deposits Withdrawals Balance\n"
            "05-04-2023 NEFT12345 SALARY APRIL 25,000.00 - 70,000.00\n"
        )

        statement = parse_icici_statement(text, owner_id=1)

        txn = statement.transactions[0]
        assert txn.reference == "NEFT12345"
        assert txn.description == "SALARY APRIL"
        assert txn.transaction_type == TransactionType.CREDIT

    def test_both_columns_zero_skipped(self):
        """A row with 0.00 in both columns carries no transaction."""
        text = (
            "DATE PARTICULARS DEPOSITS WITHDRAWALS BALANCE\n"
            "05-04-2023 BALANCE ENQUIRY 0.00 0.00 70,000.00\n"
            "06-04-2023 ATM WDL 0.00 500.00 69,500.00\n"
        )

        statement = parse_icici_statement(text, owner_id=1)

        assert [t.description for t in statement.transactions] == ["ATM WDL"]

    def test_narration_wrapped_below_row(self, icici_text):
        """Narration printed below the amounts stays with its row."""
        statement = parse_icici_statement(icici_text, owner_id=1)

        last = statement.transactions[-1]
        assert last.description == "BILLPAY AIRTEL POSTPAID"
        assert last.reference is None
