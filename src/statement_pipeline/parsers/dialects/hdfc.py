"""HDFC Bank statement dialect.

HDFC savings statements print a header block with "Account No :" and a
"Statement From : dd/mm/yyyy To : dd/mm/yyyy" line, followed by a table:

    Date      Narration            Withdrawal Amt.   Deposit Amt.   Balance
    01/04/23  SALARY CREDIT                          50000.00       75000.00

Rows use two-digit years and withdrawal comes before deposit. Newer
layouts add "Chq./Ref.No." and "Value Dt" columns between the narration
and the amounts.
"""

from statement_pipeline.core.banks import BankType
from statement_pipeline.parsers.base import StatementParser
from statement_pipeline.parsers.dates import DATE_TOKEN
from statement_pipeline.schemas.internal import ParsedStatement, TransactionType


class HDFCParser(StatementParser):
    """Parser for HDFC Bank statement text."""

    bank_type = BankType.HDFC

    ACCOUNT_NUMBER_PATTERNS = [
        r"\b(?:Account\s+(?:Number|No\.?)|A/C\s+No\.?)\s*:?\s*([0-9Xx*]{4,})",
    ]
    PERIOD_PATTERNS = [
        rf"\bFrom\s*:\s*({DATE_TOKEN})\s*To\s*:\s*({DATE_TOKEN})",
        rf"\bStatement\s+(?:Period|From)\s*:?\s*({DATE_TOKEN})\s*(?:to|-)\s*({DATE_TOKEN})",
    ]
    TABLE_HEADER_PATTERNS = [
        [r"\bdate\b", r"\bnarration\b", r"\bwithdrawal\s+amt\b", r"\bdeposit\s+amt\b"],
        [r"\bdate\b", r"\b(?:description|particulars)\b", r"\b(?:withdrawal|debit)\b"],
        [r"\bdate\b.*\bnarration\b.*\bdebit\b.*\bcredit\b.*\bbalance\b"],
    ]
    REFERENCE_POSITION = "trailing"
    DEFAULT_FIRST_COLUMN = TransactionType.DEBIT


def parse_hdfc_statement(text: str, owner_id: int, account_id: int | None = None) -> ParsedStatement:
    """Parse HDFC statement text (see HDFCParser.parse)."""
    return HDFCParser().parse(text, owner_id, account_id)
