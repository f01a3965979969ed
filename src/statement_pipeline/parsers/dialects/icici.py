"""ICICI Bank statement dialect.

ICICI statements name the period in prose ("for the period April 1, 2023 -
April 30, 2023") and list deposits before withdrawals, with explicit 0.00
placeholders in the unused column:

    DATE        PARTICULARS         DEPOSITS   WITHDRAWALS   BALANCE
    05-04-2023  NEFT CREDIT         25000.00          0.00   70000.00
    MODE** NEFT

A "MODE**" line carries the transfer mode for the row it belongs to.
Some exports number their rows ("S.No.") and add value-date and cheque
columns ahead of the description.
"""

from statement_pipeline.core.banks import BankType
from statement_pipeline.parsers.base import StatementParser
from statement_pipeline.parsers.dates import DATE_TOKEN
from statement_pipeline.schemas.internal import ParsedStatement, TransactionType


class ICICIParser(StatementParser):
    """Parser for ICICI Bank statement text."""

    bank_type = BankType.ICICI

    ACCOUNT_NUMBER_PATTERNS = [
        r"\b(?:Savings\s+)?Account\s+(?:Number|No\.?)\s*:?\s*([0-9Xx*]{4,})",
    ]
    PERIOD_PATTERNS = [
        r"\bfor\s+the\s+period\s+([A-Za-z]+\s+\d{1,2},?\s+\d{4})\s*(?:-|to)\s*([A-Za-z]+\s+\d{1,2},?\s+\d{4})",
        rf"\b(?:Statement\s+)?(?:Period|From)\s*:?\s*({DATE_TOKEN})\s*(?:to|-)\s*({DATE_TOKEN})",
    ]
    TABLE_HEADER_PATTERNS = [
        [r"\bdate\b", r"\bparticulars\b", r"\bdeposits\b", r"\bwithdrawals\b", r"\bbalance\b"],
        [
            r"\b(?:transaction\s+)?date\b",
            r"\b(?:description|narration|particulars)\b",
            r"\b(?:debit|withdrawal)",
        ],
        [r"s\.?\s*no\.?.*\bvalue\s+date\b.*\bdescription\b.*\bcheque\b.*\bdebit\b.*\bcredit\b.*\bbalance\b"],
    ]
    # Optional leading serial number ("12 05-04-2023 ...")
    ROW_START_PATTERN = rf"^(?:\d{{1,4}}\s+)?({DATE_TOKEN})(?=\s|$)"
    REFERENCE_LINE_PATTERN = r"^MODE\*\*\s*(.*)$"
    REFERENCE_POSITION = "leading"
    DEFAULT_FIRST_COLUMN = TransactionType.CREDIT


def parse_icici_statement(text: str, owner_id: int, account_id: int | None = None) -> ParsedStatement:
    """Parse ICICI statement text (see ICICIParser.parse)."""
    return ICICIParser().parse(text, owner_id, account_id)
