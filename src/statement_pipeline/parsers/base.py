"""Shared line-scanning logic for bank statement dialects.

This module provides the StatementParser base class. A dialect subclass
only declares its vocabulary (label phrases, table headers, row shapes);
the scanning itself lives here:

1. Read account number, holder name and statement period from a bounded
   header window, inferring the period from bare dates when unlabeled.
2. Locate the transaction table by its column-header line.
3. Walk the remaining lines with a small state machine that joins wrapped
   descriptions and emits a transaction once an amount line is found.
   Lines printed below a finished row still belong to it.

Rows that cannot be recognized are skipped, never raised: statement
layouts are not guaranteed to be consistent from one month to the next.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum

from statement_pipeline.core.banks import BankType
from statement_pipeline.core.config import settings
from statement_pipeline.core.exceptions import DateFormatError, UnsupportedFormatError
from statement_pipeline.parsers.dates import DATE_TOKEN, DATE_TOKEN_PATTERN, find_dates, normalize_date
from statement_pipeline.schemas.internal import ParsedStatement, ParsedTransaction, TransactionType

logger = logging.getLogger(__name__)

# Grouping may be western (1,234,567.00) or Indian (12,34,567.00). Some
# exports drop the paise, so the fraction is optional.
AMOUNT = r"(?:\d{1,3}(?:,\d{2,3})+|\d+)(?:\.\d{1,2})?"
BALANCE_SUFFIX = r"(?:\s*(?:Cr|Dr)\.?)?"

# Amount-line shapes, tried in this order. "first"/"second" refer to the
# two transaction columns in header order; "-" is an empty-column placeholder.
THREE_AMOUNTS_PATTERN = re.compile(
    rf"(?<!\S)(?P<first>{AMOUNT})\s+(?P<second>{AMOUNT})\s+(?P<balance>{AMOUNT}){BALANCE_SUFFIX}\s*$",
    re.IGNORECASE,
)
FIRST_COLUMN_DASH_PATTERN = re.compile(
    rf"(?<!\S)(?P<first>{AMOUNT})\s+-\s+(?P<balance>{AMOUNT}){BALANCE_SUFFIX}\s*$",
    re.IGNORECASE,
)
SECOND_COLUMN_DASH_PATTERN = re.compile(
    rf"(?<!\S)-\s+(?P<second>{AMOUNT})\s+(?P<balance>{AMOUNT}){BALANCE_SUFFIX}\s*$",
    re.IGNORECASE,
)
TWO_AMOUNTS_PATTERN = re.compile(
    rf"(?<!\S)(?P<amount>{AMOUNT})\s+(?P<balance>{AMOUNT}){BALANCE_SUFFIX}\s*$",
    re.IGNORECASE,
)

WITHDRAWAL_COLUMN_PATTERN = re.compile(
    r"\b(?:withdrawals?|debits?)\b(?:\s+(?:amt\b\.?|amount\b))?", re.IGNORECASE
)
DEPOSIT_COLUMN_PATTERN = re.compile(
    r"\b(?:deposits?|credits?)\b(?:\s+(?:amt\b\.?|amount\b))?", re.IGNORECASE
)
BALANCE_COLUMN_PATTERN = re.compile(r"\b(?:closing\s+)?balance\b", re.IGNORECASE)
REFERENCE_COLUMN_PATTERN = re.compile(r"\b(?:chq|cheque|ref)\b", re.IGNORECASE)
VALUE_DATE_COLUMN_PATTERN = re.compile(r"\bvalue\s+(?:dt|date)\b", re.IGNORECASE)

BOILERPLATE_PATTERN = re.compile(
    r"\b(?:opening|closing)\s+balance\b|^page\s+\d+(?:\s+of\s+\d+)?$|^(?:statement\s+)?summary\b",
    re.IGNORECASE,
)
OPENING_BALANCE_PATTERN = re.compile(
    rf"\bopening\s+balance\b.*?(?<!\S)({AMOUNT}){BALANCE_SUFFIX}\s*$", re.IGNORECASE
)
REFERENCE_TOKEN_PATTERN = re.compile(r"[A-Za-z]*\d[\w/-]{3,}")


def parse_amount(text: str) -> Decimal:
    """Parse a printed amount into a Decimal.

    Grouping separators and whitespace are removed; no rounding is applied.

    Raises:
        ValueError: If the text is not a number
    """
    cleaned = re.sub(r"[,\s]", "", text or "")
    try:
        return Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount: {text}") from e


def _is_whole(match: re.Match, *groups: str) -> bool:
    return not any("." in match.group(group) for group in groups)


class RowState(Enum):
    """Where the row scanner is while walking the transaction table."""

    SCANNING_FOR_DATE = "scanning_for_date"
    ACCUMULATING_DESCRIPTION = "accumulating_description"
    AMOUNT_FOUND = "amount_found"


@dataclass(frozen=True)
class TableLayout:
    """Column positions read from the transaction-table header line."""

    header_index: int
    withdrawal_span: tuple[int, int] | None = None
    deposit_span: tuple[int, int] | None = None
    balance_span: tuple[int, int] | None = None
    has_reference_column: bool = False
    has_value_date_column: bool = False

    @classmethod
    def from_header(cls, header_index: int, header: str) -> "TableLayout":
        def span(pattern: re.Pattern) -> tuple[int, int] | None:
            match = pattern.search(header)
            return match.span() if match else None

        return cls(
            header_index=header_index,
            withdrawal_span=span(WITHDRAWAL_COLUMN_PATTERN),
            deposit_span=span(DEPOSIT_COLUMN_PATTERN),
            balance_span=span(BALANCE_COLUMN_PATTERN),
            has_reference_column=bool(REFERENCE_COLUMN_PATTERN.search(header)),
            has_value_date_column=bool(VALUE_DATE_COLUMN_PATTERN.search(header)),
        )

    def first_column(self, default: TransactionType) -> TransactionType:
        """Type of the left-hand transaction column."""
        if self.withdrawal_span and self.deposit_span:
            if self.withdrawal_span[0] < self.deposit_span[0]:
                return TransactionType.DEBIT
            return TransactionType.CREDIT
        return default


@dataclass(frozen=True)
class AmountLine:
    """Amounts recognized at the end of a line."""

    start: int
    amount: Decimal
    balance: Decimal
    amount_end: int
    balance_end: int
    transaction_type: TransactionType | None = None
    whole_numbers: bool = False


@dataclass
class PendingRow:
    """A transaction whose date has been seen but not yet its amounts."""

    transaction_date: date
    fragments: list[str] = field(default_factory=list)
    reference: str | None = None
    continuation_lines: int = 0


class StatementParser:
    """Base parser for line-oriented bank statement text.

    Subclasses declare dialect vocabulary as class attributes:
        - ACCOUNT_NUMBER_PATTERNS: label regexes capturing the account number
        - HOLDER_PATTERNS: regexes capturing the holder name on one line
        - PERIOD_PATTERNS: regexes capturing (start, end) statement dates
        - TABLE_HEADER_PATTERNS: groups of regexes that must all match the
          table header line, tried group by group
        - REFERENCE_LINE_PATTERN: continuation line carrying a reference code
        - DEFAULT_FIRST_COLUMN: column order when the header does not say

    Example:
        >>> parser = HDFCParser()
        >>> statement = parser.parse(text, owner_id=1, account_id=7)
    """

    bank_type: BankType = BankType.UNKNOWN

    ACCOUNT_NUMBER_PATTERNS: list[str] = []
    HOLDER_PATTERNS: list[str] = [
        r"^((?:MR|MRS|MS|M/S)\.?\s+[A-Z][A-Z .']+)$",
        r"^(?:customer\s+|account\s+holder\s+)?name\s*:\s*(.+)$",
    ]
    HOLDER_LABEL_PATTERN = r"^(?:customer\s+|account\s+holder\s+)?name\s*:?$"
    PERIOD_PATTERNS: list[str] = []
    TABLE_HEADER_PATTERNS: list[list[str]] = []
    ROW_START_PATTERN = rf"^({DATE_TOKEN})(?=\s|$)"
    REFERENCE_LINE_PATTERN: str | None = None
    REFERENCE_POSITION = "trailing"
    DEFAULT_FIRST_COLUMN = TransactionType.DEBIT

    def __init__(
        self,
        header_scan_lines: int | None = None,
        period_scan_chars: int | None = None,
        lookahead_lines: int | None = None,
    ):
        """Initialize the parser.

        Args:
            header_scan_lines: Lines scanned for account details (default from settings)
            period_scan_chars: Characters scanned when inferring the period
            lookahead_lines: Continuation lines allowed before a row is abandoned
        """
        self.header_scan_lines = header_scan_lines or settings.HEADER_SCAN_LINES
        self.period_scan_chars = period_scan_chars or settings.PERIOD_SCAN_CHARS
        self.lookahead_lines = lookahead_lines or settings.ROW_LOOKAHEAD_LINES

    def parse(self, text: str, owner_id: int, account_id: int | None = None) -> ParsedStatement:
        """Parse statement text into a ParsedStatement.

        Args:
            text: Extracted statement text
            owner_id: Caller-supplied user id copied onto every transaction
            account_id: Caller-supplied bank account id (optional)

        Returns:
            ParsedStatement; transactions may be empty

        Raises:
            UnsupportedFormatError: If the transaction table cannot be located
        """
        lines = [line.strip() for line in (text or "").splitlines()]
        header_window = lines[: self.header_scan_lines]

        account_number = self._find_account_number(header_window)
        account_holder_name = self._find_account_holder(header_window)
        start_date, end_date = self._find_statement_period(header_window, text or "")

        layout = self._locate_table(lines)
        if layout is None:
            logger.debug("%s transaction table header not found", self.bank_type.value)
            raise UnsupportedFormatError(
                details={"bank_type": self.bank_type.value, "reason": "transaction_table_not_found"}
            )

        transactions = self._scan_transactions(lines, layout, owner_id, account_id)

        return ParsedStatement(
            bank_type=self.bank_type,
            account_number=account_number,
            account_holder_name=account_holder_name,
            start_date=start_date,
            end_date=end_date,
            transactions=transactions,
        )

    # Header fields

    def _find_account_number(self, lines: list[str]) -> str:
        for line in lines:
            for pattern in self.ACCOUNT_NUMBER_PATTERNS:
                match = re.search(pattern, line, re.IGNORECASE)
                if match:
                    return match.group(1).strip()
        return ""

    def _find_account_holder(self, lines: list[str]) -> str:
        for index, line in enumerate(lines):
            for pattern in self.HOLDER_PATTERNS:
                match = re.search(pattern, line, re.IGNORECASE)
                if match:
                    return " ".join(match.group(1).split())
            # Label on its own line, value on the next one
            if re.search(self.HOLDER_LABEL_PATTERN, line, re.IGNORECASE) and index + 1 < len(lines):
                return " ".join(lines[index + 1].split())
        return ""

    def _find_statement_period(self, lines: list[str], text: str) -> tuple[date, date]:
        """Statement period from labels, else inferred from bare dates, else today."""
        for line in lines:
            for pattern in self.PERIOD_PATTERNS:
                match = re.search(pattern, line, re.IGNORECASE)
                if not match:
                    continue
                try:
                    first = normalize_date(match.group(1))
                    second = normalize_date(match.group(2))
                except DateFormatError:
                    continue
                return min(first, second), max(first, second)

        inferred = sorted(find_dates(text[: self.period_scan_chars]))
        if inferred:
            return inferred[0], inferred[-1]

        today = date.today()
        return today, today

    # Table location

    def _locate_table(self, lines: list[str]) -> TableLayout | None:
        """Find the first line matching a header group, trying groups in order."""
        for group in self.TABLE_HEADER_PATTERNS:
            for index, line in enumerate(lines):
                if self._matches_header(line, group):
                    return TableLayout.from_header(index, line)
        return None

    def _matches_header(self, line: str, group: list[str]) -> bool:
        return bool(line) and all(re.search(p, line, re.IGNORECASE) for p in group)

    def _is_table_header(self, line: str) -> bool:
        return any(self._matches_header(line, group) for group in self.TABLE_HEADER_PATTERNS)

    # Row scanning

    def _scan_transactions(
        self,
        lines: list[str],
        layout: TableLayout,
        owner_id: int,
        account_id: int | None,
    ) -> list[ParsedTransaction]:
        transactions: list[ParsedTransaction] = []
        state = RowState.SCANNING_FOR_DATE
        pending: PendingRow | None = None
        previous_balance: Decimal | None = None
        skipped = 0
        trailing_lines = 0

        for line in lines[layout.header_index + 1 :]:
            if not line:
                continue

            if BOILERPLATE_PATTERN.search(line) or self._is_table_header(line):
                opening = OPENING_BALANCE_PATTERN.search(line)
                if opening and not transactions:
                    previous_balance = parse_amount(opening.group(1))
                continue

            row_start = re.match(self.ROW_START_PATTERN, line)
            if row_start:
                if pending is not None:
                    skipped += 1
                try:
                    transaction_date = normalize_date(row_start.group(1))
                except DateFormatError:
                    pending, state = None, RowState.SCANNING_FOR_DATE
                    skipped += 1
                    continue
                pending = PendingRow(transaction_date=transaction_date)
                state = RowState.ACCUMULATING_DESCRIPTION
                line = line[row_start.end() :].strip()
                if not line:
                    continue
            elif state is RowState.SCANNING_FOR_DATE:
                continue
            elif state is RowState.AMOUNT_FOUND:
                self._continue_previous(transactions[-1], line, layout)
                trailing_lines += 1
                if trailing_lines >= self.lookahead_lines:
                    state = RowState.SCANNING_FOR_DATE
                continue
            else:
                pending.continuation_lines += 1
                if pending.continuation_lines > self.lookahead_lines:
                    pending, state = None, RowState.SCANNING_FOR_DATE
                    skipped += 1
                    continue

            reference = self._match_reference_line(line)
            if reference is not None:
                pending.reference = pending.reference or reference
                continue

            amount_line = self._match_amount_line(line, layout)
            if amount_line is None:
                pending.fragments.append(line)
                continue

            transaction_type = self._resolve_type(amount_line, previous_balance, layout)
            if transaction_type is None and amount_line.whole_numbers:
                # Numbers inside the narration, not amount columns
                pending.fragments.append(line)
                continue

            prefix = line[: amount_line.start].strip()
            if prefix:
                pending.fragments.append(prefix)

            if transaction_type is None:
                pending, state = None, RowState.SCANNING_FOR_DATE
                skipped += 1
                continue

            transactions.append(
                self._build_transaction(
                    pending, amount_line, transaction_type, layout, owner_id, account_id
                )
            )
            previous_balance = amount_line.balance
            pending, state = None, RowState.AMOUNT_FOUND
            trailing_lines = 0

        if pending is not None:
            skipped += 1

        logger.debug(
            "%s rows: %d recognized, %d skipped",
            self.bank_type.value,
            len(transactions),
            skipped,
        )
        return transactions

    def _continue_previous(
        self, transaction: ParsedTransaction, line: str, layout: TableLayout
    ) -> None:
        """Attach a line printed below a completed row to that row.

        Reference lines fill the reference; narration wrapped below the
        amounts is appended to the description. Lines carrying amount
        columns (summary totals and the like) are left alone.
        """
        if self.REFERENCE_LINE_PATTERN and re.match(self.REFERENCE_LINE_PATTERN, line, re.IGNORECASE):
            reference = self._match_reference_line(line)
            if reference and transaction.reference is None:
                transaction.reference = reference
            return

        amount_line = self._match_amount_line(line, layout)
        if amount_line is not None and not amount_line.whole_numbers:
            return
        transaction.description = " ".join(f"{transaction.description} {line}".split())

    def _match_reference_line(self, line: str) -> str | None:
        if not self.REFERENCE_LINE_PATTERN:
            return None
        match = re.match(self.REFERENCE_LINE_PATTERN, line, re.IGNORECASE)
        if not match:
            return None
        return match.group(1).strip() or None

    def _match_amount_line(self, line: str, layout: TableLayout) -> AmountLine | None:
        """Recognize trailing amount columns and, where the shape allows, the type."""
        first_type = layout.first_column(self.DEFAULT_FIRST_COLUMN)
        second_type = (
            TransactionType.CREDIT if first_type is TransactionType.DEBIT else TransactionType.DEBIT
        )

        match = THREE_AMOUNTS_PATTERN.search(line)
        if match:
            first = parse_amount(match.group("first"))
            second = parse_amount(match.group("second"))
            if first and not second:
                group, amount, transaction_type = "first", first, first_type
            elif second and not first:
                group, amount, transaction_type = "second", second, second_type
            else:
                # Both or neither column set; read the line as "amount balance" below
                group = None
            if group is not None:
                return AmountLine(
                    start=match.start(),
                    amount=amount,
                    balance=parse_amount(match.group("balance")),
                    amount_end=match.end(group),
                    balance_end=match.end("balance"),
                    transaction_type=transaction_type,
                    whole_numbers=_is_whole(match, "first", "second", "balance"),
                )

        for pattern, group, transaction_type in (
            (FIRST_COLUMN_DASH_PATTERN, "first", first_type),
            (SECOND_COLUMN_DASH_PATTERN, "second", second_type),
            (TWO_AMOUNTS_PATTERN, "amount", None),
        ):
            match = pattern.search(line)
            if match:
                return AmountLine(
                    start=match.start(),
                    amount=parse_amount(match.group(group)),
                    balance=parse_amount(match.group("balance")),
                    amount_end=match.end(group),
                    balance_end=match.end("balance"),
                    transaction_type=transaction_type,
                    whole_numbers=_is_whole(match, group, "balance"),
                )

        return None

    def _resolve_type(
        self,
        amount_line: AmountLine,
        previous_balance: Decimal | None,
        layout: TableLayout,
    ) -> TransactionType | None:
        """Decide debit vs credit for a recognized amount line.

        Explicit shapes (three columns, dash placeholders) decide directly.
        A bare "amount balance" pair is settled by balance continuity when the
        previous balance is known, otherwise by column alignment. Numbers
        without a decimal point also occur in narration, so they only count
        as amounts when the running balance confirms them.
        """
        if not amount_line.amount:
            return None

        continuity = self._type_from_continuity(amount_line, previous_balance)
        if amount_line.whole_numbers:
            if amount_line.transaction_type in (None, continuity):
                return continuity
            return None

        if amount_line.transaction_type is not None:
            return amount_line.transaction_type
        if continuity is not None:
            return continuity
        return self._type_from_alignment(amount_line, layout)

    def _type_from_continuity(
        self, amount_line: AmountLine, previous_balance: Decimal | None
    ) -> TransactionType | None:
        if previous_balance is None:
            return None
        if previous_balance - amount_line.amount == amount_line.balance:
            return TransactionType.DEBIT
        if previous_balance + amount_line.amount == amount_line.balance:
            return TransactionType.CREDIT
        return None

    def _type_from_alignment(
        self, amount_line: AmountLine, layout: TableLayout
    ) -> TransactionType | None:
        """Pick the column nearest the amount once the row's balance lines up with the header's."""
        if not (layout.withdrawal_span and layout.deposit_span and layout.balance_span):
            return None

        offset = amount_line.balance_end - layout.balance_span[1]
        position = amount_line.amount_end - offset
        to_withdrawal = abs(position - layout.withdrawal_span[1])
        to_deposit = abs(position - layout.deposit_span[1])
        if to_withdrawal == to_deposit:
            return None
        return TransactionType.DEBIT if to_withdrawal < to_deposit else TransactionType.CREDIT

    def _build_transaction(
        self,
        pending: PendingRow,
        amount_line: AmountLine,
        transaction_type: TransactionType,
        layout: TableLayout,
        owner_id: int,
        account_id: int | None,
    ) -> ParsedTransaction:
        description, reference = self._split_reference(" ".join(pending.fragments), layout)
        return ParsedTransaction(
            transaction_date=pending.transaction_date,
            description=description,
            amount=abs(amount_line.amount),
            transaction_type=transaction_type,
            balance=amount_line.balance,
            reference=pending.reference or reference,
            user_id=owner_id,
            bank_account_id=account_id,
        )

    def _split_reference(self, description: str, layout: TableLayout) -> tuple[str, str | None]:
        """Separate value-date and cheque/reference columns from the narration."""
        if layout.has_value_date_column:
            description = DATE_TOKEN_PATTERN.sub(" ", description)

        tokens = description.split()
        if not layout.has_reference_column or len(tokens) < 2:
            return " ".join(tokens), None

        index = -1 if self.REFERENCE_POSITION == "trailing" else 0
        if tokens[index] == "-":
            # Empty reference column
            tokens.pop(index)
            return " ".join(tokens), None
        if REFERENCE_TOKEN_PATTERN.fullmatch(tokens[index]):
            reference = tokens.pop(index)
            return " ".join(tokens), reference
        return " ".join(tokens), None
