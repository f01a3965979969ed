"""Internal data schemas for parsed statement data.

These models represent the structured output of the parsing pipeline
before categorization and persistence. They are created fresh for each
parse and handed to downstream collaborators as-is.
"""

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from statement_pipeline.core.banks import BankType


class TransactionType(str, Enum):
    """Direction of a transaction; amounts themselves are never negative."""

    DEBIT = "debit"
    CREDIT = "credit"


class ParsedTransaction(BaseModel):
    """Represents a single transaction extracted from a statement.

    Amounts are non-negative decimal magnitudes exactly as printed on the
    statement; the direction lives solely in ``transaction_type``.
    """

    transaction_date: date = Field(..., description="Transaction date")
    description: str = Field(default="", description="Narration, wrapped lines joined")
    amount: Decimal = Field(..., ge=0, description="Absolute transaction amount")
    transaction_type: TransactionType = Field(..., description="'debit' or 'credit'")
    balance: Decimal | None = Field(None, description="Running balance after the transaction")
    reference: str | None = Field(None, description="Reference / mode code (if the dialect has one)")

    # Caller-supplied linkage, never derived from text
    user_id: int = Field(..., description="Owner of the statement")
    bank_account_id: int | None = Field(None, description="Bank account the statement belongs to")
    bank_statement_id: int | None = Field(None, description="Assigned after the statement is persisted")
    category: str | None = Field(None, description="Filled in by the categorization service")

    @field_validator("description")
    @classmethod
    def normalize_description(cls, v: str) -> str:
        """Collapse internal whitespace left over from wrapped lines."""
        return " ".join(v.split())


class ParsedStatement(BaseModel):
    """Represents a complete parsed bank statement.

    Contains potentially sensitive information (account number, holder name).
    """

    bank_type: BankType = Field(..., description="Detected statement dialect")
    account_number: str = Field(default="", description="Account number (may be masked)")
    account_holder_name: str = Field(default="", description="Account holder name")
    start_date: date = Field(..., description="First day covered by the statement")
    end_date: date = Field(..., description="Last day covered by the statement")
    transactions: list[ParsedTransaction] = Field(
        default_factory=list,
        description="Transactions in order of appearance",
    )

    @model_validator(mode="after")
    def validate_period(self) -> "ParsedStatement":
        """Ensure the statement period is not inverted."""
        if self.start_date > self.end_date:
            raise ValueError("Statement start date must not be after end date")
        return self


class ParseStats(BaseModel):
    """Diagnostics for a single parse."""

    transaction_count: int = Field(default=0, ge=0)
    total_lines: int = Field(default=0, ge=0, description="Lines in the extracted text")
    success_rate: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Recognized transactions / total lines (coarse noise metric)",
    )
    processing_time: float = Field(default=0.0, ge=0.0, description="Seconds")

    @classmethod
    def compute(
        cls, transaction_count: int, total_lines: int, processing_time: float
    ) -> "ParseStats":
        """Build stats, guarding the ratio against empty text."""
        rate = transaction_count / total_lines if total_lines else 0.0
        return cls(
            transaction_count=transaction_count,
            total_lines=total_lines,
            success_rate=min(rate, 1.0),
            processing_time=processing_time,
        )


class ParseResult(BaseModel):
    """A parsed statement together with its statistics."""

    statement: ParsedStatement
    stats: ParseStats
    source_path: str | None = Field(None, description="File the statement was read from")


class ParseFailure(BaseModel):
    """A file that could not be parsed within a batch."""

    source_path: str
    error_code: str
    message: str
    stats: ParseStats | None = None


class CombinedStats(BaseModel):
    """Aggregate statistics for a batch of statements."""

    file_count: int = Field(default=0, ge=0, description="Successfully parsed files")
    total_transactions: int = Field(default=0, ge=0)
    average_success_rate: float = Field(
        default=0.0, description="Unweighted mean of per-file success rates"
    )
    total_processing_time: float = Field(default=0.0, description="Wall-clock seconds for the batch")


class BatchParseResult(BaseModel):
    """Result of parsing several statement files."""

    results: list[ParseResult] = Field(default_factory=list)
    combined_stats: CombinedStats = Field(default_factory=CombinedStats)
    failures: list[ParseFailure] = Field(default_factory=list)
