"""Pydantic schemas for the statement import workflow.

This module defines the result models returned by StatementImportService.
"""

from datetime import date

from pydantic import BaseModel, Field

from statement_pipeline.core.banks import BankType
from statement_pipeline.schemas.internal import CombinedStats, ParseFailure, ParseStats


class StatementImportResult(BaseModel):
    """Result of importing one statement."""

    statement_id: int = Field(description="ID assigned by the statement repository")
    source_path: str = Field(description="Uploaded file the statement was read from")
    bank: BankType = Field(description="Detected statement dialect")
    start_date: date = Field(description="First day covered by the statement")
    end_date: date = Field(description="Last day covered by the statement")
    transactions_count: int = Field(description="Number of transactions stored")
    categorized: bool = Field(
        default=True, description="False when categorization failed and transactions were stored uncategorized"
    )
    stats: ParseStats = Field(description="Parse statistics for this file")


class StatementImportSummary(BaseModel):
    """Result of importing a batch of uploads."""

    imported: list[StatementImportResult] = Field(default_factory=list)
    failures: list[ParseFailure] = Field(
        default_factory=list, description="Files that could not be parsed"
    )
    combined_stats: CombinedStats = Field(default_factory=CombinedStats)
