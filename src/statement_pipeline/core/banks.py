"""Bank metadata helpers."""

from __future__ import annotations

from enum import Enum
from typing import Final


class BankType(str, Enum):
    """Statement dialects the pipeline knows how to read."""

    HDFC = "HDFC"
    ICICI = "ICICI"
    UNKNOWN = "UNKNOWN"


SUPPORTED_BANKS: Final[tuple[BankType, ...]] = (BankType.HDFC, BankType.ICICI)


def supported_bank_codes() -> list[str]:
    return [bank.value for bank in SUPPORTED_BANKS]
