"""Statement dialect detection from extracted text.

This module identifies which bank issued a statement using a layered
strategy. Each layer is tried for every dialect before moving on:

1. Bank-name phrases (institution name, statement header naming it); when
   several banks are named, the one named first wins
2. Transaction-table column headers appearing together on one line
3. Looser dialect vocabulary anywhere in the document

Strong identity signals win over structural ones because table headers
can coincidentally match unrelated text.
"""

import re
from typing import Any

from statement_pipeline.core.banks import SUPPORTED_BANKS, BankType

NAME_LAYER = "name"
HEADER_LAYER = "header"
VOCABULARY_LAYER = "vocabulary"


class BankDetector:
    """Classifies statement text into a known dialect or UNKNOWN.

    Example:
        >>> detector = BankDetector()
        >>> bank_type = detector.detect(full_text)
        >>> if bank_type is BankType.UNKNOWN:
        ...     print("Unsupported statement")
    """

    # Layer 1: bank name patterns (case-insensitive)
    BANK_PATTERNS = {
        BankType.HDFC: [
            r"HDFC\s+Bank",
            r"HDFC\s+Statement",
            r"hdfcbank\.com",
        ],
        BankType.ICICI: [
            r"ICICI\s+Bank",
            r"ICICI\s+Statement",
            r"icicibank\.com",
        ],
    }

    # Layer 2: column words that must all appear on one line, in any order
    HEADER_PATTERNS = {
        BankType.HDFC: [
            r"\bdate\b",
            r"\bnarration\b",
            r"\bwithdrawal\s+amt\b",
            r"\bdeposit\s+amt\b",
            r"\bbalance\b",
        ],
        BankType.ICICI: [
            r"\bdate\b",
            r"\bparticulars\b",
            r"\bdeposits\b",
            r"\bwithdrawals\b",
            r"\bbalance\b",
        ],
    }

    # Layer 3: alternate vocabulary; every pattern of a group must appear
    # somewhere in the document
    VOCABULARY_PATTERNS = {
        BankType.HDFC: [
            [r"date\s+description", r"withdrawal\s+amt"],
            [r"value\s+dt", r"chq\s*/\s*ref\.?\s*no", r"closing\s+balance"],
        ],
        BankType.ICICI: [
            [r"transaction\s+date", r"withdrawal\s+amount"],
            [r"value\s+date", r"transaction\s+remarks", r"withdrawal\s+amount"],
        ],
    }

    def __init__(self):
        """Initialize the bank detector with compiled regex patterns."""
        self._compiled_patterns: dict[BankType, list[re.Pattern]] = {
            bank: [re.compile(p, re.IGNORECASE) for p in patterns]
            for bank, patterns in self.BANK_PATTERNS.items()
        }
        self._compiled_headers: dict[BankType, list[re.Pattern]] = {
            bank: [re.compile(p, re.IGNORECASE) for p in patterns]
            for bank, patterns in self.HEADER_PATTERNS.items()
        }
        self._compiled_vocabulary: dict[BankType, list[list[re.Pattern]]] = {
            bank: [[re.compile(p, re.IGNORECASE) for p in group] for group in groups]
            for bank, groups in self.VOCABULARY_PATTERNS.items()
        }

    def detect(self, text: str | None) -> BankType:
        """Detect the statement dialect.

        Args:
            text: Full text content extracted from the PDF

        Returns:
            Matching BankType, or BankType.UNKNOWN
        """
        bank_type, _ = self.detect_with_layer(text)
        return bank_type

    def detect_with_layer(self, text: str | None) -> tuple[BankType, str | None]:
        """Detect the dialect and report which layer matched.

        Returns:
            (bank_type, layer) where layer is "name", "header", "vocabulary" or None
        """
        if not text:
            return BankType.UNKNOWN, None

        # Narration often names counterparty banks; the issuer is named first
        named = [
            (position, bank_type)
            for bank_type, patterns in self._compiled_patterns.items()
            if (position := self._first_match(text, patterns)) is not None
        ]
        if named:
            return min(named, key=lambda item: item[0])[1], NAME_LAYER

        lines = text.splitlines()
        for bank_type, patterns in self._compiled_headers.items():
            if any(self._matches_all(line, patterns) for line in lines):
                return bank_type, HEADER_LAYER

        for bank_type, groups in self._compiled_vocabulary.items():
            if any(self._matches_all(text, group) for group in groups):
                return bank_type, VOCABULARY_LAYER

        return BankType.UNKNOWN, None

    def detect_from_elements(self, elements: list[Any]) -> BankType:
        """Detect the dialect from Unstructured elements directly."""
        full_text = "\n".join(str(element) for element in elements)
        return self.detect(full_text)

    def _first_match(self, text: str, patterns: list[re.Pattern]) -> int | None:
        """Offset of the earliest match of any pattern, or None."""
        positions = [match.start() for pattern in patterns if (match := pattern.search(text))]
        return min(positions) if positions else None

    def _matches_all(self, text: str, patterns: list[re.Pattern]) -> bool:
        return bool(patterns) and all(pattern.search(text) for pattern in patterns)

    def get_supported_banks(self) -> list[BankType]:
        """Get the dialects this detector can report."""
        return list(SUPPORTED_BANKS)

    def add_pattern(self, bank_type: BankType, pattern: str) -> None:
        """Add a new bank-name pattern.

        This allows extending detection rules at runtime.

        Args:
            bank_type: Dialect the pattern identifies
            pattern: Regex pattern to match
        """
        self._compiled_patterns.setdefault(bank_type, []).append(
            re.compile(pattern, re.IGNORECASE)
        )
