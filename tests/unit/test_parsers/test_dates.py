"""Tests for date normalization."""

from datetime import date

import pytest

from statement_pipeline.core.exceptions import DateFormatError, StatementProcessingError
from statement_pipeline.parsers.dates import (
    DATE_PARSE_ATTEMPTS,
    expand_year,
    find_dates,
    normalize_date,
    parse_day_first,
    parse_free_form,
    parse_month_first,
    parse_year_first,
)


class TestNormalizeDate:
    """Test suite for normalize_date."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("15/01/2025", date(2025, 1, 15)),
            ("15-01-2025", date(2025, 1, 15)),
            ("01/04/23", date(2023, 4, 1)),
            ("2025-01-15", date(2025, 1, 15)),
            ("2025/01/15", date(2025, 1, 15)),
            ("April 1, 2023", date(2023, 4, 1)),
            ("15 Jan 2025", date(2025, 1, 15)),
        ],
    )
    def test_supported_formats(self, text, expected):
        """Each supported layout normalizes to the same calendar date."""
        assert normalize_date(text) == expected

    def test_ambiguous_date_is_day_first(self):
        """03/04/2023 is always the 3rd of April."""
        for _ in range(5):
            assert normalize_date("03/04/2023") == date(2023, 4, 3)

    def test_month_first_fallback(self):
        """A value that is impossible day-first falls back to month-first."""
        assert normalize_date("01/25/2025") == date(2025, 1, 25)

    def test_surrounding_whitespace(self):
        """Whitespace around the date is ignored."""
        assert normalize_date("  15/01/2025 ") == date(2025, 1, 15)

    @pytest.mark.parametrize("text", ["31/02/2023", "not a date", "", "45/45/2023"])
    def test_invalid_dates_raise(self, text):
        """Unrecognized values raise DateFormatError."""
        with pytest.raises(DateFormatError) as exc_info:
            normalize_date(text)

        assert exc_info.value.error_code == "DATE_001"
        assert exc_info.value.details["value"] == text.strip()

    def test_date_format_error_is_value_error(self):
        """DateFormatError can be caught as ValueError or as a pipeline error."""
        with pytest.raises(ValueError):
            normalize_date("garbage")
        with pytest.raises(StatementProcessingError):
            normalize_date("garbage")


class TestParseAttempts:
    """Test suite for the individual parse attempts."""

    def test_attempt_order(self):
        """Day-first is tried before month-first."""
        assert DATE_PARSE_ATTEMPTS[0] is parse_day_first
        assert DATE_PARSE_ATTEMPTS[1] is parse_month_first
        assert DATE_PARSE_ATTEMPTS[-1] is parse_free_form

    def test_attempts_return_none_on_failure(self):
        """Attempts never raise; they report failure as None."""
        assert parse_day_first("13/13/2023") is None
        assert parse_month_first("13/13/2023") is None
        assert parse_year_first("15/01/2025") is None
        assert parse_free_form("no digits here") is None

    def test_year_first_not_read_day_first(self):
        """2023-04-01 is not mistaken for a day-first value."""
        assert parse_day_first("2023-04-01") is None
        assert parse_year_first("2023-04-01") == date(2023, 4, 1)

    @pytest.mark.parametrize(
        "value,expected",
        [("23", 2023), ("49", 2049), ("50", 1950), ("99", 1999), ("2023", 2023)],
    )
    def test_expand_year(self, value, expected):
        """Two-digit years pivot at 50."""
        assert expand_year(value, pivot=50) == expected


class TestFindDates:
    """Test suite for find_dates."""

    def test_finds_numeric_dates(self):
        """All numeric dates in free text are yielded in order."""
        text = "Txn on 05/04/2023 and 2023-04-20, ref 12/99/2023"
        assert list(find_dates(text)) == [date(2023, 4, 5), date(2023, 4, 20)]

    def test_no_dates(self):
        """Text without dates yields nothing."""
        assert list(find_dates("Opening balance 1,000.00")) == []
