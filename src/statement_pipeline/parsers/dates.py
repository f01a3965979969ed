"""Date normalization for statement text.

Bank statements mix several date conventions. ``normalize_date`` tries an
ordered list of parse attempts and returns the first valid calendar date:

1. day-month-year with ``/`` or ``-`` separators (15/01/2025, 15-01-25)
2. month-day-year with the same separators (01/25/2025)
3. year-month-day (2025-01-15)
4. free-form text (April 1, 2023; 15 Jan 2025) via dateutil

Because (1) and (2) share a pattern, an ambiguous value such as
``03/04/2023`` is always read day-first.
"""

import re
from collections.abc import Callable, Iterator
from datetime import date

from dateutil import parser as dateutil_parser

from statement_pipeline.core.config import settings
from statement_pipeline.core.exceptions import DateFormatError

# Numeric date token used to scan free text (statement period inference,
# transaction row starts).
DATE_TOKEN = r"(?:\d{4}[/-]\d{1,2}[/-]\d{1,2}|\d{1,2}[/-]\d{1,2}[/-](?:\d{4}|\d{2}))"
DATE_TOKEN_PATTERN = re.compile(rf"(?<![\d/-]){DATE_TOKEN}(?![\d/-])")

_SEPARATED_PATTERN = re.compile(r"(?<!\d)(\d{1,2})[/-](\d{1,2})[/-](\d{4}|\d{2})(?!\d)")
_YEAR_FIRST_PATTERN = re.compile(r"(?<!\d)(\d{4})[/-](\d{1,2})[/-](\d{1,2})(?!\d)")


def expand_year(value: str, pivot: int | None = None) -> int:
    """Expand a two-digit year around the configured pivot (25 -> 2025, 95 -> 1995)."""
    year = int(value)
    if len(value) > 2:
        return year
    pivot = settings.TWO_DIGIT_YEAR_PIVOT if pivot is None else pivot
    return 2000 + year if year < pivot else 1900 + year


def _build_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_day_first(text: str) -> date | None:
    match = _SEPARATED_PATTERN.search(text)
    if not match:
        return None
    day, month, year = match.groups()
    return _build_date(expand_year(year), int(month), int(day))


def parse_month_first(text: str) -> date | None:
    match = _SEPARATED_PATTERN.search(text)
    if not match:
        return None
    month, day, year = match.groups()
    return _build_date(expand_year(year), int(month), int(day))


def parse_year_first(text: str) -> date | None:
    match = _YEAR_FIRST_PATTERN.search(text)
    if not match:
        return None
    year, month, day = match.groups()
    return _build_date(int(year), int(month), int(day))


def parse_free_form(text: str) -> date | None:
    """Last resort: let dateutil read month names and other layouts."""
    if not re.search(r"\d", text):
        return None
    try:
        return dateutil_parser.parse(text, dayfirst=True).date()
    except (ValueError, OverflowError):
        return None


# Priority order matters: day-first wins every ambiguous value.
DATE_PARSE_ATTEMPTS: tuple[Callable[[str], date | None], ...] = (
    parse_day_first,
    parse_month_first,
    parse_year_first,
    parse_free_form,
)


def normalize_date(text: str) -> date:
    """Parse a date substring into a calendar date.

    Args:
        text: Date string as it appears on the statement

    Returns:
        The first valid interpretation in ``DATE_PARSE_ATTEMPTS`` order

    Raises:
        DateFormatError: If no candidate format yields a valid date
    """
    value = (text or "").strip()
    if value:
        for attempt in DATE_PARSE_ATTEMPTS:
            parsed = attempt(value)
            if parsed is not None:
                return parsed

    raise DateFormatError(details={"value": value})


def find_dates(text: str) -> Iterator[date]:
    """Yield every numeric date in ``text`` that normalizes cleanly."""
    for match in DATE_TOKEN_PATTERN.finditer(text):
        try:
            yield normalize_date(match.group(0))
        except DateFormatError:
            continue
