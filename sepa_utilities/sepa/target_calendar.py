"""
TARGET2 Business Day Calendar

A TARGET day is a day on which TARGET2 settles: every day except Saturdays,
Sundays, New Year's Day, Good Friday, Easter Monday, Labour Day (May 1) and
the two Christmas holidays. Execution and collection dates in SEPA files
are computed as a number of TARGET days ahead of today.

Reference: https://www.ecb.europa.eu/paym/target/target2/profuse/calendar/html/index.en.html
"""

import logging
from datetime import date, datetime, timedelta
from functools import lru_cache
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

ISO_DATE_FORMAT = "%Y-%m-%d"
DEFAULT_INPUT_FORMAT = "%d.%m.%Y"

FIXED_HOLIDAYS = frozenset({
    (1, 1),     # New Year's Day
    (5, 1),     # Labour Day
    (12, 25),   # Christmas Day
    (12, 26),   # Boxing Day
})

# Tried in order by sanitize_date_format after any preferred formats
SANITIZE_DATE_FORMATS = (
    "%d.%m.%Y", "%d.%m.%y", "%m.%d.%Y", "%m.%d.%y",
    "%Y/%m/%d", "%y/%m/%d", "%Y.%m.%d", "%y.%m.%d",
)

ONE_DAY = timedelta(days=1)


@lru_cache(maxsize=256)
def easter_date(year: int) -> date:
    """
    Easter Sunday of a Gregorian year, by Gauss' algorithm.

    Computed arithmetically, so it also holds outside 1583-4099.
    """
    g = year % 19
    c = year // 100
    h = (c - c // 4 - (8 * c + 13) // 25 + 19 * g + 15) % 30
    i = h - (h // 28) * (1 - (h // 28) * (29 // (h + 1)) * ((21 - g) // 11))
    j = (year + year // 4 + i + 2 - c + c // 4) % 7
    l = i - j
    month = 3 + (l + 40) // 44
    day = l + 28 - 31 * (month // 4)
    return date(year, month, day)


def is_target_day(day: date) -> bool:
    """Check if TARGET2 settles on the given date."""
    if day.isoweekday() in (6, 7):
        return False

    if (day.month, day.day) in FIXED_HOLIDAYS:
        return False

    easter = easter_date(day.year)
    if day in (easter - timedelta(days=2), easter + ONE_DAY):  # Good Friday, Easter Monday
        return False

    return True


def next_target_day(start: date, workday_offset: int = 0) -> date:
    """
    Move to the first TARGET day on or after start, then workday_offset
    TARGET days further. Non-settlement days do not count toward the offset.
    A negative offset counts as 0.
    """
    workday_offset = max(workday_offset, 0)
    current = start
    current_is_target = is_target_day(current)

    while not current_is_target or workday_offset > 0:
        current += ONE_DAY
        if current_is_target:
            workday_offset -= 1
        current_is_target = is_target_day(current)

    return current


def earliest_target_day(target: date, min_offset: int, today: Optional[date] = None) -> date:
    """
    Return target (moved onto a TARGET day) if it lies at least min_offset
    TARGET days after today, else the earliest date that respects the offset.
    """
    earliest = next_target_day(today or date.today(), min_offset)

    while not is_target_day(target):
        target += ONE_DAY

    return max(target, earliest)


# =============================================================================
# String Wrappers
# =============================================================================

def parse_date(value: str, input_format: str = DEFAULT_INPUT_FORMAT) -> Optional[date]:
    """Parse a date string strictly; None if it does not match the format."""
    try:
        return datetime.strptime(value, input_format).date()
    except (TypeError, ValueError):
        return None


def get_date(value: Optional[str] = None, input_format: str = DEFAULT_INPUT_FORMAT) -> Optional[str]:
    """
    Reformat a date into YYYY-MM-DD.

    An empty value means today. Returns None if value does not match input_format.
    """
    if not value:
        return date.today().strftime(ISO_DATE_FORMAT)

    parsed = parse_date(value, input_format)
    return parsed.strftime(ISO_DATE_FORMAT) if parsed else None


def get_date_with_offset(
    workday_offset: int,
    today: Optional[str] = None,
    input_format: str = DEFAULT_INPUT_FORMAT,
) -> Optional[str]:
    """
    Next TARGET day (today included) after skipping workday_offset TARGET days.

    Args:
        workday_offset: Number of TARGET days to skip; negative means 0.
        today: Start date in input_format; the current date if omitted.
        input_format: strptime format of today.

    Returns:
        YYYY-MM-DD, or None if today cannot be parsed.
    """
    start = date.today() if not today else parse_date(today, input_format)
    if start is None:
        logger.debug(f"Cannot parse start date {today!r} with {input_format!r}")
        return None

    return next_target_day(start, workday_offset).strftime(ISO_DATE_FORMAT)


def get_date_with_min_offset_from_today(
    target: str,
    workday_min_offset: int,
    input_format: str = DEFAULT_INPUT_FORMAT,
    today: Optional[str] = None,
) -> Optional[str]:
    """
    Return target if it has at least workday_min_offset TARGET days from
    today, else the earliest date that does. YYYY-MM-DD or None on bad input.
    """
    target_date = parse_date(target, input_format)
    start = date.today() if not today else parse_date(today, input_format)

    if target_date is None or start is None:
        return None

    return earliest_target_day(target_date, workday_min_offset, start).strftime(ISO_DATE_FORMAT)


def sanitize_date_format(value: str, preferred_formats: Sequence[str] = ()) -> Optional[str]:
    """
    Try to convert a date into YYYY-MM-DD.

    The first number is read as day of month before month, so 04.01.2016 is
    the 4th of January. Not part of sanitize(); call it knowingly.
    """
    if parse_date(value, ISO_DATE_FORMAT):
        return value

    for fmt in (*preferred_formats, *SANITIZE_DATE_FORMATS):
        parsed = parse_date(value, fmt)
        if parsed:
            return parsed.strftime(ISO_DATE_FORMAT)

    return None
