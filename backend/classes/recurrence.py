"""
Recurring series expansion.

Turns a series definition into the ordered list of concrete class
start/end pairs it implies. Only the three supported patterns are handled:

- ``weekly``: every selected weekday in the window
- ``bi-weekly``: selected weekdays in every other week
- ``monthly``: the first occurrence of each selected weekday in a month

Bi-weekly parity follows a running week counter that starts at 1 on the
first day of the window and advances whenever ``epoch_days // 7`` changes
(week boundaries fall on Thursdays). Classes are generated in the even
weeks. Moving the start date by a few days can therefore flip which weeks
are "on" weeks.

The generated datetimes are naive campus wall-clock values; the caller
localizes them when persisting.
"""
import logging
from datetime import datetime, timedelta

from .models import PATTERN_WEEKLY, PATTERN_BIWEEKLY, PATTERN_MONTHLY
from .timeutils import epoch_week, js_weekday, parse_date, parse_time

logger = logging.getLogger(__name__)

RECURRENCE_PATTERNS = (PATTERN_WEEKLY, PATTERN_BIWEEKLY, PATTERN_MONTHLY)


def is_first_weekday_of_month(day):
    first_of_month = day.replace(day=1)
    days_until_first = (js_weekday(day) - js_weekday(first_of_month) + 7) % 7
    return day.day == days_until_first + 1


def should_include(day, pattern, days, week_number):
    """Decide whether ``day`` gets a class. Unknown patterns never match."""
    if js_weekday(day) not in days:
        return False

    if pattern == PATTERN_WEEKLY:
        return True
    if pattern == PATTERN_BIWEEKLY:
        return week_number % 2 == 0
    if pattern == PATTERN_MONTHLY:
        return is_first_weekday_of_month(day)
    return False


def iter_occurrence_dates(pattern, days, start_date, end_date):
    """
    Yield every date in ``[start_date, end_date]`` the pattern selects.
    Does no validation; an empty day set or unknown pattern yields nothing.
    """
    days = set(days or [])
    week_number = 0
    last_week = None

    current = start_date
    while current <= end_date:
        current_week = epoch_week(current)
        if current_week != last_week:
            week_number += 1
            last_week = current_week

        if should_include(current, pattern, days, week_number):
            yield current

        current += timedelta(days=1)


def validate_series_definition(series):
    """
    Check a series definition before expansion.
    Returns a list of error messages; empty means the definition is usable.
    """
    errors = []

    if series.recurrence_pattern not in RECURRENCE_PATTERNS:
        errors.append(f"Unknown recurrence pattern '{series.recurrence_pattern}'")

    days = list(series.recurrence_days or [])
    if not days:
        errors.append('Select at least one day of the week')
    elif any(not isinstance(d, int) or isinstance(d, bool) or d < 0 or d > 6 for d in days):
        errors.append('Days of the week must be numbers from 0 (Sunday) to 6 (Saturday)')

    start_date = parse_date(series.series_start_date)
    end_date = parse_date(series.series_end_date)
    if start_date is None:
        errors.append('A valid start date is required')
    if end_date is None:
        errors.append('An end date is required to generate classes')
    if start_date and end_date and end_date < start_date:
        errors.append('End date must be on or after the start date')

    start_time = parse_time(series.start_time)
    end_time = parse_time(series.end_time)
    if start_time is None or end_time is None:
        errors.append('Start and end times must use the HH:MM format')
    elif end_time <= start_time:
        errors.append('End time must be after start time')

    return errors


def expand_series(series):
    """
    Expand a series definition into concrete class times.

    Returns a dict with ``occurrences`` (list of ``(start, end)`` naive
    datetimes, chronological) and ``errors``. When ``errors`` is non-empty
    nothing is generated.
    """
    errors = validate_series_definition(series)
    if errors:
        logger.info(f"Series '{getattr(series, 'series_name', '')}' not expanded: {'; '.join(errors)}")
        return {'occurrences': [], 'errors': errors}

    start_time = parse_time(series.start_time)
    end_time = parse_time(series.end_time)

    occurrences = [
        (datetime.combine(day, start_time), datetime.combine(day, end_time))
        for day in iter_occurrence_dates(
            series.recurrence_pattern,
            series.recurrence_days,
            parse_date(series.series_start_date),
            parse_date(series.series_end_date),
        )
    ]

    return {'occurrences': occurrences, 'errors': []}
