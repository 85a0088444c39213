"""
Date and time helpers shared by the recurrence expander and the calendar.

Every "local" value here means local to the campus timezone
(``settings.CAMPUS_TIME_ZONE``), never the timezone of the machine running
the code.
"""
from datetime import date, datetime, time

import pytz
from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_datetime


DATE_FORMAT = '%Y-%m-%d'
TIME_FORMAT = '%H:%M'

EPOCH = date(1970, 1, 1)


def campus_timezone():
    return pytz.timezone(getattr(settings, 'CAMPUS_TIME_ZONE', 'America/Chicago'))


def parse_date(value):
    """
    Parse a ``YYYY-MM-DD`` string.
    Returns a date, or None if the value is empty or malformed.
    Date objects are returned unchanged.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not str(value).strip():
        return None
    try:
        return datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def parse_time(value):
    """
    Parse a 24-hour ``HH:MM`` (or ``HH:MM:SS``) string.
    Returns a time, or None if the value is empty or malformed.
    """
    if isinstance(value, time):
        return value
    if not value or not str(value).strip():
        return None

    for fmt in (TIME_FORMAT, '%H:%M:%S'):
        try:
            return datetime.strptime(str(value).strip(), fmt).time()
        except ValueError:
            continue

    return None


def localize_wall_clock(naive_dt):
    """Attach the campus timezone to a naive wall-clock datetime."""
    return campus_timezone().localize(naive_dt)


def parse_timestamp(value):
    """
    Normalize a stored class timestamp to an aware datetime.

    Accepts aware datetimes, naive datetimes (read as campus wall clock) and
    ISO 8601 strings. Returns None when the value cannot be understood.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        try:
            dt = parse_datetime(value.strip())
        except ValueError:
            return None
        if dt is None:
            return None
    else:
        return None

    if timezone.is_naive(dt):
        return localize_wall_clock(dt)
    return dt


def to_campus(dt):
    return dt.astimezone(campus_timezone())


def campus_date_string(dt):
    """``YYYY-MM-DD`` of an aware datetime in the campus timezone."""
    return to_campus(dt).strftime(DATE_FORMAT)


def campus_time_string(dt):
    """``HH:MM`` of an aware datetime in the campus timezone."""
    return to_campus(dt).strftime(TIME_FORMAT)


def campus_today(now=None):
    if now is None:
        now = timezone.now()
    return to_campus(now).date()


def day_string(day):
    return day.strftime(DATE_FORMAT)


def hour_fraction(dt):
    """Campus-local time of day as fractional hours (18:30 -> 18.5)."""
    local = to_campus(dt)
    return local.hour + local.minute / 60


def js_weekday(day):
    """Weekday number with Sunday as 0, matching ``ClassSeries.recurrence_days``."""
    return (day.weekday() + 1) % 7


def epoch_week(day):
    """Whole weeks elapsed since 1970-01-01 (a Thursday)."""
    return (day - EPOCH).days // 7


def format_display_time(value):
    """12-hour display string for a time or aware datetime ("6:30 PM")."""
    if isinstance(value, datetime):
        value = to_campus(value).time()
    hour = value.hour % 12 or 12
    suffix = 'AM' if value.hour < 12 else 'PM'
    return f"{hour}:{value.minute:02d} {suffix}"
