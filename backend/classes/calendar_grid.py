"""
Calendar grouping and view state for the month and week schedule views.

Classes are bucketed by their campus-local calendar day. Everything here is
a pure function of its arguments: "now", the expanded day cells and the
revealed past classes are passed in by the caller (usually taken from the
request), so nothing is cached between renders.
"""
import calendar
import logging
from collections import OrderedDict
from datetime import date, timedelta

from django.conf import settings
from django.utils import timezone

from .timeutils import (
    campus_date_string,
    campus_time_string,
    campus_today,
    day_string,
    format_display_time,
    hour_fraction,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

MONTH_NAMES = [
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
]
DAY_NAMES = ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']

WEEK_VIEW_GUTTER = 4


def _setting(name, default):
    return getattr(settings, name, default)


def class_start(instance):
    return parse_timestamp(getattr(instance, 'start_time', None))


def class_end(instance):
    return parse_timestamp(getattr(instance, 'end_time', None))


def bucket_by_day(instances, days):
    """
    Group classes under the days they fall on.

    ``days`` is the caller's ordered list of dates (7 for a week, a full grid
    for a month). The result maps each index of ``days`` to that day's
    classes, sorted by local start time. Classes whose start time cannot be
    read are skipped.
    """
    buckets = OrderedDict((index, []) for index in range(len(days)))
    if not buckets:
        return buckets

    index_by_day = {}
    for index, day in enumerate(days):
        index_by_day.setdefault(day_string(day), []).append(index)

    keyed = []
    for instance in instances:
        start = class_start(instance)
        if start is None:
            logger.warning(f"Skipping class {getattr(instance, 'pk', None)!r}: unreadable start time")
            continue
        keyed.append((campus_date_string(start), campus_time_string(start), instance))

    for date_str, time_str, instance in keyed:
        for index in index_by_day.get(date_str, []):
            buckets[index].append((time_str, instance))

    for index, entries in buckets.items():
        entries.sort(key=lambda entry: entry[0])
        buckets[index] = [instance for _, instance in entries]

    return buckets


def is_today(day, now=None):
    return day == campus_today(now)


def is_past(instance, now=None):
    """A class counts as past from the moment it starts."""
    if now is None:
        now = timezone.now()
    start = class_start(instance)
    return start is not None and now >= start


def month_grid_days(year, month):
    """Sunday-first grid of whole weeks covering the month."""
    cal = calendar.Calendar(firstweekday=6)
    return [day for week in cal.monthdatescalendar(year, month) for day in week]


def week_days(reference):
    """The seven days (Sunday to Saturday) of the week containing ``reference``."""
    week_start = reference - timedelta(days=(reference.weekday() + 1) % 7)
    return [week_start + timedelta(days=i) for i in range(7)]


def shift_month(year, month, delta):
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def describe_class(instance, now):
    start = class_start(instance)
    end = class_end(instance)
    return {
        'yoga_class': instance,
        'is_past': is_past(instance, now),
        'is_cancelled': bool(getattr(instance, 'is_cancelled', False)),
        'start_label': format_display_time(start),
        'end_label': format_display_time(end) if end else '',
    }


def build_month_cell(day, day_classes, now, expanded=False, show_past=False, limit=None):
    """
    View state for one month grid cell.

    At most ``limit`` classes are visible until the cell is expanded. For
    today's cell, classes that already started are split off and only shown
    when ``show_past`` is set; if every class today has started the cell
    behaves like any other day.
    """
    if limit is None:
        limit = _setting('CLASSES_MONTH_CELL_LIMIT', 2)

    today = is_today(day, now)
    past_classes = []
    listed = day_classes

    if today:
        started = [c for c in day_classes if is_past(c, now)]
        upcoming = [c for c in day_classes if not is_past(c, now)]
        if upcoming:
            past_classes = started
            listed = upcoming

    visible = listed if expanded else listed[:limit]

    return {
        'date': day,
        'date_string': day_string(day),
        'is_today': today,
        'is_expanded': expanded,
        'classes': [describe_class(c, now) for c in visible],
        'has_more': len(listed) > limit,
        'more_count': max(0, len(listed) - limit) if not expanded else 0,
        'past_classes': [describe_class(c, now) for c in past_classes] if show_past else [],
        'past_count': len(past_classes),
        'show_past': show_past and bool(past_classes),
    }


def build_month_calendar(classes, year, month, now=None, expanded_days=(), past_days=()):
    """
    Month grid as a list of weeks, each a list of cell dicts.

    ``expanded_days`` and ``past_days`` hold ``YYYY-MM-DD`` strings of the
    cells whose "more" and "past" toggles are open.
    """
    if now is None:
        now = timezone.now()

    days = month_grid_days(year, month)
    buckets = bucket_by_day(classes, days)
    expanded_days = set(expanded_days)
    past_days = set(past_days)

    cells = []
    for index, day in enumerate(days):
        cell = build_month_cell(
            day,
            buckets[index],
            now,
            expanded=day_string(day) in expanded_days,
            show_past=day_string(day) in past_days,
        )
        cell['in_month'] = day.month == month
        cells.append(cell)

    prev_year, prev_month = shift_month(year, month, -1)
    next_year, next_month = shift_month(year, month, 1)

    return {
        'label': f"{MONTH_NAMES[month - 1]} {year}",
        'day_names': DAY_NAMES,
        'weeks': [cells[i:i + 7] for i in range(0, len(cells), 7)],
        'prev': {'year': prev_year, 'month': prev_month},
        'next': {'year': next_year, 'month': next_month},
    }


def week_position(instance, start_hour=None, hour_height=None, gutter=WEEK_VIEW_GUTTER):
    """
    Vertical placement of a class on the week view's time axis, in pixels.
    Classes outside the visible hours get off-grid offsets rather than
    being dropped.
    """
    if start_hour is None:
        start_hour = _setting('CLASSES_WEEK_START_HOUR', 6)
    if hour_height is None:
        hour_height = _setting('CLASSES_HOUR_HEIGHT', 60)

    start = class_start(instance)
    end = class_end(instance)
    start_hour_fraction = hour_fraction(start)
    duration_hours = (end - start).total_seconds() / 3600 if end else 0

    return {
        'top': (start_hour_fraction - start_hour) * hour_height,
        'height': max(0, duration_hours * hour_height - gutter),
    }


def week_label(days):
    first, last = days[0], days[-1]
    if first.month == last.month:
        return f"{MONTH_NAMES[first.month - 1]} {first.day} - {last.day}, {first.year}"
    return (
        f"{MONTH_NAMES[first.month - 1]} {first.day} - "
        f"{MONTH_NAMES[last.month - 1]} {last.day}, {first.year}"
    )


def build_week_calendar(classes, reference, now=None):
    """Seven day columns with positioned classes for the week of ``reference``."""
    if now is None:
        now = timezone.now()

    start_hour = _setting('CLASSES_WEEK_START_HOUR', 6)
    end_hour = _setting('CLASSES_WEEK_END_HOUR', 21)
    hour_height = _setting('CLASSES_HOUR_HEIGHT', 60)

    days = week_days(reference)
    buckets = bucket_by_day(classes, days)

    columns = []
    for index, day in enumerate(days):
        entries = []
        for instance in buckets[index]:
            entry = describe_class(instance, now)
            entry.update(week_position(instance, start_hour, hour_height))
            entries.append(entry)
        columns.append({
            'date': day,
            'date_string': day_string(day),
            'day_name': DAY_NAMES[index],
            'is_today': is_today(day, now),
            'classes': entries,
        })

    return {
        'label': week_label(days),
        'hours': list(range(start_hour, end_hour)),
        'hour_height': hour_height,
        'days': columns,
        'prev': days[0] - timedelta(days=7),
        'next': days[0] + timedelta(days=7),
    }


def parse_month_params(params, today=None):
    """Read ``year``/``month`` query parameters, defaulting to today's month."""
    if today is None:
        today = campus_today()
    try:
        year = int(params.get('year', today.year))
        month = int(params.get('month', today.month))
        date(year, month, 1)
    except (ValueError, TypeError):
        year, month = today.year, today.month
    return year, month
