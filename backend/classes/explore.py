"""
Filtering for the series explore listing.

A series falls into a time-of-day bucket by the hour it starts. Hours
before 6:00 belong to no bucket, so such series only show up when no
time filter is selected.
"""
from .timeutils import parse_time

TIME_OF_DAY_CHOICES = [
    ('morning', 'Morning'),
    ('midday', 'Midday'),
    ('afternoon', 'Afternoon'),
    ('evening', 'Evening'),
]

# bucket -> (first hour, hour after the last); None means open-ended
TIME_OF_DAY_HOURS = {
    'morning': (6, 12),
    'midday': (12, 15),
    'afternoon': (15, 18),
    'evening': (18, None),
}


def time_of_day_bucket(start_time):
    """Bucket name for a start time, or None if it is outside every bucket."""
    parsed = parse_time(start_time)
    if parsed is None:
        return None

    for name, (first, last) in TIME_OF_DAY_HOURS.items():
        if parsed.hour >= first and (last is None or parsed.hour < last):
            return name
    return None


def filter_series(series, time_of_day=(), mats_provided=None):
    """
    Keep the series matching every active filter.

    ``time_of_day`` holds bucket names; a series matches if it starts
    in any of them. An empty selection disables the filter, as does
    ``mats_provided=None``.
    """
    selected = set(time_of_day)
    matching = []
    for item in series:
        if selected and time_of_day_bucket(item.start_time) not in selected:
            continue
        if mats_provided is not None and bool(item.mats_provided) != mats_provided:
            continue
        matching.append(item)
    return matching


def parse_mats_param(value):
    """``yes``/``no`` query value to a mats filter; anything else disables it."""
    return {'yes': True, 'no': False}.get(value)
