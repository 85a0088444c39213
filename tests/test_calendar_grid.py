from datetime import date, datetime, timedelta

import pytz

from classes.calendar_grid import (
    bucket_by_day,
    build_month_calendar,
    build_month_cell,
    build_week_calendar,
    is_past,
    is_today,
    month_grid_days,
    parse_month_params,
    shift_month,
    week_days,
    week_position,
)
from conftest import local, make_instance


def test_class_lands_on_its_local_day():
    days = [date(2024, 3, 14), date(2024, 3, 15), date(2024, 3, 16)]
    evening = make_instance(local(2024, 3, 15, 18, 0), pk=1)

    buckets = bucket_by_day([evening], days)

    assert buckets[0] == []
    assert buckets[1] == [evening]
    assert buckets[2] == []


def test_late_evening_class_stays_on_local_day_even_if_utc_rolls_over():
    days = [date(2024, 3, 15), date(2024, 3, 16)]
    late = make_instance(local(2024, 3, 15, 21, 30).astimezone(pytz.utc))

    buckets = bucket_by_day([late], days)

    assert buckets[0] == [late]
    assert buckets[1] == []


def test_classes_sorted_by_local_start_time():
    days = [date(2024, 3, 15)]
    nine = make_instance(local(2024, 3, 15, 9, 0), pk='nine')
    half_seven = make_instance(local(2024, 3, 15, 7, 30), pk='half_seven')

    buckets = bucket_by_day([nine, half_seven], days)

    assert buckets[0] == [half_seven, nine]


def test_every_day_index_present():
    days = week_days(date(2024, 3, 13))

    buckets = bucket_by_day([], days)

    assert list(buckets.keys()) == list(range(7))
    assert all(entries == [] for entries in buckets.values())


def test_no_days_gives_empty_mapping():
    assert bucket_by_day([make_instance(local(2024, 3, 15, 9, 0))], []) == {}


def test_unreadable_start_times_are_skipped():
    days = [date(2024, 3, 15)]
    good = make_instance(local(2024, 3, 15, 9, 0))
    broken = make_instance('not a timestamp')
    missing = make_instance(None)

    buckets = bucket_by_day([broken, good, missing], days)

    assert buckets[0] == [good]


def test_iso_strings_and_naive_datetimes_are_read_as_campus_times():
    days = [date(2024, 3, 15)]
    from_string = make_instance('2024-03-15T10:00:00-05:00')
    naive = make_instance(datetime(2024, 3, 15, 8, 0))

    buckets = bucket_by_day([from_string, naive], days)

    assert buckets[0] == [naive, from_string]


def test_cancelled_classes_are_grouped_like_any_other():
    days = [date(2024, 3, 15)]
    cancelled = make_instance(local(2024, 3, 15, 9, 0), is_cancelled=True)

    assert bucket_by_day([cancelled], days)[0] == [cancelled]


def test_is_past_from_the_moment_a_class_starts():
    start = local(2024, 3, 15, 9, 0)
    instance = make_instance(start, start + timedelta(hours=1))

    assert not is_past(instance, now=start - timedelta(seconds=1))
    assert is_past(instance, now=start)
    assert is_past(instance, now=start + timedelta(minutes=30))


def test_is_past_and_is_today_can_both_hold():
    now = local(2024, 3, 15, 12, 0)
    morning = make_instance(local(2024, 3, 15, 9, 0))

    assert is_past(morning, now=now)
    assert is_today(date(2024, 3, 15), now=now)


def test_is_today_uses_campus_date():
    # 03:00 UTC on the 16th is still the evening of the 15th in Chicago
    now = datetime(2024, 3, 16, 3, 0, tzinfo=pytz.utc)

    assert is_today(date(2024, 3, 15), now=now)
    assert not is_today(date(2024, 3, 16), now=now)


def _day_classes(day, hours):
    return [
        make_instance(local(day.year, day.month, day.day, hour), local(day.year, day.month, day.day, hour + 1), pk=hour)
        for hour in hours
    ]


def test_month_cell_shows_two_classes_until_expanded():
    day = date(2024, 3, 20)
    classes = _day_classes(day, [8, 10, 12, 17])
    now = local(2024, 3, 10, 12, 0)

    collapsed = build_month_cell(day, classes, now)
    expanded = build_month_cell(day, classes, now, expanded=True)

    assert [c['yoga_class'] for c in collapsed['classes']] == classes[:2]
    assert collapsed['has_more']
    assert collapsed['more_count'] == 2
    assert len(expanded['classes']) == 4
    assert expanded['more_count'] == 0


def test_month_cell_hides_started_classes_today():
    day = date(2024, 3, 15)
    classes = _day_classes(day, [8, 10, 14, 16])
    now = local(2024, 3, 15, 11, 0)

    cell = build_month_cell(day, classes, now)

    assert cell['is_today']
    assert [c['yoga_class'].pk for c in cell['classes']] == [14, 16]
    assert cell['past_count'] == 2
    assert cell['past_classes'] == []
    assert not cell['show_past']
    assert not cell['has_more']


def test_month_cell_reveals_started_classes_on_request():
    day = date(2024, 3, 15)
    classes = _day_classes(day, [8, 10, 14])
    now = local(2024, 3, 15, 11, 0)

    cell = build_month_cell(day, classes, now, show_past=True)

    assert cell['show_past']
    assert [c['yoga_class'].pk for c in cell['past_classes']] == [8, 10]
    assert all(c['is_past'] for c in cell['past_classes'])


def test_month_cell_today_with_everything_started_acts_like_normal_day():
    day = date(2024, 3, 15)
    classes = _day_classes(day, [8, 9, 10])
    now = local(2024, 3, 15, 20, 0)

    cell = build_month_cell(day, classes, now)

    assert cell['past_count'] == 0
    assert [c['yoga_class'].pk for c in cell['classes']] == [8, 9]
    assert cell['more_count'] == 1


def test_past_toggle_has_no_effect_on_other_days():
    day = date(2024, 3, 14)
    classes = _day_classes(day, [8, 10])
    now = local(2024, 3, 15, 11, 0)

    cell = build_month_cell(day, classes, now, show_past=True)

    assert not cell['show_past']
    assert cell['past_classes'] == []
    assert len(cell['classes']) == 2
    assert all(c['is_past'] for c in cell['classes'])


def test_month_grid_starts_on_sunday_and_covers_whole_weeks():
    days = month_grid_days(2024, 3)

    assert days[0] == date(2024, 2, 25)
    assert days[-1] == date(2024, 4, 6)
    assert len(days) % 7 == 0


def test_month_calendar_shape():
    classes = _day_classes(date(2024, 3, 15), [9])
    calendar = build_month_calendar(
        classes, 2024, 3,
        now=local(2024, 3, 1, 8, 0),
        expanded_days=['2024-03-15'],
    )

    assert calendar['label'] == 'March 2024'
    assert calendar['day_names'][0] == 'Sun'
    assert calendar['prev'] == {'year': 2024, 'month': 2}
    assert calendar['next'] == {'year': 2024, 'month': 4}
    cells = [cell for week in calendar['weeks'] for cell in week]
    fifteenth = next(cell for cell in cells if cell['date'] == date(2024, 3, 15))
    assert fifteenth['is_expanded']
    assert len(fifteenth['classes']) == 1
    assert not cells[0]['in_month']


def test_shift_month_wraps_years():
    assert shift_month(2024, 1, -1) == (2023, 12)
    assert shift_month(2024, 12, 1) == (2025, 1)


def test_week_position_from_start_hour():
    instance = make_instance(local(2024, 3, 15, 9, 30), local(2024, 3, 15, 10, 30))

    position = week_position(instance, start_hour=6, hour_height=60)

    assert position == {'top': 210.0, 'height': 56.0}


def test_week_position_keeps_classes_outside_visible_hours():
    early = make_instance(local(2024, 3, 15, 5, 0), local(2024, 3, 15, 5, 30))

    position = week_position(early, start_hour=6, hour_height=60)

    assert position['top'] == -60.0
    assert position['height'] == 26.0


def test_week_position_height_never_negative():
    start = local(2024, 3, 15, 9, 30)
    missing_end = make_instance(start, None)
    unreadable_end = make_instance(start, 'not a time')
    very_short = make_instance(start, start + timedelta(minutes=2))

    assert week_position(missing_end, start_hour=6, hour_height=60)['height'] == 0
    assert week_position(unreadable_end, start_hour=6, hour_height=60)['height'] == 0
    assert week_position(very_short, start_hour=6, hour_height=60)['height'] == 0


def test_week_days_start_on_sunday():
    days = week_days(date(2024, 3, 13))

    assert days[0] == date(2024, 3, 10)
    assert days[-1] == date(2024, 3, 16)
    assert week_days(date(2024, 3, 10))[0] == date(2024, 3, 10)


def test_week_calendar_positions_each_class():
    classes = _day_classes(date(2024, 3, 13), [7])
    calendar = build_week_calendar(classes, date(2024, 3, 13), now=local(2024, 3, 13, 6, 0))

    wednesday = calendar['days'][3]
    assert wednesday['day_name'] == 'Wed'
    assert wednesday['is_today']
    assert wednesday['classes'][0]['top'] == 60.0
    assert wednesday['classes'][0]['start_label'] == '7:00 AM'
    assert calendar['label'] == 'March 10 - 16, 2024'
    assert calendar['prev'] == date(2024, 3, 3)


def test_parse_month_params_falls_back_to_today():
    today = date(2024, 3, 15)

    assert parse_month_params({'year': '2025', 'month': '7'}, today) == (2025, 7)
    assert parse_month_params({'year': 'abc', 'month': '13'}, today) == (2024, 3)
    assert parse_month_params({}, today) == (2024, 3)
