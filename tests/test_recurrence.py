from datetime import date, datetime, time

from classes.recurrence import (
    expand_series,
    is_first_weekday_of_month,
    iter_occurrence_dates,
    validate_series_definition,
)
from conftest import series_definition


def test_weekly_mondays_and_wednesdays_over_two_weeks():
    series = series_definition(recurrence_days=[1, 3])
    result = expand_series(series)

    assert result['errors'] == []
    assert [start.date() for start, _ in result['occurrences']] == [
        date(2024, 3, 4),
        date(2024, 3, 6),
        date(2024, 3, 11),
        date(2024, 3, 13),
    ]


def test_occurrences_carry_wall_clock_times():
    result = expand_series(series_definition(start_time='18:30', end_time='19:45'))

    start, end = result['occurrences'][0]
    assert start == datetime(2024, 3, 4, 18, 30)
    assert end == datetime(2024, 3, 4, 19, 45)
    assert start.tzinfo is None


def test_biweekly_monday_skips_alternate_weeks():
    series = series_definition(
        recurrence_pattern='bi-weekly',
        recurrence_days=[1],
        series_start_date=date(2024, 3, 4),
        series_end_date=date(2024, 3, 31),
    )
    result = expand_series(series)

    assert [start.date() for start, _ in result['occurrences']] == [
        date(2024, 3, 11),
        date(2024, 3, 25),
    ]


def test_biweekly_on_weeks_depend_on_window_start():
    # Starting on the Thursday puts the following Monday in the first counted week
    dates = list(iter_occurrence_dates('bi-weekly', [1], date(2024, 3, 7), date(2024, 3, 31)))

    assert dates == [date(2024, 3, 18)]


def test_monthly_first_friday_of_each_month():
    series = series_definition(
        recurrence_pattern='monthly',
        recurrence_days=[5],
        series_start_date=date(2024, 3, 1),
        series_end_date=date(2024, 4, 30),
    )
    result = expand_series(series)

    assert [start.date() for start, _ in result['occurrences']] == [
        date(2024, 3, 1),
        date(2024, 4, 5),
    ]


def test_monthly_does_not_substitute_a_later_weekday():
    # The first Friday of March is before the window, so March gets nothing
    dates = list(iter_occurrence_dates('monthly', [5], date(2024, 3, 8), date(2024, 4, 30)))

    assert dates == [date(2024, 4, 5)]


def test_is_first_weekday_of_month():
    assert is_first_weekday_of_month(date(2024, 3, 1))
    assert is_first_weekday_of_month(date(2024, 3, 7))
    assert not is_first_weekday_of_month(date(2024, 3, 8))


def test_occurrences_stay_inside_window():
    series = series_definition(
        recurrence_days=[0, 1, 2, 3, 4, 5, 6],
        series_start_date=date(2024, 2, 27),
        series_end_date=date(2024, 3, 2),
    )
    result = expand_series(series)

    dates = [start.date() for start, _ in result['occurrences']]
    assert dates[0] == date(2024, 2, 27)
    assert dates[-1] == date(2024, 3, 2)
    assert len(dates) == 5
    assert dates == sorted(dates)


def test_single_day_window():
    dates = list(iter_occurrence_dates('weekly', [1], date(2024, 3, 4), date(2024, 3, 4)))

    assert dates == [date(2024, 3, 4)]


def test_expansion_is_idempotent():
    series = series_definition(recurrence_pattern='bi-weekly', recurrence_days=[2, 4])

    assert expand_series(series) == expand_series(series)


def test_empty_day_set_yields_nothing():
    assert list(iter_occurrence_dates('weekly', [], date(2024, 3, 1), date(2024, 3, 31))) == []


def test_unknown_pattern_yields_nothing():
    assert list(iter_occurrence_dates('daily', [1], date(2024, 3, 1), date(2024, 3, 31))) == []


def test_unknown_pattern_is_reported():
    result = expand_series(series_definition(recurrence_pattern='daily'))

    assert result['occurrences'] == []
    assert any('daily' in error for error in result['errors'])


def test_validation_collects_every_problem():
    series = series_definition(
        recurrence_days=[],
        series_end_date=None,
        start_time='9am',
    )
    errors = validate_series_definition(series)

    assert 'Select at least one day of the week' in errors
    assert 'An end date is required to generate classes' in errors
    assert 'Start and end times must use the HH:MM format' in errors


def test_validation_rejects_reversed_windows():
    errors = validate_series_definition(series_definition(
        series_start_date=date(2024, 3, 10),
        series_end_date=date(2024, 3, 1),
        start_time=time(9, 0),
        end_time=time(8, 0),
    ))

    assert 'End date must be on or after the start date' in errors
    assert 'End time must be after start time' in errors


def test_validation_rejects_out_of_range_weekdays():
    errors = validate_series_definition(series_definition(recurrence_days=[1, 7]))

    assert errors == ['Days of the week must be numbers from 0 (Sunday) to 6 (Saturday)']


def test_string_dates_are_accepted():
    series = series_definition(series_start_date='2024-03-04', series_end_date='2024-03-10')

    assert len(expand_series(series)['occurrences']) == 2
