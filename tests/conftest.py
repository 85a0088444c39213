import types
from datetime import date, datetime, time

import pytest
import pytz

from classes.models import Building, ClassSeries, Room, YogaClass

CAMPUS = pytz.timezone('America/Chicago')


def local(year, month, day, hour=0, minute=0):
    """Aware datetime on the campus wall clock."""
    return CAMPUS.localize(datetime(year, month, day, hour, minute))


def make_instance(start, end=None, pk=None, is_cancelled=False):
    return types.SimpleNamespace(pk=pk, start_time=start, end_time=end, is_cancelled=is_cancelled)


def series_definition(**overrides):
    values = {
        'series_name': 'Morning Flow',
        'recurrence_pattern': 'weekly',
        'recurrence_days': [1, 3],
        'start_time': time(7, 0),
        'end_time': time(8, 0),
        'series_start_date': date(2024, 3, 4),
        'series_end_date': date(2024, 3, 17),
    }
    values.update(overrides)
    return types.SimpleNamespace(**values)


@pytest.fixture(autouse=True)
def campus_timezone(settings):
    settings.CAMPUS_TIME_ZONE = 'America/Chicago'
    settings.TIME_ZONE = 'America/Chicago'
    settings.CLASSES_MONTH_CELL_LIMIT = 2
    settings.CLASSES_WEEK_START_HOUR = 6
    settings.CLASSES_HOUR_HEIGHT = 60


@pytest.fixture
def room(db):
    building = Building.objects.create(building_name='Rec Center', building_address='100 College Ave')
    return Room.objects.create(room_name='Studio B', building=building)


@pytest.fixture
def make_series(room):
    def _make(**overrides):
        values = {
            'series_name': 'Morning Flow',
            'series_description': 'Gentle vinyasa',
            'recurrence_pattern': 'weekly',
            'recurrence_days': [1, 3],
            'start_time': time(7, 0),
            'end_time': time(8, 0),
            'instructor_name': 'Dana',
            'room': room,
            'mats_provided': True,
            'series_start_date': date(2024, 3, 4),
            'series_end_date': date(2024, 3, 17),
        }
        values.update(overrides)
        return ClassSeries(**values)
    return _make


@pytest.fixture
def make_class(room):
    def _make(start, end=None, **overrides):
        values = {
            'class_name': 'Drop-in Yin',
            'instructor_name': 'Sam',
            'room': room,
            'start_time': start,
            'end_time': end or start.replace(hour=start.hour + 1),
        }
        values.update(overrides)
        return YogaClass.objects.create(**values)
    return _make


def series_data(room, **overrides):
    """POST data for the series form."""
    data = {
        'series_name': 'Evening Yin',
        'series_description': '',
        'recurrence_pattern': 'weekly',
        'recurrence_days': ['2', '4'],
        'start_time': '18:00',
        'end_time': '19:00',
        'instructor_name': 'Dana',
        'room': room.pk,
        'mats_provided': 'on',
        'series_start_date': '2030-01-01',
        'series_end_date': '2030-02-01',
        'is_active': 'on',
    }
    data.update(overrides)
    return data
