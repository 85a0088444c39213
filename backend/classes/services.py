"""
Persistence boundary for classes and series.

Admin actions and views call these functions instead of touching the ORM
directly. Each action returns a result dict (``success`` plus either the
outcome or an ``error`` message) so callers can report failures without
catching exceptions.
"""
import logging

from django.db import DatabaseError, transaction
from django.db.models import Sum
from django.utils import timezone

from .models import ClassSeries, YogaClass
from .recurrence import expand_series
from .timeutils import localize_wall_clock

logger = logging.getLogger(__name__)

# Fields a series edit pushes down to its future classes. Start and end
# times are never propagated.
SERIES_PROPAGATED_FIELDS = {
    'series_name': 'class_name',
    'series_description': 'class_description',
    'instructor_name': 'instructor_name',
    'room': 'room',
    'mats_provided': 'mats_provided',
}

CLASS_PROPAGATED_FIELDS = ('class_name', 'class_description', 'instructor_name', 'room', 'mats_provided')


def insert_series(series):
    series.save()
    return series.pk


def bulk_insert_instances(instances):
    created = YogaClass.objects.bulk_create(instances)
    return len(created)


def build_series_classes(series, occurrences):
    """Unsaved YogaClass rows for expanded ``(start, end)`` wall-clock pairs."""
    return [
        YogaClass(
            series=series,
            class_name=series.series_name,
            class_description=series.series_description,
            instructor_name=series.instructor_name,
            room=series.room,
            mats_provided=series.mats_provided,
            start_time=localize_wall_clock(start),
            end_time=localize_wall_clock(end),
            is_cancelled=False,
        )
        for start, end in occurrences
    ]


def series_patch(series):
    """Class field values derived from a series' non-temporal fields."""
    return {
        class_field: getattr(series, series_field)
        for series_field, class_field in SERIES_PROPAGATED_FIELDS.items()
    }


def create_series_with_classes(series, created_by=''):
    """
    Save a new series and generate its classes.

    The definition is expanded before anything is written; an invalid
    definition leaves the database untouched.
    """
    expansion = expand_series(series)
    if expansion['errors']:
        return {
            'success': False,
            'error': '; '.join(expansion['errors']),
            'errors': expansion['errors'],
            'class_count': 0,
        }

    if created_by and not series.created_by:
        series.created_by = created_by

    try:
        with transaction.atomic():
            series_id = insert_series(series)
            class_count = bulk_insert_instances(
                build_series_classes(series, expansion['occurrences'])
            )
    except DatabaseError as e:
        logger.exception(f"Failed to create series '{series.series_name}'")
        return {'success': False, 'error': str(e), 'errors': [str(e)], 'class_count': 0}

    logger.info(f"Created series {series_id} '{series.series_name}' with {class_count} classes")
    return {'success': True, 'series_id': series_id, 'class_count': class_count, 'errors': []}


def update_series_instances(series_id, patch, from_datetime=None):
    """
    Apply ``patch`` to every class of the series starting at or after
    ``from_datetime`` (default: now). Only non-temporal fields are applied.
    Returns the number of classes updated.
    """
    if from_datetime is None:
        from_datetime = timezone.now()

    fields = {key: value for key, value in patch.items() if key in CLASS_PROPAGATED_FIELDS}
    if not fields:
        return 0

    return YogaClass.objects.filter(
        series_id=series_id,
        start_time__gte=from_datetime,
    ).update(**fields)


def delete_instances_for_series(series_id, from_datetime=None):
    """Hard-delete the series' classes starting at or after ``from_datetime``."""
    if from_datetime is None:
        from_datetime = timezone.now()

    deleted, per_model = YogaClass.objects.filter(
        series_id=series_id,
        start_time__gte=from_datetime,
    ).delete()
    return per_model.get(YogaClass._meta.label, 0)


def cancel_instances_for_series(series_id, from_datetime=None, cancelled=True):
    """Soft-cancel (or reactivate) the series' classes from ``from_datetime`` on."""
    if from_datetime is None:
        from_datetime = timezone.now()

    return YogaClass.objects.filter(
        series_id=series_id,
        start_time__gte=from_datetime,
    ).update(is_cancelled=cancelled)


def update_series(series, propagate=True):
    """Save a series and push its non-temporal fields to future classes."""
    try:
        with transaction.atomic():
            series.save()
            updated = update_series_instances(series.pk, series_patch(series)) if propagate else 0
    except DatabaseError as e:
        logger.exception(f"Failed to update series {series.pk}")
        return {'success': False, 'error': str(e)}

    return {'success': True, 'updated_count': updated}


def delete_series(series):
    """Delete the template only; its classes stay as one-off classes."""
    series_id = series.pk
    try:
        series.delete()
    except DatabaseError as e:
        logger.exception(f"Failed to delete series {series_id}")
        return {'success': False, 'error': str(e)}

    logger.info(f"Deleted series {series_id}; generated classes kept")
    return {'success': True}


def create_class(yoga_class):
    """Save a one-off class (or a class attached to an existing series)."""
    try:
        yoga_class.save()
    except DatabaseError as e:
        logger.exception(f"Failed to create class '{yoga_class.class_name}'")
        return {'success': False, 'error': str(e)}

    return {'success': True, 'class_id': yoga_class.pk}


def update_class(yoga_class, mode='occurrence'):
    """
    Save an edited class.

    In ``series`` mode the edited class is not saved on its own: its
    non-temporal fields are copied to every future class of its series and
    date or time edits are discarded.
    """
    try:
        if mode == 'series' and yoga_class.series_id:
            patch = {field: getattr(yoga_class, field) for field in CLASS_PROPAGATED_FIELDS}
            updated = update_series_instances(yoga_class.series_id, patch)
        else:
            yoga_class.save()
            updated = 1
    except DatabaseError as e:
        logger.exception(f"Failed to update class {yoga_class.pk}")
        return {'success': False, 'error': str(e)}

    return {'success': True, 'updated_count': updated}


def set_class_cancelled(class_id, cancelled):
    try:
        updated = YogaClass.objects.filter(pk=class_id).update(is_cancelled=cancelled)
    except DatabaseError as e:
        logger.exception(f"Failed to change cancellation of class {class_id}")
        return {'success': False, 'error': str(e)}

    if not updated:
        return {'success': False, 'error': 'Class not found'}
    return {'success': True}


def cancel_class(class_id):
    return set_class_cancelled(class_id, True)


def uncancel_class(class_id):
    return set_class_cancelled(class_id, False)


def delete_class(class_id):
    """Hard delete; registrations for the class go with it."""
    try:
        deleted, _ = YogaClass.objects.filter(pk=class_id).delete()
    except DatabaseError as e:
        logger.exception(f"Failed to delete class {class_id}")
        return {'success': False, 'error': str(e)}

    if not deleted:
        return {'success': False, 'error': 'Class not found'}
    return {'success': True}


def missing_series_classes(series):
    """
    Expand a saved series and keep only the occurrences that have no class
    yet (matched on start time). Used to regenerate classes safely.
    """
    expansion = expand_series(series)
    if expansion['errors']:
        return expansion

    existing = set(series.classes.values_list('start_time', flat=True))
    occurrences = [
        (start, end) for start, end in expansion['occurrences']
        if localize_wall_clock(start) not in existing
    ]
    return {'occurrences': occurrences, 'errors': []}


def dashboard_stats(now=None):
    if now is None:
        now = timezone.now()

    upcoming = YogaClass.objects.filter(start_time__gte=now)
    return {
        'total_classes': upcoming.count(),
        'upcoming_classes': upcoming.filter(is_cancelled=False).count(),
        'total_series': ClassSeries.objects.filter(is_active=True).count(),
        'total_enrollments': upcoming.aggregate(total=Sum('current_enrollment'))['total'] or 0,
    }
