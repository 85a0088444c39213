"""
Class registration actions and lookups.

Registration keeps ``YogaClass.current_enrollment`` in step with the
registration rows; the calendar code never computes enrollment itself.
"""
import logging

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from classes.models import YogaClass
from .models import ClassRegistration

logger = logging.getLogger(__name__)


def get_registration_status(user, class_id):
    """Registration state of ``user`` for one class, as shown in the class details."""
    if user is None or not user.is_authenticated:
        return {'is_authenticated': False, 'is_registered': False}

    is_registered = ClassRegistration.objects.filter(user=user, yoga_class_id=class_id).exists()
    return {'is_authenticated': True, 'is_registered': is_registered}


def register_for_class(user, class_id):
    if user is None or not user.is_authenticated:
        return {'success': False, 'error': 'You must be logged in to register for a class'}

    try:
        yoga_class = YogaClass.objects.get(pk=class_id)
    except YogaClass.DoesNotExist:
        return {'success': False, 'error': 'Class not found'}

    if yoga_class.is_cancelled:
        return {'success': False, 'error': 'This class has been cancelled'}
    if timezone.now() >= yoga_class.start_time:
        return {'success': False, 'error': 'This class has already started'}

    if ClassRegistration.objects.filter(user=user, yoga_class=yoga_class).exists():
        return {'success': False, 'error': 'You are already registered for this class'}

    try:
        with transaction.atomic():
            ClassRegistration.objects.create(user=user, yoga_class=yoga_class)
            YogaClass.objects.filter(pk=yoga_class.pk).update(
                current_enrollment=F('current_enrollment') + 1
            )
    except IntegrityError:
        return {'success': False, 'error': 'You are already registered for this class'}
    except DatabaseError:
        logger.exception(f"Error registering {user.get_username()} for class {class_id}")
        return {'success': False, 'error': 'Failed to register for class'}

    logger.info(f"{user.get_username()} registered for class {class_id}")
    return {'success': True}


def unregister_from_class(user, class_id):
    if user is None or not user.is_authenticated:
        return {'success': False, 'error': 'You must be logged in to unregister from a class'}

    try:
        with transaction.atomic():
            deleted, _ = ClassRegistration.objects.filter(
                user=user, yoga_class_id=class_id
            ).delete()
            if deleted:
                # Never drop below zero
                YogaClass.objects.filter(pk=class_id, current_enrollment__gt=0).update(
                    current_enrollment=F('current_enrollment') - 1
                )
    except DatabaseError:
        logger.exception(f"Error unregistering {user.get_username()} from class {class_id}")
        return {'success': False, 'error': 'Failed to unregister from class'}

    if not deleted:
        return {'success': False, 'error': 'You are not registered for this class'}

    logger.info(f"{user.get_username()} unregistered from class {class_id}")
    return {'success': True}


def get_user_upcoming_classes(user, now=None):
    """Registrations for classes that have not started, soonest first."""
    if now is None:
        now = timezone.now()
    return ClassRegistration.objects.filter(
        user=user,
        yoga_class__start_time__gte=now,
    ).select_related('yoga_class__room__building').order_by('yoga_class__start_time')


def get_user_past_classes(user, now=None):
    """Registrations for classes that already started, most recent first."""
    if now is None:
        now = timezone.now()
    return ClassRegistration.objects.filter(
        user=user,
        yoga_class__start_time__lt=now,
    ).select_related('yoga_class__room__building').order_by('-yoga_class__start_time')
