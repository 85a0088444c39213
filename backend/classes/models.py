from datetime import datetime

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


WEEKDAY_CHOICES = [
    (0, 'Sunday'),
    (1, 'Monday'),
    (2, 'Tuesday'),
    (3, 'Wednesday'),
    (4, 'Thursday'),
    (5, 'Friday'),
    (6, 'Saturday'),
]

PATTERN_WEEKLY = 'weekly'
PATTERN_BIWEEKLY = 'bi-weekly'
PATTERN_MONTHLY = 'monthly'

RECURRENCE_PATTERN_CHOICES = [
    (PATTERN_WEEKLY, 'Weekly'),
    (PATTERN_BIWEEKLY, 'Every other week'),
    (PATTERN_MONTHLY, 'Monthly (first matching weekday)'),
]


class Building(models.Model):
    building_name = models.CharField(max_length=255)
    building_address = models.CharField(max_length=500)

    class Meta:
        ordering = ['building_name']

    def __str__(self):
        return self.building_name


class Room(models.Model):
    room_name = models.CharField(max_length=100)
    building = models.ForeignKey(Building, on_delete=models.CASCADE, related_name='rooms')

    class Meta:
        ordering = ['building__building_name', 'room_name']
        unique_together = ['building', 'room_name']

    def __str__(self):
        return f"{self.building.building_name} {self.room_name}"


class ClassSeries(models.Model):
    """
    A recurring class template.
    Creating one expands it into YogaClass rows; the rows can then be edited,
    cancelled or deleted independently of the template.
    """
    series_name = models.CharField(max_length=255)
    series_description = models.TextField(blank=True)

    # Recurrence
    recurrence_pattern = models.CharField(
        max_length=20,
        choices=RECURRENCE_PATTERN_CHOICES,
        default=PATTERN_WEEKLY,
    )
    recurrence_days = models.JSONField(
        default=list,
        help_text="Weekdays the class runs on (0=Sunday ... 6=Saturday)"
    )
    start_time = models.TimeField(help_text="Wall-clock start time of every class")
    end_time = models.TimeField(help_text="Wall-clock end time of every class")

    # Copied onto every generated class
    instructor_name = models.CharField(max_length=255)
    room = models.ForeignKey(
        Room,
        on_delete=models.PROTECT,
        related_name='series',
    )
    mats_provided = models.BooleanField(default=True)

    # Generation window
    series_start_date = models.DateField()
    series_end_date = models.DateField(
        null=True,
        blank=True,
        help_text="Last date classes are generated for (empty = open-ended)"
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    created_by = models.CharField(max_length=150, blank=True)

    class Meta:
        ordering = ['series_name']
        verbose_name = 'Class series'
        verbose_name_plural = 'Class series'

    def __str__(self):
        return f"{self.series_name} ({self.get_recurrence_pattern_display()})"

    @property
    def duration_minutes(self):
        start = datetime.combine(self.series_start_date, self.start_time)
        end = datetime.combine(self.series_start_date, self.end_time)
        return int((end - start).total_seconds() // 60)

    @property
    def recurrence_days_display(self):
        names = dict(WEEKDAY_CHOICES)
        return ', '.join(names[day][:3] for day in sorted(self.recurrence_days) if day in names)

    def future_classes(self, now=None):
        """Classes of this series that have not started yet."""
        if now is None:
            now = timezone.now()
        return self.classes.filter(start_time__gte=now)


class YogaClass(models.Model):
    """One concrete, schedulable class occurrence."""
    series = models.ForeignKey(
        ClassSeries,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='classes',
    )

    class_name = models.CharField(max_length=255)
    class_description = models.TextField(blank=True)
    instructor_name = models.CharField(max_length=255)
    room = models.ForeignKey(Room, on_delete=models.PROTECT, related_name='classes')
    mats_provided = models.BooleanField(default=False)

    start_time = models.DateTimeField()
    end_time = models.DateTimeField()

    is_cancelled = models.BooleanField(default=False)
    current_enrollment = models.IntegerField(default=0, validators=[MinValueValidator(0)])

    class Meta:
        ordering = ['start_time']
        verbose_name = 'Yoga class'
        verbose_name_plural = 'Yoga classes'
        indexes = [
            models.Index(fields=['series', 'start_time'], name='yogaclass_series_start_idx'),
        ]

    def __str__(self):
        local_start = timezone.localtime(self.start_time)
        return f"{self.class_name} ({local_start.strftime('%Y-%m-%d %H:%M')})"

    def clean(self):
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValidationError({'end_time': 'End time must be after start time.'})

    @property
    def is_one_off(self):
        return self.series_id is None

    @property
    def has_started(self):
        return timezone.now() >= self.start_time

    @property
    def location_display(self):
        return f"{self.room.building.building_name}, room {self.room.room_name}"
