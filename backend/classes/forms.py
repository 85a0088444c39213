from datetime import datetime

from django import forms

from .models import ClassSeries, YogaClass, WEEKDAY_CHOICES
from .recurrence import validate_series_definition

MIN_CLASS_MINUTES = 30
MAX_CLASS_MINUTES = 120

UPDATE_MODE_CHOICES = [
    ('occurrence', 'This class only'),
    ('series', 'All future classes in series'),
]


def duration_error(start, end):
    """Validation message for a class time window, or None if it is fine."""
    minutes = (end - start).total_seconds() / 60
    if minutes <= 0:
        return 'End time must be after start time'
    if minutes < MIN_CLASS_MINUTES:
        return f'Class must be at least {MIN_CLASS_MINUTES} minutes long'
    if minutes > MAX_CLASS_MINUTES:
        return f'Class cannot be longer than {MAX_CLASS_MINUTES} minutes'
    return None


class ClassSeriesForm(forms.ModelForm):
    recurrence_days = forms.TypedMultipleChoiceField(
        choices=WEEKDAY_CHOICES,
        coerce=int,
        widget=forms.CheckboxSelectMultiple,
        label='Days of the week',
        error_messages={'required': 'Please select at least one day'},
    )

    class Meta:
        model = ClassSeries
        fields = [
            'series_name', 'series_description',
            'recurrence_pattern', 'recurrence_days',
            'start_time', 'end_time',
            'instructor_name', 'room', 'mats_provided',
            'series_start_date', 'series_end_date',
            'is_active',
        ]
        widgets = {
            'series_start_date': forms.DateInput(attrs={'type': 'date'}),
            'series_end_date': forms.DateInput(attrs={'type': 'date'}),
            'start_time': forms.TimeInput(attrs={'type': 'time'}, format='%H:%M'),
            'end_time': forms.TimeInput(attrs={'type': 'time'}, format='%H:%M'),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Classes are only generated when the series is created, so the
        # end date is mandatory then. Existing series may be open-ended.
        if not self.instance.pk:
            self.fields['series_end_date'].required = True
        else:
            # Recurrence is read-only after creation
            self.fields.pop('recurrence_days', None)

    def clean(self):
        cleaned_data = super().clean()
        start_time = cleaned_data.get('start_time')
        end_time = cleaned_data.get('end_time')
        start_date = cleaned_data.get('series_start_date')
        end_date = cleaned_data.get('series_end_date')

        if start_time and end_time:
            reference = start_date or datetime.today().date()
            error = duration_error(
                datetime.combine(reference, start_time),
                datetime.combine(reference, end_time),
            )
            if error:
                self.add_error('end_time', error)

        if start_date and end_date and end_date < start_date:
            self.add_error('series_end_date', 'End date must be on or after the start date')

        if not self.instance.pk and not self.errors:
            series = ClassSeries(
                recurrence_pattern=cleaned_data.get('recurrence_pattern'),
                recurrence_days=cleaned_data.get('recurrence_days'),
                start_time=start_time,
                end_time=end_time,
                series_start_date=start_date,
                series_end_date=end_date,
            )
            for message in validate_series_definition(series):
                self.add_error(None, message)

        return cleaned_data


class YogaClassForm(forms.ModelForm):
    update_mode = forms.ChoiceField(
        choices=UPDATE_MODE_CHOICES,
        initial='occurrence',
        required=False,
        help_text='Series updates change name, description, instructor, room and mats '
                  'of all future classes. Date and time changes are not applied to series updates.',
    )

    class Meta:
        model = YogaClass
        fields = [
            'class_name', 'class_description', 'instructor_name',
            'room', 'mats_provided',
            'start_time', 'end_time',
            'series', 'is_cancelled',
        ]

    def clean(self):
        cleaned_data = super().clean()
        start = cleaned_data.get('start_time')
        end = cleaned_data.get('end_time')
        series_mode = cleaned_data.get('update_mode') == 'series'

        if start and end and not series_mode:
            error = duration_error(start, end)
            if error:
                self.add_error('end_time', error)

        if series_mode and not cleaned_data.get('series'):
            self.add_error('update_mode', 'This class is not part of a series')

        return cleaned_data
