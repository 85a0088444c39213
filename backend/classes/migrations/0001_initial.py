# Generated migration for buildings, rooms, class series and yoga classes

from django.db import migrations, models
import django.db.models.deletion
import django.core.validators


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Building',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('building_name', models.CharField(max_length=255)),
                ('building_address', models.CharField(max_length=500)),
            ],
            options={
                'ordering': ['building_name'],
            },
        ),
        migrations.CreateModel(
            name='Room',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('room_name', models.CharField(max_length=100)),
                ('building', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='rooms',
                    to='classes.building'
                )),
            ],
            options={
                'ordering': ['building__building_name', 'room_name'],
                'unique_together': {('building', 'room_name')},
            },
        ),
        migrations.CreateModel(
            name='ClassSeries',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('series_name', models.CharField(max_length=255)),
                ('series_description', models.TextField(blank=True)),
                ('recurrence_pattern', models.CharField(
                    choices=[('weekly', 'Weekly'), ('bi-weekly', 'Every other week'), ('monthly', 'Monthly (first matching weekday)')],
                    default='weekly',
                    max_length=20
                )),
                ('recurrence_days', models.JSONField(
                    default=list,
                    help_text='Weekdays the class runs on (0=Sunday ... 6=Saturday)'
                )),
                ('start_time', models.TimeField(help_text='Wall-clock start time of every class')),
                ('end_time', models.TimeField(help_text='Wall-clock end time of every class')),
                ('instructor_name', models.CharField(max_length=255)),
                ('mats_provided', models.BooleanField(default=True)),
                ('series_start_date', models.DateField()),
                ('series_end_date', models.DateField(
                    blank=True,
                    help_text='Last date classes are generated for (empty = open-ended)',
                    null=True
                )),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.CharField(blank=True, max_length=150)),
                ('room', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='series',
                    to='classes.room'
                )),
            ],
            options={
                'verbose_name': 'Class series',
                'verbose_name_plural': 'Class series',
                'ordering': ['series_name'],
            },
        ),
        migrations.CreateModel(
            name='YogaClass',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('class_name', models.CharField(max_length=255)),
                ('class_description', models.TextField(blank=True)),
                ('instructor_name', models.CharField(max_length=255)),
                ('mats_provided', models.BooleanField(default=False)),
                ('start_time', models.DateTimeField()),
                ('end_time', models.DateTimeField()),
                ('is_cancelled', models.BooleanField(default=False)),
                ('current_enrollment', models.IntegerField(
                    default=0,
                    validators=[django.core.validators.MinValueValidator(0)]
                )),
                ('room', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='classes',
                    to='classes.room'
                )),
                ('series', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='classes',
                    to='classes.classseries'
                )),
            ],
            options={
                'verbose_name': 'Yoga class',
                'verbose_name_plural': 'Yoga classes',
                'ordering': ['start_time'],
                'indexes': [models.Index(fields=['series', 'start_time'], name='yogaclass_series_start_idx')],
            },
        ),
    ]
