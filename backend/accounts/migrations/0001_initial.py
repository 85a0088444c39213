# Generated migration for class registrations

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('classes', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ClassRegistration',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('registered_at', models.DateTimeField(auto_now_add=True)),
                ('attended', models.BooleanField(default=True)),
                ('user', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='class_registrations',
                    to=settings.AUTH_USER_MODEL
                )),
                ('yoga_class', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='registrations',
                    to='classes.yogaclass'
                )),
            ],
            options={
                'verbose_name': 'Class registration',
                'verbose_name_plural': 'Class registrations',
                'ordering': ['-registered_at'],
                'unique_together': {('user', 'yoga_class')},
            },
        ),
    ]
