from django.contrib.auth.models import User
from django.db import models

from classes.models import YogaClass


class ClassRegistration(models.Model):
    """A student's sign-up for one class"""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='class_registrations')
    yoga_class = models.ForeignKey(YogaClass, on_delete=models.CASCADE, related_name='registrations')

    registered_at = models.DateTimeField(auto_now_add=True)
    attended = models.BooleanField(default=True)

    class Meta:
        ordering = ['-registered_at']
        verbose_name = 'Class registration'
        verbose_name_plural = 'Class registrations'
        # Prevent duplicate registrations for the same user and class
        unique_together = ['user', 'yoga_class']

    def __str__(self):
        return f"{self.user.get_username()} - {self.yoga_class}"
