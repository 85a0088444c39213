from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html
from .models import ClassRegistration


@admin.register(ClassRegistration)
class ClassRegistrationAdmin(admin.ModelAdmin):
    list_display = ['user_display', 'class_info', 'class_start', 'registered_at', 'status_badge']
    list_filter = ['attended', 'yoga_class__is_cancelled', 'registered_at']
    search_fields = [
        'user__email',
        'user__first_name',
        'user__last_name',
        'yoga_class__class_name',
    ]
    date_hierarchy = 'registered_at'
    readonly_fields = ['registered_at']
    list_select_related = ['user', 'yoga_class']

    def user_display(self, obj):
        return obj.user.get_full_name() or obj.user.get_username()
    user_display.short_description = 'Student'
    user_display.admin_order_field = 'user__last_name'

    def class_info(self, obj):
        return format_html(
            '{}<br><span style="color: gray; font-size: 11px;">{}</span>',
            obj.yoga_class.class_name,
            obj.yoga_class.instructor_name
        )
    class_info.short_description = 'Class'

    def class_start(self, obj):
        return obj.yoga_class.start_time
    class_start.short_description = 'Starts'
    class_start.admin_order_field = 'yoga_class__start_time'

    def status_badge(self, obj):
        if obj.yoga_class.is_cancelled:
            return format_html(
                '<span style="background-color: red; color: white; padding: 3px 10px; '
                'border-radius: 3px; font-weight: bold;">Class cancelled</span>'
            )

        if obj.yoga_class.start_time <= timezone.now():
            if obj.attended:
                return format_html(
                    '<span style="background-color: green; color: white; padding: 3px 10px; '
                    'border-radius: 3px; font-weight: bold;">Attended</span>'
                )
            return format_html(
                '<span style="background-color: orange; color: white; padding: 3px 10px; '
                'border-radius: 3px; font-weight: bold;">Absent</span>'
            )

        return format_html(
            '<span style="background-color: #2196F3; color: white; padding: 3px 10px; '
            'border-radius: 3px; font-weight: bold;">Registered</span>'
        )
    status_badge.short_description = 'Status'
