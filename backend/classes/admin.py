from django.contrib import admin, messages
from django.utils import timezone
from django.utils.html import format_html

from .forms import ClassSeriesForm, YogaClassForm
from .models import Building, Room, ClassSeries, YogaClass
from . import services


class RoomInline(admin.TabularInline):
    model = Room
    extra = 1


@admin.register(Building)
class BuildingAdmin(admin.ModelAdmin):
    list_display = ['building_name', 'building_address']
    search_fields = ['building_name', 'building_address']
    inlines = [RoomInline]


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ['room_name', 'building']
    list_filter = ['building']
    search_fields = ['room_name', 'building__building_name']


@admin.register(ClassSeries)
class ClassSeriesAdmin(admin.ModelAdmin):
    form = ClassSeriesForm
    list_display = [
        'series_name', 'pattern_display', 'time_display',
        'instructor_name', 'room', 'upcoming_count', 'is_active_badge'
    ]
    list_filter = ['is_active', 'recurrence_pattern', 'room__building']
    search_fields = ['series_name', 'series_description', 'instructor_name']

    fieldsets = (
        ('Series', {
            'fields': ('series_name', 'series_description', 'instructor_name', 'room', 'mats_provided')
        }),
        ('Recurrence', {
            'fields': ('recurrence_pattern', 'recurrence_days', 'start_time', 'end_time')
        }),
        ('Validity', {
            'fields': ('series_start_date', 'series_end_date', 'is_active')
        }),
        ('Tracking', {
            'fields': ('created_by', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    readonly_fields = ['created_by', 'created_at', 'updated_at']

    def get_readonly_fields(self, request, obj=None):
        # Recurrence is fixed once classes have been generated
        if obj is not None:
            return self.readonly_fields + [
                'recurrence_pattern', 'recurrence_days', 'start_time', 'end_time',
                'series_start_date',
            ]
        return self.readonly_fields

    def pattern_display(self, obj):
        return format_html(
            '<strong>{}</strong><br>{}',
            obj.get_recurrence_pattern_display(),
            obj.recurrence_days_display
        )
    pattern_display.short_description = 'Recurrence'

    def time_display(self, obj):
        return f"{obj.start_time.strftime('%H:%M')} - {obj.end_time.strftime('%H:%M')}"
    time_display.short_description = 'Time'

    def upcoming_count(self, obj):
        return obj.future_classes().filter(is_cancelled=False).count()
    upcoming_count.short_description = 'Upcoming classes'

    def is_active_badge(self, obj):
        if obj.is_active:
            return format_html(
                '<span style="background-color: green; color: white; padding: 3px 10px; '
                'border-radius: 3px; font-weight: bold;">Active</span>'
            )
        return format_html(
            '<span style="background-color: gray; color: white; padding: 3px 10px; '
            'border-radius: 3px; font-weight: bold;">Inactive</span>'
        )
    is_active_badge.short_description = 'Status'

    actions = [
        'activate_series', 'deactivate_series',
        'cancel_future_classes', 'delete_future_classes',
    ]

    def activate_series(self, request, queryset):
        updated = queryset.update(is_active=True)
        self.message_user(request, f'{updated} series activated.')
    activate_series.short_description = 'Activate selected series'

    def deactivate_series(self, request, queryset):
        updated = queryset.update(is_active=False)
        self.message_user(request, f'{updated} series deactivated.')
    deactivate_series.short_description = 'Deactivate selected series'

    def cancel_future_classes(self, request, queryset):
        now = timezone.now()
        count = sum(services.cancel_instances_for_series(series.pk, now) for series in queryset)
        self.message_user(request, f'{count} future class(es) cancelled.')
    cancel_future_classes.short_description = 'Cancel all future classes of selected series'

    def delete_future_classes(self, request, queryset):
        now = timezone.now()
        count = sum(services.delete_instances_for_series(series.pk, now) for series in queryset)
        self.message_user(request, f'{count} future class(es) deleted.')
    delete_future_classes.short_description = 'Delete all future classes of selected series'

    def save_model(self, request, obj, form, change):
        if change:
            result = services.update_series(obj)
            if result['success']:
                self.message_user(request, f"{result['updated_count']} future class(es) updated.")
            else:
                self.message_user(request, f"Failed to update series: {result['error']}", messages.ERROR)
            return

        created_by = request.user.username if request.user.is_authenticated else 'admin'
        result = services.create_series_with_classes(obj, created_by=created_by)
        if result['success']:
            level = messages.SUCCESS if result['class_count'] else messages.WARNING
            self.message_user(request, f"Series created with {result['class_count']} classes.", level)
        else:
            self.message_user(request, f"Failed to create series: {result['error']}", messages.ERROR)

    def delete_model(self, request, obj):
        result = services.delete_series(obj)
        if not result['success']:
            self.message_user(request, f"Failed to delete series: {result['error']}", messages.ERROR)


@admin.register(YogaClass)
class YogaClassAdmin(admin.ModelAdmin):
    form = YogaClassForm
    list_display = [
        'class_name', 'start_time', 'instructor_name', 'room',
        'series', 'current_enrollment', 'status_badge'
    ]
    list_filter = ['is_cancelled', 'room__building', 'series', 'start_time']
    search_fields = ['class_name', 'class_description', 'instructor_name', 'series__series_name']
    date_hierarchy = 'start_time'
    readonly_fields = ['current_enrollment']

    fieldsets = (
        ('Class', {
            'fields': ('class_name', 'class_description', 'instructor_name', 'room', 'mats_provided')
        }),
        ('Schedule', {
            'fields': ('start_time', 'end_time', 'series', 'update_mode')
        }),
        ('Status', {
            'fields': ('is_cancelled', 'current_enrollment')
        }),
    )

    def status_badge(self, obj):
        if obj.is_cancelled:
            return format_html(
                '<span style="background-color: red; color: white; padding: 3px 10px; '
                'border-radius: 3px; font-weight: bold;">Cancelled</span>'
            )

        if obj.start_time <= timezone.now():
            return format_html(
                '<span style="background-color: gray; color: white; padding: 3px 10px; '
                'border-radius: 3px; font-weight: bold;">Past</span>'
            )

        return format_html(
            '<span style="background-color: #644874; color: white; padding: 3px 10px; '
            'border-radius: 3px; font-weight: bold;">Scheduled</span>'
        )
    status_badge.short_description = 'Status'

    actions = ['cancel_classes', 'uncancel_classes']

    def cancel_classes(self, request, queryset):
        count = 0
        for yoga_class in queryset.filter(is_cancelled=False):
            if services.cancel_class(yoga_class.pk)['success']:
                count += 1
        self.message_user(request, f'{count} class(es) cancelled.')
    cancel_classes.short_description = 'Cancel selected classes'

    def uncancel_classes(self, request, queryset):
        count = 0
        for yoga_class in queryset.filter(is_cancelled=True):
            if services.uncancel_class(yoga_class.pk)['success']:
                count += 1
        self.message_user(request, f'{count} class(es) reactivated.')
    uncancel_classes.short_description = 'Reactivate selected classes'

    def save_model(self, request, obj, form, change):
        if not change:
            result = services.create_class(obj)
        else:
            mode = form.cleaned_data.get('update_mode') or 'occurrence'
            result = services.update_class(obj, mode=mode)
            if result['success'] and mode == 'series':
                self.message_user(request, f"{result['updated_count']} future class(es) in series updated.")

        if not result['success']:
            self.message_user(request, f"Failed to save class: {result['error']}", messages.ERROR)
