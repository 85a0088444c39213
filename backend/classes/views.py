from datetime import datetime, time, timedelta

from django.contrib.admin.views.decorators import staff_member_required
from django.http import Http404, JsonResponse
from django.shortcuts import render
from django.urls import reverse
from django.utils import timezone

from accounts.services import get_registration_status
from .calendar_grid import (
    build_month_calendar,
    build_week_calendar,
    is_past,
    month_grid_days,
    parse_month_params,
    week_days,
)
from .explore import TIME_OF_DAY_CHOICES, TIME_OF_DAY_HOURS, filter_series, parse_mats_param
from .models import ClassSeries, YogaClass
from .services import dashboard_stats
from .timeutils import campus_today, format_display_time, localize_wall_clock, parse_date, to_campus


def _classes_between(first_day, last_day):
    """Classes starting on any campus-local day in ``[first_day, last_day]``."""
    start = localize_wall_clock(datetime.combine(first_day, time.min))
    end = localize_wall_clock(
        datetime.combine(last_day + timedelta(days=1), time.min)
    )
    return YogaClass.objects.filter(
        start_time__gte=start,
        start_time__lt=end,
    ).select_related('room__building', 'series')


def _toggle_query(request, key, value):
    """Current query string with ``value`` added to or removed from ``key``."""
    params = request.GET.copy()
    values = params.getlist(key)
    if value in values:
        values.remove(value)
    else:
        values.append(value)
    params.setlist(key, values)
    return params.urlencode()


def schedule(request):
    """Public class schedule in month or week view"""
    now = timezone.now()
    today = campus_today(now)
    view_mode = request.GET.get('view', 'month')

    if view_mode == 'week':
        reference = parse_date(request.GET.get('date')) or today
        days = week_days(reference)
        classes = _classes_between(days[0], days[-1])
        calendar_data = build_week_calendar(classes, reference, now=now)
    else:
        view_mode = 'month'
        year, month = parse_month_params(request.GET, today)
        days = month_grid_days(year, month)
        classes = _classes_between(days[0], days[-1])
        calendar_data = build_month_calendar(
            classes,
            year,
            month,
            now=now,
            expanded_days=request.GET.getlist('expand'),
            past_days=request.GET.getlist('past'),
        )
        for week in calendar_data['weeks']:
            for cell in week:
                cell['expand_query'] = _toggle_query(request, 'expand', cell['date_string'])
                cell['past_query'] = _toggle_query(request, 'past', cell['date_string'])

    context = {
        'view_mode': view_mode,
        'calendar': calendar_data,
        'today': today,
        'expanded_days': request.GET.getlist('expand'),
        'past_days': request.GET.getlist('past'),
    }

    return render(request, 'classes/schedule.html', context)


def explore(request):
    """Active series, filterable by time of day and mats"""
    now = timezone.now()
    selected_times = [t for t in request.GET.getlist('time') if t in TIME_OF_DAY_HOURS]
    mats_param = request.GET.get('mats', '')

    active_series = ClassSeries.objects.filter(is_active=True).select_related('room__building')
    series_list = filter_series(
        active_series,
        time_of_day=selected_times,
        mats_provided=parse_mats_param(mats_param),
    )

    entries = []
    for series in series_list:
        entries.append({
            'series': series,
            'start_label': format_display_time(series.start_time),
            'end_label': format_display_time(series.end_time),
            'next_class': series.future_classes(now).filter(is_cancelled=False).order_by('start_time').first(),
        })

    context = {
        'entries': entries,
        'time_choices': TIME_OF_DAY_CHOICES,
        'selected_times': selected_times,
        'mats': mats_param,
    }

    return render(request, 'classes/explore.html', context)


def _get_class(class_id):
    return YogaClass.objects.select_related('room__building', 'series').filter(pk=class_id).first()


def _registration_context(request, yoga_class):
    """Registration state of the viewer plus whether sign-up is still open."""
    status = get_registration_status(request.user, yoga_class.pk)
    open_for_changes = not yoga_class.is_cancelled and not is_past(yoga_class)
    return {
        **status,
        'can_register': status['is_authenticated'] and not status['is_registered'] and open_for_changes,
        'can_unregister': status['is_registered'] and open_for_changes,
    }


def class_detail(request, class_id):
    """Class details plus the viewer's registration status, as JSON"""
    yoga_class = _get_class(class_id)
    if yoga_class is None:
        return JsonResponse({'error': 'Class not found'}, status=404)

    registration = _registration_context(request, yoga_class)
    local_start = to_campus(yoga_class.start_time)

    return JsonResponse({
        'id': yoga_class.pk,
        'class_name': yoga_class.class_name,
        'class_description': yoga_class.class_description,
        'instructor_name': yoga_class.instructor_name,
        'date': local_start.strftime('%Y-%m-%d'),
        'start_time': format_display_time(yoga_class.start_time),
        'end_time': format_display_time(yoga_class.end_time),
        'mats_provided': yoga_class.mats_provided,
        'is_cancelled': yoga_class.is_cancelled,
        'is_past': is_past(yoga_class),
        'current_enrollment': yoga_class.current_enrollment,
        'series_name': yoga_class.series.series_name if yoga_class.series else None,
        'location': {
            'room': yoga_class.room.room_name,
            'building': yoga_class.room.building.building_name,
            'address': yoga_class.room.building.building_address,
        },
        'is_authenticated': registration['is_authenticated'],
        'is_registered': registration['is_registered'],
        'can_register': registration['can_register'],
    })


def class_page(request, class_id):
    """Class details with the register / unregister buttons"""
    yoga_class = _get_class(class_id)
    if yoga_class is None:
        raise Http404('Class not found')

    local_start = to_campus(yoga_class.start_time)
    back_url = f"{reverse('classes:schedule')}?view=week&date={local_start.strftime('%Y-%m-%d')}"

    context = {
        'yoga_class': yoga_class,
        'date': local_start.date(),
        'start_label': format_display_time(yoga_class.start_time),
        'end_label': format_display_time(yoga_class.end_time),
        'is_past': is_past(yoga_class),
        'back_url': back_url,
        **_registration_context(request, yoga_class),
    }

    return render(request, 'classes/class_detail.html', context)


@staff_member_required
def dashboard(request):
    """Admin overview of upcoming classes and active series"""
    now = timezone.now()

    upcoming_classes = YogaClass.objects.filter(
        start_time__gte=now
    ).select_related('room__building', 'series').order_by('start_time')[:100]

    active_series = ClassSeries.objects.filter(is_active=True).select_related('room__building')

    reference = parse_date(request.GET.get('date')) or campus_today(now)
    days = week_days(reference)
    week = build_week_calendar(_classes_between(days[0], days[-1]), reference, now=now)

    context = {
        'stats': dashboard_stats(now),
        'upcoming_classes': upcoming_classes,
        'active_series': active_series,
        'calendar': week,
    }

    return render(request, 'classes/dashboard.html', context)
