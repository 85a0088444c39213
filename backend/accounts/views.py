from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.shortcuts import render, redirect
from django.utils import timezone
from django.utils.http import url_has_allowed_host_and_scheme

from .services import (
    get_user_past_classes,
    get_user_upcoming_classes,
    register_for_class,
    unregister_from_class,
)


def _redirect_back(request, default='accounts:profile'):
    next_url = request.POST.get('next') or request.GET.get('next')
    if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        return redirect(next_url)
    return redirect(default)


@login_required
def profile_view(request):
    """Profile page with the student's upcoming and past classes"""
    now = timezone.now()

    upcoming_registrations = get_user_upcoming_classes(request.user, now)
    past_registrations = get_user_past_classes(request.user, now)

    context = {
        'upcoming_registrations': upcoming_registrations,
        'past_registrations': past_registrations,
        'title': 'My Classes'
    }

    return render(request, 'accounts/profile.html', context)


@login_required
def register_class(request, class_id):
    """Sign the logged-in student up for a class"""
    if request.method != 'POST':
        return redirect('classes:schedule')

    result = register_for_class(request.user, class_id)
    if result['success']:
        messages.success(request, 'You are registered for this class.')
    else:
        messages.error(request, result['error'])

    return _redirect_back(request)


@login_required
def unregister_class(request, class_id):
    """Withdraw the logged-in student from a class"""
    if request.method != 'POST':
        return redirect('classes:schedule')

    result = unregister_from_class(request.user, class_id)
    if result['success']:
        messages.success(request, 'Your registration was cancelled.')
    else:
        messages.error(request, result['error'])

    return _redirect_back(request)
