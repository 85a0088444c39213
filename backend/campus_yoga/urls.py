from django.contrib import admin
from django.urls import path, include
from django.shortcuts import redirect
from .admin_config import configure_admin

configure_admin()


def root_redirect(request):
    """Redirect root URL to the class schedule."""
    return redirect('classes:schedule')


urlpatterns = [
    path('accounts/', include('accounts.urls')),  # Registrations & profile
    path('admin/', admin.site.urls),
    path('schedule/', include('classes.urls')),  # Public class schedule

    path('', root_redirect, name='root'),
]
