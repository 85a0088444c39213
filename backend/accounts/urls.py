from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    # Profile
    path('profile/', views.profile_view, name='profile'),

    # Registrations
    path('classes/<int:class_id>/register/', views.register_class, name='register_class'),
    path('classes/<int:class_id>/unregister/', views.unregister_class, name='unregister_class'),
]
