from django.urls import path
from . import views

app_name = 'classes'

urlpatterns = [
    path('', views.schedule, name='schedule'),
    path('explore/', views.explore, name='explore'),
    path('classes/<int:class_id>/', views.class_page, name='class_page'),
    path('classes/<int:class_id>/json/', views.class_detail, name='class_detail'),
    path('dashboard/', views.dashboard, name='dashboard'),
]
