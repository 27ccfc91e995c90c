from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    path('trends/', views.trends, name='trends'),
    path('calendar/', views.calendar_view, name='calendar'),
]
