"""
Availability URLs.

  /availability/api/slots/      Bookable start times for a service on a date
  /availability/api/nearest/    First bookable start at or after a moment
  /availability/api/check/      Authoritative check of one slot (auto-assigns)
  /availability/api/assign/     First free eligible employee for a slot
  /availability/api/holidays/   Salon closures for a year
"""
from django.urls import path
from . import views

app_name = 'availability'

urlpatterns = [
    path('api/slots/',    views.api_slots,    name='api_slots'),
    path('api/nearest/',  views.api_nearest,  name='api_nearest'),
    path('api/check/',    views.api_check,    name='api_check'),
    path('api/assign/',   views.api_assign,   name='api_assign'),
    path('api/holidays/', views.api_holidays, name='api_holidays'),
]
