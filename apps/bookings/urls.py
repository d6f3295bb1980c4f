"""
Booking URLs.

  /bookings/api/create/                        Client booking (login required)
  /bookings/api/staff/create/                  Staff-entered booking
  /bookings/api/<kind>/<uuid>/cancel/          Cancel (owner or staff)
  /bookings/api/<kind>/<uuid>/confirm/         Confirm (staff)
  /bookings/api/<kind>/<uuid>/complete/        Mark delivered (staff)
  /bookings/api/<kind>/<uuid>/reschedule/      Move to a new start (staff)
"""
from django.urls import path
from . import views

app_name = 'bookings'

urlpatterns = [
    # ── Creation ───────────────────────────────────────────────────────────────
    path('api/create/',        views.api_create,       name='api_create'),
    path('api/staff/create/',  views.api_staff_create, name='api_staff_create'),

    # ── Lifecycle ──────────────────────────────────────────────────────────────
    path('api/<str:kind>/<uuid:booking_id>/cancel/',     views.api_cancel,     name='api_cancel'),
    path('api/<str:kind>/<uuid:booking_id>/confirm/',    views.api_confirm,    name='api_confirm'),
    path('api/<str:kind>/<uuid:booking_id>/complete/',   views.api_complete,   name='api_complete'),
    path('api/<str:kind>/<uuid:booking_id>/reschedule/', views.api_reschedule, name='api_reschedule'),
]
