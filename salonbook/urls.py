"""
URL configuration for the Salonbook booking platform.
"""
from django.contrib import admin
from django.conf import settings
from django.urls import path, include

urlpatterns = [
    path(settings.ADMIN_URL, admin.site.urls),
    path('availability/', include('apps.availability.urls', namespace='availability')),
    path('bookings/', include('apps.bookings.urls', namespace='bookings')),
]
