from django.contrib import admin
from .models import Salon


@admin.register(Salon)
class SalonAdmin(admin.ModelAdmin):
    list_display = ['name', 'phone', 'holiday_policy', 'is_active', 'deleted_at']
    list_filter = ['holiday_policy', 'is_active']
    search_fields = ['name', 'phone', 'email']
    readonly_fields = ['id', 'created_at', 'updated_at', 'deleted_at']
