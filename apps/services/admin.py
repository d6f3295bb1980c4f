from django.contrib import admin
from .models import Service


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ['name', 'salon', 'duration_minutes', 'price', 'is_active']
    list_filter = ['salon', 'is_active']
    search_fields = ['name']
    readonly_fields = ['id', 'created_at', 'updated_at', 'deleted_at']
