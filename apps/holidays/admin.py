from django.contrib import admin
from .models import Holiday


@admin.register(Holiday)
class HolidayAdmin(admin.ModelAdmin):
    list_display = ['name', 'salon', 'month', 'day', 'kind']
    list_filter = ['salon', 'kind', 'month']
    search_fields = ['name']
