from django.contrib import admin
from .models import Employee, WorkingHour


class WorkingHourInline(admin.TabularInline):
    model = WorkingHour
    extra = 1


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'salon', 'phone', 'is_active', 'deleted_at']
    list_filter = ['salon', 'is_active']
    search_fields = ['full_name', 'salon__name', 'phone']
    list_editable = ['is_active']
    filter_horizontal = ['services']
    readonly_fields = ['id', 'created_at', 'updated_at', 'deleted_at']
    inlines = [WorkingHourInline]
    fieldsets = (
        ('Employee Info', {'fields': ('id', 'salon', 'full_name', 'phone', 'note')}),
        ('Services', {'fields': ('services',)}),
        ('Status', {'fields': ('is_active',)}),
        ('Audit', {'fields': ('created_at', 'updated_at', 'deleted_at'), 'classes': ('collapse',)}),
    )


@admin.register(WorkingHour)
class WorkingHourAdmin(admin.ModelAdmin):
    list_display = ['employee', 'weekday', 'start_time', 'end_time', 'break_start', 'break_end']
    list_filter = ['employee__salon', 'weekday']
    search_fields = ['employee__full_name']
