from django.contrib import admin
from .models import ClientBooking, StaffBooking, BookingStatusLog


class BookingAdminMixin:
    """
    Read-mostly: intervals and statuses change through the booking workflow,
    which re-checks availability; the admin only edits notes.
    """
    list_filter = ['status', 'salon', 'employee']
    readonly_fields = [
        'id', 'salon', 'employee', 'service', 'start_at', 'end_at', 'status',
        'created_at', 'updated_at',
    ]
    date_hierarchy = 'start_at'

    def short_id(self, obj):
        return obj.id_short
    short_id.short_description = 'ID'

    def has_add_permission(self, request):
        return False


@admin.register(ClientBooking)
class ClientBookingAdmin(BookingAdminMixin, admin.ModelAdmin):
    list_display = ['short_id', 'client', 'salon', 'service', 'employee', 'start_at', 'status']
    search_fields = ['client__username', 'client__email', 'employee__full_name', 'service__name']
    fieldsets = (
        ('Booking', {'fields': ('id', 'salon', 'service', 'employee', 'client')}),
        ('Schedule', {'fields': ('start_at', 'end_at')}),
        ('Status', {'fields': ('status', 'notes')}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )


@admin.register(StaffBooking)
class StaffBookingAdmin(BookingAdminMixin, admin.ModelAdmin):
    list_display = [
        'short_id', 'client_full_name', 'client_phone', 'salon', 'service',
        'employee', 'start_at', 'status', 'created_by',
    ]
    search_fields = ['client_full_name', 'client_phone', 'employee__full_name', 'service__name']
    fieldsets = (
        ('Booking', {'fields': ('id', 'salon', 'service', 'employee', 'created_by')}),
        ('Client', {'fields': ('client_full_name', 'client_phone')}),
        ('Schedule', {'fields': ('start_at', 'end_at')}),
        ('Status', {'fields': ('status', 'notes')}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )


@admin.register(BookingStatusLog)
class BookingStatusLogAdmin(admin.ModelAdmin):
    list_display = ['booking_kind', 'booking_id', 'from_status', 'to_status', 'changed_by', 'changed_at']
    list_filter = ['booking_kind', 'to_status']
    readonly_fields = [
        'id', 'booking_kind', 'booking_id', 'from_status', 'to_status',
        'changed_by', 'reason', 'changed_at',
    ]
    search_fields = ['booking_id', 'changed_by']
