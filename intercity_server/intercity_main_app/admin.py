from django.contrib import admin
from .models import TransportCompany, Route, ScheduledDeparture, Booking, Notification

# Customize admin site
admin.site.site_header = "Intercity Booking Administration"
admin.site.site_title = "Intercity Admin"
admin.site.index_title = "Welcome to the Intercity Admin Panel"


@admin.register(TransportCompany)
class TransportCompanyAdmin(admin.ModelAdmin):
    list_display = ['id', 'company_name', 'rc_number', 'contact_email', 'is_verified', 'is_active', 'total_bookings', 'created_at']
    list_filter = ['is_verified', 'is_active']
    search_fields = ['company_name', 'rc_number', 'contact_email', 'platform_user__username']
    ordering = ['company_name']
    list_per_page = 50
    readonly_fields = ['total_bookings', 'created_at']


@admin.register(Route)
class RouteAdmin(admin.ModelAdmin):
    list_display = ['id', 'route_name', 'departure_city', 'arrival_city', 'company', 'estimated_duration_minutes', 'is_active']
    list_filter = ['is_active', 'departure_state', 'arrival_state', 'company']
    search_fields = ['route_name', 'departure_city', 'arrival_city', 'company__company_name']
    ordering = ['departure_state', 'arrival_state']
    list_per_page = 50


@admin.register(ScheduledDeparture)
class ScheduledDepartureAdmin(admin.ModelAdmin):
    list_display = ['id', 'schedule_code', 'route', 'company', 'departure_at', 'status', 'total_seats', 'booked_seats', 'available_seats', 'get_price']
    list_filter = ['status', 'company', 'departure_at']
    search_fields = ['schedule_code', 'vehicle_number', 'route__route_name', 'company__company_name']
    ordering = ['-departure_at']
    date_hierarchy = 'departure_at'
    list_per_page = 50
    # Seat counters only move through SeatLedger
    readonly_fields = ['schedule_code', 'booked_seats', 'available_seats', 'created_at', 'updated_at']

    def get_price(self, obj):
        return obj.price_display
    get_price.short_description = 'Price'


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ['id', 'booking_reference', 'user', 'schedule', 'number_of_seats', 'total_amount', 'status', 'payment_status', 'booking_source', 'created_at']
    list_filter = ['status', 'payment_status', 'payment_method', 'booking_source', 'created_at']
    search_fields = ['booking_reference', 'user__username', 'passenger_full_name', 'passenger_email', 'passenger_phone']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    list_per_page = 50
    readonly_fields = [
        'booking_reference', 'schedule', 'route', 'company', 'number_of_seats', 'total_amount',
        'status', 'cancellation_date', 'checked_in_at', 'completed_at', 'created_at', 'updated_at',
    ]

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'type', 'title', 'read', 'created_at']
    list_filter = ['type', 'read']
    search_fields = ['user__username', 'title', 'dedupe_key']
    ordering = ['-created_at']
    list_per_page = 50
