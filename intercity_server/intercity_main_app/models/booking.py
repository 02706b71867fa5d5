"""Booking-related models"""
import json
from datetime import timedelta

from django.db import models
from django.db.models import Q
from django.contrib.auth.models import User
from django.utils import timezone

from ..utils.constants import (
    BookingStatus, PaymentStatus, PaymentMethod, BookingSource, IdType, BusinessRules,
)
from ..utils.money import format_minor_units


class Booking(models.Model):
    booking_reference = models.CharField(max_length=40, unique=True)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='intercity_bookings')
    schedule = models.ForeignKey('ScheduledDeparture', on_delete=models.PROTECT, related_name='bookings')
    # Captured at booking time, never rewritten
    route = models.ForeignKey('Route', on_delete=models.PROTECT, related_name='bookings')
    company = models.ForeignKey('TransportCompany', on_delete=models.PROTECT, related_name='bookings')

    passenger_full_name = models.CharField(max_length=150)
    passenger_email = models.EmailField()
    passenger_phone = models.CharField(max_length=20)
    next_of_kin = models.JSONField(null=True, blank=True)
    id_type = models.CharField(max_length=30, choices=IdType.CHOICES, null=True, blank=True)
    id_number = models.CharField(max_length=50, null=True, blank=True)

    number_of_seats = models.PositiveSmallIntegerField()
    seat_numbers = models.JSONField(default=list, blank=True)
    special_requests = models.TextField(null=True, blank=True)

    total_amount = models.PositiveIntegerField()
    amount_paid = models.PositiveIntegerField(default=0)
    payment_status = models.CharField(max_length=20, choices=PaymentStatus.CHOICES, default=PaymentStatus.PENDING)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.CHOICES, null=True, blank=True)
    payment_reference = models.CharField(max_length=100, null=True, blank=True)

    status = models.CharField(max_length=20, choices=BookingStatus.CHOICES, default=BookingStatus.CONFIRMED)
    booking_source = models.CharField(max_length=20, choices=BookingSource.CHOICES, default=BookingSource.MOBILE)

    cancellation_date = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.CharField(max_length=255, null=True, blank=True)
    checked_in_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['user', '-created_at'], name='booking_user_created_idx'),
            models.Index(fields=['company', '-created_at'], name='booking_company_created_idx'),
            models.Index(fields=['schedule', 'status'], name='booking_schedule_status_idx'),
            models.Index(fields=['passenger_email'], name='booking_passenger_email_idx'),
            models.Index(fields=['passenger_phone'], name='booking_passenger_phone_idx'),
            models.Index(fields=['payment_status', 'status'], name='booking_payment_status_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(number_of_seats__gte=1) & Q(number_of_seats__lte=BusinessRules.MAX_SEATS_PER_BOOKING),
                name='booking_number_of_seats_range',
            ),
        ]

    def __str__(self):
        return f"{self.booking_reference} - {self.passenger_full_name} ({self.status})"

    @property
    def total_amount_display(self):
        return format_minor_units(self.total_amount)

    @property
    def outstanding_amount(self):
        return self.total_amount - self.amount_paid

    def is_cancellable(self):
        return self.status not in BookingStatus.NON_CANCELLABLE

    def is_refundable(self, now=None):
        """Advisory only; the payment collaborator makes the actual refund call"""
        if self.status not in BookingStatus.REFUNDABLE:
            return False
        elapsed = (now or timezone.now()) - self.created_at
        return elapsed <= timedelta(hours=BusinessRules.REFUND_WINDOW_HOURS)

    def holds_seats(self):
        return self.status in BookingStatus.SEAT_HOLDING

    def qr_payload(self):
        return json.dumps({
            'bookingId': str(self.pk),
            'reference': self.booking_reference,
            'passenger': self.passenger_full_name,
            'scheduleId': str(self.schedule_id),
        })
