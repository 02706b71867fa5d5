"""Scheduled departure (seat ledger) models"""
from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils import timezone

from ..utils.constants import ScheduleStatus, BusinessRules
from ..utils.money import format_minor_units
from ..utils.reference_codes import generate_schedule_code


class ScheduledDeparture(models.Model):
    """
    One scheduled trip instance and the source of truth for its capacity.

    Seat counters are only written through SeatLedger, which issues
    conditional UPDATEs; the check constraints below back that up at the
    database level.
    """
    route = models.ForeignKey('Route', on_delete=models.PROTECT, related_name='schedules')
    company = models.ForeignKey('TransportCompany', on_delete=models.PROTECT, related_name='schedules')
    schedule_code = models.CharField(max_length=32, unique=True, blank=True)
    departure_at = models.DateTimeField(db_index=True)
    estimated_arrival_at = models.DateTimeField(null=True, blank=True)
    total_seats = models.PositiveIntegerField(validators=[
        MinValueValidator(BusinessRules.MIN_TOTAL_SEATS),
        MaxValueValidator(BusinessRules.MAX_TOTAL_SEATS),
    ])
    booked_seats = models.PositiveIntegerField(default=0)
    available_seats = models.PositiveIntegerField()
    price_per_seat = models.PositiveIntegerField(validators=[
        MinValueValidator(BusinessRules.MIN_PRICE_PER_SEAT),
        MaxValueValidator(BusinessRules.MAX_PRICE_PER_SEAT),
    ])
    vehicle_number = models.CharField(max_length=20, blank=True, default='')
    driver_name = models.CharField(max_length=100, null=True, blank=True)
    driver_phone = models.CharField(max_length=20, null=True, blank=True)
    boarding_point = models.CharField(max_length=200, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=ScheduleStatus.CHOICES, default=ScheduleStatus.SCHEDULED)
    cancellation_reason = models.CharField(max_length=255, null=True, blank=True)
    delay_reason = models.CharField(max_length=255, null=True, blank=True)
    delay_minutes = models.PositiveIntegerField(default=0)
    last_updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['departure_at']
        indexes = [
            models.Index(fields=['route', 'departure_at', 'status'], name='schedule_route_dep_status_idx'),
            models.Index(fields=['company', 'departure_at'], name='schedule_company_dep_idx'),
            models.Index(fields=['departure_at', 'status'], name='schedule_dep_status_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(booked_seats__gte=0) & Q(booked_seats__lte=F('total_seats')),
                name='schedule_booked_seats_within_total',
            ),
            models.CheckConstraint(
                condition=Q(available_seats=F('total_seats') - F('booked_seats')),
                name='schedule_available_seats_derived',
            ),
            models.CheckConstraint(
                condition=Q(total_seats__gte=BusinessRules.MIN_TOTAL_SEATS)
                & Q(total_seats__lte=BusinessRules.MAX_TOTAL_SEATS),
                name='schedule_total_seats_range',
            ),
        ]

    def __str__(self):
        return f"{self.schedule_code or 'unsaved schedule'} ({self.status})"

    def save(self, *args, **kwargs):
        if self._state.adding and self.available_seats is None:
            self.available_seats = self.total_seats - self.booked_seats
        if not self.schedule_code:
            self.schedule_code = generate_schedule_code(self.departure_at)
        if self.vehicle_number:
            self.vehicle_number = self.vehicle_number.strip().upper()
        super().save(*args, **kwargs)

    def clean(self):
        if self.booked_seats > self.total_seats:
            raise ValidationError("Cannot book more seats than available")
        if self._state.adding and self.departure_at and self.departure_at <= timezone.now():
            raise ValidationError("Departure date must be in the future")

    @property
    def price_display(self):
        return format_minor_units(self.price_per_seat)

    def is_full(self):
        return self.available_seats == 0

    def is_locked(self):
        return self.status in ScheduleStatus.LOCKED

    def has_departed(self, now=None):
        return self.departure_at <= (now or timezone.now())

    def is_bookable(self, now=None):
        return (
            self.status == ScheduleStatus.SCHEDULED
            and self.available_seats > 0
            and not self.has_departed(now)
        )

    def can_transition_to(self, new_status):
        return new_status in ScheduleStatus.TRANSITIONS.get(self.status, set())
