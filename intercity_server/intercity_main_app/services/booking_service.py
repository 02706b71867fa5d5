"""Booking service - business logic for booking operations"""
import logging
from functools import partial

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import transaction, IntegrityError, DatabaseError
from django.db.models import F
from django.utils import timezone

from ..models import Booking, ScheduledDeparture, TransportCompany
from ..utils.constants import (
    BookingStatus, BookingSource, PaymentStatus, ScheduleStatus, BusinessRules, IdType, PaymentMethod,
)
from ..utils.money import multiply_price
from ..utils.reference_codes import generate_booking_reference
from .exceptions import (
    BookingValidationError,
    ResourceNotFoundError,
    InsufficientCapacityError,
    AlreadyCancelledError,
    NotCancellableError,
    InvalidTransitionError,
    ReferenceGenerationExhaustedError,
)
from .notification_service import NotificationService
from .seat_ledger import SeatLedger
from .transactions import atomic_unit

logger = logging.getLogger(__name__)

REQUIRED_PASSENGER_FIELDS = ('full_name', 'email', 'phone')
ID_TYPES = {value for value, _ in IdType.CHOICES}
PAYMENT_METHODS = {value for value, _ in PaymentMethod.CHOICES}
BOOKING_SOURCES = {value for value, _ in BookingSource.CHOICES}


def normalize_passenger_details(details):
    """
    Trim passenger fields and lower-case the email.

    Raises:
        BookingValidationError: a required field is missing or the email is invalid
    """
    if not isinstance(details, dict):
        raise BookingValidationError("Passenger details are required")

    normalized = {}
    for field in REQUIRED_PASSENGER_FIELDS:
        value = details.get(field)
        value = value.strip() if isinstance(value, str) else ''
        if not value:
            raise BookingValidationError(f"Passenger {field.replace('_', ' ')} is required")
        normalized[field] = value

    normalized['email'] = normalized['email'].lower()
    try:
        validate_email(normalized['email'])
    except DjangoValidationError:
        raise BookingValidationError("Passenger email is invalid")

    id_type = details.get('id_type')
    if id_type and id_type not in ID_TYPES:
        raise BookingValidationError(f"Unsupported id type '{id_type}'")
    normalized['id_type'] = id_type or None
    normalized['id_number'] = (details.get('id_number') or '').strip() or None
    normalized['next_of_kin'] = details.get('next_of_kin') or None
    return normalized


def normalize_seat_numbers(seat_numbers, number_of_seats):
    if not seat_numbers:
        return []

    cleaned = [str(seat).strip().upper() for seat in seat_numbers if str(seat).strip()]
    if len(set(cleaned)) != len(cleaned):
        raise BookingValidationError("Seat numbers must be unique")
    if len(cleaned) > number_of_seats:
        raise BookingValidationError("More seat numbers than seats requested")
    return cleaned


class BookingService:
    """
    Transaction coordinator for reservations.

    Owns both sides of a booking: the Booking row and the seat counters on its
    ScheduledDeparture change in one atomic unit, never through model hooks.
    """

    def __init__(self, ledger=None, notifier=None):
        self.ledger = ledger or SeatLedger()
        self.notifier = notifier or NotificationService()

    def create_booking(self, user, schedule_id, passenger_details, number_of_seats, seat_numbers=None,
                       special_requests=None, payment_method=None, booking_source=BookingSource.MOBILE, now=None):
        """
        Create a confirmed booking with atomic seat reduction

        Args:
            user: User making the booking
            schedule_id: ScheduledDeparture ID
            passenger_details: dict with full_name, email, phone (+ optional id/next of kin)
            number_of_seats: Seats requested, 1-10
            seat_numbers: Optional preferred seat labels
            special_requests: Free text for the operator
            payment_method: Optional PaymentMethod choice
            booking_source: BookingSource choice

        Returns:
            Booking object

        Raises:
            ResourceNotFoundError: Unknown schedule
            BookingValidationError: Bad input, or schedule not open for booking
            InsufficientCapacityError: If not enough seats available
            ReferenceGenerationExhaustedError: Reference collisions on every attempt
            TransactionTimeoutError: The store could not complete in time
        """
        passenger = normalize_passenger_details(passenger_details)
        self.ledger.validate_seat_count(number_of_seats)
        seats = normalize_seat_numbers(seat_numbers, number_of_seats)
        if payment_method and payment_method not in PAYMENT_METHODS:
            raise BookingValidationError(f"Unsupported payment method '{payment_method}'")
        if booking_source not in BOOKING_SOURCES:
            raise BookingValidationError(f"Unsupported booking source '{booking_source}'")
        now = now or timezone.now()

        with atomic_unit('create_booking'):
            schedule = ScheduledDeparture.objects.select_for_update().filter(pk=schedule_id).first()
            if schedule is None:
                raise ResourceNotFoundError("Schedule not found")

            if schedule.status != ScheduleStatus.SCHEDULED:
                raise BookingValidationError("Schedule is not available for booking")
            if schedule.has_departed(now):
                raise BookingValidationError("Schedule has already departed")
            if schedule.available_seats < number_of_seats:
                raise InsufficientCapacityError(f"Only {schedule.available_seats} seats available")
            if seats:
                self._ensure_seats_free(schedule, seats)

            total_amount = multiply_price(schedule.price_per_seat, number_of_seats)

            booking = self._insert_booking(
                user=user,
                schedule=schedule,
                route_id=schedule.route_id,
                company_id=schedule.company_id,
                passenger_full_name=passenger['full_name'],
                passenger_email=passenger['email'],
                passenger_phone=passenger['phone'],
                next_of_kin=passenger['next_of_kin'],
                id_type=passenger['id_type'],
                id_number=passenger['id_number'],
                number_of_seats=number_of_seats,
                seat_numbers=seats,
                special_requests=special_requests or None,
                total_amount=total_amount,
                payment_status=PaymentStatus.PENDING,
                payment_method=payment_method or None,
                status=BookingStatus.CONFIRMED,
                booking_source=booking_source,
                created_at=now,
            )

            # Reduce seats atomically
            self.ledger.reserve(schedule, number_of_seats)

            transaction.on_commit(partial(self._bump_company_bookings, schedule.company_id))
            self.notifier.booking_confirmed(booking)

        booking.schedule = schedule
        logger.info(f'[BOOKING] {booking.booking_reference} confirmed: {number_of_seats} seats on schedule {schedule.pk}')
        return booking

    def _ensure_seats_free(self, schedule, seats):
        taken = set()
        held = Booking.objects.filter(
            schedule=schedule, status__in=BookingStatus.SEAT_HOLDING
        ).values_list('seat_numbers', flat=True)
        for numbers in held:
            taken.update(numbers or [])

        clash = sorted(taken.intersection(seats))
        if clash:
            raise InsufficientCapacityError(f"Seats already taken: {', '.join(clash)}")

    def _insert_booking(self, **fields):
        """Insert with a fresh reference, regenerating on unique-constraint collisions"""
        for attempt in range(1, BusinessRules.BOOKING_REFERENCE_MAX_ATTEMPTS + 1):
            reference = generate_booking_reference()
            try:
                with transaction.atomic():
                    return Booking.objects.create(booking_reference=reference, **fields)
            except IntegrityError:
                if not Booking.objects.filter(booking_reference=reference).exists():
                    raise
                logger.warning(f'[BOOKING] Reference collision on {reference} (attempt {attempt})')

        raise ReferenceGenerationExhaustedError()

    def _bump_company_bookings(self, company_id):
        # Best-effort statistic, outside the booking's consistency boundary
        try:
            TransportCompany.objects.filter(pk=company_id).update(total_bookings=F('total_bookings') + 1)
        except DatabaseError as e:
            logger.warning(f'[BOOKING] Could not bump total_bookings for company {company_id}: {e}')

    def get_booking(self, user, booking_id):
        booking = Booking.objects.select_related(
            'schedule', 'route', 'company'
        ).filter(pk=booking_id, user=user).first()
        if booking is None:
            raise ResourceNotFoundError("Booking not found")
        return booking

    def list_bookings(self, user, status=None):
        bookings = Booking.objects.select_related('schedule', 'route', 'company').filter(user=user)
        if status:
            bookings = bookings.filter(status=status)
        return bookings.order_by('-created_at')

    def cancel_booking(self, user, booking_id, reason=None, now=None):
        """Passenger cancellation, scoped to the caller's own bookings"""
        return self._cancel(
            {'pk': booking_id, 'user': user},
            reason or BusinessRules.DEFAULT_PASSENGER_CANCEL_REASON,
            now,
        )

    def cancel_booking_by_id(self, booking_id, reason=None, now=None):
        """Operator-side cancellation used by schedule cancellation"""
        return self._cancel(
            {'pk': booking_id},
            reason or BusinessRules.DEFAULT_SCHEDULE_CANCEL_REASON,
            now,
        )

    def _cancel(self, lookup, reason, now=None):
        """Cancel booking and restore seats atomically"""
        with atomic_unit('cancel_booking'):
            booking = Booking.objects.select_for_update().filter(**lookup).first()
            if booking is None:
                raise ResourceNotFoundError("Booking not found")

            if booking.status == BookingStatus.CANCELLED:
                raise AlreadyCancelledError()
            if not booking.is_cancellable():
                raise NotCancellableError(f"Cannot cancel booking with status: {booking.status}")

            held_seats = booking.holds_seats()

            booking.status = BookingStatus.CANCELLED
            booking.cancellation_date = now or timezone.now()
            booking.cancellation_reason = reason
            booking.save(update_fields=['status', 'cancellation_date', 'cancellation_reason', 'updated_at'])

            if held_seats:
                self.ledger.release(booking.schedule, booking.number_of_seats)

            self.notifier.booking_cancelled(booking)

        logger.info(f'[BOOKING] {booking.booking_reference} cancelled: {reason}')
        return booking

    def _get_company_booking_for_update(self, company, booking_id):
        booking = Booking.objects.select_for_update().filter(pk=booking_id, company=company).first()
        if booking is None:
            raise ResourceNotFoundError("Booking not found")
        return booking

    def check_in(self, company, booking_id, now=None):
        with atomic_unit('check_in'):
            booking = self._get_company_booking_for_update(company, booking_id)
            if booking.status != BookingStatus.CONFIRMED:
                raise InvalidTransitionError(f"Cannot check in booking with status: {booking.status}")

            booking.status = BookingStatus.CHECKED_IN
            booking.checked_in_at = now or timezone.now()
            booking.save(update_fields=['status', 'checked_in_at', 'updated_at'])

        logger.info(f'[BOOKING] {booking.booking_reference} checked in')
        return booking

    def complete_booking(self, company, booking_id, now=None):
        with atomic_unit('complete_booking'):
            booking = self._get_company_booking_for_update(company, booking_id)
            if booking.status != BookingStatus.CHECKED_IN:
                raise InvalidTransitionError(f"Cannot complete booking with status: {booking.status}")

            booking.status = BookingStatus.COMPLETED
            booking.completed_at = now or timezone.now()
            booking.save(update_fields=['status', 'completed_at', 'updated_at'])

        return booking

    def mark_no_show(self, company, booking_id):
        """A no-show stops holding seats, so its seats go back to the ledger"""
        with atomic_unit('mark_no_show'):
            booking = self._get_company_booking_for_update(company, booking_id)
            if booking.status != BookingStatus.CONFIRMED:
                raise InvalidTransitionError(f"Cannot mark booking with status {booking.status} as no-show")

            booking.status = BookingStatus.NO_SHOW
            booking.save(update_fields=['status', 'updated_at'])
            self.ledger.release(booking.schedule, booking.number_of_seats)

        logger.info(f'[BOOKING] {booking.booking_reference} marked no-show')
        return booking

    def list_company_bookings(self, company, status=None, schedule_id=None, start_date=None, end_date=None):
        bookings = Booking.objects.select_related('schedule', 'route').filter(company=company)
        if status:
            bookings = bookings.filter(status=status)
        if schedule_id:
            bookings = bookings.filter(schedule_id=schedule_id)
        if start_date:
            bookings = bookings.filter(created_at__date__gte=start_date)
        if end_date:
            bookings = bookings.filter(created_at__date__lte=end_date)
        return bookings.order_by('-created_at')

    def record_payment_result(self, booking_reference, succeeded, amount=None, payment_reference=None,
                              payment_method=None):
        """
        Apply an asynchronous report from the payment collaborator.

        Only the payment axis changes; lifecycle status and seats are untouched.
        A replayed report (same payment_reference, same outcome) is ignored.
        """
        if payment_method and payment_method not in PAYMENT_METHODS:
            raise BookingValidationError(f"Unsupported payment method '{payment_method}'")

        with atomic_unit('record_payment'):
            booking = Booking.objects.select_for_update().filter(
                booking_reference=str(booking_reference).strip().upper()
            ).first()
            if booking is None:
                raise ResourceNotFoundError("Booking not found")

            applied = (PaymentStatus.PAID, PaymentStatus.PARTIAL) if succeeded else (PaymentStatus.FAILED,)
            if payment_reference and booking.payment_reference == payment_reference \
                    and booking.payment_status in applied:
                logger.info(f'[PAYMENT] Duplicate report {payment_reference} for {booking.booking_reference} ignored')
                return booking

            if payment_method:
                booking.payment_method = payment_method
            if payment_reference:
                booking.payment_reference = payment_reference

            if not succeeded:
                if booking.amount_paid == 0:
                    booking.payment_status = PaymentStatus.FAILED
            else:
                paid_now = booking.outstanding_amount if amount is None else amount
                if isinstance(paid_now, bool) or not isinstance(paid_now, int) or paid_now <= 0:
                    raise BookingValidationError("Payment amount must be a positive integer in minor units")
                if paid_now > booking.outstanding_amount:
                    raise BookingValidationError(
                        f"Payment of {paid_now} exceeds outstanding amount {booking.outstanding_amount}"
                    )
                booking.amount_paid += paid_now
                booking.payment_status = (
                    PaymentStatus.PAID if booking.amount_paid >= booking.total_amount else PaymentStatus.PARTIAL
                )

            booking.save(update_fields=[
                'payment_status', 'amount_paid', 'payment_method', 'payment_reference', 'updated_at',
            ])

        logger.info(f'[PAYMENT] {booking.booking_reference} payment_status={booking.payment_status}')
        return booking
