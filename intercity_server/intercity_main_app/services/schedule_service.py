"""Schedule service - business logic for scheduled departures"""
import logging
from dataclasses import dataclass, field
from datetime import timedelta

from django.db import transaction, DatabaseError, IntegrityError
from django.utils import timezone

from ..models import Booking, Route, ScheduledDeparture
from ..utils.constants import BookingStatus, BusinessRules, ScheduleStatus
from ..utils.reference_codes import generate_schedule_code
from .booking_service import BookingService
from .exceptions import (
    BookingEngineError,
    BookingValidationError,
    ResourceNotFoundError,
    ImmutableAfterDepartureError,
)
from .seat_ledger import SeatLedger
from .transactions import atomic_unit

logger = logging.getLogger(__name__)

SCHEDULE_CODE_ATTEMPTS = 5

# Fields an operator may edit on an existing departure
EDITABLE_FIELDS = (
    'departure_at', 'estimated_arrival_at', 'total_seats', 'price_per_seat', 'vehicle_number',
    'driver_name', 'driver_phone', 'boarding_point', 'notes',
)


@dataclass
class BulkCancellationResult:
    schedule: ScheduledDeparture
    cancelled_booking_ids: list = field(default_factory=list)
    failures: list = field(default_factory=list)

    @property
    def cancelled_bookings(self):
        return len(self.cancelled_booking_ids)

    def to_dict(self):
        return {
            'schedule_id': self.schedule.pk,
            'status': self.schedule.status,
            'cancelled_bookings': self.cancelled_bookings,
            'cancelled_booking_ids': self.cancelled_booking_ids,
            'failures': self.failures,
        }


def _validate_range(name, value, minimum, maximum):
    if isinstance(value, bool) or not isinstance(value, int):
        raise BookingValidationError(f"{name} must be an integer")
    if value < minimum or value > maximum:
        raise BookingValidationError(f"{name} must be between {minimum} and {maximum}")


class ScheduleService:
    """Service for operator-side schedule management"""

    def __init__(self, ledger=None, booking_service=None):
        self.ledger = ledger or SeatLedger()
        self.booking_service = booking_service or BookingService(ledger=self.ledger)

    def create_schedule(self, company, route_id, departure_at, total_seats, price_per_seat, actor=None,
                        now=None, **extra):
        """
        Create a departure with a full, untouched ledger.

        Raises:
            ResourceNotFoundError: route unknown or owned by another company
            BookingValidationError: departure in the past, seats or price out of range
        """
        now = now or timezone.now()
        route = Route.objects.filter(pk=route_id, company=company).first()
        if route is None:
            raise ResourceNotFoundError("Route not found")
        if not route.is_active:
            raise BookingValidationError("Route is not active")

        if departure_at <= now:
            raise BookingValidationError("Departure date must be in the future")
        _validate_range('total_seats', total_seats, BusinessRules.MIN_TOTAL_SEATS, BusinessRules.MAX_TOTAL_SEATS)
        _validate_range('price_per_seat', price_per_seat,
                        BusinessRules.MIN_PRICE_PER_SEAT, BusinessRules.MAX_PRICE_PER_SEAT)

        estimated_arrival_at = extra.pop('estimated_arrival_at', None) or (
            departure_at + timedelta(minutes=route.estimated_duration_minutes)
        )
        if estimated_arrival_at <= departure_at:
            raise BookingValidationError("Arrival must be after departure")

        unknown = set(extra) - set(EDITABLE_FIELDS)
        if unknown:
            raise BookingValidationError(f"Unknown schedule fields: {', '.join(sorted(unknown))}")

        for attempt in range(1, SCHEDULE_CODE_ATTEMPTS + 1):
            try:
                with transaction.atomic():
                    schedule = ScheduledDeparture.objects.create(
                        route=route,
                        company=company,
                        schedule_code=generate_schedule_code(departure_at),
                        departure_at=departure_at,
                        estimated_arrival_at=estimated_arrival_at,
                        total_seats=total_seats,
                        booked_seats=0,
                        available_seats=total_seats,
                        price_per_seat=price_per_seat,
                        status=ScheduleStatus.SCHEDULED,
                        last_updated_by=actor,
                        **extra,
                    )
                break
            except IntegrityError:
                logger.warning(f'[SCHEDULE] Schedule code collision (attempt {attempt})')
        else:
            raise BookingValidationError("Could not allocate a unique schedule code, please retry")

        logger.info(f'[SCHEDULE] Created {schedule.schedule_code} for company {company.pk}: {total_seats} seats')
        return schedule

    def get_company_schedule(self, company, schedule_id):
        schedule = ScheduledDeparture.objects.select_related('route').filter(pk=schedule_id, company=company).first()
        if schedule is None:
            raise ResourceNotFoundError("Schedule not found")
        return schedule

    def list_company_schedules(self, company, status=None, date=None, start_date=None, end_date=None):
        schedules = ScheduledDeparture.objects.select_related('route').filter(company=company)
        if status:
            schedules = schedules.filter(status=status)
        if date:
            schedules = schedules.filter(departure_at__date=date)
        if start_date:
            schedules = schedules.filter(departure_at__date__gte=start_date)
        if end_date:
            schedules = schedules.filter(departure_at__date__lte=end_date)
        return schedules.order_by('departure_at')

    def update_schedule(self, company, schedule_id, changes, actor=None):
        """
        Edit operational details of a departure.

        Seat counters are never taken from the caller: available_seats is
        recomputed from the new total and the current booked_seats.
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise BookingValidationError(f"Unknown schedule fields: {', '.join(sorted(unknown))}")

        with atomic_unit('update_schedule'):
            schedule = ScheduledDeparture.objects.select_for_update().filter(pk=schedule_id, company=company).first()
            if schedule is None:
                raise ResourceNotFoundError("Schedule not found")
            if schedule.is_locked():
                raise ImmutableAfterDepartureError()
            if schedule.status == ScheduleStatus.CANCELLED:
                raise BookingValidationError("Cannot update a cancelled schedule")

            update_fields = ['updated_at']

            if 'total_seats' in changes:
                total_seats = changes['total_seats']
                _validate_range('total_seats', total_seats,
                                BusinessRules.MIN_TOTAL_SEATS, BusinessRules.MAX_TOTAL_SEATS)
                if total_seats < schedule.booked_seats:
                    raise BookingValidationError(
                        f"total_seats cannot be less than the {schedule.booked_seats} seats already booked"
                    )
                schedule.total_seats = total_seats
                schedule.available_seats = total_seats - schedule.booked_seats
                update_fields += ['total_seats', 'available_seats']

            if 'price_per_seat' in changes:
                _validate_range('price_per_seat', changes['price_per_seat'],
                                BusinessRules.MIN_PRICE_PER_SEAT, BusinessRules.MAX_PRICE_PER_SEAT)

            if 'departure_at' in changes and changes['departure_at'] <= timezone.now():
                raise BookingValidationError("Departure date must be in the future")

            for name in EDITABLE_FIELDS:
                if name == 'total_seats' or name not in changes:
                    continue
                setattr(schedule, name, changes[name])
                update_fields.append(name)

            if schedule.estimated_arrival_at and schedule.estimated_arrival_at <= schedule.departure_at:
                raise BookingValidationError("Arrival must be after departure")

            if actor is not None:
                schedule.last_updated_by = actor
                update_fields.append('last_updated_by')

            schedule.save(update_fields=update_fields)

        logger.info(f'[SCHEDULE] Updated {schedule.schedule_code}: {", ".join(sorted(changes))}')
        return schedule

    def change_status(self, company, schedule_id, new_status, reason=None, delay_minutes=None, actor=None):
        """Operator status change; cancelling goes through the bulk cancellation path"""
        schedule = self.get_company_schedule(company, schedule_id)
        if new_status == ScheduleStatus.CANCELLED:
            return self.cancel_schedule(company, schedule_id, reason=reason, actor=actor).schedule
        return self.ledger.transition_status(
            schedule, new_status, reason=reason, delay_minutes=delay_minutes, actor=actor,
        )

    def cancel_schedule(self, company, schedule_id, reason=None, actor=None):
        """
        Cancel a departure and every active booking on it.

        The schedule is closed first so no new booking can slip in. Each
        booking is then cancelled in its own transaction; one failure is
        recorded and the batch carries on. Calling this again on an already
        cancelled schedule retries whatever is left.

        Returns:
            BulkCancellationResult
        """
        reason = reason or BusinessRules.DEFAULT_SCHEDULE_CANCEL_REASON
        schedule = self.get_company_schedule(company, schedule_id)

        if schedule.status != ScheduleStatus.CANCELLED:
            schedule = self.ledger.transition_status(
                schedule, ScheduleStatus.CANCELLED, reason=reason, actor=actor,
            )

        result = BulkCancellationResult(schedule=schedule)
        booking_ids = list(
            Booking.objects.filter(schedule=schedule, status__in=BookingStatus.ACTIVE)
            .order_by('pk').values_list('pk', flat=True)
        )

        for booking_id in booking_ids:
            try:
                self.booking_service.cancel_booking_by_id(booking_id, reason)
            except BookingEngineError as e:
                logger.error(f'[SCHEDULE] Could not cancel booking {booking_id} on {schedule.schedule_code}: {e.kind}: {e.message}')
                result.failures.append({'booking_id': booking_id, 'kind': e.kind, 'message': e.message})
            except DatabaseError as e:
                logger.exception(f'[SCHEDULE] Store error cancelling booking {booking_id} on {schedule.schedule_code}')
                result.failures.append({'booking_id': booking_id, 'kind': 'Internal', 'message': str(e)})
            else:
                result.cancelled_booking_ids.append(booking_id)

        schedule.refresh_from_db()
        logger.info(
            f'[SCHEDULE] {schedule.schedule_code} cancelled: {result.cancelled_bookings} bookings cancelled, '
            f'{len(result.failures)} failures'
        )
        return result

    def list_schedule_bookings(self, company, schedule_id, status=None):
        schedule = self.get_company_schedule(company, schedule_id)
        bookings = Booking.objects.filter(schedule=schedule)
        if status:
            bookings = bookings.filter(status=status)
        return bookings.order_by('created_at')

    def search_schedules(self, departure_state, arrival_state, date=None, now=None):
        """Bookable departures between two states, soonest first"""
        now = now or timezone.now()
        schedules = ScheduledDeparture.objects.select_related('route', 'company').filter(
            route__departure_state__iexact=departure_state.strip(),
            route__arrival_state__iexact=arrival_state.strip(),
            route__is_active=True,
            company__is_active=True,
            status=ScheduleStatus.SCHEDULED,
            available_seats__gt=0,
            departure_at__gt=now,
        )
        if date:
            schedules = schedules.filter(departure_at__date=date)
        return schedules.order_by('departure_at')

    def due_arrivals(self, now=None):
        return ScheduledDeparture.objects.filter(
            status=ScheduleStatus.DEPARTED,
            estimated_arrival_at__lte=now or timezone.now(),
        ).order_by('estimated_arrival_at')

    def mark_arrived_schedules(self, now=None):
        """
        Move departed schedules whose estimated arrival has passed to arrived.

        Returns:
            Number of schedules marked arrived
        """
        marked = 0
        for schedule in self.due_arrivals(now):
            try:
                self.ledger.transition_status(schedule, ScheduleStatus.ARRIVED, system=True)
            except BookingEngineError as e:
                logger.warning(f'[SCHEDULE] Could not mark {schedule.schedule_code} arrived: {e.message}')
                continue
            marked += 1
        return marked
