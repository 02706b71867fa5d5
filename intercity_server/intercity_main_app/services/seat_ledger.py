"""Seat ledger - the only writer of scheduled departure seat counters"""
import logging

from django.db.models import F
from django.utils import timezone

from ..models import ScheduledDeparture
from ..utils.constants import ScheduleStatus, BusinessRules
from .exceptions import (
    BookingValidationError,
    ResourceNotFoundError,
    InsufficientCapacityError,
    LedgerCorruptionError,
    InvalidTransitionError,
    ImmutableAfterDepartureError,
)
from .transactions import atomic_unit

logger = logging.getLogger(__name__)

STATUS_VALUES = {value for value, _ in ScheduleStatus.CHOICES}


class SeatLedger:
    """
    Capacity bookkeeping for ScheduledDeparture rows.

    Every counter change is a single conditional UPDATE, so a stale in-memory
    instance can never push booked_seats past total_seats or below zero.
    """

    def validate_seat_count(self, seats):
        if isinstance(seats, bool) or not isinstance(seats, int):
            raise BookingValidationError("Number of seats must be an integer")
        if seats < 1 or seats > BusinessRules.MAX_SEATS_PER_BOOKING:
            raise BookingValidationError(
                f"Number of seats must be between 1 and {BusinessRules.MAX_SEATS_PER_BOOKING}"
            )

    def reserve(self, schedule, seats):
        """
        Take seats from a scheduled departure.

        Returns:
            The schedule instance refreshed with the new counters

        Raises:
            BookingValidationError: seat count outside [1, 10] or schedule not open
            InsufficientCapacityError: fewer than ``seats`` seats left
        """
        self.validate_seat_count(seats)
        updated = ScheduledDeparture.objects.filter(
            pk=schedule.pk,
            status=ScheduleStatus.SCHEDULED,
            available_seats__gte=seats,
        ).update(
            booked_seats=F('booked_seats') + seats,
            available_seats=F('available_seats') - seats,
            updated_at=timezone.now(),
        )

        if not updated:
            current = ScheduledDeparture.objects.filter(pk=schedule.pk).values('status', 'available_seats').first()
            if current is None:
                raise ResourceNotFoundError("Schedule not found")
            if current['status'] != ScheduleStatus.SCHEDULED:
                raise BookingValidationError("Schedule is not available for booking")
            raise InsufficientCapacityError(f"Only {current['available_seats']} seats available")

        schedule.refresh_from_db(fields=['booked_seats', 'available_seats', 'updated_at'])
        logger.info(f'[LEDGER] Schedule {schedule.pk} reserved {seats}: booked={schedule.booked_seats} available={schedule.available_seats}')
        return schedule

    def release(self, schedule, seats):
        """
        Give seats back to a departure.

        Raises:
            LedgerCorruptionError: booked_seats would go negative
        """
        if isinstance(seats, bool) or not isinstance(seats, int) or seats < 1:
            raise BookingValidationError("Number of seats must be a positive integer")

        updated = ScheduledDeparture.objects.filter(
            pk=schedule.pk,
            booked_seats__gte=seats,
        ).update(
            booked_seats=F('booked_seats') - seats,
            available_seats=F('available_seats') + seats,
            updated_at=timezone.now(),
        )

        if not updated:
            logger.critical(
                f'[LEDGER] Corruption: release of {seats} seats on schedule {schedule.pk} '
                f'would drive booked_seats below zero'
            )
            raise LedgerCorruptionError(
                f"Releasing {seats} seats would corrupt the ledger of schedule {schedule.pk}"
            )

        schedule.refresh_from_db(fields=['booked_seats', 'available_seats', 'updated_at'])
        logger.info(f'[LEDGER] Schedule {schedule.pk} released {seats}: booked={schedule.booked_seats} available={schedule.available_seats}')
        return schedule

    def transition_status(self, schedule, new_status, reason=None, delay_minutes=None, actor=None, system=False):
        """
        Move a departure along its lifecycle.

        Args:
            schedule: ScheduledDeparture (may be stale; the row is re-read under lock)
            new_status: Target ScheduleStatus value
            reason: Cancellation or delay reason
            delay_minutes: Minutes of delay when moving to ``delayed``
            actor: User making the change, if any
            system: True only for clock-driven arrival marking

        Returns:
            The locked, updated ScheduledDeparture
        """
        if new_status not in STATUS_VALUES:
            raise BookingValidationError(f"Unknown schedule status '{new_status}'")

        with atomic_unit('transition_schedule'):
            locked = ScheduledDeparture.objects.select_for_update().filter(pk=schedule.pk).first()
            if locked is None:
                raise ResourceNotFoundError("Schedule not found")

            if locked.is_locked():
                clock_arrival = (
                    system
                    and locked.status == ScheduleStatus.DEPARTED
                    and new_status == ScheduleStatus.ARRIVED
                )
                if not clock_arrival:
                    raise ImmutableAfterDepartureError(
                        f"Schedule {locked.schedule_code} is {locked.status} and can no longer change"
                    )
            elif not locked.can_transition_to(new_status):
                raise InvalidTransitionError(f"Cannot move schedule from {locked.status} to {new_status}")

            previous = locked.status
            locked.status = new_status
            update_fields = ['status', 'updated_at']

            if new_status == ScheduleStatus.CANCELLED:
                locked.cancellation_reason = reason
                update_fields.append('cancellation_reason')
            elif new_status == ScheduleStatus.DELAYED:
                locked.delay_reason = reason
                locked.delay_minutes = delay_minutes or 0
                update_fields += ['delay_reason', 'delay_minutes']

            if actor is not None:
                locked.last_updated_by = actor
                update_fields.append('last_updated_by')

            locked.save(update_fields=update_fields)

        logger.info(f'[LEDGER] Schedule {locked.pk} {previous} -> {new_status}')
        return locked
