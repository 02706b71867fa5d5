"""Tests for the seat ledger"""

from datetime import timedelta

from django.db import IntegrityError, transaction
from django.test import TestCase
from django.utils import timezone

from ..models import ScheduledDeparture
from ..services.exceptions import (
    BookingValidationError,
    InsufficientCapacityError,
    LedgerCorruptionError,
    InvalidTransitionError,
    ImmutableAfterDepartureError,
)
from ..services.seat_ledger import SeatLedger
from ..utils.constants import ScheduleStatus
from .factories import make_company, make_route, make_schedule


class SeatLedgerTest(TestCase):
    def setUp(self):
        self.company = make_company()
        self.route = make_route(self.company)
        self.schedule = make_schedule(self.route, total_seats=10)
        self.ledger = SeatLedger()

    def test_new_schedule_starts_with_all_seats_available(self):
        self.assertEqual(self.schedule.booked_seats, 0)
        self.assertEqual(self.schedule.available_seats, 10)
        self.assertEqual(self.schedule.vehicle_number, 'LAG-123-XY')

    def test_reserve_moves_seats_between_counters(self):
        self.ledger.reserve(self.schedule, 4)

        self.assertEqual(self.schedule.booked_seats, 4)
        self.assertEqual(self.schedule.available_seats, 6)

    def test_reserve_rejects_out_of_range_counts(self):
        for seats in (0, -1, 11, True, '2'):
            with self.assertRaises(BookingValidationError):
                self.ledger.reserve(self.schedule, seats)

        self.schedule.refresh_from_db()
        self.assertEqual(self.schedule.booked_seats, 0)

    def test_reserve_beyond_capacity_leaves_counters_untouched(self):
        self.ledger.reserve(self.schedule, 8)

        with self.assertRaises(InsufficientCapacityError) as ctx:
            self.ledger.reserve(self.schedule, 3)

        self.assertEqual(ctx.exception.message, 'Only 2 seats available')
        self.schedule.refresh_from_db()
        self.assertEqual(self.schedule.booked_seats, 8)
        self.assertEqual(self.schedule.available_seats, 2)

    def test_stale_instance_cannot_oversell(self):
        stale = ScheduledDeparture.objects.get(pk=self.schedule.pk)
        self.ledger.reserve(self.schedule, 10)

        # stale still believes 10 seats are free
        self.assertEqual(stale.available_seats, 10)
        with self.assertRaises(InsufficientCapacityError):
            self.ledger.reserve(stale, 1)

        self.schedule.refresh_from_db()
        self.assertEqual(self.schedule.booked_seats, 10)
        self.assertEqual(self.schedule.available_seats, 0)

    def test_reserve_on_closed_schedule_is_rejected(self):
        self.ledger.transition_status(self.schedule, ScheduleStatus.BOARDING)

        with self.assertRaises(BookingValidationError):
            self.ledger.reserve(self.schedule, 1)

    def test_release_returns_seats(self):
        self.ledger.reserve(self.schedule, 5)
        self.ledger.release(self.schedule, 2)

        self.assertEqual(self.schedule.booked_seats, 3)
        self.assertEqual(self.schedule.available_seats, 7)

    def test_release_below_zero_is_corruption_and_logged(self):
        self.ledger.reserve(self.schedule, 1)

        with self.assertLogs('intercity_main_app.services.seat_ledger', level='CRITICAL'):
            with self.assertRaises(LedgerCorruptionError):
                self.ledger.release(self.schedule, 2)

        self.schedule.refresh_from_db()
        self.assertEqual(self.schedule.booked_seats, 1)
        self.assertEqual(self.schedule.available_seats, 9)

    def test_database_rejects_inconsistent_counters(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                ScheduledDeparture.objects.filter(pk=self.schedule.pk).update(booked_seats=11)


class ScheduleTransitionTest(TestCase):
    def setUp(self):
        self.route = make_route(make_company())
        self.schedule = make_schedule(self.route)
        self.ledger = SeatLedger()

    def test_happy_lifecycle(self):
        for status in (ScheduleStatus.BOARDING, ScheduleStatus.DEPARTED):
            self.schedule = self.ledger.transition_status(self.schedule, status)
        self.assertEqual(self.schedule.status, ScheduleStatus.DEPARTED)

        arrived = self.ledger.transition_status(self.schedule, ScheduleStatus.ARRIVED, system=True)
        self.assertEqual(arrived.status, ScheduleStatus.ARRIVED)

    def test_delay_records_reason_and_can_resume(self):
        delayed = self.ledger.transition_status(
            self.schedule, ScheduleStatus.DELAYED, reason='Flooded road', delay_minutes=45,
        )
        self.assertEqual(delayed.delay_minutes, 45)
        self.assertEqual(delayed.delay_reason, 'Flooded road')

        resumed = self.ledger.transition_status(delayed, ScheduleStatus.SCHEDULED)
        self.assertEqual(resumed.status, ScheduleStatus.SCHEDULED)

    def test_skipping_states_is_invalid(self):
        with self.assertRaises(InvalidTransitionError):
            self.ledger.transition_status(self.schedule, ScheduleStatus.DEPARTED)

    def test_cancelled_is_terminal(self):
        self.ledger.transition_status(self.schedule, ScheduleStatus.CANCELLED, reason='Bus fault')

        with self.assertRaises(InvalidTransitionError):
            self.ledger.transition_status(self.schedule, ScheduleStatus.SCHEDULED)

    def test_departed_schedule_is_immutable_for_operators(self):
        self.schedule.status = ScheduleStatus.DEPARTED
        self.schedule.departure_at = timezone.now() - timedelta(hours=1)
        self.schedule.save()

        for status in (ScheduleStatus.CANCELLED, ScheduleStatus.ARRIVED, ScheduleStatus.SCHEDULED):
            with self.assertRaises(ImmutableAfterDepartureError):
                self.ledger.transition_status(self.schedule, status)

    def test_arrived_schedule_is_immutable_even_for_the_clock(self):
        self.schedule.status = ScheduleStatus.ARRIVED
        self.schedule.save()

        with self.assertRaises(ImmutableAfterDepartureError):
            self.ledger.transition_status(self.schedule, ScheduleStatus.ARRIVED, system=True)

    def test_unknown_status_is_a_validation_error(self):
        with self.assertRaises(BookingValidationError):
            self.ledger.transition_status(self.schedule, 'teleported')
