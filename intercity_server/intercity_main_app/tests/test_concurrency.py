"""Racing callers against real commits"""

import threading

from django.db import connection
from django.test import TransactionTestCase, override_settings

from ..models import Booking
from ..services.booking_service import BookingService
from ..services.exceptions import BookingEngineError
from ..utils.constants import BookingStatus
from .factories import PASSENGER, make_company, make_route, make_schedule, make_user


def race(*calls):
    """Start every call at once on its own connection; return sorted outcome kinds"""
    barrier = threading.Barrier(len(calls))
    outcomes = []
    lock = threading.Lock()

    def run(call):
        try:
            barrier.wait()
            call()
            outcome = 'ok'
        except BookingEngineError as e:
            outcome = e.kind
        finally:
            connection.close()
        with lock:
            outcomes.append(outcome)

    threads = [threading.Thread(target=run, args=(call,)) for call in calls]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return sorted(outcomes)


@override_settings(NOTIFICATION_DISPATCH_ASYNC=False, NOTIFICATION_WEBHOOK_URL='')
class ConcurrentBookingTest(TransactionTestCase):
    def setUp(self):
        self.route = make_route(make_company())
        self.passengers = [make_user(), make_user()]

    def book_last_seat(self, user, schedule):
        return lambda: BookingService().create_booking(user, schedule.pk, dict(PASSENGER), 1)

    def test_last_seat_goes_to_exactly_one_of_two_racing_callers(self):
        schedule = make_schedule(self.route, total_seats=1)

        outcomes = race(*(self.book_last_seat(user, schedule) for user in self.passengers))

        self.assertEqual(outcomes, ['InsufficientCapacity', 'ok'])
        self.assertEqual(Booking.objects.filter(schedule=schedule).count(), 1)
        schedule.refresh_from_db()
        self.assertEqual(schedule.booked_seats, 1)
        self.assertEqual(schedule.available_seats, 0)

    def test_racing_cancellations_release_seats_once(self):
        schedule = make_schedule(self.route, total_seats=5)
        owner = self.passengers[0]
        booking = BookingService().create_booking(owner, schedule.pk, dict(PASSENGER), 3)

        def cancel():
            BookingService().cancel_booking(owner, booking.pk)

        outcomes = race(cancel, cancel)

        self.assertEqual(outcomes, ['AlreadyCancelled', 'ok'])
        booking.refresh_from_db()
        self.assertEqual(booking.status, BookingStatus.CANCELLED)
        schedule.refresh_from_db()
        self.assertEqual(schedule.booked_seats, 0)
        self.assertEqual(schedule.available_seats, 5)
