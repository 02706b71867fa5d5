"""Tests for post-commit booking notifications"""

from unittest import mock

import requests
from django.test import TestCase, override_settings

from ..models import Notification
from ..services.booking_service import BookingService
from ..services.exceptions import InsufficientCapacityError
from ..services.notification_service import NotificationService
from ..signals import booking_notification
from ..utils.constants import NotificationType
from .factories import PASSENGER, make_company, make_route, make_schedule, make_user


@override_settings(NOTIFICATION_DISPATCH_ASYNC=False, NOTIFICATION_WEBHOOK_URL='')
class NotificationServiceTest(TestCase):
    def setUp(self):
        self.user = make_user()
        self.schedule = make_schedule(make_route(make_company()))
        self.service = BookingService()
        self.notifier = NotificationService()

    def book(self):
        return self.service.create_booking(self.user, self.schedule.pk, dict(PASSENGER), 2)

    def test_event_contract(self):
        booking = self.book()
        booking.cancellation_reason = 'Change of plans'

        event = self.notifier.build_event(booking, NotificationType.BOOKING_CANCELLED)

        self.assertEqual(event, {
            'userId': str(self.user.pk),
            'type': 'booking_cancelled',
            'title': 'Booking Cancelled',
            'body': f'Your booking {booking.booking_reference} has been cancelled',
            'data': {
                'bookingId': str(booking.pk),
                'bookingReference': booking.booking_reference,
                'reason': 'Change of plans',
            },
        })

    def test_nothing_is_emitted_before_commit(self):
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            self.book()

        self.assertEqual(len(callbacks), 2)
        self.assertFalse(Notification.objects.exists())

    def test_failed_booking_emits_nothing(self):
        small = make_schedule(self.schedule.route, total_seats=1)

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with self.assertRaises(InsufficientCapacityError):
                self.service.create_booking(self.user, small.pk, dict(PASSENGER), 2)

        self.assertEqual(callbacks, [])
        self.assertFalse(Notification.objects.exists())

    def test_redelivery_is_deduplicated(self):
        booking = self.book()
        event = self.notifier.build_event(booking, NotificationType.BOOKING_CONFIRMED)

        self.notifier.dispatch(event)
        self.notifier.dispatch(event)

        self.assertEqual(Notification.objects.filter(user=self.user).count(), 1)

    def test_confirm_and_cancel_produce_one_notification_each(self):
        with self.captureOnCommitCallbacks(execute=True):
            booking = self.book()
        with self.captureOnCommitCallbacks(execute=True):
            self.service.cancel_booking(self.user, booking.pk)

        self.assertEqual(
            sorted(Notification.objects.filter(user=self.user).values_list('type', flat=True)),
            ['booking_cancelled', 'booking_confirmed'],
        )

    def test_failing_receiver_does_not_break_dispatch(self):
        def broken_receiver(sender, event, **kwargs):
            raise RuntimeError('inbox down')

        booking_notification.connect(broken_receiver, dispatch_uid='broken-receiver')
        self.addCleanup(booking_notification.disconnect, dispatch_uid='broken-receiver')

        booking = self.book()
        with self.assertLogs('intercity_main_app.services.notification_service', level='ERROR'):
            self.notifier.dispatch(self.notifier.build_event(booking, NotificationType.BOOKING_CONFIRMED))

        self.assertEqual(Notification.objects.count(), 1)

    @override_settings(NOTIFICATION_WEBHOOK_URL='https://hooks.example.test/bookings')
    @mock.patch('intercity_main_app.services.notification_service.requests.post')
    def test_webhook_receives_event(self, mock_post):
        with self.captureOnCommitCallbacks(execute=True):
            booking = self.book()

        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://hooks.example.test/bookings')
        self.assertEqual(kwargs['json']['data']['bookingReference'], booking.booking_reference)
        self.assertEqual(kwargs['json']['type'], 'booking_confirmed')

    @override_settings(NOTIFICATION_WEBHOOK_URL='https://hooks.example.test/bookings')
    @mock.patch('intercity_main_app.services.notification_service.requests.post',
                side_effect=requests.ConnectionError('refused'))
    def test_webhook_failure_never_reaches_the_booking(self, mock_post):
        with self.assertLogs('intercity_main_app.services.notification_service', level='ERROR'):
            with self.captureOnCommitCallbacks(execute=True):
                booking = self.book()

        self.assertIsNotNone(booking.pk)
        self.schedule.refresh_from_db()
        self.assertEqual(self.schedule.booked_seats, 2)
        self.assertEqual(Notification.objects.count(), 1)

    @override_settings(NOTIFICATION_DISPATCH_ASYNC=True)
    def test_async_dispatch_goes_to_the_executor(self):
        with mock.patch('intercity_main_app.services.notification_service._executor') as executor:
            with self.captureOnCommitCallbacks(execute=True):
                self.book()

        executor.submit.assert_called_once()
