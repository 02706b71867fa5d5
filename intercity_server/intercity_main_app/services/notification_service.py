"""Notification service - post-commit booking events for the notification collaborator"""
import logging
from concurrent.futures import ThreadPoolExecutor

import requests
from django.conf import settings
from django.db import transaction, close_old_connections

from ..signals import booking_notification
from ..utils.constants import NotificationType

logger = logging.getLogger(__name__)

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix='booking-notify')


class NotificationService:
    """
    Emits booking_confirmed / booking_cancelled events once the surrounding
    transaction commits. Delivery failures are logged and swallowed; they
    never reach the booking result.
    """

    def build_event(self, booking, event_type):
        data = {
            'bookingId': str(booking.pk),
            'bookingReference': booking.booking_reference,
        }

        if event_type == NotificationType.BOOKING_CONFIRMED:
            title = 'Booking Confirmed'
            body = f'Your booking {booking.booking_reference} is confirmed'
        else:
            title = 'Booking Cancelled'
            body = f'Your booking {booking.booking_reference} has been cancelled'
            data['reason'] = booking.cancellation_reason

        return {
            'userId': str(booking.user_id),
            'type': event_type,
            'title': title,
            'body': body,
            'data': data,
        }

    def booking_confirmed(self, booking):
        self._emit_after_commit(self.build_event(booking, NotificationType.BOOKING_CONFIRMED))

    def booking_cancelled(self, booking):
        self._emit_after_commit(self.build_event(booking, NotificationType.BOOKING_CANCELLED))

    def _emit_after_commit(self, event):
        transaction.on_commit(lambda: self._schedule(event))

    def _schedule(self, event):
        if getattr(settings, 'NOTIFICATION_DISPATCH_ASYNC', True):
            _executor.submit(self._dispatch_in_worker, event)
        else:
            self.dispatch(event)

    def _dispatch_in_worker(self, event):
        try:
            self.dispatch(event)
        finally:
            close_old_connections()

    def dispatch(self, event):
        """Deliver one event to signal receivers and the optional webhook"""
        responses = booking_notification.send_robust(sender=self.__class__, event=event)
        for receiver, response in responses:
            if isinstance(response, Exception):
                logger.error(f"[NOTIFY] Receiver {getattr(receiver, '__name__', receiver)} failed for {event['type']}: {response}")

        self._post_webhook(event)

    def _post_webhook(self, event):
        url = getattr(settings, 'NOTIFICATION_WEBHOOK_URL', '')
        if not url:
            return

        try:
            response = requests.post(url, json=event, timeout=settings.NOTIFICATION_WEBHOOK_TIMEOUT)
            response.raise_for_status()
            logger.info(f"[NOTIFY] Webhook accepted {event['type']} for booking {event['data']['bookingId']}")
        except requests.RequestException as e:
            logger.error(f"[NOTIFY] Webhook delivery failed for {event['type']}: {e}")
