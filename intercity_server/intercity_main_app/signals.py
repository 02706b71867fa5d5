from django.dispatch import Signal, receiver
import logging

logger = logging.getLogger(__name__)

# Sent after a booking transaction commits. kwargs: event (notification contract dict)
booking_notification = Signal()


@receiver(booking_notification)
def store_booking_notification(sender, event, **kwargs):
    """Persist the event in the passenger's inbox, once per booking and event type"""
    from .models import Notification

    data = event.get('data', {})
    dedupe_key = f"{data.get('bookingId')}:{event['type']}"

    notification, created = Notification.objects.get_or_create(
        dedupe_key=dedupe_key,
        defaults={
            'user_id': int(event['userId']),
            'type': event['type'],
            'title': event['title'],
            'body': event['body'],
            'data': data,
        },
    )

    if created:
        logger.info(f"[NOTIFY] Stored {event['type']} for user {event['userId']}")
    else:
        logger.info(f'[NOTIFY] Duplicate delivery of {dedupe_key} ignored')
    return notification
