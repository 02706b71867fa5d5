"""Payment collaborator callback"""
import hmac
import logging

from django.conf import settings
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny

from ..serializers import PaymentResultSerializer, BookingSerializer
from ..services import BookingService
from .booking_views import success

logger = logging.getLogger(__name__)


def _has_valid_secret(request):
    expected = getattr(settings, 'PAYMENT_WEBHOOK_SECRET', '')
    provided = request.headers.get('X-Payment-Secret', '')
    if not expected or not provided:
        return False
    return hmac.compare_digest(provided.encode(), expected.encode())


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def payment_result(request):
    """Record a payment outcome reported by the payment collaborator"""
    if not _has_valid_secret(request):
        logger.warning('[PAYMENT] Rejected payment result with missing or invalid secret')
        raise PermissionDenied('Invalid payment secret')

    serializer = PaymentResultSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    booking = BookingService().record_payment_result(
        data['booking_reference'],
        data['succeeded'],
        amount=data.get('amount'),
        payment_reference=data.get('payment_reference') or None,
        payment_method=data.get('payment_method'),
    )
    return success(BookingSerializer(booking).data)
