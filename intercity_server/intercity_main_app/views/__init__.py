"""Views package - HTTP request handlers"""

from .booking_views import BookingViewSet, OperatorBookingViewSet
from .schedule_views import OperatorScheduleViewSet, ScheduleSearchView
from .route_views import OperatorRouteViewSet
from .payment_views import payment_result

__all__ = [
    'BookingViewSet', 'OperatorBookingViewSet',
    'OperatorScheduleViewSet', 'ScheduleSearchView',
    'OperatorRouteViewSet',
    'payment_result',
]
