"""Serializers package - imports from domain-specific modules"""

# Company and route serializers
from .company_serializers import (
    TransportCompanySerializer,
    RouteSerializer,
    OperatorRouteSerializer,
    RouteCreateSerializer,
    RouteUpdateSerializer,
)

# Booking serializers
from .booking_serializers import (
    PassengerDetailsSerializer,
    BookingCreateSerializer,
    BookingCancelSerializer,
    BookingFilterSerializer,
    BookingSerializer,
)

# Schedule serializers
from .schedule_serializers import (
    ScheduledDepartureSerializer,
    OperatorScheduleSerializer,
    ScheduleCreateSerializer,
    ScheduleUpdateSerializer,
    ScheduleStatusSerializer,
    ScheduleCancelSerializer,
    ScheduleFilterSerializer,
    ScheduleSearchSerializer,
)

# Payment serializers
from .payment_serializers import PaymentResultSerializer
