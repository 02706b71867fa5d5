from django.urls import path, include
from rest_framework import routers

from .views import (
    BookingViewSet, OperatorBookingViewSet, OperatorRouteViewSet, OperatorScheduleViewSet, ScheduleSearchView,
    payment_result,
)

router = routers.DefaultRouter()
router.register(r"bookings", BookingViewSet, basename="bookings")
router.register(r"schedules/search", ScheduleSearchView, basename="schedule-search")

# Operator endpoints
router.register(r"operator/routes", OperatorRouteViewSet, basename="operator-routes")
router.register(r"operator/schedules", OperatorScheduleViewSet, basename="operator-schedules")
router.register(r"operator/bookings", OperatorBookingViewSet, basename="operator-bookings")

urlpatterns = [
    path('', include(router.urls)),
    path('payments/result/', payment_result, name='payment-result'),
]
