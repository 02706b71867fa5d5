"""Scheduled departure views using ScheduleService"""
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework_simplejwt.authentication import JWTAuthentication

from ..permissions import IsCompanyOperator
from ..serializers import (
    BookingFilterSerializer, BookingSerializer, OperatorScheduleSerializer, ScheduledDepartureSerializer,
    ScheduleCreateSerializer, ScheduleUpdateSerializer, ScheduleStatusSerializer, ScheduleCancelSerializer,
    ScheduleFilterSerializer, ScheduleSearchSerializer,
)
from ..services import ScheduleService
from ..utils import get_company_for_user
from .booking_views import success


class OperatorScheduleViewSet(viewsets.ViewSet):
    """Operator schedule management"""
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsAuthenticated, IsCompanyOperator]
    lookup_value_regex = r'\d+'

    def list(self, request):
        filters = ScheduleFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        company = get_company_for_user(request.user)
        schedules = ScheduleService().list_company_schedules(company, **filters.validated_data)
        return success(OperatorScheduleSerializer(schedules, many=True).data)

    def create(self, request):
        serializer = ScheduleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        company = get_company_for_user(request.user)

        schedule = ScheduleService().create_schedule(
            company,
            route_id=data.pop('route_id'),
            departure_at=data.pop('departure_at'),
            total_seats=data.pop('total_seats'),
            price_per_seat=data.pop('price_per_seat'),
            actor=request.user,
            **data,
        )
        return success(OperatorScheduleSerializer(schedule).data, status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        company = get_company_for_user(request.user)
        schedule = ScheduleService().get_company_schedule(company, pk)
        return success(OperatorScheduleSerializer(schedule).data)

    def update(self, request, pk=None):
        serializer = ScheduleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        company = get_company_for_user(request.user)

        schedule = ScheduleService().update_schedule(
            company, pk, dict(serializer.validated_data), actor=request.user,
        )
        return success(OperatorScheduleSerializer(schedule).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        """Cancel the departure and its active bookings; rows are never deleted"""
        serializer = ScheduleCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        company = get_company_for_user(request.user)

        result = ScheduleService().cancel_schedule(
            company, pk, reason=serializer.validated_data.get('reason'), actor=request.user,
        )
        return success(result.to_dict())

    @action(detail=True, methods=['post'], url_path='status')
    def change_status(self, request, pk=None):
        serializer = ScheduleStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        company = get_company_for_user(request.user)

        schedule = ScheduleService().change_status(
            company, pk, data['status'],
            reason=data.get('reason'),
            delay_minutes=data.get('delay_minutes'),
            actor=request.user,
        )
        return success(OperatorScheduleSerializer(schedule).data)

    @action(detail=True, methods=['get'], url_path='bookings')
    def bookings(self, request, pk=None):
        filters = BookingFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        company = get_company_for_user(request.user)

        bookings = ScheduleService().list_schedule_bookings(company, pk, status=filters.validated_data.get('status'))
        return success(BookingSerializer(bookings, many=True).data)


class ScheduleSearchView(viewsets.ViewSet):
    """Public search for bookable departures"""
    permission_classes = [AllowAny]
    authentication_classes = []

    def list(self, request):
        params = ScheduleSearchSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = params.validated_data

        schedules = ScheduleService().search_schedules(
            data['departure_state'], data['arrival_state'], date=data.get('date'),
        )
        return success(ScheduledDepartureSerializer(schedules, many=True).data)
