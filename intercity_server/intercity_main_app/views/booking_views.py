"""Booking-related views using BookingService"""
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication

from ..permissions import IsCompanyOperator
from ..serializers import (
    BookingCreateSerializer, BookingCancelSerializer, BookingFilterSerializer, BookingSerializer,
)
from ..services import BookingService
from ..utils import get_company_for_user


def success(data, status_code=status.HTTP_200_OK):
    return Response({'success': True, 'data': data}, status=status_code)


class BookingViewSet(viewsets.ViewSet):
    """Passenger bookings: create, list, detail, cancel"""
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r'\d+'

    def list(self, request):
        filters = BookingFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        bookings = BookingService().list_bookings(request.user, status=filters.validated_data.get('status'))
        return success(BookingSerializer(bookings, many=True).data)

    def create(self, request):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        booking = BookingService().create_booking(
            user=request.user,
            schedule_id=data['schedule_id'],
            passenger_details=data['passenger_details'],
            number_of_seats=data['number_of_seats'],
            seat_numbers=data.get('seat_numbers'),
            special_requests=data.get('special_requests'),
            payment_method=data.get('payment_method'),
            booking_source=data['booking_source'],
        )
        return success(BookingSerializer(booking).data, status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        booking = BookingService().get_booking(request.user, pk)
        return success(BookingSerializer(booking).data)

    @action(detail=True, methods=['post'], url_path='cancel')
    def cancel_booking(self, request, pk=None):
        serializer = BookingCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = BookingService().cancel_booking(request.user, pk, reason=serializer.validated_data.get('reason'))
        return success({
            'message': 'Booking cancelled successfully',
            'booking': BookingSerializer(booking).data,
        })


class OperatorBookingViewSet(viewsets.ViewSet):
    """Company-side booking handling: listing, check-in, completion, no-show"""
    authentication_classes = [JWTAuthentication]
    permission_classes = [IsAuthenticated, IsCompanyOperator]
    lookup_value_regex = r'\d+'

    def list(self, request):
        filters = BookingFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        company = get_company_for_user(request.user)
        bookings = BookingService().list_company_bookings(
            company,
            status=filters.validated_data.get('status'),
            schedule_id=filters.validated_data.get('schedule_id'),
            start_date=filters.validated_data.get('start_date'),
            end_date=filters.validated_data.get('end_date'),
        )
        return success(BookingSerializer(bookings, many=True).data)

    @action(detail=True, methods=['post'], url_path='checkin')
    def check_in(self, request, pk=None):
        company = get_company_for_user(request.user)
        booking = BookingService().check_in(company, pk)
        return success(BookingSerializer(booking).data)

    @action(detail=True, methods=['post'], url_path='complete')
    def complete(self, request, pk=None):
        company = get_company_for_user(request.user)
        booking = BookingService().complete_booking(company, pk)
        return success(BookingSerializer(booking).data)

    @action(detail=True, methods=['post'], url_path='no-show')
    def no_show(self, request, pk=None):
        company = get_company_for_user(request.user)
        booking = BookingService().mark_no_show(company, pk)
        return success(BookingSerializer(booking).data)
