"""Booking-related serializers"""
from rest_framework import serializers

from ..models import Booking
from ..utils.constants import BookingSource, BookingStatus, BusinessRules, IdType, PaymentMethod
from .company_serializers import RouteSerializer
from .mixins import DateRangeMixin, StrictFieldsMixin


class PassengerDetailsSerializer(StrictFieldsMixin, serializers.Serializer):
    full_name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=20)
    id_type = serializers.ChoiceField(choices=IdType.CHOICES, required=False, allow_null=True)
    id_number = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    next_of_kin = serializers.DictField(required=False, allow_null=True)


class BookingCreateSerializer(StrictFieldsMixin, serializers.Serializer):
    schedule_id = serializers.IntegerField(min_value=1)
    passenger_details = PassengerDetailsSerializer()
    number_of_seats = serializers.IntegerField(min_value=1, max_value=BusinessRules.MAX_SEATS_PER_BOOKING)
    seat_numbers = serializers.ListField(
        child=serializers.CharField(max_length=10), required=False,
        max_length=BusinessRules.MAX_SEATS_PER_BOOKING,
    )
    special_requests = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.CHOICES, required=False, allow_null=True)
    booking_source = serializers.ChoiceField(choices=BookingSource.CHOICES, default=BookingSource.MOBILE)


class BookingCancelSerializer(StrictFieldsMixin, serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class BookingFilterSerializer(DateRangeMixin, serializers.Serializer):
    status = serializers.ChoiceField(choices=BookingStatus.CHOICES, required=False)
    schedule_id = serializers.IntegerField(min_value=1, required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)


class BookingSerializer(serializers.ModelSerializer):
    schedule_code = serializers.CharField(source='schedule.schedule_code', read_only=True)
    departure_at = serializers.DateTimeField(source='schedule.departure_at', read_only=True)
    company_name = serializers.CharField(source='company.company_name', read_only=True)
    route = RouteSerializer(read_only=True)
    passenger_details = serializers.SerializerMethodField()
    refundable = serializers.SerializerMethodField()
    qr_payload = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = ['id', 'booking_reference', 'status', 'schedule', 'schedule_code', 'departure_at',
                  'company', 'company_name', 'route', 'passenger_details', 'number_of_seats', 'seat_numbers',
                  'special_requests', 'total_amount', 'total_amount_display', 'amount_paid', 'payment_status',
                  'payment_method', 'booking_source', 'cancellation_date', 'cancellation_reason',
                  'checked_in_at', 'completed_at', 'created_at', 'refundable', 'qr_payload']

    def get_passenger_details(self, obj):
        return {
            'full_name': obj.passenger_full_name,
            'email': obj.passenger_email,
            'phone': obj.passenger_phone,
            'id_type': obj.id_type,
            'id_number': obj.id_number,
            'next_of_kin': obj.next_of_kin,
        }

    def get_refundable(self, obj):
        return obj.is_refundable()

    def get_qr_payload(self, obj):
        return obj.qr_payload()
