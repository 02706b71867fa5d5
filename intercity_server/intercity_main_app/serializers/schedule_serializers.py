"""Scheduled departure serializers"""
from rest_framework import serializers

from ..models import ScheduledDeparture
from ..utils.constants import BusinessRules, ScheduleStatus
from .company_serializers import RouteSerializer, TransportCompanySerializer
from .mixins import DateRangeMixin, StrictFieldsMixin


class ScheduledDepartureSerializer(serializers.ModelSerializer):
    route = RouteSerializer(read_only=True)
    company = TransportCompanySerializer(read_only=True)
    bookable = serializers.SerializerMethodField()

    class Meta:
        model = ScheduledDeparture
        fields = ['id', 'schedule_code', 'route', 'company', 'departure_at', 'estimated_arrival_at',
                  'total_seats', 'booked_seats', 'available_seats', 'price_per_seat', 'price_display',
                  'vehicle_number', 'boarding_point', 'status', 'delay_minutes', 'delay_reason',
                  'cancellation_reason', 'bookable']

    def get_bookable(self, obj):
        return obj.is_bookable()


class OperatorScheduleSerializer(ScheduledDepartureSerializer):
    """Adds the crew and internal notes operators see on their own departures"""

    class Meta(ScheduledDepartureSerializer.Meta):
        fields = ScheduledDepartureSerializer.Meta.fields + [
            'driver_name', 'driver_phone', 'notes', 'last_updated_by', 'created_at', 'updated_at',
        ]


class ScheduleUpdateSerializer(StrictFieldsMixin, serializers.Serializer):
    departure_at = serializers.DateTimeField(required=False)
    estimated_arrival_at = serializers.DateTimeField(required=False, allow_null=True)
    total_seats = serializers.IntegerField(
        min_value=BusinessRules.MIN_TOTAL_SEATS, max_value=BusinessRules.MAX_TOTAL_SEATS, required=False,
    )
    price_per_seat = serializers.IntegerField(
        min_value=BusinessRules.MIN_PRICE_PER_SEAT, max_value=BusinessRules.MAX_PRICE_PER_SEAT, required=False,
    )
    vehicle_number = serializers.CharField(max_length=20, required=False, allow_blank=True)
    driver_name = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    driver_phone = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)
    boarding_point = serializers.CharField(max_length=200, required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ScheduleCreateSerializer(ScheduleUpdateSerializer):
    route_id = serializers.IntegerField(min_value=1)
    departure_at = serializers.DateTimeField()
    total_seats = serializers.IntegerField(
        min_value=BusinessRules.MIN_TOTAL_SEATS, max_value=BusinessRules.MAX_TOTAL_SEATS,
    )
    price_per_seat = serializers.IntegerField(
        min_value=BusinessRules.MIN_PRICE_PER_SEAT, max_value=BusinessRules.MAX_PRICE_PER_SEAT,
    )


class ScheduleStatusSerializer(StrictFieldsMixin, serializers.Serializer):
    status = serializers.ChoiceField(choices=ScheduleStatus.CHOICES)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    delay_minutes = serializers.IntegerField(min_value=1, required=False)

    def validate(self, data):
        if data['status'] == ScheduleStatus.DELAYED and not data.get('delay_minutes'):
            raise serializers.ValidationError({'delay_minutes': ['Required when delaying a schedule.']})
        return data


class ScheduleCancelSerializer(StrictFieldsMixin, serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class ScheduleFilterSerializer(DateRangeMixin, serializers.Serializer):
    status = serializers.ChoiceField(choices=ScheduleStatus.CHOICES, required=False)
    date = serializers.DateField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)


class ScheduleSearchSerializer(serializers.Serializer):
    departure_state = serializers.CharField(max_length=50)
    arrival_state = serializers.CharField(max_length=50)
    date = serializers.DateField(required=False)
