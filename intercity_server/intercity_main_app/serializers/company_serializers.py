"""Company and route serializers"""
from rest_framework import serializers

from ..models import TransportCompany, Route
from ..utils.constants import BusinessRules, NIGERIA_STATES
from .mixins import StrictFieldsMixin


class TransportCompanySerializer(serializers.ModelSerializer):
    class Meta:
        model = TransportCompany
        fields = ['id', 'company_name', 'company_logo', 'is_verified', 'rating', 'total_reviews']


class RouteSerializer(serializers.ModelSerializer):
    origin = serializers.CharField(source='origin_label', read_only=True)
    destination = serializers.CharField(source='destination_label', read_only=True)

    class Meta:
        model = Route
        fields = ['id', 'route_name', 'origin', 'destination', 'departure_state', 'departure_city',
                  'departure_terminal', 'arrival_state', 'arrival_city', 'arrival_terminal',
                  'estimated_duration_minutes', 'estimated_distance_km', 'vehicle_type', 'amenities']


class OperatorRouteSerializer(RouteSerializer):
    class Meta(RouteSerializer.Meta):
        fields = RouteSerializer.Meta.fields + ['is_active', 'created_at']


class RouteUpdateSerializer(StrictFieldsMixin, serializers.Serializer):
    route_name = serializers.CharField(max_length=150, required=False)
    departure_state = serializers.ChoiceField(choices=NIGERIA_STATES, required=False)
    departure_city = serializers.CharField(max_length=100, required=False)
    departure_terminal = serializers.CharField(max_length=150, required=False)
    arrival_state = serializers.ChoiceField(choices=NIGERIA_STATES, required=False)
    arrival_city = serializers.CharField(max_length=100, required=False)
    arrival_terminal = serializers.CharField(max_length=150, required=False)
    estimated_duration_minutes = serializers.IntegerField(
        min_value=BusinessRules.MIN_ROUTE_DURATION_MINUTES, max_value=BusinessRules.MAX_ROUTE_DURATION_MINUTES,
        required=False,
    )
    estimated_distance_km = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    vehicle_type = serializers.CharField(max_length=50, required=False)
    amenities = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    is_active = serializers.BooleanField(required=False)


class RouteCreateSerializer(RouteUpdateSerializer):
    route_name = serializers.CharField(max_length=150)
    departure_state = serializers.ChoiceField(choices=NIGERIA_STATES)
    departure_city = serializers.CharField(max_length=100)
    arrival_state = serializers.ChoiceField(choices=NIGERIA_STATES)
    arrival_city = serializers.CharField(max_length=100)
    estimated_duration_minutes = serializers.IntegerField(
        min_value=BusinessRules.MIN_ROUTE_DURATION_MINUTES, max_value=BusinessRules.MAX_ROUTE_DURATION_MINUTES,
    )
