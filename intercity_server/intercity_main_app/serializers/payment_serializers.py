"""Payment result intake serializer"""
from rest_framework import serializers

from ..utils.constants import PaymentMethod
from .mixins import StrictFieldsMixin


class PaymentResultSerializer(StrictFieldsMixin, serializers.Serializer):
    booking_reference = serializers.CharField(max_length=40)
    succeeded = serializers.BooleanField()
    amount = serializers.IntegerField(min_value=1, required=False)
    payment_reference = serializers.CharField(max_length=100, required=False, allow_blank=True)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.CHOICES, required=False)
