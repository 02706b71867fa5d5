"""Route models"""
from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator

from ..utils.constants import BusinessRules


class Route(models.Model):
    company = models.ForeignKey('TransportCompany', on_delete=models.CASCADE, related_name='routes')
    route_name = models.CharField(max_length=150)
    departure_state = models.CharField(max_length=50)
    departure_city = models.CharField(max_length=100)
    departure_terminal = models.CharField(max_length=150, default='Main Terminal')
    arrival_state = models.CharField(max_length=50)
    arrival_city = models.CharField(max_length=100)
    arrival_terminal = models.CharField(max_length=150, default='Main Terminal')
    estimated_duration_minutes = models.PositiveIntegerField(validators=[
        MinValueValidator(BusinessRules.MIN_ROUTE_DURATION_MINUTES),
        MaxValueValidator(BusinessRules.MAX_ROUTE_DURATION_MINUTES),
    ])
    estimated_distance_km = models.PositiveIntegerField(null=True, blank=True)
    vehicle_type = models.CharField(max_length=50, default='bus')
    amenities = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['departure_state', 'arrival_state', 'is_active'], name='route_states_active_idx'),
        ]

    def __str__(self):
        return f"{self.departure_city} → {self.arrival_city} ({self.company})"

    @property
    def origin_label(self):
        return f"{self.departure_city}, {self.departure_state}"

    @property
    def destination_label(self):
        return f"{self.arrival_city}, {self.arrival_state}"
