"""Notification inbox models"""
from django.db import models
from django.contrib.auth.models import User

from ..utils.constants import NotificationType


class Notification(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='intercity_notifications')
    type = models.CharField(max_length=40, choices=NotificationType.CHOICES)
    title = models.CharField(max_length=150)
    body = models.TextField()
    data = models.JSONField(default=dict, blank=True)
    # <bookingId>:<type>, absorbs at-least-once redelivery
    dedupe_key = models.CharField(max_length=80, unique=True)
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', '-created_at'], name='notification_user_created_idx'),
        ]

    def __str__(self):
        return f"{self.type} for {self.user_id}"
