"""Company-related models"""
from django.db import models
from django.contrib.auth.models import User


class TransportCompany(models.Model):
    platform_user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='transport_company')
    company_name = models.CharField(max_length=200)
    company_logo = models.URLField(max_length=300, null=True, blank=True)
    rc_number = models.CharField(max_length=50, unique=True)
    contact_email = models.EmailField()
    contact_phone = models.CharField(max_length=20)
    is_verified = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    # Best-effort aggregate, bumped after booking commits
    total_bookings = models.PositiveIntegerField(default=0)
    rating = models.DecimalField(max_digits=3, decimal_places=2, default=0.00)
    total_reviews = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = 'transport companies'

    def __str__(self):
        return self.company_name

    def save(self, *args, **kwargs):
        if self.contact_email:
            self.contact_email = self.contact_email.strip().lower()
        super().save(*args, **kwargs)
