from datetime import date

from django.conf import settings
from django.db import models

from algorithms.blood_compatibility import BLOOD_TYPE_CHOICES


# ---------------------------
# Donor Profile
# ---------------------------
class DonorProfile(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='donor_profile'
    )

    full_name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20, blank=True, db_index=True)
    blood_type = models.CharField(max_length=3, choices=BLOOD_TYPE_CHOICES)

    address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)

    # Geolocation (optional)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    # Donation tracking
    donation_count = models.PositiveIntegerField(default=0)
    last_donation_date = models.DateField(null=True, blank=True)
    is_available = models.BooleanField(default=True)

    # Health info (optional)
    weight = models.FloatField(null=True, blank=True)
    medical_conditions = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def can_donate(self) -> bool:
        """Donors can donate once the cooldown has passed"""
        return self.days_until_eligible == 0

    @property
    def days_until_eligible(self) -> int:
        if not self.last_donation_date:
            return 0
        days_since = (date.today() - self.last_donation_date).days
        return max(0, settings.DONATION_COOLDOWN_DAYS - days_since)

    def __str__(self):
        return f"{self.full_name} ({self.blood_type})"

    class Meta:
        verbose_name = "Donor Profile"
        verbose_name_plural = "Donor Profiles"
        ordering = ['-created_at']


class DonationHistory(models.Model):
    donor = models.ForeignKey(
        DonorProfile,
        on_delete=models.CASCADE,
        related_name='donation_history'
    )
    blood_request = models.ForeignKey(
        'bloodrequests.BloodRequest',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='donations'
    )

    date_donated = models.DateField()
    blood_type = models.CharField(max_length=3, choices=BLOOD_TYPE_CHOICES)
    units_donated = models.PositiveIntegerField(default=1)
    location = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.donor.full_name} | {self.date_donated}"

    class Meta:
        ordering = ['-date_donated', '-created_at']
        verbose_name = "Donation History"
        verbose_name_plural = "Donation Histories"
