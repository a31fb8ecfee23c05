# bloodrequests/models.py
from django.conf import settings
from django.db import models

from algorithms.blood_compatibility import BLOOD_TYPE_CHOICES


class BloodRequest(models.Model):
    LOW = 'Low'
    NORMAL = 'Normal'
    HIGH = 'High'
    CRITICAL = 'Critical'

    URGENCY_CHOICES = [
        (LOW, 'Low'),
        (NORMAL, 'Normal'),
        (HIGH, 'High'),
        (CRITICAL, 'Critical - Life Threatening'),
    ]

    PENDING = 'Pending'
    MATCHING = 'Matching'
    FULFILLED = 'Fulfilled'
    CANCELLED = 'Cancelled'

    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (MATCHING, 'Matching'),
        (FULFILLED, 'Fulfilled'),
        (CANCELLED, 'Cancelled'),
    ]

    # Matches may only be created while the request is open
    OPEN_STATUSES = (PENDING, MATCHING)

    requester = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='blood_requests'
    )

    patient_name = models.CharField(max_length=200)
    blood_type = models.CharField(max_length=3, choices=BLOOD_TYPE_CHOICES)
    units_needed = models.PositiveIntegerField(default=1)
    urgency_level = models.CharField(max_length=10, choices=URGENCY_CHOICES, default=NORMAL)

    hospital_name = models.CharField(max_length=200)
    hospital_address = models.TextField(blank=True)
    hospital_city = models.CharField(max_length=100, blank=True)
    hospital_state = models.CharField(max_length=100, blank=True)
    hospital_postal_code = models.CharField(max_length=20, blank=True)
    hospital_latitude = models.FloatField(null=True, blank=True)
    hospital_longitude = models.FloatField(null=True, blank=True)

    required_by_date = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)

    medical_notes = models.TextField(blank=True)
    contact_phone = models.CharField(max_length=20, blank=True)
    contact_email = models.EmailField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.hospital_name} - {self.blood_type} ({self.urgency_level})"

    @property
    def is_open(self):
        return self.status in self.OPEN_STATUSES

    @property
    def hospital_location(self):
        """Location string recorded on donation history"""
        parts = [self.hospital_name, self.hospital_city, self.hospital_state]
        return ', '.join(part for part in parts if part)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Blood Request'
        verbose_name_plural = 'Blood Requests'
        indexes = [
            models.Index(fields=['status', 'blood_type'], name='bloodreq_status_type_idx'),
            models.Index(fields=['requester', '-created_at'], name='bloodreq_requester_idx'),
        ]
