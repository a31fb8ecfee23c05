from django.db import models
from django.db.models import Q


class DonationMatch(models.Model):
    """One candidate pairing between a blood request and a donor"""
    PENDING = 'Pending'
    ACCEPTED = 'Accepted'
    DECLINED = 'Declined'
    COMPLETED = 'Completed'
    CANCELLED = 'Cancelled'

    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (ACCEPTED, 'Accepted'),
        (DECLINED, 'Declined'),
        (COMPLETED, 'Donation Completed'),
        (CANCELLED, 'Cancelled'),
    ]

    # A donor holds at most one live candidacy per request
    LIVE_STATUSES = (PENDING, ACCEPTED)

    request = models.ForeignKey(
        'bloodrequests.BloodRequest',
        on_delete=models.PROTECT,
        related_name='matches'
    )
    donor = models.ForeignKey(
        'donors.DonorProfile',
        on_delete=models.CASCADE,
        related_name='matches'
    )

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    response_time = models.DateTimeField(null=True, blank=True)
    donation_time = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(null=True, blank=True)

    distance_km = models.FloatField(null=True, blank=True, help_text="Distance reported by the donor search")

    def __str__(self):
        return f"Match #{self.pk}: {self.donor} -> request #{self.request_id} ({self.status})"

    @property
    def response_minutes(self):
        if self.response_time is None:
            return None
        return (self.response_time - self.created_at).total_seconds() / 60

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Donation Match'
        verbose_name_plural = 'Donation Matches'
        indexes = [
            models.Index(fields=['request', 'status'], name='match_request_status_idx'),
            models.Index(fields=['donor', '-created_at'], name='match_donor_created_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['request', 'donor'],
                condition=Q(status__in=['Pending', 'Accepted']),
                name='unique_live_match_per_donor',
            ),
        ]
