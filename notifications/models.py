from django.conf import settings
from django.db import models


class Notification(models.Model):
    REQUEST = 'Request'
    MATCH = 'Match'
    SYSTEM = 'System'

    TYPE_CHOICES = [
        (REQUEST, 'Blood Request'),
        (MATCH, 'Donation Match'),
        (SYSTEM, 'System'),
    ]

    IN_APP = 'In-app'
    EMAIL = 'Email'

    CHANNEL_CHOICES = [
        (IN_APP, 'In-app'),
        (EMAIL, 'Email'),
    ]

    PENDING = 'Pending'
    SENT = 'Sent'
    FAILED = 'Failed'

    DELIVERY_CHOICES = [
        (PENDING, 'Pending'),
        (SENT, 'Sent'),
        (FAILED, 'Failed'),
    ]

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications'
    )
    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    title = models.CharField(max_length=200)
    message = models.TextField()

    related_entity_id = models.CharField(max_length=64, null=True, blank=True)
    related_entity_type = models.CharField(max_length=64, null=True, blank=True)

    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)

    delivery_status = models.CharField(max_length=10, choices=DELIVERY_CHOICES, default=PENDING)
    channel = models.CharField(max_length=10, choices=CHANNEL_CHOICES, default=IN_APP)

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.type} -> {self.recipient}: {self.title}"

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['recipient', 'is_read'], name='notif_recipient_read_idx'),
            models.Index(fields=['recipient', '-created_at'], name='notif_recipient_created_idx'),
        ]


class NotificationPreference(models.Model):
    """
    Per-user delivery settings. Users without a row get the field defaults:
    in-app on, email off, every notification type on.
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notification_preferences'
    )
    in_app_enabled = models.BooleanField(default=True)
    email_enabled = models.BooleanField(default=False)

    request_notifications = models.BooleanField(default=True)
    match_notifications = models.BooleanField(default=True)
    system_notifications = models.BooleanField(default=True)

    updated_at = models.DateTimeField(auto_now=True)

    TYPE_SWITCHES = {
        Notification.REQUEST: 'request_notifications',
        Notification.MATCH: 'match_notifications',
        Notification.SYSTEM: 'system_notifications',
    }

    def channels_for(self, notification_type):
        """Channels a notification of this type goes out on, possibly none."""
        if not getattr(self, self.TYPE_SWITCHES[notification_type]):
            return []
        channels = []
        if self.in_app_enabled:
            channels.append(Notification.IN_APP)
        if self.email_enabled:
            channels.append(Notification.EMAIL)
        return channels

    def __str__(self):
        return f"Notification preferences for {self.user}"
