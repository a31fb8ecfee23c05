"""
In-app and email notification sink.

`notify` is the entry point used by other apps: delivery is best-effort, so
it never raises into the operation that triggered it.
"""
import logging

from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from .models import Notification, NotificationPreference
from .tasks import deliver_notification_email

logger = logging.getLogger(__name__)


def _recipient_id(recipient):
    return getattr(recipient, 'pk', recipient)


def _schedule_delivery(notification):
    if notification.channel == Notification.IN_APP:
        return
    notification_id = notification.pk
    transaction.on_commit(lambda: deliver_notification_email.delay(notification_id))


def create_notification(recipient, notification_type, title, message,
                        related_entity_id=None, related_entity_type=None,
                        channel=Notification.IN_APP):
    notification = Notification.objects.create(
        recipient_id=_recipient_id(recipient),
        type=notification_type,
        title=title,
        message=message,
        related_entity_id=str(related_entity_id) if related_entity_id is not None else None,
        related_entity_type=related_entity_type,
        channel=channel,
    )
    _schedule_delivery(notification)
    return notification


def create_batch_notifications(recipients, notification_type, title, message,
                               related_entity_id=None, related_entity_type=None,
                               channel=Notification.IN_APP):
    entity_id = str(related_entity_id) if related_entity_id is not None else None
    notifications = [
        Notification.objects.create(
            recipient_id=_recipient_id(recipient),
            type=notification_type,
            title=title,
            message=message,
            related_entity_id=entity_id,
            related_entity_type=related_entity_type,
            channel=channel,
        )
        for recipient in recipients
    ]
    for notification in notifications:
        _schedule_delivery(notification)
    return notifications


def _channels_by_recipient(recipients, notification_type):
    ids = [_recipient_id(recipient) for recipient in recipients]
    preferences = {
        preference.user_id: preference
        for preference in NotificationPreference.objects.filter(user_id__in=ids)
    }
    default = NotificationPreference()
    return [
        (recipient, preferences.get(user_id, default).channels_for(notification_type))
        for recipient, user_id in zip(recipients, ids)
    ]


def create_preferred_notifications(recipients, notification_type, title, message,
                                   related_entity_id=None, related_entity_type=None):
    """One notification per recipient per channel they have switched on."""
    routed = _channels_by_recipient(recipients, notification_type)
    notifications = []
    for channel, _ in Notification.CHANNEL_CHOICES:
        targets = [recipient for recipient, channels in routed if channel in channels]
        if targets:
            notifications.extend(create_batch_notifications(
                targets, notification_type, title, message,
                related_entity_id=related_entity_id,
                related_entity_type=related_entity_type,
                channel=channel,
            ))
    return notifications


def notify(recipients, notification_type, title, message,
           related_entity_id=None, related_entity_type=None,
           channel=None):
    """
    Best-effort notification of one or many recipients.

    Without an explicit `channel` each recipient's preferences pick the
    channels. Runs in its own savepoint so a failure cannot break the
    caller's transaction. Errors are logged and an empty list is returned.
    """
    if recipients is None:
        return []
    if not isinstance(recipients, (list, tuple, set)):
        recipients = [recipients]
    recipients = list(recipients)

    try:
        with transaction.atomic():
            if channel is not None:
                return create_batch_notifications(
                    recipients, notification_type, title, message,
                    related_entity_id=related_entity_id,
                    related_entity_type=related_entity_type,
                    channel=channel,
                )
            return create_preferred_notifications(
                recipients, notification_type, title, message,
                related_entity_id=related_entity_id,
                related_entity_type=related_entity_type,
            )
    except Exception:
        logger.exception(
            f"Failed to send '{title}' notification to {len(recipients)} recipient(s) "
            f"for {related_entity_type} {related_entity_id}"
        )
        return []


def filter_notifications(queryset, notification_type=None, is_read=None,
                         start_date=None, end_date=None, search=None):
    if notification_type:
        queryset = queryset.filter(type=notification_type)
    if is_read is not None:
        queryset = queryset.filter(is_read=is_read)
    if start_date:
        queryset = queryset.filter(created_at__gte=start_date)
    if end_date:
        queryset = queryset.filter(created_at__lte=end_date)
    if search:
        queryset = queryset.filter(Q(title__icontains=search) | Q(message__icontains=search))
    return queryset


def mark_as_read(notification):
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = timezone.now()
        notification.save(update_fields=['is_read', 'read_at'])
    return notification


def mark_all_as_read(user):
    return Notification.objects.filter(recipient=user, is_read=False).update(
        is_read=True,
        read_at=timezone.now(),
    )


def get_notification_stats(user):
    return Notification.objects.filter(recipient=user).aggregate(
        total_count=Count('id'),
        unread_count=Count('id', filter=Q(is_read=False)),
        request_count=Count('id', filter=Q(type=Notification.REQUEST)),
        match_count=Count('id', filter=Q(type=Notification.MATCH)),
        system_count=Count('id', filter=Q(type=Notification.SYSTEM)),
    )


def delete_notification(notification):
    notification_id = notification.pk
    notification.delete()
    logger.info(f"Notification {notification_id} deleted by recipient {notification.recipient_id}")


def delete_all_notifications(user):
    deleted, _ = Notification.objects.filter(recipient=user).delete()
    logger.info(f"{deleted} notification(s) deleted by recipient {user.pk}")
    return deleted


# ============================================
# PREFERENCES
# ============================================
def get_notification_preferences(user):
    preferences, _ = NotificationPreference.objects.get_or_create(user=user)
    return preferences


def update_notification_preferences(user, **changes):
    """Apply a partial update; fields not given keep their current value."""
    preferences = get_notification_preferences(user)
    for name, value in changes.items():
        setattr(preferences, name, value)
    if changes:
        preferences.save(update_fields=[*changes, 'updated_at'])
    return preferences
