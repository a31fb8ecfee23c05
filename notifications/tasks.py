# notifications/tasks.py
"""
Celery tasks for delivering notifications outside the app
"""
import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

from .models import Notification

logger = logging.getLogger(__name__)


@shared_task
def deliver_notification_email(notification_id):
    """
    Email a stored notification to its recipient and record the outcome
    """
    try:
        notification = Notification.objects.select_related('recipient').get(id=notification_id)
    except Notification.DoesNotExist:
        return f"Notification {notification_id} not found"

    email = notification.recipient.email
    if not email:
        notification.delivery_status = Notification.FAILED
        notification.save(update_fields=['delivery_status'])
        return f"Notification {notification_id} has no email recipient"

    try:
        send_mail(
            subject=notification.title,
            message=f"{notification.message}\n\n{settings.SITE_URL}",
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[email],
            fail_silently=False,
        )
        notification.delivery_status = Notification.SENT
    except Exception:
        logger.exception(f"Email delivery failed for notification {notification_id}")
        notification.delivery_status = Notification.FAILED

    notification.save(update_fields=['delivery_status'])
    return f"Notification {notification_id}: {notification.delivery_status}"
