from django.conf import settings
from django.db import transaction
from django.utils import timezone

from notifications.models import Notification, NotificationType
from notifications.serializers import NotificationPushSerializer
from notifications import tasks

import logging
logger = logging.getLogger(__name__)


def create_notification(account_id, title, message, notif_type=NotificationType.INFO, data=None):
    expires_at = None
    if settings.NOTIFICATION_TTL:
        expires_at = timezone.now() + settings.NOTIFICATION_TTL

    return Notification.objects.create(
        account_id=account_id,
        title=title,
        message=message,
        type=notif_type,
        data=data,
        expires_at=expires_at
    )


def dispatch_push(account_id, payload):
    try:
        tasks.push_notification.delay(account_id, payload)
    except Exception:
        logger.exception(f'Error dispatching notification push for account {account_id}')


def dispatch_global_admin_push(payload):
    try:
        tasks.push_global_admin_update.delay(payload)
    except Exception:
        logger.exception('Error dispatching global admin update')


def notify_user(account_id, title, message, notif_type=NotificationType.INFO, data=None):
    """
    Persists a notification and pushes it to the account's live websocket
    connections once the surrounding transaction commits.

    Best-effort: any failure is logged and swallowed so the calling
    operation never fails because of it.

    Returns:
            notification (Notification | None): the stored row, or None on failure
    """
    try:
        with transaction.atomic():
            notification = create_notification(account_id, title, message, notif_type=notif_type, data=data)
        payload = dict(NotificationPushSerializer(notification).data)
    except Exception:
        logger.exception(f'Error notifying account {account_id}: {title}')
        return None

    transaction.on_commit(lambda: dispatch_push(account_id, payload))
    return notification


def notify_users(account_ids, title, message, notif_type=NotificationType.INFO, data=None):
    return [
        notify_user(account_id, title, message, notif_type=notif_type, data=data)
        for account_id in account_ids
    ]


def notify_global_admins(payload):
    logger.info(f'Global admin update: {payload.get("type")}')
    transaction.on_commit(lambda: dispatch_global_admin_push(payload))
