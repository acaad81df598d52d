from celery import shared_task

from notifications.utils import websocket
from notifications.utils.cleanup import remove_expired_notifications

import logging
logger = logging.getLogger(__name__)


@shared_task(queue='notifications__push')
def push_notification(account_id, payload):
    websocket.send_notification(payload, account_id)


@shared_task(queue='notifications__push')
def push_global_admin_update(payload):
    websocket.send_global_admin_update(payload)


@shared_task(queue='notifications__cleanup')
def delete_expired_notifications():
    deleted = remove_expired_notifications()
    logger.info(f'Removed {deleted} expired notifications')
    return deleted
