from django.db import transaction
from django.utils import timezone

from ..models import Notification


@transaction.atomic
def remove_expired_notifications():
    deleted, _ = Notification.objects.filter(expires_at__lte=timezone.now()).delete()
    return deleted
