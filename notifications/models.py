from django.db import models
from django.utils.translation import gettext_lazy as _

from accounts.models import Account


class NotificationType(models.TextChoices):
    INFO    = 'info', _('Info')
    SUCCESS = 'success', _('Success')
    WARNING = 'warning', _('Warning')
    ERROR   = 'error', _('Error')


class Notification(models.Model):
    account = models.ForeignKey(
        Account,
        on_delete=models.CASCADE,
        related_name='notifications'
    )
    title = models.CharField(max_length=200)
    message = models.TextField()
    type = models.CharField(
        max_length=10,
        choices=NotificationType.choices,
        default=NotificationType.INFO
    )
    read = models.BooleanField(default=False)
    data = models.JSONField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['account', 'read'], name='notif_account_read_idx'),
        ]

    def __str__(self):
        return f'{self.account_id}: {self.title}'
