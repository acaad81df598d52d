from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from accounts.models import Account


class SupportStatus(models.TextChoices):
    OPEN        = 'open', _('Open')
    IN_PROGRESS = 'in-progress', _('In Progress')
    RESOLVED    = 'resolved', _('Resolved')
    CLOSED      = 'closed', _('Closed')


class SupportPriority(models.TextChoices):
    LOW    = 'low', _('Low')
    MEDIUM = 'medium', _('Medium')
    HIGH   = 'high', _('High')
    URGENT = 'urgent', _('Urgent')


class SupportCategory(models.TextChoices):
    TECHNICAL       = 'technical', _('Technical')
    BILLING         = 'billing', _('Billing')
    ACCOUNT         = 'account', _('Account')
    FEATURE_REQUEST = 'feature-request', _('Feature Request')
    OTHER           = 'other', _('Other')


class PublicSupportCategory(models.TextChoices):
    GENERAL         = 'general', _('General')
    TECHNICAL       = 'technical', _('Technical')
    BILLING         = 'billing', _('Billing')
    ACCOUNT         = 'account', _('Account')
    FEATURE_REQUEST = 'feature-request', _('Feature Request')
    OTHER           = 'other', _('Other')


class MessageSender(models.TextChoices):
    USER  = 'user', _('User')
    ADMIN = 'admin', _('Admin')


class NotDeletedManager(models.Manager):
    def get_queryset(self):
        return super().get_queryset().filter(is_deleted=False)


class SupportTicket(models.Model):
    account = models.ForeignKey(
        Account,
        on_delete=models.CASCADE,
        related_name='support_tickets'
    )
    subject = models.CharField(max_length=200)
    description = models.TextField()
    status = models.CharField(max_length=15, choices=SupportStatus.choices, default=SupportStatus.OPEN)
    priority = models.CharField(max_length=10, choices=SupportPriority.choices, default=SupportPriority.MEDIUM)
    category = models.CharField(max_length=20, choices=SupportCategory.choices, default=SupportCategory.OTHER)
    assigned_to = models.CharField(max_length=50, default='global-admin')
    last_reply = models.DateTimeField(default=timezone.now, db_index=True)

    is_deleted = models.BooleanField(default=False)
    deleted_at = models.DateTimeField(null=True, blank=True)
    deleted_by = models.EmailField(max_length=254, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = NotDeletedManager()
    all_objects = models.Manager()

    def __str__(self):
        return f'{self.id}: {self.subject}'


class SupportMessage(models.Model):
    ticket = models.ForeignKey(
        SupportTicket,
        on_delete=models.CASCADE,
        related_name='messages'
    )
    sender = models.CharField(max_length=10, choices=MessageSender.choices)
    message = models.TextField()
    timestamp = models.DateTimeField(default=timezone.now)
    read = models.BooleanField(default=False)

    class Meta:
        ordering = ['timestamp', 'id']


class PublicSupportTicket(models.Model):
    name = models.CharField(max_length=128, default='Anonymous')
    email = models.EmailField(max_length=254)
    message = models.TextField()
    status = models.CharField(max_length=15, choices=SupportStatus.choices, default=SupportStatus.OPEN)
    priority = models.CharField(max_length=10, choices=SupportPriority.choices, default=SupportPriority.MEDIUM)
    category = models.CharField(
        max_length=20,
        choices=PublicSupportCategory.choices,
        default=PublicSupportCategory.GENERAL
    )
    source = models.CharField(max_length=20, default='public-form')
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=512, null=True, blank=True)
    last_response_at = models.DateTimeField(null=True, blank=True)

    is_deleted = models.BooleanField(default=False)
    deleted_at = models.DateTimeField(null=True, blank=True)
    deleted_by = models.EmailField(max_length=254, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = NotDeletedManager()
    all_objects = models.Manager()

    def __str__(self):
        return f'{self.id}: {self.email}'

    @property
    def last_reply(self):
        return self.last_response_at or self.created_at

    @property
    def subject(self):
        summary = self.message[:50]
        if len(self.message) > 50:
            summary += '...'
        return f'Public Support: {summary}'


class PublicSupportResponse(models.Model):
    ticket = models.ForeignKey(
        PublicSupportTicket,
        on_delete=models.CASCADE,
        related_name='responses'
    )
    message = models.TextField()
    responded_by = models.CharField(max_length=254, default='global-admin')
    responded_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['responded_at', 'id']
