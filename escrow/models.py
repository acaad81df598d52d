from django.db import models
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from accounts.models import Account

from decimal import Decimal


class EscrowStatus(models.TextChoices):
    PENDING   = 'pending', _('Pending')
    ACTIVE    = 'active', _('Active')
    CLOSED    = 'closed', _('Closed')
    CANCELLED = 'cancelled', _('Cancelled')


class InvitationStatus(models.TextChoices):
    PENDING  = 'pending', _('Pending')
    ACCEPTED = 'accepted', _('Accepted')
    DECLINED = 'declined', _('Declined')


class EscrowCategory(models.TextChoices):
    GOODS       = 'goods', _('Goods')
    SERVICES    = 'services', _('Services')
    DIGITAL     = 'digital', _('Digital')
    REAL_ESTATE = 'real-estate', _('Real Estate')
    OTHER       = 'other', _('Other')


class EscrowPriority(models.TextChoices):
    LOW    = 'low', _('Low')
    MEDIUM = 'medium', _('Medium')
    HIGH   = 'high', _('High')
    URGENT = 'urgent', _('Urgent')


class PartyRole(models.TextChoices):
    INITIATOR = 'initiator', _('Initiator')
    RECIPIENT = 'recipient', _('Recipient')
    ADMIN     = 'admin', _('Admin')


class EscrowTicketManager(models.Manager):
    def get_queryset(self):
        return super().get_queryset().filter(is_deleted=False)


class EscrowTicket(models.Model):
    title = models.CharField(max_length=200)
    description = models.TextField()
    initiator = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name='initiated_escrow_tickets'
    )
    recipient = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name='received_escrow_tickets'
    )
    status = models.CharField(
        max_length=10,
        choices=EscrowStatus.choices,
        default=EscrowStatus.PENDING,
        db_index=True
    )
    invitation_status = models.CharField(
        max_length=10,
        choices=InvitationStatus.choices,
        default=InvitationStatus.PENDING
    )
    transaction_amount = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    currency = models.CharField(max_length=10, default='USD')
    category = models.CharField(
        max_length=20,
        choices=EscrowCategory.choices,
        default=EscrowCategory.OTHER
    )
    priority = models.CharField(
        max_length=10,
        choices=EscrowPriority.choices,
        default=EscrowPriority.MEDIUM
    )

    last_activity = models.DateTimeField(default=timezone.now, db_index=True)
    invitation_sent_at = models.DateTimeField(default=timezone.now)
    accepted_at = models.DateTimeField(null=True, blank=True)
    closed_at = models.DateTimeField(null=True, blank=True)
    closed_by = models.CharField(max_length=10, choices=PartyRole.choices, null=True, blank=True)

    is_deleted = models.BooleanField(default=False)
    deleted_at = models.DateTimeField(null=True, blank=True)
    deleted_by = models.EmailField(max_length=254, null=True, blank=True)

    admin_notes = models.TextField(null=True, blank=True)

    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=512, null=True, blank=True)
    source = models.CharField(max_length=20, default='web')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = EscrowTicketManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ['-last_activity']
        indexes = [
            models.Index(fields=['initiator', 'status'], name='escrow_initiator_status_idx'),
            models.Index(fields=['recipient', 'status'], name='escrow_recipient_status_idx'),
        ]

    def __str__(self):
        return f'{self.id}: {self.title}'

    def clean(self):
        if self.initiator_id is not None and self.initiator_id == self.recipient_id:
            raise ValidationError('Cannot create escrow with yourself')

    def is_open(self):
        return self.status in (EscrowStatus.PENDING, EscrowStatus.ACTIVE)

    def party_ids(self):
        return [self.initiator_id, self.recipient_id]

    def party_id(self, role):
        if role == PartyRole.INITIATOR:
            return self.initiator_id
        if role == PartyRole.RECIPIENT:
            return self.recipient_id
        return None


class EscrowMessage(models.Model):
    ticket = models.ForeignKey(
        EscrowTicket,
        on_delete=models.CASCADE,
        related_name='messages'
    )
    sequence = models.PositiveIntegerField()
    sender = models.CharField(max_length=10, choices=PartyRole.choices)
    sender_account = models.ForeignKey(
        Account,
        on_delete=models.SET_NULL,
        related_name='escrow_messages',
        null=True,
        blank=True
    )
    message = models.TextField()
    timestamp = models.DateTimeField(default=timezone.now)
    read = models.BooleanField(default=False)

    class Meta:
        ordering = ['sequence']
        constraints = [
            models.UniqueConstraint(fields=['ticket', 'sequence'], name='unique_escrow_message_sequence'),
        ]

    def __str__(self):
        return f'{self.ticket_id}#{self.sequence} ({self.sender})'

    def clean(self):
        if self.sender == PartyRole.ADMIN:
            return
        if self.sender_account_id is None:
            raise ValidationError('sender account is required for party messages')
        if self.sender_account_id != self.ticket.party_id(self.sender):
            raise ValidationError(f'sender account is not the ticket {self.sender}')
