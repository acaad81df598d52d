from django.db import transaction
from django.db.models import Q, Max
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from accounts.models import Account
from authentication.exceptions import OriginalAdminRequired
from authentication.permissions import is_account
from marketbook.pagination import parse_page_params, paginate
from escrow.models import (
    EscrowTicket,
    EscrowMessage,
    EscrowStatus,
    InvitationStatus,
    PartyRole
)
from escrow.exceptions import (
    EscrowTicketNotFound,
    InvitationNotFound,
    RecipientNotFound,
    SelfEscrowNotAllowed,
    TicketNotAcceptingMessages,
    TicketCannotBeClosed
)
from escrow.roles import resolve_role, counterpart
from escrow.validators import (
    validate_required_text,
    validate_amount,
    validate_currency,
    validate_category,
    validate_status,
    validate_respond_action
)
import escrow.utils.notifications as notifications

import logging
logger = logging.getLogger(__name__)

SEARCH_MIN_LENGTH = 2
SEARCH_RESULT_LIMIT = 20


def ticket_queryset(lock=False):
    queryset = EscrowTicket.objects.select_related('initiator', 'recipient')
    if lock:
        queryset = queryset.select_for_update(of=('self',))
    return queryset


def party_filter(account):
    return Q(initiator=account) | Q(recipient=account)


def get_party_ticket(ticket_id, account, lock=False):
    '''
    Fetches a ticket the account is a party to. A ticket that exists but
    belongs to others is reported exactly like a missing one.
    '''
    ticket = ticket_queryset(lock=lock).filter(party_filter(account), pk=ticket_id).first()
    if ticket is None:
        raise EscrowTicketNotFound()
    return ticket


def get_admin_ticket(ticket_id, lock=False):
    ticket = ticket_queryset(lock=lock).filter(pk=ticket_id).first()
    if ticket is None:
        raise EscrowTicketNotFound()
    return ticket


def append_message(ticket, sender, text, sender_account=None):
    '''
    Appends a message to a row-locked ticket and moves its last_activity
    to the message timestamp. Must run inside a transaction.
    '''
    last_sequence = ticket.messages.aggregate(last=Max('sequence'))['last'] or 0
    message = EscrowMessage(
        ticket=ticket,
        sequence=last_sequence + 1,
        sender=sender,
        sender_account=sender_account,
        message=text,
        timestamp=timezone.now()
    )
    message.clean()
    message.save()

    ticket.last_activity = message.timestamp
    ticket.save(update_fields=['last_activity', 'updated_at'])
    return message


def get_recipient(recipient_id):
    if isinstance(recipient_id, str):
        recipient_id = recipient_id.strip()
    try:
        recipient_id = int(recipient_id)
    except (TypeError, ValueError):
        raise RecipientNotFound()

    recipient = Account.objects.filter(pk=recipient_id, is_deleted=False, is_active=True).first()
    if recipient is None:
        raise RecipientNotFound()
    return recipient


def create_ticket(initiator, data, ip_address=None, user_agent=None):
    title = validate_required_text(data.get('title'), 'title')
    description = validate_required_text(data.get('description'), 'description')

    recipient = get_recipient(data.get('recipientId'))
    if recipient.pk == initiator.pk:
        raise SelfEscrowNotAllowed()

    ticket = EscrowTicket(
        title=title,
        description=description,
        initiator=initiator,
        recipient=recipient,
        transaction_amount=validate_amount(data.get('transactionAmount')),
        currency=validate_currency(data.get('currency')),
        category=validate_category(data.get('category')),
        ip_address=ip_address,
        user_agent=(user_agent or '')[:512] or None
    )
    ticket.clean()
    ticket.save()
    logger.info(f'Escrow ticket {ticket.id} created: {initiator.id} -> {recipient.id}')

    notifications.notify_invitation(ticket, initiator)
    notifications.broadcast_ticket_update(ticket, 'escrow-invitation')
    return ticket


def respond_to_invitation(ticket_id, account, action):
    with transaction.atomic():
        ticket = ticket_queryset(lock=True).filter(
            pk=ticket_id,
            recipient=account,
            status=EscrowStatus.PENDING,
            invitation_status=InvitationStatus.PENDING
        ).first()
        if ticket is None:
            raise InvitationNotFound()

        action = validate_respond_action(action)
        if action == 'accept':
            ticket.invitation_status = InvitationStatus.ACCEPTED
            ticket.status = EscrowStatus.ACTIVE
            ticket.accepted_at = timezone.now()
        else:
            ticket.invitation_status = InvitationStatus.DECLINED
            ticket.status = EscrowStatus.CANCELLED
        ticket.save()

    notifications.notify_invitation_response(ticket, account, action)
    notifications.broadcast_ticket_update(ticket, f'escrow-{action}ed')
    return ticket


def post_party_message(ticket_id, account, text):
    with transaction.atomic():
        ticket = get_party_ticket(ticket_id, account, lock=True)
        if not ticket.is_open():
            raise TicketNotAcceptingMessages()

        text = validate_required_text(text, 'message')
        role = resolve_role(ticket, account)
        append_message(ticket, role, text, sender_account=account)

    notifications.notify_party_message(ticket, account, ticket.party_id(counterpart(role)))
    notifications.broadcast_ticket_update(ticket, 'escrow-message')
    return ticket


def post_admin_message(ticket_id, admin, text):
    with transaction.atomic():
        ticket = get_admin_ticket(ticket_id, lock=True)
        text = validate_required_text(text, 'message')
        append_message(ticket, PartyRole.ADMIN, text)

    logger.info(f'Admin message on escrow ticket {ticket.id} by {admin.email}')
    notifications.notify_admin_message(ticket)
    notifications.broadcast_ticket_update(ticket, 'admin-message')
    return ticket


def close_ticket(ticket_id, principal):
    with transaction.atomic():
        if is_account(principal):
            ticket = get_party_ticket(ticket_id, principal, lock=True)
        else:
            ticket = get_admin_ticket(ticket_id, lock=True)

        if not ticket.is_open():
            raise TicketCannotBeClosed()

        role = resolve_role(ticket, principal)
        ticket.status = EscrowStatus.CLOSED
        ticket.closed_at = timezone.now()
        ticket.closed_by = role
        ticket.save()

    if role == PartyRole.ADMIN:
        logger.info(f'Escrow ticket {ticket.id} closed by admin {principal.email}')
        notifications.notify_admin_closed(ticket)
    else:
        notifications.notify_party_closed(ticket, principal, ticket.party_id(counterpart(role)))
    notifications.broadcast_ticket_update(ticket, 'escrow-closed')
    return ticket


def reopen_ticket(ticket_id, admin):
    with transaction.atomic():
        ticket = get_admin_ticket(ticket_id, lock=True)
        ticket.status = EscrowStatus.ACTIVE
        ticket.closed_at = None
        ticket.closed_by = None
        ticket.last_activity = timezone.now()
        ticket.save()

    logger.warning(f'Escrow ticket {ticket.id} reopened by {admin.email} (original: {admin.is_original})')
    notifications.notify_reopened(ticket)
    notifications.broadcast_ticket_update(ticket, 'escrow-reopened')
    return ticket


def update_status(ticket_id, admin, new_status):
    '''
    Administrative override: assigns any valid status directly, outside the
    party transition table. Entering closed stamps closed_at/closed_by;
    leaving closed clears them. The invitation status is left untouched.
    '''
    with transaction.atomic():
        ticket = get_admin_ticket(ticket_id, lock=True)
        new_status = validate_status(new_status)
        old_status = ticket.status
        ticket.status = new_status

        if new_status == EscrowStatus.CLOSED and old_status != EscrowStatus.CLOSED:
            ticket.closed_at = timezone.now()
            ticket.closed_by = PartyRole.ADMIN
        elif new_status != EscrowStatus.CLOSED and old_status == EscrowStatus.CLOSED:
            ticket.closed_at = None
            ticket.closed_by = None
        ticket.save()

    logger.warning(
        f'Escrow ticket {ticket.id} status {old_status} -> {new_status} '
        f'by {admin.email} (original: {admin.is_original})'
    )
    notifications.notify_status_update(ticket, new_status)
    notifications.broadcast_ticket_update(ticket, 'status-update')
    return ticket


def set_admin_notes(ticket_id, admin, notes):
    if notes is not None and not isinstance(notes, str):
        raise ValidationError('notes must be a string')

    with transaction.atomic():
        ticket = get_admin_ticket(ticket_id, lock=True)
        ticket.admin_notes = notes
        ticket.save(update_fields=['admin_notes', 'updated_at'])

    logger.info(f'Admin notes updated on escrow ticket {ticket.id} by {admin.email}')
    return ticket


def soft_delete_ticket(ticket_id, admin):
    if not admin.is_original:
        raise OriginalAdminRequired(action='delete escrow tickets', admin=admin)

    with transaction.atomic():
        ticket = get_admin_ticket(ticket_id, lock=True)
        ticket.is_deleted = True
        ticket.deleted_at = timezone.now()
        ticket.deleted_by = admin.email
        ticket.save(update_fields=['is_deleted', 'deleted_at', 'deleted_by', 'updated_at'])

    logger.warning(f'Escrow ticket {ticket.id} deleted by {admin.email}')
    return ticket


def unread_message_count(account):
    '''
    Unread messages written by the counterpart across the account's tickets.
    '''
    return EscrowMessage.objects.filter(
        ticket__is_deleted=False,
        read=False
    ).filter(
        Q(ticket__initiator=account, sender=PartyRole.RECIPIENT) |
        Q(ticket__recipient=account, sender=PartyRole.INITIATOR)
    ).count()


def list_tickets(principal, query_params):
    '''
    Paginated tickets visible to the principal, most recent activity first.
    Accounts see tickets they are a party to; admins see every ticket.
    '''
    page, limit = parse_page_params(query_params, default_limit=10 if is_account(principal) else 20)
    queryset = EscrowTicket.objects.select_related('initiator', 'recipient').prefetch_related('messages')

    if is_account(principal):
        ticket_type = query_params.get('type')
        if ticket_type == 'initiated':
            queryset = queryset.filter(initiator=principal)
        elif ticket_type == 'received':
            queryset = queryset.filter(recipient=principal)
        else:
            queryset = queryset.filter(party_filter(principal))

    ticket_status = query_params.get('status')
    if ticket_status and ticket_status != 'all':
        queryset = queryset.filter(status=ticket_status)

    search = (query_params.get('search') or '').strip()
    if search:
        queryset = queryset.filter(Q(title__icontains=search) | Q(description__icontains=search))

    queryset = queryset.order_by('-last_activity', '-id')
    page_results, total, total_pages = paginate(queryset, page, limit)

    result = {
        'tickets': page_results,
        'totalPages': total_pages,
        'currentPage': page,
        'total': total
    }
    if is_account(principal):
        result['unreadCount'] = unread_message_count(principal)
    return result


def get_ticket(ticket_id, principal):
    '''
    Parties get their own tickets only, and reading one marks the
    counterpart's messages as read. Admin messages are left unread.
    '''
    if not is_account(principal):
        return get_admin_ticket(ticket_id)

    ticket = get_party_ticket(ticket_id, principal)
    role = resolve_role(ticket, principal)
    ticket.messages.filter(read=False).exclude(
        sender__in=[role, PartyRole.ADMIN]
    ).update(read=True)
    return ticket


def search_users(account, query):
    query = (query or '').strip()
    if len(query) < SEARCH_MIN_LENGTH:
        return Account.objects.none()

    return Account.objects.filter(
        is_deleted=False,
        is_active=True,
        is_email_confirmed=True
    ).exclude(
        pk=account.pk
    ).filter(
        Q(first_name__icontains=query) |
        Q(last_name__icontains=query) |
        Q(email__icontains=query) |
        Q(business_name__icontains=query)
    ).order_by('-is_recommended', 'first_name', 'id')[:SEARCH_RESULT_LIMIT]
