from django.utils import timezone

from notifications.models import NotificationType
from notifications.utils.send import notify_user, notify_users, notify_global_admins

import logging
logger = logging.getLogger(__name__)


def push_admin_feed(event_type, message, ticket_id, **extra):
    '''
    Pushes a support event to every connected global admin. Never raises.
    '''
    payload = {
        'type': event_type,
        'message': message,
        'ticketId': ticket_id,
        'timestamp': timezone.now().isoformat(),
        **extra
    }
    try:
        notify_global_admins(payload)
    except Exception:
        logger.exception(f'Error pushing admin feed event {event_type} for ticket {ticket_id}')


def notify_new_ticket(ticket):
    push_admin_feed(
        'new-ticket',
        f'New support ticket: {ticket.subject}',
        ticket.id,
        userId=ticket.account_id,
        userName=ticket.account.full_name
    )


def notify_user_reply(ticket):
    push_admin_feed(
        'ticket-reply',
        f'New reply on ticket: {ticket.subject}',
        ticket.id,
        userId=ticket.account_id,
        userName=ticket.account.full_name
    )


def notify_public_ticket(ticket):
    push_admin_feed(
        'public-support-ticket',
        f'New public support ticket from {ticket.email}',
        ticket.id,
        data={
            'id': ticket.id,
            'name': ticket.name,
            'email': ticket.email,
            'message': ticket.message,
            'createdAt': ticket.created_at.isoformat()
        }
    )


def notify_admin_reply(ticket):
    if not ticket.account.is_usable():
        return
    notify_user(
        ticket.account_id,
        'Support Reply',
        f'You have a new reply on your support ticket: {ticket.subject}',
        NotificationType.INFO,
        {'ticketId': ticket.id, 'action': 'support-reply'}
    )


def notify_status_update(ticket):
    if not ticket.account.is_usable():
        return
    notify_user(
        ticket.account_id,
        'Ticket Status Updated',
        f'Your support ticket status has been updated to: {ticket.status}',
        NotificationType.INFO,
        {'ticketId': ticket.id, 'action': 'support-status-update'}
    )


def notify_direct_message(ticket, subject):
    notify_user(
        ticket.account_id,
        'New Message from Admin',
        f'You have received a new message: {subject}',
        NotificationType.INFO,
        {'ticketId': ticket.id, 'action': 'admin-message'}
    )


def broadcast_announcement(account_ids, subject, message):
    '''
    Returns how many accounts got a stored notification.
    '''
    results = notify_users(account_ids, subject, message, NotificationType.INFO, {'action': 'admin-broadcast'})
    return len([notification for notification in results if notification is not None])
