from django.db import transaction
from django.utils import timezone

from notifications.models import NotificationType
from notifications.utils.send import notify_user, notify_users
from notifications.utils.websocket import send_escrow_ticket_update

import functools

import logging
logger = logging.getLogger(__name__)


def best_effort(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception:
            logger.exception(f'{func.__name__} failed')
            return None
    return wrapper


def ticket_data(ticket, action):
    return {
        'escrowTicketId': ticket.id,
        'action': action
    }


@best_effort
def broadcast_ticket_update(ticket, action):
    data = {
        'type': 'escrow-ticket-update',
        'action': action,
        'escrowTicketId': ticket.id,
        'status': ticket.status,
        'invitationStatus': ticket.invitation_status,
        'lastActivity': ticket.last_activity,
        'timestamp': timezone.now()
    }

    def send():
        try:
            send_escrow_ticket_update(data, ticket.id)
        except Exception:
            logger.exception(f'Error broadcasting update for escrow ticket {ticket.id}')

    transaction.on_commit(send)


@best_effort
def notify_invitation(ticket, initiator):
    initiator_name = initiator.full_name
    notify_user(
        ticket.recipient_id,
        'New Escrow Invitation',
        f'{initiator_name} has invited you to an escrow transaction: {ticket.title}',
        NotificationType.INFO,
        {
            **ticket_data(ticket, 'escrow-invitation'),
            'initiatorName': initiator_name
        }
    )


@best_effort
def notify_invitation_response(ticket, recipient, action):
    accepted = action == 'accept'
    notify_user(
        ticket.initiator_id,
        f'Escrow Invitation {"Accepted" if accepted else "Declined"}',
        f'{recipient.full_name} has {action}ed your escrow invitation: {ticket.title}',
        NotificationType.SUCCESS if accepted else NotificationType.WARNING,
        ticket_data(ticket, f'escrow-{action}ed')
    )


@best_effort
def notify_party_message(ticket, sender, recipient_id):
    notify_user(
        recipient_id,
        'New Escrow Message',
        f'{sender.full_name} sent a message in escrow: {ticket.title}',
        NotificationType.INFO,
        ticket_data(ticket, 'escrow-message')
    )


@best_effort
def notify_party_closed(ticket, closer, recipient_id):
    notify_user(
        recipient_id,
        'Escrow Ticket Closed',
        f'{closer.full_name} has closed the escrow ticket: {ticket.title}',
        NotificationType.INFO,
        ticket_data(ticket, 'escrow-closed')
    )


@best_effort
def notify_parties(ticket, title, message, action):
    notify_users(
        ticket.party_ids(),
        title,
        message,
        NotificationType.INFO,
        ticket_data(ticket, action)
    )


def notify_admin_message(ticket):
    notify_parties(
        ticket,
        'Admin Message in Escrow',
        f'Global Admin has sent a message in your escrow ticket: {ticket.title}',
        'admin-message'
    )


def notify_admin_closed(ticket):
    notify_parties(
        ticket,
        'Escrow Ticket Closed',
        f'Global Admin has closed your escrow ticket: {ticket.title}',
        'escrow-closed'
    )


def notify_reopened(ticket):
    notify_parties(
        ticket,
        'Escrow Ticket Reopened',
        f'Your escrow ticket has been reopened by Global Admin: {ticket.title}',
        'escrow-reopened'
    )


def notify_status_update(ticket, new_status):
    notify_parties(
        ticket,
        'Escrow Status Updated',
        f'Your escrow ticket status has been updated to: {new_status}',
        'status-update'
    )
