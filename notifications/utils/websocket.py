from channels.layers import get_channel_layer
from asgiref.sync import async_to_sync
from django.core.serializers.json import DjangoJSONEncoder

import json

import logging
logger = logging.getLogger(__name__)

GLOBAL_ADMIN_ROOM = 'notifications_global_admin'


def notification_room(account_id):
    return f'notifications_{account_id}'


def escrow_ticket_room(ticket_id):
    return f'escrow_ticket_{ticket_id}'


def to_wire(payload):
    '''
    Channel layers only carry msgpack-able values, so decimals, dates and
    lazy strings are flattened the same way DRF renders them.
    '''
    return json.loads(json.dumps(payload, cls=DjangoJSONEncoder))


def broadcast(room_name, payload):
    """
    Sends a payload to every consumer subscribed to a group. Consumers
    relay it through their `send_message` handler.
    """
    async_to_sync(get_channel_layer().group_send)(
        room_name,
        {'type': 'send_message', 'message': to_wire(payload)}
    )


def send_notification(payload, account_id):
    broadcast(notification_room(account_id), payload)


def send_global_admin_update(payload):
    broadcast(GLOBAL_ADMIN_ROOM, payload)


def send_escrow_ticket_update(payload, ticket_id):
    broadcast(escrow_ticket_room(ticket_id), payload)
