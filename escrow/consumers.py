from channels.db import database_sync_to_async

from notifications.consumers import SubscriptionConsumer, UNAUTHORIZED_CLOSE_CODE, get_scope_principal
from notifications.utils.websocket import escrow_ticket_room
from escrow.models import EscrowTicket
from escrow.roles import resolve_role

import logging
logger = logging.getLogger(__name__)


@database_sync_to_async
def can_follow_ticket(ticket_id, principal):
    ticket = EscrowTicket.objects.filter(pk=ticket_id).first()
    if ticket is None:
        return False
    return resolve_role(ticket, principal) is not None


class EscrowTicketConsumer(SubscriptionConsumer):
    '''
    Live updates of one escrow ticket, for its parties and global admins
    '''
    async def connect(self):
        ticket_id = self.scope['url_route']['kwargs']['ticket_id']
        principal = await get_scope_principal(self.scope)
        if principal is None or not await can_follow_ticket(ticket_id, principal):
            await self.close(code=UNAUTHORIZED_CLOSE_CODE)
            return

        self.room_name = escrow_ticket_room(ticket_id)
        await self.subscribe()
