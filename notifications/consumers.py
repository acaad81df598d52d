from channels.generic.websocket import AsyncWebsocketConsumer
from channels.db import database_sync_to_async
from rest_framework.exceptions import AuthenticationFailed
from urllib.parse import parse_qs
import json

from authentication.token import authenticate_key
from authentication.permissions import is_account, is_global_admin
from notifications.utils.websocket import notification_room, GLOBAL_ADMIN_ROOM

import logging
logger = logging.getLogger(__name__)

UNAUTHORIZED_CLOSE_CODE = 4401


@database_sync_to_async
def get_scope_principal(scope):
    query = parse_qs(scope.get('query_string', b'').decode())
    keys = query.get('token')
    if not keys:
        return None
    try:
        principal, _ = authenticate_key(keys[0])
    except AuthenticationFailed as err:
        logger.info(f'Websocket authentication failed: {err.detail}')
        return None
    return principal


class SubscriptionConsumer(AsyncWebsocketConsumer):
    room_name = None

    async def subscribe(self):
        await self.channel_layer.group_add(
            self.room_name,
            self.channel_name
        )
        await self.accept()
        data = {
            'success': True,
            'type': 'ConnectionMessage',
            'extra': {
                'message': f"Subscribed to '{self.room_name}'"
            }
        }
        await self.send(text_data=json.dumps(data))

    async def disconnect(self, close_code):
        if self.room_name:
            await self.channel_layer.group_discard(
                self.room_name,
                self.channel_name
            )

    async def send_message(self, event):
        data = event.get('message')
        await self.send(text_data=json.dumps(data))


class NotificationConsumer(SubscriptionConsumer):
    async def connect(self):
        account_id = self.scope['url_route']['kwargs']['account_id']
        principal = await get_scope_principal(self.scope)
        if not is_account(principal) or str(principal.id) != str(account_id):
            await self.close(code=UNAUTHORIZED_CLOSE_CODE)
            return

        self.room_name = notification_room(account_id)
        await self.subscribe()


class GlobalAdminUpdatesConsumer(SubscriptionConsumer):
    async def connect(self):
        principal = await get_scope_principal(self.scope)
        if not is_global_admin(principal):
            await self.close(code=UNAUTHORIZED_CLOSE_CODE)
            return

        self.room_name = GLOBAL_ADMIN_ROOM
        await self.subscribe()
