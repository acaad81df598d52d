from django.urls import re_path

from escrow.consumers import EscrowTicketConsumer

websocket_urlpatterns = [
    re_path(r'ws/escrow/tickets/(?P<ticket_id>\d+)/$', EscrowTicketConsumer.as_asgi()),
]
