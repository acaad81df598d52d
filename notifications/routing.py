from django.urls import re_path

from notifications.consumers import NotificationConsumer, GlobalAdminUpdatesConsumer

websocket_urlpatterns = [
    re_path(r'ws/notifications/global-admin/$', GlobalAdminUpdatesConsumer.as_asgi()),
    re_path(r'ws/notifications/(?P<account_id>\d+)/$', NotificationConsumer.as_asgi()),
]
