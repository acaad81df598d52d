from django.urls import path, re_path

from support.views import (
    SupportTicketViewSet,
    PublicSupportTicketCreate,
    AdminSupportTicketViewSet,
    AdminDirectMessage,
    AdminBroadcastMessage,
)

urlpatterns = [
    path('tickets/', SupportTicketViewSet.as_view({
        'get': 'list',
        'post': 'create'
    }), name='support-ticket-list'),
    path('tickets/<int:pk>/', SupportTicketViewSet.as_view({'get': 'retrieve'}), name='support-ticket-detail'),
    path('tickets/<int:pk>/reply/', SupportTicketViewSet.as_view({'post': 'reply'}), name='support-ticket-reply'),
    path('tickets/<int:pk>/close/', SupportTicketViewSet.as_view({'patch': 'close'}), name='support-ticket-close'),
    path('public-support/', PublicSupportTicketCreate.as_view(), name='public-support-create'),
]

ticket_detail = r'^tickets/(?P<ticket_type>user|public)/(?P<pk>\d+)/'

global_admin_urlpatterns = [
    path('tickets/', AdminSupportTicketViewSet.as_view({'get': 'list'}), name='admin-support-ticket-list'),
    re_path(ticket_detail + r'$', AdminSupportTicketViewSet.as_view({
        'get': 'retrieve',
        'delete': 'destroy'
    }), name='admin-support-ticket-detail'),
    re_path(ticket_detail + r'reply/$', AdminSupportTicketViewSet.as_view({'post': 'reply'}), name='admin-support-ticket-reply'),
    re_path(ticket_detail + r'status/$', AdminSupportTicketViewSet.as_view({'patch': 'update_status'}), name='admin-support-ticket-status'),
    path('send-message/<int:pk>/', AdminDirectMessage.as_view(), name='admin-send-message'),
    path('broadcast-message/', AdminBroadcastMessage.as_view(), name='admin-broadcast-message'),
]
