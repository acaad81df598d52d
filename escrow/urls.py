from django.urls import path

from escrow.views import (
    EscrowUserSearch,
    EscrowTicketViewSet,
    AdminEscrowTicketViewSet,
)

urlpatterns = [
    path('search-users/', EscrowUserSearch.as_view(), name='escrow-search-users'),
    path('create/', EscrowTicketViewSet.as_view({'post': 'create'}), name='escrow-create'),
    path('my-tickets/', EscrowTicketViewSet.as_view({'get': 'list'}), name='escrow-my-tickets'),
    path('tickets/<int:pk>/', EscrowTicketViewSet.as_view({'get': 'retrieve'}), name='escrow-ticket-detail'),
    path('tickets/<int:pk>/respond/', EscrowTicketViewSet.as_view({'patch': 'respond'}), name='escrow-ticket-respond'),
    path('tickets/<int:pk>/message/', EscrowTicketViewSet.as_view({'post': 'message'}), name='escrow-ticket-message'),
    path('tickets/<int:pk>/close/', EscrowTicketViewSet.as_view({'patch': 'close'}), name='escrow-ticket-close'),
]

global_admin_urlpatterns = [
    path('escrow-tickets/', AdminEscrowTicketViewSet.as_view({'get': 'list'}), name='admin-escrow-ticket-list'),
    path('escrow-tickets/<int:pk>/', AdminEscrowTicketViewSet.as_view({
        'get': 'retrieve',
        'delete': 'destroy'
    }), name='admin-escrow-ticket-detail'),
    path('escrow-tickets/<int:pk>/message/', AdminEscrowTicketViewSet.as_view({'post': 'message'}), name='admin-escrow-ticket-message'),
    path('escrow-tickets/<int:pk>/status/', AdminEscrowTicketViewSet.as_view({'patch': 'update_status'}), name='admin-escrow-ticket-status'),
    path('escrow-tickets/<int:pk>/close/', AdminEscrowTicketViewSet.as_view({'patch': 'close'}), name='admin-escrow-ticket-close'),
    path('escrow-tickets/<int:pk>/reopen/', AdminEscrowTicketViewSet.as_view({'patch': 'reopen'}), name='admin-escrow-ticket-reopen'),
    path('escrow-tickets/<int:pk>/notes/', AdminEscrowTicketViewSet.as_view({'patch': 'notes'}), name='admin-escrow-ticket-notes'),
]
