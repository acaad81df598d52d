from django.utils import timezone
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import Account
from authentication.permissions import IsGlobalAdmin
from escrow.models import EscrowTicket, EscrowStatus
from support.models import SupportTicket, PublicSupportTicket, SupportStatus

import time

STARTED_AT = time.monotonic()
RECENT_LIMIT = 5
OPEN_SUPPORT_STATUSES = [SupportStatus.OPEN, SupportStatus.IN_PROGRESS]


class HealthCheckView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        data = {
            'status': 'OK',
            'timestamp': timezone.now().isoformat(),
            'uptime': round(time.monotonic() - STARTED_AT, 3)
        }
        return Response(data, status=status.HTTP_200_OK)


class AdminDashboardView(APIView):
    permission_classes = [IsGlobalAdmin]

    def get_stats(self):
        accounts = Account.objects.filter(is_deleted=False)
        return {
            'totalUsers': accounts.count(),
            'activeUsers': accounts.filter(is_active=True).count(),
            'totalTickets': SupportTicket.objects.count() + PublicSupportTicket.objects.count(),
            'openTickets': (
                SupportTicket.objects.filter(status__in=OPEN_SUPPORT_STATUSES).count() +
                PublicSupportTicket.objects.filter(status__in=OPEN_SUPPORT_STATUSES).count()
            ),
            'totalEscrowTickets': EscrowTicket.objects.count(),
            'activeEscrowTickets': EscrowTicket.objects.filter(
                status__in=[EscrowStatus.PENDING, EscrowStatus.ACTIVE]
            ).count(),
        }

    def get_recent_users(self):
        accounts = Account.objects.filter(is_deleted=False).order_by('-created_at', '-id')[:RECENT_LIMIT]
        return [
            {
                'id': account.id,
                'firstName': account.first_name,
                'lastName': account.last_name,
                'email': account.email,
                'isActive': account.is_active,
                'createdAt': account.created_at
            }
            for account in accounts
        ]

    def get_recent_tickets(self):
        tickets = []
        for ticket in SupportTicket.objects.select_related('account').order_by('-created_at')[:RECENT_LIMIT]:
            tickets.append({
                'id': ticket.id,
                'type': 'user',
                'subject': ticket.subject,
                'status': ticket.status,
                'createdAt': ticket.created_at,
                'user': {
                    'firstName': ticket.account.first_name,
                    'lastName': ticket.account.last_name,
                    'email': ticket.account.email
                }
            })
        for ticket in PublicSupportTicket.objects.order_by('-created_at')[:RECENT_LIMIT]:
            tickets.append({
                'id': ticket.id,
                'type': 'public',
                'subject': ticket.subject,
                'status': ticket.status,
                'createdAt': ticket.created_at,
                'user': {
                    'firstName': ticket.name,
                    'lastName': '',
                    'email': ticket.email
                }
            })
        tickets.sort(key=lambda ticket: ticket['createdAt'], reverse=True)
        return tickets[:RECENT_LIMIT]

    def get(self, request):
        data = {
            'stats': self.get_stats(),
            'recentUsers': self.get_recent_users(),
            'recentTickets': self.get_recent_tickets()
        }
        return Response(data, status=status.HTTP_200_OK)
