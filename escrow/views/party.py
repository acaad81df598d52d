from rest_framework import status, viewsets
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.decorators import action
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from authentication.permissions import IsAccount
from accounts.serializers import AccountSearchSerializer
from escrow.models import EscrowCategory
from escrow.serializers import EscrowTicketSerializer
from escrow.utils import handler
from marketbook.utils import get_client_ip, get_user_agent

import logging
logger = logging.getLogger(__name__)

__all__ = [
    'EscrowUserSearch',
    'EscrowTicketViewSet',
]


class EscrowUserSearch(APIView):
    permission_classes = [IsAccount]

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('q', openapi.IN_QUERY, type=openapi.TYPE_STRING),
        ]
    )
    def get(self, request):
        users = handler.search_users(request.user, request.query_params.get('q'))
        serializer = AccountSearchSerializer(users, many=True)
        return Response({'users': serializer.data}, status=status.HTTP_200_OK)


class EscrowTicketViewSet(viewsets.GenericViewSet):
    permission_classes = [IsAccount]
    serializer_class = EscrowTicketSerializer

    def ticket_response(self, message, ticket, status_code=status.HTTP_200_OK):
        data = {
            'message': message,
            'escrowTicket': self.get_serializer(ticket).data
        }
        return Response(data, status=status_code)

    @swagger_auto_schema(
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            properties={
                'recipientId': openapi.Schema(type=openapi.TYPE_INTEGER),
                'title': openapi.Schema(type=openapi.TYPE_STRING),
                'description': openapi.Schema(type=openapi.TYPE_STRING),
                'transactionAmount': openapi.Schema(type=openapi.TYPE_NUMBER),
                'currency': openapi.Schema(type=openapi.TYPE_STRING),
                'category': openapi.Schema(type=openapi.TYPE_STRING, enum=EscrowCategory.values),
            }
        )
    )
    def create(self, request):
        ticket = handler.create_ticket(
            request.user,
            request.data,
            ip_address=get_client_ip(request),
            user_agent=get_user_agent(request)
        )
        return self.ticket_response('Escrow invitation sent successfully', ticket, status.HTTP_201_CREATED)

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('type', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=['initiated', 'received']),
        ]
    )
    def list(self, request):
        result = handler.list_tickets(request.user, request.query_params)
        result['tickets'] = self.get_serializer(result['tickets'], many=True).data
        return Response(result, status=status.HTTP_200_OK)

    def retrieve(self, request, pk):
        ticket = handler.get_ticket(pk, request.user)
        return Response(self.get_serializer(ticket).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            properties={
                'action': openapi.Schema(type=openapi.TYPE_STRING, enum=['accept', 'decline']),
            }
        )
    )
    @action(detail=True, methods=['patch'])
    def respond(self, request, pk):
        action = request.data.get('action')
        ticket = handler.respond_to_invitation(pk, request.user, action)
        return self.ticket_response(f'Escrow invitation {action}ed successfully', ticket)

    @swagger_auto_schema(
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            properties={
                'message': openapi.Schema(type=openapi.TYPE_STRING),
            }
        )
    )
    @action(detail=True, methods=['post'])
    def message(self, request, pk):
        ticket = handler.post_party_message(pk, request.user, request.data.get('message'))
        return self.ticket_response('Message sent successfully', ticket)

    @action(detail=True, methods=['patch'])
    def close(self, request, pk):
        ticket = handler.close_ticket(pk, request.user)
        return self.ticket_response('Escrow ticket closed successfully', ticket)
