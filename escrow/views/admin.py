from rest_framework import status, viewsets
from rest_framework.response import Response
from rest_framework.decorators import action
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from authentication.permissions import IsGlobalAdmin, IsOriginalGlobalAdmin
from escrow.models import EscrowStatus
from escrow.serializers import AdminEscrowTicketSerializer
from escrow.utils import handler

import logging
logger = logging.getLogger(__name__)

__all__ = [
    'AdminEscrowTicketViewSet',
]


class AdminEscrowTicketViewSet(viewsets.GenericViewSet):
    permission_classes = [IsGlobalAdmin]
    serializer_class = AdminEscrowTicketSerializer
    original_admin_action = 'delete escrow tickets'

    def get_permissions(self):
        if self.action == 'destroy':
            return [IsOriginalGlobalAdmin()]
        return super().get_permissions()

    def ticket_response(self, message, ticket):
        data = {
            'message': message,
            'ticket': self.get_serializer(ticket).data
        }
        return Response(data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('search', openapi.IN_QUERY, type=openapi.TYPE_STRING),
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
                'message': openapi.Schema(type=openapi.TYPE_STRING),
            }
        )
    )
    @action(detail=True, methods=['post'])
    def message(self, request, pk):
        ticket = handler.post_admin_message(pk, request.user, request.data.get('message'))
        return self.ticket_response('Admin message sent successfully', ticket)

    @swagger_auto_schema(
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            properties={
                'status': openapi.Schema(type=openapi.TYPE_STRING, enum=EscrowStatus.values),
            }
        )
    )
    @action(detail=True, methods=['patch'], url_path='status')
    def update_status(self, request, pk):
        ticket = handler.update_status(pk, request.user, request.data.get('status'))
        return self.ticket_response('Escrow ticket status updated successfully', ticket)

    @action(detail=True, methods=['patch'])
    def close(self, request, pk):
        ticket = handler.close_ticket(pk, request.user)
        return self.ticket_response('Escrow ticket closed successfully', ticket)

    @action(detail=True, methods=['patch'])
    def reopen(self, request, pk):
        ticket = handler.reopen_ticket(pk, request.user)
        return self.ticket_response('Escrow ticket reopened successfully', ticket)

    @swagger_auto_schema(
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            properties={
                'notes': openapi.Schema(type=openapi.TYPE_STRING),
            }
        )
    )
    @action(detail=True, methods=['patch'])
    def notes(self, request, pk):
        ticket = handler.set_admin_notes(pk, request.user, request.data.get('notes'))
        return self.ticket_response('Admin notes updated successfully', ticket)

    def destroy(self, request, pk):
        handler.soft_delete_ticket(pk, request.user)
        return Response({'message': 'Escrow ticket deleted successfully'}, status=status.HTTP_200_OK)
