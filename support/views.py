from rest_framework import status, viewsets
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.exceptions import ValidationError
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import transaction
from django.utils import timezone

from accounts.exceptions import AccountNotFound
from accounts.models import Account
from authentication.permissions import IsAccount, IsGlobalAdmin, IsOriginalGlobalAdmin
from marketbook.pagination import parse_page_params, paginate
from marketbook.utils import get_client_ip, get_user_agent
from support.exceptions import SupportTicketNotFound
from support.models import (
    SupportTicket,
    SupportMessage,
    SupportStatus,
    PublicSupportTicket,
    PublicSupportResponse,
    SupportCategory,
    SupportPriority,
    MessageSender
)
from support.serializers import (
    SupportTicketSerializer,
    SupportTicketCreateSerializer,
    AdminSupportTicketSerializer,
    AdminPublicSupportTicketSerializer
)
from support.utils import notifications

import logging
logger = logging.getLogger(__name__)

TICKET_TYPE_USER = 'user'
TICKET_TYPE_PUBLIC = 'public'

message_body = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        'message': openapi.Schema(type=openapi.TYPE_STRING),
    }
)


def validate_message(value):
    text = value.strip() if isinstance(value, str) else ''
    if not text:
        raise ValidationError('message is required')
    return text


def validate_support_status(value):
    if value not in SupportStatus.values:
        raise ValidationError(f'Invalid status. Use one of: {", ".join(SupportStatus.values)}')
    return value


class SupportTicketViewSet(viewsets.GenericViewSet):
    permission_classes = [IsAccount]
    serializer_class = SupportTicketSerializer

    def get_queryset(self):
        return SupportTicket.objects.filter(account=self.request.user)

    def get_ticket(self, pk, lock=False):
        queryset = self.get_queryset()
        if lock:
            queryset = queryset.select_for_update()
        ticket = queryset.filter(pk=pk).first()
        if ticket is None:
            raise SupportTicketNotFound()
        return ticket

    def list(self, request):
        page, limit = parse_page_params(request.query_params)
        queryset = self.get_queryset().prefetch_related('messages')

        ticket_status = request.query_params.get('status')
        if ticket_status and ticket_status != 'all':
            queryset = queryset.filter(status=ticket_status)

        queryset = queryset.order_by('-last_reply', '-id')
        page_results, total, total_pages = paginate(queryset, page, limit)

        data = {
            'tickets': self.get_serializer(page_results, many=True).data,
            'totalPages': total_pages,
            'currentPage': page,
            'total': total
        }
        return Response(data, status=status.HTTP_200_OK)

    @swagger_auto_schema(request_body=SupportTicketCreateSerializer)
    def create(self, request):
        serializer = SupportTicketCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            ticket = serializer.save(account=request.user)
            message = SupportMessage.objects.create(
                ticket=ticket,
                sender=MessageSender.USER,
                message=ticket.description
            )
            ticket.last_reply = message.timestamp
            ticket.save(update_fields=['last_reply', 'updated_at'])

        logger.info(f'Support ticket {ticket.id} created by account {request.user.id}')
        notifications.notify_new_ticket(ticket)

        data = {
            'message': 'Support ticket created successfully',
            'ticket': self.get_serializer(ticket).data
        }
        return Response(data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk):
        ticket = self.get_ticket(pk)
        ticket.messages.filter(sender=MessageSender.ADMIN, read=False).update(read=True)
        return Response(self.get_serializer(ticket).data, status=status.HTTP_200_OK)

    @swagger_auto_schema(request_body=message_body)
    @action(detail=True, methods=['post'])
    def reply(self, request, pk):
        text = validate_message(request.data.get('message'))

        with transaction.atomic():
            ticket = self.get_ticket(pk, lock=True)
            message = SupportMessage.objects.create(
                ticket=ticket,
                sender=MessageSender.USER,
                message=text
            )
            ticket.status = SupportStatus.OPEN
            ticket.last_reply = message.timestamp
            ticket.save(update_fields=['status', 'last_reply', 'updated_at'])

        notifications.notify_user_reply(ticket)

        data = {
            'message': 'Reply sent successfully',
            'ticket': self.get_serializer(ticket).data
        }
        return Response(data, status=status.HTTP_200_OK)

    @action(detail=True, methods=['patch'])
    def close(self, request, pk):
        ticket = self.get_ticket(pk)
        ticket.status = SupportStatus.CLOSED
        ticket.save(update_fields=['status', 'updated_at'])
        return Response({'message': 'Ticket closed successfully'}, status=status.HTTP_200_OK)


class PublicSupportTicketCreate(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            properties={
                'name': openapi.Schema(type=openapi.TYPE_STRING),
                'email': openapi.Schema(type=openapi.TYPE_STRING),
                'message': openapi.Schema(type=openapi.TYPE_STRING),
            }
        )
    )
    def post(self, request):
        name = request.data.get('name')
        email = request.data.get('email')
        message = request.data.get('message')

        if not isinstance(email, str) or not email.strip() or not isinstance(message, str) or not message.strip():
            raise ValidationError('Email and message are required')

        email = email.strip()
        try:
            validate_email(email)
        except DjangoValidationError:
            raise ValidationError('Invalid email address')

        name = name.strip() if isinstance(name, str) else ''
        ticket = PublicSupportTicket.objects.create(
            name=name[:128] or 'Anonymous',
            email=email,
            message=message.strip(),
            ip_address=get_client_ip(request),
            user_agent=get_user_agent(request)
        )
        logger.info(f'Public support ticket {ticket.id} created')
        notifications.notify_public_ticket(ticket)

        data = {
            'message': 'Support ticket submitted successfully. We will get back to you soon.',
            'ticketId': ticket.id
        }
        return Response(data, status=status.HTTP_201_CREATED)


class AdminSupportTicketViewSet(viewsets.GenericViewSet):
    '''
    One inbox over user tickets and anonymous public-form tickets.
    Detail routes are addressed by `<ticket_type>/<pk>`.
    '''
    permission_classes = [IsGlobalAdmin]
    serializer_class = AdminSupportTicketSerializer
    original_admin_action = 'delete support tickets'

    def get_permissions(self):
        if self.action == 'destroy':
            return [IsOriginalGlobalAdmin()]
        return super().get_permissions()

    def get_ticket(self, ticket_type, pk, lock=False):
        if ticket_type == TICKET_TYPE_USER:
            queryset = SupportTicket.objects.select_related('account')
        else:
            queryset = PublicSupportTicket.objects.all()

        if lock:
            queryset = queryset.select_for_update(of=('self',))
        ticket = queryset.filter(pk=pk).first()
        if ticket is None:
            raise SupportTicketNotFound()
        return ticket

    def serialize(self, ticket, many=False):
        if many:
            return [self.serialize(t) for t in ticket]
        if isinstance(ticket, SupportTicket):
            return AdminSupportTicketSerializer(ticket).data
        return AdminPublicSupportTicketSerializer(ticket).data

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('type', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=[TICKET_TYPE_USER, TICKET_TYPE_PUBLIC]),
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
        ]
    )
    def list(self, request):
        page, limit = parse_page_params(request.query_params, default_limit=20)
        ticket_type = request.query_params.get('type')
        ticket_status = request.query_params.get('status')

        if ticket_type and ticket_type not in (TICKET_TYPE_USER, TICKET_TYPE_PUBLIC):
            raise ValidationError('type must be user or public')

        tickets = []
        if ticket_type in (None, '', TICKET_TYPE_USER):
            queryset = SupportTicket.objects.filter(
                account__is_deleted=False
            ).select_related('account').prefetch_related('messages')
            if ticket_status and ticket_status != 'all':
                queryset = queryset.filter(status=ticket_status)
            tickets.extend(queryset)

        if ticket_type in (None, '', TICKET_TYPE_PUBLIC):
            queryset = PublicSupportTicket.objects.prefetch_related('responses')
            if ticket_status and ticket_status != 'all':
                queryset = queryset.filter(status=ticket_status)
            tickets.extend(queryset)

        tickets.sort(key=lambda ticket: ticket.last_reply, reverse=True)
        page_results, total, total_pages = paginate(tickets, page, limit)

        data = {
            'tickets': self.serialize(page_results, many=True),
            'totalPages': total_pages,
            'currentPage': page,
            'total': total
        }
        return Response(data, status=status.HTTP_200_OK)

    def retrieve(self, request, ticket_type, pk):
        ticket = self.get_ticket(ticket_type, pk)
        if isinstance(ticket, SupportTicket):
            ticket.messages.filter(sender=MessageSender.USER, read=False).update(read=True)
        return Response(self.serialize(ticket), status=status.HTTP_200_OK)

    @swagger_auto_schema(request_body=message_body)
    @action(detail=True, methods=['post'])
    def reply(self, request, ticket_type, pk):
        text = validate_message(request.data.get('message'))

        with transaction.atomic():
            ticket = self.get_ticket(ticket_type, pk, lock=True)
            now = timezone.now()
            if isinstance(ticket, SupportTicket):
                SupportMessage.objects.create(
                    ticket=ticket,
                    sender=MessageSender.ADMIN,
                    message=text,
                    timestamp=now
                )
                ticket.last_reply = now
            else:
                PublicSupportResponse.objects.create(
                    ticket=ticket,
                    message=text,
                    responded_by=request.user.email,
                    responded_at=now
                )
                ticket.last_response_at = now
            ticket.status = SupportStatus.IN_PROGRESS
            ticket.save()

        logger.info(f'Admin {request.user.email} replied to {ticket_type} ticket {ticket.id}')
        if isinstance(ticket, SupportTicket):
            notifications.notify_admin_reply(ticket)

        data = {
            'message': 'Reply sent successfully',
            'ticket': self.serialize(ticket)
        }
        return Response(data, status=status.HTTP_200_OK)

    @swagger_auto_schema(
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            properties={
                'status': openapi.Schema(type=openapi.TYPE_STRING, enum=SupportStatus.values),
            }
        )
    )
    @action(detail=True, methods=['patch'], url_path='status')
    def update_status(self, request, ticket_type, pk):
        new_status = validate_support_status(request.data.get('status'))

        with transaction.atomic():
            ticket = self.get_ticket(ticket_type, pk, lock=True)
            ticket.status = new_status
            ticket.save(update_fields=['status', 'updated_at'])

        logger.info(f'Admin {request.user.email} set {ticket_type} ticket {ticket.id} to {new_status}')
        if isinstance(ticket, SupportTicket):
            notifications.notify_status_update(ticket)

        data = {
            'message': 'Ticket status updated successfully',
            'ticket': self.serialize(ticket)
        }
        return Response(data, status=status.HTTP_200_OK)

    def destroy(self, request, ticket_type, pk):
        with transaction.atomic():
            ticket = self.get_ticket(ticket_type, pk, lock=True)
            ticket.is_deleted = True
            ticket.deleted_at = timezone.now()
            ticket.deleted_by = request.user.email
            ticket.save(update_fields=['is_deleted', 'deleted_at', 'deleted_by', 'updated_at'])

        logger.warning(f'{ticket_type} support ticket {ticket.id} deleted by {request.user.email}')
        if ticket_type == TICKET_TYPE_USER:
            message = 'User ticket deleted successfully'
        else:
            message = 'Public support ticket deleted successfully'
        return Response({'message': message}, status=status.HTTP_200_OK)


announcement_body = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        'subject': openapi.Schema(type=openapi.TYPE_STRING),
        'message': openapi.Schema(type=openapi.TYPE_STRING),
    }
)


def validate_announcement(data):
    subject = data.get('subject')
    message = data.get('message')
    subject = subject.strip() if isinstance(subject, str) else ''
    message = message.strip() if isinstance(message, str) else ''
    if not subject or not message:
        raise ValidationError('Subject and message are required')
    return subject[:200], message


class AdminDirectMessage(APIView):
    '''
    Opens a support ticket on the account's behalf with the admin's message
    as its first entry, so the account can answer in the same thread.
    '''
    permission_classes = [IsGlobalAdmin]

    @swagger_auto_schema(request_body=announcement_body)
    def post(self, request, pk):
        subject, message = validate_announcement(request.data)

        account = Account.objects.filter(pk=pk, is_deleted=False).first()
        if account is None:
            raise AccountNotFound()

        with transaction.atomic():
            ticket = SupportTicket.objects.create(
                account=account,
                subject=subject,
                description=message,
                status=SupportStatus.OPEN,
                priority=SupportPriority.MEDIUM,
                category=SupportCategory.OTHER
            )
            entry = SupportMessage.objects.create(
                ticket=ticket,
                sender=MessageSender.ADMIN,
                message=message
            )
            ticket.last_reply = entry.timestamp
            ticket.save(update_fields=['last_reply', 'updated_at'])

        logger.info(f'Admin {request.user.email} messaged account {account.id} (ticket {ticket.id})')
        notifications.notify_direct_message(ticket, subject)

        data = {
            'message': 'Message sent successfully',
            'ticketId': ticket.id
        }
        return Response(data, status=status.HTTP_200_OK)


class AdminBroadcastMessage(APIView):
    permission_classes = [IsGlobalAdmin]

    @swagger_auto_schema(request_body=announcement_body)
    def post(self, request):
        subject, message = validate_announcement(request.data)

        account_ids = list(
            Account.objects.filter(is_deleted=False, is_active=True).values_list('id', flat=True)
        )
        delivered = notifications.broadcast_announcement(account_ids, subject, message)
        logger.info(f'Admin {request.user.email} broadcast "{subject}" to {delivered}/{len(account_ids)} accounts')

        data = {
            'message': 'Broadcast message sent successfully',
            'recipientCount': len(account_ids)
        }
        return Response(data, status=status.HTTP_200_OK)
