from rest_framework import status, viewsets
from rest_framework.views import APIView
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from authentication.permissions import IsGlobalAdmin, IsOriginalGlobalAdmin
from accounts.exceptions import AccountNotFound
from accounts.models import Account, GlobalAdmin
from accounts.serializers import GlobalAdminSerializer, AdminAccountSerializer
from marketbook.pagination import parse_page_params, paginate
from notifications.models import NotificationType
from notifications.utils.send import notify_user

import logging
logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class GlobalAdminProfile(APIView):
    permission_classes = [IsGlobalAdmin]

    def get(self, request):
        admin = request.user
        data = {
            'admin': {
                'id': admin.id,
                'email': admin.email,
                'lastLogin': admin.last_login,
                'isOriginal': admin.is_original
            }
        }
        return Response(data, status=status.HTTP_200_OK)


class GlobalAdminCreate(APIView):
    permission_classes = [IsOriginalGlobalAdmin]
    original_admin_action = 'create new admins'

    @swagger_auto_schema(
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            properties={
                'email': openapi.Schema(type=openapi.TYPE_STRING),
                'password': openapi.Schema(type=openapi.TYPE_STRING),
            }
        )
    )
    def post(self, request):
        email = (request.data.get('email') or '').strip().lower()
        password = request.data.get('password') or ''

        if not email or not password:
            raise ValidationError('Email and password are required')

        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters long')

        with transaction.atomic():
            if GlobalAdmin.objects.filter(email__iexact=email).exists():
                raise ValidationError('Admin with this email already exists')

            admin = GlobalAdmin(email=email, created_by=request.user, is_original=False)
            admin.set_password(password)
            admin.save()

        logger.info(f'New global admin created: {admin.id} {admin.email} (created by {request.user.email})')

        data = {
            'message': 'Global admin created successfully',
            'admin': GlobalAdminSerializer(admin).data
        }
        return Response(data, status=status.HTTP_201_CREATED)


class GlobalAdminList(APIView):
    permission_classes = [IsOriginalGlobalAdmin]
    original_admin_action = 'view all admins'

    def get(self, request):
        admins = GlobalAdmin.objects.select_related('created_by').order_by('-created_at', '-id')
        serializer = GlobalAdminSerializer(admins, many=True)
        return Response({'admins': serializer.data}, status=status.HTTP_200_OK)


class GlobalAdminDetail(APIView):
    permission_classes = [IsOriginalGlobalAdmin]
    original_admin_action = 'delete other admins'

    def delete(self, request, pk):
        try:
            target = GlobalAdmin.objects.get(pk=pk)
        except GlobalAdmin.DoesNotExist:
            raise NotFound('Admin not found')

        if target.is_original:
            raise PermissionDenied('Cannot delete the original Global Admin')

        target.delete()
        logger.warning(f'Global admin deleted: {pk} (deleted by {request.user.email})')
        return Response({'message': 'Global admin deleted successfully'}, status=status.HTTP_200_OK)


class AdminAccountViewSet(viewsets.GenericViewSet):
    '''
    Marketplace accounts as seen by global admins. Disabling, deleting or
    recovering an account changes whether it can be invited to escrow.
    '''
    permission_classes = [IsGlobalAdmin]
    serializer_class = AdminAccountSerializer

    def get_account(self, pk, include_deleted=False, lock=False):
        queryset = Account.objects.all()
        if not include_deleted:
            queryset = queryset.filter(is_deleted=False)
        if lock:
            queryset = queryset.select_for_update()
        account = queryset.filter(pk=pk).first()
        if account is None:
            raise AccountNotFound()
        return account

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('search', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=['active', 'inactive', 'deleted']),
            openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
        ]
    )
    def list(self, request):
        page, limit = parse_page_params(request.query_params, default_limit=20)
        account_status = request.query_params.get('status')

        if account_status == 'deleted':
            queryset = Account.objects.filter(is_deleted=True)
        else:
            queryset = Account.objects.filter(is_deleted=False)
            if account_status == 'active':
                queryset = queryset.filter(is_active=True)
            elif account_status == 'inactive':
                queryset = queryset.filter(is_active=False)

        search = (request.query_params.get('search') or '').strip()
        if search:
            queryset = queryset.filter(
                Q(first_name__icontains=search) |
                Q(last_name__icontains=search) |
                Q(email__icontains=search)
            )

        queryset = queryset.order_by('-created_at', '-id')
        page_results, total, total_pages = paginate(queryset, page, limit)

        data = {
            'users': self.get_serializer(page_results, many=True).data,
            'totalPages': total_pages,
            'currentPage': page,
            'total': total
        }
        return Response(data, status=status.HTTP_200_OK)

    @action(detail=True, methods=['patch'], url_path='toggle-status')
    def toggle_status(self, request, pk):
        with transaction.atomic():
            account = self.get_account(pk, lock=True)
            account.is_active = not account.is_active
            account.save(update_fields=['is_active', 'modified_at'])

        state = 'enabled' if account.is_active else 'disabled'
        logger.warning(f'Account {account.id} {state} by {request.user.email}')
        notify_user(
            account.id,
            f'Account {state.capitalize()}',
            f'Your account has been {state} by admin',
            NotificationType.SUCCESS if account.is_active else NotificationType.WARNING
        )

        data = {
            'message': f'User {state} successfully',
            'user': self.get_serializer(account).data
        }
        return Response(data, status=status.HTTP_200_OK)

    @action(detail=True, methods=['patch'], url_path='toggle-recommendation')
    def toggle_recommendation(self, request, pk):
        with transaction.atomic():
            account = self.get_account(pk, lock=True)
            account.is_recommended = not account.is_recommended
            account.save(update_fields=['is_recommended', 'modified_at'])

        if account.is_recommended:
            message = 'User marked as recommended successfully'
        else:
            message = 'User removed from recommended successfully'
        logger.info(f'Account {account.id} recommended={account.is_recommended} by {request.user.email}')

        data = {
            'message': message,
            'user': self.get_serializer(account).data
        }
        return Response(data, status=status.HTTP_200_OK)

    def destroy(self, request, pk):
        with transaction.atomic():
            account = self.get_account(pk, lock=True)
            account.is_deleted = True
            account.deleted_at = timezone.now()
            account.is_active = False
            account.save(update_fields=['is_deleted', 'deleted_at', 'is_active', 'modified_at'])

        logger.warning(f'Account {account.id} deleted by {request.user.email}')
        return Response({'message': 'User deleted successfully'}, status=status.HTTP_200_OK)

    @action(detail=True, methods=['patch'])
    def recover(self, request, pk):
        with transaction.atomic():
            account = self.get_account(pk, include_deleted=True, lock=True)
            account.is_deleted = False
            account.deleted_at = None
            account.is_active = True
            account.save(update_fields=['is_deleted', 'deleted_at', 'is_active', 'modified_at'])

        logger.warning(f'Account {account.id} recovered by {request.user.email}')
        notify_user(
            account.id,
            'Account Recovered',
            'Your account has been recovered by admin',
            NotificationType.SUCCESS
        )
        return Response({'message': 'User recovered successfully'}, status=status.HTTP_200_OK)
