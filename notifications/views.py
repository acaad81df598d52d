from rest_framework import status, viewsets
from rest_framework.response import Response
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound

from authentication.permissions import IsAccount
from marketbook.pagination import parse_page_params, paginate
from notifications.models import Notification
from notifications.serializers import NotificationSerializer


class NotificationViewSet(viewsets.GenericViewSet):
    permission_classes = [IsAccount]
    serializer_class = NotificationSerializer

    def get_queryset(self):
        return Notification.objects.filter(account=self.request.user)

    def get_notification(self, pk):
        try:
            return self.get_queryset().get(pk=pk)
        except Notification.DoesNotExist:
            raise NotFound('Notification not found')

    def list(self, request):
        page, limit = parse_page_params(request.query_params, default_limit=20)
        queryset = self.get_queryset()

        if request.query_params.get('unreadOnly') == 'true':
            queryset = queryset.filter(read=False)

        queryset = queryset.order_by('-created_at', '-id')
        page_results, total, total_pages = paginate(queryset, page, limit)
        unread_count = self.get_queryset().filter(read=False).count()

        data = {
            'notifications': self.get_serializer(page_results, many=True).data,
            'totalPages': total_pages,
            'currentPage': page,
            'total': total,
            'unreadCount': unread_count
        }
        return Response(data, status=status.HTTP_200_OK)

    @action(detail=True, methods=['patch'])
    def read(self, request, pk):
        notification = self.get_notification(pk)
        notification.read = True
        notification.save(update_fields=['read', 'updated_at'])
        return Response({'message': 'Notification marked as read'}, status=status.HTTP_200_OK)

    @action(detail=False, methods=['patch'])
    def mark_all_read(self, request):
        updated = self.get_queryset().filter(read=False).update(read=True)
        data = {
            'message': 'All notifications marked as read',
            'updated': updated
        }
        return Response(data, status=status.HTTP_200_OK)

    def destroy(self, request, pk):
        self.get_notification(pk).delete()
        return Response({'message': 'Notification deleted successfully'}, status=status.HTTP_200_OK)
