from django.urls import path

from .views import NotificationViewSet

urlpatterns = [
    path('', NotificationViewSet.as_view({'get': 'list'}), name='notification-list'),
    path('mark-all-read/', NotificationViewSet.as_view({'patch': 'mark_all_read'}), name='notification-mark-all-read'),
    path('<int:pk>/', NotificationViewSet.as_view({'delete': 'destroy'}), name='notification-detail'),
    path('<int:pk>/read/', NotificationViewSet.as_view({'patch': 'read'}), name='notification-read'),
]
