from django.urls import path

from accounts.views import (
    GlobalAdminProfile,
    GlobalAdminCreate,
    GlobalAdminList,
    GlobalAdminDetail,
    AdminAccountViewSet,
)

global_admin_urlpatterns = [
    path('profile/', GlobalAdminProfile.as_view(), name='global-admin-profile'),
    path('create-admin/', GlobalAdminCreate.as_view(), name='global-admin-create'),
    path('admins/', GlobalAdminList.as_view(), name='global-admin-list'),
    path('admins/<int:pk>/', GlobalAdminDetail.as_view(), name='global-admin-detail'),
    path('users/', AdminAccountViewSet.as_view({'get': 'list'}), name='admin-user-list'),
    path('users/<int:pk>/', AdminAccountViewSet.as_view({'delete': 'destroy'}), name='admin-user-detail'),
    path('users/<int:pk>/toggle-status/', AdminAccountViewSet.as_view({'patch': 'toggle_status'}), name='admin-user-toggle-status'),
    path('users/<int:pk>/toggle-recommendation/', AdminAccountViewSet.as_view({'patch': 'toggle_recommendation'}), name='admin-user-toggle-recommendation'),
    path('users/<int:pk>/recover/', AdminAccountViewSet.as_view({'patch': 'recover'}), name='admin-user-recover'),
]
