"""marketbook URL Configuration

Every API route lives under ``/api/``; websocket routes are declared in
``marketbook.routing``.
"""
from django.urls import include, path, re_path

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

from accounts.urls import global_admin_urlpatterns as accounts_admin_urlpatterns
from escrow.urls import urlpatterns as escrow_urlpatterns
from escrow.urls import global_admin_urlpatterns as escrow_admin_urlpatterns
from notifications.urls import urlpatterns as notifications_urlpatterns
from support.urls import urlpatterns as support_urlpatterns
from support.urls import global_admin_urlpatterns as support_admin_urlpatterns

from marketbook.views import HealthCheckView, AdminDashboardView


schema_view = get_schema_view(
   openapi.Info(
      title="marketbook",
      default_version='v1',
      description="Escrow mediation, notifications and helpdesk API for the Marketbook marketplace",
   ),
   public=True,
   permission_classes=(permissions.AllowAny,),
)


urlpatterns = [
    path('api/health/', HealthCheckView.as_view(), name='health-check'),
    path('api/global-admin/dashboard/', AdminDashboardView.as_view(), name='admin-dashboard'),
    path('api/escrow/', include(escrow_urlpatterns)),
    path('api/global-admin/', include(accounts_admin_urlpatterns)),
    path('api/global-admin/', include(escrow_admin_urlpatterns)),
    path('api/global-admin/', include(support_admin_urlpatterns)),
    path('api/notifications/', include(notifications_urlpatterns)),
    path('api/', include(support_urlpatterns)),
    re_path(r'^api/swagger(?P<format>\.json|\.yaml)$', schema_view.without_ui(cache_timeout=0), name='schema-json'),
    re_path(r'^api/redoc/$', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
    re_path(r'^api/swagger/$', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
]
