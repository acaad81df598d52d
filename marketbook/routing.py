import escrow.routing
import notifications.routing

websocket_urlpatterns = (
    notifications.routing.websocket_urlpatterns +
    escrow.routing.websocket_urlpatterns
)
