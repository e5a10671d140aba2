import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from backoffice.core.modules.notification.models import NotificationEvent
from backoffice.web.deps import WsAppDep

logger = structlog.get_logger(__name__)

router: APIRouter = APIRouter(tags=["notifications"])


class WebSocketSubscriber:
    """Adapts a websocket connection to the notification subscriber interface."""

    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket

    @property
    def is_open(self) -> bool:
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    async def send(self, event: NotificationEvent) -> None:
        await self.websocket.send_json(event.model_dump(mode="json"))


@router.websocket("/ws/orders")
async def order_notifications(websocket: WebSocket, app: WsAppDep) -> None:
    await websocket.accept()
    subscription = await app.subscribe_to_orders(WebSocketSubscriber(websocket))
    try:
        # Client messages are ignored, reading only detects the disconnect
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("websocket_disconnected", subscription_id=subscription.id)
    finally:
        await app.unsubscribe_from_orders(subscription)
