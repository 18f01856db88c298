import logging
from typing import Any, Dict, Protocol

from app.realtime.rooms import RoomManager

log = logging.getLogger("realtime")

# Server -> client event names
NEW_ORDER = "new-order"
ORDER_CREATED = "order-created"
ORDER_UPDATED = "order-updated"
PAYMENT_UPDATED = "payment-updated"


class Notifier(Protocol):
    """Publish capability handed to the order lifecycle functions."""

    async def publish(self, room: str, event: str, payload: Dict[str, Any]) -> None: ...


class SocketNotifier:
    """Publishes to the sockets currently joined to a room. Best effort, at most once."""

    def __init__(self, rooms: RoomManager):
        self.rooms = rooms

    async def publish(self, room: str, event: str, payload: Dict[str, Any]) -> None:
        delivered = await self.rooms.emit(room, event, payload)
        log.info(f"[Socket] {event} -> {room} ({delivered} delivered)")
