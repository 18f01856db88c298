"""
In-process room membership table for connected sockets.

Delivery is fire-and-forget: a frame is sent once to every connection that is
in the room at publish time. Nothing is stored or redelivered; a client that
was disconnected catches up through the order sync endpoint.
"""
import logging
import uuid
from collections import defaultdict
from typing import Any, Dict, Protocol, Set

log = logging.getLogger("realtime")


class Connection(Protocol):
    async def send_json(self, data: Any) -> None: ...


def outlet_room(outlet_id) -> str:
    return f"outlet-{outlet_id}"


def user_room(user_id) -> str:
    return f"user-{user_id}"


class RoomManager:
    def __init__(self):
        self._connections: Dict[str, Connection] = {}
        # {room: set(connection_ids)}
        self._rooms: Dict[str, Set[str]] = defaultdict(set)

    def register(self, connection: Connection) -> str:
        connection_id = uuid.uuid4().hex
        self._connections[connection_id] = connection
        log.debug(f"Connection {connection_id} registered")
        return connection_id

    def unregister(self, connection_id: str) -> None:
        """Forget a connection and remove it from every room."""
        self._connections.pop(connection_id, None)
        for room in list(self._rooms.keys()):
            self.leave(connection_id, room)
        log.debug(f"Connection {connection_id} unregistered")

    def join(self, connection_id: str, room: str) -> None:
        if connection_id not in self._connections:
            raise KeyError(connection_id)
        self._rooms[room].add(connection_id)
        log.info(f"Connection {connection_id} joined {room}")

    def leave(self, connection_id: str, room: str) -> None:
        members = self._rooms.get(room)
        if members is None:
            return
        members.discard(connection_id)
        # Clean up empty rooms
        if not members:
            del self._rooms[room]

    def members(self, room: str) -> Set[str]:
        return set(self._rooms.get(room, ()))

    def rooms_of(self, connection_id: str) -> Set[str]:
        return {room for room, members in self._rooms.items() if connection_id in members}

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def emit(self, room: str, event: str, data: Any) -> int:
        """Sends one frame to each member of the room. Returns the number delivered."""
        members = self.members(room)
        if not members:
            log.debug(f"No members in room {room} for {event}")
            return 0

        frame = {"event": event, "data": data}
        delivered = 0
        for connection_id in members:
            connection = self._connections.get(connection_id)
            if connection is None:
                continue
            try:
                await connection.send_json(frame)
                delivered += 1
            except Exception as e:
                # Broken socket: drop it, the client resyncs on reconnect
                log.warning(f"Dropping connection {connection_id} after failed send of {event}: {e}")
                self.unregister(connection_id)

        log.debug(f"Emitted {event} to {delivered}/{len(members)} members of {room}")
        return delivered
