import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from app.realtime.rooms import RoomManager, outlet_room, user_room

log = logging.getLogger("realtime")

router = APIRouter()

# Client -> server frames: {"event": <name>, "data": <outlet or user id>}
JOIN_EVENTS = {"join-outlet": outlet_room, "join-user": user_room}
LEAVE_EVENTS = {"leave-outlet": outlet_room, "leave-user": user_room}


@router.websocket("/ws")
async def socket_endpoint(websocket: WebSocket):
    """
    Room subscription socket for vendor dashboards and customer sessions.

    Membership is not authenticated: a client names the outlet or user id it
    represents and starts receiving that room's events.
    """
    rooms: RoomManager = websocket.app.state.rooms
    await websocket.accept()
    connection_id = rooms.register(websocket)
    try:
        while True:
            raw = await websocket.receive()
            if raw["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(raw.get("code", 1000))
            try:
                message = json.loads(raw.get("text") or raw.get("bytes") or "")
            except ValueError:
                message = None
            if not isinstance(message, dict):
                await websocket.send_json({"event": "error", "data": {"message": "Invalid frame"}})
                continue

            event = message.get("event")
            target = message.get("data")
            if event in JOIN_EVENTS and target:
                room = JOIN_EVENTS[event](target)
                rooms.join(connection_id, room)
                await websocket.send_json({"event": "joined", "data": {"room": room}})
            elif event in LEAVE_EVENTS and target:
                room = LEAVE_EVENTS[event](target)
                rooms.leave(connection_id, room)
                await websocket.send_json({"event": "left", "data": {"room": room}})
            else:
                await websocket.send_json({"event": "error", "data": {"message": f"Unknown event: {event}"}})
    except WebSocketDisconnect:
        log.info(f"Connection {connection_id} disconnected")
    finally:
        rooms.unregister(connection_id)
