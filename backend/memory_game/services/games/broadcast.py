import logging

logger = logging.getLogger(__name__)


def channel_for(room_id: str) -> str:
    return f"room:{room_id}"


class BroadcastGateway:
    """Fan-out of room state to every connection subscribed to a room.

    Delivery is fire-and-forget; the Socket.IO transport owns retries.
    """

    def __init__(self, socketio, namespace: str = '/ws'):
        self.socketio = socketio
        self.namespace = namespace

    def subscribe(self, sid: str, room_id: str) -> None:
        self.socketio.server.enter_room(sid, channel_for(room_id), namespace=self.namespace)

    def unsubscribe(self, sid: str, room_id: str) -> None:
        self.socketio.server.leave_room(sid, channel_for(room_id), namespace=self.namespace)

    def broadcast_state(self, room) -> None:
        self.socketio.emit('state_update', room.to_dict(), to=channel_for(room.room_id), namespace=self.namespace)

    def notify(self, room_id: str, event: str, payload) -> None:
        logger.debug(f"[notify] room={room_id} event={event}")
        self.socketio.emit(event, payload, to=channel_for(room_id), namespace=self.namespace)
