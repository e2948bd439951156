from flask import current_app, request
from flask_socketio import emit

from memory_game import GAME_NAMESPACE, socketio
from memory_game.services.games import RoomError


def _router():
    return current_app.extensions['memory_game']


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _field(data, key):
    if isinstance(data, dict):
        return data.get(key)
    return data


def handle_connect(auth=None):
    emit('connected', {'id': _get_sid()})


def handle_disconnect(*_args):
    sid = _get_sid()
    if _router().leave(sid, unsubscribe=False):
        current_app.logger.info(f"[disconnect] sid={sid} seat released")


def handle_create_room(data=None):
    room = _router().create_room(_get_sid(), _field(data, 'display_name'))
    with room.lock:
        return {'success': True, 'room_id': room.room_id, 'state': room.to_dict()}


def handle_join_room(data=None):
    data = data if isinstance(data, dict) else {}
    try:
        room = _router().join_room(_get_sid(), data.get('room_id'), data.get('display_name'))
    except RoomError as exc:
        current_app.logger.info(f"[join-refused] room={data.get('room_id')} reason={exc.code}")
        return exc.to_dict()
    with room.lock:
        return {'success': True, 'room_id': room.room_id, 'state': room.to_dict()}


def handle_player_ready(*_args):
    _router().player_ready(_get_sid())


def handle_flip_card(data=None):
    _router().flip_card(_get_sid(), _field(data, 'card_id'))


def handle_restart_game(*_args):
    _router().restart_game(_get_sid())


def handle_leave_room(*_args):
    return {'success': _router().leave(_get_sid())}


def register_socketio_handlers(namespace: str = GAME_NAMESPACE) -> None:
    """Register the game's Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('create_room', handle_create_room, namespace=namespace)
    socketio.on_event('join_room', handle_join_room, namespace=namespace)
    socketio.on_event('player_ready', handle_player_ready, namespace=namespace)
    socketio.on_event('flip_card', handle_flip_card, namespace=namespace)
    socketio.on_event('restart_game', handle_restart_game, namespace=namespace)
    socketio.on_event('leave_room', handle_leave_room, namespace=namespace)
