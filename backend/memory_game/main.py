from flask import Blueprint, current_app, jsonify

from .models import PlayerStats
from .services.games import RoomNotFound

main = Blueprint('main', __name__)


def _router():
    return current_app.extensions['memory_game']


@main.route('/health')
def health():
    return jsonify({'status': 'ok', 'rooms': len(_router().registry)})


@main.route('/rooms/<string:room_id>')
def get_room(room_id):
    """Public lobby info for a room code, so clients can check before joining."""
    try:
        room = _router().registry.get(room_id)
    except RoomNotFound as exc:
        return jsonify(exc.to_dict()), 404
    with room.lock:
        return jsonify(room.info())


@main.route('/stats/<string:username>')
def get_stats(username):
    stats = PlayerStats.query.filter_by(username=username).first()
    if not stats:
        return jsonify({'success': False, 'error': 'stats_not_found', 'message': 'No games recorded'}), 404
    return jsonify(stats.to_dict())
