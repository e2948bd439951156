import os
import random
import sys
import pytest

# Ensure the backend root (containing the `memory_game` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from memory_game import GAME_NAMESPACE, create_app, db, socketio
from memory_game.services.games.room import Room, RoomStatus


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ['http://localhost:3000']
    RESOLUTION_DELAY_SEC = 0
    ROOM_CODE_LENGTH = 6
    MAX_NAME_LENGTH = 24
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def router(flask_app):
    return flask_app.extensions['memory_game']


def _connect(flask_app):
    return socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace=GAME_NAMESPACE,
    )


@pytest.fixture()
def sio_client(flask_app):
    test_client = _connect(flask_app)
    yield test_client
    if test_client.is_connected(GAME_NAMESPACE):
        test_client.disconnect(namespace=GAME_NAMESPACE)


@pytest.fixture()
def guest_client(flask_app):
    test_client = _connect(flask_app)
    yield test_client
    if test_client.is_connected(GAME_NAMESPACE):
        test_client.disconnect(namespace=GAME_NAMESPACE)


def pair_positions(room):
    """Map each symbol to the two card ids holding it."""
    positions = {}
    for card in room.cards:
        positions.setdefault(card.symbol, []).append(card.id)
    return positions


def mismatched_pair(room):
    first = room.cards[0]
    for card in room.cards[1:]:
        if card.symbol != first.symbol:
            return first.id, card.id
    raise AssertionError('deck has a single symbol')


@pytest.fixture()
def playing_room():
    """A seeded two-seat room that has just started."""
    room = Room('ABC123', rng=random.Random(7))
    room.add_seat('host', 'Alice')
    room.add_seat('guest', 'Bob')
    room.mark_ready('host')
    room.mark_ready('guest')
    assert room.status == RoomStatus.PLAYING
    return room
