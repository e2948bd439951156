"""Typed outcomes surfaced to callers that create or join rooms.

Every other invalid action is dropped without an error.
"""


class RoomError(Exception):
    """Base class for room lookup and seating failures."""

    code = 'room_error'
    message = 'Room error'

    def __init__(self, room_id=None, message=None):
        self.room_id = room_id
        super().__init__(message or self.message)

    def to_dict(self):
        return {'success': False, 'error': self.code, 'message': str(self)}


class RoomNotFound(RoomError):
    code = 'room_not_found'
    message = 'Room not found'


class RoomFull(RoomError):
    code = 'room_full'
    message = 'Room is full'


class GameAlreadyStarted(RoomError):
    code = 'game_already_started'
    message = 'The game has already started'
