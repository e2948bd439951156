import click
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from flask_sqlalchemy import SQLAlchemy

from config import Config

db = SQLAlchemy()
socketio = SocketIO(async_mode=None)

GAME_NAMESPACE = '/ws'


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS', [])
    db.init_app(flask_app)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One engine per app so tests never share rooms
    from memory_game.services.games.bindings import ConnectionBindings
    from memory_game.services.games.broadcast import BroadcastGateway
    from memory_game.services.games.registry import RoomRegistry
    from memory_game.services.games.router import ActionRouter
    from memory_game.services.games.scheduler import ResolutionScheduler
    from memory_game.services.games.stats import record_game_result

    router = ActionRouter(
        registry=RoomRegistry(code_length=flask_app.config.get('ROOM_CODE_LENGTH', 6)),
        bindings=ConnectionBindings(),
        gateway=BroadcastGateway(socketio, namespace=GAME_NAMESPACE),
        max_name_length=flask_app.config.get('MAX_NAME_LENGTH', 24),
        on_game_finished=record_game_result,
    )
    router.scheduler = ResolutionScheduler(
        flask_app,
        socketio,
        on_fire=router.resolve,
        delay=float(flask_app.config.get('RESOLUTION_DELAY_SEC', 1.0)),
    )
    flask_app.extensions['memory_game'] = router

    # Import and register blueprints here
    from memory_game.main import main
    flask_app.register_blueprint(main, url_prefix='/api')

    # Register Socket.IO event handlers
    from memory_game.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    with flask_app.app_context():
        import memory_game.models  # noqa: F401
        db.create_all()

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the statistics tables."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
