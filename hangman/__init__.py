"""
Hangman Game Server Application Package

Flask application wrapping a single hangman game engine, with Socket.IO used
to push game events to connected clients.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config


def create_app(config_class=Config, store=None):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use
        store: Persistence store override; built from config when None

    Returns:
        Tuple of (Flask application, SocketIO instance). The game engine is
        available as ``app.game_service``.
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*", logger=False, engineio_logger=False)

    from .services.game_service import create_game_service
    from .services.notifications import SocketIONotificationSink

    # The countdown only runs in tests that opt in
    timer_enabled = not config_class.TESTING or config_class.ENABLE_TIMER_IN_TESTS
    game_service = create_game_service(
        config_class,
        store=store,
        sink=SocketIONotificationSink(socketio),
        start_background_task=socketio.start_background_task if timer_enabled else _no_background_task,
        sleep=socketio.sleep
    )
    game_service.load_words()
    game_service.reset_game()

    # Register blueprints
    from .controllers.game_controller import game_bp
    app.register_blueprint(game_bp, url_prefix='/api')

    # Store engine and socketio instance for use in other modules
    app.game_service = game_service
    app.socketio = socketio

    return app, socketio


def _no_background_task(target, *args, **kwargs):
    return None
