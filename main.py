"""
Hangman Game Server - Main Entry Point

Creates the Flask-SocketIO application, which loads the word catalog and
starts the first round, then serves it.
"""

from hangman import create_app
from hangman.config import Config
from hangman.utils.game_logger import game_logger


def main():
    """Main function to create the application and start the server."""
    try:
        print("Creating Flask application...")
        app, socketio = create_app(Config)
        print("✓ Flask application created successfully")
        print(f"✓ Words loaded from {app.game_service.word_provider.source} source")
        if app.game_service.store.degraded:
            print("✗ Storage unavailable - progress will not be saved")

        game_logger.logger.info("Hangman Server Starting")

        print(f"\nStarting Hangman Game Server on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print("=" * 50)

        socketio.run(app, host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Hangman Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
