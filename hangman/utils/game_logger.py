"""
Game Logger Module for the Hangman Server

Structured JSON logging for HTTP actions and responses, engine events and
recovered failures. One log file is written per day under Config.LOG_DIR.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from ..config.app_config import Config

LOGGER_NAME = 'hangman_game'
FILE_FORMAT = '%(asctime)s | %(levelname)s | %(message)s'
CONSOLE_FORMAT = '%(levelname)s: %(message)s'


class GameLogger:
    """
    Centralized logging system for the hangman game server.

    Every entry is one JSON object with the fields timestamp, event_type,
    action, client and details. Routes log USER_ACTION and SERVER_RESPONSE
    entries; the engine logs GAME_EVENT and WARNING entries.
    """

    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = getattr(logging, str(level).upper(), logging.INFO)
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """Daily file at the configured level; only warnings and errors on the console."""
        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(self.level)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)

        daily_file = self.log_dir / f"hangman_{datetime.now():%Y-%m-%d}.log"
        file_handler = logging.FileHandler(daily_file, encoding='utf-8')
        file_handler.setLevel(self.level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)
        return logger

    @staticmethod
    def _client(request) -> Dict[str, Optional[str]]:
        if request is None:
            return {}
        return {'ip': getattr(request, 'remote_addr', None) or 'unknown'}

    def _write(self, level: int, event_type: str, action: str,
               client: Dict[str, Any], details: Dict[str, Any]) -> None:
        entry = json.dumps({
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'client': client,
            'details': details
        }, ensure_ascii=False, default=str)
        self.logger.log(level, entry)

    def log_user_action(self, request, action: str, **kwargs):
        """
        Log an incoming API call.

        Args:
            request: Flask request object
            action: Route action name (e.g., 'guess', 'hint', 'start_multiplayer')
            **kwargs: Request parameters worth recording
        """
        details = {'endpoint': request.endpoint, 'method': request.method}
        details.update(kwargs)
        self._write(logging.INFO, 'USER_ACTION', action, self._client(request), details)

    def log_server_response(self,
                            request,
                            action: str,
                            success: bool,
                            response_data: Dict[str, Any],
                            **kwargs):
        """
        Log the response sent for an API call.

        Args:
            request: Flask request object
            action: Route action name
            success: Whether the call succeeded; failures are logged at ERROR
            response_data: Response body, summarized before logging
            **kwargs: Extra fields
        """
        details = {'success': success, 'response': self._summarize(response_data)}
        details.update(kwargs)
        self._write(
            logging.INFO if success else logging.ERROR,
            'SERVER_RESPONSE_SUCCESS' if success else 'SERVER_RESPONSE_ERROR',
            action,
            self._client(request),
            details
        )

    def log_game_event(self, event: str, **kwargs):
        """Log an engine event such as 'round_won', 'time_up' or 'achievement_unlocked'."""
        self._write(logging.INFO, 'GAME_EVENT', event, {}, kwargs)

    def log_warning(self, event: str, **kwargs):
        """Log a recovered failure (fallback taken, storage degraded)."""
        self._write(logging.WARNING, 'WARNING', event, {}, kwargs)

    def log_error(self, error: Exception, action: str, request=None):
        """
        Log an exception together with its engine error kind, if it has one.

        Args:
            error: The exception
            action: What was being done when it was raised
            request: Flask request object when raised inside a route
        """
        kind = getattr(error, 'kind', None)
        self._write(logging.ERROR, 'ERROR', action, self._client(request), {
            'error_type': type(error).__name__,
            'error_kind': kind.value if kind is not None else None,
            'error_message': str(error)
        })

    @staticmethod
    def _summarize(data: Dict[str, Any]) -> Dict[str, Any]:
        """Keep response logs small; never log the mask or answer."""
        if not isinstance(data, dict):
            return {'data_type': type(data).__name__}

        summary = dict(data)
        state = summary.get('state')
        if isinstance(state, dict):
            summary['state'] = {
                'game_status': state.get('game_status'),
                'difficulty': state.get('difficulty'),
                'category': state.get('category'),
                'score': state.get('score'),
                'guesses': len(state.get('guessed_letters', [])),
                'answer_revealed': state.get('answer') is not None
            }
        return summary


# Global logger instance
game_logger = GameLogger(Config.LOG_DIR, Config.LOG_LEVEL)
