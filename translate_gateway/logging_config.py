"""
Logging setup for the Translate Gateway.

A LoggingContext is built once at startup and closed at shutdown. It owns
the handlers attached to the "translate_gateway" logger:

- console: human-readable, level from LOG_LEVEL
- translate.log: rotated daily, kept for LOG_RETENTION_DAYS
- exceptions.log: ERROR and above only
"""
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import List, Optional
import logging

from translate_gateway.config import Settings

LOGGER_NAME = "translate_gateway"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LoggingContext:
    """Owns the handlers of the application logger for one process lifetime."""

    def __init__(self, settings: Settings, name: str = LOGGER_NAME):
        self.settings = settings
        self.logger = logging.getLogger(name)
        self._handlers: List[logging.Handler] = []
        self._previous_level: Optional[int] = None
        self._previous_propagate: Optional[bool] = None

    def open(self) -> logging.Logger:
        if self._handlers:
            return self.logger

        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

        console = logging.StreamHandler()
        console.setFormatter(formatter)
        self._handlers.append(console)

        if self.settings.LOG_TO_FILE:
            log_dir = Path(self.settings.LOG_DIR)
            log_dir.mkdir(parents=True, exist_ok=True)

            daily = TimedRotatingFileHandler(
                log_dir / "translate.log",
                when="midnight",
                backupCount=self.settings.LOG_RETENTION_DAYS,
                encoding="utf-8"
            )
            daily.setFormatter(formatter)
            self._handlers.append(daily)

            exceptions = logging.FileHandler(log_dir / "exceptions.log", encoding="utf-8")
            exceptions.setLevel(logging.ERROR)
            exceptions.setFormatter(formatter)
            self._handlers.append(exceptions)

        self._previous_level = self.logger.level
        self._previous_propagate = self.logger.propagate
        self.logger.setLevel(self.settings.log_level)
        self.logger.propagate = False
        for handler in self._handlers:
            self.logger.addHandler(handler)

        return self.logger

    def child(self, suffix: str) -> logging.Logger:
        """Logger for one component, sharing this context's handlers."""
        return self.logger.getChild(suffix)

    def close(self):
        for handler in self._handlers:
            self.logger.removeHandler(handler)
            handler.flush()
            handler.close()
        self._handlers = []

        if self._previous_level is not None:
            self.logger.setLevel(self._previous_level)
            self.logger.propagate = self._previous_propagate
            self._previous_level = None
            self._previous_propagate = None

    def __enter__(self) -> logging.Logger:
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
