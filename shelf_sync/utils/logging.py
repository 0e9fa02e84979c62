"""
Logging configuration for Shelf Sync.
Structured console logging on top of the standard library.
"""

import logging
import sys
import os
from typing import Optional, Any
import structlog
from structlog.types import Processor


def get_log_level(level: Optional[str] = None) -> str:
    """Get log level, falling back to the environment."""
    return (level or os.getenv("LOG_LEVEL", "INFO")).upper()


def setup_logging(level: Optional[str] = None) -> None:
    """Configure structured logging for the application."""

    # Shared processors for both console and structlog
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ExtraAdder(),
    ]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, get_log_level(level), logging.INFO))

    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)


class SyncLogger:
    """
    Logger for a single sync run.
    Every message carries the run id.
    """

    def __init__(self, sync_run_id: Optional[str] = None):
        self.logger = get_logger("sync")
        self.sync_run_id = sync_run_id

    def _log(self, level: str, message: str, **kwargs: Any) -> None:
        log_method = getattr(self.logger, level.lower())

        if self.sync_run_id:
            structlog.contextvars.bind_contextvars(sync_run_id=self.sync_run_id)

        try:
            log_method(message, **kwargs)
        finally:
            structlog.contextvars.unbind_contextvars("sync_run_id")

    def info(self, message: str, **kwargs: Any) -> None:
        self._log("INFO", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log("ERROR", message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log an exception with traceback."""
        self._log("ERROR", message, exc_info=True, **kwargs)
