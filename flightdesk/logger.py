"""
Structured logging for flightdesk
"""
import logging
import sys
from typing import Any, Dict, Optional

import structlog

from .config import LoggingConfig, config


def setup_logging(logging_config: Optional[LoggingConfig] = None) -> structlog.BoundLogger:
    """Setup structured logging configuration"""
    cfg = logging_config or config.logging

    logging.basicConfig(
        level=getattr(logging, cfg.level.upper(), logging.INFO),
        handlers=[],
        format="%(message)s"
    )

    # User-facing output owns stdout; log lines go to stderr or a file
    if cfg.log_file:
        handler = logging.FileHandler(cfg.log_file)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, cfg.level.upper(), logging.INFO))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if cfg.format.lower() == "json"
            else structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger()


def get_logger(name: str):
    return structlog.get_logger(name)


class StoreLogger:
    """Logger bound to one record store (flights, passengers, tickets)"""

    def __init__(self, store_name: str):
        self.logger = structlog.get_logger(f"flightdesk.{store_name}")
        self.store_name = store_name

    def info(self, message: str, **kwargs):
        self.logger.info(message, store=self.store_name, **kwargs)

    def warning(self, message: str, **kwargs):
        self.logger.warning(message, store=self.store_name, **kwargs)

    def error(self, message: str, **kwargs):
        self.logger.error(message, store=self.store_name, **kwargs)

    def log_operation_failed(self, operation: str, error: Exception, context: Optional[Dict[str, Any]] = None):
        """Log an operation rejected by the store or codec"""
        self.logger.warning(
            "operation_failed",
            store=self.store_name,
            operation=operation,
            error=str(error),
            error_code=getattr(error, "error_code", type(error).__name__),
            context=context or getattr(error, "context", {}),
        )

    def log_load(self, path: str, status: str, declared: int, loaded: int):
        """Log the outcome of reading a data file"""
        self.logger.info(
            "data_file_loaded",
            store=self.store_name,
            path=path,
            status=status,
            declared=declared,
            loaded=loaded,
        )

    def log_save(self, path: str, count: int):
        """Log a successful write of a data file"""
        self.logger.info(
            "data_file_saved",
            store=self.store_name,
            path=path,
            count=count,
        )
