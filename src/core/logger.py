import os
import structlog
import logging
from typing import Optional

LOG_LEVEL_ENV = "FORM_TOKEN_LOG_LEVEL"

def configure_logging(log_level: Optional[str] = None):
    """
    Configures structlog to output JSON logs to stdout.
    Level comes from FORM_TOKEN_LOG_LEVEL when not given, INFO otherwise.
    """
    level = (log_level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer()
        ],
        logger_factory=structlog.PrintLoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        cache_logger_on_first_use=True,
    )

def get_logger(name: str):
    return structlog.get_logger(name)
