"""
logging_config.py — Loguru setup for the sync service and operator script

The connectors log through logging.getLogger(__name__); the orchestrators
and routers log through loguru directly. Both end up in the one sink
configured here.

Business Rules:
- APP_ENV=production writes one JSON object per line (serialize=True)
- Any other APP_ENV writes a coloured single-line format
- LOG_LEVEL sets the sink level; stdlib records are forwarded unfiltered
- httpx / httpcore log every request at INFO; they are held at WARNING so
  paginated catalog reads do not drown the sync summary

Called by: main.py (lifespan startup), scripts/run_sync.py
Depends on: config.py (app_env, log_level)
"""

import logging
import sys

from loguru import logger

from .config import Settings, get_settings

_DEV_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "{message}"
)

_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def setup_logging(settings: Settings | None = None) -> None:
    """Replace loguru's default sink and route stdlib logging into it."""
    settings = settings or get_settings()
    level = settings.log_level.upper()

    logger.remove()
    if settings.is_production:
        logger.add(sys.stdout, level=level, format="{message}", serialize=True)
    else:
        logger.add(sys.stdout, level=level, format=_DEV_FORMAT, colorize=True)

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info("Logging configured", level=level, production=settings.is_production)


class _InterceptHandler(logging.Handler):
    """Forward a stdlib record to loguru, keeping the connector's call site."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # walk past logging's own frames to the module that called log.info()
        frame, depth = logging.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())
