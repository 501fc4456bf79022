"""
Logging setup shared by the API modules
"""
import logging
import sys
from catalog_api.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(name: str, debug: bool = False) -> int:
    """Numeric level for a LOG_LEVEL name; unknown names fall back to INFO"""
    if debug:
        return logging.DEBUG
    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """Logger writing to stdout at the configured level"""
    settings = get_settings()
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(resolve_level(settings.LOG_LEVEL, settings.DEBUG))
    return logger
