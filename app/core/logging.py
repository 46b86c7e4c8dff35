import logging
from logging import Logger

from .config import get_settings


def configure_logging() -> Logger:
    """تهيئة مسجل موحد لخدمة الدمج."""
    settings = get_settings()

    logger = logging.getLogger(settings.app_name)
    if logger.handlers:
        return logger

    logger.setLevel(settings.log_level.upper())

    handler = logging.StreamHandler()
    formatter = logging.Formatter("[%(levelname)s] %(asctime)s | %(name)s | %(message)s")
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    logger.propagate = False

    return logger
