import logging
import sys

from core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = None) -> logging.Logger:
    """Configure the application logger (console only)."""
    app_logger = logging.getLogger("watch_ledger")
    app_logger.setLevel((level or settings.LOG_LEVEL).upper())

    # Avoid stacking handlers when the app is created more than once
    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        app_logger.addHandler(handler)

    return app_logger


logger = setup_logging()
