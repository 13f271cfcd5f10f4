import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str = settings.LOG_LEVEL) -> logging.Logger:
    app_logger = logging.getLogger("storefront")
    app_logger.setLevel(level.upper())

    # uvicorn --reload imports the app twice
    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )
        app_logger.addHandler(handler)

    return app_logger


logger = setup_logging()
