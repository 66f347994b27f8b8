# logger.py
import logging

LOGGER_NAME = "macflake"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger():
    # No handlers here, the host application decides where records go
    return logging.getLogger(LOGGER_NAME)


def setup_logger(level=None):
    app_logger = get_logger()

    if not any(getattr(h, "macflake_handler", False) for h in app_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.macflake_handler = True
        app_logger.addHandler(handler)
        # Own handler attached, avoid printing records twice via root
        app_logger.propagate = False

    if level is not None:
        app_logger.setLevel(level)

    return app_logger
