# slot_recommender/core/logging.py
import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from slot_recommender.core.config import Settings

_PLAIN_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | [env={env}] | %(message)s"
_JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def get_formatter(use_json: bool, environment: str) -> logging.Formatter:
    if use_json:
        return JsonFormatter(
            _JSON_FORMAT,
            rename_fields={"levelname": "level"},
            static_fields={"environment": environment},
        )
    return logging.Formatter(
        fmt=_PLAIN_FORMAT.format(env=environment),
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def configure_logging(settings: Settings) -> logging.Logger:
    """
    Attach a single stdout handler to the package logger.

    Every module logs through ``logging.getLogger(__name__)``, so configuring
    the ``slot_recommender`` logger once in the app factory is enough. Calling
    this again (e.g. a second app instance in tests) replaces the handler
    instead of stacking duplicates.
    """
    logger = logging.getLogger("slot_recommender")
    logger.setLevel(settings.LOG_LEVEL.upper())
    logger.propagate = False

    if logger.hasHandlers():
        logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(get_formatter(settings.LOG_JSON, settings.APP_ENV))
    logger.addHandler(handler)

    return logger
