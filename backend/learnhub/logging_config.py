import logging
import os
from logging.config import dictConfig

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_KNOWN_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _level_from_env(name: str, default: str) -> str:
    value = os.getenv(name, default).strip().upper()
    return value if value in _KNOWN_LEVELS else default


def configure_logging() -> None:
    """Configure process logging from the LEARNHUB_* environment flags.

    ``LEARNHUB_LOG_LEVEL`` sets the root level, ``LEARNHUB_TELEMETRY_LOG_LEVEL`` the level of
    the telemetry stream and ``LEARNHUB_DEBUG_HTTP=1`` turns on wire-level client logging.
    Unknown level names fall back to the defaults rather than failing start-up.
    """
    level = _level_from_env("LEARNHUB_LOG_LEVEL", "INFO")
    telemetry_level = _level_from_env("LEARNHUB_TELEMETRY_LOG_LEVEL", level)

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": os.getenv("LEARNHUB_LOG_FORMAT", DEFAULT_LOG_FORMAT),
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "learnhub.telemetry": {"level": telemetry_level},
            },
            "root": {
                "handlers": ["default"],
                "level": level,
            },
        }
    )

    if os.getenv("LEARNHUB_DEBUG_HTTP", "0") == "1":
        logging.getLogger("httpx").setLevel(logging.DEBUG)
        logging.getLogger("uvicorn.access").setLevel(logging.DEBUG)
