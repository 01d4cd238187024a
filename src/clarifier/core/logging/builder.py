# src/clarifier/core/logging/builder.py
"""
Logging builder: create and apply a dictConfig logging configuration.

  - make_dict_config(settings) builds the mapping (pure, easy to test)
  - setup_logging(settings) applies it

Handlers are wired from settings:

| LOG_TO_STDOUT | LOG_DIR set | Active handlers               |
| ------------- | ----------- | ----------------------------- |
| true          | any         | console                       |
| false         | no          | console                       |
| false         | yes         | console + file + error_file   |
"""

from __future__ import annotations

from pathlib import Path
import logging
import logging.config

from clarifier.utils.logging import get_project_name

from .formatters import JsonFormatter, ColorFormatter
from .filters import ErrorCodeFilter, RedactFilter
from .handlers import (
    get_console_handler,
    get_file_handler,
    get_error_file_handler,
)

from clarifier.config.settings import Settings, get_settings


def _file_logging_enabled(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping using the provided settings.

    The returned mapping includes:
      - formatters: "standard" (color in text mode) and "json"
      - filters: "error_code", "redact"
      - handlers: console, plus (file, error_file) when writing files
      - loggers: root, clarifier, sqlalchemy.engine
    """
    formatters = {
        "standard": {
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(error_code)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": getattr(settings, "SERVICE_NAME", None) or get_project_name(default="clarifier"),
        },
    }

    filters = {
        "error_code": {"()": ErrorCodeFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}

    if _file_logging_enabled(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            # Package loggers propagate to root; the entry only pins the level.
            "clarifier": {
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            # SQL logging may contain bound parameter values
            "sqlalchemy.engine": {
                "level": "DEBUG" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging(settings: Settings | None = None) -> None:
    """
    Initialize logging from settings (the cached environment settings when omitted).

    Steps:
      1. Ensure LOG_DIR exists when writing files.
      2. Apply dictConfig(make_dict_config(settings)).
      3. Register an ErrorCodeFilter on the root logger so %(error_code)s is always
         resolvable, even for handlers added later by other code.
    """
    settings = settings or get_settings()
    if _file_logging_enabled(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))
    logging.getLogger().addFilter(ErrorCodeFilter())


__all__ = ["make_dict_config", "setup_logging"]
