# src/clarifier/core/logging/handlers.py
"""
Handler factories for logging.dictConfig.

Each helper returns a handler configuration dict (not a handler instance) so the
builder stays a plain mapping and each destination can be unit tested on its own.
All handlers run the "error_code" and "redact" filters declared by the builder.
"""

from pathlib import Path

from clarifier.config.settings import Settings

_FILTERS = ["error_code", "redact"]


def _formatter_name(settings: Settings) -> str:
    return "json" if settings.LOG_FORMAT == "json" else "standard"


def get_console_handler(settings: Settings) -> dict:
    """
    Stream handler (stderr) for all records at or above LOG_LEVEL.

    Uses the "json" formatter when LOG_FORMAT == "json", otherwise "standard".
    To force stdout, add "stream": "ext://sys.stdout".
    """
    return {
        "class": "logging.StreamHandler",
        "formatter": _formatter_name(settings),
        "level": settings.LOG_LEVEL,
        "filters": list(_FILTERS),
    }


def get_file_handler(settings: Settings) -> dict:
    """Rotating `clarifier.log` in LOG_DIR for all records at or above LOG_LEVEL."""
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": _formatter_name(settings),
        "level": settings.LOG_LEVEL,
        "filename": str(Path(settings.LOG_DIR) / "clarifier.log"),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": list(_FILTERS),
    }


def get_error_file_handler(settings: Settings) -> dict:
    """
    Rotating `errors.log` in LOG_DIR, ERROR and above only.

    Basic and clarified save-failure messages both land here, which makes it the
    file support looks in when a user quotes an error code.
    """
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json",  # keep error files structured for easier ingestion
        "level": "ERROR",
        "filename": str(Path(settings.LOG_DIR) / "errors.log"),
        "maxBytes": settings.LOG_MAX_BYTES,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
        "filters": list(_FILTERS),
    }


__all__ = [
    "get_console_handler",
    "get_file_handler",
    "get_error_file_handler",
]
