# src/clarifier/core/logging/filters.py
"""
Logging filters.

ErrorCodeFilter and context helpers
-----------------------------------
When a save fails, the orchestrator captures one error code (a local timestamp) and
shows it to the user. Every log line written while that failure is handled should
carry the same code, so support can go from "Error code 2025-11-02T22:09:44.047" to
the log lines for that failure.

The code lives in a `contextvars.ContextVar`:
  * it follows the logical flow across `await` boundaries
  * concurrent tasks never see each other's code

`ErrorCodeFilter` copies it onto every LogRecord as `record.error_code`, defaulting to
the sentinel "-" so formatters referencing `%(error_code)s` never KeyError. The filter
always returns True: it annotates, it never drops.

RedactFilter
------------
Masks record attributes whose name looks sensitive (passwords, tokens, ...) before
they reach a handler.
"""

import logging
from logging import LogRecord
import contextvars

# Default is None to indicate "not handling a failure".
_error_code_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "error_code", default=None
)


def set_error_code(error_code: str | None):
    """
    Bind the error code to the current context and return the token to allow reset.
    """
    return _error_code_ctx.set(error_code)


def reset_error_code(token) -> None:
    """
    Restore the context var to the value it had before the matching set_error_code().
    """
    _error_code_ctx.reset(token)


def get_error_code() -> str | None:
    return _error_code_ctx.get()


class ErrorCodeFilter(logging.Filter):
    """
    Guarantee every LogRecord has an `error_code` attribute.

    Precedence:
      1. record.error_code passed explicitly via `extra={"error_code": ...}`
      2. the context var (set while a save failure is being handled)
      3. the sentinel "-"
    """

    def filter(self, record: LogRecord) -> bool:
        record.error_code = (
            getattr(record, "error_code", None) or get_error_code() or "-"
        )
        return True


# Redact sensitive information
class RedactFilter(logging.Filter):
    SENSITIVE = {"password", "secret", "token", "access_token", "refresh_token", "ssn", "authorization"}

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = "***REDACTED***"
        return True


__all__ = ["set_error_code", "reset_error_code", "get_error_code", "ErrorCodeFilter", "RedactFilter"]
