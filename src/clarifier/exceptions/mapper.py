"""
Save orchestrator: run a commit and turn its failures into one clarified error.

    await save_with_clarified_errors(session.commit, snapshot_provider, logger)

On a validation or update failure this:
  1. captures the error code (local timestamp) once
  2. logs the basic message (always)
  3. asks the matching translator for a clarified message and logs it (when there is one)
  4. raises `SaveChangesError` carrying the best available message, chained to the original

Any other exception, and cancellation, passes through untouched.
"""

import logging
from datetime import datetime
from typing import Awaitable, Callable, Iterable, NoReturn

from ..core.logging.filters import reset_error_code, set_error_code
from ..tracking.snapshots import EntitySnapshot
from ..translators.error_code import format_error_code
from ..translators.update import translate_update_failure
from ..translators.validation import translate_validation_failure
from .base import SaveChangesError
from .failures import FailureKind, UpdateFailureChain, classify_failure

logger = logging.getLogger(__name__)

SnapshotProvider = Callable[[], Iterable[EntitySnapshot]]

BASIC_MESSAGES = {
    FailureKind.VALIDATION: "Cannot validate the data.",
    FailureKind.UPDATE: "Cannot update the data.",
}


# -----------------------
# Translation
# -----------------------

def clarify_failure(
    exc: BaseException,
    kind: FailureKind,
    snapshot_provider: SnapshotProvider,
    timestamp: str,
) -> str | None:
    """
    Run the translator matching `kind`. Returns None when no safe translation exists.
    """
    if kind is FailureKind.VALIDATION:
        return translate_validation_failure(exc.groups, timestamp)
    if kind is FailureKind.UPDATE:
        return translate_update_failure(UpdateFailureChain.from_exception(exc), snapshot_provider(), timestamp)
    return None


def raise_clarified_error(
    exc: BaseException,
    kind: FailureKind,
    snapshot_provider: SnapshotProvider,
    log: logging.Logger,
    timestamp: str,
) -> NoReturn:
    """
    Log the basic (and, if available, clarified) message for `exc` and raise `SaveChangesError`.
    """
    extra = {"error_code": timestamp, "failure_kind": kind.value}

    basic_message = f"Error code {timestamp}. {BASIC_MESSAGES[kind]}"
    log.error(basic_message, extra=extra)

    clarified_message = clarify_failure(exc, kind, snapshot_provider, timestamp)
    if clarified_message is not None:
        log.error(clarified_message, exc_info=exc, extra=extra)
        raise SaveChangesError(clarified_message, error_code=timestamp, kind=kind, clarified=True) from exc

    logger.debug("clarifier.translation_unavailable", extra=extra)
    raise SaveChangesError(basic_message, error_code=timestamp, kind=kind) from exc


# -----------------------
# Orchestrator
# -----------------------

async def save_with_clarified_errors(
    persist: Callable[[], Awaitable[object]],
    snapshot_provider: SnapshotProvider,
    log: logging.Logger | None = None,
    *,
    clock: Callable[[], datetime] = datetime.now,
) -> None:
    """
    Await `persist()` and normalize validation/update failures into `SaveChangesError`.

    Args:
        persist: zero-argument coroutine function performing the commit.
        snapshot_provider: returns snapshots of the tracked entities; only called for
            update failures.
        log: logger receiving the basic/clarified messages (defaults to this module's).
        clock: source of the local time the error code is taken from.

    Raises:
        SaveChangesError: on a validation or update failure.
        Exception: any other failure, unchanged.
    """
    log = log or logger
    # asyncio.CancelledError derives from BaseException and is not caught here.
    try:
        await persist()
    except Exception as exc:
        kind = classify_failure(exc)
        if kind is FailureKind.OTHER:
            raise

        timestamp = format_error_code(clock())
        token = set_error_code(timestamp)
        try:
            raise_clarified_error(exc, kind, snapshot_provider, log, timestamp)
        finally:
            reset_error_code(token)


__all__ = [
    "SnapshotProvider",
    "clarify_failure",
    "raise_clarified_error",
    "save_with_clarified_errors",
]
