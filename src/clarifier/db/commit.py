"""
Commit an AsyncSession with clarified error messages.

    async with AsyncSessionMaker() as session:
        session.add(shipment)
        await commit_with_clarified_errors(session)

This is a thin pass-through. It validates pending/modified entities, commits, and
lets the save orchestrator turn failures into a `SaveChangesError`. It does not
roll back; after a failure the session must be rolled back by the caller, as
with any failed commit.
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions.mapper import save_with_clarified_errors
from ..tracking.session_tracker import snapshot_session
from ..validators.entity_validators import ensure_valid

logger = logging.getLogger(__name__)


async def commit_with_clarified_errors(
    session: AsyncSession,
    log: logging.Logger | None = None,
    *,
    clock: Callable[[], datetime] = datetime.now,
) -> None:
    """
    Validate and commit `session`, raising SaveChangesError on validation/update failures.

    Entity snapshots are taken before the commit: a failed flush may rewind the
    session's bookkeeping, while the values that were being written are what the
    update translator needs.
    """
    sync_session = session.sync_session
    snapshots = snapshot_session(sync_session)

    async def persist() -> None:
        ensure_valid(sync_session)
        await session.commit()

    await save_with_clarified_errors(persist, lambda: snapshots, log or logger, clock=clock)


__all__ = ["commit_with_clarified_errors"]
