"""Run one scoring pass over every approved group.

Each group gets its own session. A group that raises is logged and skipped
so the remaining groups still get scored; it keeps its previous values until
the next run.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from signal_league.storage.repository import get_approved_group_ids

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def run_for_approved_groups(
    score_group: Callable[[AsyncSession, str], Awaitable[T]],
    label: str,
    session_factory=None,
    failed: list[str] | None = None,
) -> list[T]:
    if session_factory is None:
        from signal_league.storage.database import async_session as session_factory

    async with session_factory() as session:
        group_ids = await get_approved_group_ids(session)

    results = []
    for group_id in group_ids:
        try:
            async with session_factory() as session:
                results.append(await score_group(session, group_id))
        except Exception:
            logger.exception("%s failed for group %s", label, group_id)
            if failed is not None:
                failed.append(group_id)

    logger.info(
        "%s: %d/%d groups updated", label, len(results), len(group_ids)
    )
    return results
