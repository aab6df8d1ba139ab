"""Batch recalculation over every approved group.

Invoked by the cron route or the CLI. Each group gets its own session and
runs aggregates -> tier -> transparency -> scam detection. A group that
errors is logged and skipped; it keeps its previous values until the next
scheduled run.
"""

import asyncio
import logging
from datetime import datetime

from signal_league.config import settings
from signal_league.scoring.aggregates import refresh_group_aggregates
from signal_league.scoring.models import RecalculationReport
from signal_league.scoring.ranking import calculate_group_tier
from signal_league.scoring.scam_detection import detect_scam_flags
from signal_league.scoring.transparency import calculate_transparency_score
from signal_league.storage.repository import get_approved_group_ids, prune_tier_history

logger = logging.getLogger(__name__)


async def recalculate_group(
    session, group_id: str, now: datetime, report: RecalculationReport
) -> None:
    await refresh_group_aggregates(session, group_id, now)
    tier = await calculate_group_tier(session, group_id, now)
    transparency = await calculate_transparency_score(session, group_id, now)
    scam = await detect_scam_flags(session, group_id, now)

    if settings.tier_history_keep > 0:
        await prune_tier_history(session, group_id, settings.tier_history_keep)

    # Only record once every pass for the group succeeded
    report.tiers.append(tier)
    report.transparency.append(transparency)
    report.scam.append(scam)


async def recalculate_all(
    session_factory=None,
    concurrency: int | None = None,
    now: datetime | None = None,
) -> RecalculationReport:
    if session_factory is None:
        from signal_league.storage.database import async_session as session_factory

    now = now or datetime.utcnow()
    concurrency = concurrency or settings.recalc_concurrency

    async with session_factory() as session:
        group_ids = await get_approved_group_ids(session)

    report = RecalculationReport()
    if not group_ids:
        logger.info("No approved groups to recalculate")
        return report

    sem = asyncio.Semaphore(max(1, concurrency))

    async def run_one(group_id: str) -> None:
        async with sem:
            try:
                async with session_factory() as session:
                    await recalculate_group(session, group_id, now, report)
            except Exception:
                logger.exception("Recalculation failed for group %s", group_id)
                report.failed.append(group_id)

    await asyncio.gather(*(run_one(gid) for gid in group_ids))

    logger.info(
        "Recalculated %d/%d groups (%d failed)",
        report.processed,
        len(group_ids),
        len(report.failed),
    )
    return report
