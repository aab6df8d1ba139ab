"""Tier ranking: weighted composite of review statistics mapped to S..F."""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import partial

from sqlalchemy.ext.asyncio import AsyncSession

from signal_league.scoring.batch import run_for_approved_groups
from signal_league.scoring.models import Tier, TierResult
from signal_league.storage.repository import (
    ReviewStats,
    get_review_stats,
    save_tier_ranking,
)
from signal_league.utils.numbers import round_half_up

logger = logging.getLogger(__name__)

RECENT_WINDOW = timedelta(days=90)

# Reference volume: ~50 reviews saturates the volume component
_VOLUME_SATURATION = 51
_MAX_STD_DEV = 2.0
_ACTIVITY_BONUS = 30.0


@dataclass(frozen=True)
class TierWeights:
    reviews: float = 0.40
    volume: float = 0.20
    consistency: float = 0.15
    activity: float = 0.15
    community: float = 0.10


DEFAULT_WEIGHTS = TierWeights()

# (min score, tier), checked top-down
TIER_THRESHOLDS: tuple[tuple[float, Tier], ...] = (
    (90, "S"),
    (75, "A"),
    (60, "B"),
    (45, "C"),
    (30, "D"),
)


@dataclass
class GroupStats:
    group_id: str
    avg_rating: float
    review_count: int
    std_dev: float
    recent_review_count: int
    avg_helpful: float


def score_to_tier(score: float) -> Tier:
    for threshold, tier in TIER_THRESHOLDS:
        if score >= threshold:
            return tier
    return "F"


def review_score(stats: GroupStats) -> float:
    return (stats.avg_rating / 5) * 100


def volume_score(stats: GroupStats) -> float:
    return min(
        100.0,
        math.log2(stats.review_count + 1) / math.log2(_VOLUME_SATURATION) * 100,
    )


def consistency_score(stats: GroupStats) -> float:
    return max(0.0, (1 - stats.std_dev / _MAX_STD_DEV) * 100)


def activity_score(stats: GroupStats) -> float:
    # Any recent review adds a flat 30 on top of the ratio term
    ratio = (
        stats.recent_review_count / stats.review_count if stats.review_count > 0 else 0.0
    )
    bonus = _ACTIVITY_BONUS if stats.recent_review_count > 0 else 0.0
    return min(100.0, ratio * 100 + bonus)


def community_score(stats: GroupStats) -> float:
    return min(100.0, stats.avg_helpful * 20)


def calculate_tier_score(
    stats: GroupStats, weights: TierWeights = DEFAULT_WEIGHTS
) -> float:
    total = (
        review_score(stats) * weights.reviews
        + volume_score(stats) * weights.volume
        + consistency_score(stats) * weights.consistency
        + activity_score(stats) * weights.activity
        + community_score(stats) * weights.community
    )
    return round_half_up(total, 2)


async def get_group_stats(
    session: AsyncSession, group_id: str, now: datetime | None = None
) -> GroupStats | None:
    """Published-review statistics for a group, or None when it has none."""
    now = now or datetime.utcnow()
    raw: ReviewStats = await get_review_stats(session, group_id, now - RECENT_WINDOW)
    if raw.count == 0:
        return None

    return GroupStats(
        group_id=group_id,
        avg_rating=raw.avg_rating,
        review_count=raw.count,
        std_dev=raw.std_dev,
        recent_review_count=raw.recent_count,
        avg_helpful=raw.avg_helpful,
    )


async def calculate_group_tier(
    session: AsyncSession,
    group_id: str,
    now: datetime | None = None,
    weights: TierWeights = DEFAULT_WEIGHTS,
) -> TierResult:
    """Recompute and persist the tier of one group.

    Groups without published reviews are UNRANKED with a null stored score
    and no history row. Ranked groups get their ranking row upserted and a
    tier_history row appended. Store errors propagate to the caller.
    """
    now = now or datetime.utcnow()
    stats = await get_group_stats(session, group_id, now)

    if stats is None:
        await save_tier_ranking(
            session, group_id, "UNRANKED", None, now, record_history=False
        )
        logger.debug("Group %s has no published reviews, UNRANKED", group_id)
        return TierResult(group_id=group_id, tier="UNRANKED", score=0)

    total_score = calculate_tier_score(stats, weights)
    tier = score_to_tier(total_score)

    await save_tier_ranking(session, group_id, tier, total_score, now)
    logger.debug(
        "Group %s: tier=%s score=%.2f (%d reviews)",
        group_id,
        tier,
        total_score,
        stats.review_count,
    )
    return TierResult(group_id=group_id, tier=tier, score=total_score)


async def recalculate_all_tiers(
    session_factory=None, failed: list[str] | None = None
) -> list[TierResult]:
    """Tier pass only, over every approved group, one after another."""
    now = datetime.utcnow()
    return await run_for_approved_groups(
        partial(calculate_group_tier, now=now),
        "Tier recalculation",
        session_factory,
        failed,
    )
