"""Refresh the per-group counters shown next to the tier and scores."""

import logging
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from signal_league.storage.repository import (
    get_mention_stats,
    get_review_stats,
    get_trade_stats,
    update_group_fields,
)
from signal_league.utils.numbers import round_half_up

logger = logging.getLogger(__name__)

MENTION_WINDOW = timedelta(days=7)


def win_rate(wins: int, losses: int) -> float | None:
    """Percentage of decisive trades that were wins; None without any."""
    decisive = wins + losses
    if decisive == 0:
        return None
    return round_half_up(wins / decisive * 100, 2)


def sentiment_score(positive: int, negative: int, total: int) -> float | None:
    """Net sentiment in [-1, 1]; None without mentions."""
    if total == 0:
        return None
    return round_half_up((positive - negative) / total, 2)


async def refresh_group_aggregates(
    session: AsyncSession, group_id: str, now: datetime | None = None
) -> dict:
    now = now or datetime.utcnow()

    reviews = await get_review_stats(session, group_id, now)
    trades = await get_trade_stats(session, group_id)
    mentions = await get_mention_stats(session, group_id, now - MENTION_WINDOW)

    fields = {
        "avg_score": round_half_up(reviews.avg_rating, 1) if reviews.count else None,
        "review_count": reviews.count,
        "total_trade_ratings": trades.total,
        "win_rate": win_rate(trades.wins, trades.losses),
        "twitter_mention_count_7d": mentions.total,
        "sentiment_score": sentiment_score(
            mentions.positive, mentions.negative, mentions.total
        ),
    }
    await update_group_fields(session, group_id, **fields)
    return fields
