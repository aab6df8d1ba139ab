"""Transparency score: seven capped factors over directly observable data.

No review sentiment feeds into this score, so glowing reviews alone cannot
raise it. The factor maxima add up to exactly 100.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from functools import partial

from sqlalchemy.ext.asyncio import AsyncSession

from signal_league.scoring.batch import run_for_approved_groups
from signal_league.scoring.models import TransparencyFactors, TransparencyResult
from signal_league.storage.repository import (
    count_published_reviews,
    count_scam_flags,
    get_group,
    get_trade_stats,
    update_group_fields,
)

logger = logging.getLogger(__name__)

FACTOR_MAX = {
    "shows_losses": 20,
    "track_record_age": 15,
    "verified_performance": 25,
    "fair_pricing": 10,
    "responsive_to_criticism": 10,
    "open_community": 10,
    "no_fake_testimonials": 10,
}


@dataclass
class TransparencyInputs:
    pricing_model: str
    price: str | None
    founded_at: date | None
    total_trades: int = 0
    loss_trades: int = 0
    review_count: int = 0
    scam_flag_count: int = 0


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def months_since(founded: date, now: datetime | date) -> int:
    """Calendar months between two dates, ignoring the day of month."""
    return (now.year - founded.year) * 12 + (now.month - founded.month)


def parse_price(price: str | None) -> float | None:
    """Stored price as a number, None when missing or unparseable."""
    if price is None or str(price).strip() == "":
        return None
    try:
        value = float(price)
    except (TypeError, ValueError):
        logger.warning("Unparseable price %r, treating as missing", price)
        return None
    if value != value:  # NaN
        return None
    return value


def calc_shows_losses(total_trades: int, loss_trades: int) -> int:
    if total_trades == 0:
        return 0
    loss_ratio = loss_trades / total_trades
    if loss_ratio >= 0.2:
        return 20
    if loss_ratio >= 0.1:
        return 15
    if loss_ratio > 0:
        return 10
    return 0


def calc_track_record_age(founded_at: date | None, now: datetime | date) -> int:
    if founded_at is None:
        return 0
    months = months_since(founded_at, now)
    if months >= 12:
        return 15
    if months >= 6:
        return 10
    if months >= 3:
        return 5
    return 0


def calc_verified_performance(trade_rating_count: int) -> int:
    if trade_rating_count >= 20:
        return 25
    if trade_rating_count >= 10:
        return 15
    if trade_rating_count >= 5:
        return 8
    return 0


def calc_fair_pricing(pricing_model: str, price: str | None) -> int:
    if pricing_model == "free":
        return 10
    numeric = parse_price(price)
    if numeric is None:
        return 0
    if numeric <= 50:
        return 8
    if numeric <= 100:
        return 5
    if numeric <= 200:
        return 3
    return 0


def calc_responsive_to_criticism(review_count: int) -> int:
    if review_count >= 5:
        return 10
    if review_count >= 2:
        return 5
    return 0


def calc_open_community(pricing_model: str) -> int:
    if pricing_model == "free":
        return 10
    if pricing_model == "freemium":
        return 7
    return 3  # paid


def calc_no_fake_testimonials(scam_flag_count: int) -> int:
    if scam_flag_count == 0:
        return 10
    if scam_flag_count <= 2:
        return 5
    return 0


def compute_factors(
    inputs: TransparencyInputs, now: datetime | date
) -> TransparencyFactors:
    raw = {
        "shows_losses": calc_shows_losses(inputs.total_trades, inputs.loss_trades),
        "track_record_age": calc_track_record_age(inputs.founded_at, now),
        "verified_performance": calc_verified_performance(inputs.total_trades),
        "fair_pricing": calc_fair_pricing(inputs.pricing_model, inputs.price),
        "responsive_to_criticism": calc_responsive_to_criticism(inputs.review_count),
        "open_community": calc_open_community(inputs.pricing_model),
        "no_fake_testimonials": calc_no_fake_testimonials(inputs.scam_flag_count),
    }
    return TransparencyFactors(
        **{name: _clamp(value, 0, FACTOR_MAX[name]) for name, value in raw.items()}
    )


async def calculate_transparency_score(
    session: AsyncSession, group_id: str, now: datetime | None = None
) -> TransparencyResult:
    """Recompute and persist a group's transparency score (no history kept)."""
    now = now or datetime.utcnow()

    group = await get_group(session, group_id)
    if group is None:
        logger.warning("Transparency requested for unknown group %s", group_id)
        return TransparencyResult(
            group_id=group_id, score=0, factors=TransparencyFactors()
        )

    trades = await get_trade_stats(session, group_id)
    review_count = await count_published_reviews(session, group_id)
    flag_count = await count_scam_flags(session, group_id)

    inputs = TransparencyInputs(
        pricing_model=group.pricing_model,
        price=group.price,
        founded_at=group.founded_at,
        total_trades=trades.total,
        loss_trades=trades.losses,
        review_count=review_count,
        scam_flag_count=flag_count,
    )
    factors = compute_factors(inputs, now)
    score = factors.total()

    await update_group_fields(session, group_id, transparency_score=score)
    logger.debug("Group %s transparency=%d", group_id, score)
    return TransparencyResult(group_id=group_id, score=score, factors=factors)


async def recalculate_all_transparency_scores(
    session_factory=None, failed: list[str] | None = None
) -> list[TransparencyResult]:
    now = datetime.utcnow()
    return await run_for_approved_groups(
        partial(calculate_transparency_score, now=now),
        "Transparency scoring",
        session_factory,
        failed,
    )
