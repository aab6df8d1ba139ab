import statistics
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from signal_league.storage.models import (
    BotQueueItem,
    Report,
    Review,
    ScamFlag,
    SignalGroup,
    TierHistory,
    TierRanking,
    TradeRating,
    TwitterMention,
)


@dataclass
class ReviewStats:
    count: int = 0
    avg_rating: float = 0.0
    std_dev: float = 0.0  # sample std dev, 0 for fewer than two reviews
    recent_count: int = 0
    avg_helpful: float = 0.0


@dataclass
class TradeStats:
    total: int = 0
    wins: int = 0
    losses: int = 0


@dataclass
class MentionStats:
    total: int = 0
    positive: int = 0
    negative: int = 0


# --- Signal groups ---


async def get_group(session: AsyncSession, group_id: str) -> SignalGroup | None:
    stmt = select(SignalGroup).where(SignalGroup.id == group_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_approved_group_ids(session: AsyncSession) -> list[str]:
    stmt = (
        select(SignalGroup.id)
        .where(SignalGroup.status == "approved")
        .order_by(SignalGroup.created_at.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_approved_groups(session: AsyncSession) -> list[SignalGroup]:
    stmt = select(SignalGroup).where(SignalGroup.status == "approved")
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def slug_exists(session: AsyncSession, slug: str) -> bool:
    stmt = select(SignalGroup.id).where(SignalGroup.slug == slug).limit(1)
    result = await session.execute(stmt)
    return result.scalar_one_or_none() is not None


async def save_group(session: AsyncSession, group: SignalGroup) -> SignalGroup:
    session.add(group)
    await session.commit()
    await session.refresh(group)
    return group


async def update_group_fields(
    session: AsyncSession, group_id: str, **fields: object
) -> None:
    stmt = (
        update(SignalGroup)
        .where(SignalGroup.id == group_id)
        .values(**fields, updated_at=datetime.utcnow())
    )
    await session.execute(stmt)
    await session.commit()


# --- Aggregate reads ---


async def get_review_stats(
    session: AsyncSession, group_id: str, recent_since: datetime
) -> ReviewStats:
    """Aggregate the group's published reviews.

    Standard deviation is computed here rather than in SQL so the same
    numbers come out of SQLite and Postgres.
    """
    stmt = select(
        Review.overall_rating, Review.helpful_count, Review.created_at
    ).where(Review.group_id == group_id, Review.status == "published")
    result = await session.execute(stmt)
    rows = result.all()

    if not rows:
        return ReviewStats()

    ratings = [float(r.overall_rating) for r in rows]
    helpful = [r.helpful_count or 0 for r in rows]

    return ReviewStats(
        count=len(rows),
        avg_rating=statistics.mean(ratings),
        std_dev=statistics.stdev(ratings) if len(ratings) >= 2 else 0.0,
        recent_count=sum(1 for r in rows if r.created_at > recent_since),
        avg_helpful=statistics.mean(helpful),
    )


async def count_published_reviews(session: AsyncSession, group_id: str) -> int:
    stmt = select(func.count(Review.id)).where(
        Review.group_id == group_id, Review.status == "published"
    )
    result = await session.execute(stmt)
    return result.scalar_one() or 0


async def get_trade_stats(session: AsyncSession, group_id: str) -> TradeStats:
    stmt = select(
        func.count(TradeRating.id),
        func.sum(case((TradeRating.outcome == "win", 1), else_=0)),
        func.sum(case((TradeRating.outcome == "loss", 1), else_=0)),
    ).where(TradeRating.group_id == group_id)
    result = await session.execute(stmt)
    total, wins, losses = result.one()
    return TradeStats(total=total or 0, wins=wins or 0, losses=losses or 0)


async def count_scam_reports(session: AsyncSession, group_id: str) -> int:
    stmt = select(func.count(Report.id)).where(
        Report.reason == "scam",
        Report.target_type == "group",
        Report.target_id == group_id,
    )
    result = await session.execute(stmt)
    return result.scalar_one() or 0


async def count_scam_flags(session: AsyncSession, group_id: str) -> int:
    stmt = select(func.count(ScamFlag.id)).where(ScamFlag.group_id == group_id)
    result = await session.execute(stmt)
    return result.scalar_one() or 0


async def get_mention_stats(
    session: AsyncSession, group_id: str, since: datetime
) -> MentionStats:
    stmt = select(
        func.count(TwitterMention.id),
        func.sum(case((TwitterMention.sentiment == "positive", 1), else_=0)),
        func.sum(case((TwitterMention.sentiment == "negative", 1), else_=0)),
    ).where(
        TwitterMention.group_id == group_id,
        TwitterMention.tweeted_at >= since,
    )
    result = await session.execute(stmt)
    total, positive, negative = result.one()
    return MentionStats(
        total=total or 0, positive=positive or 0, negative=negative or 0
    )


# --- Tier ranking & history ---


async def get_tier_ranking(
    session: AsyncSession, group_id: str
) -> TierRanking | None:
    stmt = select(TierRanking).where(TierRanking.group_id == group_id).limit(1)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def save_tier_ranking(
    session: AsyncSession,
    group_id: str,
    tier: str,
    score: float | None,
    calculated_at: datetime,
    record_history: bool = True,
) -> TierRanking:
    """Upsert the group's ranking row and append a history row in one commit."""
    ranking = await get_tier_ranking(session, group_id)
    if ranking is None:
        ranking = TierRanking(group_id=group_id)
        session.add(ranking)

    ranking.tier = tier
    ranking.algorithm_score = score
    ranking.total_score = score
    ranking.calculated_at = calculated_at

    if record_history:
        session.add(
            TierHistory(
                group_id=group_id,
                tier=tier,
                total_score=score,
                recorded_at=calculated_at,
            )
        )

    await session.commit()
    return ranking


async def get_tier_history(
    session: AsyncSession, group_id: str, limit: int = 50
) -> list[TierHistory]:
    stmt = (
        select(TierHistory)
        .where(TierHistory.group_id == group_id)
        .order_by(TierHistory.recorded_at.desc(), TierHistory.id.desc())
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def prune_tier_history(session: AsyncSession, group_id: str, keep: int) -> int:
    """Delete all but the newest ``keep`` history rows of a group."""
    newest = (
        select(TierHistory.id)
        .where(TierHistory.group_id == group_id)
        .order_by(TierHistory.recorded_at.desc(), TierHistory.id.desc())
        .limit(keep)
    )
    stmt = delete(TierHistory).where(
        TierHistory.group_id == group_id,
        TierHistory.id.not_in(newest),
    )
    result = await session.execute(stmt)
    await session.commit()
    return result.rowcount or 0


# --- Scam flags ---


async def get_scam_flags(
    session: AsyncSession, group_id: str, auto_only: bool = False
) -> list[ScamFlag]:
    stmt = select(ScamFlag).where(ScamFlag.group_id == group_id)
    if auto_only:
        stmt = stmt.where(ScamFlag.auto_detected == True)  # noqa: E712
    result = await session.execute(stmt.order_by(ScamFlag.id.asc()))
    return list(result.scalars().all())


async def replace_auto_flags(
    session: AsyncSession,
    group_id: str,
    flags: list[ScamFlag],
    scam_risk: str,
) -> None:
    """Swap the group's auto-detected flags and scam_risk in one transaction.

    Readers never see the group without flags between the delete and the
    insert. Manually curated flags (auto_detected=False) are left alone.
    """
    try:
        await session.execute(
            delete(ScamFlag).where(
                ScamFlag.group_id == group_id,
                ScamFlag.auto_detected == True,  # noqa: E712
            )
        )
        session.add_all(flags)
        await session.execute(
            update(SignalGroup)
            .where(SignalGroup.id == group_id)
            .values(scam_risk=scam_risk, updated_at=datetime.utcnow())
        )
        await session.commit()
    except Exception:
        await session.rollback()
        raise


# --- Twitter mentions & bot queue ---


async def mention_exists(session: AsyncSession, tweet_id: str) -> bool:
    stmt = select(TwitterMention.id).where(TwitterMention.tweet_id == tweet_id).limit(1)
    result = await session.execute(stmt)
    return result.scalar_one_or_none() is not None


async def save_mention(
    session: AsyncSession, mention: TwitterMention
) -> TwitterMention:
    session.add(mention)
    await session.commit()
    await session.refresh(mention)
    return mention


async def save_bot_queue_item(
    session: AsyncSession, item: BotQueueItem
) -> BotQueueItem:
    session.add(item)
    await session.commit()
    await session.refresh(item)
    return item


async def get_pending_queue_items(
    session: AsyncSession, limit: int = 20
) -> list[BotQueueItem]:
    stmt = (
        select(BotQueueItem)
        .where(BotQueueItem.status == "pending")
        .order_by(BotQueueItem.priority.desc(), BotQueueItem.created_at.asc())
        .limit(limit)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
