"""
Unit tests for the tier ranking engine.

Covers the five sub-scores, tier thresholds and the persisted ranking /
history rows.
"""

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from signal_league.scoring import ranking as ranking_module
from signal_league.scoring.ranking import (
    GroupStats,
    TierWeights,
    activity_score,
    calculate_group_tier,
    calculate_tier_score,
    consistency_score,
    get_group_stats,
    recalculate_all_tiers,
    score_to_tier,
    volume_score,
)
from signal_league.storage.models import Review, TierHistory, TierRanking
from signal_league.storage.repository import get_tier_history, get_tier_ranking


def _stats(**overrides) -> GroupStats:
    fields = {
        "group_id": "g",
        "avg_rating": 4.0,
        "review_count": 8,
        "std_dev": 0.5,
        "recent_review_count": 4,
        "avg_helpful": 1.0,
    }
    fields.update(overrides)
    return GroupStats(**fields)


class TestTierScore:
    """Weighted composite of the five sub-scores."""

    @pytest.mark.unit
    def test_typical_group(self):
        """Should combine sub-scores with the fixed weights, rounded to 2dp."""
        assert calculate_tier_score(_stats()) == 68.43

    @pytest.mark.unit
    def test_perfect_group_hits_100(self):
        """Should saturate every component for a flawless, busy group."""
        stats = _stats(
            avg_rating=5.0,
            review_count=50,
            std_dev=0.0,
            recent_review_count=50,
            avg_helpful=5.0,
        )
        assert calculate_tier_score(stats) == 100.0

    @pytest.mark.unit
    def test_volume_saturates_near_50_reviews(self):
        """Should cap the volume component at 100."""
        assert volume_score(_stats(review_count=50)) == pytest.approx(100.0)
        assert volume_score(_stats(review_count=500)) == 100.0
        assert volume_score(_stats(review_count=1)) < 20

    @pytest.mark.unit
    def test_consistency_floors_at_zero(self):
        """Should give 0 consistency once std dev reaches 2.0."""
        assert consistency_score(_stats(std_dev=2.0)) == 0
        assert consistency_score(_stats(std_dev=3.1)) == 0
        assert consistency_score(_stats(std_dev=0.0)) == 100

    @pytest.mark.unit
    def test_activity_bonus_discontinuity(self):
        """Should jump by the flat 30 bonus as soon as one recent review exists."""
        assert activity_score(_stats(review_count=10, recent_review_count=0)) == 0
        assert activity_score(_stats(review_count=10, recent_review_count=1)) == 40
        assert activity_score(_stats(review_count=10, recent_review_count=10)) == 100

    @pytest.mark.unit
    def test_weights_can_be_overridden(self):
        """Should honour injected weights without touching rule logic."""
        only_reviews = TierWeights(
            reviews=1.0, volume=0.0, consistency=0.0, activity=0.0, community=0.0
        )
        assert calculate_tier_score(_stats(avg_rating=3.5), only_reviews) == 70.0


class TestScoreToTier:
    """Fixed tier thresholds."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "score,tier",
        [
            (100, "S"),
            (90, "S"),
            (89.99, "A"),
            (75, "A"),
            (60, "B"),
            (45, "C"),
            (30, "D"),
            (29.99, "F"),
            (0, "F"),
        ],
    )
    def test_thresholds(self, score, tier):
        assert score_to_tier(score) == tier


class TestCalculateGroupTier:
    """Persisted tier ranking and history."""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_no_reviews_is_unranked(self, session, seed, now):
        """Should force UNRANKED with score 0 and a null stored score."""
        group = await seed.group()
        await seed.trades(group.id, wins=20)

        result = await calculate_group_tier(session, group.id, now)

        assert result.tier == "UNRANKED"
        assert result.score == 0
        ranking = await get_tier_ranking(session, group.id)
        assert ranking.tier == "UNRANKED"
        assert ranking.total_score is None
        assert await get_tier_history(session, group.id) == []

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_unpublished_reviews_do_not_count(self, session, seed, now):
        """Should ignore flagged and removed reviews."""
        group = await seed.group()
        await seed.reviews(group.id, [5.0, 5.0], status="flagged")
        await seed.reviews(group.id, [5.0], status="removed")

        result = await calculate_group_tier(session, group.id, now)

        assert result.tier == "UNRANKED"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_ranked_group_persists_ranking_and_history(self, session, seed, now):
        """Should upsert the ranking row and append one history row."""
        group = await seed.group()
        await seed.reviews(group.id, [4.0, 4.0, 4.0, 4.0])

        result = await calculate_group_tier(session, group.id, now)

        assert result.score == 70.19
        assert result.tier == "B"
        ranking = await get_tier_ranking(session, group.id)
        assert ranking.tier == "B"
        assert ranking.algorithm_score == 70.19
        assert ranking.total_score == 70.19
        history = await get_tier_history(session, group.id)
        assert [(h.tier, h.total_score) for h in history] == [("B", 70.19)]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_recalculation_is_idempotent(self, session, seed, now):
        """Should return the same tier twice while history keeps growing."""
        group = await seed.group()
        await seed.reviews(group.id, [4.5, 3.5, 5.0], helpful=2)

        first = await calculate_group_tier(session, group.id, now)
        second = await calculate_group_tier(session, group.id, now + timedelta(minutes=5))

        assert (first.tier, first.score) == (second.tier, second.score)
        rankings = await session.execute(
            select(func.count(TierRanking.id)).where(TierRanking.group_id == group.id)
        )
        assert rankings.scalar_one() == 1
        history = await session.execute(
            select(func.count(TierHistory.id)).where(TierHistory.group_id == group.id)
        )
        assert history.scalar_one() == 2

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_unranked_after_reviews_removed(self, session, seed, now):
        """Should move an existing ranking back to UNRANKED."""
        group = await seed.group()
        await seed.reviews(group.id, [4.0])
        await calculate_group_tier(session, group.id, now)

        await session.execute(
            Review.__table__.update()
            .where(Review.group_id == group.id)
            .values(status="removed")
        )
        await session.commit()

        result = await calculate_group_tier(session, group.id, now)

        assert result.tier == "UNRANKED"
        ranking = await get_tier_ranking(session, group.id)
        await session.refresh(ranking)
        assert ranking.tier == "UNRANKED"
        assert ranking.total_score is None


class TestGroupStats:
    """Aggregate review statistics."""

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_sample_std_dev_and_recent_window(self, session, seed, now):
        """Should use the sample std dev and a 90-day recency window."""
        group = await seed.group()
        await seed.reviews(group.id, [5.0], helpful=3)
        await seed.reviews(group.id, [3.0], helpful=1, created_at=now - timedelta(days=120))

        stats = await get_group_stats(session, group.id, now)

        assert stats.review_count == 2
        assert stats.avg_rating == 4.0
        assert stats.std_dev == pytest.approx(1.41421, rel=1e-4)
        assert stats.recent_review_count == 1
        assert stats.avg_helpful == 2.0

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_single_review_has_zero_std_dev(self, session, seed, now):
        group = await seed.group()
        await seed.reviews(group.id, [2.5])

        stats = await get_group_stats(session, group.id, now)

        assert stats.std_dev == 0.0


class TestRecalculateAllTiers:

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_only_approved_groups(self, session_factory, session, seed):
        """Should skip pending, rejected and suspended groups."""
        approved = await seed.group()
        await seed.reviews(approved.id, [4.0, 4.5])
        for status in ("pending", "rejected", "suspended"):
            other = await seed.group(status=status)
            await seed.reviews(other.id, [5.0])

        results = await recalculate_all_tiers(session_factory)

        assert [r.group_id for r in results] == [approved.id]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_failing_group_is_skipped(self, session_factory, seed, monkeypatch):
        """Should log a group whose store read fails and keep scoring the rest."""
        healthy = await seed.group()
        await seed.reviews(healthy.id, [4.0, 4.5])
        broken = await seed.group()
        await seed.reviews(broken.id, [3.0])

        real_stats = ranking_module.get_review_stats

        async def flaky_stats(session, group_id, recent_since):
            if group_id == broken.id:
                raise RuntimeError("store unavailable")
            return await real_stats(session, group_id, recent_since)

        monkeypatch.setattr(ranking_module, "get_review_stats", flaky_stats)

        failed: list[str] = []
        results = await recalculate_all_tiers(session_factory, failed=failed)

        assert [r.group_id for r in results] == [healthy.id]
        assert failed == [broken.id]
