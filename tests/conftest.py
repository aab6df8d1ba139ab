"""
Pytest configuration and shared fixtures.

This module provides fixtures for:
- A throwaway SQLite database per test (aiosqlite)
- A seeder that writes groups, reviews, trades, reports and mentions
- Tweet builders for the classifier tests
"""

import os
from datetime import datetime, timedelta

import pytest

# Set testing environment before importing app modules
os.environ["CRON_SECRET"] = "test-secret"
os.environ["LOG_LEVEL"] = "ERROR"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from signal_league.mentions.models import TweetData
from signal_league.storage.models import (
    Base,
    Report,
    Review,
    ScamFlag,
    SignalGroup,
    TradeRating,
    TwitterMention,
)

NOW = datetime(2026, 6, 15, 12, 0, 0)


# ─────────────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
async def session_factory(tmp_path):
    """Session maker bound to a fresh SQLite file with all tables created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory
    await engine.dispose()


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


class Seeder:
    """Small helpers to insert source rows for one test."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self._user = 0

    def _next_user(self) -> str:
        self._user += 1
        return f"user-{self._user}"

    async def group(self, **overrides) -> SignalGroup:
        slug = overrides.pop("slug", f"group-{self._next_user()}")
        fields = {
            "name": slug.replace("-", " ").title(),
            "slug": slug,
            "platform": "telegram",
            "pricing_model": "free",
            "status": "approved",
        }
        fields.update(overrides)
        group = SignalGroup(**fields)
        self.session.add(group)
        await self.session.commit()
        return group

    async def reviews(
        self,
        group_id: str,
        ratings: list[float],
        helpful: int = 0,
        created_at: datetime = NOW - timedelta(days=10),
        status: str = "published",
    ) -> None:
        for rating in ratings:
            self.session.add(
                Review(
                    user_id=self._next_user(),
                    group_id=group_id,
                    overall_rating=rating,
                    signal_quality=rating,
                    risk_management=rating,
                    value_for_money=rating,
                    community_support=rating,
                    transparency=rating,
                    helpful_count=helpful,
                    status=status,
                    created_at=created_at,
                )
            )
        await self.session.commit()

    async def trades(self, group_id: str, wins: int = 0, losses: int = 0, breakeven: int = 0) -> None:
        outcomes = ["win"] * wins + ["loss"] * losses + ["breakeven"] * breakeven
        for outcome in outcomes:
            self.session.add(
                TradeRating(group_id=group_id, user_id=self._next_user(), outcome=outcome)
            )
        await self.session.commit()

    async def scam_reports(self, group_id: str, count: int, reason: str = "scam") -> None:
        for _ in range(count):
            self.session.add(
                Report(
                    user_id=self._next_user(),
                    target_type="group",
                    target_id=group_id,
                    reason=reason,
                )
            )
        await self.session.commit()

    async def flag(self, group_id: str, flag: str, auto_detected: bool, severity: str = "medium") -> None:
        self.session.add(
            ScamFlag(
                group_id=group_id,
                flag=flag,
                description=flag,
                severity=severity,
                auto_detected=auto_detected,
            )
        )
        await self.session.commit()

    async def mentions(
        self,
        group_id: str,
        sentiments: list[str],
        tweeted_at: datetime = NOW - timedelta(days=2),
    ) -> None:
        for i, sentiment in enumerate(sentiments):
            self.session.add(
                TwitterMention(
                    tweet_id=f"{group_id}-{tweeted_at:%Y%m%d}-{i}",
                    group_id=group_id,
                    author_handle="someone",
                    content="...",
                    sentiment=sentiment,
                    tweeted_at=tweeted_at,
                )
            )
        await self.session.commit()


@pytest.fixture
def seed(session):
    return Seeder(session)


@pytest.fixture
def now() -> datetime:
    """Fixed clock (2026-06-15 12:00) that seeded rows are relative to."""
    return NOW


@pytest.fixture
def tweet():
    """Builder for TweetData with sensible defaults."""

    def _build(text: str, **overrides) -> TweetData:
        fields = {
            "tweet_id": overrides.pop("tweet_id", "1"),
            "text": text,
            "created_at": NOW,
            "author_username": "poster",
        }
        fields.update(overrides)
        return TweetData(**fields)

    return _build
