import uuid
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _uuid() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class SignalGroup(Base):
    __tablename__ = "signal_groups"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    platform: Mapped[str] = mapped_column(
        String(16), default="telegram"
    )  # twitter / discord / telegram / whop
    platform_handle: Mapped[str | None] = mapped_column(String(255), nullable=True)
    platform_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    source_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    pricing_model: Mapped[str] = mapped_column(
        String(16), default="free"
    )  # free / paid / freemium
    price: Mapped[str | None] = mapped_column(String(32), nullable=True)  # as entered
    founded_at: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(
        String(16), default="pending"
    )  # pending / approved / rejected / suspended

    # Derived, written only by signal_league.scoring
    avg_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    review_count: Mapped[int] = mapped_column(Integer, default=0)
    transparency_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    scam_risk: Mapped[str | None] = mapped_column(String(16), nullable=True)
    win_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_trade_ratings: Mapped[int] = mapped_column(Integer, default=0)
    twitter_mention_count_7d: Mapped[int] = mapped_column(Integer, default=0)
    sentiment_score: Mapped[float | None] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    __table_args__ = (Index("ix_signal_groups_status", "status"),)


class Review(Base):
    __tablename__ = "reviews"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    group_id: Mapped[str] = mapped_column(String(36), nullable=False)
    overall_rating: Mapped[float] = mapped_column(Float, nullable=False)
    signal_quality: Mapped[float] = mapped_column(Float, nullable=False)
    risk_management: Mapped[float] = mapped_column(Float, nullable=False)
    value_for_money: Mapped[float] = mapped_column(Float, nullable=False)
    community_support: Mapped[float] = mapped_column(Float, nullable=False)
    transparency: Mapped[float] = mapped_column(Float, nullable=False)
    title: Mapped[str | None] = mapped_column(String(100), nullable=True)
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    helpful_count: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[str] = mapped_column(
        String(16), default="published"
    )  # published / flagged / removed
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("user_id", "group_id", name="uq_reviews_user_group"),
        Index("ix_reviews_group_status", "group_id", "status"),
    )


class TradeRating(Base):
    __tablename__ = "trade_ratings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    group_id: Mapped[str] = mapped_column(String(36), nullable=False)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    outcome: Mapped[str] = mapped_column(
        String(16), nullable=False
    )  # win / loss / breakeven / unknown
    return_pct: Mapped[float | None] = mapped_column(Float, nullable=True)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    __table_args__ = (Index("ix_trade_ratings_group", "group_id"),)


class TierRanking(Base):
    __tablename__ = "tier_rankings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    group_id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False)
    tier: Mapped[str] = mapped_column(String(16), nullable=False)
    algorithm_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    community_vote_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    calculated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )


class TierHistory(Base):
    __tablename__ = "tier_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[str] = mapped_column(String(36), nullable=False)
    tier: Mapped[str] = mapped_column(String(16), nullable=False)
    total_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    __table_args__ = (Index("ix_tier_history_group", "group_id", "recorded_at"),)


class ScamFlag(Base):
    __tablename__ = "scam_flags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[str] = mapped_column(String(36), nullable=False)
    flag: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    severity: Mapped[str] = mapped_column(
        String(16), default="medium"
    )  # low / medium / high / critical
    auto_detected: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    __table_args__ = (Index("ix_scam_flags_group", "group_id"),)


class Report(Base):
    __tablename__ = "reports"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    target_type: Mapped[str] = mapped_column(String(16), nullable=False)  # review / group
    target_id: Mapped[str] = mapped_column(String(36), nullable=False)
    reason: Mapped[str] = mapped_column(
        String(32), nullable=False
    )  # spam / fake_review / scam / inappropriate / other
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="pending")
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    __table_args__ = (Index("ix_reports_target", "target_type", "target_id"),)


class TwitterMention(Base):
    __tablename__ = "twitter_mentions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tweet_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    group_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    author_handle: Mapped[str] = mapped_column(String(255), nullable=False)
    author_followers: Mapped[int | None] = mapped_column(Integer, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    intent: Mapped[str] = mapped_column(String(32), default="general")
    confidence: Mapped[float] = mapped_column(Float, default=0.0)
    sentiment: Mapped[str] = mapped_column(
        String(16), default="neutral"
    )  # positive / negative / neutral
    engagement: Mapped[int] = mapped_column(Integer, default=0)
    entities_json: Mapped[str] = mapped_column(Text, default="{}")
    tweeted_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    __table_args__ = (
        Index("ix_twitter_mentions_group_ts", "group_id", "tweeted_at"),
    )


class BotQueueItem(Base):
    __tablename__ = "bot_queue"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    action_type: Mapped[str] = mapped_column(
        String(32), nullable=False
    )  # pnl_commentary / group_discovery / scam_alert / general_ct
    payload_json: Mapped[str] = mapped_column(Text, default="{}")
    priority: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[str] = mapped_column(
        String(16), default="pending"
    )  # pending / processing / completed / failed
    trigger_tweet_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    scheduled_for: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    __table_args__ = (Index("ix_bot_queue_status_priority", "status", "priority"),)
