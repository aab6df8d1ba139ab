from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

TweetType = Literal[
    "pnl_post", "group_promo", "scam_report", "drama", "general", "irrelevant"
]
Sentiment = Literal["positive", "negative", "neutral"]
LinkPlatform = Literal["telegram", "discord", "whop"]


class TweetMetrics(BaseModel):
    like_count: int = 0
    retweet_count: int = 0
    reply_count: int = 0
    quote_count: int = 0


class ReferencedTweet(BaseModel):
    type: str  # quoted / replied_to / retweeted
    id: str


class TweetData(BaseModel):
    """A tweet enriched with its author's profile, as handed over by the collector."""

    tweet_id: str
    text: str
    created_at: datetime | None = None
    author_id: str = ""
    author_username: str = "unknown"
    author_followers: int = 0
    author_description: str = ""
    metrics: TweetMetrics = TweetMetrics()
    has_media: bool = False
    media_types: list[str] = []
    referenced_tweets: list[ReferencedTweet] = []


class ExtractedLink(BaseModel):
    platform: LinkPlatform
    url: str
    handle: str


class ClassificationResult(BaseModel):
    type: TweetType
    confidence: float  # 0.0 - 1.0
    links: list[ExtractedLink] = []


# --- Bot queue payloads, one shape per action type ---


class _QueuePayload(BaseModel):
    tweet_id: str
    author_username: str
    author_followers: int = 0
    text: str
    confidence: float
    sentiment: Sentiment
    engagement: int = 0
    extracted_links: list[ExtractedLink] = []


class PnlCommentaryPayload(_QueuePayload):
    action_type: Literal["pnl_commentary"] = "pnl_commentary"


class GroupDiscoveryPayload(_QueuePayload):
    action_type: Literal["group_discovery"] = "group_discovery"


class ScamAlertPayload(_QueuePayload):
    action_type: Literal["scam_alert"] = "scam_alert"
    group_id: str | None = None


class GeneralCtPayload(_QueuePayload):
    action_type: Literal["general_ct"] = "general_ct"
    classification: Literal["drama", "general"] = "general"


QueuePayload = Annotated[
    Union[PnlCommentaryPayload, GroupDiscoveryPayload, ScamAlertPayload, GeneralCtPayload],
    Field(discriminator="action_type"),
]


class MentionOutcome(BaseModel):
    tweet_id: str
    status: Literal["stored", "duplicate", "blocked", "irrelevant"]
    classification: ClassificationResult | None = None
    sentiment: Sentiment | None = None
    group_id: str | None = None
    discovered_slugs: list[str] = []
    queued_action: str | None = None
