"""Per-tweet ingestion: classify, store the mention, discover groups, queue replies.

The collector that polls Twitter lives outside this package; it hands each
enriched tweet to ``process_tweet``.
"""

import json
import logging
import re
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from signal_league.config import settings
from signal_league.mentions.classifier import classify_tweet
from signal_league.mentions.links import deduplicate_links, extract_group_links
from signal_league.mentions.models import (
    ClassificationResult,
    ExtractedLink,
    GeneralCtPayload,
    GroupDiscoveryPayload,
    MentionOutcome,
    PnlCommentaryPayload,
    ScamAlertPayload,
    Sentiment,
    TweetData,
    TweetMetrics,
)
from signal_league.mentions.sentiment import determine_sentiment
from signal_league.storage.models import BotQueueItem, SignalGroup, TwitterMention
from signal_league.storage.repository import (
    mention_exists,
    save_bot_queue_item,
    save_group,
    save_mention,
    slug_exists,
)

logger = logging.getLogger(__name__)

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def parse_blocked_accounts(raw: str) -> set[str]:
    return {
        a.strip().lower().lstrip("@")
        for a in raw.split(",")
        if a.strip()
    }


def calculate_engagement(metrics: TweetMetrics | None) -> int:
    if metrics is None:
        return 0
    return (
        metrics.like_count
        + metrics.retweet_count * 2
        + metrics.reply_count
        + metrics.quote_count * 2
    )


def calculate_priority(engagement: int, followers: int) -> int:
    """Queue priority 0-10, higher is more urgent."""
    if engagement > 1000:
        priority = 4
    elif engagement > 500:
        priority = 3
    elif engagement > 100:
        priority = 2
    else:
        priority = 1

    if followers > 100_000:
        priority += 4
    elif followers > 50_000:
        priority += 3
    elif followers > 10_000:
        priority += 2
    elif followers > 5_000:
        priority += 1

    return min(priority, 10)


def slugify(text: str) -> str:
    return _SLUG_STRIP.sub("-", text.lower()).strip("-")[:100]


def derive_group_name(link: ExtractedLink, author_username: str) -> str:
    handle = link.handle.split("/")[0]
    if len(handle) > 2:
        return handle
    return f"{author_username}-{link.platform}"


def match_link_to_group(
    link: ExtractedLink, groups: list[SignalGroup]
) -> SignalGroup | None:
    url = link.url.lower()
    handle = link.handle.lower()
    for group in groups:
        if group.platform_url and group.platform_url.lower() in url:
            return group
        if group.platform_handle and handle == group.platform_handle.lower():
            return group
        if handle == (group.slug or "").lower():
            return group
        if handle == re.sub(r"\s+", "", (group.name or "").lower()):
            return group
    return None


def build_queue_payload(
    tweet: TweetData,
    classification: ClassificationResult,
    sentiment: Sentiment,
    engagement: int,
    group_id: str | None,
):
    common = {
        "tweet_id": tweet.tweet_id,
        "author_username": tweet.author_username,
        "author_followers": tweet.author_followers,
        "text": tweet.text,
        "confidence": classification.confidence,
        "sentiment": sentiment,
        "engagement": engagement,
        "extracted_links": classification.links,
    }
    if classification.type == "pnl_post":
        return PnlCommentaryPayload(**common)
    if classification.type == "group_promo":
        return GroupDiscoveryPayload(**common)
    if classification.type == "scam_report":
        return ScamAlertPayload(**common, group_id=group_id)
    return GeneralCtPayload(**common, classification=classification.type)


async def _discover_groups(
    session: AsyncSession,
    tweet: TweetData,
    classification: ClassificationResult,
    approved_groups: list[SignalGroup],
) -> list[str]:
    bio_links = extract_group_links(tweet.author_description)
    links = deduplicate_links([*classification.links, *bio_links])

    discovered = []
    for link in links:
        if match_link_to_group(link, approved_groups) is not None:
            continue

        name = derive_group_name(link, tweet.author_username)
        slug = slugify(name)
        if not slug or slug in discovered or await slug_exists(session, slug):
            continue

        await save_group(
            session,
            SignalGroup(
                name=name,
                slug=slug,
                description=(
                    f"Discovered from @{tweet.author_username}'s tweet. "
                    f"Platform: {link.platform}"
                ),
                platform=link.platform,
                platform_handle=link.handle,
                source_url=link.url,
                status="pending",
            ),
        )
        discovered.append(slug)
        logger.info("Discovered group %s via @%s", slug, tweet.author_username)
    return discovered


async def process_tweet(
    session: AsyncSession,
    tweet: TweetData,
    approved_groups: list[SignalGroup],
    blocked_accounts: set[str] | None = None,
) -> MentionOutcome:
    if blocked_accounts is None:
        blocked_accounts = parse_blocked_accounts(settings.blocked_accounts)

    if tweet.author_username.lower() in blocked_accounts:
        return MentionOutcome(tweet_id=tweet.tweet_id, status="blocked")

    if await mention_exists(session, tweet.tweet_id):
        return MentionOutcome(tweet_id=tweet.tweet_id, status="duplicate")

    classification = classify_tweet(tweet)
    if classification.type == "irrelevant":
        return MentionOutcome(
            tweet_id=tweet.tweet_id, status="irrelevant", classification=classification
        )

    sentiment = determine_sentiment(tweet.text)
    engagement = calculate_engagement(tweet.metrics)

    group_id = None
    for link in classification.links:
        matched = match_link_to_group(link, approved_groups)
        if matched is not None:
            group_id = matched.id
            break

    await save_mention(
        session,
        TwitterMention(
            tweet_id=tweet.tweet_id,
            group_id=group_id,
            author_handle=tweet.author_username,
            author_followers=tweet.author_followers,
            content=tweet.text,
            intent=classification.type,
            confidence=classification.confidence,
            sentiment=sentiment,
            engagement=engagement,
            entities_json=json.dumps(
                {
                    "extracted_links": [
                        link.model_dump() for link in classification.links
                    ],
                    "has_media": tweet.has_media,
                }
            ),
            tweeted_at=tweet.created_at or datetime.utcnow(),
        ),
    )

    outcome = MentionOutcome(
        tweet_id=tweet.tweet_id,
        status="stored",
        classification=classification,
        sentiment=sentiment,
        group_id=group_id,
    )

    if classification.type == "group_promo":
        outcome.discovered_slugs = await _discover_groups(
            session, tweet, classification, approved_groups
        )

    if (
        engagement > settings.mention_engagement_threshold
        or tweet.author_followers > settings.mention_follower_threshold
    ):
        payload = build_queue_payload(
            tweet, classification, sentiment, engagement, group_id
        )
        await save_bot_queue_item(
            session,
            BotQueueItem(
                action_type=payload.action_type,
                payload_json=payload.model_dump_json(),
                priority=calculate_priority(engagement, tweet.author_followers),
                trigger_tweet_id=tweet.tweet_id,
            ),
        )
        outcome.queued_action = payload.action_type

    logger.debug(
        "Tweet %s -> %s (%.2f, %s)",
        tweet.tweet_id,
        classification.type,
        classification.confidence,
        sentiment,
    )
    return outcome
