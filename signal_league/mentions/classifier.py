"""Keyword/pattern triage of tweets into actionable categories.

Every category starts at 0 and collects additive points; the strictly
highest category wins, ties going to the earlier one in CATEGORY_ORDER.
Anything under ``min_score`` is irrelevant.
"""

import re
from dataclasses import dataclass

from signal_league.mentions.keywords import (
    CRYPTO_KEYWORDS,
    DRAMA_KEYWORDS,
    GROUP_PROMO_KEYWORDS,
    PNL_KEYWORDS,
    PROMO_BIO_PATTERNS,
    SCAM_KEYWORDS,
    count_keyword_matches,
)
from signal_league.mentions.links import extract_group_links
from signal_league.mentions.models import ClassificationResult, TweetData, TweetType
from signal_league.utils.numbers import round_half_up

DOLLAR_PATTERN = re.compile(r"\+?\$[\d,]+(?:\.\d{2})?")
PERCENT_PATTERN = re.compile(r"[+-]?\d+(?:\.\d+)?%")

CATEGORY_ORDER: tuple[TweetType, ...] = (
    "pnl_post",
    "group_promo",
    "scam_report",
    "drama",
    "general",
)


@dataclass(frozen=True)
class ClassifierConfig:
    pnl_keywords: tuple[str, ...] = PNL_KEYWORDS
    promo_keywords: tuple[str, ...] = GROUP_PROMO_KEYWORDS
    scam_keywords: tuple[str, ...] = SCAM_KEYWORDS
    drama_keywords: tuple[str, ...] = DRAMA_KEYWORDS
    crypto_keywords: tuple[str, ...] = CRYPTO_KEYWORDS

    pnl_per_match: int = 2
    pnl_dollar_bonus: int = 3
    pnl_percent_bonus: int = 2
    pnl_photo_bonus: int = 3
    promo_per_match: int = 2
    promo_per_link: int = 3
    promo_bio_bonus: int = 2
    scam_per_match: int = 3
    drama_per_match: int = 2
    drama_quote_bonus: int = 2
    general_cap: int = 3

    min_score: int = 2
    full_confidence_score: float = 15.0


DEFAULT_CLASSIFIER_CONFIG = ClassifierConfig()


def score_categories(
    tweet: TweetData, config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG
) -> tuple[dict[str, int], list]:
    """Raw per-category points and the links found in text + bio."""
    text_lower = tweet.text.lower()
    bio_lower = (tweet.author_description or "").lower()
    combined = f"{text_lower} {bio_lower}"

    links = extract_group_links(f"{tweet.text} {tweet.author_description or ''}")

    scores = {category: 0 for category in CATEGORY_ORDER}
    scores["irrelevant"] = 0

    # PnL posts: bonuses only count once a PnL keyword is present
    pnl_matches = count_keyword_matches(text_lower, config.pnl_keywords)
    if pnl_matches > 0:
        scores["pnl_post"] += pnl_matches * config.pnl_per_match
        if DOLLAR_PATTERN.search(tweet.text):
            scores["pnl_post"] += config.pnl_dollar_bonus
        if PERCENT_PATTERN.search(tweet.text):
            scores["pnl_post"] += config.pnl_percent_bonus
        if tweet.has_media and "photo" in tweet.media_types:
            scores["pnl_post"] += config.pnl_photo_bonus

    promo_matches = count_keyword_matches(text_lower, config.promo_keywords)
    if promo_matches > 0:
        scores["group_promo"] += promo_matches * config.promo_per_match
        scores["group_promo"] += len(links) * config.promo_per_link
        if any(p.search(bio_lower) for p in PROMO_BIO_PATTERNS):
            scores["group_promo"] += config.promo_bio_bonus

    scam_matches = count_keyword_matches(text_lower, config.scam_keywords)
    scores["scam_report"] += scam_matches * config.scam_per_match

    drama_matches = count_keyword_matches(text_lower, config.drama_keywords)
    if drama_matches > 0:
        scores["drama"] += drama_matches * config.drama_per_match
        if any(rt.type == "quoted" for rt in tweet.referenced_tweets):
            scores["drama"] += config.drama_quote_bonus

    crypto_matches = count_keyword_matches(combined, config.crypto_keywords)
    scores["general"] += min(crypto_matches, config.general_cap)

    return scores, links


def classify_tweet(
    tweet: TweetData, config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG
) -> ClassificationResult:
    scores, links = score_categories(tweet, config)

    best_type: TweetType = "irrelevant"
    best_score = 0
    for category in CATEGORY_ORDER:
        if scores[category] > best_score:
            best_score = scores[category]
            best_type = category

    if best_score < config.min_score:
        return ClassificationResult(type="irrelevant", confidence=0.0, links=[])

    confidence = min(best_score / config.full_confidence_score, 1.0)
    return ClassificationResult(
        type=best_type,
        confidence=round_half_up(confidence, 2),
        links=links,
    )
