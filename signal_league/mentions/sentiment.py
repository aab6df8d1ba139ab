from signal_league.mentions.keywords import (
    NEGATIVE_KEYWORDS,
    POSITIVE_KEYWORDS,
    count_keyword_matches,
)
from signal_league.mentions.models import Sentiment


def determine_sentiment(
    text: str,
    positive: tuple[str, ...] = POSITIVE_KEYWORDS,
    negative: tuple[str, ...] = NEGATIVE_KEYWORDS,
) -> Sentiment:
    lower = (text or "").lower()
    pos = count_keyword_matches(lower, positive)
    neg = count_keyword_matches(lower, negative)

    if pos > neg and pos >= 1:
        return "positive"
    if neg > pos and neg >= 1:
        return "negative"
    return "neutral"
