"""Keyword lists used for tweet triage and sentiment, plus the matcher."""

import re
from functools import lru_cache

PNL_KEYWORDS = (
    "pnl",
    "p&l",
    "profit",
    "roi",
    "+%",
    "unrealized",
    "realized gain",
    "total return",
    "account balance",
    "portfolio up",
)

GROUP_PROMO_KEYWORDS = (
    "join",
    "vip",
    "signal group",
    "free signals",
    "premium signals",
    "paid group",
    "inner circle",
    "exclusive group",
    "sign up",
    "membership",
    "subscribe",
)

SCAM_KEYWORDS = (
    "scam",
    "scammer",
    "rug",
    "rugged",
    "rug pull",
    "fake",
    "fraud",
    "ponzi",
    "exit scam",
    "lost my money",
    "stolen",
    "beware",
    "warning",
    "do not trust",
    "fake pnl",
    "photoshopped",
)

DRAMA_KEYWORDS = (
    "exposed",
    "called out",
    "beef",
    "drama",
    "receipts",
    "ratio",
    "caught",
    "lying",
    "lied",
    "clown",
    "fraud exposed",
    "unfollow",
    "blocked",
    "feud",
)

CRYPTO_KEYWORDS = (
    "btc",
    "eth",
    "bitcoin",
    "ethereum",
    "crypto",
    "defi",
    "nft",
    "altcoin",
    "token",
    "blockchain",
    "web3",
    "trading",
    "chart",
    "ta",
    "technical analysis",
    "entry",
    "exit",
    "long",
    "short",
    "leverage",
    "futures",
    "spot",
    "binance",
    "bybit",
    "dex",
    "swap",
    "yield",
    "airdrop",
    "whale",
    "pump",
    "dump",
    "degen",
    "hodl",
    "usdt",
    "usdc",
    "solana",
    "sol",
)

POSITIVE_KEYWORDS = (
    "great",
    "amazing",
    "profit",
    "moon",
    "bullish",
    "win",
    "winner",
    "gains",
    "lfg",
    "lets go",
    "nailed it",
    "fire",
    "goat",
    "legend",
    "insane",
    "bank",
    "cash",
    "hit",
    "accurate",
    "on point",
    "best",
    "love",
)

NEGATIVE_KEYWORDS = (
    "scam",
    "loss",
    "fake",
    "rug",
    "rugged",
    "rekt",
    "wrecked",
    "bad",
    "terrible",
    "worst",
    "avoid",
    "trash",
    "garbage",
    "lost",
    "down",
    "bearish",
    "failed",
    "fraud",
    "liar",
    "disappointing",
)

# Bio links that mark an account as a group promoter
PROMO_BIO_PATTERNS = (
    re.compile(r"t\.me/", re.IGNORECASE),
    re.compile(r"discord\.gg/", re.IGNORECASE),
    re.compile(r"whop\.com/", re.IGNORECASE),
    re.compile(r"linktr\.ee/", re.IGNORECASE),
)

_NON_LETTER = re.compile(r"[^a-zA-Z]")


@lru_cache(maxsize=1024)
def _word_pattern(keyword: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)


def _uses_substring(keyword: str) -> bool:
    # Short tokens and anything with spaces/symbols ("+%", "p&l", "sign up")
    return len(keyword) <= 2 or bool(_NON_LETTER.search(keyword))


def count_keyword_matches(text: str, keywords: tuple[str, ...]) -> int:
    """Number of distinct keywords present in ``text`` (expected lower-cased)."""
    count = 0
    for kw in keywords:
        if _uses_substring(kw):
            if kw.lower() in text:
                count += 1
        elif _word_pattern(kw).search(text):
            count += 1
    return count
