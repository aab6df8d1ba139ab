"""Extract Telegram, Discord and Whop invite links from free text."""

import re

from signal_league.mentions.models import ExtractedLink

LINK_PATTERNS = (
    (
        "telegram",
        re.compile(r"(?:https?://)?t\.me/([a-zA-Z0-9_]+(?:/[a-zA-Z0-9_]+)?)", re.IGNORECASE),
        "https://t.me/{}",
    ),
    (
        "discord",
        re.compile(r"(?:https?://)?discord\.gg/([a-zA-Z0-9_-]+)", re.IGNORECASE),
        "https://discord.gg/{}",
    ),
    (
        "whop",
        re.compile(
            r"(?:https?://)?whop\.com/([a-zA-Z0-9_-]+(?:/[a-zA-Z0-9_-]+)?)", re.IGNORECASE
        ),
        "https://whop.com/{}",
    ),
)


def extract_group_links(text: str) -> list[ExtractedLink]:
    """Every platform link in ``text``, grouped by platform, duplicates kept."""
    links = []
    for platform, pattern, url_template in LINK_PATTERNS:
        for match in pattern.finditer(text or ""):
            handle = match.group(1)
            links.append(
                ExtractedLink(
                    platform=platform,
                    url=url_template.format(handle),
                    handle=handle,
                )
            )
    return links


def deduplicate_links(links: list[ExtractedLink]) -> list[ExtractedLink]:
    seen: set[str] = set()
    unique = []
    for link in links:
        key = link.url.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(link)
    return unique
