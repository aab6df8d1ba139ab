"""
Unit tests for invite-link extraction.
"""

import pytest

from signal_league.mentions.links import deduplicate_links, extract_group_links


class TestExtractGroupLinks:

    @pytest.mark.unit
    def test_telegram_without_scheme(self):
        """Should normalise a bare t.me handle to an https URL."""
        links = extract_group_links("join t.me/example today")
        assert len(links) == 1
        assert links[0].platform == "telegram"
        assert links[0].url == "https://t.me/example"
        assert links[0].handle == "example"

    @pytest.mark.unit
    def test_all_platforms(self):
        text = (
            "tg https://t.me/alpha_calls/123 "
            "discord http://discord.gg/Ab-12 "
            "whop whop.com/moonshots/vip"
        )
        links = extract_group_links(text)
        assert [(link.platform, link.handle) for link in links] == [
            ("telegram", "alpha_calls/123"),
            ("discord", "Ab-12"),
            ("whop", "moonshots/vip"),
        ]
        assert links[2].url == "https://whop.com/moonshots/vip"

    @pytest.mark.unit
    def test_no_links(self):
        assert extract_group_links("just vibes, no links") == []
        assert extract_group_links("") == []

    @pytest.mark.unit
    def test_duplicates_kept_until_deduplicated(self):
        """Should keep repeats on extraction and drop them case-insensitively after."""
        links = extract_group_links("t.me/Example and again T.ME/example")
        assert len(links) == 2

        unique = deduplicate_links(links)
        assert len(unique) == 1
        assert unique[0].handle == "Example"
