"""Unit tests for card link extraction."""

import pytest

from trellolink.config import ScanPolicy
from trellolink.references import card_link_pattern, extract_card_ids


@pytest.mark.unit
class TestExtractEmpty:
    """Inputs without links."""

    @pytest.mark.parametrize("policy", list(ScanPolicy))
    def test_none_returns_empty(self, policy: ScanPolicy) -> None:
        assert extract_card_ids(None, policy) == []

    @pytest.mark.parametrize("policy", list(ScanPolicy))
    def test_empty_string_returns_empty(self, policy: ScanPolicy) -> None:
        assert extract_card_ids("", policy) == []

    @pytest.mark.parametrize("policy", list(ScanPolicy))
    def test_prose_without_link_returns_empty(self, policy: ScanPolicy) -> None:
        text = "Fixes the login page.\r\nSee https://example.com/c/abc for details."
        assert extract_card_ids(text, policy) == []

    @pytest.mark.parametrize("policy", list(ScanPolicy))
    def test_other_host_ignored(self, policy: ScanPolicy) -> None:
        assert extract_card_ids("https://trello.co/c/abc123", policy) == []


@pytest.mark.unit
class TestStrictPolicy:
    """Leading link block only."""

    def test_leading_link_then_prose(self) -> None:
        text = "https://trello.com/c/ABC123\r\nThis PR fixes the thing."
        assert extract_card_ids(text, ScanPolicy.STRICT) == ["ABC123"]

    def test_link_with_trailing_path(self) -> None:
        text = "https://trello.com/c/ABC123/42-fix-login-page\r\n"
        assert extract_card_ids(text, ScanPolicy.STRICT) == ["ABC123"]

    def test_whitespace_wrapped_link_accepted(self) -> None:
        text = "   https://trello.com/c/abc_1   \r\n"
        assert extract_card_ids(text, ScanPolicy.STRICT) == ["abc_1"]

    def test_blank_lines_skipped(self) -> None:
        text = "\r\n  \r\nhttps://trello.com/c/one\r\n\r\nhttps://trello.com/c/two\r\nDone."
        assert extract_card_ids(text, ScanPolicy.STRICT) == ["one", "two"]

    def test_prose_first_line_yields_nothing(self) -> None:
        text = "Fixes login.\r\nhttps://trello.com/c/ABC123"
        assert extract_card_ids(text, ScanPolicy.STRICT) == []

    def test_links_after_prose_ignored(self) -> None:
        text = "https://trello.com/c/first\r\nSome prose\r\nhttps://trello.com/c/second"
        assert extract_card_ids(text, ScanPolicy.STRICT) == ["first"]

    def test_embedded_link_halts_scan(self) -> None:
        text = "Card: https://trello.com/c/ABC123\r\n"
        assert extract_card_ids(text, ScanPolicy.STRICT) == []

    def test_only_crlf_splits_lines(self) -> None:
        text = "https://trello.com/c/first\nhttps://trello.com/c/second"
        assert extract_card_ids(text, ScanPolicy.STRICT) == []


@pytest.mark.unit
class TestPermissivePolicy:
    """Links anywhere in the description."""

    def test_leading_link_then_prose(self) -> None:
        text = "https://trello.com/c/ABC123\r\nThis PR fixes the thing."
        assert extract_card_ids(text, ScanPolicy.PERMISSIVE) == ["ABC123"]

    def test_collects_links_after_prose(self) -> None:
        text = (
            "https://trello.com/c/ABC123\r\n"
            "Also touches https://trello.com/c/def456/9-other-card in passing.\r\n"
        )
        assert extract_card_ids(text, ScanPolicy.PERMISSIVE) == ["ABC123", "def456"]

    def test_prose_first_line_still_scanned(self) -> None:
        text = "Fixes login.\r\nhttps://trello.com/c/ABC123"
        assert extract_card_ids(text, ScanPolicy.PERMISSIVE) == ["ABC123"]

    def test_multiple_links_on_one_line(self) -> None:
        text = "https://trello.com/c/a1 and https://trello.com/c/b2"
        assert extract_card_ids(text, ScanPolicy.PERMISSIVE) == ["a1", "b2"]

    def test_markdown_links_joined_by_comma(self) -> None:
        text = "[a](https://trello.com/c/a/1-x),[b](https://trello.com/c/b/2-y)"
        assert extract_card_ids(text, ScanPolicy.PERMISSIVE) == ["a", "b"]

    def test_trailing_path_stops_at_bracket(self) -> None:
        text = "See [https://trello.com/c/a/1-x](https://trello.com/c/b/2-y)"
        assert extract_card_ids(text, ScanPolicy.PERMISSIVE) == ["a", "b"]

    def test_duplicates_kept_in_order(self) -> None:
        text = "https://trello.com/c/x\r\nhttps://trello.com/c/y\r\nhttps://trello.com/c/x"
        assert extract_card_ids(text, ScanPolicy.PERMISSIVE) == ["x", "y", "x"]

    def test_default_policy_is_permissive(self) -> None:
        assert extract_card_ids("See https://trello.com/c/abc") == ["abc"]

    def test_custom_host(self) -> None:
        text = "https://cards.example.org/c/zz9"
        assert extract_card_ids(text, ScanPolicy.PERMISSIVE, host="cards.example.org") == ["zz9"]


@pytest.mark.unit
class TestCardLinkPattern:
    """Markdown link detection used for comment idempotency."""

    def test_matches_plain_link(self) -> None:
        body = "![](https://icon.png) [Fix login](https://trello.com/c/abc123)"
        assert card_link_pattern("abc123").search(body)

    def test_matches_link_with_path(self) -> None:
        body = "[Fix login](https://trello.com/c/abc123/42-fix-login)"
        assert card_link_pattern("abc123").search(body)

    def test_other_card_not_matched(self) -> None:
        body = "[Other](https://trello.com/c/abc1234)"
        assert card_link_pattern("abc123").search(body) is None

    def test_bare_url_not_matched(self) -> None:
        assert card_link_pattern("abc123").search("https://trello.com/c/abc123") is None
