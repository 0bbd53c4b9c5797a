"""Card link extraction from pull request descriptions."""

from __future__ import annotations

import re

from trellolink.config import DEFAULT_TRELLO_HOST, ScanPolicy
from trellolink.logging import get_logger

logger = get_logger("references")

# GitHub's web form stores descriptions with CRLF line breaks
LINE_SEPARATOR = "\r\n"


def _link_regex(host: str) -> str:
    # trailing path stops at markdown and list punctuation
    return rf"https://{re.escape(host)}/c/(\w+)(?:/[^\s)\],]*)?"


def extract_card_ids(
    text: str | None,
    policy: ScanPolicy = ScanPolicy.PERMISSIVE,
    host: str = DEFAULT_TRELLO_HOST,
) -> list[str]:
    """Extract card ids from a PR description.

    Strict scanning only accepts a leading block of lines that are blank or
    hold exactly one bare link; the first other line stops the scan.
    Permissive scanning collects every link on every line.

    Args:
        text: PR description, may be None.
        policy: Scan policy to apply.
        host: Host of card links (e.g. "trello.com").

    Returns:
        Card ids in order of appearance, duplicates kept.
    """
    if not text:
        return []

    card_ids: list[str] = []
    if policy is ScanPolicy.STRICT:
        bare_link = re.compile(rf"^\s*{_link_regex(host)}\s*$")
        for line in text.split(LINE_SEPARATOR):
            if not line.strip():
                continue
            match = bare_link.match(line)
            if match is None:
                break
            card_ids.append(match.group(1))
    else:
        embedded_link = re.compile(_link_regex(host))
        for line in text.split(LINE_SEPARATOR):
            card_ids.extend(match.group(1) for match in embedded_link.finditer(line))

    logger.debug("Found card ids %s (policy=%s)", card_ids, policy.value)
    return card_ids


def card_link_pattern(card_id: str, host: str = DEFAULT_TRELLO_HOST) -> re.Pattern[str]:
    """Pattern for a markdown link to the given card.

    Matches ``[<name>](https://<host>/c/<card_id>[/<path>])``.
    """
    return re.compile(
        rf"\[[^\]]*\]\(https://{re.escape(host)}/c/{re.escape(card_id)}(?:/[^)\s]*)?\)"
    )
