"""Reference Extractor - Finds Trello card links in PR descriptions."""

from trellolink.references.extractor import (
    LINE_SEPARATOR,
    card_link_pattern,
    extract_card_ids,
)

__all__ = [
    "LINE_SEPARATOR",
    "card_link_pattern",
    "extract_card_ids",
]
