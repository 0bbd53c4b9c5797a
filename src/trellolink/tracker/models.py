"""Data models for the Trello client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class Attachment:
    """An attachment on a card. Identity is the exact URL."""

    url: str
    id: str | None = None
    name: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Attachment:
        return cls(url=data.get("url", ""), id=data.get("id"), name=data.get("name"))


@dataclass
class Card:
    """Trello card fields used by a run."""

    id: str
    name: str
    url: str
    desc: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Card:
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            url=data.get("url", ""),
            desc=data.get("desc") or "",
        )
