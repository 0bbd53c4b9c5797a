"""Data models for the GitHub comments client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class Comment:
    """A comment in a pull request's discussion thread."""

    body: str
    id: int | None = None
    html_url: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Comment:
        return cls(body=data.get("body") or "", id=data.get("id"), html_url=data.get("html_url"))
