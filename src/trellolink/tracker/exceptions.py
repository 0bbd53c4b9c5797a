"""Custom exceptions for the Trello client."""

from __future__ import annotations

from trellolink.exceptions import TrellolinkError


class TrackerError(TrellolinkError):
    """A Trello API call failed or returned a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
