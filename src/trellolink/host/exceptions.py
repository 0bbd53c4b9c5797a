"""Custom exceptions for the GitHub comments client."""

from __future__ import annotations

from trellolink.exceptions import TrellolinkError


class HostError(TrellolinkError):
    """Base exception for GitHub client errors."""


class HostAuthError(HostError):
    """No GitHub token was configured for this run."""


class HostApiError(HostError):
    """A GitHub API call returned a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
