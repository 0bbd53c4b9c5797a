"""Run configuration for trellolink.

A ``RunConfig`` is built once from the action inputs at the start of a run
and passed to every component explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from trellolink.exceptions import TrellolinkError

DEFAULT_REVIEW_LABEL_NAME = "ready for review"
DEFAULT_TRELLO_HOST = "trello.com"
DEFAULT_TRELLO_API_URL = "https://api.trello.com"
DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0


class ConfigError(TrellolinkError):
    """Raised when required configuration or event input is missing."""


class ScanPolicy(str, Enum):
    """How the PR description is scanned for card links."""

    STRICT = "strict"  # leading block of bare links only
    PERMISSIVE = "permissive"  # any link on any line


class CardPolicy(str, Enum):
    """How many card links a PR description may hold."""

    SINGLE = "single"
    MULTI = "multi"


@dataclass(frozen=True)
class RunConfig:
    """Immutable configuration for one run.

    Attributes:
        trello_key: Trello API key.
        trello_token: Trello API token.
        github_token: GitHub token, only needed to comment on the PR.
        add_pr_comment: Post a PR comment linking to the card.
        scan_policy: Reference extraction policy.
        card_policy: Single-card or multi-card mode.
        require_card: Fail the run when no card link is found (multi mode).
        review_label_name: PR label name that marks a PR ready for review.
        review_label_id: Trello label id mirrored from the PR label. Label
            mirroring is skipped when unset.
        check_verification: Require verification steps on review-ready cards.
        sync_labels_on_label_events: Also handle labeled/unlabeled actions.
        trello_host: Host of card links in PR descriptions.
        trello_api_url: Trello REST API base URL.
        github_api_url: GitHub REST API base URL.
        timeout: Per-request timeout in seconds.
    """

    trello_key: str
    trello_token: str
    github_token: str | None = None
    add_pr_comment: bool = False
    scan_policy: ScanPolicy = ScanPolicy.PERMISSIVE
    card_policy: CardPolicy = CardPolicy.MULTI
    require_card: bool = True
    review_label_name: str = DEFAULT_REVIEW_LABEL_NAME
    review_label_id: str | None = None
    check_verification: bool = True
    sync_labels_on_label_events: bool = True
    trello_host: str = DEFAULT_TRELLO_HOST
    trello_api_url: str = DEFAULT_TRELLO_API_URL
    github_api_url: str = DEFAULT_GITHUB_API_URL
    timeout: float = DEFAULT_TIMEOUT

    def validate(self) -> RunConfig:
        """Check required credentials.

        Returns:
            The same config, for chaining.

        Raises:
            ConfigError: If the Trello key or token is missing.
        """
        credentials = {"trello-key": self.trello_key, "trello-token": self.trello_token}
        missing = [name for name, value in credentials.items() if not value or not value.strip()]
        if missing:
            raise ConfigError(f"Missing required input(s): {', '.join(missing)}")
        if self.timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {self.timeout}")
        return self
