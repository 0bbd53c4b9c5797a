"""Pull request event model and the event gate."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from trellolink.config import ConfigError, RunConfig
from trellolink.logging import get_logger

logger = get_logger("event")

SUPPORTED_EVENT = "pull_request"
BASE_ACTIONS = frozenset({"opened", "reopened", "edited"})
LABEL_ACTIONS = frozenset({"labeled", "unlabeled"})


@dataclass(frozen=True)
class PullRequestEvent:
    """The parts of a pull_request webhook payload a run needs."""

    event_name: str
    action: str
    body: str | None
    html_url: str
    owner: str
    repo: str
    number: int
    labels: frozenset[str] = field(default_factory=frozenset)

    def has_label(self, name: str) -> bool:
        """Check whether the PR carries a label with the given name."""
        return name in self.labels

    @classmethod
    def from_payload(cls, event_name: str, payload: dict[str, Any]) -> PullRequestEvent:
        """Build an event from a webhook payload.

        Args:
            event_name: Name of the triggering event (GITHUB_EVENT_NAME).
            payload: Decoded webhook payload.

        Returns:
            PullRequestEvent for this run.

        Raises:
            ConfigError: If the payload has no pull_request object.
        """
        pr = payload.get("pull_request")
        if not isinstance(pr, dict):
            raise ConfigError(f"Event payload for '{event_name}' has no pull_request object")

        repository = payload.get("repository") or {}
        owner = (repository.get("owner") or {}).get("login", "")
        labels = frozenset(label["name"] for label in pr.get("labels") or [] if "name" in label)

        return cls(
            event_name=event_name,
            action=payload.get("action", ""),
            body=pr.get("body"),
            html_url=pr.get("html_url", ""),
            owner=owner,
            repo=repository.get("name", ""),
            number=int(pr.get("number", 0)),
            labels=labels,
        )


def read_payload(event_path: str | Path) -> dict[str, Any]:
    """Read the webhook payload file written by the runner.

    Raises:
        ConfigError: If the file is missing, not valid JSON, or not an object.
    """
    path = Path(event_path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read event payload {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Event payload {path} is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise ConfigError(f"Event payload {path} is not a JSON object")
    return payload


def allowed_actions(config: RunConfig) -> frozenset[str]:
    """Actions handled for the supported event."""
    if config.sync_labels_on_label_events:
        return BASE_ACTIONS | LABEL_ACTIONS
    return BASE_ACTIONS


def should_process(event_name: str, action: str, config: RunConfig) -> bool:
    """Decide whether this event/action pair is handled.

    A rejected event is not a failure; the run simply ends with no side
    effects.
    """
    if event_name != SUPPORTED_EVENT:
        logger.info("Event '%s' is not handled, nothing to do", event_name)
        return False
    if action not in allowed_actions(config):
        logger.info("Action '%s' of '%s' is not handled, nothing to do", action, event_name)
        return False
    return True
