"""Shared pytest fixtures and configuration."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

import pytest

from trellolink.config import RunConfig
from trellolink.event import PullRequestEvent


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def run_config() -> RunConfig:
    """Config with credentials and a mapped review label."""
    return RunConfig(
        trello_key="test-key",
        trello_token="test-token",
        github_token="ghs_test",
        review_label_id="label-ready",
    )


@pytest.fixture
def payload() -> dict[str, Any]:
    """A pull_request 'opened' webhook payload linking one card."""
    return {
        "action": "opened",
        "pull_request": {
            "number": 7,
            "html_url": "https://github.com/acme/widgets/pull/7",
            "body": "https://trello.com/c/abc123\r\n",
            "labels": [],
        },
        "repository": {"name": "widgets", "owner": {"login": "acme"}},
    }


@pytest.fixture
def pr_event(payload: dict[str, Any]) -> PullRequestEvent:
    """PullRequestEvent built from the default payload."""
    return PullRequestEvent.from_payload("pull_request", payload)


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop handlers installed by setup_logging between tests."""
    yield
    logger = logging.getLogger("trellolink")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
