"""CLI entry point for trellolink.

Runs once per pull_request webhook delivery. Inputs come from the action's
``with:`` block (``INPUT_*`` environment variables) or command line options.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from trellolink.config import (
    DEFAULT_GITHUB_API_URL,
    DEFAULT_REVIEW_LABEL_NAME,
    DEFAULT_TIMEOUT,
    DEFAULT_TRELLO_API_URL,
    DEFAULT_TRELLO_HOST,
    CardPolicy,
    ConfigError,
    RunConfig,
    ScanPolicy,
)
from trellolink.event import PullRequestEvent, read_payload, should_process
from trellolink.exceptions import TrellolinkError
from trellolink.host import GitHubCommentsClient
from trellolink.logging import get_logger, setup_logging
from trellolink.reporter import report_failure, report_success
from trellolink.sync import run_sync
from trellolink.tracker import TrelloClient

logger = get_logger("cli")


def run(config: RunConfig, event_name: str, event_path: Path | None) -> int:
    """Handle one event and return the process exit code."""
    try:
        config.validate()
        if event_path is None:
            raise ConfigError("No event payload given; set GITHUB_EVENT_PATH or --event-path")
        payload = read_payload(event_path)

        if not should_process(event_name, payload.get("action", ""), config):
            return report_success(None)

        event = PullRequestEvent.from_payload(event_name, payload)
        with (
            TrelloClient(
                config.trello_key,
                config.trello_token,
                base_url=config.trello_api_url,
                timeout=config.timeout,
            ) as tracker,
            GitHubCommentsClient(
                event.owner,
                event.repo,
                event.number,
                token=config.github_token,
                base_url=config.github_api_url,
                timeout=config.timeout,
            ) as host,
        ):
            result = run_sync(event, config, tracker, host)
    except TrellolinkError as e:
        logger.debug("Run failed", exc_info=True)
        return report_failure(str(e))
    except Exception as e:
        logger.debug("Run failed unexpectedly", exc_info=True)
        return report_failure(f"Unexpected error: {e}")

    return report_success(result)


@click.command()
@click.version_option(package_name="trellolink")
@click.option("--trello-key", envvar="INPUT_TRELLO-KEY", default="", help="Trello API key")
@click.option("--trello-token", envvar="INPUT_TRELLO-TOKEN", default="", help="Trello API token")
@click.option(
    "--repo-token",
    "github_token",
    envvar="INPUT_REPO-TOKEN",
    default=None,
    help="GitHub token, needed only with --add-pr-comment",
)
@click.option(
    "--add-pr-comment",
    envvar="INPUT_ADD-PR-COMMENT",
    type=click.BOOL,
    default=False,
    help="Comment on the PR with a link to the card",
)
@click.option(
    "--scan-policy",
    envvar="INPUT_SCAN-POLICY",
    type=click.Choice([p.value for p in ScanPolicy], case_sensitive=False),
    default=ScanPolicy.PERMISSIVE.value,
    help="strict: leading link block only; permissive: links anywhere",
)
@click.option(
    "--card-policy",
    envvar="INPUT_CARD-POLICY",
    type=click.Choice([p.value for p in CardPolicy], case_sensitive=False),
    default=CardPolicy.MULTI.value,
    help="single: exactly one card link; multi: any number",
)
@click.option(
    "--require-card",
    envvar="INPUT_REQUIRE-CARD",
    type=click.BOOL,
    default=True,
    help="Fail when the description links no card (multi policy)",
)
@click.option(
    "--review-label-name",
    envvar="INPUT_REVIEW-LABEL-NAME",
    default=DEFAULT_REVIEW_LABEL_NAME,
    help="PR label that marks the PR ready for review",
)
@click.option(
    "--review-label-id",
    envvar="INPUT_REVIEW-LABEL-ID",
    default=None,
    help="Trello label id mirrored from the review label",
)
@click.option(
    "--check-verification",
    envvar="INPUT_CHECK-VERIFICATION",
    type=click.BOOL,
    default=True,
    help="Require verification steps on cards of review-ready PRs",
)
@click.option(
    "--label-events/--no-label-events",
    "sync_labels_on_label_events",
    envvar="INPUT_LABEL-EVENTS",
    default=True,
    help="Also handle labeled/unlabeled actions",
)
@click.option("--trello-host", default=DEFAULT_TRELLO_HOST, help="Host of card links")
@click.option("--trello-api-url", default=DEFAULT_TRELLO_API_URL, help="Trello API URL")
@click.option(
    "--github-api-url",
    envvar="GITHUB_API_URL",
    default=DEFAULT_GITHUB_API_URL,
    help="GitHub API URL",
)
@click.option(
    "--timeout",
    envvar="INPUT_TIMEOUT",
    type=float,
    default=DEFAULT_TIMEOUT,
    help="Per-request timeout in seconds",
)
@click.option("--event-name", envvar="GITHUB_EVENT_NAME", default="", help="Triggering event")
@click.option(
    "--event-path",
    envvar="GITHUB_EVENT_PATH",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to the webhook payload JSON",
)
@click.option(
    "--log-dir",
    type=click.Path(path_type=Path),
    default=None,
    help="Also write logs to this directory",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(
    trello_key: str,
    trello_token: str,
    github_token: str | None,
    add_pr_comment: bool,
    scan_policy: str,
    card_policy: str,
    require_card: bool,
    review_label_name: str,
    review_label_id: str | None,
    check_verification: bool,
    sync_labels_on_label_events: bool,
    trello_host: str,
    trello_api_url: str,
    github_api_url: str,
    timeout: float,
    event_name: str,
    event_path: Path | None,
    log_dir: Path | None,
    verbose: bool,
) -> None:
    """Link a pull request to the Trello cards in its description."""
    setup_logging(log_dir=log_dir, level="DEBUG" if verbose else None)

    config = RunConfig(
        trello_key=trello_key,
        trello_token=trello_token,
        github_token=github_token or None,
        add_pr_comment=add_pr_comment,
        scan_policy=ScanPolicy(scan_policy.lower()),
        card_policy=CardPolicy(card_policy.lower()),
        require_card=require_card,
        review_label_name=review_label_name,
        review_label_id=review_label_id or None,
        check_verification=check_verification,
        sync_labels_on_label_events=sync_labels_on_label_events,
        trello_host=trello_host,
        trello_api_url=trello_api_url,
        github_api_url=github_api_url,
        timeout=timeout,
    )
    sys.exit(run(config, event_name, event_path))


if __name__ == "__main__":
    main()
