"""CardSynchronizer - Per-card attachment, comment, label and verification sync."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from trellolink.config import CardPolicy
from trellolink.logging import get_logger
from trellolink.references import card_link_pattern, extract_card_ids
from trellolink.sync.exceptions import ReferenceCountError, VerificationMissingError
from trellolink.sync.models import CardSyncResult, LabelChange, SyncResult

if TYPE_CHECKING:
    from trellolink.config import RunConfig
    from trellolink.event import PullRequestEvent
    from trellolink.host import GitHubCommentsClient
    from trellolink.tracker import TrelloClient

logger = get_logger("sync")

TRELLO_ICON_URL = "https://github.trello.services/images/mini-trello-icon.png"

_VERIFICATION_PATTERN = re.compile(r"verification.*step", re.DOTALL)


def build_card_comment(name: str, url: str) -> str:
    """Markdown comment linking a PR back to its card."""
    return f"![]({TRELLO_ICON_URL}) [{name}]({url})"


def has_verification_steps(desc: str | None) -> bool:
    """Check a card description for a "verification ... step" marker."""
    if not desc:
        return False
    return _VERIFICATION_PATTERN.search(desc.lower()) is not None


def plan_label_change(pr_has_label: bool, card_label_ids: set[str], label_id: str) -> LabelChange:
    """Decide how to mirror the PR's review label onto the card.

    Args:
        pr_has_label: Whether the PR carries the review label name.
        card_label_ids: Label ids currently on the card.
        label_id: Trello label id mapped to the review label.

    Returns:
        ADD, REMOVE or NONE; never more than one change.
    """
    card_has_label = label_id in card_label_ids
    if pr_has_label and not card_has_label:
        return LabelChange.ADD
    if not pr_has_label and card_has_label:
        return LabelChange.REMOVE
    return LabelChange.NONE


def select_card_ids(event: PullRequestEvent, config: RunConfig) -> list[str]:
    """Extract card ids and apply the configured card-count policy.

    Raises:
        ReferenceCountError: If the number of links is not allowed.
    """
    card_ids = extract_card_ids(event.body, config.scan_policy, config.trello_host)

    if config.card_policy is CardPolicy.SINGLE:
        if len(card_ids) != 1:
            raise ReferenceCountError(
                f"Expected exactly one Trello card link in the PR description, "
                f"found {len(card_ids)}. Put a single https://{config.trello_host}/c/... "
                f"link at the top of the description."
            )
    elif not card_ids and config.require_card:
        raise ReferenceCountError(
            f"No Trello card link found in the PR description. Add a "
            f"https://{config.trello_host}/c/... link to the description."
        )

    return card_ids


class CardSynchronizer:
    """Synchronizes one pull request with each card it references.

    Steps run in order for every card, and the first error aborts the run:
    attachment, comment, label mirroring, verification gate.
    """

    def __init__(
        self,
        tracker: TrelloClient,
        host: GitHubCommentsClient,
        config: RunConfig,
    ) -> None:
        """Initialize the synchronizer.

        Args:
            tracker: Trello client.
            host: GitHub comments client for the PR (may lack a token).
            config: Run configuration.
        """
        self.tracker = tracker
        self.host = host
        self.config = config

    def sync_card(self, card_id: str, event: PullRequestEvent) -> CardSyncResult:
        """Run every sync step for one card.

        Args:
            card_id: Trello card id.
            event: The triggering PR event.

        Returns:
            CardSyncResult describing the changes made.

        Raises:
            TrackerError: If a Trello call fails.
            HostAuthError: If a comment is needed but no token is configured.
            HostApiError: If a GitHub call fails.
            VerificationMissingError: If the review-ready card has no
                verification steps.
        """
        logger.info("Syncing card %s with %s", card_id, event.html_url)
        result = CardSyncResult(card_id=card_id)

        result.attachment_created = self.sync_attachment(card_id, event.html_url)
        if result.attachment_created and self.config.add_pr_comment:
            result.comment_created = self.sync_comment(card_id)

        pr_ready = event.has_label(self.config.review_label_name)
        if self.config.review_label_id:
            result.label_change = self.sync_label(card_id, pr_ready, self.config.review_label_id)

        if pr_ready and self.config.check_verification:
            self.check_verification(card_id)
            result.verification_checked = True

        return result

    def sync_attachment(self, card_id: str, pr_url: str) -> bool:
        """Attach the PR URL to the card unless it already is.

        Returns:
            True if an attachment was created.
        """
        attachments = self.tracker.get_card_attachments(card_id)
        if any(attachment.url == pr_url for attachment in attachments):
            logger.info("Card %s already has an attachment for %s, skipped", card_id, pr_url)
            return False

        self.tracker.create_card_attachment(card_id, pr_url)
        return True

    def sync_comment(self, card_id: str) -> bool:
        """Comment on the PR with a link to the card unless one exists.

        Returns:
            True if a comment was created.
        """
        pattern = card_link_pattern(card_id, self.config.trello_host)
        comments = self.host.list_comments()
        if any(pattern.search(comment.body) for comment in comments):
            logger.info("PR already links to card %s, skipped comment", card_id)
            return False

        fields = self.tracker.get_card_fields(card_id, ("name", "url"))
        self.host.add_comment(build_card_comment(fields.get("name", ""), fields.get("url", "")))
        return True

    def sync_label(self, card_id: str, pr_ready: bool, label_id: str) -> LabelChange:
        """Mirror the PR's review label onto the card."""
        card_label_ids = self.tracker.get_card_label_ids(card_id)
        change = plan_label_change(pr_ready, card_label_ids, label_id)

        if change is LabelChange.ADD:
            self.tracker.add_card_label(card_id, label_id)
        elif change is LabelChange.REMOVE:
            self.tracker.remove_card_label(card_id, label_id)
        else:
            logger.debug("Label %s on card %s already in sync", label_id, card_id)
        return change

    def check_verification(self, card_id: str) -> None:
        """Fail unless the card describes how to verify the change.

        Raises:
            VerificationMissingError: If no verification steps are found.
        """
        card = self.tracker.get_card(card_id)
        if not has_verification_steps(card.desc):
            raise VerificationMissingError(
                f"Trello card '{card.name}' ({card.url}) has no verification steps. "
                f"Add a \"Verification Steps\" section to the card description or "
                f"remove the '{self.config.review_label_name}' label from the PR."
            )
        logger.info("Card %s has verification steps", card_id)


def run_sync(
    event: PullRequestEvent,
    config: RunConfig,
    tracker: TrelloClient,
    host: GitHubCommentsClient,
) -> SyncResult:
    """Synchronize a PR with every card its description links to.

    The card-count policy is checked before any write. Cards are processed
    one at a time; the first error aborts the run and completed steps are
    not rolled back.

    Raises:
        ReferenceCountError: If the card-count policy is violated.
        TrellolinkError: The first error raised while syncing a card.
    """
    card_ids = select_card_ids(event, config)
    result = SyncResult(card_ids=card_ids)
    if not card_ids:
        logger.info("No card link in PR description, nothing to do")
        return result

    synchronizer = CardSynchronizer(tracker, host, config)
    for card_id in card_ids:
        result.cards.append(synchronizer.sync_card(card_id, event))

    logger.info("Synced %d card(s) for %s", len(result.cards), event.html_url)
    return result
