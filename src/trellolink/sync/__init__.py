"""Synchronizer - Links a pull request to its Trello cards."""

from trellolink.sync.exceptions import ReferenceCountError, VerificationMissingError
from trellolink.sync.models import CardSyncResult, LabelChange, SyncResult
from trellolink.sync.synchronizer import (
    CardSynchronizer,
    build_card_comment,
    has_verification_steps,
    plan_label_change,
    run_sync,
    select_card_ids,
)

__all__ = [
    "CardSyncResult",
    "CardSynchronizer",
    "LabelChange",
    "ReferenceCountError",
    "SyncResult",
    "VerificationMissingError",
    "build_card_comment",
    "has_verification_steps",
    "plan_label_change",
    "run_sync",
    "select_card_ids",
]
