"""Data models for the card synchronizer."""

from dataclasses import dataclass, field
from enum import Enum


class LabelChange(str, Enum):
    """Label mirroring decision for one card."""

    ADD = "add"
    REMOVE = "remove"
    NONE = "none"


@dataclass
class CardSyncResult:
    """What a run did to one card."""

    card_id: str
    attachment_created: bool = False
    comment_created: bool = False
    label_change: LabelChange = LabelChange.NONE
    verification_checked: bool = False


@dataclass
class SyncResult:
    """Outcome of a successful run."""

    card_ids: list[str] = field(default_factory=list)
    cards: list[CardSyncResult] = field(default_factory=list)

    @property
    def attachments_created(self) -> int:
        return sum(1 for card in self.cards if card.attachment_created)
