"""Tracker Client - Talks to the Trello REST API."""

from trellolink.tracker.client import TrelloClient
from trellolink.tracker.exceptions import TrackerError
from trellolink.tracker.models import Attachment, Card

__all__ = [
    "Attachment",
    "Card",
    "TrackerError",
    "TrelloClient",
]
