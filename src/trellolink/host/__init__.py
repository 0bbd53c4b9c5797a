"""Host Client - Reads and posts GitHub pull request comments."""

from trellolink.host.client import GitHubCommentsClient
from trellolink.host.exceptions import HostApiError, HostAuthError, HostError
from trellolink.host.models import Comment

__all__ = [
    "Comment",
    "GitHubCommentsClient",
    "HostApiError",
    "HostAuthError",
    "HostError",
]
