"""GitHubCommentsClient - Lists and creates comments on one pull request."""

from __future__ import annotations

from typing import Any

import httpx

from trellolink.config import DEFAULT_GITHUB_API_URL, DEFAULT_TIMEOUT
from trellolink.host.exceptions import HostApiError, HostAuthError
from trellolink.host.models import Comment
from trellolink.logging import get_logger, sanitize_for_log, truncate_output

logger = get_logger("host")

PER_PAGE = 100


class GitHubCommentsClient:
    """Client for the issue comments API, scoped to a single PR.

    The token is optional. Without one the client still exists but every
    call raises HostAuthError, so only runs that actually comment fail.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        number: int,
        token: str | None = None,
        base_url: str = DEFAULT_GITHUB_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize GitHub comments client.

        Args:
            owner: Repository owner
            repo: Repository name
            number: Pull request (issue) number
            token: GitHub token, or None when commenting is not available
            base_url: GitHub API base URL (for testing/enterprise)
            timeout: Per-request timeout in seconds
        """
        self.owner = owner
        self.repo = repo
        self.number = number
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.Client | None = None

    @property
    def available(self) -> bool:
        """Whether a token was configured."""
        return bool(self.token)

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for the GitHub API.

        Raises:
            HostAuthError: If no token was configured
        """
        if not self.available:
            raise HostAuthError(
                "No GitHub token configured; set the repo-token input to comment on PRs"
            )
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": "application/vnd.github+json",
                    "X-GitHub-Api-Version": "2022-11-28",
                },
                timeout=self.timeout,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> GitHubCommentsClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def _comments_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}/issues/{self.number}/comments"

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request, retrying once if the first attempt times out."""
        client = self.client
        try:
            try:
                return client.request(method, path, **kwargs)
            except httpx.TimeoutException:
                logger.warning("%s %s timed out, retrying once", method, path)
            return client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            message = sanitize_for_log(str(e))
            logger.error("%s %s errored: %s", method, path, message)
            raise HostApiError(f"{method} {path} failed: {message}") from e

    def list_comments(self) -> list[Comment]:
        """List all comments on the pull request.

        Returns:
            Comments in creation order

        Raises:
            HostAuthError: If no token was configured
            HostApiError: If the API call fails
        """
        comments: list[Comment] = []
        page = 1
        while True:
            response = self._send(
                "GET", self._comments_path, params={"per_page": PER_PAGE, "page": page}
            )
            if response.status_code != 200:
                logger.error("Failed to list comments: %s", truncate_output(response.text))
                raise HostApiError(
                    f"Failed to list comments on {self.owner}/{self.repo}#{self.number}: "
                    f"{response.status_code} - {response.text}",
                    status_code=response.status_code,
                )
            items: list[dict[str, Any]] = response.json()
            comments.extend(Comment.from_api(item) for item in items)
            if len(items) < PER_PAGE:
                break
            page += 1

        logger.debug("Found %d comment(s) on #%d", len(comments), self.number)
        return comments

    def add_comment(self, body: str) -> Comment:
        """Post a comment on the pull request.

        Args:
            body: Markdown comment body

        Returns:
            The created comment

        Raises:
            HostAuthError: If no token was configured
            HostApiError: If the API call fails
        """
        response = self._send("POST", self._comments_path, json={"body": body})
        if response.status_code != 201:
            logger.error("Failed to create comment: %s", truncate_output(response.text))
            raise HostApiError(
                f"Failed to comment on {self.owner}/{self.repo}#{self.number}: "
                f"{response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        data = response.json()
        comment = Comment.from_api(data)
        logger.info("Created comment on #%d: %s", self.number, comment.html_url)
        return comment
