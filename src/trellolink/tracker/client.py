"""TrelloClient - Minimal authenticated client for the Trello REST API."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import httpx

from trellolink.config import DEFAULT_TIMEOUT, DEFAULT_TRELLO_API_URL
from trellolink.logging import get_logger, sanitize_for_log, truncate_output
from trellolink.tracker.exceptions import TrackerError
from trellolink.tracker.models import Attachment, Card

logger = get_logger("tracker")


class TrelloClient:
    """Client for the Trello cards API.

    Every call carries the API key and token as query parameters. Each call
    is made once; only a timed out request is sent a second time.
    """

    def __init__(
        self,
        key: str,
        token: str,
        base_url: str = DEFAULT_TRELLO_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize Trello client.

        Args:
            key: Trello API key
            token: Trello API token
            base_url: Trello API URL (for testing)
            timeout: Per-request timeout in seconds
        """
        self.key = key
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for the Trello API."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> TrelloClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _send(
        self,
        method: str,
        path: str,
        query: dict[str, Any],
        body: dict[str, Any] | None,
    ) -> httpx.Response:
        """Send a request, retrying once if the first attempt times out."""
        try:
            return self.client.request(method, path, params=query, json=body)
        except httpx.TimeoutException:
            logger.warning("%s %s%s timed out, retrying once", method, self.base_url, path)
        return self.client.request(method, path, params=query, json=body)

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and decode the JSON response.

        Args:
            method: HTTP method
            path: API path, e.g. "/1/cards/abc"
            params: Extra query parameters
            body: JSON body

        Returns:
            Decoded response data (None for an empty body)

        Raises:
            TrackerError: On transport failure, second timeout, or non-2xx status
        """
        query = {"key": self.key, "token": self.token, **(params or {})}
        url = f"{self.base_url}{path}"

        try:
            response = self._send(method, path, query, body)
        except httpx.TimeoutException as e:
            logger.error("%s %s timed out twice", method, url)
            raise TrackerError(f"{method} {url} timed out twice") from e
        except httpx.HTTPError as e:
            message = sanitize_for_log(str(e))
            logger.error("%s %s errored: %s", method, url, message)
            raise TrackerError(f"{method} {url} failed: {message}") from e

        if not 200 <= response.status_code < 300:
            logger.error(
                "%s %s errored with status %d: %s",
                method,
                url,
                response.status_code,
                truncate_output(sanitize_for_log(response.text)),
            )
            raise TrackerError(
                f"{method} {url} failed: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        logger.debug(
            "%s %s completed with status %d: %s",
            method,
            url,
            response.status_code,
            truncate_output(response.text),
        )
        if not response.content:
            return None
        return response.json()

    def get_card(self, card_id: str) -> Card:
        """Get a card with its name, URL and description.

        Raises:
            TrackerError: If the card cannot be fetched
        """
        data = self._request("GET", f"/1/cards/{card_id}")
        return Card.from_api(data)

    def get_card_attachments(self, card_id: str) -> list[Attachment]:
        """List the attachments of a card."""
        data = self._request("GET", f"/1/cards/{card_id}/attachments")
        return [Attachment.from_api(item) for item in data or []]

    def create_card_attachment(self, card_id: str, url: str) -> Attachment:
        """Attach a URL to a card.

        Trello does not deduplicate attachments; callers check first.
        """
        data = self._request("POST", f"/1/cards/{card_id}/attachments", body={"url": url})
        attachment = Attachment.from_api(data or {"url": url})
        logger.info("Created attachment %s on card %s", attachment.url, card_id)
        return attachment

    def get_card_fields(
        self, card_id: str, fields: Iterable[str] = ("name", "url")
    ) -> dict[str, Any]:
        """Get a projection of card fields."""
        data: dict[str, Any] | None = self._request(
            "GET", f"/1/cards/{card_id}", params={"fields": ",".join(fields)}
        )
        return data or {}

    def get_card_label_ids(self, card_id: str) -> set[str]:
        """Get the ids of the labels on a card."""
        data = self._request("GET", f"/1/cards/{card_id}/idLabels")
        return set(data or [])

    def add_card_label(self, card_id: str, label_id: str) -> None:
        """Add a label to a card."""
        self._request("POST", f"/1/cards/{card_id}/idLabels", params={"value": label_id})
        logger.info("Added label %s to card %s", label_id, card_id)

    def remove_card_label(self, card_id: str, label_id: str) -> None:
        """Remove a label from a card."""
        self._request("DELETE", f"/1/cards/{card_id}/idLabels/{label_id}")
        logger.info("Removed label %s from card %s", label_id, card_id)
