"""
Upstream feed client for the Deal Feed system.

Fetches an account's author feed from the public Bluesky API. A single
request is made per call; failures are raised as FetchError and never
retried.
"""

import logging
from typing import Any, List, Optional, Union

import requests

from ..models.config import DEFAULT_API_URL

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when the upstream feed request does not succeed."""

    def __init__(self, status: Optional[int] = None, detail: str = ""):
        """
        Args:
            status: Upstream HTTP status code, if a response was received
            detail: Description used when there is no status
        """
        self.status = status
        self.detail = detail
        super().__init__(str(self))

    @property
    def reason(self) -> Union[int, str]:
        """Status code when known, otherwise the failure description."""
        if self.status is not None:
            return self.status
        return self.detail or "unknown error"

    def __str__(self) -> str:
        return f"Bluesky fetch error ({self.reason})"


class AuthorFeedClient:
    """Fetches raw feed entries for one actor."""

    def __init__(self, api_url: str = DEFAULT_API_URL, timeout: int = 30):
        """
        Initialize author feed client.

        Args:
            api_url: getAuthorFeed endpoint URL
            timeout: Request timeout in seconds
        """
        self.api_url = api_url
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update(
            {
                "User-Agent": "Deal-Feed/1.0 (Author Feed Client)",
                "Accept": "application/json",
            }
        )

    def fetch_author_feed(self, actor: str, limit: int) -> List[Any]:
        """
        Fetch the newest posts of an actor.

        Args:
            actor: Actor DID or handle
            limit: Maximum number of posts to request

        Returns:
            The raw ``feed`` list; empty when the response carries none

        Raises:
            FetchError: If the request fails or returns a non-2xx status
        """
        logger.debug(f"Fetching author feed for {actor} (limit {limit})")

        try:
            response = self.session.get(
                self.api_url,
                params={"actor": actor, "limit": limit},
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            logger.warning(f"Timeout fetching author feed for {actor}")
            raise FetchError(detail="timeout")
        except requests.exceptions.RequestException as e:
            logger.warning(f"Connection error fetching author feed for {actor}: {e}")
            raise FetchError(detail="connection error")

        if not response.ok:
            logger.error(
                f"HTTP error {response.status_code} fetching author feed for {actor}"
            )
            raise FetchError(status=response.status_code)

        try:
            data = response.json()
        except ValueError:
            logger.error(f"Author feed for {actor} is not valid JSON")
            raise FetchError(status=response.status_code, detail="invalid JSON")

        feed = data.get("feed") if isinstance(data, dict) else None
        if not isinstance(feed, list):
            logger.warning(f"Author feed response for {actor} has no feed list")
            return []

        return feed

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
