"""
Terminal client for the served deal feed.

Polls the ``/deals`` endpoint on a fixed interval, applies the stored
platform filter and prints the deals as a table. Deals shown before are
dimmed, new ones are marked with an asterisk.
"""

import asyncio
import sys
from typing import List, Optional, TextIO

import aiohttp
from aiohttp import ClientTimeout

from ..components.filter_preferences import FilterPreferences, apply_platform_filters
from ..interfaces import ISeenStore
from ..models.deal import Deal
from ..utils.error_handling import ErrorCategory, ErrorSeverity, with_error_handling
from ..utils.logging import get_logger

DIM = "\033[2m"
RESET = "\033[0m"

logger = get_logger("feed.watcher")


class EndpointError(Exception):
    """Raised when the deal feed endpoint does not return a deal list."""

    def __init__(self, endpoint: str, status: int, detail: str = ""):
        self.endpoint = endpoint
        self.status = status
        self.detail = detail
        super().__init__(str(self))

    def __str__(self) -> str:
        message = f"Deal feed endpoint {self.endpoint} answered {self.status}"
        if self.detail:
            message += f" ({self.detail})"
        return message


def format_deal_row(deal: Deal, seen: bool, color: bool = True) -> str:
    """
    Format one table row: marker, platform, price, name and link.

    Seen deals are dimmed; a missing price is shown as N/A.
    """
    marker = " " if seen else "*"
    price = deal.price if deal.price.strip() else "N/A"
    platform = deal.platform or "-"

    row = f"{marker} {platform:<2} {price:>9}  {deal.name}"
    if deal.url.strip():
        row += f"  <{deal.url}>"

    if seen and color:
        return f"{DIM}{row}{RESET}"
    return row


class FeedWatcher:
    """Polls the deal feed endpoint and renders it to a stream."""

    def __init__(
        self,
        endpoint: str,
        seen_store: ISeenStore,
        preferences: FilterPreferences,
        poll_interval: int = 60,
        timeout: int = 10,
        output: Optional[TextIO] = None,
        color: bool = True,
    ):
        """
        Initialize feed watcher.

        Args:
            endpoint: URL of the served ``/deals`` endpoint
            seen_store: Store of deal ids already shown
            preferences: Stored platform filter
            poll_interval: Seconds between polls
            timeout: Request timeout in seconds
            output: Stream to render to; defaults to stdout
            color: Whether to dim seen rows with ANSI codes
        """
        self.endpoint = endpoint
        self.seen_store = seen_store
        self.preferences = preferences
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.output = output or sys.stdout
        self.color = color
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry."""
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=ClientTimeout(total=self.timeout),
                headers={"User-Agent": "Deal-Feed/1.0 (Feed Watcher)"},
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.session:
            await self.session.close()
            self.session = None

    async def fetch_deals(self) -> List[Deal]:
        """
        Fetch the deal list from the endpoint.

        Raises:
            EndpointError: If the endpoint does not answer with a JSON deal list
        """
        if self.session is None:
            raise RuntimeError("FeedWatcher must be used as an async context manager")

        async with self.session.get(self.endpoint) as response:
            if response.status != 200:
                raise EndpointError(self.endpoint, response.status)
            data = await response.json()

        if not isinstance(data, list):
            raise EndpointError(self.endpoint, response.status, "unexpected payload")

        return [Deal.from_dict(item) for item in data if isinstance(item, dict)]

    def render(self, deals: List[Deal]) -> List[str]:
        """
        Render deals through the platform filter and mark them seen.

        Returns:
            The rendered rows, in feed order
        """
        visible = apply_platform_filters(deals, self.preferences.load())

        rows = []
        for deal in visible:
            seen = self.seen_store.has_seen(deal.id)
            rows.append(format_deal_row(deal, seen, self.color))

        # Mark after rendering so new deals stand out for one poll
        for deal in visible:
            if not self.seen_store.has_seen(deal.id):
                self.seen_store.mark_seen(deal.id)

        for row in rows:
            print(row, file=self.output)
        self.output.flush()

        return rows

    @with_error_handling(
        component="feed.watcher",
        category=ErrorCategory.NETWORK,
        severity=ErrorSeverity.LOW,
        fallback_value=None,
        suppress_exceptions=True,
    )
    async def poll_once(self) -> Optional[List[str]]:
        """Fetch and render one poll; failures are logged and yield None."""
        deals = await self.fetch_deals()
        logger.debug("Polled deal feed", extra={"deals": len(deals)})
        return self.render(deals)

    async def run(self, max_polls: Optional[int] = None) -> None:
        """
        Poll until cancelled, or until max_polls polls have run.

        Args:
            max_polls: Number of polls to run; None runs forever
        """
        polls = 0
        while max_polls is None or polls < max_polls:
            await self.poll_once()
            polls += 1

            if max_polls is not None and polls >= max_polls:
                break
            await asyncio.sleep(self.poll_interval)
