"""
Feed pipeline for the Deal Feed system.

Fetches the author feed, normalizes every post into a Deal and sorts the
result newest first.
"""

from datetime import datetime, timezone
from typing import List, Optional, Tuple

from dateutil import parser as date_parser

from ..interfaces import IFeedClient, IPostNormalizer
from ..models.config import DEFAULT_ACTOR, DEFAULT_LIMIT
from ..models.deal import Deal
from ..models.post import RawPost
from ..utils.logging import get_logger
from .feed_client import AuthorFeedClient
from .post_parser import PostNormalizer

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    Naive values are taken as UTC.

    Returns:
        Parsed datetime, or None if value is missing or unparseable
    """
    if not value:
        return None

    try:
        parsed = date_parser.isoparse(value)
    except (ValueError, OverflowError):
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def timestamp_sort_key(deal: Deal) -> Tuple[int, datetime]:
    """Sort key placing deals without a valid timestamp below all others."""
    parsed = parse_timestamp(deal.timestamp)
    if parsed is None:
        return (0, _OLDEST)
    return (1, parsed)


def sort_deals(deals: List[Deal]) -> List[Deal]:
    """
    Sort deals newest first.

    The sort is stable: deals with equal timestamps, and all deals without
    a valid timestamp, keep their upstream order.
    """
    return sorted(deals, key=timestamp_sort_key, reverse=True)


class FeedPipeline:
    """Builds the served deal list from the upstream author feed."""

    def __init__(
        self,
        client: Optional[IFeedClient] = None,
        normalizer: Optional[IPostNormalizer] = None,
        actor: str = DEFAULT_ACTOR,
        limit: int = DEFAULT_LIMIT,
    ):
        """
        Initialize feed pipeline.

        Args:
            client: Upstream feed client
            normalizer: Post normalizer
            actor: Default actor to fetch
            limit: Default number of posts to fetch
        """
        self.client = client or AuthorFeedClient()
        self.normalizer = normalizer or PostNormalizer()
        self.actor = actor
        self.limit = limit
        self.logger = get_logger("feed.pipeline")

    def build_feed(self, actor: Optional[str] = None, limit: Optional[int] = None) -> List[Deal]:
        """
        Fetch posts and turn them into a sorted deal list.

        Args:
            actor: Actor to fetch; defaults to the configured one
            limit: Maximum posts to fetch; defaults to the configured one

        Returns:
            Deals sorted newest first, one per post

        Raises:
            FetchError: If the upstream request fails
        """
        actor = actor if actor is not None else self.actor
        limit = limit if limit is not None else self.limit

        feed = self.client.fetch_author_feed(actor, limit)

        deals = [
            self.normalizer.normalize(RawPost.from_feed_item(item)) for item in feed
        ]

        self.logger.info(
            "Built deal feed",
            extra={"actor": actor, "posts": len(feed), "deals": len(deals)},
        )

        return sort_deals(deals)
