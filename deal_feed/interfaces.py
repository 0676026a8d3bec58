"""
Protocol interfaces for the Deal Feed system.

This module defines the protocol interfaces that establish system
boundaries and enable dependency injection throughout the application.
"""

from typing import Any, Iterable, List, Optional, Protocol

from .models.deal import Deal
from .models.post import LinkAnnotation, RawPost


class IFeedClient(Protocol):
    """Protocol for upstream author feed clients."""

    def fetch_author_feed(self, actor: str, limit: int) -> List[Any]:
        """Fetch the raw feed entries of an actor."""
        ...


class ILinkExtractor(Protocol):
    """Protocol for picking a post's deal link."""

    def extract_link(
        self, text: Optional[str], annotations: Optional[Iterable[LinkAnnotation]] = None
    ) -> str:
        """Return the most relevant link, or an empty string."""
        ...


class IPlatformClassifier(Protocol):
    """Protocol for assigning platform tags to deal names."""

    def classify(self, text: Optional[str]) -> str:
        """Return a platform tag, or an empty string."""
        ...


class IPostNormalizer(Protocol):
    """Protocol for turning raw posts into deals."""

    def normalize(self, post: RawPost) -> Deal:
        """Parse a raw post into a Deal."""
        ...


class IFeedPipeline(Protocol):
    """Protocol for building the served deal list."""

    def build_feed(self, actor: Optional[str] = None, limit: Optional[int] = None) -> List[Deal]:
        """Fetch, normalize and sort deals."""
        ...


class ISeenStore(Protocol):
    """Protocol for remembering which deals a client has already shown."""

    def has_seen(self, deal_id: str) -> bool:
        """Whether the deal id was marked as seen."""
        ...

    def mark_seen(self, deal_id: str) -> None:
        """Mark a deal id as seen."""
        ...
