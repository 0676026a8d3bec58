"""
Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Deal Feed test suite.
"""

import itertools
from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import pytest

from deal_feed.models.config import Configuration
from deal_feed.models.deal import Deal
from deal_feed.models.post import LINK_FEATURE_TYPE
from deal_feed.utils.error_handling import get_error_tracker

_cid_counter = itertools.count(1)

_DEFAULT = object()


def make_feed_item(
    cid: Optional[str] = None,
    text: Any = "Default post text with link http://example.com and price $19.99",
    facets: Any = _DEFAULT,
    created_at: Any = "2024-01-01T12:00:00.000Z",
) -> Dict[str, Any]:
    """Build one entry of an upstream ``feed`` list."""
    record: Dict[str, Any] = {"text": text, "createdAt": created_at}
    record["facets"] = [] if facets is _DEFAULT else facets
    return {
        "post": {
            "cid": cid or f"cid-{next(_cid_counter)}",
            "record": record,
        }
    }


def link_facet(*uris: Any) -> Dict[str, Any]:
    """Build a facet holding one link feature per uri."""
    return {"features": [{"$type": LINK_FEATURE_TYPE, "uri": uri} for uri in uris]}


class StubFeedClient:
    """Feed client returning a canned feed list, or raising."""

    def __init__(self, feed: Optional[List[Any]] = None, error: Optional[Exception] = None):
        self.feed = feed or []
        self.error = error
        self.calls: List[tuple] = []

    def fetch_author_feed(self, actor: str, limit: int) -> List[Any]:
        self.calls.append((actor, limit))
        if self.error is not None:
            raise self.error
        return self.feed


@pytest.fixture
def feed_item():
    """Factory for upstream feed entries."""
    return make_feed_item


@pytest.fixture
def stub_client():
    """Factory for stub feed clients."""
    return StubFeedClient


@pytest.fixture
def sample_deal():
    """Create a sample Deal for testing."""
    return Deal(
        id="bafyreibmj2nnsaozjwprfxbpk6h2fhemslhkza6y5mhr4trarbkscuxr5e",
        name="Mario Kart 8 Deluxe (Switch)",
        price="$39.99",
        url="https://amzn.to/abc123",
        platform="🔀",
        timestamp="2024-01-01T12:00:00.000Z",
    )


@pytest.fixture
def sample_deals():
    """A small feed of deals, newest first."""
    return [
        Deal("cid-3", "Elden Ring PS5", "$29.99", "https://a.co/1", "🎮", "2024-01-03T00:00:00Z"),
        Deal("cid-2", "Humble Bundle", "", "", "📦", "2024-01-02T00:00:00Z"),
        Deal("cid-1", "LEGO Star Wars set", "€50.00", "https://a.co/2", "🧱", "2024-01-01T00:00:00Z"),
    ]


@pytest.fixture
def sample_configuration():
    """Create a default Configuration for testing."""
    return Configuration()


@pytest.fixture
def mock_response():
    """Factory for mocked requests responses."""

    def _make(status_code: int = 200, json_data: Any = None, json_error: bool = False):
        response = Mock()
        response.status_code = status_code
        response.ok = 200 <= status_code < 300
        if json_error:
            response.json.side_effect = ValueError("No JSON object could be decoded")
        else:
            response.json.return_value = json_data
        return response

    return _make


@pytest.fixture(autouse=True)
def reset_error_tracker():
    """Start every test with an empty global error tracker."""
    get_error_tracker().clear()
    yield
    get_error_tracker().clear()
