"""
Core components for the Deal Feed system.

This module contains the components that fetch the author feed, extract
links and prices from posts, classify platforms and build the sorted
deal list, plus the client-side seen and filter stores.
"""

from .feed_client import AuthorFeedClient, FetchError
from .feed_pipeline import FeedPipeline, sort_deals
from .filter_preferences import FilterPreferences, apply_platform_filters
from .platform_classifier import PLATFORM_TABLE, PlatformClassifier
from .post_parser import LinkExtractor, NameDeriver, PostNormalizer, PriceExtractor
from .seen_store import JsonFileSeenStore, MemorySeenStore
from .text_matching import match_first

__all__ = [
    "AuthorFeedClient",
    "FetchError",
    "FeedPipeline",
    "sort_deals",
    "FilterPreferences",
    "apply_platform_filters",
    "PLATFORM_TABLE",
    "PlatformClassifier",
    "LinkExtractor",
    "NameDeriver",
    "PostNormalizer",
    "PriceExtractor",
    "JsonFileSeenStore",
    "MemorySeenStore",
    "match_first",
]
