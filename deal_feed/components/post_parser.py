"""
Post parsing and extraction components for the Deal Feed system.

This module turns a raw Bluesky post into a Deal: it picks the most
relevant link, extracts a price, derives a clean deal name and tags the
deal with its platform.
"""

import logging
from typing import Iterable, Optional

from ..interfaces import ILinkExtractor, IPlatformClassifier
from ..models.deal import Deal
from ..models.post import LinkAnnotation, RawPost
from .platform_classifier import PlatformClassifier
from .text_matching import PRICE_PATTERN, URL_PATTERN, collapse_whitespace, match_first

logger = logging.getLogger(__name__)


class LinkExtractor:
    """Finds the most relevant link for a post."""

    def __init__(self):
        """Initialize link extractor."""
        self.url_regex = URL_PATTERN

    def extract_link(
        self, text: Optional[str], annotations: Optional[Iterable[LinkAnnotation]] = None
    ) -> str:
        """
        Extract the deal link from a post.

        Link facets are authoritative: the first link feature with a
        non-blank URI wins. Without one, the text is scanned for the first
        URL-like token.

        Args:
            text: Post text
            annotations: Facets attached to the post, in order

        Returns:
            The link, or an empty string if none was found
        """
        link = self._link_from_annotations(annotations)
        if link:
            return link

        return match_first(self.url_regex, text) or ""

    def _link_from_annotations(
        self, annotations: Optional[Iterable[LinkAnnotation]]
    ) -> Optional[str]:
        """Return the first non-blank link facet URI, trimmed."""
        if not annotations:
            return None

        for annotation in annotations:
            for feature in annotation.features:
                if not feature.is_link or not isinstance(feature.uri, str):
                    continue

                uri = feature.uri.strip()
                if uri:
                    return uri

        return None


class PriceExtractor:
    """Extracts the first currency-prefixed price from deal text."""

    def __init__(self):
        """Initialize price extractor."""
        self.price_regex = PRICE_PATTERN

    def extract_price(self, text: Optional[str]) -> str:
        """
        Extract the first price in text, symbol included.

        Args:
            text: Text to extract the price from

        Returns:
            Price such as "$19.99" or "€50", or an empty string
        """
        return match_first(self.price_regex, text) or ""


class NameDeriver:
    """Derives a human-readable deal name from post text."""

    def derive_name(self, text: Optional[str], url: Optional[str]) -> str:
        """
        Remove the link from text and normalize whitespace.

        Only the first literal occurrence of the link is removed; it is
        replaced with a space so the words around it stay apart.

        Args:
            text: Post text
            url: Extracted link, possibly empty

        Returns:
            Deal name, possibly empty
        """
        if not text:
            return ""

        name = text
        if url and url in name:
            name = name.replace(url, " ", 1)

        return collapse_whitespace(name)


class PostNormalizer:
    """Main post parser that converts raw posts to Deal objects."""

    def __init__(
        self,
        classifier: Optional[IPlatformClassifier] = None,
        link_extractor: Optional[ILinkExtractor] = None,
    ):
        """
        Initialize post normalizer.

        Args:
            classifier: Platform classifier to use; defaults to the built-in table
            link_extractor: Link extractor to use
        """
        self.link_extractor = link_extractor or LinkExtractor()
        self.price_extractor = PriceExtractor()
        self.name_deriver = NameDeriver()
        self.classifier = classifier or PlatformClassifier()

    def normalize(self, post: RawPost) -> Deal:
        """
        Parse a raw post into a Deal.

        Never raises for missing fields: an empty post gives a Deal with
        only its id set.

        Args:
            post: RawPost from the author feed

        Returns:
            Deal object
        """
        text = post.text or ""

        url = self.link_extractor.extract_link(text, post.facets)
        price = self.price_extractor.extract_price(text)
        name = self.name_deriver.derive_name(text, url)

        # Classification runs on the cleaned name, not the raw text
        platform = self.classifier.classify(name)

        deal = Deal(
            id=post.cid,
            name=name,
            price=price,
            url=url,
            platform=platform,
            timestamp=post.created_at,
        )

        logger.debug(f"Normalized post {post.cid}: {deal.name!r}")
        return deal
