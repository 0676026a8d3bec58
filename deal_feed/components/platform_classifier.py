"""
Platform classification for deal names.

Deals are tagged with a short glyph naming the product platform or
category, decided by keyword containment against an ordered table.
"""

import logging
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

PlatformEntry = Tuple[str, Tuple[str, ...]]

# Order is priority: the first entry with any matching keyword wins, so
# specific platforms sit above the generic categories they overlap with
# ("Switch LEGO" is a Nintendo deal, "LEGO PS5 Controller" a PlayStation one,
# "Macbook" a computer rather than a book).
PLATFORM_TABLE: List[PlatformEntry] = [
    ("🕴", ("amiibo",)),
    ("🔀", ("nintendo", "switch", "eshop", "game-key")),
    ("🟢", ("xbox", "xbo")),
    ("♨", ("steam",)),
    ("👴", ("gog", "good old games")),
    ("🎮", ("ps4", "ps5", "playstation", "psn", "ps+")),
    (
        "📀",
        (
            "dvd",
            "blu-ray",
            "bluray",
            "4k",
            "uhd",
            "film",
            "movie",
            "youtube",
            "animation",
        ),
    ),
    ("👕", ("shirt", "merch")),
    (
        "💻",
        (
            "pc",
            "computer",
            "controller",
            "windows",
            "cable",
            "laptop",
            "macbook",
            "monitor",
        ),
    ),
    ("📚", ("book", "kindle", "hardcover", "novel")),
    ("📦", ("humble", "bundle")),
    ("🕴", ("figure", "plush", "costume", "ornament")),
    ("🧱", ("lego", "nanoblock")),
]


class PlatformClassifier:
    """Assigns a platform tag to deal text using an ordered keyword table."""

    def __init__(self, table: Optional[Sequence[PlatformEntry]] = None):
        """
        Initialize platform classifier.

        Args:
            table: Ordered (tag, keywords) pairs; defaults to PLATFORM_TABLE
        """
        source = PLATFORM_TABLE if table is None else table
        self.table: List[PlatformEntry] = [
            (tag, tuple(keyword.lower() for keyword in keywords))
            for tag, keywords in source
        ]

    def classify(self, text: Optional[str]) -> str:
        """
        Return the tag of the first table entry with a keyword in text.

        Matching is case-insensitive substring containment, without word
        boundaries.

        Args:
            text: Deal name to classify

        Returns:
            Platform tag, or an empty string if nothing matched
        """
        if not text:
            return ""

        lowered = text.lower()
        for tag, keywords in self.table:
            for keyword in keywords:
                if keyword in lowered:
                    logger.debug(f"Matched keyword '{keyword}' -> {tag}")
                    return tag

        return ""

    @property
    def tags(self) -> List[str]:
        """Distinct tags in table order."""
        seen = []
        for tag, _ in self.table:
            if tag not in seen:
                seen.append(tag)
        return seen
