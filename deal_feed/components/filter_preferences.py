"""
Persisted platform filter preferences for the polling client.

The active filter is a set of platform tags saved with a seven-day
expiry. Anything unreadable, malformed or expired means "no filter", so
a bad preferences file can only ever show more deals, never fewer.
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Set

from dateutil import parser as date_parser

from ..models.deal import Deal

logger = logging.getLogger(__name__)

PREFERENCES_TTL = timedelta(days=7)


def parse_platform_filters(raw: Optional[str]) -> Set[str]:
    """
    Parse a stored JSON array of platform tags.

    Args:
        raw: JSON text, e.g. '["🎮", "♨"]'

    Returns:
        Set of tags; empty when raw is missing or malformed
    """
    if not raw:
        return set()

    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.warning(f"Ignoring malformed platform filter preference: {e}")
        return set()

    if not isinstance(data, list):
        logger.warning("Ignoring platform filter preference that is not a list")
        return set()

    return {tag for tag in data if isinstance(tag, str) and tag}


def apply_platform_filters(deals: Iterable[Deal], platforms: Set[str]) -> List[Deal]:
    """
    Keep only deals tagged with one of the active platforms.

    An empty filter set keeps every deal.
    """
    if not platforms:
        return list(deals)
    return [deal for deal in deals if deal.platform in platforms]


class FilterPreferences:
    """Platform filter preferences stored in a JSON file."""

    def __init__(self, preferences_file: str = "state/filter_preferences.json"):
        """
        Args:
            preferences_file: Path of the preferences file
        """
        self.preferences_file = Path(preferences_file)

    def load(self) -> Set[str]:
        """
        Load the active platform filters.

        Returns:
            Set of platform tags; empty when none are active
        """
        if not self.preferences_file.exists():
            return set()

        try:
            with open(self.preferences_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(
                f"Could not read filter preferences from {self.preferences_file}: {e}"
            )
            return set()

        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed filter preferences in {self.preferences_file}")
            return set()

        if self._is_expired(data.get("expires")):
            logger.info("Filter preferences expired, showing all platforms")
            return set()

        return parse_platform_filters(json.dumps(data.get("platforms")))

    def save(self, platforms: Iterable[str], now: Optional[datetime] = None) -> None:
        """
        Persist the active platform filters with a fresh expiry.

        Args:
            platforms: Platform tags to keep active
            now: Current time, for tests
        """
        now = now or datetime.now(timezone.utc)
        data = {
            "platforms": sorted(set(platforms)),
            "expires": (now + PREFERENCES_TTL).isoformat(),
        }

        self.preferences_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.preferences_file, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

        logger.debug(f"Saved {len(data['platforms'])} platform filters")

    def clear(self) -> None:
        """Remove the stored preferences."""
        if self.preferences_file.exists():
            self.preferences_file.unlink()

    def _is_expired(self, expires: object) -> bool:
        """Missing or unparseable expiry counts as expired."""
        if not isinstance(expires, str):
            return True

        try:
            expiry = date_parser.isoparse(expires)
        except ValueError:
            return True

        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=timezone.utc)

        return expiry <= datetime.now(timezone.utc)
