"""
Seen-deal tracking for the polling client.

Remembers which deal ids have already been shown so the client can dim
them. Presentation only: the served feed is never filtered by it.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set

logger = logging.getLogger(__name__)


class MemorySeenStore:
    """Seen store kept only for the lifetime of the process."""

    def __init__(self, seen_ids: Optional[Iterable[str]] = None):
        self.seen_deal_ids: Set[str] = set(seen_ids or [])

    def has_seen(self, deal_id: str) -> bool:
        return deal_id in self.seen_deal_ids

    def mark_seen(self, deal_id: str) -> None:
        self.seen_deal_ids.add(deal_id)


class JsonFileSeenStore:
    """Seen store persisted to a JSON file."""

    def __init__(self, state_file: str = "state/seen_deals.json", max_entries: int = 5000):
        """
        Initialize seen store with persistent state.

        Args:
            state_file: Path to file for storing seen deal ids
            max_entries: Maximum number of ids kept, oldest dropped first
        """
        self.state_file = Path(state_file)
        self.max_entries = max_entries
        self._order: List[str] = []
        self.seen_deal_ids: Set[str] = set()

        self._load_state()

        logger.info(f"Seen store initialized with {len(self.seen_deal_ids)} known deals")

    def has_seen(self, deal_id: str) -> bool:
        return deal_id in self.seen_deal_ids

    def mark_seen(self, deal_id: str) -> None:
        """Mark a deal id as seen and persist the change."""
        if deal_id in self.seen_deal_ids:
            return

        self.seen_deal_ids.add(deal_id)
        self._order.append(deal_id)

        while len(self._order) > self.max_entries:
            dropped = self._order.pop(0)
            self.seen_deal_ids.discard(dropped)

        self._save_state()

    def _load_state(self) -> None:
        """Load seen deal ids from persistent storage."""
        try:
            if self.state_file.exists():
                with open(self.state_file, "r", encoding="utf-8") as f:
                    data = json.load(f)

                ids = data.get("seen_deals", []) if isinstance(data, dict) else data
                if not isinstance(ids, list):
                    raise ValueError("seen_deals must be a list")

                for deal_id in ids:
                    if isinstance(deal_id, str) and deal_id not in self.seen_deal_ids:
                        self.seen_deal_ids.add(deal_id)
                        self._order.append(deal_id)

                logger.debug(
                    f"Loaded {len(self.seen_deal_ids)} seen deals from {self.state_file}"
                )
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load state from {self.state_file}: {e}")
            self._order = []
            self.seen_deal_ids = set()

    def _save_state(self) -> None:
        """Save seen deal ids to persistent storage."""
        try:
            self.state_file.parent.mkdir(parents=True, exist_ok=True)

            with open(self.state_file, "w", encoding="utf-8") as f:
                json.dump({"seen_deals": self._order}, f, indent=2)

        except OSError as e:
            logger.error(f"Could not save state to {self.state_file}: {e}")
