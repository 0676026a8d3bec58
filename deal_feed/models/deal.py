"""
Deal data models for the Deal Feed system.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class Deal:
    """Structured deal record built from one post."""

    id: str
    name: str
    price: str
    url: str
    platform: str
    timestamp: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the deal to its JSON wire shape.

        A missing timestamp is left out entirely rather than sent as null.
        """
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "url": self.url,
            "platform": self.platform,
        }
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Deal":
        """Rebuild a deal from its JSON wire shape."""
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            price=str(data.get("price", "")),
            url=str(data.get("url", "")),
            platform=str(data.get("platform", "")),
            timestamp=data.get("timestamp"),
        )
