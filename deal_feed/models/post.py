"""
Upstream post data models for the Deal Feed system.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

LINK_FEATURE_TYPE = "app.bsky.richtext.facet#link"


@dataclass
class LinkFeature:
    """One feature of a facet, e.g. a link, mention or tag."""

    type: str
    uri: Optional[str] = None

    @property
    def is_link(self) -> bool:
        """Whether this feature marks a hyperlink."""
        return self.type == LINK_FEATURE_TYPE

    @classmethod
    def from_dict(cls, data: Any) -> Optional["LinkFeature"]:
        """Build a feature from raw JSON, or None if it is not an object."""
        if not isinstance(data, dict):
            return None

        feature_type = data.get("$type")
        uri = data.get("uri")

        return cls(
            type=feature_type if isinstance(feature_type, str) else "",
            uri=uri if isinstance(uri, str) else None,
        )


@dataclass
class LinkAnnotation:
    """Facet marking a span of post text with structured features."""

    features: List[LinkFeature] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Optional["LinkAnnotation"]:
        """Build an annotation from raw JSON, or None if it is not an object."""
        if not isinstance(data, dict):
            return None

        raw_features = data.get("features")
        if not isinstance(raw_features, list):
            return cls()

        features = []
        for raw_feature in raw_features:
            feature = LinkFeature.from_dict(raw_feature)
            if feature is not None:
                features.append(feature)

        return cls(features=features)


@dataclass
class RawPost:
    """Raw post data as returned by the author feed API."""

    cid: str
    text: str = ""
    facets: List[LinkAnnotation] = field(default_factory=list)
    created_at: Optional[str] = None

    @classmethod
    def from_feed_item(cls, item: Any) -> "RawPost":
        """
        Build a RawPost from one entry of the upstream ``feed`` list.

        Missing, null or wrongly typed fields become empty values so that
        every feed entry yields a post.

        Args:
            item: Feed wrapper of the form ``{"post": {"cid": ..., "record": {...}}}``

        Returns:
            RawPost instance
        """
        post: Dict[str, Any] = {}
        if isinstance(item, dict) and isinstance(item.get("post"), dict):
            post = item["post"]

        record = post.get("record")
        if not isinstance(record, dict):
            record = {}

        cid = post.get("cid")
        text = record.get("text")
        created_at = record.get("createdAt")

        facets = []
        raw_facets = record.get("facets")
        if isinstance(raw_facets, list):
            for raw_facet in raw_facets:
                facet = LinkAnnotation.from_dict(raw_facet)
                if facet is not None:
                    facets.append(facet)

        return cls(
            cid="" if cid is None else str(cid),
            text=text if isinstance(text, str) else "",
            facets=facets,
            created_at=created_at if isinstance(created_at, str) else None,
        )
