"""
Pattern matching helpers shared by the post parsing components.

Every extractor in the system follows the same contract: the first match
in the text wins, and no match is reported as None rather than an empty
string so callers can tell "absent" from "matched nothing".
"""

import re
from typing import Optional, Pattern, Union

# Explicit scheme or www. prefix, dotted host, TLD of two or more letters,
# optional path. The second branch accepts bare sub.domain.tld tokens.
# Only the prefix is case-insensitive. Host and TLD letters are ASCII, so a
# Kelvin sign, long s or dotless i never stands in for a Latin letter.
URL_PATTERN = re.compile(
    r"(?:[hH][tT][tT][pP][sS]?://|[wW]{3}\.)[A-Za-z0-9_\-.]+\.[a-zA-Z]{2,}(?:/\S*)?"
    r"|(?:[A-Za-z0-9_-]+\.)+[a-zA-Z]{2,}(?:/\S*)?"
)

# Currency symbol immediately followed by ASCII digits and an optional fraction
PRICE_PATTERN = re.compile(r"[$€][0-9]+(?:\.[0-9]+)?")

WHITESPACE_PATTERN = re.compile(r"\s+")


def match_first(pattern: Union[str, Pattern[str]], text: Optional[str]) -> Optional[str]:
    """
    Return the first substring of text matched by pattern.

    Args:
        pattern: Compiled pattern or pattern string (compiled case-sensitive)
        text: Text to search, may be empty or None

    Returns:
        The matched substring verbatim, or None if nothing matched
    """
    if not text:
        return None

    regex = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)
    match = regex.search(text)
    if match and match.group(0):
        return match.group(0)

    return None


def collapse_whitespace(text: Optional[str]) -> str:
    """Collapse whitespace runs to single spaces and trim the ends."""
    if not text:
        return ""
    return WHITESPACE_PATTERN.sub(" ", text).strip()
