"""
Text normalization for catalog comparisons.

All functions are pure and have no I/O dependencies.
"""

from __future__ import annotations

import re

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_ID_SEPARATORS = re.compile(r"[-_\s]+")


def normalize(text: str) -> str:
    """
    Reduce text to lower-case ASCII letters and digits.

    Everything else (spaces, punctuation, hyphens, accented letters) is
    deleted, not replaced, so spacing and punctuation never matter.

    Examples:
        "St. Peter's Basilica" → "stpetersbasilica"
        "Ignatius Loyola" → "ignatiusloyola"
        "ignatius-loyola" → "ignatiusloyola"

    Args:
        text: The text to normalize

    Returns:
        Normalized token (may be empty)
    """
    if not text:
        return ""
    return _NON_ALNUM.sub("", text.lower()).strip()


def text_words(text: str) -> list[str]:
    """
    Split text on whitespace and normalize each word on its own.

    Words that normalize to nothing ("&", "-") are dropped.

    Examples:
        "First Council of Nicaea" → ["first", "council", "of", "nicaea"]
    """
    if not text:
        return []
    words = (normalize(part) for part in text.split())
    return [word for word in words if word]


def id_words(identifier: str) -> list[str]:
    """
    Split an identifier on hyphens and underscores.

    Examples:
        "first-council-of-nicaea" → ["first", "council", "of", "nicaea"]
        "st_peter" → ["st", "peter"]
    """
    if not identifier:
        return []
    words = (normalize(part) for part in _ID_SEPARATORS.split(identifier))
    return [word for word in words if word]
