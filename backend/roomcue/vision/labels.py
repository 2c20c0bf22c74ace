# roomcue/vision/labels.py
"""
Label normalization.

The vision provider describes the same room slightly differently from frame
to frame: "Chairs" in one frame, "chair " in the next. Everything that is
compared or merged goes through these helpers first so downstream stays stable.
"""

from typing import Iterable, List


def normalize_text(value: str) -> str:
    """Trim and lowercase. Used for attributes, markers, surfaces and transcripts."""
    return (value or "").strip().lower()


def normalize_name(name: str) -> str:
    """
    Canonical key for furniture names, lighting types and decor names.

    Lowercases, collapses whitespace and drops one trailing "s" so that
    "Chairs" and "chair" compare equal.
    """
    key = " ".join((name or "").lower().split())
    if key.endswith("s"):
        key = key[:-1]
    return key


def normalized_set(values: Iterable[str]) -> set:
    """Set of non-empty normalized strings."""
    return {v for v in (normalize_text(x) for x in values) if v}


def unique_normalized(values: Iterable[str]) -> List[str]:
    """Normalized, de-duplicated strings in first-seen order."""
    seen = {}
    for value in values:
        key = normalize_text(value)
        if key and key not in seen:
            seen[key] = None
    return list(seen)
