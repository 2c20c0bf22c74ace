"""
Transcript Triggers

Rate limiting for suggestions derived from speech:

- TriggerDeduplicator: the same namespaced trigger ("name:john", "rel:mom")
  may create at most one suggestion per cooldown window.
- TranscriptRepeatDetector: reports whether the same transcript text was heard
  within a short window, which the confidence heuristic treats as confirmation.
"""

import logging
import re

from roomcue.config import get_settings
from roomcue.core.exceptions import InvalidTriggerKeyError
from roomcue.core.sliding_window import SlidingWindowStore
from roomcue.vision.labels import normalize_text


logger = logging.getLogger(__name__)

TRIGGER_NAMESPACES = ("name", "rel")

GREETING_PATTERN = re.compile(r"^(hi|hey|hello)\s+", re.IGNORECASE)
NAME_INTRODUCTION_PATTERN = re.compile(r"(this\s+is|my\s+name\s+is)\s+[a-z]", re.IGNORECASE)

# Confidence heuristic
BASE_CONFIDENCE = 0.75
LONG_TRANSCRIPT_WORDS = 10
LONG_TRANSCRIPT_BONUS = 0.08
MEDIUM_TRANSCRIPT_WORDS = 5
MEDIUM_TRANSCRIPT_BONUS = 0.04
GREETING_BONUS = 0.05
NAME_INTRODUCTION_BONUS = 0.06
REPEAT_BONUS = 0.03
SHORT_TRANSCRIPT_WORDS = 3
SHORT_TRANSCRIPT_PENALTY = 0.05
MIN_CONFIDENCE = 0.70
MAX_CONFIDENCE = 0.95


def make_trigger_key(namespace: str, value: str) -> str:
    """
    Build a trigger key like "name:john" or "rel:mom".

    Keys are lowercased, and the namespace keeps a person called "Mom" apart
    from the relationship "mom".
    """
    if namespace not in TRIGGER_NAMESPACES:
        raise InvalidTriggerKeyError(f"Unknown trigger namespace {namespace!r}; expected one of {TRIGGER_NAMESPACES}")
    normalized = normalize_text(value)
    if not normalized:
        raise InvalidTriggerKeyError(f"Empty {namespace} trigger value")
    return f"{namespace}:{normalized}"


class TriggerDeduplicator:
    """Allows each trigger key once per cooldown window."""

    def __init__(self, store: SlidingWindowStore = None):
        if store is None:
            store = SlidingWindowStore(get_settings().trigger_cooldown_ms)
        self.store = store

    def should_process(self, key: str, now: float = None) -> bool:
        """
        True if `key` has not been allowed within the window (and records it);
        False if it is still cooling down.
        """
        key = normalize_text(key)
        if self.store.check_and_record(key, now=now):
            logger.debug("Suppressed trigger %r (cooldown %.0f ms)", key, self.store.window_ms)
            return False
        return True


class TranscriptRepeatDetector:
    """Case- and whitespace-insensitive "heard this recently" check."""

    def __init__(self, store: SlidingWindowStore = None):
        if store is None:
            store = SlidingWindowStore(get_settings().transcript_repeat_window_ms)
        self.store = store

    def was_repeated_recently(self, transcript: str, now: float = None) -> bool:
        """Whether the same text was seen within the window. Always records it."""
        return self.store.check_and_record(normalize_text(transcript), now=now, record_if_found=True)


# ============ Confidence ============

def has_greeting_pattern(transcript: str) -> bool:
    """Starts with "hi", "hey" or "hello" followed by more words."""
    return bool(GREETING_PATTERN.match(transcript.strip()))


def has_name_introduction_pattern(transcript: str) -> bool:
    """Contains "this is X" or "my name is X"."""
    return bool(NAME_INTRODUCTION_PATTERN.search(transcript))


def estimate_confidence(transcript: str, repeated: bool = False) -> float:
    """
    Heuristic confidence for a suggestion derived from `transcript`.

    Longer transcripts, greetings, name introductions and recent repeats
    raise it; very short fragments lower it. Result is in [0.70, 0.95].
    """
    confidence = BASE_CONFIDENCE
    word_count = len(transcript.split())

    if word_count >= LONG_TRANSCRIPT_WORDS:
        confidence += LONG_TRANSCRIPT_BONUS
    elif word_count >= MEDIUM_TRANSCRIPT_WORDS:
        confidence += MEDIUM_TRANSCRIPT_BONUS

    if has_greeting_pattern(transcript):
        confidence += GREETING_BONUS
    if has_name_introduction_pattern(transcript):
        confidence += NAME_INTRODUCTION_BONUS
    if repeated:
        confidence += REPEAT_BONUS

    if word_count < SHORT_TRANSCRIPT_WORDS:
        confidence -= SHORT_TRANSCRIPT_PENALTY

    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, confidence))
