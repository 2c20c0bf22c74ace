"""
Tests for Transcript Triggers and the Sliding Window Store

Run with: pytest backend/tests/test_triggers.py -v
"""

import pytest

from roomcue.core.sliding_window import SlidingWindowStore, WindowEntry
from roomcue.core.triggers import (
    make_trigger_key,
    TriggerDeduplicator,
    TranscriptRepeatDetector,
    has_greeting_pattern,
    has_name_introduction_pattern,
    estimate_confidence,
)
from roomcue.core.exceptions import InvalidTriggerKeyError


TRIGGER_WINDOW = 45_000
REPEAT_WINDOW = 20_000


@pytest.fixture
def dedup() -> TriggerDeduplicator:
    return TriggerDeduplicator(SlidingWindowStore(TRIGGER_WINDOW))


@pytest.fixture
def detector() -> TranscriptRepeatDetector:
    return TranscriptRepeatDetector(SlidingWindowStore(REPEAT_WINDOW))


# ============ Sliding Window Store ============

def test_store_prunes_expired_entries():
    store = SlidingWindowStore(1000)
    assert store.check_and_record("a", now=0) is False
    assert store.check_and_record("b", now=500) is False

    assert store.entries(now=999) == [WindowEntry("a", 0), WindowEntry("b", 500)]
    assert store.entries(now=1000) == [WindowEntry("b", 500)]
    assert len(store) == 1


def test_store_contains_does_not_record():
    store = SlidingWindowStore(1000)
    assert store.contains("a", now=0) is False
    assert len(store) == 0


def test_store_record_if_found():
    store = SlidingWindowStore(1000)
    store.check_and_record("a", now=0)
    assert store.check_and_record("a", now=10) is True
    assert len(store) == 1
    assert store.check_and_record("a", now=20, record_if_found=True) is True
    assert len(store) == 2


def test_store_clear():
    store = SlidingWindowStore(1000)
    store.check_and_record("a", now=0)
    store.clear()
    assert store.contains("a", now=1) is False


# ============ Trigger Keys ============

def test_make_trigger_key():
    assert make_trigger_key("name", " John ") == "name:john"
    assert make_trigger_key("rel", "Mom") == "rel:mom"


def test_make_trigger_key_rejects_bad_input():
    with pytest.raises(InvalidTriggerKeyError):
        make_trigger_key("place", "kitchen")
    with pytest.raises(ValueError):
        make_trigger_key("name", "   ")


# ============ Trigger Deduplicator ============

def test_trigger_allowed_once_per_window(dedup):
    assert dedup.should_process("name:john", now=0) is True
    assert dedup.should_process("name:john", now=1) is False
    assert dedup.should_process("name:john", now=TRIGGER_WINDOW - 1) is False
    assert dedup.should_process("name:john", now=TRIGGER_WINDOW) is True
    print("✓ Trigger cooldown respected")


def test_suppressed_trigger_does_not_extend_cooldown(dedup):
    assert dedup.should_process("rel:mom", now=0) is True
    assert dedup.should_process("rel:mom", now=30_000) is False
    assert dedup.should_process("rel:mom", now=45_000) is True


def test_namespaces_do_not_collide(dedup):
    assert dedup.should_process(make_trigger_key("name", "Mom"), now=0) is True
    assert dedup.should_process(make_trigger_key("rel", "mom"), now=0) is True


def test_trigger_keys_are_case_insensitive(dedup):
    assert dedup.should_process("name:John", now=0) is True
    assert dedup.should_process("name:john", now=1) is False


def test_deduplicators_are_isolated():
    first = TriggerDeduplicator(SlidingWindowStore(TRIGGER_WINDOW))
    second = TriggerDeduplicator(SlidingWindowStore(TRIGGER_WINDOW))
    assert first.should_process("name:ann", now=0) is True
    assert second.should_process("name:ann", now=0) is True


def test_default_windows_come_from_settings():
    assert TriggerDeduplicator().store.window_ms == 45_000
    assert TranscriptRepeatDetector().store.window_ms == 20_000


# ============ Repeat Detector ============

def test_repeat_is_case_and_whitespace_insensitive(detector):
    assert detector.was_repeated_recently("Hello there", now=0) is False
    assert detector.was_repeated_recently("hello there  ", now=1) is True


def test_repeat_detector_always_records(detector):
    """Every call refreshes the window, even when it reports a repeat."""
    assert detector.was_repeated_recently("hi mom", now=0) is False
    assert detector.was_repeated_recently("hi mom", now=15_000) is True
    assert detector.was_repeated_recently("hi mom", now=30_000) is True
    assert detector.was_repeated_recently("hi mom", now=60_000) is False


# ============ Confidence ============

def test_pattern_detection():
    assert has_greeting_pattern("Hi Mom, how are you")
    assert not has_greeting_pattern("hi")
    assert not has_greeting_pattern("say hi to her")
    assert has_name_introduction_pattern("Dad, this is Sarah")
    assert has_name_introduction_pattern("my name is john")
    assert not has_name_introduction_pattern("what is this")


def test_estimate_confidence():
    assert estimate_confidence("hi") == pytest.approx(0.70)
    assert estimate_confidence("This is John") == pytest.approx(0.81)
    assert estimate_confidence("Hi Mom how are you today") == pytest.approx(0.84)
    assert estimate_confidence("Hi Mom how are you today", repeated=True) == pytest.approx(0.87)


def test_estimate_confidence_is_clamped():
    long_intro = "Hello everyone this is Sarah and my name is Sarah Jones from next door"
    assert estimate_confidence(long_intro, repeated=True) == pytest.approx(0.95)
