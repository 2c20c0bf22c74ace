"""
Tests for Scan and Recognition Sessions

Run with: pytest backend/tests/test_sessions.py -v
"""

import pytest

from roomcue.models.schemas import RoomObservation
from roomcue.models.state import StabilizerConfig
from roomcue.core.aggregation import build_room_profile
from roomcue.core.exceptions import EmptyScanError, SessionClosedError
from roomcue.core import sessions
from roomcue.core.sessions import RoomScanSession, RoomRecognitionSession


CONFIG = StabilizerConfig(confirmation_threshold=0.6, required_consecutive=3, cooldown_ms=30_000)


# ============ Scan Session ============

def test_scan_session_builds_profile(kitchen):
    scan = RoomScanSession(max_observations=5)
    for _ in range(3):
        assert scan.add(kitchen) is True

    profile = scan.finish("Kitchen", note="ground floor")

    assert profile.name == "Kitchen"
    assert profile.note == "ground floor"
    assert profile.observation_count == 3
    assert profile.profile.room_type == "kitchen"


def test_scan_session_is_capped(kitchen):
    scan = RoomScanSession(max_observations=2)
    assert scan.add(kitchen)
    assert scan.add(kitchen)
    assert scan.is_full
    assert scan.add(kitchen) is False
    assert len(scan.observations) == 2


def test_scan_session_default_cap():
    assert RoomScanSession().max_observations == 25


def test_empty_scan_cannot_finish():
    with pytest.raises(EmptyScanError):
        RoomScanSession().finish("Empty")


def test_scan_session_finishes_once(kitchen):
    """A finished scan cannot produce a second profile from the same buffer."""
    scan = RoomScanSession(max_observations=5)
    scan.add(kitchen)
    scan.finish("Kitchen")

    assert scan.finished
    assert scan.observations == []
    with pytest.raises(SessionClosedError):
        scan.finish("Kitchen again")
    with pytest.raises(SessionClosedError):
        scan.add(kitchen)


def test_failed_finish_keeps_scan_open(kitchen):
    scan = RoomScanSession()
    with pytest.raises(EmptyScanError):
        scan.finish("Empty")
    assert not scan.finished

    scan.add(kitchen)
    assert scan.finish("Kitchen").observation_count == 1


# ============ Recognition Session ============

def test_recognition_session_confirms_room(kitchen, bedroom):
    profiles = [build_room_profile("Bedroom", [bedroom]), build_room_profile("Kitchen", [kitchen])]
    received = []
    session = RoomRecognitionSession(profiles, config=CONFIG, on_detection=received.append)

    events = [session.process_observation(kitchen, now=t) for t in (0, 1000, 2000, 3000)]

    assert events[:2] == [None, None]
    assert events[2].name == "Kitchen"
    assert events[3] is None
    assert received == [events[2]]
    assert session.last_match.name == "Kitchen"
    print(f"✓ Detected {events[2].name} at {events[2].score:.2f}")


def test_recognition_session_without_profiles(kitchen):
    session = RoomRecognitionSession([], config=CONFIG)
    for t in range(5):
        assert session.process_observation(kitchen, now=t * 1000) is None
    assert session.last_match.is_empty


def test_update_candidates(kitchen):
    session = RoomRecognitionSession([], config=CONFIG)
    session.process_observation(kitchen, now=0)

    session.update_candidates([build_room_profile("Kitchen", [kitchen])])
    events = [session.process_observation(kitchen, now=t) for t in (1000, 2000, 3000)]
    assert events[2] is not None


def test_unrelated_room_never_confirms(kitchen, bedroom):
    session = RoomRecognitionSession([build_room_profile("Bedroom", [bedroom])], config=CONFIG)
    events = [session.process_observation(kitchen, now=t * 1000) for t in range(6)]
    assert events == [None] * 6


def test_closed_session_rejects_observations(kitchen):
    with RoomRecognitionSession([], config=CONFIG) as session:
        assert not session.closed
    assert session.closed

    with pytest.raises(SessionClosedError):
        session.process_observation(kitchen, now=0)


def test_session_uses_settings_by_default():
    session = RoomRecognitionSession()
    assert session.config.confirmation_threshold == 0.5
    assert session.config.required_consecutive == 3
    assert session.config.cooldown_ms == 30_000


def test_close_while_matching_raises_session_closed(monkeypatch, kitchen):
    """Closing from another thread mid-match surfaces as SessionClosedError."""
    session = RoomRecognitionSession([build_room_profile("Kitchen", [kitchen])], config=CONFIG)
    real_pick = sessions.pick_best_match

    def pick_then_close(observation, candidates):
        match = real_pick(observation, candidates)
        session.close()
        return match

    monkeypatch.setattr(sessions, "pick_best_match", pick_then_close)

    with pytest.raises(SessionClosedError):
        session.process_observation(kitchen, now=0)
    assert session.last_match is None
