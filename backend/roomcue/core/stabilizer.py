"""
Match Stabilizer

Turns a noisy per-frame stream of MatchResults into rare, confirmed
"you are in place X" events.

Phases:
    idle          no streak
    accumulating  same profile matched 0 < n < required times in a row
    cooldown      a detection fired; everything is ignored until it expires

A confirmation needs `required_consecutive` results for the same profile at
or above the confirmation threshold. Any result below the threshold, or for a
different profile, breaks the streak.
"""

from typing import Optional, Tuple, Literal
import logging
import threading

from roomcue.models.schemas import MatchResult, DetectionEvent
from roomcue.models.state import MatchStabilizerState, StabilizerConfig, create_initial_state
from roomcue.core.clock import now_ms


logger = logging.getLogger(__name__)

StabilizerPhase = Literal["idle", "accumulating", "cooldown"]


def advance_stabilizer(
    state: MatchStabilizerState,
    match: MatchResult,
    now: float,
    config: StabilizerConfig,
) -> Tuple[MatchStabilizerState, Optional[DetectionEvent]]:
    """Apply one MatchResult observed at `now` (epoch ms). The input state is not modified."""
    if now < state["cooldown_until"]:
        return state, None

    if match.is_empty or match.score < config.confirmation_threshold:
        return MatchStabilizerState(
            last_match=None,
            consecutive_count=0,
            cooldown_until=state["cooldown_until"],
        ), None

    last = state["last_match"]
    if last is not None and last.id == match.id:
        consecutive = state["consecutive_count"] + 1
    else:
        consecutive = 1

    if consecutive >= config.required_consecutive:
        event = DetectionEvent(id=match.id, name=match.name, score=match.score, detected_at=now)
        return MatchStabilizerState(
            last_match=match,
            consecutive_count=0,
            cooldown_until=now + config.cooldown_ms,
        ), event

    return MatchStabilizerState(
        last_match=match,
        consecutive_count=consecutive,
        cooldown_until=state["cooldown_until"],
    ), None


def stabilizer_phase(state: MatchStabilizerState, now: float) -> StabilizerPhase:
    """Which phase the state is in at `now`."""
    if now < state["cooldown_until"]:
        return "cooldown"
    if state["consecutive_count"] > 0:
        return "accumulating"
    return "idle"


class MatchStabilizer:
    """
    Stabilizer for one recognition session.

    Owns its state and its own lock; create one per session and drop it
    when the session ends.
    """

    def __init__(self, config: StabilizerConfig):
        self.config = config
        self._state = create_initial_state()
        self._lock = threading.Lock()

    @property
    def state(self) -> MatchStabilizerState:
        with self._lock:
            return MatchStabilizerState(**self._state)

    def phase(self, now: float = None) -> StabilizerPhase:
        with self._lock:
            return stabilizer_phase(self._state, now_ms() if now is None else now)

    def observe(self, match: MatchResult, now: float = None) -> Optional[DetectionEvent]:
        """Feed one match result; returns a DetectionEvent when a room is confirmed."""
        if now is None:
            now = now_ms()
        with self._lock:
            self._state, event = advance_stabilizer(self._state, match, now, self.config)

        if event is not None:
            logger.info(
                "Room confirmed: %s (%s) score=%.3f; cooling down for %.0f ms",
                event.name, event.id, event.score, self.config.cooldown_ms,
            )
        return event

    def reset(self) -> None:
        """Forget any streak and cooldown."""
        with self._lock:
            self._state = create_initial_state()
