"""
Recognition and Scan Sessions

Session controllers that tie the engine together:

    RoomScanSession         observations -> aggregator -> RoomProfile
    RoomRecognitionSession  observation -> matcher -> stabilizer -> DetectionEvent

Each session owns its own state; close it when the camera session ends.
"""

from typing import Callable, List, Optional, Sequence
import logging
import threading

from roomcue.config import get_settings
from roomcue.models.schemas import RoomObservation, RoomProfile, MatchResult, DetectionEvent
from roomcue.models.state import StabilizerConfig
from roomcue.core.aggregation import build_room_profile
from roomcue.core.exceptions import SessionClosedError
from roomcue.core.matching import Candidate, pick_best_match
from roomcue.core.stabilizer import MatchStabilizer


logger = logging.getLogger(__name__)

DetectionCallback = Callable[[DetectionEvent], None]


class RoomScanSession:
    """
    Collects observations while the user pans the camera around a room.

    Observations beyond `max_observations` are dropped. A scan finishes once;
    afterwards it accepts no more observations.
    """

    def __init__(self, max_observations: int = None):
        if max_observations is None:
            max_observations = get_settings().scan_max_observations
        self.max_observations = max_observations
        self._observations: List[RoomObservation] = []
        self._finished = False
        self._lock = threading.Lock()

    @property
    def observations(self) -> List[RoomObservation]:
        with self._lock:
            return list(self._observations)

    @property
    def is_full(self) -> bool:
        with self._lock:
            return len(self._observations) >= self.max_observations

    @property
    def finished(self) -> bool:
        return self._finished

    def add(self, observation: RoomObservation) -> bool:
        """Buffer an observation. Returns False if the scan is already full."""
        with self._lock:
            if self._finished:
                raise SessionClosedError("Scan session already finished")
            if len(self._observations) >= self.max_observations:
                return False
            self._observations.append(observation)
            return True

    def finish(self, name: str, note: str = None) -> RoomProfile:
        """
        Aggregate the buffered observations into a new RoomProfile.

        Raises:
            EmptyScanError: if nothing was captured
            SessionClosedError: if the scan was already finished
        """
        with self._lock:
            if self._finished:
                raise SessionClosedError("Scan session already finished")
            profile = build_room_profile(name, self._observations, note=note)
            self._finished = True
            self._observations = []
        return profile


class RoomRecognitionSession:
    """
    Live room recognition for one camera session.

    Every incoming observation is matched against the known profiles and fed
    to this session's stabilizer; confirmed detections are returned and passed
    to `on_detection` if given.
    """

    def __init__(
        self,
        candidates: Sequence[Candidate] = (),
        config: StabilizerConfig = None,
        on_detection: Optional[DetectionCallback] = None,
    ):
        self.config = config or get_settings().stabilizer_config()
        self.on_detection = on_detection
        self._candidates = list(candidates)
        self._stabilizer: Optional[MatchStabilizer] = MatchStabilizer(self.config)
        self._last_match: Optional[MatchResult] = None

    @property
    def closed(self) -> bool:
        return self._stabilizer is None

    @property
    def last_match(self) -> Optional[MatchResult]:
        return self._last_match

    def update_candidates(self, candidates: Sequence[Candidate]) -> None:
        """Replace the profiles matched against (e.g. after a new scan is saved)."""
        self._candidates = list(candidates)

    def process_observation(self, observation: RoomObservation, now: float = None) -> Optional[DetectionEvent]:
        """Match one live observation and advance the stabilizer."""
        stabilizer = self._stabilizer
        if stabilizer is None:
            raise SessionClosedError("Recognition session is closed")

        match = pick_best_match(observation, self._candidates)
        # close() may run on another thread while scoring
        if self._stabilizer is not stabilizer:
            raise SessionClosedError("Recognition session was closed during matching")
        self._last_match = match
        event = stabilizer.observe(match, now=now)

        if event is not None and self.on_detection is not None:
            self.on_detection(event)
        return event

    def close(self) -> None:
        """Drop the stabilizer state. The session cannot be used afterwards."""
        self._stabilizer = None
        self._last_match = None
        self._candidates = []
        logger.debug("Recognition session closed")

    def __enter__(self) -> "RoomRecognitionSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
