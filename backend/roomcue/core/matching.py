"""
Profile Matching

Picks the stored room profile that best explains a live observation.
"""

from typing import Iterable, Optional, Union
import logging

from langsmith import traceable

from roomcue.models.schemas import RoomObservation, RoomProfile, ProfileCandidate, MatchResult
from roomcue.core.scoring import score_room


logger = logging.getLogger(__name__)

Candidate = Union[ProfileCandidate, RoomProfile]


@traceable(name="pick_best_match", run_type="chain", tags=["matching"])
def pick_best_match(live: RoomObservation, candidates: Iterable[Candidate]) -> MatchResult:
    """
    Score every candidate and keep the highest.

    Candidates are visited in order and only a strictly higher score replaces
    the current best, so the first of several equal scores wins. A candidate
    must score above 0 to be picked at all.

    Returns:
        The best MatchResult, or MatchResult.empty() when there are no
        candidates (or none scores above 0)
    """
    best = MatchResult.empty()
    for candidate in candidates:
        score = score_room(live, candidate.profile)
        if score > best.score:
            best = MatchResult(id=candidate.id, name=candidate.name, score=score)
    return best


def find_matching_room(
    live: RoomObservation,
    candidates: Iterable[Candidate],
    threshold: float,
) -> Optional[MatchResult]:
    """
    Best match for a single observation, if it reaches `threshold`.

    This is a one-shot lookup without any stabilization; live streams should
    go through a MatchStabilizer instead.
    """
    best = pick_best_match(live, candidates)
    if best.is_empty or best.score < threshold:
        logger.debug("No room reached threshold %.2f (best=%r, score=%.3f)", threshold, best.name, best.score)
        return None
    return best
