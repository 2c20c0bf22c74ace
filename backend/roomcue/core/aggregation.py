"""
Observation Aggregation

Reduces the observations collected during one room scan (roughly ten seconds
of frames) into a single canonical RoomObservation that is stored as the
room's profile.

The reduction is deterministic: the same list always produces the same
profile, and ties are broken by first appearance (or, for counts, by the
larger value).
"""

from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence
import logging

from langsmith import traceable

from roomcue.models.schemas import (
    RoomObservation,
    RoomProfile,
    FixedElements,
    FurnitureItem,
    LightingFixture,
    DecorItem,
    Surfaces,
    FloorSurface,
    WallSurface,
    CeilingSurface,
    UNKNOWN,
)
from roomcue.core.exceptions import EmptyScanError
from roomcue.core.clock import now_ms
from roomcue.vision.labels import normalize_name, normalize_text, unique_normalized


logger = logging.getLogger(__name__)

SUMMARY_SEPARATOR = " · "
DEFAULT_SUMMARY = "Room profile"
SUMMARY_FURNITURE_LIMIT = 3


# ============ Reducers ============

def most_common_first_seen(values: Iterable[str]) -> Optional[str]:
    """Most frequent value; among equally frequent values the first seen wins."""
    counts = Counter(values)
    if not counts:
        return None
    # most_common keeps insertion order for ties
    return counts.most_common(1)[0][0]


def representative_count(counts: Sequence[int]) -> int:
    """Mode of the observed counts, preferring the larger count on ties."""
    if not counts:
        return 0
    frequency = Counter(counts)
    return max(frequency, key=lambda value: (frequency[value], value))


def _known_mode(values: Iterable[str]) -> str:
    known = [v for v in (normalize_text(x) for x in values) if v and v != UNKNOWN]
    return most_common_first_seen(known) or UNKNOWN


class _Group:
    """Occurrences of one normalized furniture name / lighting type / decor name."""

    def __init__(self, display_name: str):
        self.display_name = display_name
        self.counts: List[int] = []
        self.attributes: List[str] = []


def _group(items: Iterable, key_attr: str, counted: bool = True) -> Dict[str, _Group]:
    groups: Dict[str, _Group] = {}
    for item in items:
        raw = getattr(item, key_attr)
        key = normalize_name(raw)
        if not key:
            continue
        group = groups.get(key)
        if group is None:
            group = groups[key] = _Group(" ".join(raw.lower().split()))
        if counted:
            group.counts.append(item.count)
        group.attributes.extend(item.attributes)
    return groups


# ============ Aggregation ============

def empty_observation() -> RoomObservation:
    """An observation with every field unknown or empty."""
    return RoomObservation()


def synthesize_summary(room_type: str, surfaces: Surfaces, furniture: List[FurnitureItem]) -> str:
    """Deterministic one-line description built from the aggregated fields."""
    parts = []
    if room_type != UNKNOWN:
        parts.append(room_type.replace("_", " "))
    floor = surfaces.floor
    if floor.material != UNKNOWN:
        if floor.color != UNKNOWN:
            parts.append(f"{floor.color} {floor.material} floor")
        else:
            parts.append(f"{floor.material} floor")
    if furniture:
        parts.append(", ".join(item.name for item in furniture[:SUMMARY_FURNITURE_LIMIT]))
    return SUMMARY_SEPARATOR.join(parts) or DEFAULT_SUMMARY


def _pick_summary(observations: Sequence[RoomObservation]) -> Optional[str]:
    """Most frequent summary (compared case-insensitively), as first written."""
    originals: Dict[str, str] = {}
    keys = []
    for obs in observations:
        key = normalize_text(obs.summary)
        if not key:
            continue
        originals.setdefault(key, obs.summary.strip())
        keys.append(key)
    best = most_common_first_seen(keys)
    return originals[best] if best else None


@traceable(name="aggregate_observations", run_type="chain", tags=["aggregation"])
def aggregate_observations(observations: Sequence[RoomObservation]) -> RoomObservation:
    """
    Merge a scan's observations into one canonical observation.

    - room_type: most frequent, first seen on ties
    - furniture / lighting: union by normalized name; count is the mode
      (larger on ties); attributes are the union of everything observed
    - surfaces: most frequent known value per field, else "unknown"
    - large decor: union by normalized name with attributes unioned
    - distinctive markers: normalized, de-duplicated union
    - summary: most frequent summary, or a synthesized one

    Args:
        observations: Observations in capture order

    Returns:
        RoomObservation valid under the same schema as a single frame
    """
    if not observations:
        return empty_observation()

    room_type = most_common_first_seen(obs.room_type for obs in observations) or UNKNOWN

    furniture_groups = _group(
        (item for obs in observations for item in obs.fixed_elements.major_furniture), "name"
    )
    major_furniture = [
        FurnitureItem(
            name=group.display_name,
            count=representative_count(group.counts),
            attributes=unique_normalized(group.attributes),
        )
        for group in furniture_groups.values()
    ]

    lighting_groups = _group(
        (item for obs in observations for item in obs.fixed_elements.lighting), "type"
    )
    lighting = [
        LightingFixture(
            type=group.display_name,
            count=representative_count(group.counts),
            attributes=unique_normalized(group.attributes),
        )
        for group in lighting_groups.values()
    ]

    decor_groups = _group(
        (item for obs in observations for item in obs.fixed_elements.large_decor), "name", counted=False
    )
    large_decor = [
        DecorItem(name=group.display_name, attributes=unique_normalized(group.attributes))
        for group in decor_groups.values()
    ]

    all_surfaces = [obs.fixed_elements.surfaces for obs in observations]
    surfaces = Surfaces(
        floor=FloorSurface(
            material=_known_mode(s.floor.material for s in all_surfaces),
            color=_known_mode(s.floor.color for s in all_surfaces),
            pattern=_known_mode(s.floor.pattern for s in all_surfaces),
        ),
        walls=WallSurface(
            color=_known_mode(s.walls.color for s in all_surfaces),
            pattern=_known_mode(s.walls.pattern for s in all_surfaces),
        ),
        ceiling=CeilingSurface(color=_known_mode(s.ceiling.color for s in all_surfaces)),
    )

    distinctive_markers = unique_normalized(
        marker for obs in observations for marker in obs.distinctive_markers
    )

    summary = _pick_summary(observations) or synthesize_summary(room_type, surfaces, major_furniture)

    return RoomObservation(
        room_type=room_type,
        fixed_elements=FixedElements(
            major_furniture=major_furniture,
            surfaces=surfaces,
            lighting=lighting,
            large_decor=large_decor,
        ),
        distinctive_markers=distinctive_markers,
        summary=summary,
    )


# ============ Profiles ============

@traceable(name="build_room_profile", run_type="chain", tags=["aggregation", "profile"])
def build_room_profile(
    name: str,
    observations: Sequence[RoomObservation],
    note: str = None,
    keep_raw: bool = True,
    created_at: int = None,
) -> RoomProfile:
    """
    Create a RoomProfile from a completed scan.

    Raises:
        EmptyScanError: if the scan produced no observations
    """
    if not observations:
        raise EmptyScanError(f"Cannot create room profile '{name}' with no observations")

    profile = RoomProfile(
        name=name.strip(),
        note=note.strip() if note else None,
        created_at=int(now_ms()) if created_at is None else created_at,
        observation_count=len(observations),
        profile=aggregate_observations(observations),
        raw_observations=list(observations) if keep_raw else None,
    )
    logger.info(
        "Created room profile %r (%s) from %d observation(s)",
        profile.name, profile.id, profile.observation_count,
    )
    return profile


def refresh_profile(room: RoomProfile) -> RoomProfile:
    """
    Re-run aggregation over a profile's stored raw observations.

    Profiles saved without raw observations are returned unchanged.
    """
    if not room.raw_observations:
        return room
    return room.model_copy(update={
        "profile": aggregate_observations(room.raw_observations),
        "observation_count": len(room.raw_observations),
    })
