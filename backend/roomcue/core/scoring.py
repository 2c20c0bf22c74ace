"""
Room Similarity Scoring

Scores how well a live room observation matches a stored room profile.
The score is a weighted sum of five independent factors, each in [0, 1]:

    room type          0.15   exact match
    major furniture    0.45   names, counts and attributes
    surfaces           0.25   floor / walls / ceiling
    lighting + decor   0.10   fixture types and large decor
    markers            0.05   distinctive markers

Every ratio is computed through `safe_ratio`, so empty lists on either side
produce 0 instead of NaN.
"""

from typing import Dict, List

from langsmith import traceable

from roomcue.models.schemas import (
    RoomObservation,
    RoomScore,
    FurnitureItem,
    Surfaces,
    FixedElements,
    UNKNOWN,
)
from roomcue.vision.labels import normalize_name, normalize_text, normalized_set


# Factor weights (sum to 1.0)
ROOM_TYPE_WEIGHT = 0.15
FURNITURE_WEIGHT = 0.45
SURFACES_WEIGHT = 0.25
LIGHTING_DECOR_WEIGHT = 0.10
MARKERS_WEIGHT = 0.05

# Points per shared furniture attribute, on top of 1 point for the item itself
ATTRIBUTE_BONUS = 0.2

# floor material/color/pattern, wall color/pattern, ceiling color
SURFACE_SLOTS = 6

# Counts within this distance are treated as identical
COUNT_TOLERANCE = 1


# ============ Guards ============

def safe_ratio(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 when the denominator is zero or negative."""
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def clamp_unit(value: float) -> float:
    """Clamp to [0, 1]."""
    return min(max(value, 0.0), 1.0)


# ============ Factor Scores ============

def count_closeness(live_count: int, profile_count: int) -> float:
    """
    1.0 when the counts differ by at most one, otherwise decays with the
    difference relative to the profile count.
    """
    diff = abs(live_count - profile_count)
    if diff <= COUNT_TOLERANCE:
        return 1.0
    return max(0.0, 1.0 - diff / (profile_count + 1))


def furniture_score(live: List[FurnitureItem], profile: List[FurnitureItem]) -> float:
    """
    Score major furniture.

    Each profile item earns 1 point (scaled by count closeness) when the live
    observation has an item with the same normalized name, plus ATTRIBUTE_BONUS
    per shared attribute. When several live items share a name the best one
    counts. The total is divided by the profile's maximum achievable points.
    """
    if not profile and not live:
        return 1.0
    if not profile or not live:
        return 0.0

    live_by_name: Dict[str, List[FurnitureItem]] = {}
    for item in live:
        live_by_name.setdefault(normalize_name(item.name), []).append(item)

    points = 0.0
    max_points = 0.0
    for item in profile:
        profile_attrs = normalized_set(item.attributes)
        max_points += 1.0 + ATTRIBUTE_BONUS * len(profile_attrs)

        best = 0.0
        for candidate in live_by_name.get(normalize_name(item.name), []):
            shared = len(profile_attrs & normalized_set(candidate.attributes))
            candidate_points = count_closeness(candidate.count, item.count) + ATTRIBUTE_BONUS * shared
            best = max(best, candidate_points)
        points += best

    return clamp_unit(safe_ratio(points, max_points))


def _is_known(value: str) -> bool:
    key = normalize_text(value)
    return bool(key) and key != UNKNOWN


def _slot_matches(live_value: str, profile_value: str) -> bool:
    """A surface slot matches only when both sides know it and agree."""
    return _is_known(live_value) and normalize_text(live_value) == normalize_text(profile_value)


def surfaces_score(live: Surfaces, profile: Surfaces) -> float:
    """Matching known surface slots out of a fixed SURFACE_SLOTS."""
    slots = [
        (live.floor.material, profile.floor.material),
        (live.floor.color, profile.floor.color),
        (live.floor.pattern, profile.floor.pattern),
        (live.walls.color, profile.walls.color),
        (live.walls.pattern, profile.walls.pattern),
        (live.ceiling.color, profile.ceiling.color),
    ]
    matched = sum(1 for live_value, profile_value in slots if _slot_matches(live_value, profile_value))
    return safe_ratio(matched, SURFACE_SLOTS)


def lighting_decor_score(live: FixedElements, profile: FixedElements) -> float:
    """
    Share of profile lighting and decor entries present in the live observation.

    Lighting must also agree on count within COUNT_TOLERANCE; decor only needs
    to be present. No profile entries means no evidence, so the score is 0.
    """
    matched = 0
    total = len(profile.lighting) + len(profile.large_decor)

    for fixture in profile.lighting:
        key = normalize_name(fixture.type)
        if any(
            normalize_name(candidate.type) == key
            and abs(candidate.count - fixture.count) <= COUNT_TOLERANCE
            for candidate in live.lighting
        ):
            matched += 1

    live_decor = {normalize_name(item.name) for item in live.large_decor}
    for item in profile.large_decor:
        if normalize_name(item.name) in live_decor:
            matched += 1

    return safe_ratio(matched, total)


def markers_score(live: List[str], profile: List[str]) -> float:
    """Share of the profile's distinctive markers seen live."""
    profile_markers = normalized_set(profile)
    live_markers = normalized_set(live)
    return safe_ratio(len(profile_markers & live_markers), len(profile_markers))


# ============ Combined Score ============

def score_breakdown(live: RoomObservation, profile: RoomObservation) -> RoomScore:
    """Score a live observation against a stored profile, keeping each factor."""
    room_type = 1.0 if live.room_type == profile.room_type else 0.0
    furniture = furniture_score(
        live.fixed_elements.major_furniture,
        profile.fixed_elements.major_furniture,
    )
    surfaces = surfaces_score(live.fixed_elements.surfaces, profile.fixed_elements.surfaces)
    lighting_decor = lighting_decor_score(live.fixed_elements, profile.fixed_elements)
    markers = markers_score(live.distinctive_markers, profile.distinctive_markers)

    total = (
        room_type * ROOM_TYPE_WEIGHT
        + furniture * FURNITURE_WEIGHT
        + surfaces * SURFACES_WEIGHT
        + lighting_decor * LIGHTING_DECOR_WEIGHT
        + markers * MARKERS_WEIGHT
    )

    return RoomScore(
        room_type_score=room_type,
        furniture_score=furniture,
        surfaces_score=surfaces,
        lighting_decor_score=lighting_decor,
        markers_score=markers,
        total_score=clamp_unit(total),
    )


@traceable(name="score_room", run_type="chain", tags=["matching"])
def score_room(live: RoomObservation, profile: RoomObservation) -> float:
    """Similarity of a live observation to a stored profile, in [0, 1]."""
    return score_breakdown(live, profile).total_score
