"""
RoomCue - Pydantic Schemas

Structured room observations as produced by the vision provider, the stored
room profiles built from them, and the records exchanged between the
matcher, the stabilizer and their collaborators.
"""

from typing import List, Optional, Literal
from pydantic import BaseModel, Field, ConfigDict
import uuid

from roomcue.core.clock import now_ms


UNKNOWN = "unknown"

RoomType = Literal[
    "bedroom",
    "living_room",
    "bathroom",
    "kitchen",
    "office",
    "hallway",
    "unknown",
]


class FurnitureItem(BaseModel):
    """A piece of major furniture, e.g. 2 x 'chair' with ['wood', 'brown']."""
    name: str = Field(..., description="Furniture name like 'bed', 'desk', 'sofa'")
    count: int = Field(default=1, ge=0)
    attributes: List[str] = Field(default_factory=list, description="Short descriptors: colors, materials")


class FloorSurface(BaseModel):
    material: str = UNKNOWN
    color: str = UNKNOWN
    pattern: str = UNKNOWN


class WallSurface(BaseModel):
    color: str = UNKNOWN
    pattern: str = UNKNOWN


class CeilingSurface(BaseModel):
    color: str = UNKNOWN


class Surfaces(BaseModel):
    """Floor, walls and ceiling. Any field the provider cannot see is 'unknown'."""
    floor: FloorSurface = Field(default_factory=FloorSurface)
    walls: WallSurface = Field(default_factory=WallSurface)
    ceiling: CeilingSurface = Field(default_factory=CeilingSurface)


class LightingFixture(BaseModel):
    """A lighting fixture type, e.g. 1 x 'ceiling light'."""
    type: str
    count: int = Field(default=1, ge=0)
    attributes: List[str] = Field(default_factory=list)


class DecorItem(BaseModel):
    """Large decor like a rug, painting or mirror. No count is tracked."""
    name: str
    attributes: List[str] = Field(default_factory=list)


class FixedElements(BaseModel):
    major_furniture: List[FurnitureItem] = Field(default_factory=list)
    surfaces: Surfaces = Field(default_factory=Surfaces)
    lighting: List[LightingFixture] = Field(default_factory=list)
    large_decor: List[DecorItem] = Field(default_factory=list)


class RoomObservation(BaseModel):
    """
    One instant-in-time description of a room's fixed features.

    Produced by the vision provider for a single frame; also the shape of an
    aggregated profile, so a profile can be used anywhere an observation can.
    """
    room_type: RoomType = UNKNOWN
    fixed_elements: FixedElements = Field(default_factory=FixedElements)
    distinctive_markers: List[str] = Field(default_factory=list)
    summary: str = ""

    model_config = {
        "json_schema_extra": {
            "examples": [{
                "room_type": "kitchen",
                "fixed_elements": {
                    "major_furniture": [{"name": "fridge", "count": 1, "attributes": ["white"]}],
                    "surfaces": {
                        "floor": {"material": "tile", "color": "white", "pattern": "checkered"},
                        "walls": {"color": "yellow", "pattern": "plain"},
                        "ceiling": {"color": "white"}
                    },
                    "lighting": [{"type": "ceiling light", "count": 1, "attributes": []}],
                    "large_decor": [{"name": "clock", "attributes": ["round"]}]
                },
                "distinctive_markers": ["red kettle"],
                "summary": "Small kitchen with a white fridge"
            }]
        }
    }


class RoomProfile(BaseModel):
    """
    A stored place, built once from a completed scan session.

    `profile` is only ever replaced by re-running the aggregator over the
    observations, never edited by hand.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    note: Optional[str] = None
    created_at: int = Field(default_factory=lambda: int(now_ms()), alias="createdAt", description="Epoch milliseconds")
    observation_count: int = Field(default=0, ge=0, alias="observationCount")
    profile: RoomObservation
    raw_observations: Optional[List[RoomObservation]] = Field(default=None, alias="rawObservations")


class ProfileCandidate(BaseModel):
    """Minimal matcher target. RoomProfile satisfies the same shape."""
    id: str
    name: str
    profile: RoomObservation


class MatchResult(BaseModel):
    """Best profile for one live observation. Recomputed for every frame."""
    id: str = ""
    name: str = ""
    score: float = Field(default=0.0, ge=0.0, le=1.0)

    @classmethod
    def empty(cls) -> "MatchResult":
        """Sentinel returned when there is nothing to match against."""
        return cls(id="", name="", score=0.0)

    @property
    def is_empty(self) -> bool:
        return not self.id


class DetectionEvent(BaseModel):
    """Confirmed 'you are in place X' event, emitted once per cooldown."""
    id: str
    name: str
    score: float = Field(..., ge=0.0, le=1.0)
    detected_at: float = Field(..., description="Epoch milliseconds of the confirming observation")


class RoomScore(BaseModel):
    """Weighted similarity between a live observation and a stored profile."""
    room_type_score: float = Field(..., ge=0, le=1)
    furniture_score: float = Field(..., ge=0, le=1)
    surfaces_score: float = Field(..., ge=0, le=1)
    lighting_decor_score: float = Field(..., ge=0, le=1)
    markers_score: float = Field(..., ge=0, le=1)
    total_score: float = Field(..., ge=0, le=1)
