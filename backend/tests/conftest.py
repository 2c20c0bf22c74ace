"""
Shared fixtures: realistic room observations as the vision provider returns them.
"""

import pytest

from roomcue.models.schemas import RoomObservation


KITCHEN = {
    "room_type": "kitchen",
    "fixed_elements": {
        "major_furniture": [
            {"name": "fridge", "count": 1, "attributes": ["white", "tall"]},
            {"name": "chairs", "count": 4, "attributes": ["wood"]},
            {"name": "table", "count": 1, "attributes": ["round"]},
        ],
        "surfaces": {
            "floor": {"material": "tile", "color": "white", "pattern": "checkered"},
            "walls": {"color": "yellow", "pattern": "plain"},
            "ceiling": {"color": "white"},
        },
        "lighting": [{"type": "pendant light", "count": 2, "attributes": ["brass"]}],
        "large_decor": [{"name": "wall clock", "attributes": ["round"]}],
    },
    "distinctive_markers": ["red kettle", "herb pots"],
    "summary": "Bright kitchen with a white fridge",
}

BEDROOM = {
    "room_type": "bedroom",
    "fixed_elements": {
        "major_furniture": [
            {"name": "bed", "count": 1, "attributes": ["queen", "blue"]},
            {"name": "nightstand", "count": 2, "attributes": ["oak"]},
            {"name": "dresser", "count": 1, "attributes": []},
        ],
        "surfaces": {
            "floor": {"material": "carpet", "color": "beige", "pattern": "plain"},
            "walls": {"color": "gray", "pattern": "plain"},
            "ceiling": {"color": "white"},
        },
        "lighting": [{"type": "lamp", "count": 2, "attributes": []}],
        "large_decor": [{"name": "mirror", "attributes": ["tall"]}],
    },
    "distinctive_markers": ["family photo above bed"],
    "summary": "Bedroom with a blue queen bed",
}


@pytest.fixture
def kitchen() -> RoomObservation:
    return RoomObservation.model_validate(KITCHEN)


@pytest.fixture
def bedroom() -> RoomObservation:
    return RoomObservation.model_validate(BEDROOM)
