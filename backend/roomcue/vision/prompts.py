"""
Room Observation Prompt

Prompt sent to the vision provider with each frame, and the parser that
turns its reply into a RoomObservation.
"""

import json
import logging

from langsmith import traceable
from pydantic import ValidationError

from roomcue.models.schemas import RoomObservation
from roomcue.core.exceptions import InvalidObservationError


logger = logging.getLogger(__name__)


ROOM_OBSERVATION_PROMPT = """You are extracting a room fingerprint for recognition. Only include FIXED or semi-fixed items: floors, walls, ceiling, major furniture, built-ins, large decor, and lighting fixtures. Ignore temporary items: people, faces, phones, laptops, cups, clothing piles, pets. Prefer stable, consistent labels; keep attributes short; colors should be basic words (e.g. "blue", "wood", "white"). Provide counts when possible. Use "unknown" for any surface you cannot see. Return ONLY valid JSON matching this exact schema:

{
  "room_type": "bedroom" | "living_room" | "bathroom" | "kitchen" | "office" | "hallway" | "unknown",
  "fixed_elements": {
    "major_furniture": [{"name": string, "count": number, "attributes": string[]}],
    "surfaces": {
      "floor": {"material": string, "color": string, "pattern": string},
      "walls": {"color": string, "pattern": string},
      "ceiling": {"color": string}
    },
    "lighting": [{"type": string, "count": number, "attributes": string[]}],
    "large_decor": [{"name": string, "attributes": string[]}]
  },
  "distinctive_markers": string[],
  "summary": string
}

Do not include any text before or after the JSON. Return only the JSON object."""


def _strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence if the model added one."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


@traceable(name="parse_observation_response", run_type="parser", tags=["parsing", "vision"])
def parse_observation_response(response_text: str) -> RoomObservation:
    """
    Parse the vision provider's JSON reply into a RoomObservation.

    Raises:
        InvalidObservationError: if the reply is not JSON or does not fit the schema
    """
    try:
        data = json.loads(_strip_code_fence(response_text or ""))
    except json.JSONDecodeError as e:
        logger.warning("Vision reply is not valid JSON: %s", e)
        raise InvalidObservationError(f"Failed to parse vision response as JSON: {e}")

    try:
        return RoomObservation.model_validate(data)
    except ValidationError as e:
        logger.warning("Vision reply does not match the observation schema: %s", e)
        raise InvalidObservationError(f"Vision response is not a valid room observation: {e}")
