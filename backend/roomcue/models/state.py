"""
Stabilizer State

Per-session state of the room match stabilizer, plus its configuration.
One state value belongs to one recognition session and is discarded with it.
"""

from typing import TypedDict, Optional
from pydantic import BaseModel, Field

from roomcue.models.schemas import MatchResult


class StabilizerConfig(BaseModel):
    """
    Stabilizer parameters.

    The confirmation threshold has no default: different call sites confirm
    at different levels, so the caller always chooses one.
    """
    model_config = {"frozen": True}

    confirmation_threshold: float = Field(..., ge=0.0, le=1.0)
    required_consecutive: int = Field(default=3, ge=1)
    cooldown_ms: float = Field(default=30_000, ge=0)


class MatchStabilizerState(TypedDict):
    """
    Hysteresis state for one recognition session.
    """

    last_match: Optional[MatchResult]           # Current streak's profile, None when idle
    consecutive_count: int                      # Length of the current streak
    cooldown_until: float                       # Epoch ms; observations before this are ignored


def create_initial_state() -> MatchStabilizerState:
    """
    Create an idle stabilizer state (no streak, no cooldown).
    """
    return MatchStabilizerState(
        last_match=None,
        consecutive_count=0,
        cooldown_until=0.0,
    )
