"""
Pydantic models shared across the game core.
These are pure data objects with no rendering or storage coupling.
"""

from __future__ import annotations

import math
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from geoguess.config import get_settings


# ── Enums ──────────────────────────────────────────────────────────────

class RoundStatus(str, Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class RunStatus(str, Enum):
    PLAYING = "playing"
    OVER = "over"


class RunMode(str, Enum):
    SINGLE = "single"
    STREAK = "streak"
    LIVES = "lives"


class SubmitResult(str, Enum):
    ACCEPTED = "accepted"
    DUPLICATE = "duplicate"
    NOT_PLAYING = "not_playing"


class Tone(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


# ── Catalog models ─────────────────────────────────────────────────────

class Country(BaseModel):
    """A playable country. Immutable once the catalog is built."""
    id: str = Field(..., min_length=3, max_length=3, description="cca3 code, e.g. 'FRA'")
    name: str
    aliases: tuple[str, ...] = ()
    centroid: tuple[float, float] = Field(..., description="(longitude, latitude) in degrees")
    geometry: dict = Field(default_factory=dict, repr=False)

    model_config = {"frozen": True}

    @field_validator("centroid")
    @classmethod
    def centroid_is_finite(cls, v):
        if not all(math.isfinite(c) for c in v):
            raise ValueError("centroid must have finite coordinates")
        return v


# ── Guess feedback ─────────────────────────────────────────────────────

class Comparison(BaseModel):
    distance_km: float
    distance_text: str
    direction_label: str
    direction_arrow: str


class Guess(BaseModel):
    """One locked-in guess within a round."""
    country_id: str
    display_name: str
    distance_km: float
    distance_text: str
    direction_label: str
    direction_arrow: str
    correct: bool = False

    model_config = {"frozen": True}


# ── Leaderboard ────────────────────────────────────────────────────────

DEFAULT_PLAYER_NAME = "Anonymous"


class LeaderboardEntry(BaseModel):
    name: str = DEFAULT_PLAYER_NAME
    score: int = Field(..., ge=0)
    # Difficulty for competitive modes, starting lives for lives mode
    difficulty: int = Field(1, alias="difficultyOrLives")
    created_at: float = Field(..., alias="createdAt")

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("name", mode="before")
    @classmethod
    def sanitize_name(cls, v):
        if not isinstance(v, str):
            return DEFAULT_PLAYER_NAME
        cleaned = " ".join(v.split())[:get_settings().leaderboard.name_max_length].strip()
        return cleaned or DEFAULT_PLAYER_NAME

    @field_validator("score", mode="before")
    @classmethod
    def score_is_integral(cls, v):
        # bool is an int subclass; reject it along with fractional floats
        if isinstance(v, bool):
            raise ValueError("score must be a number")
        if isinstance(v, float):
            if not math.isfinite(v) or not v.is_integer():
                raise ValueError("score must be a whole number")
            return int(v)
        return v

    @field_validator("difficulty", mode="before")
    @classmethod
    def clamp_difficulty(cls, v):
        try:
            value = int(v)
        except (TypeError, ValueError, OverflowError):
            return 1
        return max(1, min(5, value))

    @field_validator("created_at")
    @classmethod
    def created_at_is_finite(cls, v):
        if not math.isfinite(v):
            raise ValueError("createdAt must be finite")
        return v
