"""
Pydantic models for scorecard data.

Two families live here and they must never be confused:

  - Raw*/ExtractionPayload: whatever the vision model sent back. Every field is
    untyped and optional; nothing in them is trusted.
  - Roll/Frame/TenthFrame/Game: validated games. They only come out of
    reconciler.py or corrections.py, and they are frozen so a stored game can
    never change underneath whoever holds a reference to it.

Wire names are camelCase (``isStrike``, ``tenthFrame``, ``totalScore``); Python
attributes are snake_case. ``model_dump(by_alias=True, exclude_none=True)``
produces the JSON the persistence layer and the UI expect.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_GAME_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)
_RAW_CONFIG = ConfigDict(
    alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore"
)


# ─── Validated Game ─────────────────────────────────────────────────


class Roll(BaseModel):
    """A single delivery."""

    model_config = _GAME_CONFIG

    pins: int


class Frame(BaseModel):
    """One of frames 1-9.

    ``score`` is the cumulative running total through this frame, not the
    pins knocked down in it.
    """

    model_config = _GAME_CONFIG

    rolls: list[Roll]
    is_strike: bool = False
    is_spare: bool = False
    score: Optional[int] = None


class TenthFrame(Frame):
    """The tenth frame: two rolls when open, three after a strike or spare."""


class Game(BaseModel):
    """One player's game, with reconciliation metadata when it came from a model."""

    model_config = _GAME_CONFIG

    frames: list[Frame] = Field(min_length=9, max_length=9)
    tenth_frame: TenthFrame
    total_score: int
    player_name: str
    issues: Optional[list[str]] = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    def all_frames(self) -> list[Frame]:
        """Frames 1-10 in order."""
        return [*self.frames, self.tenth_frame]

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ─── Untrusted Extraction Payload ───────────────────────────────────


class RawFrame(BaseModel):
    """A frame row exactly as the vision model wrote it.

    ``rolls`` may hold ``{"pins": n}`` objects or bare numbers. The booleans
    and the running total are only ever compared against, never believed.
    """

    model_config = _RAW_CONFIG

    frame_number: Any = None
    rolls: Any = None
    is_strike: Any = None
    is_spare: Any = None
    running_total: Any = None

    @classmethod
    def from_untrusted(cls, value: object) -> RawFrame:
        if not isinstance(value, Mapping):
            return cls()
        return cls.model_validate(dict(value))


class RawPlayer(BaseModel):
    """One player row as transcribed."""

    model_config = _RAW_CONFIG

    player_name: Any = None
    frames: Any = None
    tenth_frame: Any = None
    total_score: Any = None

    @classmethod
    def from_untrusted(cls, value: object) -> RawPlayer:
        if not isinstance(value, Mapping):
            return cls()
        return cls.model_validate(dict(value))


class ExtractionPayload(RawPlayer):
    """Top-level reply: a ``players`` list, or a legacy single flat player.

    ``success`` and ``failure_reason`` are the model's self-report; they are
    informational only.
    """

    players: Any = None
    success: Any = None
    failure_reason: Any = None


# ─── Corrections ────────────────────────────────────────────────────


class CorrectionRequest(BaseModel):
    """A user edit of a single frame. ``frame_index`` 9 is the tenth frame."""

    model_config = _GAME_CONFIG

    game: Game
    frame_index: int
    rolls: list[Roll] = Field(default_factory=list, max_length=3)


# ─── Reports ────────────────────────────────────────────────────────


class ReconciliationReport(BaseModel):
    """What the pipeline hands back for one vision-model reply."""

    model_config = _GAME_CONFIG

    games: list[Game] = Field(default_factory=list)
    extracted: bool = False
    failure_reason: Optional[str] = None
    original_hash: str = ""  # SHA-256 of the raw reply for audit trail


class FrameDisplay(BaseModel):
    """Scorecard symbols for one frame box."""

    model_config = _GAME_CONFIG

    roll1: str
    roll2: str
    roll3: Optional[str] = None
    frame_score: Optional[int] = None
