"""
Manual correction recalculator.

A user fixes one frame; every running total after it may change, because a
strike or spare two frames earlier can take its bonus from the edited rolls.
So we never patch totals locally. Every frame is re-sanitized and the whole
game is rescored through the same ``score_frames`` the reconciler uses.

``issues`` and ``confidence`` describe the model's transcription. A corrected
game is user-authored, so this module carries those fields over untouched and
never recomputes them.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .exceptions import FrameIndexError
from .models import CorrectionRequest, Frame, Game, Roll
from .scoring import (
    TENTH_FRAME_INDEX,
    sanitize_regular_frame,
    sanitize_tenth_frame,
    score_frames,
)


def recalculate_game(
    game: Game, frame_index: int, rolls: Sequence[Roll | Mapping | int | float]
) -> Game:
    """Replace one frame's rolls and rescore the whole game.

    Args:
        game: The game being corrected. It is not modified.
        frame_index: 0-8 for frames 1-9, 9 for the tenth frame.
        rolls: New pin counts. Only the first two are used for frames 1-9 and
            the first three for the tenth frame. Values are re-clamped.

    Returns:
        A new ``Game`` with every running total recomputed.

    Raises:
        FrameIndexError: If ``frame_index`` is not in 0-9.
    """
    if isinstance(frame_index, bool) or not 0 <= frame_index <= TENTH_FRAME_INDEX:
        raise FrameIndexError(
            f"Frame index {frame_index!r} is out of range (expected 0-{TENTH_FRAME_INDEX}).",
            details={"frame_index": frame_index},
        )

    pins = [_pins_of(roll) for roll in rolls]

    if frame_index == TENTH_FRAME_INDEX:
        edited = game.model_copy(update={"tenth_frame": sanitize_tenth_frame(pins)})
    else:
        frames = list(game.frames)
        frames[frame_index] = sanitize_regular_frame(pins[:2])
        edited = game.model_copy(update={"frames": frames})

    return rescore_game(edited)


def rescore_game(game: Game) -> Game:
    """Re-sanitize every frame, then recompute the running totals and final score.

    A stored or wire game may carry frames no sanitizer produced (``[10, 0]``
    marked as a strike, an open ``[7, 8]``); they are repaired before replay.
    Running it on its own output gives back an equal game, and the result
    shares no mutable lists with ``game``.
    """
    frames = [sanitize_regular_frame(_frame_pins(frame)) for frame in game.frames]
    tenth = sanitize_tenth_frame(_frame_pins(game.tenth_frame))
    frames, tenth_frame, total_score = score_frames(frames, tenth)
    return game.model_copy(
        update={
            "frames": frames,
            "tenth_frame": tenth_frame,
            "total_score": total_score,
            "issues": list(game.issues) if game.issues is not None else None,
        }
    )


def apply_correction(request: CorrectionRequest) -> Game:
    """Apply a ``{game, frameIndex, rolls}`` correction request."""
    return recalculate_game(request.game, request.frame_index, request.rolls)


# ─── Internal Helpers ────────────────────────────────────────────────


def _pins_of(roll: object) -> object:
    """Pull the raw pin value out of a Roll, a ``{"pins": n}`` dict or a number."""
    if isinstance(roll, Roll):
        return roll.pins
    if isinstance(roll, Mapping):
        return roll.get("pins")
    return roll


def _frame_pins(frame: Frame) -> list[int]:
    return [roll.pins for roll in frame.rolls]
