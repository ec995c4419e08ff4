"""
Scorecard symbols for rendering games as text.

Lane monitors and paper sheets write ``X`` for a strike, ``/`` for a spare
and ``-`` for a gutter ball. In the tenth frame every fresh rack can produce
an ``X`` and a bonus pair can produce a ``/``.
"""

from __future__ import annotations

from .models import Frame, FrameDisplay, Game, TenthFrame
from .scoring import MAX_PINS

STRIKE = "X"
SPARE = "/"
GUTTER = "-"


def roll_symbol(pins: int, previous: int | None = None) -> str:
    """Symbol for one roll.

    ``previous`` is the earlier roll in the same rack, or None when this roll
    starts a fresh rack of ten pins.
    """
    if previous is None and pins == MAX_PINS:
        return STRIKE
    if previous is not None and pins > 0 and previous + pins == MAX_PINS:
        return SPARE
    if pins == 0:
        return GUTTER
    return str(pins)


def frame_display(frame: Frame) -> FrameDisplay:
    """Symbols for frames 1-9. A strike is drawn in the second box."""
    if frame.is_strike:
        return FrameDisplay(roll1="", roll2=STRIKE, frame_score=frame.score)

    first = frame.rolls[0].pins if frame.rolls else 0
    second = frame.rolls[1].pins if len(frame.rolls) > 1 else 0
    return FrameDisplay(
        roll1=roll_symbol(first),
        roll2=roll_symbol(second, previous=first),
        frame_score=frame.score,
    )


def tenth_frame_display(frame: TenthFrame) -> FrameDisplay:
    """Symbols for the tenth frame, where each new rack can strike."""
    pins = [roll.pins for roll in frame.rolls]
    symbols: list[str] = []
    rack_start: int | None = None  # first roll of the current rack

    for value in pins:
        previous = rack_start
        symbols.append(roll_symbol(value, previous=previous))
        if previous is None and value != MAX_PINS:
            rack_start = value
        else:
            rack_start = None

    return FrameDisplay(
        roll1=symbols[0] if symbols else "",
        roll2=symbols[1] if len(symbols) > 1 else "",
        roll3=symbols[2] if len(symbols) > 2 else None,
        frame_score=frame.score,
    )


def game_display(game: Game) -> list[FrameDisplay]:
    """Display boxes for all ten frames."""
    boxes = [frame_display(frame) for frame in game.frames]
    boxes.append(tenth_frame_display(game.tenth_frame))
    return boxes
