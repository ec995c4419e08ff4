"""
Deterministic bowling scoring — the one place running totals come from.

Both the reconciler (model output) and the correction recalculator (user
edits) score games through ``score_frames``. Nothing here trusts a claimed
strike/spare flag or a printed total; everything is re-derived from pins.

Scoring replays a single flattened roll sequence:

    frames 1-9 rolls ─┬─ tenth frame rolls
                      │
    cursor ──────────►│  strike → 10 + next two rolls, advance 1
                      │  spare  → 10 + next roll,      advance 2
                      │  open   → both rolls,          advance 2
                      │
    tenth frame → running total + all of its pins

so a strike in frame 9 picks up its bonus from the tenth frame's rolls
without any special case for frame indices 8 and 9.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from .models import Frame, Roll, TenthFrame

# ─── Constants ───────────────────────────────────────────────────────

MAX_PINS = 10
REGULAR_FRAME_COUNT = 9
TENTH_FRAME_INDEX = 9
MAX_TENTH_FRAME_ROLLS = 3


# ─── Pin Coercion ────────────────────────────────────────────────────


def to_number(value: object) -> float | None:
    """Return a finite int/float as float, anything else as None.

    ``bool`` is rejected even though it subclasses ``int``: a ``true`` in a
    pins field is a transcription error, not one pin. An integer too large for
    a float is treated like infinity.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number):
        return None
    return number


def clamp_pins(value: object) -> int:
    """Coerce an untrusted pin count into an integer in [0, 10].

    Rounds half up (7.5 → 8), so the result does not depend on banker's
    rounding.
    """
    number = to_number(value)
    if number is None or number < 0:
        return 0
    if number > MAX_PINS:
        return MAX_PINS
    return math.floor(number + 0.5)


# ─── Frame Sanitizers ────────────────────────────────────────────────


def sanitize_regular_frame(pins: Sequence[object], score: int | None = None) -> Frame:
    """Build a valid frame 1-9 from raw pin values.

    A first roll of 10 is a strike and any second value is discarded. Otherwise
    the second roll is truncated to the pins left standing, so 7 + 8 becomes
    7 + 3 rather than a rejected frame. A missing second roll counts as 0.
    """
    first = clamp_pins(pins[0]) if pins else 0
    if first == MAX_PINS:
        return Frame(rolls=[Roll(pins=MAX_PINS)], is_strike=True, is_spare=False, score=score)

    second = min(MAX_PINS - first, clamp_pins(pins[1])) if len(pins) >= 2 else 0
    return Frame(
        rolls=[Roll(pins=first), Roll(pins=second)],
        is_strike=False,
        is_spare=first + second == MAX_PINS,
        score=score,
    )


def sanitize_tenth_frame(pins: Sequence[object], score: int | None = None) -> TenthFrame:
    """Build a valid tenth frame from raw pin values.

    Bonus rolls are independent racks, so the second and third rolls are each
    capped at 10 but not against each other. An open frame keeps two rolls;
    a strike or spare always carries a third (0 when it was not transcribed).
    """
    clamped = [clamp_pins(p) for p in list(pins)[:MAX_TENTH_FRAME_ROLLS]]
    while len(clamped) < 2:
        clamped.append(0)

    first, second = clamped[0], clamped[1]
    is_strike = first == MAX_PINS
    is_spare = not is_strike and first + second == MAX_PINS

    if is_strike or is_spare:
        while len(clamped) < MAX_TENTH_FRAME_ROLLS:
            clamped.append(0)
    else:
        clamped = clamped[:2]

    return TenthFrame(
        rolls=[Roll(pins=p) for p in clamped],
        is_strike=is_strike,
        is_spare=is_spare,
        score=score,
    )


# ─── Running Totals ──────────────────────────────────────────────────


def flatten_rolls(frames: Sequence[Frame], tenth_frame: Frame) -> list[int]:
    """Every roll of the game in delivery order, clamped."""
    flattened = [clamp_pins(roll.pins) for frame in frames for roll in frame.rolls]
    flattened.extend(clamp_pins(roll.pins) for roll in tenth_frame.rolls)
    return flattened


def compute_running_totals(frames: Sequence[Frame], tenth_frame: Frame) -> list[int]:
    """Cumulative score after each of frames 1-9, then after the tenth.

    Lookahead rolls past the end of the sequence count as 0.
    """
    rolls = flatten_rolls(frames, tenth_frame)

    def roll_at(index: int) -> int:
        return rolls[index] if index < len(rolls) else 0

    totals: list[int] = []
    cursor = 0
    running_total = 0

    for _ in frames:
        first = roll_at(cursor)
        if first == MAX_PINS:
            frame_score = MAX_PINS + roll_at(cursor + 1) + roll_at(cursor + 2)
            cursor += 1
        else:
            frame_pins = first + roll_at(cursor + 1)
            if frame_pins == MAX_PINS:
                frame_score = MAX_PINS + roll_at(cursor + 2)
            else:
                frame_score = frame_pins
            cursor += 2

        running_total += frame_score
        totals.append(running_total)

    tenth_pins = sum(clamp_pins(roll.pins) for roll in tenth_frame.rolls)
    totals.append(running_total + tenth_pins)
    return totals


def score_frames(
    frames: Sequence[Frame], tenth_frame: TenthFrame
) -> tuple[list[Frame], TenthFrame, int]:
    """Return copies of the frames carrying freshly computed running totals.

    Returns:
        (frames 1-9, tenth frame, total score). The inputs are not modified and
        share no lists with the returned frames.
    """
    totals = compute_running_totals(frames, tenth_frame)
    scored = [
        frame.model_copy(update={"rolls": list(frame.rolls), "score": total})
        for frame, total in zip(frames, totals)
    ]
    total_score = totals[-1]
    tenth = tenth_frame.model_copy(
        update={"rolls": list(tenth_frame.rolls), "score": total_score}
    )
    return scored, tenth, total_score
