"""
Transcription normalizer & reconciler — the "tolerate and annotate" layer.

Takes whatever JSON the vision model produced and turns it into validated
``Game`` objects, one per player row:

  1. Pick the first nine regular frames, pad to nine.
  2. Coerce rolls to pins, clamp them, re-derive strikes and spares.
  3. Recompute every running total from the pins alone.
  4. Compare the model's printed totals against the computed ones.
  5. Turn the disagreements into issue strings and a confidence score.

Nothing here raises on bad pin data. Impossible values are repaired and the
repair shows up as an issue or a lower confidence. The only "failure" is an
empty list, which means no player-shaped data was found at all.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .models import ExtractionPayload, Frame, Game, RawFrame, RawPlayer
from .scoring import (
    REGULAR_FRAME_COUNT,
    sanitize_regular_frame,
    sanitize_tenth_frame,
    score_frames,
    to_number,
)

# ─── Constants ───────────────────────────────────────────────────────

UNKNOWN_PLAYER = "Unknown Player"
EXPECTED_FRAME_ROWS = 10

# Heuristic weights. They are not calibrated probabilities; keep them stable
# so stored confidences stay comparable.
MISSING_ROW_PENALTY = 0.05
MAX_MISSING_ROW_PENALTY = 0.3
ISSUE_PENALTY = 0.15
MAX_ISSUE_PENALTY = 0.8


# ─── Public API ──────────────────────────────────────────────────────


def convert_extraction_payload(data: object) -> list[Game]:
    """Reconcile a raw extraction payload into one ``Game`` per player.

    A non-empty ``players`` list wins; flat top-level player fields are then
    ignored. The flat (legacy single-player) shape is used only when there is
    no such list.

    Returns:
        The reconciled games, or ``[]`` when the payload has no player data.
    """
    if not isinstance(data, Mapping):
        return []

    payload = ExtractionPayload.from_untrusted(data)

    if isinstance(payload.players, list) and payload.players:
        return [convert_player(RawPlayer.from_untrusted(p)) for p in payload.players]

    if payload.player_name or isinstance(payload.frames, list):
        return [convert_player(payload)]

    return []


def convert_player(raw: RawPlayer) -> Game:
    """Normalize and reconcile a single player row."""
    player_name = _player_name(raw.player_name)
    raw_frames = (
        [RawFrame.from_untrusted(f) for f in raw.frames]
        if isinstance(raw.frames, list)
        else []
    )

    # ── Regular frames ──────────────────────────────────────────────
    first_nine = [f for f in raw_frames if _is_regular_frame(f)][:REGULAR_FRAME_COUNT]
    frames: list[Frame] = [sanitize_regular_frame(normalize_rolls(f.rolls)) for f in first_nine]
    while len(frames) < REGULAR_FRAME_COUNT:
        frames.append(sanitize_regular_frame([0, 0]))

    # ── Tenth frame ─────────────────────────────────────────────────
    tenth_source = _tenth_frame_source(raw, raw_frames)
    tenth_frame = sanitize_tenth_frame(normalize_rolls(tenth_source.rolls))

    # ── Authoritative totals ────────────────────────────────────────
    frames, tenth_frame, total_score = score_frames(frames, tenth_frame)
    computed_totals = [f.score or 0 for f in frames] + [total_score]

    # ── Cross-checks ────────────────────────────────────────────────
    printed_totals = [to_number(f.running_total) for f in first_nine]
    printed_final = to_number(tenth_source.running_total)
    if printed_final is None:
        printed_final = to_number(raw.total_score)

    messages = find_total_mismatches(computed_totals, printed_totals, printed_final)
    messages.extend(find_total_decreases(computed_totals))
    issues = [f"{player_name}: {message}" for message in dict.fromkeys(messages)]

    raw_frame_count = len(raw.frames) if isinstance(raw.frames, list) else 0
    if raw_frame_count < EXPECTED_FRAME_ROWS:
        issues.append(
            f"{player_name}: extractor returned {raw_frame_count} frame rows "
            f"(expected {EXPECTED_FRAME_ROWS})"
        )

    return Game(
        frames=frames,
        tenth_frame=tenth_frame,
        total_score=total_score,
        player_name=player_name,
        issues=issues or None,
        confidence=compute_confidence(raw_frame_count, len(issues)),
    )


# ─── Normalization ───────────────────────────────────────────────────


def normalize_rolls(rolls: object) -> list[float]:
    """Turn ``[{"pins": 7}, 3, {"pins": None}]`` into ``[7.0, 3.0, 0.0]``.

    Values are not clamped here; the frame sanitizers do that.
    """
    if not isinstance(rolls, list):
        return []

    pins: list[float] = []
    for roll in rolls:
        value = roll.get("pins") if isinstance(roll, Mapping) else roll
        number = to_number(value)
        pins.append(number if number is not None else 0.0)
    return pins


# ─── Cross-Checks ────────────────────────────────────────────────────


def find_total_mismatches(
    computed_totals: Sequence[int],
    printed_totals: Sequence[float | None],
    printed_final: float | None = None,
) -> list[str]:
    """Compare printed running totals with computed ones.

    ``printed_totals`` is aligned with frames 1-9 (``None`` = not transcribed);
    ``printed_final`` is checked against the tenth frame's total.
    """
    mismatches: list[str] = []

    for index, printed in enumerate(printed_totals[:REGULAR_FRAME_COUNT]):
        computed = computed_totals[index]
        if printed is not None and printed != computed:
            mismatches.append(
                f"frame {index + 1}: printed total {_format_number(printed)} "
                f"vs computed {computed}"
            )

    final = computed_totals[-1]
    if printed_final is not None and printed_final != final:
        mismatches.append(
            f"frame {REGULAR_FRAME_COUNT + 1}: printed total "
            f"{_format_number(printed_final)} vs computed {final}"
        )

    return mismatches


def find_total_decreases(computed_totals: Sequence[int]) -> list[str]:
    """Flag any frame whose running total is lower than the one before it."""
    decreases: list[str] = []
    for index in range(1, len(computed_totals)):
        previous, current = computed_totals[index - 1], computed_totals[index]
        if current < previous:
            decreases.append(
                f"running totals decrease between frames {index} and {index + 1} "
                f"({previous} -> {current})"
            )
    return decreases


# ─── Confidence ──────────────────────────────────────────────────────


def compute_confidence(raw_frame_count: int, issue_count: int) -> float:
    """Score how much to trust a reconciled game, from 0.0 to 1.0.

    Starts at 1.0, loses up to 0.3 for missing frame rows and up to 0.8 for
    issues, then rounds to two decimals.
    """
    confidence = 1.0
    if raw_frame_count < EXPECTED_FRAME_ROWS:
        confidence -= min(
            MAX_MISSING_ROW_PENALTY,
            (EXPECTED_FRAME_ROWS - raw_frame_count) * MISSING_ROW_PENALTY,
        )
    if issue_count > 0:
        confidence -= min(MAX_ISSUE_PENALTY, issue_count * ISSUE_PENALTY)
    return max(0.0, min(1.0, round(confidence, 2)))


# ─── Internal Helpers ────────────────────────────────────────────────


def _player_name(value: object) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return UNKNOWN_PLAYER


def _is_regular_frame(frame: RawFrame) -> bool:
    """Rows without a usable frame number are kept; numbered rows must be 1-9."""
    number = _frame_number(frame.frame_number)
    return number is None or 1 <= number <= REGULAR_FRAME_COUNT


def _frame_number(value: object) -> float | None:
    """Frame numbers may be written as ``"7"``; pins and totals may not."""
    if isinstance(value, str):
        try:
            return to_number(float(value.strip()))
        except ValueError:
            return None
    return to_number(value)


def _tenth_frame_source(raw: RawPlayer, raw_frames: list[RawFrame]) -> RawFrame:
    """Explicit ``tenthFrame`` → row numbered 10 → tenth row → empty."""
    if raw.tenth_frame is not None:
        return RawFrame.from_untrusted(raw.tenth_frame)

    for frame in raw_frames:
        if _frame_number(frame.frame_number) == REGULAR_FRAME_COUNT + 1:
            return frame

    if len(raw_frames) > REGULAR_FRAME_COUNT:
        return raw_frames[REGULAR_FRAME_COUNT]

    return RawFrame()


def _format_number(value: float) -> str:
    """Render 47.0 as "47" and 47.5 as "47.5" in issue text."""
    number = float(value)
    return str(int(number)) if number.is_integer() else str(number)
