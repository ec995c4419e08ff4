"""
Tests for the manual correction recalculator.

A correction is user-authored ground truth: the edited frame is re-clamped and
the whole game is rescored, while issues/confidence are left alone.
"""

from __future__ import annotations

import pytest

from scorecard_reconciler.corrections import apply_correction, recalculate_game, rescore_game
from scorecard_reconciler.exceptions import FrameIndexError, ScorecardError
from scorecard_reconciler.models import CorrectionRequest, Game, Roll
from scorecard_reconciler.reconciler import convert_extraction_payload
from scorecard_reconciler.scoring import sanitize_regular_frame, sanitize_tenth_frame


# ─── Test Data ───────────────────────────────────────────────────────


def _make_game(
    frames: list[list[int]] | None = None,
    tenth: list[int] | None = None,
    **overrides,
) -> Game:
    """Factory for consistent games; defaults to an all-open [3, 4] game (total 70)."""
    frames = frames if frames is not None else [[3, 4]] * 9
    tenth = tenth if tenth is not None else [3, 4]
    overrides.setdefault("player_name", "M.C.B.")
    game = Game(
        frames=[sanitize_regular_frame(rolls) for rolls in frames],
        tenth_frame=sanitize_tenth_frame(tenth),
        total_score=0,
        **overrides,
    )
    return rescore_game(game)


def _scores(game: Game) -> list[int | None]:
    return [frame.score for frame in game.all_frames()]


# ═══════════════════════════════════════════════════════════════════════
# RECOMPUTE PROPAGATION
# ═══════════════════════════════════════════════════════════════════════


class TestPropagation:
    def test_open_game_baseline(self):
        game = _make_game()
        assert _scores(game) == [7, 14, 21, 28, 35, 42, 49, 56, 63, 70]
        assert game.total_score == 70

    def test_first_frame_strike_shifts_every_later_total(self):
        game = _make_game()
        corrected = recalculate_game(game, 0, [10])

        assert corrected.frames[0].is_strike is True
        assert [r.pins for r in corrected.frames[0].rolls] == [10]
        assert corrected.frames[0].score == 17  # 10 + next two rolls (3, 4)

        before, after = _scores(game), _scores(corrected)
        assert all(a - b == 10 for a, b in zip(after, before))
        assert corrected.total_score == 80

    def test_tenth_frame_edit_changes_ninth_frame_bonus(self):
        game = _make_game(frames=[[3, 4]] * 8 + [[10]], tenth=[3, 4])
        assert game.frames[8].score == 56 + 17

        corrected = recalculate_game(game, 9, [10, 10, 10])
        assert corrected.frames[8].score == 56 + 30
        assert corrected.tenth_frame.score == 56 + 30 + 30
        assert corrected.total_score == 116

    def test_middle_frame_edit_leaves_earlier_totals(self):
        game = _make_game()
        corrected = recalculate_game(game, 4, [6, 4])
        assert _scores(corrected)[:4] == _scores(game)[:4]
        assert corrected.frames[4].is_spare is True
        assert corrected.frames[4].score == 28 + 13

    def test_editing_to_perfect_game(self):
        game = _make_game(frames=[[10]] * 8 + [[9, 0]], tenth=[10, 10, 10])
        corrected = recalculate_game(game, 8, [10])
        assert _scores(corrected) == [30, 60, 90, 120, 150, 180, 210, 240, 270, 300]
        assert corrected.total_score == 300


# ═══════════════════════════════════════════════════════════════════════
# ROLL SANITIZATION ON EDIT
# ═══════════════════════════════════════════════════════════════════════


class TestEditedRolls:
    def test_regular_frame_uses_first_two_values_only(self):
        corrected = recalculate_game(_make_game(), 2, [3, 4, 5])
        assert [r.pins for r in corrected.frames[2].rolls] == [3, 4]

    def test_second_roll_truncated_to_standing_pins(self):
        corrected = recalculate_game(_make_game(), 2, [7, 8])
        assert [r.pins for r in corrected.frames[2].rolls] == [7, 3]
        assert corrected.frames[2].is_spare is True

    def test_strike_discards_second_value(self):
        corrected = recalculate_game(_make_game(), 2, [10, 5])
        assert [r.pins for r in corrected.frames[2].rolls] == [10]

    def test_out_of_range_values_are_clamped(self):
        corrected = recalculate_game(_make_game(), 0, [-2, 15])
        assert [r.pins for r in corrected.frames[0].rolls] == [0, 10]
        assert corrected.frames[0].is_spare is True

    def test_accepts_rolls_dicts_and_numbers(self):
        game = _make_game()
        as_rolls = recalculate_game(game, 1, [Roll(pins=6), Roll(pins=2)])
        as_dicts = recalculate_game(game, 1, [{"pins": 6}, {"pins": 2}])
        as_numbers = recalculate_game(game, 1, [6, 2])
        assert as_rolls == as_dicts == as_numbers

    def test_open_tenth_frame_drops_third_value(self):
        corrected = recalculate_game(_make_game(), 9, [3, 4, 0])
        assert [r.pins for r in corrected.tenth_frame.rolls] == [3, 4]

    def test_tenth_frame_spare_keeps_bonus(self):
        corrected = recalculate_game(_make_game(), 9, [6, 4, 8])
        assert corrected.tenth_frame.is_spare is True
        assert corrected.total_score == 63 + 18


# ═══════════════════════════════════════════════════════════════════════
# IMMUTABILITY & IDEMPOTENCE
# ═══════════════════════════════════════════════════════════════════════


class TestContract:
    def test_input_game_is_not_modified(self):
        game = _make_game()
        snapshot = game.model_dump()
        recalculate_game(game, 0, [10])
        assert game.model_dump() == snapshot

    def test_rescore_is_idempotent(self):
        game = _make_game(frames=[[10], [5, 5], [0, 0], [9, 1], [10], [10], [2, 3], [0, 10], [10]], tenth=[10, 3, 7])
        assert rescore_game(game) == game
        assert rescore_game(rescore_game(game)) == game

    def test_unchanged_correction_reproduces_game(self):
        game = _make_game(frames=[[10], [5, 5], [0, 0], [9, 1], [10], [10], [2, 3], [0, 10], [10]], tenth=[10, 3, 7])
        for index, frame in enumerate(game.frames):
            assert recalculate_game(game, index, frame.rolls) == game
        assert recalculate_game(game, 9, game.tenth_frame.rolls) == game

    def test_reconciled_game_is_already_consistent(self):
        payload = {
            "playerName": "Jo",
            "frames": [{"rolls": [10]}, {"rolls": [7, 3]}, {"rolls": [4, 2]}] + [{"rolls": [1, 1]}] * 6,
            "tenthFrame": {"rolls": [10, 10, 10]},
        }
        (game,) = convert_extraction_payload(payload)
        assert rescore_game(game) == game

    def test_issues_and_confidence_carried_over(self):
        game = _make_game(issues=["M.C.B.: frame 3: printed total 999 vs computed 21"], confidence=0.85)
        corrected = recalculate_game(game, 0, [10])
        assert corrected.issues == game.issues
        assert corrected.confidence == pytest.approx(0.85)
        assert corrected.player_name == "M.C.B."

    def test_output_shares_no_lists_with_input(self):
        game = _make_game(issues=["M.C.B.: frame 3: printed total 999 vs computed 21"], confidence=0.85)
        snapshot = game.model_dump()
        corrected = recalculate_game(game, 4, [6, 4])

        corrected.issues.append("edited")
        corrected.frames[0].rolls.append(Roll(pins=9))
        corrected.tenth_frame.rolls.clear()
        rescore_game(game).frames[8].rolls.clear()

        assert game.model_dump() == snapshot

    def test_total_score_recomputed_from_stale_value(self):
        game = _make_game().model_copy(update={"total_score": 999})
        assert rescore_game(game).total_score == 70


# ═══════════════════════════════════════════════════════════════════════
# STORED GAMES WITH INCONSISTENT FRAMES
# ═══════════════════════════════════════════════════════════════════════


def _wire_game() -> Game:
    """A stored game whose frames no sanitizer would have produced."""
    return Game.model_validate(
        {
            "playerName": "Jo",
            "frames": [{"rolls": [{"pins": 10}, {"pins": 0}], "isStrike": True}]
            + [{"rolls": [{"pins": 7}, {"pins": 8}]} for _ in range(8)],
            "tenthFrame": {"rolls": [{"pins": 3}, {"pins": 4}, {"pins": 0}]},
            "totalScore": 136,
        }
    )


class TestInconsistentStoredGame:
    def test_untouched_frames_are_resanitized(self):
        corrected = recalculate_game(_wire_game(), 9, [3, 4])

        assert [r.pins for r in corrected.frames[0].rolls] == [10]
        assert corrected.frames[0].is_strike is True
        for frame in corrected.frames[1:]:
            assert [r.pins for r in frame.rolls] == [7, 3]
            assert frame.is_spare is True
        assert [r.pins for r in corrected.tenth_frame.rolls] == [3, 4]

    def test_scores_follow_repaired_rolls(self):
        corrected = recalculate_game(_wire_game(), 9, [3, 4])
        assert _scores(corrected) == [20, 37, 54, 71, 88, 105, 122, 139, 152, 159]
        assert corrected.total_score == 159

    def test_rescore_repairs_without_an_edit(self):
        game = _wire_game()
        assert rescore_game(game) == recalculate_game(game, 9, [3, 4])
        assert rescore_game(rescore_game(game)) == rescore_game(game)


# ═══════════════════════════════════════════════════════════════════════
# STRUCTURAL ERRORS
# ═══════════════════════════════════════════════════════════════════════


class TestFrameIndex:
    @pytest.mark.parametrize("index", [-1, 10, 42])
    def test_out_of_range_index_raises(self, index: int):
        with pytest.raises(FrameIndexError) as exc_info:
            recalculate_game(_make_game(), index, [10])
        assert exc_info.value.code == "FRAME_INDEX_OUT_OF_RANGE"
        assert exc_info.value.details["frame_index"] == index

    def test_bool_index_rejected(self):
        with pytest.raises(ScorecardError):
            recalculate_game(_make_game(), True, [10])


# ═══════════════════════════════════════════════════════════════════════
# CORRECTION REQUEST SHAPE
# ═══════════════════════════════════════════════════════════════════════


class TestCorrectionRequest:
    def test_wire_request_applies(self):
        game = _make_game()
        request = CorrectionRequest.model_validate(
            {"game": game.to_payload(), "frameIndex": 0, "rolls": [{"pins": 10}]}
        )
        corrected = apply_correction(request)
        assert corrected.frames[0].score == 17
        assert corrected.total_score == 80

    def test_request_rejects_game_without_nine_frames(self):
        payload = _make_game().to_payload()
        payload["frames"] = payload["frames"][:5]
        with pytest.raises(ValueError):
            CorrectionRequest.model_validate({"game": payload, "frameIndex": 0, "rolls": []})


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
