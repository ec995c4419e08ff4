#!/usr/bin/env python3
"""
Scorecard Reconciler — Entry Point
===================================

Demonstrates the reconciliation pipeline on a sample vision-model reply.

Usage:
    python main.py
"""

from __future__ import annotations

import logging
import sys

from scorecard_reconciler.display import game_display
from scorecard_reconciler.models import Game, ReconciliationReport
from scorecard_reconciler.pipeline import ReconciliationPipeline


# ─── A Model Reply — Chatty and Slightly Wrong on Purpose ───────────

SAMPLE_REPLY = """\
Here is the transcription of the scorecard:

```json
{
  "success": true,
  "failureReason": null,
  "players": [
    {
      "playerName": "M.C.B.",
      "frames": [
        {"frameNumber": 1, "rolls": [{"pins": 10}], "isStrike": true, "runningTotal": 29},
        {"frameNumber": 2, "rolls": [{"pins": 10}], "isStrike": true, "runningTotal": 49},
        {"frameNumber": 3, "rolls": [{"pins": 9}, {"pins": 1}], "isSpare": true, "runningTotal": 68},
        {"frameNumber": 4, "rolls": [{"pins": 9}, {"pins": 1}], "isSpare": true, "runningTotal": 87},
        {"frameNumber": 5, "rolls": [{"pins": 9}, {"pins": 1}], "isSpare": true, "runningTotal": 107},
        {"frameNumber": 6, "rolls": [{"pins": 10}], "isStrike": true, "runningTotal": 137},
        {"frameNumber": 7, "rolls": [{"pins": 10}], "isStrike": true, "runningTotal": 166},
        {"frameNumber": 8, "rolls": [{"pins": 10}], "isStrike": true, "runningTotal": 185},
        {"frameNumber": 9, "rolls": [{"pins": 9}, {"pins": 0}], "runningTotal": 194},
        {"frameNumber": 10, "rolls": [10, 10, 10], "isStrike": true, "runningTotal": 224}
      ],
      "totalScore": 224
    },
    {
      "playerName": "  Jo  ",
      "frames": [
        {"frameNumber": 1, "rolls": [7, 2], "runningTotal": 9},
        {"frameNumber": 2, "rolls": [8, 6], "isSpare": true, "runningTotal": 19},
        {"frameNumber": 3, "rolls": [10, 4], "runningTotal": 40},
        {"frameNumber": 4, "rolls": [6, 3], "runningTotal": 49},
        {"frameNumber": 5, "rolls": [5, 5], "isSpare": true, "runningTotal": 67},
        {"frameNumber": 6, "rolls": [8, 1], "runningTotal": 76}
      ],
      "totalScore": 131,
    }
  ]
}
```
Let me know if you need anything else!"""


# ─── ANSI Color Constants ───────────────────────────────────────────

_RED = "\033[91m"
_YELLOW = "\033[93m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 72


# ─── Pretty Printer Helpers ─────────────────────────────────────────


def _print_scorecard(game: Game) -> None:
    """Print the ten frame boxes as a two-line scorecard."""
    boxes = game_display(game)
    marks = []
    totals = []
    for box in boxes:
        rolls = " ".join(s or " " for s in (box.roll1, box.roll2, box.roll3) if s is not None)
        marks.append(f"{rolls:^7}")
        totals.append(f"{box.frame_score if box.frame_score is not None else '':^7}")
    print(f"  {_DIM}|{_RESET}" + f"{_DIM}|{_RESET}".join(marks) + f"{_DIM}|{_RESET}")
    print(f"  {_DIM}|{_RESET}" + f"{_DIM}|{_RESET}".join(totals) + f"{_DIM}|{_RESET}")


def _confidence_color(confidence: float | None) -> str:
    if confidence is None or confidence >= 0.85:
        return _GREEN
    if confidence >= 0.5:
        return _YELLOW
    return _RED


def _print_game(game: Game) -> None:
    """Print one reconciled game with its issues."""
    color = _confidence_color(game.confidence)
    print(f"\n  {_BOLD}{game.player_name}{_RESET}  total {_BOLD}{game.total_score}{_RESET}"
          f"  confidence {color}{game.confidence:.2f}{_RESET}")
    _print_scorecard(game)
    if game.issues:
        print(f"\n  {_YELLOW}{_BOLD}ISSUES ({len(game.issues)}){_RESET}")
        for issue in game.issues:
            print(f"    {issue}")


# ─── Pretty Printer ─────────────────────────────────────────────────


def print_report(report: ReconciliationReport) -> int:
    """Pretty-print the reconciliation report with ANSI color codes.

    Returns:
        0 if at least one game was extracted, 1 otherwise.
    """
    print(f"\n{'=' * _WIDTH}")
    print(f"{_BOLD}{_CYAN}  SCORECARD RECONCILIATION REPORT{_RESET}")
    print(f"{'=' * _WIDTH}")
    print(f"  Audit Hash:  {_DIM}{report.original_hash[:16]}...{_RESET}")
    print(f"  Players:     {len(report.games)}")
    print(f"{'─' * _WIDTH}")

    for game in report.games:
        _print_game(game)

    print(f"\n{'=' * _WIDTH}")
    if report.extracted:
        clean = sum(1 for g in report.games if not g.issues)
        print(f"  {_GREEN}{_BOLD}{clean}/{len(report.games)} GAME(S) RECONCILED CLEANLY{_RESET}")
    else:
        print(f"  {_RED}{_BOLD}NOTHING EXTRACTED  --  {report.failure_reason}{_RESET}")
    print(f"{'=' * _WIDTH}\n")

    return 0 if report.extracted else 1


# ─── Main ────────────────────────────────────────────────────────────


def main():
    """Run the reconciliation pipeline on the sample reply and print the report."""
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    print("\n  Starting Scorecard Reconciler...")
    print("  Reconciling sample model reply...\n")

    pipeline = ReconciliationPipeline()
    report = pipeline.run(SAMPLE_REPLY)
    exit_code = print_report(report)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
