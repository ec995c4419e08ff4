"""
Reconciliation pipeline — from a vision model's reply to trustworthy games.

Flow:
  ┌──────────────┐
  │ Model reply  │   free text, maybe fenced, maybe truncated
  └──────┬───────┘
         │
  ┌──────▼───────┐
  │ JSON extract │   ← json_text.extract_json_from_text
  └──────┬───────┘
         │
  ┌──────▼───────┐
  │  Reconciler  │   ← clamp, rescore, compare printed totals
  └──────┬───────┘
         │
  ┌──────▼───────┐
  │    Report    │   ← games + issues + confidence + audit hash
  └──────────────┘

Design principles:
  - No exceptions escape ``run``: an unreadable reply is an empty report with
    a failure reason, which the caller may retry.
  - The raw reply is SHA-256 hashed for audit trail.
  - Issues are returned on each game, never logged as warnings here.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Mapping

from .exceptions import PayloadParseError
from .json_text import extract_json_from_text
from .models import ExtractionPayload, ReconciliationReport
from .reconciler import convert_extraction_payload

logger = logging.getLogger(__name__)


class ReconciliationPipeline:
    """Turns vision-model output into reconciled games.

    Usage:
        pipeline = ReconciliationPipeline()
        report = pipeline.run(reply_text)
        if not report.extracted:
            # nothing usable — retry the provider or give up
            ...
        for game in report.games:
            print(game.player_name, game.total_score, game.issues)
    """

    def run(self, raw_text: str) -> ReconciliationReport:
        """Parse and reconcile a free-text model reply.

        Args:
            raw_text: The model's reply, expected to contain a JSON payload.

        Returns:
            ReconciliationReport; ``extracted`` is False when no game came out.
        """
        doc_hash = hashlib.sha256((raw_text or "").encode("utf-8")).hexdigest()

        try:
            payload = extract_json_from_text(raw_text)
        except PayloadParseError as e:
            logger.info("No JSON payload recovered from model reply: %s", e)
            return ReconciliationReport(
                games=[],
                extracted=False,
                failure_reason=str(e),
                original_hash=doc_hash,
            )

        report = self.reconcile(payload)
        return report.model_copy(update={"original_hash": doc_hash})

    def reconcile(self, payload: object) -> ReconciliationReport:
        """Reconcile an already-parsed payload."""
        games = convert_extraction_payload(payload)
        logger.info("Reconciled %d game(s)", len(games))

        failure_reason = None
        if isinstance(payload, Mapping):
            reported = ExtractionPayload.from_untrusted(payload).failure_reason
            if isinstance(reported, str) and reported.strip():
                failure_reason = reported.strip()
        if not games and failure_reason is None:
            failure_reason = "No player data found in extraction payload"

        return ReconciliationReport(
            games=games,
            extracted=bool(games),
            failure_reason=failure_reason,
        )
