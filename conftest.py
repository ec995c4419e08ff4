"""Pytest configuration — ensures the project root is importable."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))


@pytest.fixture
def pipeline():
    """A fresh reconciliation pipeline (it holds no state, but tests should not share one)."""
    from scorecard_reconciler.pipeline import ReconciliationPipeline

    return ReconciliationPipeline()
