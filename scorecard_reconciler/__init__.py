"""
Scorecard Reconciler — trustworthy bowling scores from AI-transcribed scorecards.

Architecture: Free-text reply → JSON extraction → Normalization → Recomputed totals → Issues + confidence
Philosophy:  Trust the model to read. Trust only bowling math to score.
"""

__version__ = "1.0.0"
