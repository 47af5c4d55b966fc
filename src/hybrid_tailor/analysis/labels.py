"""Score bucketing shared by every analyzer and the quality scorer."""

from __future__ import annotations

import math

from hybrid_tailor.models.analysis import ScoreLabel

# Lower bound of each bucket; a boundary value belongs to the higher bucket.
SCORE_THRESHOLDS: tuple[tuple[ScoreLabel, int], ...] = (
    ("exceptional", 85),
    ("strong", 65),
    ("moderate", 40),
    ("weak", 0),
)


def clamp_score(value: float) -> int:
    """Round half-up and clamp to an integer in 0-100."""
    return max(0, min(100, math.floor(value + 0.5)))


def score_label(score: int | float) -> ScoreLabel:
    for label, lower in SCORE_THRESHOLDS:
        if score >= lower:
            return label
    return "weak"


def percentage(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return clamp_score(100 * part / whole)
