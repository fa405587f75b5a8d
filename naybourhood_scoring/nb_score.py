"""NB Score: the single weighted headline number shown for a lead."""
from __future__ import annotations

import math

from .legacy import LEGACY_CONFIDENCE_DIVISOR
from .models import NaybourhoodScoreResult

QUALITY_WEIGHT = 0.5
INTENT_WEIGHT = 0.3
CONFIDENCE_WEIGHT = 0.2

GREEN = "#34D399"
AMBER = "#FBBF24"
RED = "#EF4444"
GREEN_MIN_SCORE = 70
AMBER_MIN_SCORE = 40


def calculate_nb_score(quality: float = 0, intent: float = 0, confidence: float = 0) -> int:
    """Weighted blend of quality and intent (0-100) with confidence on the 0-10 scale.

    Halves round up, so 66.5 becomes 67.
    """

    normalised_confidence = (confidence / 10) * 100
    raw = quality * QUALITY_WEIGHT + intent * INTENT_WEIGHT + normalised_confidence * CONFIDENCE_WEIGHT
    return int(math.floor(raw + 0.5))


def get_nb_score_color(score: float) -> str:
    if score >= GREEN_MIN_SCORE:
        return GREEN
    if score >= AMBER_MIN_SCORE:
        return AMBER
    return RED


def nb_score_for(result: NaybourhoodScoreResult) -> int:
    return calculate_nb_score(
        result.quality_score.total,
        result.intent_score.total,
        result.confidence_score.total / LEGACY_CONFIDENCE_DIVISOR,
    )
