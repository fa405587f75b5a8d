"""Adapter mapping Naybourhood results onto the older flat ``ai_*`` schema."""
from __future__ import annotations

from typing import Dict

from .models import Classification, LegacyScoreFields, NaybourhoodScoreResult

LEGACY_CLASSIFICATIONS: Dict[Classification, str] = {
    Classification.HOT_LEAD: "Hot",
    Classification.QUALIFIED: "Warm-Qualified",
    Classification.NEEDS_QUALIFICATION: "Nurture-Standard",
    Classification.NURTURE: "Nurture-Premium",
    Classification.LOW_PRIORITY: "Cold",
    Classification.DISQUALIFIED: "Disqualified",
}

LEGACY_PRIORITIES: Dict[int, str] = {1: "P1", 2: "P2", 3: "P3", 4: "P4", 5: "P4"}
DEFAULT_LEGACY_PRIORITY = "P4"

# Legacy confidence is on a 0-10 scale.
LEGACY_CONFIDENCE_DIVISOR = 10


def convert_to_legacy_format(result: NaybourhoodScoreResult) -> LegacyScoreFields:
    classification = LEGACY_CLASSIFICATIONS.get(result.classification, str(result.classification))
    return LegacyScoreFields(
        ai_quality_score=result.quality_score.total,
        ai_intent_score=result.intent_score.total,
        ai_confidence=result.confidence_score.total / LEGACY_CONFIDENCE_DIVISOR,
        ai_classification=classification,
        ai_priority=LEGACY_PRIORITIES.get(result.call_priority.level, DEFAULT_LEGACY_PRIORITY),
        ai_risk_flags=tuple(result.risk_flags),
    )
