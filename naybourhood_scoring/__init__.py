"""Top-level package for the Naybourhood lead scoring engine."""

from . import models  # noqa: F401
from .legacy import convert_to_legacy_format
from .models import (
    Buyer,
    CallPriority,
    Classification,
    ConfidenceScoreResult,
    FakeLeadCheckResult,
    IntentScoreResult,
    LegacyScoreFields,
    NaybourhoodScoreResult,
    QualityScoreResult,
    ScoreBreakdown,
    ScoredLead,
)
from .nb_score import calculate_nb_score, get_nb_score_color, nb_score_for
from .orchestrator import ScoringOrchestrator, score_lead_naybourhood

__all__ = [
    "Buyer",
    "CallPriority",
    "Classification",
    "ConfidenceScoreResult",
    "FakeLeadCheckResult",
    "IntentScoreResult",
    "LegacyScoreFields",
    "NaybourhoodScoreResult",
    "QualityScoreResult",
    "ScoreBreakdown",
    "ScoredLead",
    "ScoringOrchestrator",
    "calculate_nb_score",
    "convert_to_legacy_format",
    "get_nb_score_color",
    "nb_score_for",
    "score_lead_naybourhood",
    "ingestion",
    "orchestrator",
]
