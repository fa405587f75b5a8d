"""Single-lead pipeline and batch orchestration for lead scoring."""

from .pipeline import score_lead_naybourhood
from .service import ScoringOrchestrator

__all__ = ["ScoringOrchestrator", "score_lead_naybourhood"]
