"""Data models shared by the scoring pipeline, batch orchestrator, and exporters."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

Number = Union[int, float]


def is_present(value: Any) -> bool:
    """Return ``True`` when a loosely-typed field actually carries data.

    ``None``, ``False`` and blank strings count as absent; numeric zero is a
    real value (a studio is ``0`` bedrooms).
    """

    if value is None or value is False:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


# --- Core Input Model ---

@dataclass(frozen=True, slots=True)
class Buyer:
    """Raw lead record consumed by the scorer. Every field is optional."""

    # Identity
    full_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    country: Optional[str] = None

    # Financial
    payment_method: Optional[str] = None
    proof_of_funds: Optional[bool] = None
    mortgage_status: Optional[str] = None
    budget: Optional[Union[str, Number]] = None
    budget_range: Optional[Union[str, Number]] = None
    budget_min: Optional[Union[str, Number]] = None

    # Property preference
    bedrooms: Optional[Union[str, Number]] = None
    preferred_bedrooms: Optional[Union[str, Number]] = None
    location: Optional[str] = None
    area: Optional[str] = None

    # Intent / timeline
    timeline: Optional[str] = None
    timeline_to_purchase: Optional[str] = None
    ready_in_28_days: Optional[bool] = None
    ready_within_28_days: Optional[bool] = None

    # Relationship status
    uk_broker: Optional[Union[str, bool]] = None
    connect_to_broker: Optional[bool] = None

    # Purpose
    purpose: Optional[str] = None
    purchase_purpose: Optional[str] = None

    # Provenance
    source: Optional[str] = None
    source_platform: Optional[str] = None
    created_at: Optional[Any] = None
    date_added: Optional[Any] = None

    status: Optional[str] = None

    # Columns the scorer does not read, carried through to exports.
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        extra = self.extra if isinstance(self.extra, Mapping) else {"extra": self.extra}
        object.__setattr__(self, "extra", MappingProxyType(dict(extra)))

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls) if f.name != "extra")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Buyer":
        """Build a record from a loose mapping, keeping unknown keys in ``extra``.

        A nested ``extra`` mapping is merged in; any other ``extra`` value is
        kept as-is under the ``"extra"`` key.
        """

        known = set(cls.field_names())
        values = {key: value for key, value in data.items() if key in known}
        extra = {key: value for key, value in data.items() if key not in known and key != "extra"}
        nested = data.get("extra")
        if isinstance(nested, Mapping):
            extra.update(nested)
        elif nested is not None:
            extra["extra"] = nested
        return cls(**values, extra=extra)

    def display_name(self) -> str:
        """Return a readable name for logs and exports."""

        if is_present(self.full_name):
            return str(self.full_name).strip()
        parts = (self.first_name, self.last_name)
        return " ".join(str(part).strip() for part in parts if is_present(part)) or "(Unnamed Lead)"


# --- Scoring Result Models ---

class Classification(str, Enum):
    """Final categorical label assigned to a lead."""

    HOT_LEAD = "Hot Lead"
    QUALIFIED = "Qualified"
    NEEDS_QUALIFICATION = "Needs Qualification"
    NURTURE = "Nurture"
    LOW_PRIORITY = "Low Priority"
    DISQUALIFIED = "Disqualified"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    """One rule's contribution to a score."""

    factor: str
    points: int
    reason: str

    def as_dict(self) -> Dict[str, Any]:
        return {"factor": self.factor, "points": self.points, "reason": self.reason}


def _breakdown_dicts(breakdown: Tuple[ScoreBreakdown, ...]) -> list:
    return [entry.as_dict() for entry in breakdown]


@dataclass(frozen=True, slots=True)
class FakeLeadCheckResult:
    is_fake: bool
    flags: Tuple[str, ...] = ()
    confidence: float = 0.0

    def as_dict(self) -> Dict[str, Any]:
        return {"isFake": self.is_fake, "flags": list(self.flags), "confidence": self.confidence}


@dataclass(frozen=True, slots=True)
class QualityScoreResult:
    total: int
    breakdown: Tuple[ScoreBreakdown, ...] = ()
    is_disqualified: bool = False
    disqualification_reason: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "total": self.total,
            "breakdown": _breakdown_dicts(self.breakdown),
            "isDisqualified": self.is_disqualified,
        }
        if self.disqualification_reason:
            data["disqualificationReason"] = self.disqualification_reason
        return data


@dataclass(frozen=True, slots=True)
class IntentScoreResult:
    total: int
    breakdown: Tuple[ScoreBreakdown, ...] = ()
    is_28_day_buyer: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "breakdown": _breakdown_dicts(self.breakdown),
            "is28DayBuyer": self.is_28_day_buyer,
        }


@dataclass(frozen=True, slots=True)
class ConfidenceScoreResult:
    total: int
    breakdown: Tuple[ScoreBreakdown, ...] = ()

    def as_dict(self) -> Dict[str, Any]:
        return {"total": self.total, "breakdown": _breakdown_dicts(self.breakdown)}


@dataclass(frozen=True, slots=True)
class CallPriority:
    """Urgency tier (1 is highest) with its response-time SLA."""

    level: int
    description: str
    response_time: str

    def as_dict(self) -> Dict[str, Any]:
        return {"level": self.level, "description": self.description, "responseTime": self.response_time}


@dataclass(frozen=True, slots=True)
class NaybourhoodScoreResult:
    """Full output of :func:`naybourhood_scoring.score_lead_naybourhood`."""

    fake_lead_check: FakeLeadCheckResult
    quality_score: QualityScoreResult
    intent_score: IntentScoreResult
    confidence_score: ConfidenceScoreResult
    classification: Classification
    call_priority: CallPriority
    risk_flags: Tuple[str, ...]
    is_28_day_buyer: bool
    low_urgency_flag: bool

    def as_dict(self) -> Dict[str, Any]:
        """Return the nested camelCase shape consumed by dashboard code."""

        return {
            "fakeLeadCheck": self.fake_lead_check.as_dict(),
            "qualityScore": self.quality_score.as_dict(),
            "intentScore": self.intent_score.as_dict(),
            "confidenceScore": self.confidence_score.as_dict(),
            "classification": self.classification.value,
            "callPriority": self.call_priority.as_dict(),
            "riskFlags": list(self.risk_flags),
            "is28DayBuyer": self.is_28_day_buyer,
            "lowUrgencyFlag": self.low_urgency_flag,
        }

    def as_row(self) -> Dict[str, Any]:
        """Return a flat, serialisable representation of the result."""

        return {
            "quality_score": self.quality_score.total,
            "intent_score": self.intent_score.total,
            "confidence_score": self.confidence_score.total,
            "classification": self.classification.value,
            "call_priority": self.call_priority.level,
            "response_time": self.call_priority.response_time,
            "is_28_day_buyer": self.is_28_day_buyer,
            "low_urgency": self.low_urgency_flag,
            "is_fake": self.fake_lead_check.is_fake,
            "fake_confidence": self.fake_lead_check.confidence,
            "disqualified": self.quality_score.is_disqualified,
            "risk_flags": "; ".join(self.risk_flags),
        }


@dataclass(frozen=True, slots=True)
class LegacyScoreFields:
    """Flat score schema expected by older consumers."""

    ai_quality_score: int
    ai_intent_score: int
    ai_confidence: float
    ai_classification: str
    ai_priority: str
    ai_risk_flags: Tuple[str, ...] = ()

    def as_dict(self) -> Dict[str, Any]:
        return {
            "ai_quality_score": self.ai_quality_score,
            "ai_intent_score": self.ai_intent_score,
            "ai_confidence": self.ai_confidence,
            "ai_classification": self.ai_classification,
            "ai_priority": self.ai_priority,
            "ai_risk_flags": list(self.ai_risk_flags),
        }


# --- Batch Result ---

@dataclass(slots=True)
class ScoredLead:
    """A buyer paired with its scoring result, or the error that prevented it."""

    buyer: Buyer
    result: Optional[NaybourhoodScoreResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.result is not None and self.error is None
