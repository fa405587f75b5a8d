"""Classification, call priority, and risk flags derived from the three scores."""
from __future__ import annotations

import re
from datetime import datetime
from typing import Any, List, Optional, Tuple

import pandas as pd

from .models import (
    Buyer,
    CallPriority,
    Classification,
    ConfidenceScoreResult,
    FakeLeadCheckResult,
    IntentScoreResult,
    QualityScoreResult,
)
from .normalizers import (
    HOLIDAY_HOME,
    PAYMENT_MORTGAGE,
    first_present,
    get_payment_method,
    get_purchase_purpose,
    get_status,
    get_timeline,
    has_broker,
    has_timeline,
)

HOT_MIN_QUALITY = 70
HOT_MIN_INTENT = 70
HOT_MIN_CONFIDENCE = 60
LOW_PRIORITY_MAX_QUALITY = 40
NEEDS_QUALIFICATION_MAX_CONFIDENCE = 50
QUALIFIED_MIN_QUALITY = 60
QUALIFIED_MIN_INTENT = 50
QUALIFIED_MIN_CONFIDENCE = 50
NURTURE_MAX_INTENT = 50
NURTURE_MIN_QUALITY = 50

MAX_RISK_FLAGS = 5
MAX_FAKE_FLAGS_IN_RISK = 2
STALE_LEAD_DAYS = 60

APPROVED_MORTGAGE_STATUSES = ("approved", "aip")
UK_COUNTRIES = ("uk", "united kingdom", "england", "scotland", "wales", "ni", "northern ireland")

LOW_URGENCY_TIMELINE = re.compile(
    r"no\s*rush|flexible|eventually|someday|long\s*term|18\s*month|24\s*month|2\s*year",
    re.IGNORECASE,
)
LOW_URGENCY_STATUS_KEYWORDS = ("not proceeding", "cold", "lost")

TWENTY_EIGHT_DAY_PRIORITY = CallPriority(1, "28-Day Buyer - Immediate Priority", "Within 1 hour")
DEFAULT_PRIORITY = CallPriority(4, "Standard Priority", "Within 48 hours")

CALL_PRIORITIES = {
    Classification.HOT_LEAD: CallPriority(1, "Hot Lead - High Priority", "Within 2 hours"),
    Classification.QUALIFIED: CallPriority(2, "Qualified Lead - Same Day", "Within 4 hours"),
    Classification.NEEDS_QUALIFICATION: CallPriority(
        3, "Needs Qualification - Prompt Follow-up", "Within 24 hours"
    ),
    Classification.NURTURE: CallPriority(4, "Nurture Lead - Scheduled Follow-up", "Within 48 hours"),
    Classification.LOW_PRIORITY: CallPriority(5, "Low Priority - When Available", "Within 1 week"),
    Classification.DISQUALIFIED: CallPriority(5, "Disqualified - No Action Required", "N/A"),
}


def detect_low_urgency(buyer: Buyer) -> bool:
    """True when the lead shows long-horizon or disengaged signals."""

    if LOW_URGENCY_TIMELINE.search(get_timeline(buyer)):
        return True
    if get_purchase_purpose(buyer) == HOLIDAY_HOME and not has_timeline(buyer):
        return True
    status = get_status(buyer)
    return any(keyword in status for keyword in LOW_URGENCY_STATUS_KEYWORDS)


def determine_classification(
    quality: QualityScoreResult,
    intent: IntentScoreResult,
    confidence: ConfidenceScoreResult,
    fake_check: FakeLeadCheckResult,
    low_urgency: bool,
) -> Classification:
    """Apply the classification table top to bottom; the first match wins."""

    if quality.is_disqualified or fake_check.is_fake:
        return Classification.DISQUALIFIED

    # 28-day readiness overrides every score threshold.
    if intent.is_28_day_buyer:
        return Classification.HOT_LEAD

    if (
        quality.total >= HOT_MIN_QUALITY
        and intent.total >= HOT_MIN_INTENT
        and confidence.total >= HOT_MIN_CONFIDENCE
    ):
        return Classification.HOT_LEAD

    if quality.total < LOW_PRIORITY_MAX_QUALITY or low_urgency:
        return Classification.LOW_PRIORITY

    if confidence.total < NEEDS_QUALIFICATION_MAX_CONFIDENCE:
        return Classification.NEEDS_QUALIFICATION

    if (
        quality.total >= QUALIFIED_MIN_QUALITY
        and intent.total >= QUALIFIED_MIN_INTENT
        and confidence.total >= QUALIFIED_MIN_CONFIDENCE
    ):
        return Classification.QUALIFIED

    if intent.total < NURTURE_MAX_INTENT and quality.total >= NURTURE_MIN_QUALITY:
        return Classification.NURTURE

    return Classification.NEEDS_QUALIFICATION


def determine_call_priority(classification: Any, intent: IntentScoreResult) -> CallPriority:
    """Map a classification to its priority tier.

    The 28-day check runs before the table lookup, independently of the
    classifier's own 28-day rule.
    """

    if intent.is_28_day_buyer:
        return TWENTY_EIGHT_DAY_PRIORITY
    try:
        key = Classification(classification)
    except ValueError:
        return DEFAULT_PRIORITY
    return CALL_PRIORITIES.get(key, DEFAULT_PRIORITY)


def _as_utc(value: Any) -> Optional[pd.Timestamp]:
    if isinstance(value, bool):
        return None
    # Bare numbers are epoch milliseconds, as CRM exports write them.
    unit = "ms" if isinstance(value, (int, float)) else None
    try:
        stamp = pd.to_datetime(value, errors="coerce", utc=True, unit=unit)
    except (TypeError, ValueError, OverflowError):
        return None
    if not isinstance(stamp, pd.Timestamp) or pd.isna(stamp):
        return None
    return stamp


def lead_age_days(buyer: Buyer, now: Optional[datetime] = None) -> Optional[int]:
    """Whole days since the lead was added, or ``None`` when no valid date exists."""

    created = _as_utc(first_present(buyer.date_added, buyer.created_at))
    if created is None:
        return None
    reference = _as_utc(now) if now is not None else pd.Timestamp.now(tz="UTC")
    if reference is None:
        return None
    return (reference - created).days


def generate_risk_flags(
    buyer: Buyer,
    fake_check: FakeLeadCheckResult,
    quality: QualityScoreResult,
    *,
    now: Optional[datetime] = None,
) -> Tuple[str, ...]:
    """Collect caveats in a fixed order and keep the first :data:`MAX_RISK_FLAGS`."""

    flags: List[str] = list(fake_check.flags[:MAX_FAKE_FLAGS_IN_RISK])

    if quality.disqualification_reason:
        flags.append(quality.disqualification_reason)

    is_mortgage = get_payment_method(buyer) == PAYMENT_MORTGAGE
    mortgage_status = str(buyer.mortgage_status or "").strip().lower()
    if is_mortgage and not buyer.proof_of_funds and mortgage_status not in APPROVED_MORTGAGE_STATUSES:
        flags.append("Mortgage not yet approved")

    if not has_timeline(buyer) and not buyer.ready_in_28_days and not buyer.ready_within_28_days:
        flags.append("Timeline not specified")

    if is_mortgage and not has_broker(buyer):
        flags.append("Mortgage buyer without broker")

    country = str(buyer.country or "").strip().lower()
    if country and country not in UK_COUNTRIES:
        flags.append("International buyer - may need extended timeline")

    age = lead_age_days(buyer, now)
    if age is not None and age > STALE_LEAD_DAYS:
        flags.append(f"Lead is {age} days old")

    return tuple(flags[:MAX_RISK_FLAGS])
