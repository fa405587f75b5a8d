"""Single-lead scoring pipeline."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from ..classification import (
    detect_low_urgency,
    determine_call_priority,
    determine_classification,
    generate_risk_flags,
)
from ..fake_detection import detect_fake_lead
from ..models import Buyer, NaybourhoodScoreResult
from ..scorers import calculate_confidence_score, calculate_intent_score, calculate_quality_score

LOGGER = logging.getLogger(__name__)

BuyerLike = Union[Buyer, Mapping[str, Any]]


def as_buyer(buyer: BuyerLike) -> Buyer:
    if isinstance(buyer, Buyer):
        return buyer
    return Buyer.from_mapping(buyer)


def score_lead_naybourhood(buyer: BuyerLike, *, now: Optional[datetime] = None) -> NaybourhoodScoreResult:
    """Run the full scoring pipeline for one lead.

    Stages run in a fixed order (fake check, low-urgency flag, quality,
    intent, confidence, classification, call priority, risk flags) and each
    only reads the outputs of earlier stages. ``now`` is the reference time
    for the lead-age risk flag and defaults to the current UTC time.
    """

    record = as_buyer(buyer)

    fake_lead_check = detect_fake_lead(record)
    low_urgency_flag = detect_low_urgency(record)
    quality_score = calculate_quality_score(record)
    intent_score = calculate_intent_score(record)
    confidence_score = calculate_confidence_score(record)

    classification = determine_classification(
        quality_score,
        intent_score,
        confidence_score,
        fake_lead_check,
        low_urgency_flag,
    )
    call_priority = determine_call_priority(classification, intent_score)
    risk_flags = generate_risk_flags(record, fake_lead_check, quality_score, now=now)

    LOGGER.debug(
        "Scored %s: quality=%s intent=%s confidence=%s -> %s (P%s)",
        record.display_name(),
        quality_score.total,
        intent_score.total,
        confidence_score.total,
        classification.value,
        call_priority.level,
    )

    return NaybourhoodScoreResult(
        fake_lead_check=fake_lead_check,
        quality_score=quality_score,
        intent_score=intent_score,
        confidence_score=confidence_score,
        classification=classification,
        call_priority=call_priority,
        risk_flags=risk_flags,
        is_28_day_buyer=intent_score.is_28_day_buyer,
        low_urgency_flag=low_urgency_flag,
    )
