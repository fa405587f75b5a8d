"""Quality, intent, and confidence scorers.

Each scorer is an ordered tuple of rules. A rule inspects the buyer and
returns a :class:`ScoreBreakdown` or ``None``; the scorer sums the points of
the entries that fired and keeps them in rule order.
"""
from __future__ import annotations

from typing import Callable, Dict, Iterable, Optional, Tuple

from .models import (
    Buyer,
    ConfidenceScoreResult,
    IntentScoreResult,
    QualityScoreResult,
    ScoreBreakdown,
    is_present,
)
from .normalizers import (
    DEPENDENT_STUDYING,
    HOLIDAY_HOME,
    INVESTMENT,
    PAYMENT_CASH,
    PAYMENT_MORTGAGE,
    PRIMARY_RESIDENCE,
    SOURCE_FORM,
    SOURCE_WHATSAPP,
    first_present,
    get_bedrooms,
    get_budget,
    get_payment_method,
    get_purchase_purpose,
    get_source_type,
    get_timeline_months,
    has_broker,
    has_name,
    is_28_day_ready,
    wants_broker,
)

Rule = Callable[[Buyer], Optional[ScoreBreakdown]]

MIN_SCORE = 0
MAX_SCORE = 100

DISQUALIFY_MIN_BUDGET = 2_000_000
DISQUALIFY_MAX_BEDROOMS = 1
DISQUALIFICATION_REASON = "£2M+ budget with studio/1-bed preference is unrealistic"

SHORT_TIMELINE_MONTHS = 3
LONG_TIMELINE_MONTHS = 6


def clamp_score(total: float) -> int:
    return int(min(MAX_SCORE, max(MIN_SCORE, total)))


def _fold(buyer: Buyer, rules: Iterable[Rule]) -> Tuple[int, Tuple[ScoreBreakdown, ...]]:
    breakdown = tuple(entry for entry in (rule(buyer) for rule in rules) if entry is not None)
    return clamp_score(sum(entry.points for entry in breakdown)), breakdown


def _purpose_rule(table: Dict[str, ScoreBreakdown]) -> Rule:
    def rule(buyer: Buyer) -> Optional[ScoreBreakdown]:
        return table.get(get_purchase_purpose(buyer))

    return rule


# --- Quality: financial proceedability > commitment > realism ---

def _financial_proceedability(buyer: Buyer) -> Optional[ScoreBreakdown]:
    payment_method = get_payment_method(buyer)
    if payment_method == PAYMENT_CASH:
        return ScoreBreakdown("Cash Buyer", 30, "Cash buyer - highest financial proceedability")
    if payment_method != PAYMENT_MORTGAGE:
        return None
    if wants_broker(buyer) and not has_broker(buyer):
        return ScoreBreakdown(
            "Mortgage + Wants Broker", 15, "Mortgage buyer who needs broker connection - opportunity for service"
        )
    if has_broker(buyer):
        return ScoreBreakdown(
            "Mortgage + Has Broker", 20, "Mortgage buyer with broker already connected - ready to proceed"
        )
    return ScoreBreakdown("Mortgage Buyer", 10, "Mortgage buyer - broker status unknown")


_QUALITY_PURPOSE = {
    PRIMARY_RESIDENCE: ScoreBreakdown("Primary Residence", 15, "Buying as primary residence - high commitment"),
    DEPENDENT_STUDYING: ScoreBreakdown(
        "Dependent Studying", 15, "Buying for dependent studying - specific need and timeline"
    ),
    INVESTMENT: ScoreBreakdown("Investment", 10, "Investment purchase"),
    HOLIDAY_HOME: ScoreBreakdown("Holiday/Second Home", 5, "Holiday or second home purchase - lower urgency"),
}


def _contact_realism(buyer: Buyer) -> ScoreBreakdown:
    present = [label for label, value in (("email", buyer.email), ("phone", buyer.phone)) if is_present(value)]
    named = has_name(buyer)
    if named:
        present.append("name")

    if named and is_present(buyer.email) and is_present(buyer.phone):
        return ScoreBreakdown(
            "Complete Contact Info", 10, f"Complete contact information provided: {', '.join(present)}"
        )
    return ScoreBreakdown(
        "Incomplete Contact Info", 0, f"Missing contact information (has: {', '.join(present) or 'none'})"
    )


QUALITY_RULES: Tuple[Rule, ...] = (
    _financial_proceedability,
    _purpose_rule(_QUALITY_PURPOSE),
    _contact_realism,
)


def is_disqualified(buyer: Buyer) -> bool:
    bedrooms = get_bedrooms(buyer)
    return (
        get_budget(buyer) >= DISQUALIFY_MIN_BUDGET
        and bedrooms is not None
        and bedrooms <= DISQUALIFY_MAX_BEDROOMS
    )


def calculate_quality_score(buyer: Buyer) -> QualityScoreResult:
    """Score how likely the buyer is to be able to complete a purchase (0-100)."""

    if is_disqualified(buyer):
        return QualityScoreResult(
            total=0,
            breakdown=(
                ScoreBreakdown(
                    "Auto-Disqualification",
                    -100,
                    "£2M+ budget with studio/1-bed preference - mismatch indicates low quality lead",
                ),
            ),
            is_disqualified=True,
            disqualification_reason=DISQUALIFICATION_REASON,
        )

    total, breakdown = _fold(buyer, QUALITY_RULES)
    return QualityScoreResult(total=total, breakdown=breakdown)


# --- Intent: the 28-day hard rule dominates ---

def _purchase_timeline(buyer: Buyer) -> Optional[ScoreBreakdown]:
    if is_28_day_ready(buyer):
        return ScoreBreakdown(
            "28-Day Purchase Intent",
            40,
            "HARD RULE: Ready to purchase within 28 days - automatically qualifies as Hot Lead",
        )
    months = get_timeline_months(buyer)
    if months is None:
        return None
    if months <= SHORT_TIMELINE_MONTHS:
        return ScoreBreakdown("Timeline 3 Months", 25, "Looking to purchase within 3 months")
    if months >= LONG_TIMELINE_MONTHS:
        return ScoreBreakdown("Timeline 6+ Months", 5, "Longer timeline (6+ months)")
    return None


_INTENT_PURPOSE = {
    DEPENDENT_STUDYING: ScoreBreakdown(
        "Dependent Studying", 25, "Buying for dependent studying - specific timeline requirement"
    ),
    PRIMARY_RESIDENCE: ScoreBreakdown("Primary Residence", 20, "Primary residence purchase - genuine need"),
    INVESTMENT: ScoreBreakdown("Investment", 10, "Investment purchase"),
    HOLIDAY_HOME: ScoreBreakdown("Holiday/Second Home", 5, "Holiday or second home - less urgent"),
}


def _broker_seeking(buyer: Buyer) -> Optional[ScoreBreakdown]:
    if wants_broker(buyer) and not has_broker(buyer):
        return ScoreBreakdown("Wants Broker", 10, "Actively seeking broker connection - shows intent to proceed")
    return None


def _source_intent(buyer: Buyer) -> Optional[ScoreBreakdown]:
    source = get_source_type(buyer)
    if source == SOURCE_FORM:
        return ScoreBreakdown("Source: Form", 10, "Inquiry via form submission - deliberate action")
    if source == SOURCE_WHATSAPP:
        return ScoreBreakdown("Source: WhatsApp", 5, "WhatsApp inquiry - engaged but informal")
    return None


INTENT_RULES: Tuple[Rule, ...] = (
    _purchase_timeline,
    _purpose_rule(_INTENT_PURPOSE),
    _broker_seeking,
    _source_intent,
)


def calculate_intent_score(buyer: Buyer) -> IntentScoreResult:
    """Score how soon and how seriously the buyer intends to purchase (0-100)."""

    total, breakdown = _fold(buyer, INTENT_RULES)
    return IntentScoreResult(total=total, breakdown=breakdown, is_28_day_buyer=is_28_day_ready(buyer))


# --- Confidence: data completeness only ---

def _completeness_rule(factor: str, points: int, reason: str, check: Callable[[Buyer], bool]) -> Rule:
    entry = ScoreBreakdown(factor, points, reason)

    def rule(buyer: Buyer) -> Optional[ScoreBreakdown]:
        return entry if check(buyer) else None

    return rule


def _any_field(*names: str) -> Callable[[Buyer], bool]:
    return lambda buyer: first_present(*(getattr(buyer, name) for name in names)) is not None


CONFIDENCE_RULES: Tuple[Rule, ...] = (
    _completeness_rule("Name", 10, "Name provided", has_name),
    _completeness_rule("Email", 15, "Email provided", _any_field("email")),
    _completeness_rule("Phone", 15, "Phone provided", _any_field("phone")),
    _completeness_rule("Budget", 10, "Budget specified", _any_field("budget", "budget_range", "budget_min")),
    _completeness_rule("Payment Method", 10, "Payment method specified", _any_field("payment_method")),
    _completeness_rule("Proof of Funds", 5, "Proof of funds provided", lambda buyer: bool(buyer.proof_of_funds)),
    _completeness_rule("Timeline", 10, "Timeline specified", _any_field("timeline", "timeline_to_purchase")),
    _completeness_rule(
        "Bedrooms", 5, "Bedroom preference specified", _any_field("bedrooms", "preferred_bedrooms")
    ),
    _completeness_rule("Location", 5, "Location preference specified", _any_field("location", "area")),
    _completeness_rule("Source", 10, "Lead source tracked", _any_field("source", "source_platform")),
    _completeness_rule("Purpose", 5, "Purchase purpose specified", _any_field("purpose", "purchase_purpose")),
)


def calculate_confidence_score(buyer: Buyer) -> ConfidenceScoreResult:
    """Score how complete the buyer record is (0-100)."""

    total, breakdown = _fold(buyer, CONFIDENCE_RULES)
    return ConfidenceScoreResult(total=total, breakdown=breakdown)
