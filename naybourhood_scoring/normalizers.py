"""Field extractors that coerce loosely-typed, multi-aliased buyer fields into canonical values.

Every helper is total: malformed or missing input degrades to ``0``, ``None``
or ``"unknown"`` instead of raising.
"""
from __future__ import annotations

import math
import re
from typing import Any, Optional, Pattern, Sequence, Tuple, Union

from .models import Buyer, is_present

Number = Union[int, float]

# Purpose categories
PRIMARY_RESIDENCE = "primary_residence"
DEPENDENT_STUDYING = "dependent_studying"
INVESTMENT = "investment"
HOLIDAY_HOME = "holiday_home"
UNKNOWN = "unknown"

# Source categories
SOURCE_FORM = "form"
SOURCE_WHATSAPP = "whatsapp"
SOURCE_EMAIL = "email"
SOURCE_PHONE = "phone"
SOURCE_REFERRAL = "referral"

PAYMENT_CASH = "cash"
PAYMENT_MORTGAGE = "mortgage"

_THOUSAND = 1_000
_MILLION = 1_000_000

# First matching family wins; order is business policy.
PURPOSE_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (PRIMARY_RESIDENCE, ("primary", "residence", "home")),
    (DEPENDENT_STUDYING, ("dependent", "studying", "student")),
    (INVESTMENT, ("investment", "btl", "buy to let")),
    (HOLIDAY_HOME, ("holiday", "second", "vacation")),
)

SOURCE_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    (SOURCE_FORM, ("form", "website", "landing")),
    (SOURCE_WHATSAPP, ("whatsapp", "wa")),
    (SOURCE_EMAIL, ("email",)),
    (SOURCE_PHONE, ("phone", "call")),
    (SOURCE_REFERRAL, ("referral",)),
)

TWENTY_EIGHT_DAY_PATTERN = re.compile(
    r"28\s*days?|immediate|asap|now|urgent|ready\s*to\s*(buy|purchase)|next\s*week",
    re.IGNORECASE,
)

# (months, pattern) evaluated top to bottom. Nothing maps to 4-5 months.
TIMELINE_MONTH_BUCKETS: Tuple[Tuple[int, Pattern[str]], ...] = (
    (1, re.compile(r"immediate|asap|now|28\s*days?|1\s*month|urgent", re.IGNORECASE)),
    (3, re.compile(r"1-3|2-3|3\s*months?|soon|short", re.IGNORECASE)),
    (6, re.compile(r"3-6|6\s*months?|half\s*year", re.IGNORECASE)),
    (12, re.compile(r"6-12|12\s*months?|year", re.IGNORECASE)),
    (18, re.compile(r"long|flexible|no\s*rush|18|24", re.IGNORECASE)),
)

_CURRENCY_NOISE = re.compile(r"[£$€,\s]")
_BUDGET_RANGE = re.compile(r"(\d+\.?\d*)(k|m)?(?:-|–|—|to)+(\d+\.?\d*)(k|m)?")
_BUDGET_SINGLE = re.compile(r"^(\d+\.?\d*)(k|m)?$")
_LEADING_FLOAT = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?")


def _text(value: Any) -> str:
    if not is_present(value):
        return ""
    return str(value).strip().lower()


def first_present(*values: Any) -> Any:
    """Return the first value that carries data, else ``None``."""

    for value in values:
        if is_present(value):
            return value
    return None


def _leading_float(text: str) -> Optional[float]:
    match = _LEADING_FLOAT.match(text)
    if not match:
        return None
    try:
        return float(match.group(0))
    except ValueError:
        return None


def _suffix_multiplier(suffix: Optional[str]) -> int:
    if suffix == "k":
        return _THOUSAND
    if suffix == "m":
        return _MILLION
    return 1


def parse_budget(value: Any) -> float:
    """Parse a budget string or number, returning the lower bound of ranges.

    >>> parse_budget("500k-750k")
    500000.0
    >>> parse_budget("£1.5M")
    1500000.0
    """

    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return 0.0
        return float(value)

    cleaned = _CURRENCY_NOISE.sub("", str(value)).lower()
    if not cleaned:
        return 0.0

    range_match = _BUDGET_RANGE.search(cleaned)
    if range_match:
        return float(range_match.group(1)) * _suffix_multiplier(range_match.group(2))

    single_match = _BUDGET_SINGLE.match(cleaned)
    if single_match:
        return float(single_match.group(1)) * _suffix_multiplier(single_match.group(2))

    return _leading_float(cleaned) or 0.0


def get_budget(buyer: Buyer) -> float:
    return parse_budget(first_present(buyer.budget, buyer.budget_range, buyer.budget_min))


def _to_number(value: Any) -> Optional[Number]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return None
        return value
    number = _leading_float(str(value).strip().lower())
    if number is None:
        return None
    return int(number) if number.is_integer() else number


def get_bedrooms(buyer: Buyer) -> Optional[Number]:
    """``bedrooms`` wins over ``preferred_bedrooms``; ``0`` (studio) is a real value."""

    raw = first_present(buyer.bedrooms, buyer.preferred_bedrooms)
    if raw is None:
        return None
    return _to_number(raw)


def _uk_broker(buyer: Buyer) -> str:
    if buyer.uk_broker is None:
        return ""
    return str(buyer.uk_broker).strip().lower()


def wants_broker(buyer: Buyer) -> bool:
    return _uk_broker(buyer) in ("no", "unknown") or buyer.connect_to_broker is True


def has_broker(buyer: Buyer) -> bool:
    return _uk_broker(buyer) in ("yes", "introduced", "true")


def get_name(buyer: Buyer) -> str:
    if is_present(buyer.full_name):
        return str(buyer.full_name)
    return f"{buyer.first_name or ''} {buyer.last_name or ''}".strip()


def has_name(buyer: Buyer) -> bool:
    return is_present(buyer.full_name) or is_present(buyer.first_name)


def get_timeline(buyer: Buyer) -> str:
    return _text(first_present(buyer.timeline, buyer.timeline_to_purchase))


def has_timeline(buyer: Buyer) -> bool:
    return first_present(buyer.timeline, buyer.timeline_to_purchase) is not None


def get_payment_method(buyer: Buyer) -> str:
    return _text(buyer.payment_method)


def get_status(buyer: Buyer) -> str:
    return _text(buyer.status)


def _match_keywords(text: str, table: Sequence[Tuple[str, Tuple[str, ...]]]) -> Optional[str]:
    for category, keywords in table:
        if any(keyword in text for keyword in keywords):
            return category
    return None


def get_purchase_purpose(buyer: Buyer) -> str:
    purpose = _text(first_present(buyer.purpose, buyer.purchase_purpose))
    return _match_keywords(purpose, PURPOSE_KEYWORDS) or purpose or UNKNOWN


def is_28_day_ready(buyer: Buyer) -> bool:
    if buyer.ready_in_28_days is True or buyer.ready_within_28_days is True:
        return True
    return bool(TWENTY_EIGHT_DAY_PATTERN.search(get_timeline(buyer)))


def get_timeline_months(buyer: Buyer) -> Optional[int]:
    timeline = get_timeline(buyer)
    if not timeline:
        return None
    for months, pattern in TIMELINE_MONTH_BUCKETS:
        if pattern.search(timeline):
            return months
    return None


def get_source_type(buyer: Buyer) -> str:
    source = _text(first_present(buyer.source, buyer.source_platform))
    return _match_keywords(source, SOURCE_KEYWORDS) or source or UNKNOWN
