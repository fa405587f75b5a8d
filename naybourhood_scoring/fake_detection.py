"""Spam and test-record detection, run before any scoring."""
from __future__ import annotations

import logging
import re
from typing import List, Pattern, Sequence

from .models import Buyer, FakeLeadCheckResult
from .normalizers import get_budget, get_name, get_status

LOGGER = logging.getLogger(__name__)

FAKE_THRESHOLD = 50
SUSPICIOUS_NAME_POINTS = 35
SUSPICIOUS_EMAIL_POINTS = 40
SUSPICIOUS_PHONE_POINTS = 30
NO_CONTACT_POINTS = 25
SHORT_NAME_POINTS = 20
LOW_BUDGET_POINTS = 30
FAKE_STATUS_POINTS = 50

MIN_NAME_LENGTH = 3
MIN_REALISTIC_BUDGET = 10_000

FAKE_NAME_PATTERNS: Sequence[Pattern[str]] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"^test",
        r"^fake",
        r"^asdf",
        r"^qwerty",
        r"^xxx",
        r"^aaa+$",
        r"^123",
        r"^n/a$",
        r"^none$",
        r"^null$",
        r"^demo",
        r"^sample",
        r"^john\s*doe",
        r"^jane\s*doe",
        r"^\s*$",
    )
)

FAKE_EMAIL_PATTERNS: Sequence[Pattern[str]] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"test@",
        r"fake@",
        r"example\.(com|org|net)",
        r"mailinator",
        r"tempmail",
        r"guerrillamail",
        r"@yopmail",
        r"10minutemail",
        r"throwaway",
        r"trash[-_]?mail",
        r"temp[-_]?mail",
        r"disposable",
        r"noreply",
        r"donotreply",
    )
)

# Applied to the digits-only phone number.
FAKE_PHONE_PATTERNS: Sequence[Pattern[str]] = tuple(
    re.compile(pattern)
    for pattern in (
        r"^0{7,}",
        r"^1{7,}",
        r"123456789",
        r"^(\d)\1{6,}",
        r"^000",
        r"^999999",
    )
)

FAKE_STATUS_KEYWORDS = ("fake", "spam", "can't verify")


def _matches_any(value: str, patterns: Sequence[Pattern[str]]) -> bool:
    return any(pattern.search(value) for pattern in patterns)


def detect_fake_lead(buyer: Buyer) -> FakeLeadCheckResult:
    """Score the buyer against known spam/test signatures.

    Every triggered signal adds fixed points; the lead is fake once the total
    reaches :data:`FAKE_THRESHOLD`. Within the name, email, and phone families
    only the first matching pattern counts.
    """

    flags: List[str] = []
    fake_score = 0

    name = get_name(buyer)
    email = str(buyer.email or "")
    phone = str(buyer.phone or "")

    if _matches_any(name, FAKE_NAME_PATTERNS):
        flags.append(f'Suspicious name pattern: "{name}"')
        fake_score += SUSPICIOUS_NAME_POINTS

    if _matches_any(email, FAKE_EMAIL_PATTERNS):
        flags.append(f'Disposable/fake email: "{email}"')
        fake_score += SUSPICIOUS_EMAIL_POINTS

    digits = re.sub(r"\D", "", phone)
    if _matches_any(digits, FAKE_PHONE_PATTERNS):
        flags.append(f'Suspicious phone number: "{phone}"')
        fake_score += SUSPICIOUS_PHONE_POINTS

    if not email.strip() and not phone.strip():
        flags.append("No contact information provided")
        fake_score += NO_CONTACT_POINTS

    if len(name) < MIN_NAME_LENGTH:
        flags.append("Name too short or missing")
        fake_score += SHORT_NAME_POINTS

    budget = get_budget(buyer)
    if 0 < budget < MIN_REALISTIC_BUDGET:
        flags.append("Budget unrealistically low for UK property")
        fake_score += LOW_BUDGET_POINTS

    status = get_status(buyer)
    if any(keyword in status for keyword in FAKE_STATUS_KEYWORDS):
        flags.append("Marked as fake/spam")
        fake_score += FAKE_STATUS_POINTS

    result = FakeLeadCheckResult(
        is_fake=fake_score >= FAKE_THRESHOLD,
        flags=tuple(flags),
        confidence=min(fake_score / 100, 1.0),
    )
    if result.is_fake:
        LOGGER.debug("Lead %s looks fake (score=%s): %s", buyer.display_name(), fake_score, flags)
    return result
