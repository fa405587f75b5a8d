"""Normalisation of imported column names, flags, and pipeline statuses."""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional, Tuple

LOGGER = logging.getLogger(__name__)

VALID_STATUSES: Tuple[str, ...] = (
    "Contact Pending",
    "Follow Up",
    "Viewing Booked",
    "Negotiating",
    "Reserved",
    "Exchanged",
    "Completed",
    "Not Proceeding",
    "Duplicate",
)
DEFAULT_STATUS = "Contact Pending"

STATUS_ALIASES: Dict[str, str] = {
    "contact pending": "Contact Pending",
    "contactpending": "Contact Pending",
    "follow up": "Follow Up",
    "followup": "Follow Up",
    "follow-up": "Follow Up",
    "viewing booked": "Viewing Booked",
    "viewingbooked": "Viewing Booked",
    "negotiating": "Negotiating",
    "reserved": "Reserved",
    "exchanged": "Exchanged",
    "completed": "Completed",
    "not proceeding": "Not Proceeding",
    "notproceeding": "Not Proceeding",
    "not-proceeding": "Not Proceeding",
    "duplicate": "Duplicate",
    # CRM / Airtable vocabulary
    "new": "Contact Pending",
    "new lead": "Contact Pending",
    "newlead": "Contact Pending",
    "contacted": "Follow Up",
    "qualified": "Follow Up",
    "interested": "Follow Up",
    "hot": "Follow Up",
    "warm": "Contact Pending",
    "cold": "Contact Pending",
    "viewing scheduled": "Viewing Booked",
    "viewing confirmed": "Viewing Booked",
    "offer made": "Negotiating",
    "offer accepted": "Reserved",
    "under offer": "Reserved",
    "sold": "Completed",
    "exchange": "Exchanged",
    "exchanging": "Exchanged",
    "lost": "Not Proceeding",
    "dead": "Not Proceeding",
    "unqualified": "Not Proceeding",
    "no answer": "Contact Pending",
    "callback": "Follow Up",
    "documentation": "Negotiating",
}

_TRUE_VALUES = {"true", "yes", "y", "1", "1.0"}
_FALSE_VALUES = {"false", "no", "n", "0", "0.0"}


def normalise_status(status: Optional[str]) -> str:
    """Map a free-text pipeline status onto one of :data:`VALID_STATUSES`."""

    if not status or not str(status).strip():
        return DEFAULT_STATUS

    key = str(status).strip().lower()
    if key in STATUS_ALIASES:
        return STATUS_ALIASES[key]

    for valid in VALID_STATUSES:
        if valid.lower() == key:
            return valid

    LOGGER.warning("Unknown status %r - defaulting to %r", status, DEFAULT_STATUS)
    return DEFAULT_STATUS


def normalise_column_name(column: Any) -> str:
    """``"Full Name"``, ``"fullName"`` and ``"full-name"`` all become ``"full_name"``."""

    text = str(column).strip()
    text = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", text)
    text = re.sub(r"([A-Za-z])(\d)", r"\1_\2", text)
    text = re.sub(r"[\s\-./]+", "_", text.lower())
    return re.sub(r"_+", "_", text).strip("_")


def parse_flag(value: Any) -> Optional[bool]:
    """Interpret spreadsheet yes/no cells; anything unrecognised is ``None``."""

    if value is None:
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None
