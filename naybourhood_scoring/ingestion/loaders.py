"""Utilities for loading buyer leads from spreadsheets."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import AbstractSet, Any, Dict, Iterable, List, Mapping, MutableMapping, Optional, Sequence, Union

import pandas as pd

from ..models import Buyer
from .normaliser import normalise_column_name, normalise_status, parse_flag

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]

_FIELD_SYNONYMS: Mapping[str, Sequence[str]] = {
    "full_name": ("full_name", "name", "lead_name", "buyer_name"),
    "first_name": ("first_name", "firstname", "first", "forename"),
    "last_name": ("last_name", "lastname", "last", "surname"),
    "email": ("email", "email_address", "primary_email"),
    "phone": ("phone", "phone_number", "mobile", "mobile_number", "telephone"),
    "country": ("country", "country_of_residence"),
    "payment_method": ("payment_method", "payment", "finance_type"),
    "proof_of_funds": ("proof_of_funds", "pof"),
    "mortgage_status": ("mortgage_status", "mortgage", "aip_status"),
    "budget": ("budget",),
    "budget_range": ("budget_range",),
    "budget_min": ("budget_min", "min_budget"),
    "bedrooms": ("bedrooms", "beds"),
    "preferred_bedrooms": ("preferred_bedrooms", "bedrooms_preferred"),
    "location": ("location", "preferred_location"),
    "area": ("area", "preferred_area"),
    "timeline": ("timeline",),
    "timeline_to_purchase": ("timeline_to_purchase", "purchase_timeline"),
    "ready_in_28_days": ("ready_in_28_days",),
    "ready_within_28_days": ("ready_within_28_days",),
    "uk_broker": ("uk_broker", "has_broker", "broker"),
    "connect_to_broker": ("connect_to_broker", "broker_connected", "wants_broker"),
    "purpose": ("purpose",),
    "purchase_purpose": ("purchase_purpose", "buying_purpose"),
    "source": ("source", "lead_source"),
    "source_platform": ("source_platform", "platform"),
    "created_at": ("created_at", "created", "created_time"),
    "date_added": ("date_added", "added"),
    "status": ("status", "lead_status"),
}

_FLAG_FIELDS = frozenset({"proof_of_funds", "ready_in_28_days", "ready_within_28_days", "connect_to_broker"})


class UnsupportedFileTypeError(ValueError):
    """Raised when an unsupported file format is passed to the loader."""


def load_buyers(
    path: PathLike,
    *,
    column_mapping: Optional[Mapping[str, Union[str, Sequence[str]]]] = None,
    sheet_name: Union[str, int, None] = 0,
    loader_kwargs: Optional[MutableMapping[str, Any]] = None,
    normalise_statuses: bool = False,
) -> List[Buyer]:
    """Load buyer records from a spreadsheet.

    Parameters
    ----------
    path:
        Path to the CSV/TSV/XLSX file to be loaded.
    column_mapping:
        Optional mapping of :class:`Buyer` field names to a column name, or a
        sequence of column names tried in order.
    sheet_name:
        Sheet selector passed to :func:`pandas.read_excel` when loading an Excel
        file. Ignored for CSV files.
    loader_kwargs:
        Extra keyword arguments forwarded to :func:`pandas.read_csv` or
        :func:`pandas.read_excel`.
    normalise_statuses:
        Map free-text ``status`` values onto the standard pipeline statuses.
    """

    dataframe = _read_dataframe(path, sheet_name=sheet_name, loader_kwargs=loader_kwargs)
    mapping = dict(column_mapping or {})
    resolved_columns = {field: _resolve_columns(field, dataframe.columns, mapping) for field in _FIELD_SYNONYMS}
    claimed = {column for columns in resolved_columns.values() for column in columns}

    buyers: List[Buyer] = []
    for _, row in dataframe.iterrows():
        if _row_is_empty(row):
            continue
        buyers.append(_row_to_buyer(row, resolved_columns, claimed, normalise_statuses=normalise_statuses))

    LOGGER.info("Loaded %s leads from %s", len(buyers), path)
    return buyers


def _read_dataframe(
    path: PathLike,
    *,
    sheet_name: Union[str, int, None] = 0,
    loader_kwargs: Optional[MutableMapping[str, Any]] = None,
) -> pd.DataFrame:
    loader_kwargs = dict(loader_kwargs or {})
    # Cells stay text so phone numbers keep leading zeros and "N/A" names survive.
    loader_kwargs.setdefault("dtype", str)
    loader_kwargs.setdefault("keep_default_na", False)
    loader_kwargs.setdefault("na_values", [""])
    path_obj = Path(path)
    suffix = path_obj.suffix.lower()

    if suffix in {".csv", ".tsv"}:
        if suffix == ".tsv":
            loader_kwargs.setdefault("sep", "\t")
        return pd.read_csv(path_obj, **loader_kwargs)

    if suffix in {".xls", ".xlsx", ".xlsm", ".xlsb"}:
        engine = loader_kwargs.pop("engine", None) or "openpyxl"
        return pd.read_excel(path_obj, sheet_name=sheet_name, engine=engine, **loader_kwargs)

    raise UnsupportedFileTypeError(f"Unsupported file extension: {path_obj.suffix}")


def _row_is_empty(row: pd.Series) -> bool:
    return all(pd.isna(value) or (isinstance(value, str) and not value.strip()) for value in row.values)


def _row_to_buyer(
    row: pd.Series,
    resolved_columns: Mapping[str, Sequence[str]],
    claimed: AbstractSet[str],
    *,
    normalise_statuses: bool,
) -> Buyer:
    values: Dict[str, Any] = {}
    for field, columns in resolved_columns.items():
        text = _extract_scalar(row, columns)
        if text is None:
            continue
        values[field] = parse_flag(text) if field in _FLAG_FIELDS else text

    if normalise_statuses and "status" in values:
        values["status"] = normalise_status(values["status"])

    extra = {
        str(column): text
        for column, value in row.items()
        if column not in claimed and (text := _clean_text(value)) is not None
    }
    return Buyer(**values, extra=extra)


def _resolve_columns(
    field: str,
    available_columns: Iterable[Any],
    mapping: Mapping[str, Union[str, Sequence[str]]],
) -> List[str]:
    if field in mapping:
        return _normalize_column_spec(mapping[field])

    synonyms = _FIELD_SYNONYMS.get(field, (field,))
    by_name = {normalise_column_name(column): column for column in available_columns}
    return [by_name[synonym] for synonym in synonyms if synonym in by_name]


def _normalize_column_spec(value: Union[str, Sequence[str]]) -> List[str]:
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]


def _extract_scalar(row: pd.Series, columns: Sequence[str]) -> Optional[str]:
    for column in columns:
        if column not in row:
            continue
        text = _clean_text(row[column])
        if text is not None:
            return text
    return None


def _clean_text(value: Any) -> Optional[str]:
    if pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


__all__ = ["load_buyers", "UnsupportedFileTypeError"]
