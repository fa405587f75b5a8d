"""Export utilities for scored lead data."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, MutableMapping, Optional, Sequence, Union

import pandas as pd

from ..legacy import convert_to_legacy_format
from ..models import Buyer, ScoredLead
from ..nb_score import get_nb_score_color, nb_score_for

PathLike = Union[str, Path]

_IDENTITY_COLUMNS = ("email", "phone", "country", "source", "status")


def export_score_results(
    results: Sequence[ScoredLead],
    path: PathLike,
    *,
    legacy: bool = False,
    include_breakdown: bool = False,
    include_extra: bool = True,
    sheet_name: str = "Scores",
    exporter_kwargs: Optional[MutableMapping[str, object]] = None,
) -> Path:
    """Write scored leads to a CSV or Excel file."""

    dataframe = results_to_dataframe(
        results,
        legacy=legacy,
        include_breakdown=include_breakdown,
        include_extra=include_extra,
    )
    output_path = Path(path)
    _write_dataframe(dataframe, output_path, sheet_name=sheet_name, exporter_kwargs=exporter_kwargs)
    return output_path


def results_to_dataframe(
    results: Sequence[ScoredLead],
    *,
    legacy: bool = False,
    include_breakdown: bool = False,
    include_extra: bool = True,
) -> pd.DataFrame:
    """Convert scored leads into a :class:`pandas.DataFrame`, one row per lead.

    ``legacy=True`` emits the flat ``ai_*`` columns instead of the full result
    columns. Leads that failed to score keep their identity columns and carry
    the failure text in ``error``.
    """

    records = [
        _result_to_row(
            result,
            legacy=legacy,
            include_breakdown=include_breakdown,
            include_extra=include_extra,
        )
        for result in results
    ]
    return pd.DataFrame(records)


def _result_to_row(
    scored: ScoredLead,
    *,
    legacy: bool,
    include_breakdown: bool,
    include_extra: bool,
) -> MutableMapping[str, object]:
    row = _identity_row(scored.buyer)
    result = scored.result

    if result is not None:
        if legacy:
            fields = convert_to_legacy_format(result).as_dict()
            fields["ai_risk_flags"] = _join_list(fields["ai_risk_flags"])
            row.update(fields)
        else:
            row.update(result.as_row())
            nb_score = nb_score_for(result)
            row["nb_score"] = nb_score
            row["nb_score_color"] = get_nb_score_color(nb_score)

        if include_breakdown:
            row["quality_breakdown"] = _format_breakdown(result.quality_score.breakdown)
            row["intent_breakdown"] = _format_breakdown(result.intent_score.breakdown)
            row["confidence_breakdown"] = _format_breakdown(result.confidence_score.breakdown)
            row["fake_flags"] = _join_list(result.fake_lead_check.flags)

    row["error"] = scored.error

    if include_extra:
        for key, value in scored.buyer.extra.items():
            row[f"extra.{key}"] = value

    return row


def _identity_row(buyer: Buyer) -> MutableMapping[str, object]:
    row: MutableMapping[str, object] = {"name": buyer.display_name()}
    for column in _IDENTITY_COLUMNS:
        row[column] = getattr(buyer, column)
    return row


def _format_breakdown(breakdown: Iterable) -> str:
    return json.dumps([entry.as_dict() for entry in breakdown], ensure_ascii=False)


def _join_list(values: Iterable[Optional[str]]) -> str:
    cleaned: List[str] = []
    for value in values:
        if not value:
            continue
        text = str(value).strip()
        if text:
            cleaned.append(text)
    return "; ".join(cleaned)


def _write_dataframe(
    dataframe: pd.DataFrame,
    path: Path,
    *,
    sheet_name: str,
    exporter_kwargs: Optional[MutableMapping[str, object]],
) -> None:
    exporter_kwargs = dict(exporter_kwargs or {})
    suffix = path.suffix.lower()

    if suffix in {".csv", ".tsv"}:
        if suffix == ".tsv":
            exporter_kwargs.setdefault("sep", "\t")
        dataframe.to_csv(path, index=False, **exporter_kwargs)
        return

    if suffix in {".xls", ".xlsx", ".xlsm", ".xlsb"}:
        engine = exporter_kwargs.pop("engine", None) or "openpyxl"
        dataframe.to_excel(path, index=False, sheet_name=sheet_name, engine=engine, **exporter_kwargs)
        return

    raise ValueError(f"Unsupported export file extension: {suffix}")


__all__ = ["export_score_results", "results_to_dataframe"]
