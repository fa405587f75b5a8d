"""Command line interface for batch scoring spreadsheets of leads."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from .config import ConfigurationError, get_column_mapping, get_section, load_configuration
from .ingestion import export_score_results, load_buyers
from .orchestrator import ScoringOrchestrator

LOGGER = logging.getLogger(__name__)


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Score buyer leads from a spreadsheet and write the results",
    )
    parser.add_argument("input", help="Path to the input spreadsheet (CSV, TSV or XLSX)")
    parser.add_argument("output", help="Path where the scored results should be written")
    parser.add_argument(
        "--config",
        default=None,
        help="Optional job configuration file (YAML or JSON)",
    )
    parser.add_argument(
        "--format",
        choices=["full", "legacy"],
        default=None,
        help="Write the full result columns or the flat ai_* legacy columns",
    )
    parser.add_argument(
        "--include-breakdown",
        action="store_true",
        default=None,
        help="Add per-rule score breakdown columns to the output",
    )
    parser.add_argument(
        "--as-of",
        type=_parse_timestamp,
        default=None,
        help="Reference date for lead-age risk flags (defaults to now)",
    )
    parser.add_argument(
        "--mode",
        choices=["sequential", "concurrent"],
        default=None,
        help="Whether to score leads sequentially or on a thread pool",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        default=None,
        help="Maximum number of workers to use in concurrent mode",
    )
    parser.add_argument(
        "--raise-on-error",
        action="store_true",
        help="Abort on the first lead that fails to score instead of recording the error",
    )
    parser.add_argument(
        "--normalise-status",
        action="store_true",
        default=None,
        help="Map free-text statuses onto the standard pipeline statuses before scoring",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING)",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def _parse_timestamp(value: Any) -> pd.Timestamp:
    try:
        timestamp = pd.Timestamp(value)
    except (TypeError, ValueError) as exc:
        raise argparse.ArgumentTypeError(f"invalid date: {value!r}") from exc
    if pd.isna(timestamp):
        raise argparse.ArgumentTypeError(f"invalid date: {value!r}")
    return timestamp


def _pick(cli_value: Any, section: dict, key: str, default: Any) -> Any:
    if cli_value is not None:
        return cli_value
    return section.get(key, default)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    config = load_configuration(args.config) if args.config else {}
    scoring = get_section(config, "scoring")
    output = get_section(config, "output")
    ingestion = get_section(config, "ingestion")

    as_of = args.as_of
    if as_of is None and scoring.get("as_of") is not None:
        try:
            as_of = _parse_timestamp(scoring["as_of"])
        except argparse.ArgumentTypeError as exc:
            raise ConfigurationError(f"Configuration value scoring.as_of is not a date: {exc}") from exc

    buyers = load_buyers(
        args.input,
        column_mapping=get_column_mapping(config),
        sheet_name=ingestion.get("sheet_name", 0),
        normalise_statuses=bool(_pick(args.normalise_status, ingestion, "normalise_statuses", False)),
    )
    if not buyers:
        LOGGER.warning("No leads found in %s - nothing to do", args.input)

    orchestrator = ScoringOrchestrator(
        concurrent=_pick(args.mode, scoring, "mode", "sequential") == "concurrent",
        max_workers=_pick(args.max_workers, scoring, "max_workers", None),
        raise_on_error=args.raise_on_error,
        now=as_of,
    )
    scored = orchestrator.score(buyers)

    output_path = export_score_results(
        scored,
        args.output,
        legacy=_pick(args.format, output, "format", "full") == "legacy",
        include_breakdown=bool(_pick(args.include_breakdown, output, "include_breakdown", False)),
    )
    LOGGER.info("Processed %s leads", len(scored))
    LOGGER.info("Scored results written to %s", Path(output_path).resolve())
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
