"""Utilities for importing, normalising, and exporting scored lead data."""

from .exporters import export_score_results, results_to_dataframe
from .loaders import UnsupportedFileTypeError, load_buyers
from .normaliser import VALID_STATUSES, normalise_status

__all__ = [
    "UnsupportedFileTypeError",
    "VALID_STATUSES",
    "export_score_results",
    "load_buyers",
    "normalise_status",
    "results_to_dataframe",
]
