"""Batch orchestrator that scores many leads, optionally on a thread pool."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from ..models import Buyer, NaybourhoodScoreResult, ScoredLead
from .pipeline import BuyerLike, as_buyer, score_lead_naybourhood

LOGGER = logging.getLogger(__name__)

ScoreFunction = Callable[..., NaybourhoodScoreResult]


class ScoringOrchestrator:
    """Scores a collection of leads and pairs each with its result."""

    def __init__(
        self,
        *,
        score_function: ScoreFunction = score_lead_naybourhood,
        concurrent: bool = False,
        max_workers: Optional[int] = None,
        raise_on_error: bool = False,
        now: Optional[datetime] = None,
    ) -> None:
        self._score_function = score_function
        self._concurrent = concurrent
        self._max_workers = max_workers
        self._raise_on_error = raise_on_error
        self._now = now

    @property
    def concurrent(self) -> bool:
        return self._concurrent

    def score(self, buyers: Iterable[BuyerLike]) -> List[ScoredLead]:
        """Score every lead provided, preserving input order."""

        records = list(buyers)
        if not records:
            LOGGER.warning("No leads supplied - nothing to score")
            return []

        if not self._concurrent or len(records) <= 1:
            scored = [self._score_one(record) for record in records]
        else:
            scored = self._score_concurrently(records)

        failures = sum(1 for item in scored if not item.ok)
        LOGGER.info("Scored %s leads (%s failed)", len(scored) - failures, failures)
        return scored

    def _score_concurrently(self, records: List[BuyerLike]) -> List[ScoredLead]:
        slots: List[Optional[ScoredLead]] = [None] * len(records)
        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = {executor.submit(self._score_one, record): index for index, record in enumerate(records)}
            for future in as_completed(futures):
                slots[futures[future]] = future.result()
        return [item for item in slots if item is not None]

    def _score_one(self, record: BuyerLike) -> ScoredLead:
        buyer: Optional[Buyer] = None
        try:
            buyer = as_buyer(record)
            LOGGER.debug("Scoring lead %s", buyer.display_name())
            return ScoredLead(buyer=buyer, result=self._score_function(buyer, now=self._now))
        except Exception as exc:
            label = buyer.display_name() if buyer is not None else repr(record)
            LOGGER.exception("Scoring failed for lead %s", label)
            if self._raise_on_error:
                raise
            # Records that could not be read are exported with blank identity columns.
            return ScoredLead(buyer=buyer if buyer is not None else Buyer(), error=str(exc))
