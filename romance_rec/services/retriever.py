"""Candidate retrieval under a time budget."""

import asyncio
import logging
import time

from romance_rec.domain.entities import Book
from romance_rec.domain.errors import RetrievalTimeoutError
from romance_rec.domain.predicates import LadderTier, Predicate
from romance_rec.ports.catalog import CatalogPort

logger = logging.getLogger(__name__)


class CandidateRetriever:
    """Runs one predicate against the catalog and enforces the retrieval deadline."""

    def __init__(
        self,
        catalog: CatalogPort,
        timeout: float = 5.0,
        fetch_multiplier: int = 3,
        lenient_fetch_multiplier: int = 1,
    ) -> None:
        self._catalog = catalog
        self._timeout = timeout
        self._fetch_multiplier = fetch_multiplier
        self._lenient_fetch_multiplier = lenient_fetch_multiplier

    def fetch_limit(self, tier: LadderTier, page_size: int) -> int:
        """Pool size to ask storage for; the scorer needs more than one page to choose from."""
        if tier is LadderTier.LENIENT:
            return page_size * self._lenient_fetch_multiplier
        return page_size * self._fetch_multiplier

    async def retrieve(self, predicate: Predicate, limit: int) -> list[Book]:
        """
        Fetch up to ``limit`` candidates.

        Raises RetrievalTimeoutError when the catalog misses the deadline; the
        pending query is cancelled. Other catalog faults propagate unchanged.
        """
        started = time.perf_counter()
        try:
            books = await asyncio.wait_for(
                self._catalog.find_books(predicate, limit), timeout=self._timeout
            )
        except asyncio.TimeoutError as exc:
            logger.warning(
                "Retrieval timed out after %.1fs (tier=%s)", self._timeout, predicate.tier.value
            )
            raise RetrievalTimeoutError(
                f"Catalog did not respond within {self._timeout:.1f}s"
            ) from exc
        logger.info(
            "Retrieved %d candidates (tier=%s, limit=%d) in %.1fms",
            len(books),
            predicate.tier.value,
            limit,
            (time.perf_counter() - started) * 1000,
        )
        return books
