"""Tag / content-warning vocabulary cache with a TTL and a capacity bound."""

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Optional

from romance_rec.domain.errors import UpstreamStorageError
from romance_rec.domain.vocabulary import Vocabulary
from romance_rec.ports.catalog import CatalogPort

logger = logging.getLogger(__name__)


class VocabularyCache:
    """
    Holds the catalog's most-used tags and warnings for prompt building.

    One instance is created by the composition root and shared by requests.
    A refresh happens when the cache is empty or older than ``ttl_seconds``;
    if the catalog fails, stalls past ``timeout`` or returns nothing, the
    previous snapshot (or the built-in vocabulary) is served instead.
    """

    def __init__(
        self,
        catalog: CatalogPort,
        ttl_seconds: float = 300.0,
        capacity: int = 250,
        timeout: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
        fallback: Optional[Vocabulary] = None,
    ) -> None:
        self._catalog = catalog
        self._ttl = ttl_seconds
        self._capacity = capacity
        self._timeout = timeout
        self._clock = clock
        self._fallback = fallback or Vocabulary.builtin()
        self._snapshot: Optional[Vocabulary] = None
        self._loaded_at: float = 0.0
        self._lock = asyncio.Lock()

    def _stale(self) -> bool:
        return self._snapshot is None or self._clock() - self._loaded_at > self._ttl

    def invalidate(self) -> None:
        self._snapshot = None

    async def snapshot(self) -> Vocabulary:
        if not self._stale():
            return self._snapshot
        async with self._lock:
            # Another request may have refreshed while we waited.
            if self._stale():
                await self._refresh()
        return self._snapshot

    async def _load(self) -> tuple[list[str], list[str]]:
        tags = await self._catalog.list_tags(self._capacity)
        warnings = await self._catalog.list_content_warnings(self._capacity)
        return list(tags), list(warnings)

    async def _refresh(self) -> None:
        try:
            tags, warnings = await asyncio.wait_for(self._load(), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Vocabulary refresh timed out after %.1fs, keeping previous vocabulary",
                self._timeout,
            )
            tags, warnings = [], []
        except UpstreamStorageError as exc:
            logger.warning("Vocabulary refresh failed, keeping previous vocabulary: %s", exc)
            tags, warnings = [], []

        if not tags or not warnings:
            previous = self._snapshot or self._fallback
            tags = tags or list(previous.tags)
            warnings = warnings or list(previous.content_warnings)
            logger.info("Vocabulary partially served from fallback")

        self._snapshot = Vocabulary(
            tags=tuple(tags[: self._capacity]),
            content_warnings=tuple(warnings[: self._capacity]),
        )
        self._loaded_at = self._clock()
        logger.info(
            "Vocabulary cache updated: %d tags, %d warnings",
            len(self._snapshot.tags),
            len(self._snapshot.content_warnings),
        )
