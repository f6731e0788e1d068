"""Recommendation orchestrator: extract -> ladder -> retrieve -> score -> select."""

import logging
from collections.abc import Set

from romance_rec.domain.entities import Book, RecommendationResult, SpiceScale
from romance_rec.domain.errors import BookNotFoundError, InvalidInputError, RetrievalTimeoutError
from romance_rec.domain.predicates import LadderTier, MatchMode, Predicate, normalize_tokens
from romance_rec.domain.vocabulary import Vocabulary
from romance_rec.ports.catalog import CatalogPort
from romance_rec.ports.recommender import RecommenderPort
from romance_rec.services.filters import DEFAULT_RATING_BAND, build_predicate_ladder
from romance_rec.services.preferences import PreferenceExtractor
from romance_rec.services.retriever import CandidateRetriever
from romance_rec.services.scoring import Scorer
from romance_rec.services.vocabulary import VocabularyCache

logger = logging.getLogger(__name__)


class RecommendationOrchestrator(RecommenderPort):
    """
    Sequences the pipeline and translates failures.

    The ladder is walked strictest first. Empty tiers and retrieval timeouts
    move on to the next tier; a timeout on the last tier is raised. When every
    tier comes back empty the result is ``RecommendationResult.no_matches()``.
    """

    def __init__(
        self,
        extractor: PreferenceExtractor,
        retriever: CandidateRetriever,
        scorer: Scorer,
        catalog: CatalogPort,
        vocabulary: VocabularyCache,
        scale: SpiceScale,
        page_size: int = 4,
        rating_band: tuple[float, float] = DEFAULT_RATING_BAND,
    ) -> None:
        self._extractor = extractor
        self._retriever = retriever
        self._scorer = scorer
        self._catalog = catalog
        self._vocabulary = vocabulary
        self._scale = scale
        self._page_size = page_size
        self._rating_band = rating_band

    @property
    def page_size(self) -> int:
        return self._page_size

    async def recommend(
        self,
        message: str,
        exclusions: Set[str] = frozenset(),
    ) -> RecommendationResult:
        if not message or not message.strip():
            raise InvalidInputError("A message describing what you want to read is required")

        profile = await self._extractor.extract(message)
        ladder = build_predicate_ladder(
            profile, exclusions, scale=self._scale, rating_band=self._rating_band
        )

        for position, predicate in enumerate(ladder):
            is_last = position == len(ladder) - 1
            limit = self._retriever.fetch_limit(predicate.tier, self._page_size)
            try:
                books = await self._retriever.retrieve(predicate, limit)
            except RetrievalTimeoutError:
                if is_last:
                    raise
                logger.info("Tier %s timed out; trying the next tier", predicate.tier.value)
                continue

            if not books:
                logger.info("Tier %s returned no candidates", predicate.tier.value)
                continue

            result = self._scorer.select_top(books, profile, exclusions, self._page_size)
            if result.is_empty:
                logger.info("Tier %s candidates were all filtered out", predicate.tier.value)
                continue

            result.tier = predicate.tier.value
            logger.info(
                "Recommending %d of %d candidates from tier %s (default_profile=%s)",
                len(result.books),
                result.total,
                predicate.tier.value,
                profile.is_default,
            )
            return result

        logger.info("No books found after exhausting the predicate ladder")
        return RecommendationResult.no_matches()

    async def get_book(self, book_id: str) -> Book:
        book = await self._catalog.get_book(book_id)
        if book is None:
            raise BookNotFoundError(f"Book {book_id!r} not found")
        return book

    async def similar_books(
        self,
        book_id: str,
        exclusions: Set[str] = frozenset(),
        limit: int = 5,
    ) -> RecommendationResult:
        """Books resembling ``book_id``; candidates share at least one of its tags when possible."""
        target = await self.get_book(book_id)
        excluded = frozenset(exclusions) | {target.id}
        pool_size = self._retriever.fetch_limit(LadderTier.STRICT, limit)
        tags = normalize_tokens(target.tag_names)

        predicates = []
        if tags:
            predicates.append(
                Predicate(
                    tier=LadderTier.RELAXED,
                    genre_tokens=tags,
                    genre_mode=MatchMode.ANY,
                    excluded_ids=excluded,
                )
            )
        predicates.append(Predicate(tier=LadderTier.LENIENT, excluded_ids=excluded))

        for position, predicate in enumerate(predicates):
            try:
                candidates = await self._retriever.retrieve(predicate, pool_size)
            except RetrievalTimeoutError:
                if position == len(predicates) - 1:
                    raise
                logger.info("Similar-books tier %s timed out; widening", predicate.tier.value)
                continue
            if candidates:
                return self._scorer.rank_similar(target, candidates, excluded, limit)
        return RecommendationResult.no_matches()

    async def vocabulary(self) -> Vocabulary:
        return await self._vocabulary.snapshot()
