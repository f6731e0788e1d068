"""Recommender port: abstract interface for the recommendation engine."""

from abc import ABC, abstractmethod
from collections.abc import Set

from romance_rec.domain.entities import RecommendationResult


class RecommenderPort(ABC):
    """Abstraction for the book recommendation engine."""

    @abstractmethod
    async def recommend(
        self,
        message: str,
        exclusions: Set[str] = frozenset(),
    ) -> RecommendationResult:
        """Return a bounded page of recommendations for a free-text request."""
        ...
