"""In-memory catalog adapter."""

import logging
from collections import Counter
from collections.abc import Iterable
from typing import Optional

from romance_rec.domain.entities import Book
from romance_rec.domain.predicates import Predicate, normalize_label
from romance_rec.ports.catalog import CatalogPort

logger = logging.getLogger(__name__)


def _popularity(book: Book) -> tuple[int, float]:
    return (book.ratings_count, book.average_rating)


class InMemoryCatalogAdapter(CatalogPort):
    """Serve the catalog from a list of books held in memory."""

    def __init__(self, books: Iterable[Book] = ()) -> None:
        self._books: dict[str, Book] = {b.id: b for b in books}
        logger.info("InMemoryCatalog initialized with %d books", len(self._books))

    async def find_books(self, predicate: Predicate, limit: int) -> list[Book]:
        """Filter with ``Predicate.matches`` and order by popularity."""
        matches = [b for b in self._books.values() if predicate.matches(b)]
        matches.sort(key=_popularity, reverse=True)
        logger.debug("InMemoryCatalog: %d matches for %s", len(matches), predicate.describe())
        return matches[:limit]

    async def get_book(self, book_id: str) -> Optional[Book]:
        return self._books.get(book_id)

    async def list_tags(self, limit: int) -> list[str]:
        return self._top_labels((t for b in self._books.values() for t in b.tags), limit)

    async def list_content_warnings(self, limit: int) -> list[str]:
        return self._top_labels(
            (w for b in self._books.values() for w in b.content_warnings), limit
        )

    @staticmethod
    def _top_labels(labels, limit: int) -> list[str]:
        totals: Counter[str] = Counter()
        for label in labels:
            name = normalize_label(label.name)
            if name:
                totals[name] += label.count
        return [name for name, _ in totals.most_common(limit)]
