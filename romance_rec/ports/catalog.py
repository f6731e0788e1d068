"""Catalog port: abstract interface for the book catalog."""

from abc import ABC, abstractmethod
from typing import Optional

from romance_rec.domain.entities import Book
from romance_rec.domain.predicates import Predicate


class CatalogPort(ABC):
    """Read-only access to the book catalog."""

    @abstractmethod
    async def find_books(self, predicate: Predicate, limit: int) -> list[Book]:
        """
        Return up to ``limit`` books matching ``predicate``, with tags and
        warnings populated, ordered by ratings count then average rating
        (both descending).
        """
        ...

    @abstractmethod
    async def get_book(self, book_id: str) -> Optional[Book]:
        """Return a single book, or None if it does not exist."""
        ...

    @abstractmethod
    async def list_tags(self, limit: int) -> list[str]:
        """Most-used tag names, most popular first."""
        ...

    @abstractmethod
    async def list_content_warnings(self, limit: int) -> list[str]:
        """Most-used content-warning names, most popular first."""
        ...
