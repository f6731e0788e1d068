"""Test doubles and catalog data shared across the suite."""

import asyncio
import json

from romance_rec.domain import models
from romance_rec.domain.entities import Book, LabelCount
from romance_rec.ports.catalog import CatalogPort
from romance_rec.ports.llm import LLMPort


def make_book(
    book_id: str,
    *,
    rating: float = 4.0,
    count: int = 500,
    spice: str | None = "Medium",
    tags: tuple[str, ...] = (),
    warnings: tuple[str, ...] = (),
    summary: str = "",
) -> Book:
    return Book(
        id=book_id,
        title=f"Title {book_id}",
        author=f"Author {book_id}",
        url=f"https://example.com/books/{book_id}",
        average_rating=rating,
        ratings_count=count,
        spice_level=spice,
        summary=summary,
        tags=tuple(LabelCount(t, 10 - i) for i, t in enumerate(tags)),
        content_warnings=tuple(LabelCount(w, 5 - i) for i, w in enumerate(warnings)),
    )


# b7 sits below the rating band; b8 has no spice level recorded.
CATALOG = [
    make_book("b1", rating=4.3, count=2400, spice="Sweet",
              tags=("small town", "contemporary", "second chance")),
    make_book("b2", rating=4.1, count=1800, spice="Sweet",
              tags=("small town", "contemporary"), warnings=("cheating",)),
    make_book("b3", rating=4.0, count=900, spice="Mild",
              tags=("small town", "holiday"), warnings=("death / grief",)),
    make_book("b4", rating=4.4, count=3200, spice="Medium",
              tags=("enemies to lovers", "workplace/office", "contemporary"),
              summary="Two rival architects share one office."),
    make_book("b5", rating=4.6, count=5000, spice="Inferno",
              tags=("dark romance", "mafia"), warnings=("graphic violence", "dubious consent")),
    make_book("b6", rating=3.9, count=1500, spice="Hot",
              tags=("sports", "enemies to lovers"), warnings=("cheating",)),
    make_book("b7", rating=3.2, count=100, spice="Sweet", tags=("small town",)),
    make_book("b8", rating=3.8, count=50, spice=None, tags=("small town", "second chance")),
    make_book("b9", rating=4.2, count=700, spice="Scorching",
              tags=("rock star", "contemporary"), warnings=("substance abuse",)),
]


class ScriptedLLM(LLMPort):
    """Returns a fixed answer (or raises) and records every call."""

    def __init__(self, answer=None, error: Exception | None = None, delay: float = 0.0):
        self.answer = answer
        self.error = error
        self.delay = delay
        self.calls: list[str] = []

    async def extract_preferences(self, message, vocabulary) -> str:
        self.calls.append(message)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.answer if isinstance(self.answer, str) else json.dumps(self.answer)


class SlowCatalog(CatalogPort):
    """Wraps a catalog and stalls ``find_books`` for the named tiers."""

    def __init__(self, inner: CatalogPort, slow_tiers, delay: float = 1.0):
        self.inner = inner
        self.slow_tiers = set(slow_tiers)
        self.delay = delay
        self.tiers_seen: list[str] = []

    async def find_books(self, predicate, limit):
        self.tiers_seen.append(predicate.tier.value)
        if predicate.tier in self.slow_tiers:
            await asyncio.sleep(self.delay)
        return await self.inner.find_books(predicate, limit)

    async def get_book(self, book_id):
        return await self.inner.get_book(book_id)

    async def list_tags(self, limit):
        return await self.inner.list_tags(limit)

    async def list_content_warnings(self, limit):
        return await self.inner.list_content_warnings(limit)


async def seed_catalog(session_factory, books) -> None:
    async with session_factory() as session:
        tags: dict[str, models.Tag] = {}
        warnings: dict[str, models.ContentWarning] = {}
        for book in books:
            row = models.Book(
                id=book.id,
                title=book.title,
                author=book.author,
                url=book.url,
                average_rating=book.average_rating,
                ratings_count=book.ratings_count,
                spice_level=book.spice_level,
                summary=book.summary,
            )
            for label in book.tags:
                tag = tags.setdefault(label.name, models.Tag(name=label.name, count=0))
                tag.count += label.count
                row.tag_links.append(models.BookTag(tag=tag, count=label.count))
            for label in book.content_warnings:
                warning = warnings.setdefault(
                    label.name, models.ContentWarning(name=label.name, count=0)
                )
                warning.count += label.count
                row.warning_links.append(
                    models.BookContentWarning(warning=warning, count=label.count)
                )
            session.add(row)
        await session.commit()
