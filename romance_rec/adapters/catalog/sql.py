"""SQLAlchemy catalog adapter: compiles Predicates into SELECT statements."""

import logging
from typing import Optional

from sqlalchemy import ColumnElement, and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from romance_rec.domain import models
from romance_rec.domain.entities import Book, LabelCount
from romance_rec.domain.errors import UpstreamStorageError
from romance_rec.domain.predicates import MatchMode, Predicate, normalize_tokens
from romance_rec.ports.catalog import CatalogPort

logger = logging.getLogger(__name__)


def _like_pattern(token: str) -> str:
    escaped = token.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _has_tag(token: str) -> ColumnElement[bool]:
    return models.Book.tag_links.any(
        models.BookTag.tag.has(models.Tag.name.ilike(_like_pattern(token), escape="\\"))
    )


def _has_warning(token: str) -> ColumnElement[bool]:
    return models.Book.warning_links.any(
        models.BookContentWarning.warning.has(
            models.ContentWarning.name.ilike(_like_pattern(token), escape="\\")
        )
    )


def _combine(mode: MatchMode, clauses: list[ColumnElement[bool]]) -> Optional[ColumnElement[bool]]:
    if mode is MatchMode.NONE or not clauses:
        return None
    return and_(*clauses) if mode is MatchMode.ALL else or_(*clauses)


def compile_predicate(predicate: Predicate) -> list[ColumnElement[bool]]:
    """Translate a Predicate into WHERE clauses over ``books``."""
    clauses: list[ColumnElement[bool]] = [
        models.Book.average_rating >= predicate.min_rating,
        models.Book.average_rating <= predicate.max_rating,
    ]
    if predicate.excluded_ids:
        clauses.append(models.Book.id.notin_(sorted(predicate.excluded_ids)))
    if predicate.spice_levels is not None:
        allowed = sorted(level.strip().lower() for level in predicate.spice_levels)
        clauses.append(
            or_(
                models.Book.spice_level.is_(None),
                func.lower(func.trim(models.Book.spice_level)).in_(allowed),
            )
        )

    genre = _combine(predicate.genre_mode, [_has_tag(t) for t in predicate.genre_tokens])
    if genre is not None:
        clauses.append(genre)
    wanted = _combine(predicate.warning_mode, [_has_warning(t) for t in predicate.warning_tokens])
    if wanted is not None:
        clauses.append(wanted)
    for token in predicate.forbidden_warnings:
        clauses.append(~_has_warning(token))
    return clauses


def to_entity(row: models.Book) -> Book:
    """Map an ORM row to the read-only domain Book."""
    tags = sorted(row.tag_links, key=lambda link: link.count, reverse=True)
    warnings = sorted(row.warning_links, key=lambda link: link.count, reverse=True)
    return Book(
        id=row.id,
        title=row.title,
        author=row.author,
        url=row.url or "",
        average_rating=float(row.average_rating or 0.0),
        ratings_count=int(row.ratings_count or 0),
        spice_level=row.spice_level,
        summary=row.summary or "",
        tags=tuple(LabelCount(link.tag.name, link.count) for link in tags),
        content_warnings=tuple(LabelCount(link.warning.name, link.count) for link in warnings),
        series=row.series,
        series_number=row.series_number,
        page_count=row.page_count,
        published_date=row.published_date,
        scraped_status=row.scraped_status,
    )


class SQLCatalogAdapter(CatalogPort):
    """Catalog backed by a relational database through async SQLAlchemy."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_books(self, predicate: Predicate, limit: int) -> list[Book]:
        stmt = (
            select(models.Book)
            .where(*compile_predicate(predicate))
            .order_by(
                models.Book.ratings_count.desc(),
                models.Book.average_rating.desc(),
                models.Book.id,
            )
            .limit(limit)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                books = [to_entity(row) for row in result.scalars().all()]
        except SQLAlchemyError as exc:
            logger.error("Catalog query failed: %s", exc)
            raise UpstreamStorageError(f"Catalog query failed: {exc.__class__.__name__}") from exc
        logger.debug("SQLCatalog: %d rows for %s", len(books), predicate.describe())
        return books

    async def get_book(self, book_id: str) -> Optional[Book]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(models.Book).where(models.Book.id == book_id)
                )
                row = result.scalar_one_or_none()
                return to_entity(row) if row else None
        except SQLAlchemyError as exc:
            logger.error("Catalog lookup failed for %s: %s", book_id, exc)
            raise UpstreamStorageError(f"Catalog lookup failed: {exc.__class__.__name__}") from exc

    async def list_tags(self, limit: int) -> list[str]:
        return await self._top_names(models.Tag, limit)

    async def list_content_warnings(self, limit: int) -> list[str]:
        return await self._top_names(models.ContentWarning, limit)

    async def _top_names(self, model, limit: int) -> list[str]:
        stmt = select(model.name).order_by(model.count.desc(), model.name).limit(limit)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                names = list(result.scalars().all())
        except SQLAlchemyError as exc:
            raise UpstreamStorageError(f"Vocabulary query failed: {exc.__class__.__name__}") from exc
        # Imported labels sometimes carry their count, e.g. "small town (412)".
        return list(normalize_tokens(names))
