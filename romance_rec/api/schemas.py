"""Pydantic request/response schemas. JSON keys are camelCase."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ── Requests ───────────────────────────────────────

class RecommendRequest(CamelModel):
    message: str = ""
    read_books: list[str] = Field(default_factory=list)
    not_interested_books: list[str] = Field(default_factory=list)
    previously_seen_books: list[str] = Field(default_factory=list)


# ── Books ──────────────────────────────────────────

class LabelResponse(CamelModel):
    name: str
    count: int


class BookResponse(CamelModel):
    id: str
    title: str
    author: str
    url: str
    average_rating: float
    ratings_count: int
    spice_level: Optional[str] = None
    summary: str
    tags: list[LabelResponse] = Field(default_factory=list)
    content_warnings: list[LabelResponse] = Field(default_factory=list)
    series: Optional[str] = None
    series_number: Optional[float] = None
    page_count: Optional[int] = None
    published_date: Optional[date] = None
    scraped_status: Optional[str] = None


# ── Recommendations ────────────────────────────────

class RecommendationsResponse(CamelModel):
    books: list[BookResponse] = Field(default_factory=list)
    total: int = 0
    has_more: bool = False
    tier: Optional[str] = None


class ErrorResponse(RecommendationsResponse):
    """Failure payload: always carries an empty result so clients can render it."""

    code: str
    error: str


class VocabularyResponse(CamelModel):
    tags: list[str]
    content_warnings: list[str]
