"""Domain entities for the romance recommender."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from romance_rec.domain.errors import NoCandidatesError


@dataclass(frozen=True)
class LabelCount:
    """A tag or content-warning label with the number of readers who applied it."""

    name: str
    count: int = 1


@dataclass(frozen=True)
class Book:
    """Read-only catalog record. Ingestion owns it; the core never mutates it."""

    id: str
    title: str
    author: str
    url: str = ""
    average_rating: float = 0.0
    ratings_count: int = 0
    spice_level: Optional[str] = None
    summary: str = ""
    tags: tuple[LabelCount, ...] = ()
    content_warnings: tuple[LabelCount, ...] = ()
    series: Optional[str] = None
    series_number: Optional[float] = None
    page_count: Optional[int] = None
    published_date: Optional[date] = None
    scraped_status: Optional[str] = None

    @property
    def tag_names(self) -> list[str]:
        return [t.name for t in self.tags]

    @property
    def warning_names(self) -> list[str]:
        return [w.name for w in self.content_warnings]


class SpiceScale:
    """
    Ordered spice-level vocabulary.

    The scale is configuration: revisions of the catalog have used five and six
    levels, so nothing outside this class assumes a particular set.
    """

    def __init__(self, levels: Sequence[str]) -> None:
        if not levels:
            raise ValueError("spice scale needs at least one level")
        self._levels = tuple(levels)
        self._rank = {level.lower(): i for i, level in enumerate(self._levels)}

    @property
    def levels(self) -> tuple[str, ...]:
        return self._levels

    def canonical(self, label: Optional[str]) -> Optional[str]:
        """Return the scale's spelling of ``label`` or None if it is not on the scale."""
        if label is None:
            return None
        rank = self._rank.get(label.strip().lower())
        return None if rank is None else self._levels[rank]

    def rank(self, label: Optional[str]) -> Optional[int]:
        if label is None:
            return None
        return self._rank.get(label.strip().lower())

    def band(self, ceiling: str) -> frozenset[str]:
        """All levels at or below ``ceiling``."""
        rank = self.rank(ceiling)
        if rank is None:
            raise ValueError(f"unknown spice level: {ceiling!r}")
        return frozenset(self._levels[: rank + 1])

    def within(self, label: Optional[str], ceiling: Optional[str]) -> bool:
        """True when ``label`` is known and does not exceed ``ceiling``."""
        if ceiling is None:
            return False
        rank, top = self.rank(label), self.rank(ceiling)
        return rank is not None and top is not None and rank <= top


@dataclass(frozen=True)
class PreferenceProfile:
    """Structured preferences extracted from one user message."""

    spice_level: Optional[str] = None
    genres: tuple[str, ...] = ()
    content_warnings: tuple[str, ...] = ()
    excluded_warnings: tuple[str, ...] = ()
    minimum_rating: Optional[float] = None
    keywords: tuple[str, ...] = ()
    is_default: bool = False


@dataclass(frozen=True)
class ScoreFactors:
    """Per-signal contributions that add up to a candidate's score."""

    genre: float = 0.0
    rating: float = 0.0
    popularity: float = 0.0
    spice: float = 0.0
    warning: float = 0.0
    keyword: float = 0.0
    jitter: float = 0.0

    @property
    def total(self) -> float:
        return (
            self.genre
            + self.rating
            + self.popularity
            + self.spice
            + self.warning
            + self.keyword
            + self.jitter
        )


@dataclass(frozen=True)
class ScoredCandidate:
    book: Book
    score: float
    factors: ScoreFactors = field(default_factory=ScoreFactors)
    gated: bool = False


NO_BOOKS_FOUND = NoCandidatesError.code


@dataclass
class RecommendationResult:
    """The only thing the core hands back to its caller."""

    books: list[Book] = field(default_factory=list)
    total: int = 0
    has_more: bool = False
    tier: Optional[str] = None
    code: Optional[str] = None

    @classmethod
    def no_matches(cls) -> "RecommendationResult":
        return cls(books=[], total=0, has_more=False, code=NO_BOOKS_FOUND)

    @property
    def is_empty(self) -> bool:
        return not self.books


def merge_exclusions(*id_lists: Optional[Iterable[str]]) -> frozenset[str]:
    """Union of read / not-interested / previously-seen ids; blanks are ignored."""
    merged: set[str] = set()
    for ids in id_lists:
        if not ids:
            continue
        merged.update(str(i).strip() for i in ids if i is not None and str(i).strip())
    return frozenset(merged)
