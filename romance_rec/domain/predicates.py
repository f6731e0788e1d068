"""
Catalog predicates.

A Predicate is an explicit, immutable description of a catalog filter. The same
structure is compiled to SQL by the SQL catalog adapter and evaluated directly
(``Predicate.matches``) by the in-memory adapter, so both collaborators agree on
what a tier means.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from romance_rec.domain.entities import Book

_TRAILING_COUNT = re.compile(r"\s*\(\s*\d+\s*\)\s*$")
_WHITESPACE = re.compile(r"\s+")


def normalize_label(label: Optional[str]) -> str:
    """Lower-case, trim, and drop a trailing count: ``"Romance (412)" -> "romance"``."""
    if not label:
        return ""
    text = _TRAILING_COUNT.sub("", label.strip().lower())
    return _WHITESPACE.sub(" ", text).strip()


def normalize_tokens(tokens: Iterable[str]) -> tuple[str, ...]:
    """Normalize, drop blanks, and de-duplicate while keeping order."""
    seen: dict[str, None] = {}
    for token in tokens:
        norm = normalize_label(token)
        if norm:
            seen.setdefault(norm, None)
    return tuple(seen)


def label_matches(token: str, label: str) -> bool:
    """Case-insensitive substring match of a normalized token against a label."""
    token = normalize_label(token)
    return bool(token) and token in normalize_label(label)


def any_label_matches(token: str, labels: Iterable[str]) -> bool:
    return any(label_matches(token, label) for label in labels)


class MatchMode(str, Enum):
    ALL = "all"
    ANY = "any"
    NONE = "none"  # clause omitted


class LadderTier(str, Enum):
    STRICT = "strict"
    RELAXED = "relaxed"
    LENIENT = "lenient"


def _clause_holds(tokens: tuple[str, ...], mode: MatchMode, labels: list[str]) -> bool:
    if mode is MatchMode.NONE or not tokens:
        return True
    if mode is MatchMode.ALL:
        return all(any_label_matches(t, labels) for t in tokens)
    return any(any_label_matches(t, labels) for t in tokens)


@dataclass(frozen=True)
class Predicate:
    """One rung of the predicate ladder."""

    tier: LadderTier
    min_rating: float = 0.0
    max_rating: float = 5.0
    spice_levels: Optional[frozenset[str]] = None  # None: no spice constraint
    genre_tokens: tuple[str, ...] = ()
    genre_mode: MatchMode = MatchMode.NONE
    warning_tokens: tuple[str, ...] = ()
    warning_mode: MatchMode = MatchMode.NONE
    forbidden_warnings: tuple[str, ...] = ()
    excluded_ids: frozenset[str] = field(default_factory=frozenset)

    def matches(self, book: Book) -> bool:
        if book.id in self.excluded_ids:
            return False
        if not self.min_rating <= book.average_rating <= self.max_rating:
            return False
        if self.spice_levels is not None and book.spice_level is not None:
            allowed = {level.strip().lower() for level in self.spice_levels}
            if book.spice_level.strip().lower() not in allowed:
                return False
        tags = book.tag_names
        warnings = book.warning_names
        if not _clause_holds(self.genre_tokens, self.genre_mode, tags):
            return False
        if not _clause_holds(self.warning_tokens, self.warning_mode, warnings):
            return False
        return not any(any_label_matches(t, warnings) for t in self.forbidden_warnings)

    def describe(self) -> str:
        """Short human-readable summary for logs."""
        parts = [f"tier={self.tier.value}", f"rating=[{self.min_rating}, {self.max_rating}]"]
        if self.spice_levels is not None:
            parts.append(f"spice={sorted(self.spice_levels)}")
        if self.genre_mode is not MatchMode.NONE:
            parts.append(f"genres[{self.genre_mode.value}]={list(self.genre_tokens)}")
        if self.warning_mode is not MatchMode.NONE:
            parts.append(f"warnings[{self.warning_mode.value}]={list(self.warning_tokens)}")
        if self.forbidden_warnings:
            parts.append(f"forbidden={list(self.forbidden_warnings)}")
        parts.append(f"excluded_ids={len(self.excluded_ids)}")
        return " ".join(parts)
