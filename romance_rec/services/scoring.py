"""
Candidate scoring and page selection.

A candidate's score is a sum of independent, bounded signals:

    genre overlap    [0, 4]     share of requested genres the book carries, x4
    rating quality   [-1.67, 1] peaks at 4.0 stars
    popularity       [0, 1]     ratings_count / 1000, capped
    spice match      {0, 1}     book sits inside the requested spice band
    keyword overlap  [0, 0.5]   share of free keywords found in the book
    warning penalty  {0, -100}  book carries an excluded warning (also gated)
    jitter           [0, 0.5)   variety between identical requests

No single signal can invert the others except the warning penalty, which is a
gate: penalised candidates are never selected.
"""

import logging
import random
from collections.abc import Iterable, Set
from typing import Optional

from romance_rec.domain.entities import (
    Book,
    PreferenceProfile,
    RecommendationResult,
    ScoredCandidate,
    ScoreFactors,
    SpiceScale,
)
from romance_rec.domain.predicates import any_label_matches, normalize_label

logger = logging.getLogger(__name__)

W_GENRE = 4.0
RATING_TARGET = 4.0
RATING_SPREAD = 1.5
POPULARITY_CAP = 1000
SPICE_MATCH_BONUS = 1.0
W_KEYWORD = 0.5
WARNING_PENALTY = -100.0

# similar-books weights
SIMILAR_SPICE_BONUS = 2.0
SIMILAR_SHARED_LABEL = 1.0


def genre_overlap(book: Book, genres: tuple[str, ...]) -> float:
    """Fraction of requested genre tokens matched by at least one tag, times W_GENRE."""
    if not genres:
        return 0.0
    tags = book.tag_names
    matched = sum(1 for token in genres if any_label_matches(token, tags))
    return W_GENRE * min(matched / len(genres), 1.0)


def rating_quality(average_rating: float) -> float:
    rating = min(max(average_rating, 0.0), 5.0)
    return 1.0 - abs(rating - RATING_TARGET) / RATING_SPREAD


def popularity(ratings_count: int) -> float:
    return min(max(ratings_count, 0) / POPULARITY_CAP, 1.0)


def keyword_overlap(book: Book, keywords: tuple[str, ...]) -> float:
    if not keywords:
        return 0.0
    haystack = [book.title, book.summary, *book.tag_names]
    matched = sum(1 for kw in keywords if any_label_matches(kw, haystack))
    return W_KEYWORD * matched / len(keywords)


def carries_excluded_warning(book: Book, excluded: Iterable[str]) -> bool:
    warnings = book.warning_names
    return any(any_label_matches(token, warnings) for token in excluded)


class Scorer:
    """Owns score computation and the final page selection."""

    def __init__(
        self,
        scale: SpiceScale,
        jitter_max: float = 0.5,
        rng: Optional[random.Random] = None,
    ) -> None:
        if jitter_max < 0:
            raise ValueError("jitter_max must be non-negative")
        self._scale = scale
        self._jitter_max = jitter_max
        self._rng = rng or random.Random()

    def score(self, book: Book, profile: PreferenceProfile) -> ScoredCandidate:
        gated = carries_excluded_warning(book, profile.excluded_warnings)
        factors = ScoreFactors(
            genre=genre_overlap(book, profile.genres),
            rating=rating_quality(book.average_rating),
            popularity=popularity(book.ratings_count),
            spice=(
                SPICE_MATCH_BONUS
                if self._scale.within(book.spice_level, profile.spice_level)
                else 0.0
            ),
            warning=WARNING_PENALTY if gated else 0.0,
            keyword=keyword_overlap(book, profile.keywords),
            jitter=self._rng.random() * self._jitter_max,
        )
        return ScoredCandidate(book=book, score=factors.total, factors=factors, gated=gated)

    def select_top(
        self,
        candidates: Iterable[Book],
        profile: PreferenceProfile,
        exclusions: Set[str],
        page_size: int = 4,
    ) -> RecommendationResult:
        """Score, drop excluded / gated / duplicate books, sort, and cut to one page."""
        seen: set[str] = set()
        eligible: list[ScoredCandidate] = []
        for book in candidates:
            if book.id in exclusions or book.id in seen:
                continue
            seen.add(book.id)
            scored = self.score(book, profile)
            if scored.gated:
                logger.debug("Dropping %s: carries an excluded warning", book.id)
                continue
            eligible.append(scored)

        eligible.sort(key=lambda c: c.score, reverse=True)
        for candidate in eligible[:page_size]:
            logger.debug("Selected %s score=%.3f %s", candidate.book.id, candidate.score, candidate.factors)

        return RecommendationResult(
            books=[c.book for c in eligible[:page_size]],
            total=len(eligible),
            has_more=len(eligible) > page_size,
        )

    def similarity(self, target: Book, book: Book) -> float:
        score = book.average_rating
        if target.spice_level and book.spice_level:
            if normalize_label(target.spice_level) == normalize_label(book.spice_level):
                score += SIMILAR_SPICE_BONUS
        target_tags = {normalize_label(t) for t in target.tag_names}
        target_warnings = {normalize_label(w) for w in target.warning_names}
        score += SIMILAR_SHARED_LABEL * len(target_tags & {normalize_label(t) for t in book.tag_names})
        score += SIMILAR_SHARED_LABEL * len(
            target_warnings & {normalize_label(w) for w in book.warning_names}
        )
        return score

    def rank_similar(
        self,
        target: Book,
        candidates: Iterable[Book],
        exclusions: Set[str],
        limit: int = 5,
    ) -> RecommendationResult:
        """Books most like ``target``: same spice, shared tags and warnings, good rating."""
        pool = {
            b.id: b for b in candidates if b.id != target.id and b.id not in exclusions
        }
        ranked = sorted(pool.values(), key=lambda b: self.similarity(target, b), reverse=True)
        return RecommendationResult(
            books=ranked[:limit],
            total=len(ranked),
            has_more=len(ranked) > limit,
        )
