"""Tests for predicate normalization and the Strict / Relaxed / Lenient ladder."""

import pytest

from romance_rec.domain.entities import PreferenceProfile
from romance_rec.domain.predicates import (
    LadderTier,
    MatchMode,
    Predicate,
    label_matches,
    normalize_label,
    normalize_tokens,
)
from romance_rec.services.filters import build_predicate, build_predicate_ladder

from tests.helpers import make_book

PROFILE = PreferenceProfile(
    spice_level="Mild",
    genres=("Small Town", "second chance"),
    content_warnings=("death / grief",),
    excluded_warnings=("cheating",),
    minimum_rating=4.2,
)


# ── Labels ─────────────────────────────────────────


def test_normalize_label_strips_counts_and_case():
    assert normalize_label("  Small Town (412) ") == "small town"
    assert normalize_label("Enemies   to Lovers") == "enemies to lovers"
    assert normalize_label(None) == ""


def test_normalize_tokens_dedupes_in_order():
    assert normalize_tokens(["Mafia", "", "mafia", "Sports "]) == ("mafia", "sports")


def test_label_matches_is_substring():
    assert label_matches("town", "Small Town")
    assert not label_matches("small town", "town")
    assert not label_matches("", "anything")


# ── Ladder ─────────────────────────────────────────


def test_ladder_order_and_modes(scale):
    strict, relaxed, lenient = build_predicate_ladder(PROFILE, frozenset({"x"}), scale=scale)

    assert [p.tier for p in (strict, relaxed, lenient)] == list(LadderTier)
    assert strict.genre_mode is MatchMode.ALL
    assert strict.warning_mode is MatchMode.ALL
    assert relaxed.genre_mode is MatchMode.ANY
    assert relaxed.warning_mode is MatchMode.ANY
    assert lenient.genre_mode is MatchMode.NONE
    assert lenient.genre_tokens == ()
    assert lenient.warning_tokens == ()


def test_every_tier_keeps_spice_exclusions_and_forbidden_warnings(scale):
    for predicate in build_predicate_ladder(PROFILE, frozenset({"b1", "b2"}), scale=scale):
        assert predicate.spice_levels == frozenset({"Sweet", "Mild"})
        assert predicate.forbidden_warnings == ("cheating",)
        assert predicate.excluded_ids == frozenset({"b1", "b2"})
        assert predicate.max_rating == 5.0


def test_minimum_rating_only_tightens_strict_and_relaxed(scale):
    strict, relaxed, lenient = build_predicate_ladder(PROFILE, frozenset(), scale=scale)

    assert strict.min_rating == 4.2
    assert relaxed.min_rating == 4.2
    assert lenient.min_rating == 3.5


def test_minimum_rating_below_band_is_ignored(scale):
    profile = PreferenceProfile(spice_level="Hot", minimum_rating=2.0)

    predicate = build_predicate(LadderTier.STRICT, profile, frozenset(), scale)

    assert predicate.min_rating == 3.5


def test_no_spice_preference_means_no_spice_clause(scale):
    profile = PreferenceProfile(spice_level=None, genres=("mafia",))

    predicate = build_predicate(LadderTier.STRICT, profile, frozenset(), scale)

    assert predicate.spice_levels is None


def test_empty_genres_drop_the_clause(scale):
    profile = PreferenceProfile(spice_level="Hot")

    predicate = build_predicate(LadderTier.STRICT, profile, frozenset(), scale)

    assert predicate.genre_mode is MatchMode.NONE


def test_custom_rating_band(scale):
    profile = PreferenceProfile(spice_level="Hot")

    predicate = build_predicate(LadderTier.LENIENT, profile, frozenset(), scale, (4.0, 4.8))

    assert (predicate.min_rating, predicate.max_rating) == (4.0, 4.8)


# ── Predicate.matches ──────────────────────────────


@pytest.mark.parametrize(
    "book, expected",
    [
        (make_book("ok", rating=4.5, spice="Mild", tags=("small town", "second chance"),
                   warnings=("death / grief",)), True),
        (make_book("null-spice", rating=4.5, spice=None, tags=("small town", "second chance"),
                   warnings=("death / grief",)), True),
        (make_book("too-hot", rating=4.5, spice="Hot", tags=("small town", "second chance"),
                   warnings=("death / grief",)), False),
        (make_book("one-genre", rating=4.5, spice="Mild", tags=("small town",),
                   warnings=("death / grief",)), False),
        (make_book("cheats", rating=4.5, spice="Mild", tags=("small town", "second chance"),
                   warnings=("death / grief", "cheating")), False),
        (make_book("low", rating=4.0, spice="Mild", tags=("small town", "second chance"),
                   warnings=("death / grief",)), False),
    ],
    ids=lambda v: v.id if hasattr(v, "id") else str(v),
)
def test_strict_predicate_matches(scale, book, expected):
    predicate = build_predicate(LadderTier.STRICT, PROFILE, frozenset(), scale)
    assert predicate.matches(book) is expected


def test_relaxed_predicate_accepts_any_genre(scale):
    predicate = build_predicate(LadderTier.RELAXED, PROFILE, frozenset(), scale)
    book = make_book("one", rating=4.5, spice="Sweet", tags=("second chance",),
                     warnings=("death / grief",))
    assert predicate.matches(book)


def test_excluded_id_never_matches():
    predicate = Predicate(tier=LadderTier.LENIENT, excluded_ids=frozenset({"b1"}))
    assert not predicate.matches(make_book("b1"))
    assert predicate.matches(make_book("b2"))


def test_describe_mentions_active_clauses(scale):
    text = build_predicate(LadderTier.STRICT, PROFILE, frozenset(), scale).describe()
    assert "tier=strict" in text
    assert "genres[all]" in text
    assert "forbidden=['cheating']" in text
