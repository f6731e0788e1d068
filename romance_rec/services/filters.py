"""Catalog filter builder: PreferenceProfile -> Strict / Relaxed / Lenient predicates."""

import logging
from collections.abc import Set

from romance_rec.domain.entities import PreferenceProfile, SpiceScale
from romance_rec.domain.predicates import LadderTier, MatchMode, Predicate, normalize_tokens

logger = logging.getLogger(__name__)

DEFAULT_RATING_BAND = (3.5, 5.0)

# tier -> (genre mode, required-warning mode, honour the profile's minimum rating)
TIER_RULES: dict[LadderTier, tuple[MatchMode, MatchMode, bool]] = {
    LadderTier.STRICT: (MatchMode.ALL, MatchMode.ALL, True),
    LadderTier.RELAXED: (MatchMode.ANY, MatchMode.ANY, True),
    LadderTier.LENIENT: (MatchMode.NONE, MatchMode.NONE, False),
}

LADDER_ORDER = (LadderTier.STRICT, LadderTier.RELAXED, LadderTier.LENIENT)


def _mode(mode: MatchMode, tokens: tuple[str, ...]) -> MatchMode:
    return mode if tokens else MatchMode.NONE


def build_predicate(
    tier: LadderTier,
    profile: PreferenceProfile,
    exclusions: Set[str],
    scale: SpiceScale,
    rating_band: tuple[float, float] = DEFAULT_RATING_BAND,
) -> Predicate:
    genre_mode, warning_mode, use_profile_rating = TIER_RULES[tier]
    band_min, band_max = rating_band

    min_rating = band_min
    if use_profile_rating and profile.minimum_rating is not None:
        min_rating = min(max(band_min, profile.minimum_rating), band_max)

    ceiling = scale.canonical(profile.spice_level)
    genres = normalize_tokens(profile.genres)
    warnings = normalize_tokens(profile.content_warnings)

    return Predicate(
        tier=tier,
        min_rating=min_rating,
        max_rating=band_max,
        spice_levels=scale.band(ceiling) if ceiling else None,
        genre_tokens=genres if genre_mode is not MatchMode.NONE else (),
        genre_mode=_mode(genre_mode, genres),
        warning_tokens=warnings if warning_mode is not MatchMode.NONE else (),
        warning_mode=_mode(warning_mode, warnings),
        # Excluded warnings are a hard gate on every tier.
        forbidden_warnings=normalize_tokens(profile.excluded_warnings),
        excluded_ids=frozenset(exclusions),
    )


def build_predicate_ladder(
    profile: PreferenceProfile,
    exclusions: Set[str],
    *,
    scale: SpiceScale,
    rating_band: tuple[float, float] = DEFAULT_RATING_BAND,
) -> tuple[Predicate, ...]:
    """Return the predicates to try, strictest first."""
    ladder = tuple(
        build_predicate(tier, profile, exclusions, scale, rating_band) for tier in LADDER_ORDER
    )
    for predicate in ladder:
        logger.debug("Ladder rung: %s", predicate.describe())
    return ladder
