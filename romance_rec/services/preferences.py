"""Preference extraction: free text -> PreferenceProfile via the LLM port."""

import asyncio
import json
import logging
import re
from collections.abc import Iterable, Sequence
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

from romance_rec.domain.entities import PreferenceProfile, SpiceScale
from romance_rec.domain.errors import InvalidInputError, PreferenceExtractionFailure
from romance_rec.domain.predicates import normalize_tokens
from romance_rec.domain.vocabulary import Vocabulary
from romance_rec.ports.llm import LLMError, LLMPort
from romance_rec.services.vocabulary import VocabularyCache

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)
_SEPARATORS = re.compile(r"[\s\-_/&]+")


class ExtractedPreferences(BaseModel):
    """Schema the model's JSON answer must satisfy."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    spice_level: Optional[StrictStr] = Field(default=None, alias="spiceLevel")
    genres: list[StrictStr] = Field(default_factory=list)
    content_warnings: list[StrictStr] = Field(default_factory=list, alias="contentWarnings")
    excluded_warnings: list[StrictStr] = Field(default_factory=list, alias="excludedWarnings")
    minimum_rating: Optional[float] = Field(default=None, ge=0.0, le=5.0, alias="minimumRating")
    keywords: list[StrictStr] = Field(default_factory=list)

    @field_validator("genres", "content_warnings", "excluded_warnings", "keywords", mode="before")
    @classmethod
    def _null_is_empty(cls, value):
        return [] if value is None else value


def _loose_key(label: str) -> str:
    return _SEPARATORS.sub(" ", label).strip()


def snap_to_vocabulary(tokens: Iterable[str], labels: Sequence[str]) -> tuple[str, ...]:
    """
    Normalize tokens and reconcile them with the known vocabulary.

    A token that already matches some label is kept as is. A token that only
    matches once separators are ignored ("small-town" vs "small town") becomes
    the shortest such label. Anything else is kept and will simply match no
    book.
    """
    snapped: list[str] = []
    for token in normalize_tokens(tokens):
        if any(token in label for label in labels):
            snapped.append(token)
            continue
        key = _loose_key(token)
        close = [label for label in labels if key and key in _loose_key(label)]
        snapped.append(min(close, key=len) if close else token)
    return normalize_tokens(snapped)


def _strip_fences(raw: str) -> str:
    text = raw.strip()
    match = _FENCE.match(text)
    return match.group(1) if match else text


class PreferenceExtractor:
    """
    Turns a free-text request into a PreferenceProfile.

    Exactly one LLM call is made per request. Any failure on that path
    (transport error, timeout, bad JSON, schema violation) resolves to the
    default profile, so recommendation can always proceed.
    """

    def __init__(
        self,
        llm: LLMPort,
        vocabulary: VocabularyCache,
        scale: SpiceScale,
        default_spice_level: str = "Medium",
        seed_genres: Sequence[str] = ("contemporary", "enemies to lovers"),
        timeout: float = 15.0,
    ) -> None:
        self._llm = llm
        self._vocabulary = vocabulary
        self._scale = scale
        self._default_spice = scale.canonical(default_spice_level)
        if self._default_spice is None:
            raise ValueError(f"default spice level {default_spice_level!r} is not on the scale")
        self._seed_genres = normalize_tokens(seed_genres)
        self._timeout = timeout

    def default_profile(self) -> PreferenceProfile:
        return PreferenceProfile(
            spice_level=self._default_spice,
            genres=self._seed_genres,
            is_default=True,
        )

    async def extract(self, message: str) -> PreferenceProfile:
        if not message or not message.strip():
            raise InvalidInputError("A message describing what you want to read is required")

        vocabulary = await self._vocabulary.snapshot()
        try:
            raw = await asyncio.wait_for(
                self._llm.extract_preferences(message.strip(), vocabulary),
                timeout=self._timeout,
            )
            profile = self.parse(raw, vocabulary)
        except asyncio.TimeoutError:
            logger.warning(
                "Preference extraction timed out after %.1fs; using default profile",
                self._timeout,
            )
            return self.default_profile()
        except (LLMError, PreferenceExtractionFailure) as exc:
            logger.warning("Preference extraction failed (%s); using default profile", exc)
            return self.default_profile()
        except Exception as exc:
            logger.error(
                "Unexpected preference extraction error; using default profile", exc_info=exc
            )
            return self.default_profile()

        logger.info(
            "Extracted preferences: spice=%s genres=%s warnings=%s excluded=%s",
            profile.spice_level,
            list(profile.genres),
            list(profile.content_warnings),
            list(profile.excluded_warnings),
        )
        return profile

    def parse(self, raw: str, vocabulary: Vocabulary) -> PreferenceProfile:
        """Validate the model's answer. Raises PreferenceExtractionFailure."""
        if not raw or not raw.strip():
            raise PreferenceExtractionFailure("empty model response")
        try:
            data = json.loads(_strip_fences(raw))
        except json.JSONDecodeError as exc:
            raise PreferenceExtractionFailure(f"response is not JSON: {exc.msg}") from exc
        if not isinstance(data, dict):
            raise PreferenceExtractionFailure("response is not a JSON object")
        try:
            extracted = ExtractedPreferences.model_validate(data)
        except ValidationError as exc:
            raise PreferenceExtractionFailure(
                f"response failed validation ({exc.error_count()} errors)"
            ) from exc

        spice = None
        if extracted.spice_level is not None and extracted.spice_level.strip():
            spice = self._scale.canonical(extracted.spice_level)
            if spice is None:
                raise PreferenceExtractionFailure(
                    f"unknown spice level {extracted.spice_level!r}"
                )

        # Excluded tokens keep their bare form alongside any snapped label.
        excluded = normalize_tokens(extracted.excluded_warnings)
        excluded = normalize_tokens(
            excluded + snap_to_vocabulary(excluded, vocabulary.content_warnings)
        )

        return PreferenceProfile(
            spice_level=spice,
            genres=snap_to_vocabulary(extracted.genres, vocabulary.tags),
            content_warnings=snap_to_vocabulary(
                extracted.content_warnings, vocabulary.content_warnings
            ),
            excluded_warnings=excluded,
            minimum_rating=extracted.minimum_rating,
            keywords=normalize_tokens(extracted.keywords),
        )
