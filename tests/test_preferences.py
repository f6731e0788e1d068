"""Tests for preference extraction and response validation."""

import pytest

from romance_rec.domain.errors import InvalidInputError, PreferenceExtractionFailure
from romance_rec.domain.vocabulary import Vocabulary
from romance_rec.ports.llm import LLMError
from romance_rec.services.preferences import PreferenceExtractor, snap_to_vocabulary
from romance_rec.services.vocabulary import VocabularyCache

from tests.helpers import ScriptedLLM

VOCAB = Vocabulary(
    tags=("small town", "enemies to lovers", "second chance", "workplace/office"),
    content_warnings=("cheating", "death / grief", "graphic violence"),
)


def make_extractor(llm, scale, catalog, timeout=0.2):
    cache = VocabularyCache(catalog, fallback=VOCAB)
    return PreferenceExtractor(llm, cache, scale, timeout=timeout)


# ── Vocabulary snapping ────────────────────────────


def test_snap_keeps_tokens_that_already_match():
    assert snap_to_vocabulary(["Small Town", "enemies"], VOCAB.tags) == ("small town", "enemies")


def test_snap_ignores_separators():
    assert snap_to_vocabulary(["small-town", "workplace office"], VOCAB.tags) == (
        "small town",
        "workplace/office",
    )


def test_snap_keeps_unknown_tokens():
    assert snap_to_vocabulary(["time travel"], VOCAB.tags) == ("time travel",)


# ── Parsing ────────────────────────────────────────


def test_parse_full_answer(scale, catalog):
    extractor = make_extractor(ScriptedLLM(), scale, catalog)
    raw = (
        '{"spiceLevel": "hot", "genres": ["Small-Town"], "contentWarnings": ["death"],'
        ' "excludedWarnings": ["Cheating"], "minimumRating": 4, "keywords": ["Bakery"]}'
    )

    profile = extractor.parse(raw, VOCAB)

    assert profile.spice_level == "Hot"
    assert profile.genres == ("small town",)
    assert profile.content_warnings == ("death",)
    assert profile.excluded_warnings == ("cheating",)
    assert profile.minimum_rating == 4.0
    assert profile.keywords == ("bakery",)
    assert profile.is_default is False


def test_parse_accepts_fenced_json_and_nulls(scale, catalog):
    extractor = make_extractor(ScriptedLLM(), scale, catalog)
    raw = '```json\n{"spiceLevel": null, "genres": null, "keywords": null}\n```'

    profile = extractor.parse(raw, VOCAB)

    assert profile.spice_level is None
    assert profile.genres == ()
    assert profile.keywords == ()


def test_excluded_warning_keeps_bare_and_snapped_forms(scale, catalog):
    extractor = make_extractor(ScriptedLLM(), scale, catalog)

    profile = extractor.parse('{"excludedWarnings": ["death-grief"]}', VOCAB)

    assert profile.excluded_warnings == ("death-grief", "death / grief")


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "not json at all",
        "[1, 2, 3]",
        '{"spiceLevel": "Volcanic"}',
        '{"minimumRating": 7}',
        '{"genres": "romance"}',
        '{"genres": [1, 2]}',
    ],
)
def test_parse_rejects_bad_answers(scale, catalog, raw):
    extractor = make_extractor(ScriptedLLM(), scale, catalog)
    with pytest.raises(PreferenceExtractionFailure):
        extractor.parse(raw, VOCAB)


# ── Extraction ─────────────────────────────────────


@pytest.mark.asyncio
async def test_extract_uses_llm_answer(scale, catalog):
    llm = ScriptedLLM({"spiceLevel": "Sweet", "genres": ["small town"]})
    extractor = make_extractor(llm, scale, catalog)

    profile = await extractor.extract("  a sweet small town story ")

    assert llm.calls == ["a sweet small town story"]
    assert profile.spice_level == "Sweet"
    assert profile.genres == ("small town",)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "llm",
    [
        ScriptedLLM(error=LLMError("boom")),
        ScriptedLLM("definitely not json"),
        ScriptedLLM({"spiceLevel": "Volcanic"}),
        ScriptedLLM({"spiceLevel": "Hot"}, delay=1.0),
    ],
    ids=["transport", "bad-json", "unknown-spice", "timeout"],
)
async def test_extract_falls_back_to_default_profile(scale, catalog, llm):
    extractor = make_extractor(llm, scale, catalog)

    profile = await extractor.extract("anything")

    assert profile.is_default is True
    assert profile.spice_level == "Medium"
    assert profile.genres == ("contemporary", "enemies to lovers")


@pytest.mark.asyncio
async def test_extract_rejects_blank_message(scale, catalog):
    llm = ScriptedLLM({})
    extractor = make_extractor(llm, scale, catalog)

    with pytest.raises(InvalidInputError):
        await extractor.extract("   ")
    assert llm.calls == []


def test_default_spice_must_be_on_scale(scale, catalog):
    cache = VocabularyCache(catalog)
    with pytest.raises(ValueError):
        PreferenceExtractor(ScriptedLLM(), cache, scale, default_spice_level="Lukewarm")
