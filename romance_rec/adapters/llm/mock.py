import asyncio
import json
import logging
import re
from collections.abc import Sequence

from romance_rec.config import DEFAULT_SPICE_LEVELS
from romance_rec.domain.vocabulary import Vocabulary
from romance_rec.ports.llm import LLMPort
from romance_rec.prompts.templates import approx_tokens

logger = logging.getLogger(__name__)

# Checked in order; the first phrase found wins.
SPICE_HINTS: tuple[tuple[str, str], ...] = (
    ("inferno", "Inferno"),
    ("scorching", "Scorching"),
    ("very explicit", "Scorching"),
    ("steamy", "Hot"),
    ("explicit", "Hot"),
    ("hot", "Hot"),
    ("spicy", "Medium"),
    ("medium", "Medium"),
    ("mild", "Mild"),
    ("closed door", "Sweet"),
    ("fade to black", "Sweet"),
    ("clean", "Sweet"),
    ("sweet", "Sweet"),
)

NEGATIONS = ("no", "without", "not", "avoid", "nothing with", "skip")

_RATING = re.compile(r"(\d(?:\.\d+)?)\s*\+?\s*stars?")


def _flatten(text: str) -> str:
    return re.sub(r"[-_/]", " ", text.lower())


def _phrase(label: str) -> re.Pattern[str]:
    return re.compile(r"\b" + re.escape(_flatten(label)) + r"\b")


def _negated(text: str, label: str) -> bool:
    pattern = r"\b(?:" + "|".join(NEGATIONS) + r")\s+(?:\w+\s+){0,2}" + re.escape(_flatten(label)) + r"\b"
    return re.search(pattern, text) is not None


class MockLLMAdapter(LLMPort):
    """
    Mock LLM adapter for development and tests without API access.

    Answers with deterministic, keyword-driven JSON in the same shape a real
    model is asked for. Latency can be simulated for integration testing.
    """

    def __init__(
        self,
        latency: float = 0.0,
        spice_levels: Sequence[str] = DEFAULT_SPICE_LEVELS,
    ) -> None:
        self._latency = latency
        self._spice_levels = {level.lower(): level for level in spice_levels}

    def _spice(self, text: str) -> str | None:
        for phrase, level in SPICE_HINTS:
            if level.lower() in self._spice_levels and _phrase(phrase).search(text):
                return self._spice_levels[level.lower()]
        return None

    async def extract_preferences(self, message: str, vocabulary: Vocabulary) -> str:
        """Return mock preferences derived from vocabulary phrases in the message."""
        if self._latency:
            await asyncio.sleep(self._latency)
        text = _flatten(message)

        genres: list[str] = []
        wanted: list[str] = []
        excluded: list[str] = []
        for tag in vocabulary.tags:
            if _phrase(tag).search(text):
                (excluded if _negated(text, tag) else genres).append(tag)
        for warning in vocabulary.content_warnings:
            if _phrase(warning).search(text):
                (excluded if _negated(text, warning) else wanted).append(warning)

        rating = _RATING.search(text)
        payload = {
            "spiceLevel": self._spice(text),
            "genres": genres,
            "contentWarnings": wanted,
            "excludedWarnings": excluded,
            "minimumRating": min(float(rating.group(1)), 5.0) if rating else None,
            "keywords": [],
        }
        logger.info(
            "MockLLM: extract_preferences called (%d estimated tokens, %d genres)",
            approx_tokens(message),
            len(genres),
        )
        return json.dumps(payload)
