import logging
from collections.abc import Sequence

import openai
from openai import AsyncOpenAI

from romance_rec.config import DEFAULT_SPICE_LEVELS
from romance_rec.domain.vocabulary import Vocabulary
from romance_rec.ports.llm import LLMError, LLMPort
from romance_rec.prompts.templates import EXTRACT_PREFERENCES, render_preference_prompt

logger = logging.getLogger(__name__)


class OpenAILLMAdapter(LLMPort):
    """LLM adapter using the OpenAI chat completions API in JSON mode."""

    def __init__(
        self,
        api_key: str,
        model: str,
        timeout: float = 15.0,
        spice_levels: Sequence[str] = DEFAULT_SPICE_LEVELS,
    ) -> None:
        # One attempt per request; the extractor falls back instead of retrying.
        self._client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self._model = model
        self._spice_levels = tuple(spice_levels)

    async def _generate(self, system: str, user: str, max_tokens: int) -> str:
        """Send a JSON-mode chat completion request to OpenAI."""
        logger.info("OpenAI request: model=%s, max_tokens=%d", self._model, max_tokens)
        try:
            resp = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                max_tokens=max_tokens,
                temperature=0.0,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as exc:
            raise LLMError(f"OpenAI request failed: {exc}") from exc
        if not resp.choices:
            raise LLMError("OpenAI returned no choices")
        result = resp.choices[0].message.content or ""
        if not result.strip():
            raise LLMError("OpenAI returned empty content")
        logger.info("OpenAI response: %d chars", len(result))
        return result

    async def extract_preferences(self, message: str, vocabulary: Vocabulary) -> str:
        """Extract reader preferences via OpenAI."""
        prompt = render_preference_prompt(message, vocabulary, self._spice_levels)
        return await self._generate(
            prompt["system"], prompt["user"], EXTRACT_PREFERENCES.max_output_tokens
        )
