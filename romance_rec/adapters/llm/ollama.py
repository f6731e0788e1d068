import logging
from collections.abc import Sequence

import httpx

from romance_rec.config import DEFAULT_SPICE_LEVELS
from romance_rec.domain.vocabulary import Vocabulary
from romance_rec.ports.llm import LLMError, LLMPort
from romance_rec.prompts.templates import EXTRACT_PREFERENCES, render_preference_prompt

logger = logging.getLogger(__name__)


class OllamaLLMAdapter(LLMPort):
    """Preference extraction through a local Ollama server's chat endpoint."""

    def __init__(
        self,
        base_url: str,
        model: str,
        timeout: float = 15.0,
        spice_levels: Sequence[str] = DEFAULT_SPICE_LEVELS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._timeout = timeout
        self._spice_levels = tuple(spice_levels)
        self._transport = transport

    async def _generate(self, system: str, user: str, max_tokens: int) -> str:
        """Send a JSON-format chat request to Ollama."""
        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "stream": False,
            "format": "json",
            "options": {"num_predict": max_tokens, "temperature": 0},
        }
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            logger.info("Ollama request: model=%s, max_tokens=%d", self._model, max_tokens)
            try:
                resp = await client.post(f"{self._base_url}/api/chat", json=payload)
                resp.raise_for_status()
                result = resp.json()["message"]["content"]
            except httpx.HTTPError as exc:
                raise LLMError(f"Ollama request failed: {exc}") from exc
            except (KeyError, TypeError, ValueError) as exc:
                raise LLMError(f"Unexpected Ollama response shape: {exc}") from exc
            if not isinstance(result, str) or not result.strip():
                raise LLMError("Ollama returned no message content")
            logger.info("Ollama response: %d chars", len(result))
            return result

    async def extract_preferences(self, message: str, vocabulary: Vocabulary) -> str:
        """Extract reader preferences via Ollama."""
        prompt = render_preference_prompt(message, vocabulary, self._spice_levels)
        return await self._generate(
            prompt["system"], prompt["user"], EXTRACT_PREFERENCES.max_output_tokens
        )
