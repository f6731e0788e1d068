"""LLM port: abstract interface for the preference-extraction language model."""

from abc import ABC, abstractmethod

from romance_rec.domain.vocabulary import Vocabulary


class LLMError(Exception):
    """Transport-level failure talking to the language model."""


class LLMPort(ABC):
    """Abstraction over any chat-style LLM provider."""

    @abstractmethod
    async def extract_preferences(self, message: str, vocabulary: Vocabulary) -> str:
        """
        Return the raw model output for a preference-extraction request.

        The output is expected to be a JSON object; parsing and validation are
        the caller's job. Implementations raise LLMError on transport failures.
        """
        ...
