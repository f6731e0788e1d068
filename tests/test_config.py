import pytest
from pydantic import ValidationError

from romance_rec.adapters.llm.mock import MockLLMAdapter
from romance_rec.adapters.llm.ollama import OllamaLLMAdapter
from romance_rec.adapters.llm.openai_adapter import OpenAILLMAdapter
from romance_rec.bootstrap import build_llm_adapter, build_orchestrator
from romance_rec.config import LLMProvider, Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("LLM_PROVIDER", raising=False)
    monkeypatch.delenv("PAGE_SIZE", raising=False)
    cfg = Settings(_env_file=None)
    assert cfg.page_size == 4
    assert (cfg.min_rating, cfg.max_rating) == (3.5, 5.0)
    assert cfg.default_spice_level == "Medium"
    assert cfg.llm_provider is LLMProvider.MOCK


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PAGE_SIZE", "6")
    monkeypatch.setenv("LLM_PROVIDER", "ollama")
    cfg = Settings(_env_file=None)
    assert cfg.page_size == 6
    assert cfg.llm_provider is LLMProvider.OLLAMA


@pytest.mark.parametrize(
    "overrides",
    [
        {"page_size": 0},
        {"min_rating": 6},
        {"spice_levels": ["Cold", "Warm"], "default_spice_level": "Medium"},
    ],
)
def test_invalid_settings(overrides):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)


@pytest.mark.parametrize(
    "provider, adapter_type",
    [
        (LLMProvider.MOCK, MockLLMAdapter),
        (LLMProvider.OLLAMA, OllamaLLMAdapter),
    ],
)
def test_build_llm_adapter(provider, adapter_type):
    assert isinstance(build_llm_adapter(Settings(_env_file=None, llm_provider=provider)), adapter_type)


def test_openai_requires_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(RuntimeError):
        build_llm_adapter(Settings(_env_file=None, llm_provider=LLMProvider.OPENAI))

    adapter = build_llm_adapter(
        Settings(_env_file=None, llm_provider=LLMProvider.OPENAI, openai_api_key="sk-test")
    )
    assert isinstance(adapter, OpenAILLMAdapter)


def test_build_orchestrator_uses_page_size(catalog):
    orchestrator = build_orchestrator(Settings(_env_file=None, page_size=7), catalog)
    assert orchestrator.page_size == 7
