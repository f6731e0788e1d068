"""Application settings loaded from the environment (and an optional .env file)."""

from enum import Enum

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMProvider(str, Enum):
    MOCK = "mock"
    OLLAMA = "ollama"
    OPENAI = "openai"


DEFAULT_SPICE_LEVELS = ["Sweet", "Mild", "Medium", "Hot", "Scorching", "Inferno"]


class Settings(BaseSettings):
    """Runtime configuration for the recommender service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Catalog storage ─────────────────────────────
    database_url: str = "sqlite+aiosqlite:///./romance_catalog.db"
    database_echo: bool = False

    # ── LLM collaborator ────────────────────────────
    llm_provider: LLMProvider = LLMProvider.MOCK
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.1"
    llm_timeout_seconds: float = 15.0

    # ── Retrieval ───────────────────────────────────
    retrieval_timeout_seconds: float = 5.0
    page_size: int = 4
    fetch_multiplier: int = 3
    lenient_fetch_multiplier: int = 1
    min_rating: float = 3.5
    max_rating: float = 5.0

    # ── Preferences ─────────────────────────────────
    spice_levels: list[str] = DEFAULT_SPICE_LEVELS
    default_spice_level: str = "Medium"
    default_seed_genres: list[str] = ["contemporary", "enemies to lovers"]

    # ── Scoring ─────────────────────────────────────
    jitter_max: float = 0.5
    similar_books_limit: int = 5

    # ── Vocabulary cache ────────────────────────────
    vocabulary_ttl_seconds: float = 300.0
    vocabulary_capacity: int = 250
    vocabulary_timeout_seconds: float = 5.0

    # ── HTTP ────────────────────────────────────────
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"

    @field_validator("page_size", "fetch_multiplier", "lenient_fetch_multiplier", "vocabulary_capacity")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value

    @field_validator("min_rating", "max_rating")
    @classmethod
    def _rating_range(cls, value: float) -> float:
        if not 0.0 <= value <= 5.0:
            raise ValueError("ratings must lie in [0, 5]")
        return value

    @field_validator("default_spice_level")
    @classmethod
    def _known_spice(cls, value: str, info) -> str:
        levels = info.data.get("spice_levels") or DEFAULT_SPICE_LEVELS
        if value not in levels:
            raise ValueError(f"default_spice_level must be one of {levels}")
        return value


settings = Settings()
