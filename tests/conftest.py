import random
from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

from romance_rec.adapters.catalog.memory import InMemoryCatalogAdapter
from romance_rec.bootstrap import build_orchestrator
from romance_rec.config import DEFAULT_SPICE_LEVELS, Settings
from romance_rec.database import create_engine, create_session_factory, init_models
from romance_rec.domain.entities import SpiceScale
from romance_rec.ports.catalog import CatalogPort
from romance_rec.ports.llm import LLMError, LLMPort

from tests.helpers import CATALOG, ScriptedLLM, seed_catalog


@pytest.fixture
def scale() -> SpiceScale:
    return SpiceScale(DEFAULT_SPICE_LEVELS)


@pytest.fixture
def catalog() -> InMemoryCatalogAdapter:
    return InMemoryCatalogAdapter(CATALOG)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None, retrieval_timeout_seconds=0.2, llm_timeout_seconds=0.2)


@pytest.fixture
def make_orchestrator(test_settings):
    """Factory: wire an orchestrator over any catalog / LLM with seeded jitter."""

    def _make(catalog: CatalogPort, llm: LLMPort, **overrides):
        cfg = test_settings.model_copy(update=overrides)
        return build_orchestrator(cfg, catalog, llm=llm, rng=random.Random(7))

    return _make


@pytest.fixture
def failing_llm() -> ScriptedLLM:
    return ScriptedLLM(error=LLMError("connection refused"))


# ── SQL catalog ────────────────────────────────────

@pytest.fixture
async def sql_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """A throwaway SQLite catalog with tables created, disposed after the test."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def sql_session_factory(sql_engine):
    factory = create_session_factory(sql_engine)
    await seed_catalog(factory, CATALOG)
    return factory

