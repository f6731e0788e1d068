"""Composition root: wires settings, adapters and services together."""

import logging
import random
from typing import Optional

from romance_rec.adapters.llm.mock import MockLLMAdapter
from romance_rec.adapters.llm.ollama import OllamaLLMAdapter
from romance_rec.adapters.llm.openai_adapter import OpenAILLMAdapter
from romance_rec.config import LLMProvider, Settings
from romance_rec.domain.entities import SpiceScale
from romance_rec.ports.catalog import CatalogPort
from romance_rec.ports.llm import LLMPort
from romance_rec.services.preferences import PreferenceExtractor
from romance_rec.services.recommendation import RecommendationOrchestrator
from romance_rec.services.retriever import CandidateRetriever
from romance_rec.services.scoring import Scorer
from romance_rec.services.vocabulary import VocabularyCache

logger = logging.getLogger(__name__)


def build_llm_adapter(cfg: Settings) -> LLMPort:
    """Pick the LLM collaborator named by ``cfg.llm_provider``."""
    if cfg.llm_provider is LLMProvider.OPENAI:
        if not cfg.openai_api_key:
            raise RuntimeError("OPENAI_API_KEY is required when LLM_PROVIDER=openai")
        return OpenAILLMAdapter(
            api_key=cfg.openai_api_key,
            model=cfg.openai_model,
            timeout=cfg.llm_timeout_seconds,
            spice_levels=cfg.spice_levels,
        )
    if cfg.llm_provider is LLMProvider.OLLAMA:
        return OllamaLLMAdapter(
            base_url=cfg.ollama_base_url,
            model=cfg.ollama_model,
            timeout=cfg.llm_timeout_seconds,
            spice_levels=cfg.spice_levels,
        )
    return MockLLMAdapter(spice_levels=cfg.spice_levels)


def build_orchestrator(
    cfg: Settings,
    catalog: CatalogPort,
    llm: Optional[LLMPort] = None,
    rng: Optional[random.Random] = None,
) -> RecommendationOrchestrator:
    scale = SpiceScale(cfg.spice_levels)
    vocabulary = VocabularyCache(
        catalog,
        ttl_seconds=cfg.vocabulary_ttl_seconds,
        capacity=cfg.vocabulary_capacity,
        timeout=cfg.vocabulary_timeout_seconds,
    )
    extractor = PreferenceExtractor(
        llm or build_llm_adapter(cfg),
        vocabulary,
        scale,
        default_spice_level=cfg.default_spice_level,
        seed_genres=cfg.default_seed_genres,
        timeout=cfg.llm_timeout_seconds,
    )
    retriever = CandidateRetriever(
        catalog,
        timeout=cfg.retrieval_timeout_seconds,
        fetch_multiplier=cfg.fetch_multiplier,
        lenient_fetch_multiplier=cfg.lenient_fetch_multiplier,
    )
    scorer = Scorer(scale, jitter_max=cfg.jitter_max, rng=rng)
    logger.info(
        "Recommender wired: llm=%s page_size=%d rating_band=[%.1f, %.1f]",
        cfg.llm_provider.value,
        cfg.page_size,
        cfg.min_rating,
        cfg.max_rating,
    )
    return RecommendationOrchestrator(
        extractor=extractor,
        retriever=retriever,
        scorer=scorer,
        catalog=catalog,
        vocabulary=vocabulary,
        scale=scale,
        page_size=cfg.page_size,
        rating_band=(cfg.min_rating, cfg.max_rating),
    )
