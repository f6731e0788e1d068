"""FastAPI application factory, the entry point for the romance recommender."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from romance_rec.adapters.catalog.sql import SQLCatalogAdapter
from romance_rec.api.routes.recommendations import router as recommendations_router
from romance_rec.api.schemas import ErrorResponse
from romance_rec.bootstrap import build_orchestrator
from romance_rec.config import settings
from romance_rec.database import create_engine, create_session_factory
from romance_rec.domain.errors import InvalidInputError, RecommendationError

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    body = ErrorResponse(code=code, error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True, exclude_none=True))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: wire the catalog and recommender, dispose the engine on exit."""
    logger.info("Romance recommender starting up...")
    logger.info("LLM provider: %s", settings.llm_provider.value)
    logger.info("Spice scale: %s", ", ".join(settings.spice_levels))
    engine = create_engine(settings.database_url, echo=settings.database_echo)
    catalog = SQLCatalogAdapter(create_session_factory(engine))
    app.state.recommender = build_orchestrator(settings, catalog)
    yield
    await engine.dispose()
    logger.info("Romance recommender shutting down...")


async def recommendation_error_handler(request: Request, exc: RecommendationError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.code)
    return error_response(exc.status_code, exc.code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    detail = first.get("msg", "Invalid request")
    message = f"{location}: {detail}" if location else detail
    return error_response(400, InvalidInputError.code, message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(500, RecommendationError.code, "Failed to get recommendations")


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="Romance Recommender",
        description="Natural-language romance novel recommendations",
        version="1.0.0",
        lifespan=lifespan,
    )

    # ── Middleware ──────────────────────────────────
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Error mapping ──────────────────────────────
    application.add_exception_handler(RecommendationError, recommendation_error_handler)
    application.add_exception_handler(RequestValidationError, validation_error_handler)
    application.add_exception_handler(Exception, unhandled_error_handler)

    # ── Routes ─────────────────────────────────────
    application.include_router(recommendations_router)

    # ── Health Check ───────────────────────────────
    @application.get("/health", tags=["System"])
    async def health() -> dict[str, str]:
        return {"status": "healthy", "service": "romance-recommender"}

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
