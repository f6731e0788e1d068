"""Recommendation, book and vocabulary routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from romance_rec.api.schemas import (
    BookResponse,
    ErrorResponse,
    RecommendationsResponse,
    RecommendRequest,
    VocabularyResponse,
)
from romance_rec.config import settings
from romance_rec.domain.entities import NO_BOOKS_FOUND, RecommendationResult, merge_exclusions
from romance_rec.domain.errors import NoCandidatesError
from romance_rec.services.recommendation import RecommendationOrchestrator

router = APIRouter(tags=["Recommendations"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_recommender(request: Request) -> RecommendationOrchestrator:
    """The orchestrator built at startup by the application lifespan."""
    return request.app.state.recommender


def _to_response(result: RecommendationResult) -> RecommendationsResponse:
    if result.code == NO_BOOKS_FOUND:
        raise NoCandidatesError()
    return RecommendationsResponse(
        books=[BookResponse.model_validate(book) for book in result.books],
        total=result.total,
        has_more=result.has_more,
        tier=result.tier,
    )


@router.post(
    "/recommendations",
    response_model=RecommendationsResponse,
    responses=ERROR_RESPONSES,
)
async def recommend(
    data: RecommendRequest,
    recommender: RecommendationOrchestrator = Depends(get_recommender),
) -> RecommendationsResponse:
    """Recommend books for a free-text request, skipping books the reader has already seen."""
    exclusions = merge_exclusions(
        data.read_books, data.not_interested_books, data.previously_seen_books
    )
    result = await recommender.recommend(data.message, exclusions)
    return _to_response(result)


@router.get("/books/{book_id}", response_model=BookResponse, responses=ERROR_RESPONSES)
async def get_book(
    book_id: str,
    recommender: RecommendationOrchestrator = Depends(get_recommender),
) -> BookResponse:
    book = await recommender.get_book(book_id)
    return BookResponse.model_validate(book)


@router.get(
    "/books/{book_id}/similar",
    response_model=RecommendationsResponse,
    responses=ERROR_RESPONSES,
)
async def similar_books(
    book_id: str,
    limit: Optional[int] = Query(None, ge=1, le=20),
    exclude: Optional[list[str]] = Query(None),
    recommender: RecommendationOrchestrator = Depends(get_recommender),
) -> RecommendationsResponse:
    """Books that share spice level, tags and warnings with the given book."""
    result = await recommender.similar_books(
        book_id, merge_exclusions(exclude or []), limit or settings.similar_books_limit
    )
    return _to_response(result)


@router.get("/vocabulary", response_model=VocabularyResponse)
async def vocabulary(
    recommender: RecommendationOrchestrator = Depends(get_recommender),
) -> VocabularyResponse:
    """Tags and content warnings the preference extractor currently knows."""
    vocab = await recommender.vocabulary()
    return VocabularyResponse(tags=list(vocab.tags), content_warnings=list(vocab.content_warnings))
