"""
Review API endpoints
"""

from fastapi import APIRouter, Depends, Query, status

from review_service.core.config import config
from review_service.core.errors import ErrorResponseModel
from review_service.dependencies.auth import get_current_user
from review_service.dependencies.review import get_review_service
from review_service.models.user import User
from review_service.schemas.review import (
    ReviewCreate,
    ReviewCreatedResponse,
    ReviewDeletedResponse,
    ReviewListParams,
    ReviewListResponse,
    ReviewSort,
)
from review_service.services.review import ReviewService

router = APIRouter()


@router.post(
    "/books/{book_id}/reviews",
    response_model=ReviewCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponseModel},
        401: {"model": ErrorResponseModel},
        403: {"model": ErrorResponseModel},
        404: {"model": ErrorResponseModel},
    },
)
async def create_review(
    book_id: str,
    review: ReviewCreate,
    service: ReviewService = Depends(get_review_service),
    user: User = Depends(get_current_user),
):
    """
    Review a book. The caller needs a delivered order containing the book
    and may hold only one active review per book.
    """
    return await service.create_review(book_id, user.id, review)


@router.get(
    "/books/{book_id}/reviews",
    response_model=ReviewListResponse,
    responses={400: {"model": ErrorResponseModel}},
)
async def list_reviews(
    book_id: str,
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    limit: int = Query(
        config.reviews_default_page_size,
        ge=1,
        le=config.reviews_max_page_size,
        description="Reviews per page",
    ),
    sort: ReviewSort = Query(ReviewSort.LATEST, description="latest, rating or verified"),
    service: ReviewService = Depends(get_review_service),
):
    """
    List the active, approved reviews of a book with the reviewer's name.
    """
    params = ReviewListParams(page=page, limit=limit, sort=sort)
    return await service.list_reviews(book_id, params)


@router.delete(
    "/reviews/{review_id}",
    response_model=ReviewDeletedResponse,
    responses={
        401: {"model": ErrorResponseModel},
        403: {"model": ErrorResponseModel},
        404: {"model": ErrorResponseModel},
    },
)
async def delete_review(
    review_id: str,
    service: ReviewService = Depends(get_review_service),
    user: User = Depends(get_current_user),
):
    """
    Soft delete one of the caller's own reviews.
    """
    return await service.delete_review(review_id, user.id)
