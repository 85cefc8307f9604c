"""
Review service containing the business logic for creating, listing and
deleting book reviews
"""

import math

from review_service.core.errors import (
    ConflictError,
    InternalError,
    NotFoundError,
    PermissionDeniedError,
)
from review_service.core.logger import logger
from review_service.models.review import Review
from review_service.repositories.book import BookRepository
from review_service.repositories.order import OrderRepository
from review_service.repositories.review import ReviewRepository
from review_service.schemas.review import (
    ReviewCreate,
    ReviewCreatedResponse,
    ReviewDeletedResponse,
    ReviewListParams,
    ReviewListResponse,
    ReviewResponse,
)
from review_service.services.ratings import RatingAggregator


class ReviewService:
    """Service layer for review business logic"""

    def __init__(
        self,
        review_repository: ReviewRepository,
        book_repository: BookRepository,
        order_repository: OrderRepository,
        rating_aggregator: RatingAggregator = None,
    ):
        self.review_repository = review_repository
        self.book_repository = book_repository
        self.order_repository = order_repository
        self.rating_aggregator = rating_aggregator or RatingAggregator(
            review_repository, book_repository
        )

    async def create_review(
        self, book_id: str, user_id: str, review_data: ReviewCreate
    ) -> ReviewCreatedResponse:
        """
        Create a review for a book on behalf of the caller.

        Only one active review per user and book is allowed, and only users
        with a delivered order containing the book may review it. The book's
        rating aggregate is recomputed afterwards.

        Raises:
            NotFoundError: book missing or inactive
            ConflictError: the caller already has an active review for the book
            PermissionDeniedError: no delivered order containing the book
        """
        book = await self.book_repository.get_active(book_id)
        if not book:
            raise NotFoundError("Book not found or inactive")

        existing = await self.review_repository.find_active_by_book_and_user(book.id, user_id)
        if existing:
            raise ConflictError("You have already reviewed this book")

        has_purchased = await self.order_repository.has_delivered_order(user_id, book.id)
        if not has_purchased:
            raise PermissionDeniedError(
                "You can review only after delivery",
                details={"book_id": book.id},
            )

        review = await self.review_repository.create(
            Review(
                book=book.id,
                user=user_id,
                rating=review_data.rating,
                comment=review_data.comment,
                is_verified_purchase=True,
            )
        )

        await self.rating_aggregator.recalculate(book.id)

        logger.info(
            f"Created review {review.id} for book {book.id}",
            user_id=user_id,
            metadata={
                "event": "review_created",
                "review_id": review.id,
                "book_id": book.id,
                "rating": review.rating,
            },
        )

        return ReviewCreatedResponse(data=ReviewResponse(**review.model_dump()))

    async def list_reviews(self, book_id: str, params: ReviewListParams) -> ReviewListResponse:
        """Page of active, approved reviews for a book"""
        reviews, total_reviews = await self.review_repository.list_for_book(
            book_id, sort=params.sort, skip=params.skip, limit=params.limit
        )

        logger.debug(
            f"Listed reviews for book {book_id}",
            metadata={
                "event": "reviews_listed",
                "book_id": book_id,
                "page": params.page,
                "limit": params.limit,
                "sort": params.sort.value,
                "total": total_reviews,
            },
        )

        return ReviewListResponse(
            total_reviews=total_reviews,
            current_page=params.page,
            total_pages=math.ceil(total_reviews / params.limit),
            count=len(reviews),
            data=reviews,
        )

    async def delete_review(self, review_id: str, user_id: str) -> ReviewDeletedResponse:
        """
        Soft delete the caller's own review and recompute the book rating.

        Raises:
            NotFoundError: no active review with that id
            PermissionDeniedError: the review belongs to another user
        """
        review = await self.review_repository.find_active_by_id(review_id)
        if not review:
            raise NotFoundError("Review not found")

        if str(review.user) != str(user_id):
            raise PermissionDeniedError("You are not allowed to delete this review")

        deleted = await self.review_repository.soft_delete(review.id)
        if not deleted:
            # Deleted by a concurrent request between lookup and update
            raise NotFoundError("Review not found")

        try:
            await self.rating_aggregator.recalculate(review.book)
        except InternalError as e:
            # The review is already inactive, so the stored rating is stale
            logger.error(
                f"Ratings of book {review.book} are stale after deleting review {review.id}",
                user_id=user_id,
                metadata={"event": "ratings_stale", "book_id": review.book, "review_id": review.id},
                error=e,
            )
            raise

        logger.info(
            f"Deleted review {review.id}",
            user_id=user_id,
            metadata={"event": "review_deleted", "review_id": review.id, "book_id": review.book},
        )

        return ReviewDeletedResponse()
