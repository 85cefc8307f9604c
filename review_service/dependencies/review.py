"""
Dependency injection for the review service and its repositories
"""

from fastapi import Depends

from review_service.db.mongodb import (
    get_books_collection,
    get_orders_collection,
    get_reviews_collection,
)
from review_service.repositories import BookRepository, OrderRepository, ReviewRepository
from review_service.services.review import ReviewService


async def get_review_repository() -> ReviewRepository:
    collection = await get_reviews_collection()
    return ReviewRepository(collection)


async def get_book_repository() -> BookRepository:
    collection = await get_books_collection()
    return BookRepository(collection)


async def get_order_repository() -> OrderRepository:
    collection = await get_orders_collection()
    return OrderRepository(collection)


async def get_review_service(
    review_repository: ReviewRepository = Depends(get_review_repository),
    book_repository: BookRepository = Depends(get_book_repository),
    order_repository: OrderRepository = Depends(get_order_repository),
) -> ReviewService:
    """Get review service instance"""
    return ReviewService(review_repository, book_repository, order_repository)
