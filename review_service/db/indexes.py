"""
Index management for the review service collections.

Indexes are created at application startup; create_index is a no-op when an
identical index already exists.
"""

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from review_service.core.logger import logger
from review_service.db.mongodb import ORDERS_COLLECTION, REVIEWS_COLLECTION


async def create_indexes(database: AsyncIOMotorDatabase) -> None:
    """
    Create the indexes backing review listing, the one-review-per-user rule,
    rating aggregation and the verified purchase lookup.
    """
    reviews = database[REVIEWS_COLLECTION]
    orders = database[ORDERS_COLLECTION]

    try:
        # Listing by recency (default sort) and rating aggregation
        await reviews.create_index(
            [
                ("book", ASCENDING),
                ("isActive", ASCENDING),
                ("isApproved", ASCENDING),
                ("createdAt", DESCENDING),
            ],
            name="idx_book_active_approved_created",
        )

        # Listing by rating
        await reviews.create_index(
            [
                ("book", ASCENDING),
                ("isActive", ASCENDING),
                ("isApproved", ASCENDING),
                ("rating", DESCENDING),
            ],
            name="idx_book_active_approved_rating",
        )

        # At most one active review per (book, user)
        await reviews.create_index(
            [("book", ASCENDING), ("user", ASCENDING)],
            unique=True,
            partialFilterExpression={"isActive": True},
            name="idx_book_user_active_unique",
        )

        # Verified purchase lookup
        await orders.create_index(
            [("user", ASCENDING), ("status", ASCENDING), ("items.book", ASCENDING)],
            name="idx_user_status_items_book",
        )

        logger.info(
            "Review service indexes created",
            metadata={"event": "indexes_created"},
        )
    except PyMongoError as e:
        logger.error(
            "Failed to create indexes",
            error=e,
            metadata={"event": "indexes_error"},
        )
        raise
