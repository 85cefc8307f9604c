"""
Rating aggregation

Recomputes the rating aggregate cached on a book from its active, approved
reviews. Always a full recompute, never incremental. The read-aggregate-write
sequence is not atomic: two concurrent review changes on one book can race and
the last write wins, so recalculate_all() exists to repair drift.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from review_service.core.logger import logger
from review_service.models.book import BookRatings
from review_service.repositories.book import BookRepository
from review_service.repositories.review import ReviewRepository


def round_rating(value: Optional[float]) -> float:
    """
    Round an average rating to one decimal place, halves rounding up.

    Rounds the exact binary value of the float, so 4.35 (stored as
    4.3499999...) gives 4.3 while 4.25 (exact) gives 4.3.
    """
    if value is None:
        return 0.0
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class RatingAggregator:
    """Keeps Book.ratings in sync with the reviews collection"""

    def __init__(self, review_repository: ReviewRepository, book_repository: BookRepository):
        self.review_repository = review_repository
        self.book_repository = book_repository

    async def compute(self, book_id: str) -> BookRatings:
        average, count = await self.review_repository.rating_stats(book_id)
        if not count:
            return BookRatings(average=0.0, count=0)
        return BookRatings(average=round_rating(average), count=count)

    async def recalculate(self, book_id: str) -> BookRatings:
        """Recompute the book's ratings and persist them onto the book"""
        ratings = await self.compute(book_id)
        updated = await self.book_repository.update_ratings(book_id, ratings)

        if not updated:
            logger.warning(
                f"Book {book_id} not found while recalculating ratings",
                metadata={"event": "ratings_book_not_found", "book_id": book_id},
            )
        else:
            logger.info(
                f"Recalculated ratings for book {book_id}",
                metadata={
                    "event": "ratings_recalculated",
                    "book_id": book_id,
                    "average": ratings.average,
                    "count": ratings.count,
                },
            )

        return ratings

    async def recalculate_all(self) -> int:
        """Recompute the ratings of every book. Returns the number of books processed."""
        book_ids = await self.book_repository.list_ids()
        for book_id in book_ids:
            await self.recalculate(book_id)

        logger.info(
            f"Recalculated ratings for {len(book_ids)} books",
            metadata={"event": "ratings_recalculated_all", "books": len(book_ids)},
        )
        return len(book_ids)
