#!/usr/bin/env python3
"""
Recompute the cached rating aggregate of every book from its reviews.

Repairs ratings left stale by concurrent review changes on the same book.
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv()

from review_service.db.mongodb import (
    close_mongo_connection,
    connect_to_mongo,
    get_books_collection,
    get_reviews_collection,
)
from review_service.repositories import BookRepository, ReviewRepository
from review_service.services.ratings import RatingAggregator


async def recalculate():
    await connect_to_mongo()
    try:
        aggregator = RatingAggregator(
            ReviewRepository(await get_reviews_collection()),
            BookRepository(await get_books_collection()),
        )
        count = await aggregator.recalculate_all()
        print(f"Recalculated ratings for {count} books.")
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    asyncio.run(recalculate())
