"""
Review repository for data access following the Repository pattern
"""

from datetime import datetime, timezone
from typing import List, Optional, Tuple

from pymongo.errors import DuplicateKeyError, PyMongoError

from review_service.core.errors import ConflictError
from review_service.db.mongodb import USERS_COLLECTION
from review_service.models.review import Review
from review_service.repositories.base import BaseRepository, to_object_id, to_reference
from review_service.schemas.review import ReviewListItem, ReviewSort

# "_id" last keeps pagination stable between pages when sort keys tie
SORT_ORDERS = {
    ReviewSort.LATEST: {"createdAt": -1, "_id": -1},
    ReviewSort.RATING: {"rating": -1, "createdAt": -1, "_id": -1},
    ReviewSort.VERIFIED: {"isVerifiedPurchase": -1, "createdAt": -1, "_id": -1},
}


def visible_reviews_filter(book_obj_id) -> dict:
    """Reviews that count for a book: active and approved"""
    return {"book": book_obj_id, "isActive": True, "isApproved": True}


class ReviewRepository(BaseRepository):
    """Repository for review data access operations"""

    @staticmethod
    def _doc_to_review(doc: dict) -> Review:
        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        doc["book"] = str(doc["book"])
        doc["user"] = str(doc["user"])
        return Review(**doc)

    @staticmethod
    def _doc_to_list_item(doc: dict) -> ReviewListItem:
        return ReviewListItem(
            id=str(doc["_id"]),
            book=str(doc["book"]),
            user={"id": str(doc["user"]), "name": doc.get("reviewerName")},
            rating=doc["rating"],
            comment=doc.get("comment"),
            is_verified_purchase=doc.get("isVerifiedPurchase", False),
            created_at=doc["createdAt"],
        )

    async def find_active_by_id(self, review_id: str) -> Optional[Review]:
        obj_id = to_object_id(review_id)
        if obj_id is None:
            return None

        try:
            doc = await self.collection.find_one({"_id": obj_id, "isActive": True})
        except PyMongoError as e:
            raise self._database_error("review retrieval", e)

        return self._doc_to_review(doc) if doc else None

    async def find_active_by_book_and_user(self, book_id: str, user_id: str) -> Optional[Review]:
        book_obj_id = to_object_id(book_id)
        if book_obj_id is None:
            return None

        try:
            doc = await self.collection.find_one(
                {"book": book_obj_id, "user": to_reference(user_id), "isActive": True}
            )
        except PyMongoError as e:
            raise self._database_error("review lookup", e)

        return self._doc_to_review(doc) if doc else None

    async def create(self, review: Review) -> Review:
        """Insert a review and return it with its generated id"""
        doc = review.model_dump(by_alias=True, exclude={"id"})
        doc["book"] = to_object_id(review.book)
        doc["user"] = to_reference(review.user)

        try:
            result = await self.collection.insert_one(doc)
        except DuplicateKeyError:
            # The partial unique index lost a race with a concurrent create
            raise ConflictError("You have already reviewed this book")
        except PyMongoError as e:
            raise self._database_error("review creation", e)

        return review.model_copy(update={"id": str(result.inserted_id)})

    async def soft_delete(self, review_id: str) -> bool:
        """Mark an active review inactive. Returns False if there was none."""
        obj_id = to_object_id(review_id)
        if obj_id is None:
            return False

        try:
            result = await self.collection.update_one(
                {"_id": obj_id, "isActive": True},
                {"$set": {"isActive": False, "updatedAt": datetime.now(timezone.utc)}},
            )
        except PyMongoError as e:
            raise self._database_error("review deletion", e)

        return result.modified_count > 0

    async def list_for_book(
        self,
        book_id: str,
        sort: ReviewSort = ReviewSort.LATEST,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[ReviewListItem], int]:
        """
        Page of active, approved reviews for a book with reviewer names,
        and the total number of such reviews.
        """
        book_obj_id = to_object_id(book_id)
        if book_obj_id is None:
            return [], 0

        query = visible_reviews_filter(book_obj_id)
        pipeline = [
            {"$match": query},
            {"$sort": SORT_ORDERS[sort]},
            {"$skip": skip},
            {"$limit": limit},
            {
                "$lookup": {
                    "from": USERS_COLLECTION,
                    "localField": "user",
                    "foreignField": "_id",
                    "as": "reviewer",
                }
            },
            {
                "$project": {
                    "book": 1,
                    "user": 1,
                    "rating": 1,
                    "comment": 1,
                    "isVerifiedPurchase": 1,
                    "createdAt": 1,
                    "reviewerName": {"$arrayElemAt": ["$reviewer.name", 0]},
                }
            },
        ]

        try:
            docs = await self.collection.aggregate(pipeline).to_list(length=limit)
            total_count = await self.collection.count_documents(query)
        except PyMongoError as e:
            raise self._database_error("review listing", e)

        return [self._doc_to_list_item(doc) for doc in docs], total_count

    async def rating_stats(self, book_id: str) -> Tuple[Optional[float], int]:
        """
        Raw average rating and count over the active, approved reviews of a
        book. The average is None when there are no such reviews.
        """
        book_obj_id = to_object_id(book_id)
        if book_obj_id is None:
            return None, 0

        pipeline = [
            {"$match": visible_reviews_filter(book_obj_id)},
            {
                "$group": {
                    "_id": "$book",
                    "averageRating": {"$avg": "$rating"},
                    "count": {"$sum": 1},
                }
            },
        ]

        try:
            stats = await self.collection.aggregate(pipeline).to_list(length=1)
        except PyMongoError as e:
            raise self._database_error("rating aggregation", e)

        if not stats:
            return None, 0
        return stats[0]["averageRating"], stats[0]["count"]
