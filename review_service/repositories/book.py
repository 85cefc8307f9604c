"""
Book repository: the book lookups and rating writes the review service needs
"""

from typing import List, Optional

from pymongo.errors import PyMongoError

from review_service.models.book import Book, BookRatings
from review_service.repositories.base import BaseRepository, to_object_id


class BookRepository(BaseRepository):
    """Repository for the books collection"""

    @staticmethod
    def _doc_to_book(doc: dict) -> Book:
        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        if doc.get("ratings") is None:
            doc["ratings"] = BookRatings().model_dump()
        return Book(**doc)

    async def get_active(self, book_id: str) -> Optional[Book]:
        """Get a book by id if it exists and is active"""
        obj_id = to_object_id(book_id)
        if obj_id is None:
            return None

        try:
            doc = await self.collection.find_one({"_id": obj_id, "isActive": True})
        except PyMongoError as e:
            raise self._database_error("book retrieval", e)

        return self._doc_to_book(doc) if doc else None

    async def update_ratings(self, book_id: str, ratings: BookRatings) -> bool:
        """Write the rating aggregate onto the book. Returns False if the book is gone."""
        obj_id = to_object_id(book_id)
        if obj_id is None:
            return False

        try:
            result = await self.collection.update_one(
                {"_id": obj_id},
                {"$set": {"ratings.average": ratings.average, "ratings.count": ratings.count}},
            )
        except PyMongoError as e:
            raise self._database_error("book ratings update", e)

        return result.matched_count > 0

    async def list_ids(self) -> List[str]:
        """Ids of every book, active or not"""
        try:
            cursor = self.collection.find({}, {"_id": 1})
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise self._database_error("book id listing", e)

        return [str(doc["_id"]) for doc in docs]
