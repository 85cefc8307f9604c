"""
Order repository, read-only: answers purchase history questions
"""

from pymongo.errors import PyMongoError

from review_service.models.order import OrderStatus
from review_service.repositories.base import BaseRepository, to_object_id, to_reference


class OrderRepository(BaseRepository):
    """Repository for the orders collection"""

    async def has_delivered_order(self, user_id: str, book_id: str) -> bool:
        """Whether the user has at least one delivered order containing the book"""
        book_obj_id = to_object_id(book_id)
        if book_obj_id is None:
            return False

        query = {
            "user": to_reference(user_id),
            "items.book": book_obj_id,
            "status": OrderStatus.DELIVERED.value,
        }

        try:
            count = await self.collection.count_documents(query, limit=1)
        except PyMongoError as e:
            raise self._database_error("purchase history lookup", e)

        return count > 0
