"""
Shared helpers for MongoDB repositories
"""

from typing import Any, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from review_service.core.errors import InternalError
from review_service.core.logger import logger


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Convert a string id to ObjectId, or None when it is not a valid one"""
    if isinstance(value, ObjectId):
        return value
    if value is not None and ObjectId.is_valid(str(value)):
        return ObjectId(str(value))
    return None


def to_reference(value: Any) -> Any:
    """
    Reference to another document as it is stored: an ObjectId when the value
    is a valid one, the plain string otherwise.
    """
    object_id = to_object_id(value)
    return object_id if object_id is not None else str(value)


class BaseRepository:
    """Base repository holding a Motor collection"""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    def _database_error(self, action: str, error: PyMongoError) -> InternalError:
        logger.error(
            f"MongoDB error during {action}",
            error=error,
            metadata={"event": "database_error", "collection": self.collection.name, "action": action},
        )
        return InternalError(f"Database error during {action}")
