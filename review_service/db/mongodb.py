"""
MongoDB connection management
"""

from motor.motor_asyncio import AsyncIOMotorClient
from typing import Optional

from review_service.core.config import config
from review_service.core.errors import ErrorResponse
from review_service.core.logger import logger

BOOKS_COLLECTION = "books"
ORDERS_COLLECTION = "orders"
REVIEWS_COLLECTION = "reviews"
USERS_COLLECTION = "users"


class Database:
    """Database connection manager"""

    client: Optional[AsyncIOMotorClient] = None
    database = None


db = Database()


async def connect_to_mongo():
    """Create database connection"""
    logger.info("Connecting to MongoDB...")

    try:
        db.client = AsyncIOMotorClient(
            config.mongodb_url,
            serverSelectionTimeoutMS=config.mongodb_timeout_ms,
            tz_aware=True,
        )
        db.database = db.client[config.mongodb_database]

        await db.client.admin.command('ping')

        logger.info(
            f"Successfully connected to MongoDB database '{config.mongodb_database}'",
            metadata={
                "event": "mongodb_connected",
                "database": config.mongodb_database,
            }
        )
    except Exception as e:
        logger.error(
            "Could not connect to MongoDB",
            error=e,
            metadata={"event": "mongodb_connection_error"}
        )
        raise ErrorResponse(
            f"Could not connect to MongoDB: {e}",
            status_code=503
        )


async def close_mongo_connection():
    """Close database connection"""
    logger.info("Closing connection to MongoDB...")
    if db.client is not None:
        db.client.close()
        db.client = None
        db.database = None


async def get_database():
    """Get database instance"""
    if db.database is None:
        await connect_to_mongo()
    return db.database


async def get_books_collection():
    database = await get_database()
    return database[BOOKS_COLLECTION]


async def get_orders_collection():
    database = await get_database()
    return database[ORDERS_COLLECTION]


async def get_reviews_collection():
    database = await get_database()
    return database[REVIEWS_COLLECTION]
