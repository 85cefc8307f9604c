"""
Database module initialization
"""

from .mongodb import (
    db,
    connect_to_mongo,
    close_mongo_connection,
    get_database,
    get_books_collection,
    get_orders_collection,
    get_reviews_collection,
)
from .indexes import create_indexes

__all__ = [
    "db",
    "connect_to_mongo",
    "close_mongo_connection",
    "get_database",
    "get_books_collection",
    "get_orders_collection",
    "get_reviews_collection",
    "create_indexes",
]
