"""
Models module initialization
"""

from .book import Book, BookRatings
from .order import OrderStatus
from .review import Review
from .user import User

__all__ = [
    "Book",
    "BookRatings",
    "OrderStatus",
    "Review",
    "User",
]
