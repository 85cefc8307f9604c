"""
Repositories module initialization
"""

from .book import BookRepository
from .order import OrderRepository
from .review import ReviewRepository

__all__ = [
    "BookRepository",
    "OrderRepository",
    "ReviewRepository",
]
