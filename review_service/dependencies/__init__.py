"""
Dependencies module initialization
"""

from .auth import get_current_user
from .review import get_review_service

__all__ = [
    "get_current_user",
    "get_review_service",
]
