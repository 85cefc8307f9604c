"""
Schemas module initialization
"""

from .review import (
    ReviewSort,
    ReviewCreate,
    ReviewListParams,
    ReviewResponse,
    Reviewer,
    ReviewListItem,
    ReviewCreatedResponse,
    ReviewListResponse,
    ReviewDeletedResponse,
)

__all__ = [
    "ReviewSort",
    "ReviewCreate",
    "ReviewListParams",
    "ReviewResponse",
    "Reviewer",
    "ReviewListItem",
    "ReviewCreatedResponse",
    "ReviewListResponse",
    "ReviewDeletedResponse",
]
