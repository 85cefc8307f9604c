"""
Services module initialization
"""

from .ratings import RatingAggregator, round_rating
from .review import ReviewService

__all__ = [
    "RatingAggregator",
    "ReviewService",
    "round_rating",
]
