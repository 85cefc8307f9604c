"""
API schemas for review endpoints
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from review_service.models.review import Review
from review_service.validators import ReviewValidatorMixin


class ReviewSort(str, Enum):
    """Sort orders accepted by the review listing"""
    LATEST = "latest"
    RATING = "rating"
    VERIFIED = "verified"


class ReviewCreate(ReviewValidatorMixin, BaseModel):
    """Schema for creating a review"""
    rating: Optional[int] = Field(default=None, validate_default=True)
    comment: Optional[str] = None


class ReviewListParams(BaseModel):
    """Pagination and sort parameters for the review listing"""
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)
    sort: ReviewSort = ReviewSort.LATEST

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class ReviewResponse(Review):
    """Schema for a single review"""
    id: str


class Reviewer(BaseModel):
    """Reviewer reference with the display name only"""
    id: str
    name: Optional[str] = None


class ReviewListItem(BaseModel):
    """Review as shown in a book's review listing"""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    book: str
    user: Reviewer
    rating: int
    comment: Optional[str] = None
    is_verified_purchase: bool = Field(default=False, alias="isVerifiedPurchase")
    created_at: datetime = Field(alias="createdAt")


class ReviewCreatedResponse(BaseModel):
    success: bool = True
    message: str = "Review added successfully"
    data: ReviewResponse


class ReviewListResponse(BaseModel):
    """Paginated review listing"""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    total_reviews: int = Field(alias="totalReviews")
    current_page: int = Field(alias="currentPage")
    total_pages: int = Field(alias="totalPages")
    count: int
    data: List[ReviewListItem]


class ReviewDeletedResponse(BaseModel):
    success: bool = True
    message: str = "Review deleted successfully"
