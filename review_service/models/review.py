"""
Review domain model
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

MIN_RATING = 1
MAX_RATING = 5
MAX_COMMENT_LENGTH = 1000


def utc_now():
    """Helper function for Pydantic default_factory to get current UTC time"""
    return datetime.now(timezone.utc)


class Review(BaseModel):
    """A user's review of a book, as stored in the reviews collection"""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    book: str
    user: str
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    comment: Optional[str] = Field(None, max_length=MAX_COMMENT_LENGTH)
    is_verified_purchase: bool = Field(default=False, alias="isVerifiedPurchase")
    is_active: bool = Field(default=True, alias="isActive")
    is_approved: bool = Field(default=True, alias="isApproved")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=utc_now, alias="updatedAt")
