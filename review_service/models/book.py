"""
Book model, limited to the fields the review service reads and writes
"""

from pydantic import BaseModel, ConfigDict, Field


class BookRatings(BaseModel):
    """Rating aggregate cached on the book, derived from its reviews"""
    average: float = Field(default=0.0, ge=0.0, le=5.0)
    count: int = Field(default=0, ge=0)


class Book(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    is_active: bool = Field(default=True, alias="isActive")
    ratings: BookRatings = Field(default_factory=BookRatings)
