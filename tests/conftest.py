"""Shared test fixtures"""
import pytest
from unittest.mock import AsyncMock, MagicMock
from datetime import datetime, timedelta, timezone
from bson import ObjectId

from review_service.models.book import Book, BookRatings
from review_service.models.review import Review


BOOK_ID = "507f1f77bcf86cd799439011"
USER_ID = "507f1f77bcf86cd799439022"
OTHER_USER_ID = "507f1f77bcf86cd799439033"
REVIEW_ID = "507f1f77bcf86cd799439044"


def make_cursor(docs):
    """Mock Motor cursor whose to_list resolves to docs"""
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


@pytest.fixture
def book_id():
    return BOOK_ID


@pytest.fixture
def user_id():
    return USER_ID


@pytest.fixture
def other_user_id():
    return OTHER_USER_ID


@pytest.fixture
def review_id():
    return REVIEW_ID


@pytest.fixture
def mock_collection():
    """Mock Motor collection: query methods are awaitable, aggregate/find return cursors"""
    collection = MagicMock()
    collection.name = "test_collection"
    collection.find_one = AsyncMock()
    collection.insert_one = AsyncMock()
    collection.update_one = AsyncMock()
    collection.count_documents = AsyncMock()
    collection.aggregate = MagicMock(return_value=make_cursor([]))
    collection.find = MagicMock(return_value=make_cursor([]))
    return collection


@pytest.fixture
def sample_book():
    return Book(id=BOOK_ID, is_active=True, ratings=BookRatings())


@pytest.fixture
def sample_review():
    return Review(
        id=REVIEW_ID,
        book=BOOK_ID,
        user=USER_ID,
        rating=4,
        comment="A solid read",
        is_verified_purchase=True,
    )


@pytest.fixture
def review_doc():
    """Review document as stored in MongoDB"""
    return {
        "_id": ObjectId(REVIEW_ID),
        "book": ObjectId(BOOK_ID),
        "user": ObjectId(USER_ID),
        "rating": 4,
        "comment": "A solid read",
        "isVerifiedPurchase": True,
        "isActive": True,
        "isApproved": True,
        "createdAt": datetime(2024, 5, 1, tzinfo=timezone.utc),
        "updatedAt": datetime(2024, 5, 1, tzinfo=timezone.utc),
        "__v": 0,
    }


@pytest.fixture
def listed_review_docs():
    """Documents as produced by the listing pipeline, newest first"""
    base = datetime(2024, 5, 1, tzinfo=timezone.utc)
    return [
        {
            "_id": ObjectId(),
            "book": ObjectId(BOOK_ID),
            "user": ObjectId(USER_ID),
            "rating": 5,
            "comment": "Loved it",
            "isVerifiedPurchase": True,
            "createdAt": base + timedelta(days=2),
            "reviewerName": "Alice",
        },
        {
            "_id": ObjectId(),
            "book": ObjectId(BOOK_ID),
            "user": ObjectId(OTHER_USER_ID),
            "rating": 3,
            "isVerifiedPurchase": False,
            "createdAt": base,
        },
    ]
