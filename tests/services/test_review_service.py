"""Unit tests for ReviewService"""
import pytest
from unittest.mock import AsyncMock, patch
from datetime import datetime, timedelta, timezone

from review_service.core.errors import ConflictError, InternalError, NotFoundError, PermissionDeniedError
from review_service.models.book import BookRatings
from review_service.models.review import Review
from review_service.repositories.book import BookRepository
from review_service.repositories.order import OrderRepository
from review_service.repositories.review import ReviewRepository
from review_service.schemas.review import ReviewCreate, ReviewListItem, ReviewListParams, ReviewSort
from review_service.services.ratings import RatingAggregator
from review_service.services.review import ReviewService


@pytest.fixture(autouse=True)
def silence_logger():
    with patch('review_service.services.review.logger'), patch('review_service.services.ratings.logger'):
        yield


class TestReviewService:
    """Shared fixtures for ReviewService tests"""

    @pytest.fixture
    def review_repository(self):
        return AsyncMock(spec=ReviewRepository)

    @pytest.fixture
    def book_repository(self, sample_book):
        repo = AsyncMock(spec=BookRepository)
        repo.get_active.return_value = sample_book
        repo.update_ratings.return_value = True
        return repo

    @pytest.fixture
    def order_repository(self):
        repo = AsyncMock(spec=OrderRepository)
        repo.has_delivered_order.return_value = True
        return repo

    @pytest.fixture
    def rating_aggregator(self):
        return AsyncMock(spec=RatingAggregator)

    @pytest.fixture
    def service(self, review_repository, book_repository, order_repository, rating_aggregator):
        return ReviewService(review_repository, book_repository, order_repository, rating_aggregator)


class TestCreateReview(TestReviewService):

    @pytest.fixture(autouse=True)
    def no_existing_review(self, review_repository):
        review_repository.find_active_by_book_and_user.return_value = None
        review_repository.create.side_effect = lambda review: review.model_copy(update={"id": "new-review"})

    @pytest.mark.asyncio
    async def test_create_review_success(
        self, service, review_repository, rating_aggregator, book_id, user_id
    ):
        response = await service.create_review(book_id, user_id, ReviewCreate(rating=5, comment="Superb"))

        assert response.success is True
        assert response.message == "Review added successfully"
        assert response.data.id == "new-review"
        assert response.data.rating == 5
        assert response.data.is_verified_purchase is True
        created = review_repository.create.call_args.args[0]
        assert created.book == book_id
        assert created.user == user_id
        rating_aggregator.recalculate.assert_called_once_with(book_id)

    @pytest.mark.asyncio
    async def test_book_not_found(self, service, book_repository, review_repository, book_id, user_id):
        book_repository.get_active.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await service.create_review(book_id, user_id, ReviewCreate(rating=4))

        assert exc_info.value.status_code == 404
        review_repository.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_review_rejected(
        self, service, review_repository, rating_aggregator, sample_review, book_id, user_id
    ):
        review_repository.find_active_by_book_and_user.return_value = sample_review

        with pytest.raises(ConflictError) as exc_info:
            await service.create_review(book_id, user_id, ReviewCreate(rating=1, comment="different"))

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "You have already reviewed this book"
        review_repository.create.assert_not_called()
        rating_aggregator.recalculate.assert_not_called()

    @pytest.mark.asyncio
    async def test_without_delivered_order_rejected(
        self, service, order_repository, review_repository, book_id, user_id
    ):
        order_repository.has_delivered_order.return_value = False

        with pytest.raises(PermissionDeniedError) as exc_info:
            await service.create_review(book_id, user_id, ReviewCreate(rating=4))

        assert exc_info.value.status_code == 403
        order_repository.has_delivered_order.assert_called_once_with(user_id, book_id)
        review_repository.create.assert_not_called()


class TestListReviews(TestReviewService):

    def _items(self, count):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        return [
            ReviewListItem(
                id=f"r{i}", book="b1", user={"id": "u", "name": "N"}, rating=4,
                created_at=base + timedelta(hours=i),
            )
            for i in range(count)
        ]

    @pytest.mark.asyncio
    async def test_second_page_of_twelve(self, service, review_repository, book_id):
        review_repository.list_for_book.return_value = (self._items(5), 12)

        response = await service.list_reviews(book_id, ReviewListParams(page=2, limit=5))

        assert response.success is True
        assert response.total_reviews == 12
        assert response.current_page == 2
        assert response.total_pages == 3
        assert response.count == 5
        review_repository.list_for_book.assert_called_once_with(
            book_id, sort=ReviewSort.LATEST, skip=5, limit=5
        )

    @pytest.mark.asyncio
    async def test_empty_listing(self, service, review_repository, book_id):
        review_repository.list_for_book.return_value = ([], 0)

        response = await service.list_reviews(book_id, ReviewListParams())

        assert response.total_pages == 0
        assert response.count == 0
        assert response.data == []

    @pytest.mark.asyncio
    async def test_sort_is_forwarded(self, service, review_repository, book_id):
        review_repository.list_for_book.return_value = ([], 0)

        await service.list_reviews(book_id, ReviewListParams(sort="verified"))

        assert review_repository.list_for_book.call_args.kwargs["sort"] == ReviewSort.VERIFIED


class TestDeleteReview(TestReviewService):

    @pytest.mark.asyncio
    async def test_delete_own_review(
        self, service, review_repository, rating_aggregator, sample_review, review_id, user_id, book_id
    ):
        review_repository.find_active_by_id.return_value = sample_review
        review_repository.soft_delete.return_value = True

        response = await service.delete_review(review_id, user_id)

        assert response.success is True
        assert response.message == "Review deleted successfully"
        review_repository.soft_delete.assert_called_once_with(review_id)
        rating_aggregator.recalculate.assert_called_once_with(book_id)

    @pytest.mark.asyncio
    async def test_review_not_found(self, service, review_repository, review_id, user_id):
        review_repository.find_active_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await service.delete_review(review_id, user_id)

    @pytest.mark.asyncio
    async def test_other_users_review_forbidden(
        self, service, review_repository, rating_aggregator, sample_review, review_id, other_user_id
    ):
        review_repository.find_active_by_id.return_value = sample_review

        with pytest.raises(PermissionDeniedError) as exc_info:
            await service.delete_review(review_id, other_user_id)

        assert exc_info.value.status_code == 403
        review_repository.soft_delete.assert_not_called()
        rating_aggregator.recalculate.assert_not_called()
        assert sample_review.is_active is True

    @pytest.mark.asyncio
    async def test_concurrently_deleted_review(self, service, review_repository, sample_review, review_id, user_id):
        review_repository.find_active_by_id.return_value = sample_review
        review_repository.soft_delete.return_value = False

        with pytest.raises(NotFoundError):
            await service.delete_review(review_id, user_id)

    @pytest.mark.asyncio
    async def test_failed_recalculation_logs_stale_ratings(
        self, service, review_repository, rating_aggregator, sample_review, review_id, user_id, book_id
    ):
        review_repository.find_active_by_id.return_value = sample_review
        review_repository.soft_delete.return_value = True
        rating_aggregator.recalculate.side_effect = InternalError("Database error during rating aggregation")

        with patch('review_service.services.review.logger') as mock_logger:
            with pytest.raises(InternalError):
                await service.delete_review(review_id, user_id)

        review_repository.soft_delete.assert_called_once_with(review_id)
        metadata = mock_logger.error.call_args.kwargs["metadata"]
        assert metadata == {"event": "ratings_stale", "book_id": book_id, "review_id": review_id}
        mock_logger.info.assert_not_called()


class InMemoryReviewRepository:
    """Minimal stand-in for ReviewRepository backed by a list"""

    def __init__(self):
        self.reviews = []

    async def find_active_by_book_and_user(self, book_id, user_id):
        return next(
            (r for r in self.reviews if r.book == book_id and r.user == user_id and r.is_active),
            None,
        )

    async def find_active_by_id(self, review_id):
        return next((r for r in self.reviews if r.id == review_id and r.is_active), None)

    async def create(self, review):
        review = review.model_copy(update={"id": f"r{len(self.reviews) + 1}"})
        self.reviews.append(review)
        return review

    async def soft_delete(self, review_id):
        for i, review in enumerate(self.reviews):
            if review.id == review_id and review.is_active:
                self.reviews[i] = review.model_copy(update={"is_active": False})
                return True
        return False

    async def rating_stats(self, book_id):
        ratings = [
            r.rating for r in self.reviews
            if r.book == book_id and r.is_active and r.is_approved
        ]
        if not ratings:
            return None, 0
        return sum(ratings) / len(ratings), len(ratings)


class TestRatingRecalculationFlow:
    """End-to-end create/delete flow against in-memory repositories"""

    @pytest.fixture
    def reviews(self):
        return InMemoryReviewRepository()

    @pytest.fixture
    def book_repository(self, sample_book):
        repo = AsyncMock(spec=BookRepository)
        repo.get_active.return_value = sample_book
        repo.update_ratings.return_value = True
        return repo

    @pytest.fixture
    def service(self, reviews, book_repository):
        orders = AsyncMock(spec=OrderRepository)
        orders.has_delivered_order.return_value = True
        return ReviewService(reviews, book_repository, orders)

    @pytest.mark.asyncio
    async def test_ratings_follow_creates_and_deletes(
        self, service, book_repository, book_id, user_id, other_user_id
    ):
        await service.create_review(book_id, user_id, ReviewCreate(rating=4))
        second = await service.create_review(book_id, other_user_id, ReviewCreate(rating=5))

        assert book_repository.update_ratings.call_args.args == (book_id, BookRatings(average=4.5, count=2))

        await service.delete_review(second.data.id, other_user_id)

        assert book_repository.update_ratings.call_args.args == (book_id, BookRatings(average=4.0, count=1))

    @pytest.mark.asyncio
    async def test_review_again_after_deleting(self, service, reviews, book_id, user_id):
        first = await service.create_review(book_id, user_id, ReviewCreate(rating=2))
        await service.delete_review(first.data.id, user_id)

        second = await service.create_review(book_id, user_id, ReviewCreate(rating=5))

        assert second.data.id != first.data.id
        assert [r.is_active for r in reviews.reviews] == [False, True]
