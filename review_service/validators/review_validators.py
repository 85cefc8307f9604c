from pydantic import field_validator

from review_service.models.review import MAX_COMMENT_LENGTH, MAX_RATING, MIN_RATING


class ReviewValidatorMixin:
    # Runs before int coercion so "4", 4.5 and true are rejected too
    @field_validator('rating', mode='before')
    @classmethod
    def rating_valid(cls, v):
        if isinstance(v, bool) or not isinstance(v, int) or not MIN_RATING <= v <= MAX_RATING:
            raise ValueError(f'Rating must be between {MIN_RATING} and {MAX_RATING}')
        return v

    @field_validator('comment')
    @classmethod
    def comment_valid(cls, v):
        if v is None:
            return v
        v = v.strip()
        if len(v) > MAX_COMMENT_LENGTH:
            raise ValueError(f'Comment can be up to {MAX_COMMENT_LENGTH} characters')
        return v or None
