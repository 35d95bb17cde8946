# cricket_quiz/reviews.py
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from cricket_quiz.errors import InvalidRating
from cricket_quiz.schemas import RecentReview, Review, ReviewSummary
from cricket_quiz.store import ReviewStore

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5
RECENT_REVIEWS_LIMIT = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReviewAggregator:
    """Append-only review log with a rolling summary."""

    def __init__(self, store: ReviewStore, clock: Callable[[], datetime] = _utcnow):
        self.store = store
        self.clock = clock

    async def submit(self, username: str, rating: Any, text: Optional[str] = None) -> Review:
        if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
            raise InvalidRating(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

        review = Review(username=username, rating=rating, text=text or "", created_at=self.clock())
        await self.store.append(review)
        logger.info("Stored %s-star review from %s", rating, username)
        return review

    async def summary(self) -> ReviewSummary:
        reviews = await self.store.list_all()
        if not reviews:
            return ReviewSummary()

        total = len(reviews)
        average = sum(r.rating for r in reviews) / total
        recent = sorted(reviews, key=lambda r: r.created_at, reverse=True)[:RECENT_REVIEWS_LIMIT]
        return ReviewSummary(
            average_rating=average,
            total_ratings=total,
            recent_reviews=[RecentReview(user=r.username, rating=r.rating, text=r.text) for r in recent],
        )
