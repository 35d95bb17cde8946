# cricket_quiz/api/review_routes.py
from typing import Optional

from fastapi import APIRouter, Depends

from cricket_quiz.api.deps import get_current_username, get_reviews
from cricket_quiz.reviews import ReviewAggregator
from cricket_quiz.schemas import MessageResponse, ReviewSubmission, ReviewSummary

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.get("/summary", response_model=ReviewSummary)
async def reviews_summary(reviews: ReviewAggregator = Depends(get_reviews)):
    # Public: no session required.
    return await reviews.summary()


@router.post("", response_model=MessageResponse)
async def submit_review(
    payload: Optional[ReviewSubmission] = None,
    username: str = Depends(get_current_username),
    reviews: ReviewAggregator = Depends(get_reviews),
):
    payload = payload or ReviewSubmission()
    await reviews.submit(username, payload.rating, payload.text)
    return MessageResponse(message="Review submitted")
