# cricket_quiz/schemas.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

OPTIONS_PER_QUESTION = 4
QUESTIONS_PER_QUIZ = 10


class CamelModel(BaseModel):
    # Wire format is camelCase, attributes stay snake_case.
    model_config = ConfigDict(populate_by_name=True)


class Commentary(BaseModel):
    intro: str = ""
    correct: str = ""
    wrong: str = ""


class Question(CamelModel):
    id: str = Field(..., description="unique id for question within the quiz")
    text: str = ""
    options: List[str] = Field(..., min_length=OPTIONS_PER_QUESTION, max_length=OPTIONS_PER_QUESTION)
    correct_index: int = Field(0, alias="correctIndex", ge=0, le=OPTIONS_PER_QUESTION - 1)
    commentary: Commentary = Field(default_factory=Commentary)


class Quiz(CamelModel):
    quiz_id: str = Field(..., alias="quizId")
    questions: List[Question] = Field(default_factory=list)


class UserStats(CamelModel):
    total_played: int = Field(0, alias="totalPlayed", ge=0)
    total_wins: int = Field(0, alias="totalWins", ge=0)
    total_draws: int = Field(0, alias="totalDraws", ge=0)
    total_losses: int = Field(0, alias="totalLosses", ge=0)


class User(BaseModel):
    username: str
    password_digest: str
    stats: UserStats = Field(default_factory=UserStats)


class Review(CamelModel):
    username: str
    rating: int = Field(..., ge=1, le=5)
    text: str = ""
    created_at: datetime = Field(..., alias="createdAt")


# --- Request bodies ---

class Credentials(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class ResultSubmission(CamelModel):
    quiz_id: Optional[str] = Field(None, alias="quizId")
    score: int
    total_questions: Optional[int] = Field(None, alias="totalQuestions")


class ReviewSubmission(BaseModel):
    rating: Optional[StrictInt] = None
    text: Optional[str] = None


# --- Responses ---

class PublicUser(BaseModel):
    username: str


class AuthResponse(BaseModel):
    token: str
    user: PublicUser


class MessageResponse(BaseModel):
    message: str


class ResultResponse(BaseModel):
    message: str
    stats: UserStats


class RecentReview(BaseModel):
    user: str
    rating: int
    text: str


class ReviewSummary(CamelModel):
    average_rating: float = Field(0.0, alias="averageRating")
    total_ratings: int = Field(0, alias="totalRatings")
    recent_reviews: List[RecentReview] = Field(default_factory=list, alias="recentReviews")
