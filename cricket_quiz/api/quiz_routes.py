# cricket_quiz/api/quiz_routes.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends

from cricket_quiz.api.deps import get_current_username, get_quiz_manager
from cricket_quiz.quiz_manager import DEFAULT_DIFFICULTY, QuizManager
from cricket_quiz.schemas import Quiz, ResultResponse, ResultSubmission

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["quiz"])


@router.get("/quiz", response_model=Quiz)
async def get_quiz(
    difficulty: Optional[str] = None,
    username: str = Depends(get_current_username),
    quiz_manager: QuizManager = Depends(get_quiz_manager),
):
    logger.info("Quiz requested by %s", username)
    return await quiz_manager.get_quiz(difficulty or DEFAULT_DIFFICULTY)


@router.post("/quiz/result", response_model=ResultResponse)
async def submit_result(
    payload: ResultSubmission,
    username: str = Depends(get_current_username),
    quiz_manager: QuizManager = Depends(get_quiz_manager),
):
    stats = await quiz_manager.submit_result(username, payload.quiz_id, payload.score, payload.total_questions)
    return ResultResponse(message="Result recorded", stats=stats)
