# cricket_quiz/quiz_manager.py
import logging
from typing import Optional
from uuid import uuid4

import httpx

from cricket_quiz.credentials import CredentialStore
from cricket_quiz.errors import GenerationFailed, GeneratorError, InvalidGeneratorOutput
from cricket_quiz.llm_client import QuizGenerator
from cricket_quiz.normalizer import normalize_quiz
from cricket_quiz.schemas import QUESTIONS_PER_QUIZ, Quiz, UserStats

logger = logging.getLogger(__name__)

DEFAULT_DIFFICULTY = "medium"

SYSTEM_PROMPT = f"""
You are an expert cricket quiz maker and commentator.
You generate high-quality multiple-choice cricket quizzes with {QUESTIONS_PER_QUIZ} questions each.
Levels: easy, medium, hard, custom.
Use JSON only. Provide exciting short commentary lines.
""".strip()


def build_user_prompt(difficulty: str, quiz_id: str) -> str:
    """Same inputs, same prompt. The quiz id is echoed back but never trusted."""
    return f"""
Generate a ten-question cricket quiz for difficulty: "{difficulty}".
Return only JSON. Use quizId "{quiz_id}".
The JSON object must have: quizId, questions.
Each question must have: id, text, options (exactly 4 strings), correctIndex (integer 0-3),
commentary (intro/correct/wrong).
""".strip()


class QuizManager:
    """
    Serves freshly generated quizzes and records the results players report back.
    Nothing about an issued quiz is kept between requests.
    """

    def __init__(self, generator: QuizGenerator, credentials: CredentialStore, strict: bool = False):
        self.generator = generator
        self.credentials = credentials
        self.strict = strict

    async def get_quiz(self, difficulty: str = DEFAULT_DIFFICULTY) -> Quiz:
        quiz_id = str(uuid4())
        user_prompt = build_user_prompt(difficulty, quiz_id)

        try:
            raw_text = await self.generator.generate(SYSTEM_PROMPT, user_prompt)
            quiz = normalize_quiz(raw_text, quiz_id, strict=self.strict)
        except (httpx.HTTPError, GeneratorError, InvalidGeneratorOutput) as e:
            logger.warning("Quiz generation failed for difficulty %r (quiz %s)", difficulty, quiz_id, exc_info=True)
            raise GenerationFailed(str(e) or e.__class__.__name__) from e

        logger.info("Generated quiz %s with %d questions (difficulty %r)", quiz.quiz_id, len(quiz.questions), difficulty)
        return quiz

    async def submit_result(
        self,
        username: str,
        quiz_id: Optional[str],
        score: int,
        total_questions: Optional[int] = None,
    ) -> UserStats:
        # quiz_id is informational: there is no ledger of issued quizzes to check it against.
        logger.info("Result for quiz %s submitted by %s", quiz_id, username)
        return await self.credentials.record_result(username, score, total_questions)
