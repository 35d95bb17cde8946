# cricket_quiz/errors.py
"""Exception hierarchy shared by the services and the HTTP layer.

Every error a client can see derives from ``QuizAppError`` and carries the
status code it is rendered with. The two generator errors are internal and
are always wrapped into ``GenerationFailed`` before leaving the quiz manager.
"""


class QuizAppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(QuizAppError):
    status_code = 400


class AlreadyExists(BadRequest):
    pass


class InvalidRating(BadRequest):
    pass


class Unauthorized(QuizAppError):
    status_code = 401


class NotFound(QuizAppError):
    # Only reachable with a stale or forged token, reported as a client error.
    status_code = 400


class GenerationFailed(QuizAppError):
    status_code = 500

    def __init__(self, cause: str):
        super().__init__(f"Failed to generate quiz: {cause}")
        self.cause = cause


class InvalidGeneratorOutput(ValueError):
    """Raised by the normalizer when the generator text cannot be used at all."""


class GeneratorError(ValueError):
    """Raised by a generator client when the provider envelope is malformed."""
