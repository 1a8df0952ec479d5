"""Question validation shared by the API schemas and the retrieval engine."""
from config import MIN_QUESTION_LENGTH


class InvalidQuestionError(ValueError):
    """Raised when a question is too short to retrieve against."""


def validate_question(question: str, min_length: int = MIN_QUESTION_LENGTH) -> str:
    """
    Trim a question and check it carries enough text to be answerable.

    Args:
        question: Raw question from the user
        min_length: Minimum number of non-whitespace characters

    Returns:
        The trimmed question

    Raises:
        InvalidQuestionError: If the question has fewer than min_length
            non-whitespace characters
    """
    if question is None:
        raise InvalidQuestionError("Question is required")

    trimmed = question.strip()
    if len("".join(trimmed.split())) < min_length:
        raise InvalidQuestionError(
            "Question is too short. Please ask a more specific question."
        )
    return trimmed
