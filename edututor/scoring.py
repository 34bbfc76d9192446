# scoring.py
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from edututor.errors import InvalidQuiz, MalformedSubmission


@dataclass
class QuizResult:
    score: int
    total_questions: int


def percentage(part: int, whole: int) -> int:
    """Integer percentage, halves rounded up; 0 when there is nothing to divide."""
    if whole <= 0:
        return 0
    return (part * 200 + whole) // (2 * whole)


def is_correct(answer: Any, correct_answer: int) -> bool:
    # bool is an int subclass; True must not match index 1
    return type(answer) is int and answer == correct_answer


def validate_questions(questions: Sequence[dict]) -> None:
    for i, q in enumerate(questions):
        options = q.get("options") or []
        if len(options) < 2:
            raise InvalidQuiz(f"question {i + 1} needs at least two options")
        correct = q.get("correct_answer")
        if type(correct) is not int or not 0 <= correct < len(options):
            raise InvalidQuiz(f"question {i + 1} has no valid correct_answer")


def validate_submission(questions: Sequence[dict], answers: Optional[Sequence[Any]]) -> None:
    if answers is None:
        raise MalformedSubmission("answers are required")
    if len(answers) != len(questions):
        raise MalformedSubmission(
            f"expected {len(questions)} answers, got {len(answers)}"
        )


def score_quiz(questions: Sequence[dict], answers: Sequence[Any]) -> QuizResult:
    """
    Compare answers to questions position by position.
    Missing entries count as wrong.
    """
    correct = 0
    for i, q in enumerate(questions):
        answer = answers[i] if i < len(answers) else None
        if is_correct(answer, q["correct_answer"]):
            correct += 1
    return QuizResult(score=percentage(correct, len(questions)), total_questions=len(questions))
