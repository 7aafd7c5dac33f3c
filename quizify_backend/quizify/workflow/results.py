from dataclasses import dataclass
from typing import Sequence, Tuple

from quizify.api.schemas import QuizQuestion
from quizify.errors import InputValidationError


@dataclass(frozen=True)
class ResultItem:
    index: int
    question: str
    answers: Tuple[str, ...]
    selected_answer: str
    correct_answer: str
    is_correct: bool


@dataclass(frozen=True)
class QuizResults:
    """Graded view of a finished attempt."""

    items: Tuple[ResultItem, ...]
    source_text: str

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def correct_count(self) -> int:
        return sum(1 for item in self.items if item.is_correct)

    @property
    def score_percent(self) -> float:
        if not self.items:
            return 0.0
        return round(self.correct_count / self.total * 100, 2)


# PUBLIC_INTERFACE
def build_results(quiz: Sequence[QuizQuestion], answers: Sequence[str], source_text: str = "") -> QuizResults:
    """
    Compare each submitted answer with the question's correct answer.

    Pure: neither argument is modified. An unanswered question ("") is incorrect.

    Raises:
        InputValidationError: if the answer set is not index-aligned with the quiz.
    """
    if len(answers) != len(quiz):
        raise InputValidationError(
            f"Answer set has {len(answers)} entries for a quiz of {len(quiz)} questions"
        )
    items = tuple(
        ResultItem(
            index=i,
            question=question.question,
            answers=tuple(question.answers),
            selected_answer=answer,
            correct_answer=question.correct_answer,
            is_correct=bool(answer) and answer == question.correct_answer,
        )
        for i, (question, answer) in enumerate(zip(quiz, answers))
    )
    return QuizResults(items=items, source_text=source_text)
