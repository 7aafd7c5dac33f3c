from typing import Callable, List, Optional, Sequence

from quizify.api.schemas import QuizQuestion
from quizify.errors import InputValidationError, InvalidActionError


class QuizTakingView:
    """
    Step-through state of one quiz attempt.

    Holds the current question index and one selected answer per question ("" means
    unanswered). The index never leaves [0, len(quiz) - 1] and the answer list always
    has one entry per question.
    """

    # PUBLIC_INTERFACE
    def __init__(
        self,
        quiz: Sequence[QuizQuestion],
        on_finish: Optional[Callable[[List[str]], None]] = None,
    ) -> None:
        if not quiz:
            raise InputValidationError("A quiz needs at least one question")
        self.quiz = tuple(quiz)
        self.on_finish = on_finish
        self.current_index = 0
        self.selected_answers: List[str] = [""] * len(self.quiz)

    @property
    def total(self) -> int:
        return len(self.quiz)

    @property
    def current_question(self) -> QuizQuestion:
        return self.quiz[self.current_index]

    @property
    def current_answer(self) -> str:
        return self.selected_answers[self.current_index]

    @property
    def is_last(self) -> bool:
        return self.current_index == self.total - 1

    @property
    def progress(self) -> float:
        """Percentage shown by the progress bar."""
        return (self.current_index + 1) / self.total * 100

    @property
    def title(self) -> str:
        return f"Question {self.current_index + 1}/{self.total}"

    @property
    def can_go_back(self) -> bool:
        return self.current_index > 0

    @property
    def can_go_next(self) -> bool:
        return not self.is_last and bool(self.current_answer)

    @property
    def can_submit(self) -> bool:
        return self.is_last and bool(self.current_answer)

    # PUBLIC_INTERFACE
    def select_answer(self, value: str) -> None:
        """
        Record `value` as the answer to the current question, replacing any earlier choice.

        Raises:
            InvalidActionError: if `value` is not one of the current question's answers.
        """
        if value not in self.current_question.answers:
            raise InvalidActionError(f"Not an answer to question {self.current_index + 1}: {value!r}")
        self.selected_answers[self.current_index] = value

    # PUBLIC_INTERFACE
    def next(self) -> None:
        """
        Move to the following question. Does nothing on the last question.

        Raises:
            InvalidActionError: if the current question is unanswered.
        """
        if self.is_last:
            return
        if not self.current_answer:
            raise InvalidActionError("Select an answer before moving to the next question")
        self.current_index += 1

    # PUBLIC_INTERFACE
    def back(self) -> None:
        """Move to the previous question. Does nothing on the first question."""
        if self.current_index == 0:
            return
        self.current_index -= 1

    # PUBLIC_INTERFACE
    def submit(self) -> List[str]:
        """
        Finish the attempt and hand the answer set to `on_finish`.

        Returns:
            A copy of the completed answer set, index-aligned with the quiz.

        Raises:
            InvalidActionError: if not on the last question or it is unanswered.
        """
        if not self.can_submit:
            raise InvalidActionError("Answer the last question before submitting")
        answers = list(self.selected_answers)
        if self.on_finish is not None:
            self.on_finish(answers)
        return answers
