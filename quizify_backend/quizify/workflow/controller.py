import logging
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from quizify.api.schemas import QuizQuestion
from quizify.errors import InvalidTransitionError
from quizify.workflow.config_view import ConfigurationView, ExtractTextFn, GenerateQuizFn
from quizify.workflow.quiz_view import QuizTakingView
from quizify.workflow.results import QuizResults, build_results

logger = logging.getLogger(__name__)


class AppState(str, Enum):
    CONFIG = "CONFIG"
    QUIZ = "QUIZ"
    RESULTS = "RESULTS"


View = Union[ConfigurationView, QuizTakingView, QuizResults]


class QuizWorkflow:
    """
    Root state holder of the quiz flow: configuration -> active quiz -> results.

    The child views report completion through callbacks wired here, which drive the
    only valid transitions:

        CONFIG  --generate(quiz, text)--> QUIZ
        QUIZ    --finish(answers)-------> RESULTS
        RESULTS --restart()-------------> CONFIG
    """

    # PUBLIC_INTERFACE
    def __init__(self, extract_text: ExtractTextFn, generate_quiz: GenerateQuizFn) -> None:
        """
        Args:
            extract_text: Text extraction adapter used by the configuration view.
            generate_quiz: Quiz generation adapter used by the configuration view.
        """
        self._extract_text = extract_text
        self._generate_quiz = generate_quiz
        self.state = AppState.CONFIG
        self.quiz: Optional[Tuple[QuizQuestion, ...]] = None
        self.answers: Optional[List[str]] = None
        self.source_text = ""
        self.config_view = self._new_config_view()
        self.quiz_view: Optional[QuizTakingView] = None

    def _new_config_view(self) -> ConfigurationView:
        return ConfigurationView(
            extract_text=self._extract_text,
            generate_quiz=self._generate_quiz,
            on_generated=self.generate,
        )

    def _require(self, expected: AppState, action: str) -> None:
        if self.state is not expected:
            raise InvalidTransitionError(f"Cannot {action} while in {self.state.value}")

    # PUBLIC_INTERFACE
    def generate(self, quiz: Sequence[QuizQuestion], text: str) -> None:
        """CONFIG -> QUIZ: hold the new quiz and its source text, drop any earlier answers."""
        self._require(AppState.CONFIG, "start a quiz")
        quiz = tuple(quiz)
        quiz_view = QuizTakingView(quiz, on_finish=self.finish)
        self.quiz = quiz
        self.source_text = text
        self.answers = None
        self.quiz_view = quiz_view
        self.state = AppState.QUIZ
        logger.debug("Quiz started with %d questions", len(self.quiz))

    # PUBLIC_INTERFACE
    def finish(self, answers: Sequence[str]) -> None:
        """QUIZ -> RESULTS: store the final answer set."""
        self._require(AppState.QUIZ, "finish a quiz")
        self.answers = list(answers)
        self.state = AppState.RESULTS

    # PUBLIC_INTERFACE
    def restart(self) -> None:
        """RESULTS -> CONFIG: forget the quiz, the answers and the source text."""
        self._require(AppState.RESULTS, "restart")
        self.quiz = None
        self.answers = None
        self.source_text = ""
        self.quiz_view = None
        self.config_view = self._new_config_view()
        self.state = AppState.CONFIG

    # PUBLIC_INTERFACE
    def render(self) -> Optional[View]:
        """
        Return the view for the current state.

        QUIZ and RESULTS render nothing (None) when no quiz is held.
        """
        if self.state is AppState.QUIZ:
            if not self.quiz or self.quiz_view is None:
                return None
            return self.quiz_view
        if self.state is AppState.RESULTS:
            if not self.quiz:
                return None
            return build_results(self.quiz, self.answers or [""] * len(self.quiz), self.source_text)
        return self.config_view
