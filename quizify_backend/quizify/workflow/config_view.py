import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from quizify.api.schemas import ExtractTextOutput, GenerateQuizOutput, QuizQuestion
from quizify.errors import InvalidActionError, QuizifyError
from quizify.services.quiz_generator import MAX_QUESTIONS, MIN_QUESTIONS
from quizify.utils.data_uri import encode_data_uri

logger = logging.getLogger(__name__)

DEFAULT_NUM_QUESTIONS = 10
MIN_TEXT_LENGTH_HINT = 50

ExtractTextFn = Callable[[str], ExtractTextOutput]
GenerateQuizFn = Callable[[str, int], GenerateQuizOutput]
QuizGeneratedFn = Callable[[List[QuizQuestion], str], None]


@dataclass(frozen=True)
class Notification:
    """A transient toast shown to the user."""

    title: str
    description: str
    variant: str = "default"


class ConfigurationView:
    """
    Form state for creating a quiz: the source text, the question-count slider, and
    the pending flags of the two actions (document extraction and quiz generation).

    Both actions are synchronous calls to the service adapters. A pending flag is
    raised for the duration of the call and always lowered afterwards, whether the
    call succeeded or failed.
    """

    # PUBLIC_INTERFACE
    def __init__(
        self,
        extract_text: ExtractTextFn,
        generate_quiz: GenerateQuizFn,
        on_generated: Optional[QuizGeneratedFn] = None,
    ) -> None:
        self._extract_text = extract_text
        self._generate_quiz = generate_quiz
        self.on_generated = on_generated
        self.text = ""
        self._num_questions = DEFAULT_NUM_QUESTIONS
        self.is_extracting = False
        self.is_generating = False
        self.notifications: List[Notification] = []

    @property
    def num_questions(self) -> int:
        return self._num_questions

    @num_questions.setter
    def num_questions(self, value: int) -> None:
        # The slider cannot leave its range.
        self._num_questions = max(MIN_QUESTIONS, min(MAX_QUESTIONS, int(value)))

    @property
    def text_too_short(self) -> bool:
        """Soft hint only; never blocks submission."""
        return len(self.text.strip()) < MIN_TEXT_LENGTH_HINT

    @property
    def text_field_disabled(self) -> bool:
        return self.is_extracting

    @property
    def submit_disabled(self) -> bool:
        return self.is_generating or self.is_extracting or not self.text.strip()

    def _notify_error(self, exc: QuizifyError) -> None:
        self.notifications.append(
            Notification(title="Error", description=exc.public_message, variant="destructive")
        )

    # PUBLIC_INTERFACE
    def set_text(self, text: str) -> None:
        if self.text_field_disabled:
            raise InvalidActionError("The text field is disabled while a document is being read")
        self.text = text

    # PUBLIC_INTERFACE
    def select_file(self, content: bytes, content_type: Optional[str] = None) -> bool:
        """
        Extract the text of a selected file into the text field.

        The file is passed on as a data URI; without a content type the extraction
        adapter has to infer it from the bytes.

        Returns:
            True on success. On failure the text field is cleared, an error
            notification is queued and False is returned.
        """
        return self.select_data_uri(encode_data_uri(content, content_type or ""))

    # PUBLIC_INTERFACE
    def select_data_uri(self, file_data_uri: str) -> bool:
        """Same as select_file, for a document that is already a data URI."""
        if self.is_extracting:
            raise InvalidActionError("A document is already being read")

        self.is_extracting = True
        try:
            result = self._extract_text(file_data_uri)
        except QuizifyError as exc:
            logger.info("Text extraction failed: %s", exc.message)
            self.text = ""
            self._notify_error(exc)
            return False
        finally:
            self.is_extracting = False

        self.text = result.text
        return True

    # PUBLIC_INTERFACE
    def submit(self) -> bool:
        """
        Generate a quiz from the current text and question count.

        On success the quiz and the text are handed to `on_generated`. On failure an
        error notification is queued and the view stays as it was.

        Returns:
            True if a quiz was generated.

        Raises:
            InvalidActionError: if the submit control is disabled.
        """
        if self.submit_disabled:
            raise InvalidActionError("Provide some text before generating a quiz")

        text = self.text
        self.is_generating = True
        try:
            result = self._generate_quiz(text, self.num_questions)
        except QuizifyError as exc:
            logger.info("Quiz generation failed: %s", exc.message)
            self._notify_error(exc)
            return False
        finally:
            self.is_generating = False

        if self.on_generated is not None:
            self.on_generated(list(result.quiz), text)
        return True

    # PUBLIC_INTERFACE
    def dismiss_notifications(self) -> None:
        self.notifications.clear()
