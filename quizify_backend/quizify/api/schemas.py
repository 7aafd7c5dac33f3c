from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


# PUBLIC_INTERFACE
class QuizQuestion(BaseModel):
    """A single multiple-choice question. Immutable once generated."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    question: str = Field(..., min_length=1, description="Question prompt text.")
    answers: Tuple[str, ...] = Field(..., min_length=2, description="Candidate answers in display order.")
    correct_answer: str = Field(
        ..., alias="correctAnswer", description="The correct answer; must equal one of `answers`."
    )

    @model_validator(mode="after")
    def _check_answers(self) -> "QuizQuestion":
        if len(set(self.answers)) != len(self.answers):
            raise ValueError("answers must be distinct")
        if any(not a.strip() for a in self.answers):
            raise ValueError("answers must not be blank")
        if self.correct_answer not in self.answers:
            raise ValueError("correctAnswer must be one of the answers")
        return self


# PUBLIC_INTERFACE
class GenerateQuizInput(BaseModel):
    """Input for quiz generation."""
    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., description="Source text the quiz is generated from.")
    num_questions: int = Field(
        default=10, alias="numQuestions", description="Number of questions to generate (5-50)."
    )


# PUBLIC_INTERFACE
class GenerateQuizOutput(BaseModel):
    """A validated quiz. Order of questions is the navigation and display order."""
    model_config = ConfigDict(frozen=True)

    quiz: Tuple[QuizQuestion, ...] = Field(..., min_length=1, description="Generated questions.")


# PUBLIC_INTERFACE
class ExtractTextInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_data_uri: str = Field(
        ...,
        alias="fileDataUri",
        description="A document as a data URI: 'data:<mimetype>;base64,<encoded_data>'.",
    )


# PUBLIC_INTERFACE
class ExtractTextOutput(BaseModel):
    text: str = Field(..., description="The extracted text from the file.")


# PUBLIC_INTERFACE
class UploadUrlRequest(BaseModel):
    """
    Request for a signed upload URL.

    Both fields are optional at the schema level so that a missing value is reported
    as a 400 by the issuer instead of FastAPI's generic 422.
    """
    model_config = ConfigDict(populate_by_name=True)

    filename: Optional[str] = Field(default=None, description="Original file name.")
    content_type: Optional[str] = Field(default=None, alias="contentType", description="Declared media type.")


# PUBLIC_INTERFACE
class UploadUrlResponse(BaseModel):
    url: str = Field(..., description="Time-limited URL authorizing a single PUT of the object.")
    filename: str = Field(..., description="Unique storage key the object will be written to.")


# PUBLIC_INTERFACE
class ErrorOut(BaseModel):
    error: str = Field(..., description="Human readable error message.")


# PUBLIC_INTERFACE
class SessionConfigIn(BaseModel):
    """Update of the configuration form of a workflow session."""
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = Field(default=None, description="Replacement source text.")
    num_questions: Optional[int] = Field(default=None, alias="numQuestions", description="Slider value.")


# PUBLIC_INTERFACE
class SessionUploadIn(BaseModel):
    """A document for extraction: either a complete data URI or raw base64 content plus its type."""
    model_config = ConfigDict(populate_by_name=True)

    file_data_uri: Optional[str] = Field(default=None, alias="fileDataUri")
    content: Optional[str] = Field(default=None, description="Base64 encoded file content.")
    content_type: Optional[str] = Field(default=None, alias="contentType")


# PUBLIC_INTERFACE
class AnswerIn(BaseModel):
    value: str = Field(..., description="The selected answer for the current question.")


# PUBLIC_INTERFACE
class NotificationOut(BaseModel):
    title: str
    description: str
    variant: str


# PUBLIC_INTERFACE
class ConfigViewOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    num_questions: int = Field(..., alias="numQuestions")
    is_extracting: bool = Field(..., alias="isExtracting")
    is_generating: bool = Field(..., alias="isGenerating")
    text_too_short: bool = Field(..., alias="textTooShort")
    submit_disabled: bool = Field(..., alias="submitDisabled")
    notifications: List[NotificationOut]


# PUBLIC_INTERFACE
class QuestionViewOut(BaseModel):
    """A question as shown while the quiz is in progress, without its correct answer."""

    question: str
    answers: List[str]


# PUBLIC_INTERFACE
class QuizViewOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    current_index: int = Field(..., alias="currentIndex")
    total: int
    progress: float
    question: QuestionViewOut
    selected_answers: List[str] = Field(..., alias="selectedAnswers")
    can_go_back: bool = Field(..., alias="canGoBack")
    can_go_next: bool = Field(..., alias="canGoNext")
    can_submit: bool = Field(..., alias="canSubmit")
    is_last: bool = Field(..., alias="isLast")


# PUBLIC_INTERFACE
class ResultItemOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    index: int
    question: str
    answers: List[str]
    selected_answer: str = Field(..., alias="selectedAnswer")
    correct_answer: str = Field(..., alias="correctAnswer")
    is_correct: bool = Field(..., alias="isCorrect")


# PUBLIC_INTERFACE
class ResultsViewOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: List[ResultItemOut]
    correct_count: int = Field(..., alias="correctCount")
    total: int
    score_percent: float = Field(..., alias="scorePercent")
    source_text: str = Field(..., alias="sourceText")


# PUBLIC_INTERFACE
class SessionOut(BaseModel):
    """Rendered state of a workflow session; only the block for the active state is set."""
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    state: str
    config: Optional[ConfigViewOut] = None
    quiz: Optional[QuizViewOut] = None
    results: Optional[ResultsViewOut] = None
