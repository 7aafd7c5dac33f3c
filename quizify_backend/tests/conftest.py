import os
from types import SimpleNamespace
from typing import Any, List
from unittest.mock import patch

import pytest

from quizify.api.schemas import ExtractTextOutput, GenerateQuizOutput, QuizQuestion
from quizify.config import reset_settings_cache


@pytest.fixture(autouse=True)
def test_environment():
    """Isolated environment: no real credentials, settings re-read per test."""
    env_vars = {
        "GEMINI_API_KEY": "test-key-123",
        "GCS_BUCKET_NAME": "quizify-test-bucket",
        "LOG_LEVEL": "ERROR",
    }
    with patch.dict(os.environ, env_vars):
        for name in ("GOOGLE_API_KEY", "GCS_SERVICE_ACCOUNT_KEY", "GEMINI_MODEL", "CORS_ALLOW_ORIGINS",
                     "GENAI_TIMEOUT_SECONDS", "SIGNED_URL_TTL_MINUTES", "SESSION_TTL_MINUTES", "SESSION_MAX_COUNT"):
            os.environ.pop(name, None)
        reset_settings_cache()
        yield
    reset_settings_cache()


class FakeModel:
    """Stands in for genai.GenerativeModel; records every generate_content call."""

    def __init__(self, text: Any = "", error: Exception = None, block_reason: Any = None) -> None:
        self.text = text
        self.error = error
        self.block_reason = block_reason
        self.calls: List[SimpleNamespace] = []

    def generate_content(self, contents, **kwargs):
        self.calls.append(SimpleNamespace(contents=contents, kwargs=kwargs))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            text=self.text,
            prompt_feedback=SimpleNamespace(block_reason=self.block_reason),
        )


@pytest.fixture
def fake_model_factory():
    return FakeModel


@pytest.fixture
def two_question_quiz() -> List[QuizQuestion]:
    return [
        QuizQuestion(question="First letter?", answers=("A", "Z"), correct_answer="A"),
        QuizQuestion(question="Second letter?", answers=("B", "Y"), correct_answer="B"),
    ]


@pytest.fixture
def five_question_quiz() -> List[QuizQuestion]:
    return [
        QuizQuestion(
            question=f"Question {i}?",
            answers=(f"right {i}", f"wrong {i}", f"other {i}", f"none {i}"),
            correct_answer=f"right {i}",
        )
        for i in range(1, 6)
    ]


@pytest.fixture
def source_text() -> str:
    return (
        "Photosynthesis converts light energy into chemical energy. Chlorophyll absorbs "
        "light mostly in the blue and red wavelengths."
    )


@pytest.fixture
def quiz_adapters(five_question_quiz):
    """Recording fakes for the extraction and generation adapters."""
    calls = SimpleNamespace(extract=[], generate=[])

    def extract_text(file_data_uri):
        calls.extract.append(file_data_uri)
        return ExtractTextOutput(text="Extracted document text")

    def generate_quiz(text, num_questions):
        calls.generate.append((text, num_questions))
        return GenerateQuizOutput(quiz=tuple(five_question_quiz))

    return SimpleNamespace(extract_text=extract_text, generate_quiz=generate_quiz, calls=calls)
