import json
import logging
import re
from typing import Any, List, Optional

from pydantic import ValidationError

from quizify.api.schemas import GenerateQuizOutput
from quizify.errors import InputValidationError, QuizSchemaError
from quizify.services.genai_client import JSON_GENERATION_CONFIG, generate_text, get_generative_model
from quizify.services.prompt_templates import build_quiz_prompt

logger = logging.getLogger(__name__)

MIN_QUESTIONS = 5
MAX_QUESTIONS = 50

_CODE_FENCE_REGEX = re.compile(r"^```(?:json)?\s*|\s*```$")


def _strip_code_fences(raw: str) -> str:
    """Remove a surrounding ```json ... ``` block some models add despite JSON mode."""
    return _CODE_FENCE_REGEX.sub("", raw.strip()).strip()


def _sanitize(text: Any) -> Any:
    """Collapse runs of whitespace and trim; non-strings are left for the schema to reject."""
    if not isinstance(text, str):
        return text
    return " ".join(text.split())


def _normalize_payload(payload: Any) -> Any:
    """
    Accept either {"quiz": [...]} or a bare list of questions and sanitize the strings
    of every question. Anything else is returned untouched so validation fails on it.
    """
    if isinstance(payload, list):
        payload = {"quiz": payload}
    if not isinstance(payload, dict) or not isinstance(payload.get("quiz"), list):
        return payload

    questions: List[Any] = []
    for item in payload["quiz"]:
        if isinstance(item, dict):
            answers = item.get("answers")
            item = {
                **item,
                "question": _sanitize(item.get("question")),
                "answers": [_sanitize(a) for a in answers] if isinstance(answers, list) else answers,
                "correctAnswer": _sanitize(item.get("correctAnswer")),
            }
        questions.append(item)
    return {**payload, "quiz": questions}


# PUBLIC_INTERFACE
def parse_quiz_response(raw: str) -> GenerateQuizOutput:
    """
    Parse and validate a model response into a quiz.

    Raises:
        QuizSchemaError: the response is not JSON, or any question is malformed
            (missing fields, duplicate answers, correct answer not among the answers).
            A partially valid quiz is never returned.
    """
    try:
        payload = json.loads(_strip_code_fences(raw))
    except json.JSONDecodeError as exc:
        logger.error("Quiz response is not valid JSON: %s", exc)
        raise QuizSchemaError("The model returned a malformed quiz", detail=str(exc)) from exc

    try:
        return GenerateQuizOutput.model_validate(_normalize_payload(payload))
    except ValidationError as exc:
        logger.error("Quiz response failed validation: %s", exc)
        raise QuizSchemaError("The model returned a malformed quiz", detail=str(exc)) from exc


# PUBLIC_INTERFACE
def generate_quiz(text: str, num_questions: int, model: Optional[Any] = None) -> GenerateQuizOutput:
    """
    Generate a multiple-choice quiz from source text with the hosted language model.

    Args:
        text: The source text. Must not be blank.
        num_questions: Requested number of questions, 5 to 50 inclusive.
        model: Optional model handle; defaults to the configured Gemini model.

    Returns:
        GenerateQuizOutput: the validated quiz, questions in display order.

    Notes:
        - The model is asked for JSON output; the response is parsed and validated
          explicitly (see parse_quiz_response).
        - A question count different from the request is logged and accepted.

    Raises:
        InputValidationError: blank text or question count out of range.
        ConfigurationError: no model credentials configured.
        UpstreamServiceError: the model call failed.
        QuizSchemaError: the model output does not match the quiz contract.
    """
    text = (text or "").strip()
    if not text:
        raise InputValidationError("Text content cannot be empty")
    if isinstance(num_questions, bool) or not isinstance(num_questions, int):
        raise InputValidationError("numQuestions must be an integer")
    if not MIN_QUESTIONS <= num_questions <= MAX_QUESTIONS:
        raise InputValidationError(
            f"numQuestions must be between {MIN_QUESTIONS} and {MAX_QUESTIONS}"
        )

    model = model or get_generative_model()
    raw = generate_text(
        model,
        build_quiz_prompt(text, num_questions),
        failure_message="Failed to generate quiz",
        generation_config=JSON_GENERATION_CONFIG,
    )
    result = parse_quiz_response(raw)

    if len(result.quiz) != num_questions:
        logger.warning("Requested %d questions, model returned %d", num_questions, len(result.quiz))
    logger.info("Generated quiz with %d questions from %d characters", len(result.quiz), len(text))
    return result
