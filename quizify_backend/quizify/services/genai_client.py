import logging
from typing import Any, Dict, Optional

import google.generativeai as genai

from quizify.config import Settings, get_settings
from quizify.errors import ConfigurationError, UpstreamServiceError

logger = logging.getLogger(__name__)

JSON_GENERATION_CONFIG: Dict[str, Any] = {"response_mime_type": "application/json"}


# PUBLIC_INTERFACE
def get_generative_model(settings: Optional[Settings] = None) -> genai.GenerativeModel:
    """
    Build a handle on the hosted Gemini model named by GEMINI_MODEL.

    Raises:
        ConfigurationError: if no API key is configured. Checked before any provider call.
    """
    settings = settings or get_settings()
    if not settings.genai_api_key:
        raise ConfigurationError("GEMINI_API_KEY environment variable not set")
    genai.configure(api_key=settings.genai_api_key)
    return genai.GenerativeModel(settings.genai_model)


# PUBLIC_INTERFACE
def generate_text(
    model: Any,
    contents: Any,
    failure_message: str,
    generation_config: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = None,
) -> str:
    """
    Run one generate_content call and return the response text.

    Every way the call can fail (transport error, blocked prompt, response without
    text parts) is turned into an UpstreamServiceError carrying the upstream detail,
    so callers never mistake a failure for an empty answer.

    Args:
        model: A genai.GenerativeModel, or any object with the same generate_content API.
        contents: Prompt parts passed straight to generate_content.
        failure_message: Generic message for the caller when the call fails.
        generation_config: Optional generation config (e.g. JSON response mode).
        timeout: Request timeout in seconds; defaults to GENAI_TIMEOUT_SECONDS.
    """
    if timeout is None:
        timeout = get_settings().genai_timeout_seconds
    kwargs: Dict[str, Any] = {"request_options": {"timeout": timeout}}
    if generation_config:
        kwargs["generation_config"] = generation_config

    try:
        response = model.generate_content(contents, **kwargs)
    except Exception as exc:
        logger.exception("Generative model call failed")
        raise UpstreamServiceError(failure_message, detail=str(exc)) from exc

    feedback = getattr(response, "prompt_feedback", None)
    block_reason = getattr(feedback, "block_reason", None)
    if block_reason:
        logger.error("Generative model blocked the prompt: %s", block_reason)
        raise UpstreamServiceError(failure_message, detail=f"prompt blocked: {block_reason}")

    try:
        text = response.text
    except ValueError as exc:
        # Raised by the SDK when the candidate has no text parts (e.g. safety stop).
        logger.error("Generative model returned no text: %s", exc)
        raise UpstreamServiceError(failure_message, detail=str(exc)) from exc
    if text is None:
        raise UpstreamServiceError(failure_message, detail="response carried no text")
    return text
