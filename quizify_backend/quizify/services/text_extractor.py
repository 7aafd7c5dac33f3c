import logging
from typing import Any, Optional

from quizify.api.schemas import ExtractTextOutput
from quizify.services.genai_client import generate_text, get_generative_model
from quizify.services.prompt_templates import EXTRACT_TEXT_PROMPT
from quizify.utils.data_uri import parse_data_uri, resolve_media_type

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def extract_text_from_file(file_data_uri: str, model: Optional[Any] = None) -> ExtractTextOutput:
    """
    Extract the text of a document with the hosted multimodal model.

    No local parsing of PDF/DOC formats happens here. The document is forwarded as an
    inline blob together with an instruction prompt.

    Media type policy:
        - use the type declared in the data URI when there is one;
        - otherwise infer it from the payload's magic bytes;
        - otherwise fail with UndeterminedFileTypeError.

    Args:
        file_data_uri: 'data:<mimetype>;base64,<encoded_data>'.
        model: Optional model handle; defaults to the configured Gemini model.

    Returns:
        ExtractTextOutput: the extracted text. An empty string only means the model
        answered normally and found no text.

    Raises:
        InputValidationError: malformed data URI.
        UndeterminedFileTypeError: no declared type and inference failed.
        ConfigurationError: no model credentials configured.
        UpstreamServiceError: the model call failed or returned no text.
    """
    blob = parse_data_uri(file_data_uri)
    mime_type = resolve_media_type(blob)
    if not blob.declared_type:
        logger.info("Inferred media type %s for undeclared upload", mime_type)

    model = model or get_generative_model()
    text = generate_text(
        model,
        [EXTRACT_TEXT_PROMPT, {"mime_type": mime_type, "data": blob.data}],
        failure_message="Failed to extract text from file",
    )
    logger.info("Extracted %d characters from %s document (%d bytes)", len(text), mime_type, len(blob.data))
    return ExtractTextOutput(text=text)
