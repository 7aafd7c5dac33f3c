import logging
from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quizify.api.schemas import (
    ErrorOut,
    ExtractTextInput,
    ExtractTextOutput,
    GenerateQuizInput,
    GenerateQuizOutput,
    UploadUrlRequest,
    UploadUrlResponse,
)
from quizify.api.sessions import sessions_router
from quizify.config import get_settings
from quizify.errors import ConfigurationError, QuizifyError, UpstreamServiceError
from quizify.services.quiz_generator import generate_quiz
from quizify.services.text_extractor import extract_text_from_file
from quizify.services.upload_url import UploadUrlIssuer
from quizify.storage.session_store import WorkflowSessionStore
from quizify.utils.logging_config import configure_logging
from quizify.workflow import QuizWorkflow

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "System", "description": "System and service endpoints"},
    {"name": "Uploads", "description": "Signed upload URL issuance"},
    {"name": "Quizzes", "description": "Text extraction and quiz generation endpoints"},
    {"name": "Sessions", "description": "Step-by-step quiz workflow driven by the browser"},
]

error_responses = {
    400: {"model": ErrorOut, "description": "Invalid input"},
    500: {"model": ErrorOut, "description": "Configuration or upstream provider failure"},
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    for name in settings.missing_values():
        logger.warning("%s is not set; endpoints that need it will answer with a configuration error", name)
    yield


app = FastAPI(
    title="Quizify Backend",
    description="Generates multiple-choice quizzes from text or uploaded documents with a hosted generative model.",
    version="0.1.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(QuizifyError)
async def handle_quizify_error(request: Request, exc: QuizifyError) -> JSONResponse:
    """Translate application errors into `{"error": ...}` bodies with the error's status."""
    if isinstance(exc, UpstreamServiceError):
        logger.error("%s %s failed upstream: %s (%s)", request.method, request.url.path, exc.message, exc.detail)
    elif isinstance(exc, ConfigurationError):
        logger.error("%s %s misconfigured: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "; ".join(messages)})


# PUBLIC_INTERFACE
def get_upload_issuer() -> UploadUrlIssuer:
    """Return a cached singleton instance of the upload URL issuer."""
    return _get_upload_issuer_singleton()


@lru_cache(maxsize=1)
def _get_upload_issuer_singleton() -> UploadUrlIssuer:
    return UploadUrlIssuer(settings=get_settings())


# PUBLIC_INTERFACE
def get_text_extractor():
    """Return the text extraction adapter."""
    return extract_text_from_file


# PUBLIC_INTERFACE
def get_quiz_generator():
    """Return the quiz generation adapter."""
    return generate_quiz


def _build_workflow() -> QuizWorkflow:
    return QuizWorkflow(extract_text=get_text_extractor(), generate_quiz=get_quiz_generator())


def _build_session_store() -> WorkflowSessionStore:
    settings = get_settings()
    return WorkflowSessionStore(
        _build_workflow,
        ttl_seconds=settings.session_ttl_minutes * 60,
        max_sessions=settings.max_sessions,
    )


app.state.session_store = _build_session_store()
app.include_router(sessions_router)


@app.get("/", summary="Health Check", tags=["System"])
def health_check():
    """
    Health check endpoint.

    Returns:
        JSON payload with a 'Healthy' message and the names of missing configuration values.
    """
    return {"message": "Healthy", "missing_config": get_settings().missing_values()}


@app.post(
    "/api/gcs-upload",
    response_model=UploadUrlResponse,
    responses=error_responses,
    summary="Issue a signed upload URL",
    description="Returns a URL that authorizes one PUT of the file to a unique key for 15 minutes.",
    tags=["Uploads"],
)
def issue_upload_url(
    request_in: UploadUrlRequest,
    issuer: UploadUrlIssuer = Depends(get_upload_issuer),
) -> UploadUrlResponse:
    """
    Issue a signed write URL for a browser upload.

    Args:
        request_in: filename and contentType of the file about to be uploaded.

    Returns:
        UploadUrlResponse: the signed URL and the unique key the file must be written to.

    Raises:
        400 if filename or contentType is missing.
        500 if the bucket is not configured or the storage provider fails.
    """
    return issuer.issue(request_in.filename, request_in.content_type)


@app.post(
    "/api/extract-text",
    response_model=ExtractTextOutput,
    responses=error_responses,
    summary="Extract text from a document",
    description="Forwards a data URI document to the hosted model and returns its text.",
    tags=["Quizzes"],
)
def extract_text(
    extract_in: ExtractTextInput,
    extractor=Depends(get_text_extractor),
) -> ExtractTextOutput:
    """
    Raises:
        400 if the data URI is malformed or its file type cannot be determined.
        500 on configuration or upstream model failure.
    """
    return extractor(extract_in.file_data_uri)


@app.post(
    "/api/generate-quiz",
    response_model=GenerateQuizOutput,
    responses=error_responses,
    summary="Generate a quiz from text",
    tags=["Quizzes"],
)
def create_quiz(
    quiz_in: GenerateQuizInput,
    generator=Depends(get_quiz_generator),
) -> GenerateQuizOutput:
    """
    Generate a multiple-choice quiz.

    Notes:
        - numQuestions must be between 5 and 50.
        - A malformed model answer is reported as an error, never as a partial quiz.
    """
    return generator(quiz_in.text, quiz_in.num_questions)
