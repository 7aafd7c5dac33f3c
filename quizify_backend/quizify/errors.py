"""
Error taxonomy shared by the service adapters, the workflow view-models and the API.

Each error carries the HTTP status the API layer responds with, so route handlers
never need to translate exceptions themselves.
"""
from typing import Optional


class QuizifyError(Exception):
    """Base class for all application errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    # PUBLIC_INTERFACE
    @property
    def public_message(self) -> str:
        """Message that is safe to return to the caller."""
        return self.message


class InputValidationError(QuizifyError):
    """Missing or malformed input supplied by the caller."""

    status_code = 400


class UndeterminedFileTypeError(InputValidationError):
    """The media type of an uploaded blob was not declared and could not be inferred."""

    def __init__(self, message: str = "Could not determine file type.") -> None:
        super().__init__(message)


class ConfigurationError(QuizifyError):
    """A required environment value is missing."""

    status_code = 500


class UpstreamServiceError(QuizifyError):
    """
    A hosted provider (generative model or object storage) failed.

    `detail` holds the upstream error text for server-side logs; callers only ever
    see the generic message.
    """

    status_code = 500

    def __init__(self, message: str, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.detail = detail


class QuizSchemaError(UpstreamServiceError):
    """The model answered, but its output does not match the quiz contract."""


class InvalidActionError(QuizifyError):
    """A view-model operation was invoked while its control is disabled."""

    status_code = 409


class InvalidTransitionError(InvalidActionError):
    """The workflow controller was asked for a transition its current state does not allow."""


class SessionNotFoundError(QuizifyError):
    status_code = 404

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id
