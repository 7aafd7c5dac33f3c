import logging
import uuid
from datetime import timedelta
from typing import Any, Callable, Optional

from google.cloud import storage

from quizify.api.schemas import UploadUrlResponse
from quizify.config import Settings, get_settings
from quizify.errors import ConfigurationError, InputValidationError, UpstreamServiceError

logger = logging.getLogger(__name__)


def _default_client_factory(settings: Settings) -> storage.Client:
    info = settings.service_account_info()
    if info is None:
        return storage.Client()
    return storage.Client.from_service_account_info(info, project=info.get("project_id"))


class UploadUrlIssuer:
    """
    Issues time-limited signed URLs that let the browser PUT a file straight into
    the configured Cloud Storage bucket.

    The storage client is created lazily on the first successful validation, so a
    missing bucket or missing input never reaches the provider.
    """

    # PUBLIC_INTERFACE
    def __init__(
        self,
        settings: Optional[Settings] = None,
        client_factory: Optional[Callable[[Settings], Any]] = None,
    ) -> None:
        """
        Args:
            settings: Configuration; defaults to the process settings.
            client_factory: Builds the storage client from settings. Defaults to a
                google.cloud.storage.Client using GCS_SERVICE_ACCOUNT_KEY when set.
        """
        self.settings = settings or get_settings()
        self._client_factory = client_factory or _default_client_factory
        self._client = None

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = self._client_factory(self.settings)
        return self._client

    # PUBLIC_INTERFACE
    def issue(self, filename: Optional[str], content_type: Optional[str]) -> UploadUrlResponse:
        """
        Generate a unique object key for `filename` and a signed write URL for it.

        Checks run in order: bucket configured, then both inputs present, then the
        provider call.

        Returns:
            UploadUrlResponse: the URL and the generated key '<uuid4>-<filename>'.

        Raises:
            ConfigurationError: GCS_BUCKET_NAME is not set.
            InputValidationError: filename or content_type missing.
            UpstreamServiceError: the storage provider failed to sign the URL.
        """
        bucket_name = self.settings.gcs_bucket_name
        if not bucket_name:
            raise ConfigurationError("GCS_BUCKET_NAME environment variable not set")
        if not filename or not content_type:
            raise InputValidationError("filename and contentType are required")

        unique_filename = f"{uuid.uuid4()}-{filename}"
        try:
            blob = self._get_client().bucket(bucket_name).blob(unique_filename)
            url = blob.generate_signed_url(
                version="v4",
                expiration=timedelta(minutes=self.settings.signed_url_ttl_minutes),
                method="PUT",
                content_type=content_type,
            )
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.exception("Error generating GCS signed URL for %s", unique_filename)
            raise UpstreamServiceError("Failed to generate signed URL", detail=str(exc)) from exc

        logger.info("Issued signed upload URL for %s (%s)", unique_filename, content_type)
        return UploadUrlResponse(url=url, filename=unique_filename)
