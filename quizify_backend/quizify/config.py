import json
import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from quizify.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_SIGNED_URL_TTL_MINUTES = 15
DEFAULT_GENAI_TIMEOUT_SECONDS = 60.0
DEFAULT_SESSION_TTL_MINUTES = 60
DEFAULT_MAX_SESSIONS = 1000


@dataclass(frozen=True)
class Settings:
    """
    Process-wide configuration read from the environment.

    Values are read once (see get_settings) and never re-read while the process runs.
    """

    gcs_bucket_name: Optional[str] = None
    gcs_service_account_key: Optional[str] = None
    genai_api_key: Optional[str] = None
    genai_model: str = DEFAULT_GEMINI_MODEL
    genai_timeout_seconds: float = DEFAULT_GENAI_TIMEOUT_SECONDS
    signed_url_ttl_minutes: int = DEFAULT_SIGNED_URL_TTL_MINUTES
    session_ttl_minutes: int = DEFAULT_SESSION_TTL_MINUTES
    max_sessions: int = DEFAULT_MAX_SESSIONS
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    # PUBLIC_INTERFACE
    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Recognized variables:
            GCS_BUCKET_NAME, GCS_SERVICE_ACCOUNT_KEY,
            GEMINI_API_KEY (or GOOGLE_API_KEY), GEMINI_MODEL, GENAI_TIMEOUT_SECONDS,
            SIGNED_URL_TTL_MINUTES, SESSION_TTL_MINUTES, SESSION_MAX_COUNT,
            CORS_ALLOW_ORIGINS, LOG_LEVEL.

        Raises:
            ConfigurationError: if a numeric variable cannot be parsed.
        """
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        return cls(
            gcs_bucket_name=os.getenv("GCS_BUCKET_NAME") or None,
            gcs_service_account_key=os.getenv("GCS_SERVICE_ACCOUNT_KEY") or None,
            genai_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or None,
            genai_model=os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
            genai_timeout_seconds=_read_number(
                "GENAI_TIMEOUT_SECONDS", float, DEFAULT_GENAI_TIMEOUT_SECONDS
            ),
            signed_url_ttl_minutes=_read_number(
                "SIGNED_URL_TTL_MINUTES", int, DEFAULT_SIGNED_URL_TTL_MINUTES
            ),
            session_ttl_minutes=_read_number("SESSION_TTL_MINUTES", int, DEFAULT_SESSION_TTL_MINUTES),
            max_sessions=_read_number("SESSION_MAX_COUNT", int, DEFAULT_MAX_SESSIONS),
            cors_allow_origins=[o.strip() for o in origins.split(",") if o.strip()] if origins else ["*"],
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    # PUBLIC_INTERFACE
    def service_account_info(self) -> Optional[Dict[str, Any]]:
        """
        Parse GCS_SERVICE_ACCOUNT_KEY as JSON.

        Returns:
            The service account dict, or None when no key is configured
            (application default credentials are used instead).

        Raises:
            ConfigurationError: if the key is present but not a JSON object.
        """
        if not self.gcs_service_account_key:
            return None
        try:
            info = json.loads(self.gcs_service_account_key)
        except json.JSONDecodeError as exc:
            raise ConfigurationError("GCS_SERVICE_ACCOUNT_KEY is not valid JSON") from exc
        if not isinstance(info, dict):
            raise ConfigurationError("GCS_SERVICE_ACCOUNT_KEY must be a JSON object")
        return info

    # PUBLIC_INTERFACE
    def missing_values(self) -> List[str]:
        """Names of required environment values that are not set."""
        missing = []
        if not self.gcs_bucket_name:
            missing.append("GCS_BUCKET_NAME")
        if not self.genai_api_key:
            missing.append("GEMINI_API_KEY")
        return missing


def _read_number(name: str, cast, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return the cached process settings, loading a .env file on first use."""
    return _get_settings_singleton()


@lru_cache(maxsize=1)
def _get_settings_singleton() -> Settings:
    load_dotenv()
    settings = Settings.from_env()
    logger.debug("Loaded settings (model=%s, bucket=%s)", settings.genai_model, settings.gcs_bucket_name)
    return settings


def reset_settings_cache() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    _get_settings_singleton.cache_clear()
