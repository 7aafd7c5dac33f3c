import os
from unittest.mock import patch

import pytest

from quizify.config import DEFAULT_GEMINI_MODEL, Settings, get_settings, reset_settings_cache
from quizify.errors import ConfigurationError


class TestSettings:
    def test_from_env_defaults(self):
        settings = Settings.from_env()

        assert settings.gcs_bucket_name == "quizify-test-bucket"
        assert settings.genai_api_key == "test-key-123"
        assert settings.genai_model == DEFAULT_GEMINI_MODEL
        assert settings.signed_url_ttl_minutes == 15
        assert settings.session_ttl_minutes == 60
        assert settings.max_sessions == 1000
        assert settings.cors_allow_origins == ["*"]
        assert settings.missing_values() == []

    def test_google_api_key_fallback(self):
        with patch.dict(os.environ, {"GOOGLE_API_KEY": "google-key"}):
            os.environ.pop("GEMINI_API_KEY")
            assert Settings.from_env().genai_api_key == "google-key"

    def test_cors_origins_split(self):
        with patch.dict(os.environ, {"CORS_ALLOW_ORIGINS": "http://a.test, http://b.test"}):
            assert Settings.from_env().cors_allow_origins == ["http://a.test", "http://b.test"]

    def test_bad_number_is_configuration_error(self):
        with patch.dict(os.environ, {"SIGNED_URL_TTL_MINUTES": "soon"}):
            with pytest.raises(ConfigurationError):
                Settings.from_env()

    def test_session_limits_from_env(self):
        with patch.dict(os.environ, {"SESSION_TTL_MINUTES": "5", "SESSION_MAX_COUNT": "20"}):
            settings = Settings.from_env()

        assert settings.session_ttl_minutes == 5
        assert settings.max_sessions == 20

    def test_missing_values_reported(self):
        assert Settings().missing_values() == ["GCS_BUCKET_NAME", "GEMINI_API_KEY"]

    def test_service_account_info(self):
        settings = Settings(gcs_service_account_key='{"project_id": "demo", "type": "service_account"}')

        assert settings.service_account_info()["project_id"] == "demo"
        assert Settings().service_account_info() is None

    def test_invalid_service_account_key(self):
        with pytest.raises(ConfigurationError):
            Settings(gcs_service_account_key="{not json").service_account_info()

    def test_get_settings_is_cached(self):
        first = get_settings()
        with patch.dict(os.environ, {"GEMINI_MODEL": "other-model"}):
            assert get_settings() is first
            reset_settings_cache()
            assert get_settings().genai_model == "other-model"
