import base64

import pytest

from quizify.errors import (
    ConfigurationError,
    InputValidationError,
    UndeterminedFileTypeError,
    UpstreamServiceError,
)
from quizify.services.prompt_templates import EXTRACT_TEXT_PROMPT
from quizify.services.text_extractor import extract_text_from_file
from quizify.utils.data_uri import encode_data_uri, parse_data_uri, resolve_media_type

PDF_BYTES = b"%PDF-1.7\n1 0 obj\n<< /Type /Catalog >>\nendobj\n"


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class TestDataUri:
    def test_parse_declared_type(self):
        blob = parse_data_uri(encode_data_uri(b"hello", "text/plain"))

        assert blob.declared_type == "text/plain"
        assert blob.data == b"hello"

    def test_parse_without_header(self):
        blob = parse_data_uri("," + _b64(PDF_BYTES))

        assert blob.declared_type is None
        assert blob.data == PDF_BYTES

    def test_empty_declared_type_is_undeclared(self):
        blob = parse_data_uri("data:;base64," + _b64(PDF_BYTES))

        assert blob.declared_type is None
        assert resolve_media_type(blob) == "application/pdf"

    def test_invalid_base64_rejected(self):
        with pytest.raises(InputValidationError):
            parse_data_uri("data:application/pdf;base64,not base64!!")

    def test_empty_value_rejected(self):
        with pytest.raises(InputValidationError):
            parse_data_uri("")


class TestExtractTextFromFile:
    """Media type policy and failure propagation."""

    def test_declared_type_is_forwarded(self, fake_model_factory):
        model = fake_model_factory(text="Hello world")

        result = extract_text_from_file(encode_data_uri(PDF_BYTES, "application/pdf"), model=model)

        assert result.text == "Hello world"
        prompt, media = model.calls[0].contents
        assert prompt == EXTRACT_TEXT_PROMPT
        assert media == {"mime_type": "application/pdf", "data": PDF_BYTES}

    def test_declared_type_wins_over_content(self, fake_model_factory):
        model = fake_model_factory(text="text")

        extract_text_from_file(encode_data_uri(PDF_BYTES, "application/octet-stream"), model=model)

        assert model.calls[0].contents[1]["mime_type"] == "application/octet-stream"

    def test_undeclared_type_is_inferred(self, fake_model_factory):
        model = fake_model_factory(text="text")

        extract_text_from_file("data:;base64," + _b64(PDF_BYTES), model=model)

        assert model.calls[0].contents[1]["mime_type"] == "application/pdf"

    def test_undeterminable_type_fails_before_model_call(self, fake_model_factory):
        model = fake_model_factory(text="should not be used")

        with pytest.raises(UndeterminedFileTypeError) as excinfo:
            extract_text_from_file("," + _b64(b"just some plain words"), model=model)

        assert str(excinfo.value) == "Could not determine file type."
        assert model.calls == []

    def test_upstream_failure_propagates_with_detail(self, fake_model_factory):
        model = fake_model_factory(error=TimeoutError("deadline exceeded"))

        with pytest.raises(UpstreamServiceError) as excinfo:
            extract_text_from_file(encode_data_uri(PDF_BYTES, "application/pdf"), model=model)

        assert "deadline exceeded" in excinfo.value.detail

    def test_blocked_prompt_is_a_failure_not_empty_text(self, fake_model_factory):
        model = fake_model_factory(text="", block_reason="SAFETY")

        with pytest.raises(UpstreamServiceError):
            extract_text_from_file(encode_data_uri(PDF_BYTES, "application/pdf"), model=model)

    def test_document_without_text_returns_empty_string(self, fake_model_factory):
        model = fake_model_factory(text="")

        result = extract_text_from_file(encode_data_uri(PDF_BYTES, "application/pdf"), model=model)

        assert result.text == ""

    def test_missing_api_key_is_configuration_error(self, monkeypatch):
        from quizify.config import reset_settings_cache

        monkeypatch.delenv("GEMINI_API_KEY")
        reset_settings_cache()

        with pytest.raises(ConfigurationError):
            extract_text_from_file(encode_data_uri(PDF_BYTES, "application/pdf"))
