"""
Tests para GoogleGeminiAdapter (con cliente mock, sin API key real).
"""

from unittest.mock import MagicMock, patch

import pytest
from google.genai import errors

from src.synapse_ai import ConfigurationError, ErrorType, InvalidArgumentError, configure
from src.synapse_ai.providers.gemini_adapter import (
    DEFAULT_CHAT_MODEL,
    DEFAULT_EMBEDDING_MODEL,
    GoogleGeminiAdapter,
    to_gemini_contents,
)


@pytest.fixture
def adapter(gemini_client):
    return GoogleGeminiAdapter(api_key="gm-test", timeout=30, client=gemini_client)


USER_MESSAGE = [{"role": "user", "parts": [{"text": "Hola"}]}]


# ============================================================================
# Tests: Construccion
# ============================================================================

class TestInit:
    def test_missing_key_raises(self):
        with patch("src.synapse_ai.providers.gemini_adapter.genai.Client") as mock_client:
            with pytest.raises(InvalidArgumentError, match="Google Gemini API key is required"):
                GoogleGeminiAdapter(api_key="", timeout=10)
        mock_client.assert_not_called()

    def test_key_from_configuration(self):
        configure(google_gemini_api_key="gm-config", default_timeout=5)
        with patch("src.synapse_ai.providers.gemini_adapter.genai.Client") as mock_client:
            adapter = GoogleGeminiAdapter()

        assert adapter.api_key == "gm-config"
        assert mock_client.call_args.kwargs["api_key"] == "gm-config"
        assert mock_client.call_args.kwargs["http_options"].timeout == 5000

    def test_missing_key_in_configuration(self):
        with pytest.raises(InvalidArgumentError):
            GoogleGeminiAdapter()

    def test_client_failure_becomes_configuration_error(self):
        with patch(
            "src.synapse_ai.providers.gemini_adapter.genai.Client",
            side_effect=RuntimeError("credenciales rotas"),
        ):
            with pytest.raises(ConfigurationError, match="Failed to initialize Google Gemini client"):
                GoogleGeminiAdapter(api_key="gm-test", timeout=10)


# ============================================================================
# Tests: Traduccion de mensajes
# ============================================================================

class TestContents:
    def test_parts_format(self):
        contents, system = to_gemini_contents(USER_MESSAGE)
        assert contents == [{"role": "user", "parts": [{"text": "Hola"}]}]
        assert system is None

    def test_content_format_and_roles(self):
        contents, system = to_gemini_contents([
            {"role": "system", "content": "Eres breve."},
            {"role": "user", "content": "Hola"},
            {"role": "assistant", "content": "Buenas"},
        ])
        assert system == "Eres breve."
        assert contents == [
            {"role": "user", "parts": [{"text": "Hola"}]},
            {"role": "model", "parts": [{"text": "Buenas"}]},
        ]


# ============================================================================
# Tests: chat / generate_text
# ============================================================================

class TestChat:
    def test_success(self, adapter, gemini_client):
        response = adapter.chat(USER_MESSAGE)

        assert response.success is True
        assert response.content == "Hola, mundo"
        assert response.token_usage == {"prompt_tokens": 3, "completion_tokens": 4, "total_tokens": 7}
        assert response.provider == "google_gemini"
        gemini_client.models.generate_content.assert_called_once_with(
            model=DEFAULT_CHAT_MODEL,
            contents=[{"role": "user", "parts": [{"text": "Hola"}]}],
            config={"temperature": 0.7},
        )

    def test_model_none_uses_default(self, adapter, gemini_client):
        response = adapter.generate_text("Hola", model=None)
        assert response.model == DEFAULT_CHAT_MODEL
        assert gemini_client.models.generate_content.call_args.kwargs["model"] == DEFAULT_CHAT_MODEL

    def test_options_are_merged(self, adapter, gemini_client):
        adapter.chat(USER_MESSAGE, temperature=0.1, max_tokens=50, top_p=0.9)
        config = gemini_client.models.generate_content.call_args.kwargs["config"]
        assert config == {"temperature": 0.1, "max_output_tokens": 50, "top_p": 0.9}

    def test_partial_usage_metadata(self, adapter, gemini_client):
        gemini_client.models.generate_content.return_value = {
            "candidates": [{"content": {"parts": [{"text": "ok"}]}}],
            "usageMetadata": {"promptTokenCount": 2},
        }
        response = adapter.chat(USER_MESSAGE)
        assert response.token_usage == {"prompt_tokens": 2, "completion_tokens": None, "total_tokens": None}

    def test_sdk_object_is_converted(self, adapter, gemini_client):
        sdk_response = MagicMock()
        sdk_response.model_dump.return_value = {
            "candidates": [{"content": {"parts": [{"text": "sdk"}]}}],
            "usageMetadata": {"totalTokenCount": 9},
        }
        gemini_client.models.generate_content.return_value = sdk_response

        response = adapter.chat(USER_MESSAGE)
        assert response.content == "sdk"
        assert response.token_usage["total_tokens"] == 9

    def test_api_error(self, adapter, gemini_client):
        error_body = {"error": {"code": 400, "message": "API key not valid", "status": "INVALID_ARGUMENT"}}
        gemini_client.models.generate_content.side_effect = errors.ClientError(400, error_body)

        response = adapter.chat(USER_MESSAGE)
        assert response.success is False
        assert response.error_type == ErrorType.VENDOR
        assert response.error_message.startswith("Google Gemini API error (400)")
        assert "API key not valid" in response.error_message

    def test_generic_error(self, adapter, gemini_client):
        gemini_client.models.generate_content.side_effect = TimeoutError("timed out")

        response = adapter.chat(USER_MESSAGE)
        assert response.success is False
        assert response.error_type == ErrorType.CLIENT
        assert response.error_message == "Unexpected error during Google Gemini chat: timed out"

    def test_blocked_prompt(self, adapter, gemini_client):
        gemini_client.models.generate_content.return_value = {"promptFeedback": {"blockReason": "SAFETY"}}
        response = adapter.chat(USER_MESSAGE)
        assert response.error_type == ErrorType.VENDOR
        assert "SAFETY" in response.error_message

    def test_candidate_without_content(self, adapter, gemini_client):
        gemini_client.models.generate_content.return_value = {
            "candidates": [{"finishReason": "SAFETY"}],
        }
        response = adapter.chat(USER_MESSAGE)
        assert response.success is False
        assert response.error_type == ErrorType.VENDOR

    def test_error_payload(self, adapter, gemini_client):
        payload = {"error": {"code": 429, "message": "Resource exhausted"}}
        gemini_client.models.generate_content.return_value = payload
        response = adapter.chat(USER_MESSAGE)
        assert "Resource exhausted" in response.error_message
        assert response.raw_response == payload

    def test_malformed(self, adapter, gemini_client):
        gemini_client.models.generate_content.return_value = {"foo": "bar"}
        response = adapter.chat(USER_MESSAGE)
        assert response.error_type == ErrorType.MALFORMED_RESPONSE
        assert "malformed" in response.error_message.lower()

    def test_generate_text_delegates_to_chat(self, adapter, gemini_client):
        response = adapter.generate_text("Cuenta un chiste", model="gemini-1.5-pro")

        kwargs = gemini_client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-1.5-pro"
        assert kwargs["contents"] == [{"role": "user", "parts": [{"text": "Cuenta un chiste"}]}]
        assert response.content == "Hola, mundo"


# ============================================================================
# Tests: embed
# ============================================================================

class TestEmbed:
    def test_success_rest_shape(self, adapter, gemini_client):
        response = adapter.embed("texto")

        gemini_client.models.embed_content.assert_called_once_with(
            model=DEFAULT_EMBEDDING_MODEL,
            contents={"parts": [{"text": "texto"}]},
            config=None,
        )
        assert response.success is True
        assert response.content == [0.5, 0.25, -0.125]
        assert response.token_usage is None

    def test_sdk_shape_and_model(self, adapter, gemini_client):
        gemini_client.models.embed_content.return_value = {"embeddings": [{"values": [1.0, 2.0]}]}
        response = adapter.embed("texto", model="gemini-embedding-001")

        assert gemini_client.models.embed_content.call_args.kwargs["model"] == "gemini-embedding-001"
        assert response.content == [1.0, 2.0]

    def test_options_passed_as_config(self, adapter, gemini_client):
        adapter.embed("texto", task_type="RETRIEVAL_DOCUMENT")
        config = gemini_client.models.embed_content.call_args.kwargs["config"]
        assert config == {"task_type": "RETRIEVAL_DOCUMENT"}

    def test_malformed(self, adapter, gemini_client):
        gemini_client.models.embed_content.return_value = {}
        response = adapter.embed("texto")
        assert response.error_type == ErrorType.MALFORMED_RESPONSE

    def test_api_error(self, adapter, gemini_client):
        gemini_client.models.embed_content.side_effect = errors.ClientError(
            403, {"error": {"code": 403, "message": "Permission denied", "status": "PERMISSION_DENIED"}}
        )
        response = adapter.embed("texto")
        assert response.error_type == ErrorType.VENDOR
        assert "Permission denied" in response.error_message


class TestGenerateImage:
    def test_not_implemented(self, adapter):
        response = adapter.generate_image("un gato")
        assert response.is_failure()
        assert response.error_type == ErrorType.NOT_IMPLEMENTED
