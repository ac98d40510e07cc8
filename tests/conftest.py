# tests/conftest.py
"""
Pytest fixtures compartidos para los tests de SynapseAI.
"""

from unittest.mock import MagicMock

import pytest

from src.synapse_ai import reset_configuration
from src.utils.logging_config import LogConfig, configure_logging


ENV_VARS = (
    "OPENAI_API_KEY",
    "GOOGLE_GEMINI_API_KEY",
    "SYNAPSE_AI_PROVIDER",
    "SYNAPSE_AI_LOG_LEVEL",
    "SYNAPSE_AI_LOG_FORMAT",
    "SYNAPSE_AI_TIMEOUT",
)


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    """Logs a stderr y solo warnings, para no mezclar con el JSON del CLI."""
    configure_logging(LogConfig(level="WARNING"))


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Configuracion limpia y sin API keys reales en cada test."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SYNAPSE_AI_LOG_LEVEL", "warning")
    reset_configuration()
    yield
    reset_configuration()


# ============================================================================
# Payloads de ejemplo
# ============================================================================

@pytest.fixture
def openai_chat_payload():
    return {
        "id": "chatcmpl-123",
        "model": "gpt-3.5-turbo",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": "Hello"}}],
        "usage": {"prompt_tokens": 5, "completion_tokens": 2, "total_tokens": 7},
    }


@pytest.fixture
def openai_completion_payload():
    return {
        "id": "cmpl-123",
        "model": "text-davinci-003",
        "choices": [{"index": 0, "text": "\n\nHabia una vez un qubit.  "}],
        "usage": {"prompt_tokens": 4, "completion_tokens": 8, "total_tokens": 12},
    }


@pytest.fixture
def openai_embedding_payload():
    return {
        "object": "list",
        "model": "text-embedding-3-small",
        "data": [{"object": "embedding", "index": 0, "embedding": [0.1, -0.2, 0.3]}],
        "usage": {"prompt_tokens": 6, "total_tokens": 6},
    }


@pytest.fixture
def openai_error_payload():
    return {"error": {"message": "Incorrect API key provided: sk-bad", "type": "invalid_request_error"}}


@pytest.fixture
def gemini_chat_payload():
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": "Hola, "}, {"text": "mundo"}]},
                "finishReason": "STOP",
            }
        ],
        "usageMetadata": {"promptTokenCount": 3, "candidatesTokenCount": 4, "totalTokenCount": 7},
    }


@pytest.fixture
def gemini_embedding_payload():
    return {"embedding": {"values": [0.5, 0.25, -0.125]}}


# ============================================================================
# Clientes mock
# ============================================================================

@pytest.fixture
def openai_client(openai_chat_payload, openai_completion_payload, openai_embedding_payload):
    """Doble del cliente openai.OpenAI con respuestas de exito."""
    client = MagicMock()
    client.chat.completions.create.return_value = openai_chat_payload
    client.completions.create.return_value = openai_completion_payload
    client.embeddings.create.return_value = openai_embedding_payload
    return client


@pytest.fixture
def gemini_client(gemini_chat_payload, gemini_embedding_payload):
    """Doble del cliente google.genai.Client con respuestas de exito."""
    client = MagicMock()
    client.models.generate_content.return_value = gemini_chat_payload
    client.models.embed_content.return_value = gemini_embedding_payload
    return client
