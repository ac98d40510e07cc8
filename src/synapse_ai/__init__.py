"""
synapse_ai - Adaptador multi-proveedor para chat, generacion de texto y embeddings.

Una sola interfaz para OpenAI y Google Gemini. El proveedor por defecto se
toma de la configuracion (SYNAPSE_AI_PROVIDER, default "openai") y puede
cambiarse en cada llamada con provider=...

Las tres operaciones devuelven siempre un Response: los fallos (proveedor
no soportado, credenciales ausentes, errores del API, respuestas malformadas)
llegan como Response con success=False, nunca como excepcion.

Uso:
    from src import synapse_ai

    synapse_ai.configure(openai_api_key="sk-...", log_level="debug")

    response = synapse_ai.chat([{"role": "user", "content": "Hola"}], model="gpt-4")
    if response.is_success():
        print(response.content, response.token_usage)

    vector = synapse_ai.embed("texto", provider="google_gemini").content
"""

from ._backends import resolve_provider
from ._config import (
    Configuration,
    Provider,
    configure,
    get_configuration,
    load_env,
    reset_configuration,
)
from ._types import ErrorType, Response, ResponseStatus
from .exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    MalformedResponseError,
    SynapseAIError,
    VendorError,
)
from src.utils.logging_config import get_logger, trace_context

__all__ = [
    "chat",
    "generate_text",
    "embed",
    "resolve_provider",
    "get_provider_name",
    "configure",
    "get_configuration",
    "reset_configuration",
    "load_env",
    "Configuration",
    "Provider",
    "Response",
    "ResponseStatus",
    "ErrorType",
    "SynapseAIError",
    "ConfigurationError",
    "InvalidArgumentError",
    "VendorError",
    "MalformedResponseError",
]

__version__ = "0.1.0"

logger = get_logger(__name__)


def _failure(operation: str, error: Exception) -> Response:
    logger.error(
        "facade_call_failed",
        operation=operation,
        error_class=type(error).__name__,
        error=str(error),
    )
    error_type = getattr(error, "error_type", ErrorType.CLIENT)
    return Response.failed(f"synapse_ai.{operation} failed: {error}", error_type=error_type)


def chat(messages: list[dict], **options) -> Response:
    """
    Chat completion con el proveedor configurado.

    Args:
        messages: Lista de mensajes ({role, content} o {role, parts: [{text}]}).
        **options: provider (override), model, max_tokens y parametros del proveedor.

    Returns:
        Response estandarizado (nunca lanza por fallos del proveedor).
    """
    provider = options.pop("provider", None)
    with trace_context(operation="chat"):
        try:
            return resolve_provider(provider).chat(messages, **options)
        except Exception as e:
            return _failure("chat", e)


def generate_text(prompt: str, **options) -> Response:
    """
    Genera texto a partir de un prompt con el proveedor configurado.

    Args:
        prompt: Texto de entrada.
        **options: provider (override), model, max_tokens y parametros del proveedor.
    """
    provider = options.pop("provider", None)
    with trace_context(operation="generate_text"):
        try:
            return resolve_provider(provider).generate_text(prompt, **options)
        except Exception as e:
            return _failure("generate_text", e)


def embed(text: str, **options) -> Response:
    """
    Embedding del texto; response.content es el vector.

    Args:
        text: Texto a vectorizar.
        **options: provider (override), model y parametros del proveedor.
    """
    provider = options.pop("provider", None)
    with trace_context(operation="embed"):
        try:
            return resolve_provider(provider).embed(text, **options)
        except Exception as e:
            return _failure("embed", e)


def get_provider_name() -> str:
    """Devuelve el nombre del proveedor configurado (e.g. 'openai')."""
    return get_configuration().provider_name
