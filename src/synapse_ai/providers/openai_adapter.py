"""
Adaptador para la API de OpenAI.

Implementa chat, generacion de texto (chat o completions legacy segun el
modelo) y embeddings sobre el SDK oficial `openai`.
"""

from typing import Any

import openai
from openai import OpenAI

from src.utils.logging_config import get_logger

from .._types import Response
from ..exceptions import InvalidArgumentError, MalformedResponseError, VendorError
from .base import ProviderAdapter, as_payload, normalize_token_usage, vendor_error_message

logger = get_logger(__name__)

DEFAULT_CHAT_MODEL = "gpt-3.5-turbo"
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"
DEFAULT_MAX_TOKENS = 150

CHAT_MODELS = frozenset({
    "gpt-4",
    "gpt-4-turbo",
    "gpt-4-turbo-preview",
    "gpt-4-0125-preview",
    "gpt-4-1106-preview",
    "gpt-4-vision-preview",
    "gpt-3.5-turbo",
    "gpt-3.5-turbo-0125",
    "gpt-3.5-turbo-1106",
})

# Familias de modelos de chat posteriores a la lista anterior
CHAT_MODEL_PREFIXES = ("gpt-4", "gpt-3.5-turbo", "gpt-5", "o1", "o3", "o4", "chatgpt-")

# Modelos de razonamiento: rechazan max_tokens y piden max_completion_tokens
REASONING_MODEL_PREFIXES = ("gpt-5", "o1", "o3", "o4")


def is_chat_model(model: str) -> bool:
    """True si el modelo usa el endpoint de chat en vez de completions."""
    if model in CHAT_MODELS:
        return True
    # gpt-3.5-turbo-instruct y similares solo existen en completions
    if model.endswith("-instruct"):
        return False
    return model.startswith(CHAT_MODEL_PREFIXES)


def token_limit_param(model: str) -> str:
    """Nombre del parametro de limite de salida que acepta el modelo de chat."""
    if model.startswith(REASONING_MODEL_PREFIXES):
        return "max_completion_tokens"
    return "max_tokens"


class OpenAIAdapter(ProviderAdapter):
    """
    Adaptador para OpenAI.

    Uso:
        adapter = OpenAIAdapter(api_key="sk-...")
        response = adapter.chat([{"role": "user", "content": "Hola"}])
        print(response.content, response.token_usage)
    """

    name = "openai"
    label = "OpenAI"
    _vendor_errors = (openai.OpenAIError,)

    def __init__(self, api_key: str | None, timeout: float = 60, client: Any = None):
        """
        Args:
            api_key: API key de OpenAI.
            timeout: Timeout HTTP en segundos.
            client: Cliente ya construido (tests); si None se crea uno.

        Raises:
            InvalidArgumentError: Si la API key es None o vacia.
        """
        if api_key is None or not api_key.strip():
            raise InvalidArgumentError("OpenAI API key is required.")

        self.api_key = api_key
        self.client = client or OpenAI(api_key=api_key, timeout=timeout)
        logger.debug("adapter_initialized", provider=self.name, timeout=timeout)

    def chat(self, messages: list[dict], model: str | None = None, **options) -> Response:
        """
        Envia una conversacion al endpoint de chat.

        Args:
            messages: Lista de mensajes, e.g. [{"role": "user", "content": "Hola"}].
            model: Modelo de chat (default: gpt-3.5-turbo).
            **options: Parametros adicionales del API (temperature, max_tokens...).
                En modelos de razonamiento max_tokens se envia como
                max_completion_tokens.
        """
        model = model or DEFAULT_CHAT_MODEL
        limit_param = token_limit_param(model)
        if limit_param != "max_tokens" and "max_tokens" in options:
            options[limit_param] = options.pop("max_tokens")

        def call() -> Response:
            params = {"model": model, "messages": messages, **options}
            payload = as_payload(self.client.chat.completions.create(**params))
            return self._parse_chat(payload, model)

        return self._guarded("chat", model, call)

    def generate_text(
        self,
        prompt: str,
        model: str | None = None,
        max_tokens: int | None = None,
        **options,
    ) -> Response:
        """
        Genera texto a partir de un prompt.

        Los modelos de chat reciben el prompt como unico mensaje de usuario;
        el resto usa el endpoint de completions. max_tokens vale 150 si el
        llamador no lo indica.
        """
        model = model or DEFAULT_CHAT_MODEL
        effective_max = max_tokens if max_tokens is not None else DEFAULT_MAX_TOKENS

        if is_chat_model(model):
            return self.chat(
                [{"role": "user", "content": prompt}],
                model=model,
                max_tokens=effective_max,
                **options,
            )

        def call() -> Response:
            params = {"model": model, "prompt": prompt, "max_tokens": effective_max, **options}
            payload = as_payload(self.client.completions.create(**params))
            return self._parse_completion(payload, model)

        return self._guarded("generate_text", model, call)

    def embed(self, text: str, model: str | None = None, **options) -> Response:
        """Devuelve el vector de embedding del texto como content."""
        model = model or DEFAULT_EMBEDDING_MODEL

        def call() -> Response:
            params = {"model": model, "input": text, **options}
            payload = as_payload(self.client.embeddings.create(**params))
            return self._parse_embedding(payload, model)

        return self._guarded("embed", model, call)

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def _raise_unparsed(self, payload: Any, what: str) -> None:
        message = vendor_error_message(payload)
        if message is not None:
            raise VendorError(message, raw_response=payload)
        raise MalformedResponseError(
            f"Malformed OpenAI response: no {what} and no error object in {payload!r}",
            raw_response=payload,
        )

    def _first_choice(self, payload: Any) -> dict | None:
        if not isinstance(payload, dict):
            return None
        choices = payload.get("choices")
        if not choices or not isinstance(choices[0], dict):
            return None
        return choices[0]

    def _parse_chat(self, payload: Any, model: str) -> Response:
        choice = self._first_choice(payload)
        message = (choice or {}).get("message") or {}
        content = message.get("content") if isinstance(message, dict) else None
        if content is None:
            self._raise_unparsed(payload, "message content")

        return Response.succeeded(
            content,
            token_usage=normalize_token_usage(payload.get("usage")),
            raw_response=payload,
            provider=self.name,
            model=model,
        )

    def _parse_completion(self, payload: Any, model: str) -> Response:
        choice = self._first_choice(payload)
        text = (choice or {}).get("text")
        if text is None:
            self._raise_unparsed(payload, "completion text")

        return Response.succeeded(
            text.strip(),
            token_usage=normalize_token_usage(payload.get("usage")),
            raw_response=payload,
            provider=self.name,
            model=model,
        )

    def _parse_embedding(self, payload: Any, model: str) -> Response:
        data = payload.get("data") if isinstance(payload, dict) else None
        first = data[0] if data and isinstance(data[0], dict) else {}
        vector = first.get("embedding")
        if vector is None:
            self._raise_unparsed(payload, "embedding")

        return Response.succeeded(
            list(vector),
            token_usage=normalize_token_usage(payload.get("usage"), include_completion=False),
            raw_response=payload,
            provider=self.name,
            model=model,
        )
