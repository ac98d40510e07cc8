"""
Adaptador para la API de Google Gemini (SDK google-genai).

El SDK recibe el modelo en cada llamada, por lo que chat y embed comparten un
unico cliente aunque usen modelos distintos.
"""

from typing import Any, Mapping

from google import genai
from google.genai import errors, types

from src.utils.logging_config import get_logger

from .._config import get_configuration
from .._types import ErrorType, Response
from ..exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    MalformedResponseError,
    VendorError,
)
from .base import ProviderAdapter, normalize_token_usage, vendor_error_message

logger = get_logger(__name__)

DEFAULT_CHAT_MODEL = "gemini-2.0-flash"
DEFAULT_EMBEDDING_MODEL = "text-embedding-004"
DEFAULT_TEMPERATURE = 0.7

# Gemini solo conoce los roles "user" y "model"
_ROLE_MAP = {"assistant": "model", "model": "model", "user": "user"}


def _get(data: Any, *keys: str) -> Any:
    """Primer valor presente entre varias claves (camelCase del REST o snake_case del SDK)."""
    if not isinstance(data, Mapping):
        return None
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _as_payload(raw: Any) -> Any:
    if isinstance(raw, Mapping):
        return raw
    if hasattr(raw, "model_dump"):
        return raw.model_dump(mode="json", by_alias=True, exclude_none=True)
    return raw


def _text_parts(parts: Any) -> list[dict[str, str]]:
    result = []
    for part in parts or []:
        text = part.get("text") if isinstance(part, Mapping) else part
        result.append({"text": "" if text is None else str(text)})
    return result


def to_gemini_contents(messages: list[dict]) -> tuple[list[dict], str | None]:
    """
    Traduce mensajes uniformes al formato de Gemini.

    Acepta {role, parts: [{text}]} y tambien {role, content}. Los mensajes
    "system" se separan como system_instruction.

    Returns:
        (contents, system_instruction)
    """
    contents = []
    system_parts = []

    for msg in messages:
        role = msg.get("role", "user")
        parts = msg.get("parts")
        if parts is None:
            parts = [{"text": msg.get("content", "")}]
        parts = _text_parts(parts)

        if role == "system":
            system_parts.extend(p["text"] for p in parts)
            continue

        contents.append({"role": _ROLE_MAP.get(role, role), "parts": parts})

    system_instruction = "\n".join(system_parts) if system_parts else None
    return contents, system_instruction


class GoogleGeminiAdapter(ProviderAdapter):
    """
    Adaptador para Google Gemini.

    Uso:
        adapter = GoogleGeminiAdapter(api_key="...")
        response = adapter.chat([{"role": "user", "parts": [{"text": "Hola"}]}])
    """

    name = "google_gemini"
    label = "Google Gemini"
    _vendor_errors = (errors.APIError,)

    def __init__(self, api_key: str | None = None, timeout: float | None = None, client: Any = None):
        """
        Args:
            api_key: API key; si None se usa la de la configuracion global.
            timeout: Timeout HTTP en segundos; si None se usa default_timeout.
            client: Cliente ya construido (tests).

        Raises:
            InvalidArgumentError: Si no hay API key.
            ConfigurationError: Si el SDK no puede crear el cliente.
        """
        if api_key is None or timeout is None:
            config = get_configuration()
            api_key = api_key if api_key is not None else config.google_gemini_api_key
            timeout = timeout if timeout is not None else config.default_timeout

        if api_key is None or not api_key.strip():
            raise InvalidArgumentError("Google Gemini API key is required.")

        self.api_key = api_key

        if client is not None:
            self.client = client
            return

        try:
            self.client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=int(timeout * 1000)),
            )
        except Exception as e:
            raise ConfigurationError(
                f"Failed to initialize Google Gemini client: {e}"
            ) from e

        logger.debug("adapter_initialized", provider=self.name, timeout=timeout)

    def build_chat_request(
        self,
        messages: list[dict],
        model: str = DEFAULT_CHAT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        **options,
    ) -> dict[str, Any]:
        """Argumentos de generate_content para una conversacion."""
        contents, system_instruction = to_gemini_contents(messages)

        config: dict[str, Any] = {"temperature": temperature}
        if system_instruction:
            config["system_instruction"] = system_instruction
        if "max_tokens" in options:
            config["max_output_tokens"] = options.pop("max_tokens")
        config.update(options)

        return {"model": model, "contents": contents, "config": config}

    def chat(
        self,
        messages: list[dict],
        model: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
        **options,
    ) -> Response:
        """
        Conversacion con Gemini.

        Args:
            messages: [{"role": "user", "parts": [{"text": "Hola"}]}, ...]
            model: Modelo de Gemini.
            temperature: Temperatura de muestreo.
            **options: Campos extra de GenerateContentConfig (max_output_tokens, top_p...).
        """
        model = model or DEFAULT_CHAT_MODEL

        def call() -> Response:
            request = self.build_chat_request(messages, model, temperature, **options)
            payload = _as_payload(self.client.models.generate_content(**request))
            return self._parse_generation(payload, model)

        return self._guarded("chat", model, call)

    def generate_text(
        self,
        prompt: str,
        model: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
        **options,
    ) -> Response:
        return self.chat(
            [{"role": "user", "parts": [{"text": prompt}]}],
            model=model,
            temperature=temperature,
            **options,
        )

    def embed(self, text: str, model: str | None = None, **options) -> Response:
        """Embedding del texto. Gemini no informa uso de tokens aqui: token_usage es None."""
        model = model or DEFAULT_EMBEDDING_MODEL

        def call() -> Response:
            raw = self.client.models.embed_content(
                model=model,
                contents={"parts": [{"text": text}]},
                config=options or None,
            )
            return self._parse_embedding(_as_payload(raw), model)

        return self._guarded("embed", model, call)

    def _vendor_error_response(self, error: BaseException, model: str | None) -> Response:
        code = getattr(error, "code", None)
        message = getattr(error, "message", None) or str(error)
        prefix = f"{self.label} API error ({code})" if code else f"{self.label} API error"
        return Response.failed(
            f"{prefix}: {message}",
            error_type=ErrorType.VENDOR,
            raw_response=getattr(error, "details", None),
            provider=self.name,
            model=model,
        )

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def _raise_unparsed(self, payload: Any, what: str) -> None:
        message = vendor_error_message(payload)
        if message is not None:
            raise VendorError(message, raw_response=payload)

        feedback = _get(payload, "promptFeedback", "prompt_feedback")
        block_reason = _get(feedback, "blockReason", "block_reason")
        if block_reason:
            raise VendorError(f"Prompt blocked: {block_reason}", raw_response=payload)

        raise MalformedResponseError(
            f"Malformed Google Gemini response: no {what} and no error object in {payload!r}",
            raw_response=payload,
        )

    def _parse_generation(self, payload: Any, model: str) -> Response:
        candidates = _get(payload, "candidates")
        if not candidates:
            self._raise_unparsed(payload, "candidates")

        first = candidates[0]
        parts = _get(_get(first, "content"), "parts")
        texts = [p.get("text") for p in parts or [] if isinstance(p, Mapping) and p.get("text")]

        if not texts:
            finish_reason = _get(first, "finishReason", "finish_reason")
            if finish_reason and finish_reason != "STOP":
                raise VendorError(
                    f"Candidate finished without content: {finish_reason}",
                    raw_response=payload,
                )

        usage = _get(payload, "usageMetadata", "usage_metadata")

        return Response.succeeded(
            "".join(texts),
            token_usage=normalize_token_usage(usage),
            raw_response=payload,
            provider=self.name,
            model=model,
        )

    def _parse_embedding(self, payload: Any, model: str) -> Response:
        vector = None

        embeddings = _get(payload, "embeddings")
        if embeddings:
            vector = _get(embeddings[0], "values")
        else:
            vector = _get(_get(payload, "embedding"), "values")

        if vector is None:
            self._raise_unparsed(payload, "embedding values")

        return Response.succeeded(
            list(vector),
            token_usage=None,
            raw_response=payload,
            provider=self.name,
            model=model,
        )
