"""
Contrato comun de los adaptadores de proveedor.

Cada adaptador implementa chat, generate_text y embed, y devuelve siempre un
Response. Ninguna excepcion de la llamada al proveedor escapa del adaptador:
_guarded la convierte en un Response fallido.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, Callable, Mapping

from src.utils.logging_config import get_logger

from .._types import ErrorType, Response
from ..exceptions import MalformedResponseError, VendorError

logger = get_logger(__name__)

# Claves que usa cada proveedor para el mismo contador
_PROMPT_KEYS = ("prompt_tokens", "input_tokens", "promptTokenCount", "prompt_token_count")
_COMPLETION_KEYS = (
    "completion_tokens",
    "output_tokens",
    "candidatesTokenCount",
    "candidates_token_count",
)
_TOTAL_KEYS = ("total_tokens", "totalTokenCount", "total_token_count")


def _first_present(usage: Mapping[str, Any], keys: tuple[str, ...]) -> int | None:
    for key in keys:
        value = usage.get(key)
        if value is not None:
            return value
    return None


def normalize_token_usage(
    usage: Mapping[str, Any] | None, include_completion: bool = True
) -> dict[str, int | None]:
    """
    Re-mapea el bloque de uso del proveedor a la forma canonica.

    Returns:
        {prompt_tokens, completion_tokens, total_tokens}; None donde el
        proveedor no informa el campo o no aplica.
    """
    usage = usage if isinstance(usage, Mapping) else {}
    return {
        "prompt_tokens": _first_present(usage, _PROMPT_KEYS),
        "completion_tokens": (
            _first_present(usage, _COMPLETION_KEYS) if include_completion else None
        ),
        "total_tokens": _first_present(usage, _TOTAL_KEYS),
    }


def as_payload(raw: Any) -> Any:
    """Convierte un objeto pydantic del SDK en dict; deja el resto intacto."""
    if isinstance(raw, Mapping):
        return raw
    if hasattr(raw, "model_dump"):
        return raw.model_dump()
    return raw


def vendor_error_message(payload: Any) -> str | None:
    """Mensaje del objeto 'error' del payload, o None si no lo hay."""
    if not isinstance(payload, Mapping):
        return None
    error = payload.get("error")
    if not error:
        return None
    if isinstance(error, Mapping):
        return str(error.get("message") or error)
    return str(error)


class ProviderAdapter(ABC):
    """
    Interfaz comun: chat, generate_text, embed y generate_image.

    Las subclases definen:
        name: Identificador del proveedor ("openai", "google_gemini").
        label: Nombre legible usado en mensajes de error.
        _vendor_errors: Excepciones del SDK que indican rechazo de la API.
    """

    name: str = "base"
    label: str = "Provider"
    _vendor_errors: tuple[type[BaseException], ...] = ()

    @abstractmethod
    def chat(self, messages: list[dict], **options) -> Response:
        ...

    @abstractmethod
    def generate_text(self, prompt: str, **options) -> Response:
        ...

    @abstractmethod
    def embed(self, text: str, model: str | None = None, **options) -> Response:
        ...

    def generate_image(self, prompt: str, **options) -> Response:
        """Ningun proveedor soporta imagenes todavia."""
        return Response.failed(
            f"{self.label} adapter does not implement generate_image",
            error_type=ErrorType.NOT_IMPLEMENTED,
            provider=self.name,
        )

    def _vendor_error_response(self, error: BaseException, model: str | None) -> Response:
        """Response para una excepcion del SDK. Las subclases extraen el cuerpo."""
        return Response.failed(
            f"{self.label} API error: {error}",
            error_type=ErrorType.VENDOR,
            raw_response=getattr(error, "body", None),
            provider=self.name,
            model=model,
        )

    def _guarded(self, operation: str, model: str | None, call: Callable[[], Response]) -> Response:
        """Ejecuta la llamada al proveedor y convierte cualquier excepcion en Response."""
        start = time.time()

        try:
            response = call()
        except VendorError as e:
            response = Response.failed(
                f"{self.label} API error: {e}",
                error_type=e.error_type,
                raw_response=e.raw_response,
                provider=self.name,
                model=model,
            )
        except MalformedResponseError as e:
            response = Response.failed(
                str(e),
                error_type=e.error_type,
                raw_response=e.raw_response,
                provider=self.name,
                model=model,
            )
        except Exception as e:
            if self._vendor_errors and isinstance(e, self._vendor_errors):
                response = self._vendor_error_response(e, model)
            else:
                response = Response.failed(
                    f"Unexpected error during {self.label} {operation}: {e}",
                    error_type=ErrorType.CLIENT,
                    raw_response=e,
                    provider=self.name,
                    model=model,
                )

        latency = (time.time() - start) * 1000
        response = _with_latency(response, latency)

        if response.success:
            logger.debug(
                "provider_call_completed",
                provider=self.name,
                operation=operation,
                model=model,
                latency_ms=round(latency, 2),
                token_usage=dict(response.token_usage) if response.token_usage else None,
            )
        else:
            logger.warning(
                "provider_call_failed",
                provider=self.name,
                operation=operation,
                model=model,
                error_type=response.error_type.value,
                error=response.error_message,
            )
        return response


def _with_latency(response: Response, latency_ms: float) -> Response:
    return replace(response, latency_ms=latency_ms)
