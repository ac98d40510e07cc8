"""
Tipos para el adaptador multi-proveedor.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class ResponseStatus(Enum):
    SUCCESS = "success"
    ERROR = "error"
    PARTIAL_SUCCESS = "partial_success"


class ErrorType(Enum):
    """Categoria de un fallo, para que el llamador decida si reintentar o cambiar de proveedor."""

    CONFIGURATION = "configuration"
    INVALID_ARGUMENT = "invalid_argument"
    VENDOR = "vendor"
    MALFORMED_RESPONSE = "malformed_response"
    CLIENT = "client"
    NOT_IMPLEMENTED = "not_implemented"


TOKEN_USAGE_KEYS = ("prompt_tokens", "completion_tokens", "total_tokens")


@dataclass(frozen=True)
class Response:
    """
    Respuesta unificada de cualquier proveedor.

    Attributes:
        success: True si la llamada produjo contenido.
        content: Texto generado o vector de embedding.
        error_message: Mensaje de error (solo si success es False).
        token_usage: {prompt_tokens, completion_tokens, total_tokens}, cada uno int o None.
            Se guarda una copia de solo lectura.
        raw_response: Payload original del proveedor, solo para diagnostico.
        error_type: Categoria del fallo (ErrorType) si success es False.
        provider: Nombre del proveedor que respondio.
        model: Modelo usado en la llamada.
        latency_ms: Latencia de la llamada al proveedor en milisegundos.
    """

    success: bool
    content: str | list[float] | None = None
    error_message: str | None = None
    token_usage: Mapping[str, int | None] | None = None
    raw_response: Any = field(default=None, repr=False)
    error_type: ErrorType | None = None
    provider: str | None = None
    model: str | None = None
    latency_ms: float = 0.0

    def __post_init__(self):
        if self.token_usage is not None:
            object.__setattr__(self, "token_usage", MappingProxyType(dict(self.token_usage)))
        if self.success:
            if self.error_message is not None or self.error_type is not None:
                raise ValueError("Una respuesta exitosa no puede llevar error")
        elif not self.error_message:
            raise ValueError("Una respuesta fallida necesita error_message")

    @classmethod
    def succeeded(
        cls,
        content: str | list[float] | None,
        *,
        token_usage: dict[str, int | None] | None = None,
        raw_response: Any = None,
        provider: str | None = None,
        model: str | None = None,
    ) -> "Response":
        return cls(
            success=True,
            content=content,
            token_usage=token_usage,
            raw_response=raw_response,
            provider=provider,
            model=model,
        )

    @classmethod
    def failed(
        cls,
        message: str,
        *,
        error_type: ErrorType = ErrorType.CLIENT,
        raw_response: Any = None,
        provider: str | None = None,
        model: str | None = None,
    ) -> "Response":
        return cls(
            success=False,
            error_message=message,
            error_type=error_type,
            raw_response=raw_response,
            provider=provider,
            model=model,
        )

    def is_success(self) -> bool:
        return self.success

    def is_failure(self) -> bool:
        return not self.success

    @property
    def status(self) -> ResponseStatus:
        return ResponseStatus.SUCCESS if self.success else ResponseStatus.ERROR

    def to_dict(self, include_raw: bool = False) -> dict[str, Any]:
        """Serializa la respuesta a diccionario."""
        data = {
            "success": self.success,
            "status": self.status.value,
            "content": self.content,
            "error_message": self.error_message,
            "error_type": self.error_type.value if self.error_type else None,
            "token_usage": dict(self.token_usage) if self.token_usage is not None else None,
            "provider": self.provider,
            "model": self.model,
            "latency_ms": self.latency_ms,
        }
        if include_raw:
            data["raw_response"] = self.raw_response
        return data
