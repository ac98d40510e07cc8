"""
Excepciones para synapse_ai.

Jerarquia:
    SynapseAIError
    ├── ConfigurationError     - Proveedor no soportado o credencial ausente al resolver
    ├── InvalidArgumentError   - Adaptador construido sin API key utilizable
    ├── VendorError            - La API del proveedor devolvio un error estructurado
    └── MalformedResponseError - Respuesta sin forma de exito ni de error reconocible

Ninguna de estas excepciones cruza la fachada (chat/generate_text/embed):
se convierten en un Response con success=False.
"""

from typing import Any

from ._types import ErrorType


class SynapseAIError(Exception):
    """Error base para synapse_ai."""

    error_type = ErrorType.CLIENT


class ConfigurationError(SynapseAIError):
    """Proveedor no soportado o credenciales invalidas al resolver el adaptador."""

    error_type = ErrorType.CONFIGURATION


class InvalidArgumentError(SynapseAIError, ValueError):
    """Se construyo un adaptador sin una API key utilizable."""

    error_type = ErrorType.INVALID_ARGUMENT


class VendorError(SynapseAIError):
    """La API del proveedor respondio con un cuerpo de error."""

    error_type = ErrorType.VENDOR

    def __init__(self, message: str, raw_response: Any = None):
        super().__init__(message)
        self.raw_response = raw_response


class MalformedResponseError(SynapseAIError):
    """El payload no tiene forma de exito ni de error."""

    error_type = ErrorType.MALFORMED_RESPONSE

    def __init__(self, message: str, raw_response: Any = None):
        super().__init__(message)
        self.raw_response = raw_response
