"""
Resolucion del adaptador de proveedor.

Cada entrada de la tabla de dispatch construye el adaptador a partir de la
configuracion.
"""

from typing import Callable

from src.utils.logging_config import get_logger

from ._config import Configuration, Provider, get_configuration
from .exceptions import ConfigurationError, InvalidArgumentError
from .providers import GoogleGeminiAdapter, OpenAIAdapter, ProviderAdapter

logger = get_logger(__name__)


def _build_openai(config: Configuration) -> ProviderAdapter:
    """Backend: OpenAI API."""
    return OpenAIAdapter(api_key=config.openai_api_key, timeout=config.default_timeout)


def _build_google_gemini(config: Configuration) -> ProviderAdapter:
    """Backend: Google Gemini API."""
    return GoogleGeminiAdapter(
        api_key=config.google_gemini_api_key or "",
        timeout=config.default_timeout,
    )


# Dispatch table
_DISPATCH: dict[Provider, Callable[[Configuration], ProviderAdapter]] = {
    Provider.OPENAI: _build_openai,
    Provider.GOOGLE_GEMINI: _build_google_gemini,
}


def resolve_provider(
    requested: "str | Provider | None" = None,
    config: Configuration | None = None,
) -> ProviderAdapter:
    """
    Devuelve el adaptador para el proveedor pedido o el configurado.

    Args:
        requested: Proveedor explicito para esta llamada (opcional).
        config: Configuracion a usar (default: la del proceso).

    Raises:
        ConfigurationError: Proveedor no soportado o sin credenciales validas.
    """
    config = config or get_configuration()
    name = requested if requested is not None else config.provider

    provider = Provider.parse(name)
    build = _DISPATCH.get(provider)
    if build is None:
        raise ConfigurationError(f"Unsupported AI provider: {name}")

    try:
        adapter = build(config)
    except InvalidArgumentError as e:
        raise ConfigurationError(str(e)) from e

    logger.debug("provider_resolved", provider=provider.value, explicit=requested is not None)
    return adapter
