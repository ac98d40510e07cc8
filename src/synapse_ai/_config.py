"""
Configuracion de synapse_ai.

Lee proveedor, API keys, nivel y formato de log y timeout del entorno y mantiene una
unica instancia por proceso. Se modifica solo durante el setup explicito
(configure) y se lee despues.
"""

import os
import threading
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

from src.utils.logging_config import (
    LogConfig,
    configure_logging,
    get_logger,
    validate_log_config,
)

from .exceptions import ConfigurationError

logger = get_logger(__name__)


class Provider(Enum):
    OPENAI = "openai"
    GOOGLE_GEMINI = "google_gemini"

    @classmethod
    def parse(cls, name: "str | Provider") -> "Provider":
        """Convierte un nombre (sin distinguir mayusculas) en Provider."""
        if isinstance(name, cls):
            return name
        raw = str(name).lower().strip()
        try:
            return cls(raw)
        except ValueError:
            raise ConfigurationError(f"Unsupported AI provider: {name}") from None


DEFAULT_PROVIDER = Provider.OPENAI.value
DEFAULT_LOG_LEVEL = "info"
DEFAULT_LOG_FORMAT = "console"
DEFAULT_TIMEOUT = 60

# Variable de entorno con la API key de cada proveedor
API_KEY_ENV = {
    Provider.OPENAI: "OPENAI_API_KEY",
    Provider.GOOGLE_GEMINI: "GOOGLE_GEMINI_API_KEY",
}


def _timeout_from_env() -> int:
    raw = os.getenv("SYNAPSE_AI_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value <= 0:
        logger.warning("invalid_timeout_ignored", value=raw, default=DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    return value


@dataclass
class Configuration:
    """
    Configuracion de proveedores.

    Attributes:
        provider: Proveedor por defecto ("openai" o "google_gemini").
        openai_api_key: API key de OpenAI (default: OPENAI_API_KEY).
        google_gemini_api_key: API key de Gemini (default: GOOGLE_GEMINI_API_KEY).
        log_level: Nivel de log ("debug", "info", "warning", "error").
        log_format: Formato de los logs ("console" o "json").
        default_timeout: Timeout de las llamadas HTTP en segundos.
    """

    provider: "str | Provider" = field(
        default_factory=lambda: os.getenv("SYNAPSE_AI_PROVIDER", DEFAULT_PROVIDER)
    )
    openai_api_key: str | None = field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))
    google_gemini_api_key: str | None = field(
        default_factory=lambda: os.getenv("GOOGLE_GEMINI_API_KEY")
    )
    log_level: str = field(
        default_factory=lambda: os.getenv("SYNAPSE_AI_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    )
    log_format: str = field(
        default_factory=lambda: os.getenv("SYNAPSE_AI_LOG_FORMAT", DEFAULT_LOG_FORMAT)
    )
    default_timeout: int = field(default_factory=_timeout_from_env)

    @property
    def provider_name(self) -> str:
        if isinstance(self.provider, Provider):
            return self.provider.value
        return str(self.provider)

    def api_key_for(self, provider: "str | Provider") -> str | None:
        """Devuelve la API key configurada para el proveedor."""
        provider = Provider.parse(provider)
        if provider is Provider.OPENAI:
            return self.openai_api_key
        return self.google_gemini_api_key

    def missing_credentials(self) -> list[str]:
        """Avisos para el proveedor seleccionado si no tiene API key."""
        try:
            provider = Provider.parse(self.provider)
        except ConfigurationError as e:
            return [str(e)]
        key = self.api_key_for(provider)
        if key is None or not key.strip():
            return [
                f"{provider.value} provider is selected, but {API_KEY_ENV[provider]} "
                "is not configured."
            ]
        return []


_configuration: Configuration | None = None
_lock = threading.Lock()


def _log_config(config: Configuration) -> LogConfig:
    return LogConfig(level=config.log_level, format=config.log_format)


def _apply_log_level(config: Configuration) -> None:
    try:
        configure_logging(_log_config(config))
    except ValueError as e:
        raise ConfigurationError(str(e)) from e


def get_configuration() -> Configuration:
    """Devuelve la configuracion del proceso, creandola en el primer acceso."""
    global _configuration

    if _configuration is None:
        with _lock:
            if _configuration is None:
                config = Configuration()
                _apply_log_level(config)
                _configuration = config
    return _configuration


def configure(**settings) -> Configuration:
    """
    Paso de setup explicito.

    Ejemplo:
        configure(provider="google_gemini", google_gemini_api_key="...", log_level="debug")

    Raises:
        ConfigurationError: Si algun ajuste no existe o el nivel o formato de log
            no es valido. En ese caso la configuracion no cambia.
    """
    valid = {f.name for f in fields(Configuration)}
    unknown = sorted(set(settings) - valid)
    if unknown:
        raise ConfigurationError(f"Unknown configuration settings: {', '.join(unknown)}")

    config = get_configuration()
    # Se valida sobre una copia: un ajuste invalido no deja rastro
    try:
        validate_log_config(_log_config(replace(config, **settings)))
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    with _lock:
        for name, value in settings.items():
            setattr(config, name, value)
    _apply_log_level(config)

    for warning in config.missing_credentials():
        logger.warning("credentials_missing", detail=warning)

    return config


def reset_configuration() -> None:
    """Descarta la configuracion actual (uso en tests)."""
    global _configuration

    with _lock:
        _configuration = None


def load_env(path: Path | None = None) -> bool:
    """Carga variables de un archivo .env (default: ./.env). True si existia."""
    env_path = path or Path.cwd() / ".env"
    if not env_path.exists():
        return False
    return load_dotenv(env_path)
