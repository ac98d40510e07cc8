"""
Logging Estructurado para SynapseAI.

Implementa logging con structlog para:
- Tracing de llamadas a proveedores
- Latencias y consumo de tokens por llamada
- Correlacion de logs entre fachada y adaptadores

Uso:
    from src.utils.logging_config import get_logger, trace_context

    logger = get_logger(__name__)

    with trace_context(operation="chat", provider="openai"):
        logger.info("provider_resolved", model="gpt-4")
"""

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog


# =============================================================================
# Configuración de Logging
# =============================================================================

@dataclass
class LogConfig:
    """Configuración del sistema de logging."""
    level: str = "INFO"
    format: str = "console"  # "json" o "console"


LOG_FORMATS = ("console", "json")


# Contexto de tracing por llamada (aislado entre hilos)
_trace_context: ContextVar[Dict[str, Any]] = ContextVar("synapse_ai_trace", default={})

_configured = False
_log_format = "console"
_json_renderer = structlog.processors.JSONRenderer()


def get_trace_context() -> Dict[str, Any]:
    """Obtiene el contexto de tracing actual."""
    return dict(_trace_context.get())


@contextmanager
def trace_context(**kwargs):
    """
    Context manager para establecer contexto de tracing.

    Ejemplo:
        with trace_context(operation="embed"):
            # Todos los logs dentro tendrán operation y trace_id
            logger.info("processing")
    """
    current = _trace_context.get()

    # Generar trace_id si no existe
    if "trace_id" not in current and "trace_id" not in kwargs:
        kwargs["trace_id"] = str(uuid.uuid4())[:8]

    token = _trace_context.set({**current, **kwargs})
    try:
        yield _trace_context.get()
    finally:
        _trace_context.reset(token)


# =============================================================================
# Processors para structlog
# =============================================================================

def add_trace_context(logger, method_name, event_dict):
    """Añade contexto de tracing a cada log."""
    for key, value in _trace_context.get().items():
        if key not in event_dict:
            event_dict[key] = value
    return event_dict


def add_timestamp(logger, method_name, event_dict):
    """Añade timestamp ISO 8601."""
    event_dict["timestamp"] = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return event_dict


def format_for_humans(logger, method_name, event_dict):
    """Formatea logs para lectura humana en consola."""
    timestamp = event_dict.pop("timestamp", "")
    event = event_dict.pop("event", "")
    level = event_dict.pop("level", "INFO")
    trace_id = event_dict.pop("trace_id", "")
    logger_name = event_dict.pop("logger", "")

    colors = {
        "debug": "\033[36m",    # Cyan
        "info": "\033[32m",     # Green
        "warning": "\033[33m",  # Yellow
        "error": "\033[31m",    # Red
        "critical": "\033[35m", # Magenta
    }
    reset = "\033[0m"
    color = colors.get(level.lower(), "")

    extras = " ".join(f"{k}={v}" for k, v in event_dict.items())

    trace_str = f"[{trace_id}] " if trace_id else ""
    name_str = f"{logger_name}: " if logger_name else ""
    extras_str = f" | {extras}" if extras else ""

    return f"{timestamp[:19]} {color}{level.upper():8}{reset} {trace_str}{name_str}{event}{extras_str}"


# =============================================================================
# Configuración de structlog
# =============================================================================

def render(logger, method_name, event_dict) -> str:
    """Renderer final: JSON o formato legible segun el formato activo."""
    if _log_format == "json":
        return _json_renderer(logger, method_name, event_dict)
    return format_for_humans(logger, method_name, event_dict)


def _resolve_level(level: str) -> int:
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Nivel de log no valido: {level}")
    return value


def validate_log_config(config: LogConfig) -> int:
    """
    Comprueba nivel y formato sin tocar el estado del logging.

    Returns:
        Nivel numerico de logging.

    Raises:
        ValueError: Si el nivel o el formato no son validos.
    """
    if config.format not in LOG_FORMATS:
        raise ValueError(f"Formato de log no valido: {config.format}")
    return _resolve_level(config.level)


def configure_logging(config: Optional[LogConfig] = None):
    """
    Configura el sistema de logging estructurado.

    Puede llamarse varias veces: la primera instala los processors y el
    handler; las siguientes ajustan nivel y formato.

    Args:
        config: Configuración de logging (usa defaults si None)
    """
    global _configured, _log_format

    if config is None:
        config = LogConfig()

    level = validate_log_config(config)

    if not _configured:
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                add_trace_context,
                add_timestamp,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.UnicodeDecoder(),
                render,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            level=level,
            format="%(message)s",
            stream=sys.stderr,
        )

        _configured = True

    _log_format = config.format
    logging.getLogger().setLevel(level)


def get_logger(name: str = None):
    """
    Obtiene un logger estructurado.

    Args:
        name: Nombre del módulo (usa __name__ normalmente)

    Returns:
        Logger configurado
    """
    return structlog.get_logger(name)
