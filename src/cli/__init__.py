"""
Módulo CLI - Interfaz de línea de comandos.

Comandos principales:
- synapse: chat, generate, embed y check contra el proveedor configurado
"""

from .synapse import main as synapse_main

__all__ = ["synapse_main"]
