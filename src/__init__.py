"""
SynapseAI - Capa de adaptadores para proveedores de IA.

Módulos:
- synapse_ai: Fachada (chat, generate_text, embed), configuración y adaptadores
- utils: Logging estructurado
- cli: Interfaz de línea de comandos
"""

__version__ = "0.1.0"
