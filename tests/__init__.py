# tests/__init__.py
"""
SynapseAI Test Suite.

Estructura de tests:
- test_response.py: Response y jerarquia de excepciones
- test_config.py: Configuracion y acceso global
- test_base_adapter.py: Contrato comun y conversion de errores
- test_openai_adapter.py / test_gemini_adapter.py: Adaptadores con clientes mock
- test_synapse_ai.py: Resolucion de proveedor y fachada (+ integracion)
- test_cli.py: Comandos del CLI
- conftest.py: Fixtures compartidos

Ejecutar todos los tests (sin integracion):
    pytest tests/ -v

Tests de integracion (requieren API keys reales):
    pytest tests/ -v -m integration
"""
