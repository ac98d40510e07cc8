#!/usr/bin/env python3
"""
synapse-ai - CLI para probar proveedores desde la terminal.

Comandos:
- chat: Conversacion de un turno (con system prompt opcional)
- generate: Generacion de texto a partir de un prompt
- embed: Vector de embedding de un texto
- check: Verifica API keys y proveedor configurado

Uso:
    python -m src.cli.synapse chat "Hola, quien eres?" --provider google_gemini
    python -m src.cli.synapse generate "Resume esto" --model text-davinci-003 --max-tokens 50
    python -m src.cli.synapse embed "texto" --compact
    python -m src.cli.synapse check
"""

import argparse
import json
import sys

from src import synapse_ai
from src.synapse_ai._config import API_KEY_ENV, Provider


def print_json(data, pretty: bool = True):
    """Imprime datos como JSON."""
    indent = 2 if pretty else None
    print(json.dumps(data, ensure_ascii=False, indent=indent, default=str))


def _call_options(args) -> dict:
    options = {}
    if args.provider:
        options["provider"] = args.provider
    if args.model:
        options["model"] = args.model
    if getattr(args, "max_tokens", None) is not None:
        options["max_tokens"] = args.max_tokens
    return options


def _emit(response, args) -> int:
    print_json(response.to_dict(include_raw=args.raw), not args.compact)
    return 0 if response.is_success() else 1


def cmd_chat(args) -> int:
    """Conversacion de un turno."""
    messages = []
    if args.system:
        messages.append({"role": "system", "content": args.system})
    messages.append({"role": "user", "content": args.message})
    return _emit(synapse_ai.chat(messages, **_call_options(args)), args)


def cmd_generate(args) -> int:
    return _emit(synapse_ai.generate_text(args.prompt, **_call_options(args)), args)


def cmd_embed(args) -> int:
    response = synapse_ai.embed(args.text, **_call_options(args))
    if response.is_success() and not args.full:
        vector = response.content
        response_dict = response.to_dict(include_raw=args.raw)
        response_dict["content"] = vector[:8]
        response_dict["dimensions"] = len(vector)
        print_json(response_dict, not args.compact)
        return 0
    return _emit(response, args)


def cmd_check(args) -> int:
    """Verifica API keys y proveedor (sustituye al antiguo setup de entorno)."""
    config = synapse_ai.get_configuration()
    keys = {
        provider.value: {
            "env": API_KEY_ENV[provider],
            "configured": bool((config.api_key_for(provider) or "").strip()),
        }
        for provider in Provider
    }
    warnings = config.missing_credentials()
    print_json(
        {
            "provider": config.provider_name,
            "default_timeout": config.default_timeout,
            "log_level": config.log_level,
            "api_keys": keys,
            "warnings": warnings,
        },
        not args.compact,
    )
    return 0 if not warnings else 1


def _add_output_arguments(parser):
    # SUPPRESS: sin el flag no pisa el --compact global
    parser.add_argument(
        "--compact", "-c",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Output JSON compacto",
    )


def _add_call_arguments(parser, with_max_tokens: bool = True):
    _add_output_arguments(parser)
    parser.add_argument("--provider", "-p", help="Proveedor para esta llamada (openai, google_gemini)")
    parser.add_argument("--model", "-m", help="Modelo a usar")
    if with_max_tokens:
        parser.add_argument("--max-tokens", type=int, dest="max_tokens", help="Limite de tokens de salida")
    parser.add_argument("--raw", action="store_true", help="Incluir el payload crudo del proveedor")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="synapse-ai",
        description="SynapseAI - chat, generacion y embeddings con OpenAI o Gemini",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Ejemplos:
  synapse-ai chat "Hola" --system "Responde en una frase"
  synapse-ai generate "Erase una vez" --model text-davinci-003
  synapse-ai embed "texto" --provider google_gemini
  synapse-ai check

Output: Todos los comandos producen JSON. Exit code 1 si la respuesta falla.
""",
    )

    # Flags globales
    parser.add_argument("--compact", "-c", action="store_true", help="Output JSON compacto")
    parser.add_argument("--log-level", dest="log_level", help="Nivel de log (debug, info, warning, error)")

    subparsers = parser.add_subparsers(dest="command", title="Comandos disponibles", metavar="COMANDO")

    chat_parser = subparsers.add_parser("chat", help="Conversacion de un turno")
    chat_parser.add_argument("message", help="Mensaje del usuario")
    chat_parser.add_argument("--system", "-s", help="System prompt")
    _add_call_arguments(chat_parser)
    chat_parser.set_defaults(func=cmd_chat)

    generate_parser = subparsers.add_parser("generate", help="Generar texto a partir de un prompt")
    generate_parser.add_argument("prompt", help="Prompt")
    _add_call_arguments(generate_parser)
    generate_parser.set_defaults(func=cmd_generate)

    embed_parser = subparsers.add_parser("embed", help="Embedding de un texto")
    embed_parser.add_argument("text", help="Texto a vectorizar")
    embed_parser.add_argument("--full", action="store_true", help="Mostrar el vector completo")
    _add_call_arguments(embed_parser, with_max_tokens=False)
    embed_parser.set_defaults(func=cmd_embed)

    check_parser = subparsers.add_parser("check", help="Verificar API keys y proveedor")
    _add_output_arguments(check_parser)
    check_parser.set_defaults(func=cmd_check)

    return parser


def main(argv=None) -> int:
    """Punto de entrada principal."""
    synapse_ai.load_env()

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        if args.log_level:
            synapse_ai.configure(log_level=args.log_level)
        return args.func(args)
    except synapse_ai.SynapseAIError as e:
        print_json({"error": str(e), "command": args.command})
        return 1


if __name__ == "__main__":
    sys.exit(main())
