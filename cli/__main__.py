"""``python -m cli``: chat with a Flybus backend from the terminal."""

import argparse
import asyncio
import os

from .flybus_cli import main

API_KEY_ENV = "FLYBUS_API__API_KEY"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m cli",
        description="Send messages to the Flybus chat API and print the replies.",
    )
    server = parser.add_argument_group("server")
    server.add_argument("--host", default="localhost")
    server.add_argument("--port", type=int, default=8080)
    server.add_argument("--api-path", default="/chat")
    server.add_argument(
        "--api-key",
        default=os.environ.get(API_KEY_ENV, ""),
        help=f"x-api-key header value (default: ${API_KEY_ENV})",
    )

    output = parser.add_argument_group("output")
    output.add_argument(
        "--hide-context",
        action="store_true",
        help="omit the topic/flight line under each reply",
    )
    output.add_argument("--debug", action="store_true", help="log to stderr")
    return parser


def cli_entry() -> None:
    args = build_parser().parse_args()
    try:
        asyncio.run(
            main(
                host=args.host,
                port=args.port,
                api_path=args.api_path,
                api_key=args.api_key,
                debug=args.debug,
                show_context=not args.hide_context,
            )
        )
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    cli_entry()
