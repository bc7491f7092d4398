"""Command-line interface for homewatch."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import constants
from .app import HomewatchApp
from .config import ConfigurationError, load_config
from .core import JsonSubscriptionStore

LOGGER = logging.getLogger(__name__)

_SECRET_OPTIONS = {("telegram", "bot_token")}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="homewatch",
        description="Telegram relay for air-conditioner and mains power status",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=constants.DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {constants.DEFAULT_CONFIG_PATH})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("start", help="Start the homewatch service")
    subparsers.add_parser(
        "show-config", help="Print the resolved configuration and exit"
    )
    subparsers.add_parser("subscribers", help="Print subscribed chat ids and exit")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)

    if args.command == "start":
        try:
            HomewatchApp.start(config)
        except ConfigurationError as exc:
            LOGGER.error("Cannot start: %s", exc)
            return 1
        return 0

    if args.command == "show-config":
        print(f"Configuration loaded from {config.path!s}\n")
        for section in config.raw.sections():
            print(f"[{section}]")
            for key, value in config.raw[section].items():
                if (section, key) in _SECRET_OPTIONS and value:
                    value = "***"
                print(f"{key} = {value}")
            print()
        return 0

    if args.command == "subscribers":
        for chat_id in JsonSubscriptionStore(config.storage.path).load():
            print(chat_id)
        return 0

    LOGGER.error("Unknown command: %s", args.command)
    return 1


if __name__ == "__main__":
    sys.exit(main())
