"""Command-line interface for termbbs.

Provides the main entry point for running the board server and for
checking the snapshot files offline.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="termbbs",
        description="Line-oriented multi-user bulletin board",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/termbbs.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the board server")
    serve_parser.add_argument("--host", type=str, default=None, help="Override server.hostname")
    serve_parser.add_argument("--port", type=int, default=None, help="Override server.port")

    subparsers.add_parser("check-store", help="Load the users/messages files and report counts")

    return parser.parse_args(argv)


async def _serve(settings) -> None:
    """Load the store and run the server until cancelled."""
    from termbbs.auth.bcrypt_backend import BcryptHasher
    from termbbs.server.listener import BoardServer
    from termbbs.store.persistence import PersistentStore
    from termbbs.store.state import SharedState

    store = PersistentStore(settings.store.users_file, settings.store.messages_file)
    state = SharedState.load(store)
    hasher = BcryptHasher(rounds=settings.security.bcrypt_rounds)

    server = BoardServer(settings, state, hasher)
    await server.start()
    try:
        await server.serve_forever()
    finally:
        await server.stop()


def _check_store(settings) -> int:
    """Load both snapshots and print what was found."""
    from termbbs.errors import StoreLoadError
    from termbbs.store.persistence import PersistentStore

    store = PersistentStore(settings.store.users_file, settings.store.messages_file)
    try:
        users = store.load_users()
        messages = store.load_messages()
    except StoreLoadError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"Users:    {len(users)} ({store.users_path})")
    print(f"Messages: {len(messages)} ({store.messages_path})")
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the termbbs CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from termbbs.config.settings import load_settings
    from termbbs.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "serve":
        if args.host:
            settings.server.hostname = args.host
        if args.port:
            settings.server.port = args.port
        logger.info("Starting board server on %s:%d", settings.server.hostname, settings.server.port)
        from termbbs.errors import StoreLoadError
        try:
            asyncio.run(_serve(settings))
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
        except StoreLoadError as e:
            logger.error("Cannot start: %s", e)
            sys.exit(1)

    elif args.command == "check-store":
        sys.exit(_check_store(settings))


if __name__ == "__main__":
    main()
