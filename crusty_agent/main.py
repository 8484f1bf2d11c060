"""
Crusty Agent - Main Entry Point.

Loads configuration, opens the credential store and hands control to the
CLI menu or to daemon mode.
"""

import argparse
import logging
import sys
from pathlib import Path

from .cli import CrustyCLI
from .context import build_context
from .core.config import Config, get_default_config_path
from .core.errors import PersistenceError
from .core.logging_setup import setup_logging
from .server.lifecycle import ServerLifecycle
from .web.api import create_app


logger = logging.getLogger(__name__)

COMMANDS = ("daemon", "start", "stop", "status")


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Crusty Agent - host status server with access-token gate"
    )

    parser.add_argument(
        "command",
        nargs="?",
        choices=COMMANDS,
        help="Run headless: daemon/start serve until interrupted, status shows configuration"
    )

    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to configuration file (YAML)"
    )

    parser.add_argument(
        "-p", "--port",
        type=int,
        default=None,
        help="HTTP port to listen on (default: 3000)"
    )

    parser.add_argument(
        "--daemon",
        action="store_true",
        help="Start the server and run until interrupted"
    )

    parser.add_argument(
        "--cli",
        action="store_true",
        help="Use the interactive command-line menu (default)"
    )

    parser.add_argument(
        "--no-gui",
        action="store_true",
        help="Alias for --cli"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument(
        "--generate-config",
        action="store_true",
        help="Generate a sample configuration file"
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point. Returns the process exit code."""
    args = parse_args(argv)

    # Generate sample config if requested
    if args.generate_config:
        config = Config()
        config_path = "config/crusty.yaml"
        Path("config").mkdir(exist_ok=True)
        config.to_yaml(config_path)
        print(f"Generated sample configuration: {config_path}")
        return 0

    config_path = args.config or get_default_config_path()
    config = Config.from_yaml(config_path)
    if args.port is not None:
        config.server.port = args.port

    setup_logging(config.logging, verbose=args.verbose)
    logger.info(f"Loading configuration from {config_path}")

    try:
        context = build_context(config)
    except PersistenceError as e:
        logger.error(f"Cannot open credential store: {e}")
        return 1

    try:
        lifecycle = ServerLifecycle(
            lambda: create_app(context),
            host=config.server.host,
            port=config.server.port,
        )
    except ValueError as e:
        logger.error(f"Bad server port in configuration: {e}")
        return 1
    cli = CrustyCLI(context, lifecycle)

    if args.daemon or args.command in ("daemon", "start"):
        if not context.store.has_users():
            logger.error("No users registered. Run without arguments to complete setup first.")
            return 1
        cli.run_daemon()
    elif args.command == "status":
        cli.show_status()
        cli.view_config()
    elif args.command == "stop":
        print("No server is running in this process.")
    else:
        try:
            cli.run()
        except PersistenceError:
            return 1

    return 0


def run():
    """Entry point for the application."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nShutdown complete")


if __name__ == "__main__":
    run()
