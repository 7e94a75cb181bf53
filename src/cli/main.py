"""Main CLI entry point for the PhotoBlast upload client."""

import argparse
import logging
import sys

from .commands.settings import setup_config_commands
from .commands.upload import setup_upload_commands


def cmd_ui(args):
    """Launch the desktop upload window."""
    from src.ui.app import main as run_app

    return run_app()


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="photoblast", description="PhotoBlast - upload images for server-side processing"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Setup command groups
    setup_upload_commands(subparsers)
    setup_config_commands(subparsers)

    ui_parser = subparsers.add_parser("ui", help="Open the desktop upload window")
    ui_parser.set_defaults(func=cmd_ui)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    # Execute command
    if hasattr(args, "func"):
        return args.func(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
