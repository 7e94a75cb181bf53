"""Client configuration CLI commands."""

import json
from dataclasses import asdict
from pathlib import Path

from src.upload.config import load_config, update_config


def cmd_config_show(args):
    """Print the effective configuration."""
    config = load_config(Path(args.config) if args.config else None)
    print(json.dumps(asdict(config), indent=2))
    return 0


def cmd_config_set(args):
    """Persist one configuration value."""
    try:
        config = update_config(args.key, args.value, Path(args.config) if args.config else None)
    except KeyError:
        print(f"Unknown config key: {args.key}")
        return 1
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    print(f"Set {args.key} = {getattr(config, args.key)}")
    return 0


def setup_config_commands(subparsers):
    """Setup config subcommands."""
    config_parser = subparsers.add_parser("config", help="Show or change client configuration")
    config_parser.add_argument("--config", help="Path to client config JSON")
    config_subparsers = config_parser.add_subparsers(dest="config_command")

    show_parser = config_subparsers.add_parser("show", help="Show effective configuration")
    show_parser.set_defaults(func=cmd_config_show)

    set_parser = config_subparsers.add_parser("set", help="Set a configuration value")
    set_parser.add_argument("key", help="Configuration key (base_url, upload_path, timeout, idempotency_header)")
    set_parser.add_argument("value", help="New value")
    set_parser.set_defaults(func=cmd_config_set)
