"""
AnonBBS Entry Point

Usage:
    python -m anonbbs status       # Build the board from config and show its state
    python -m anonbbs config       # Configuration commands
    python -m anonbbs --help       # Show help
"""

import argparse
import json
import sys
import logging
from pathlib import Path
from typing import Optional

from . import __version__


def setup_logging(level: str, log_file: Optional[str] = None):
    """Configure logging for the application."""
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    handlers = [logging.StreamHandler()]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=log_format,
        handlers=handlers
    )


def main():
    """Main entry point for AnonBBS."""
    parser = argparse.ArgumentParser(
        prog="anonbbs",
        description="AnonBBS - Anonymous Message Bulletin"
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"AnonBBS {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=Path("config.toml"),
        help="Path to configuration file (default: config.toml)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: from config, else INFO)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("status", help="Build the board and show its state")

    # Config subcommand
    config_parser = subparsers.add_parser("config", help="Configuration commands")
    config_parser.add_argument("--show", action="store_true", help="Show current config")
    config_parser.add_argument("--init", action="store_true", help="Write default config")
    config_parser.add_argument("--validate", action="store_true", help="Validate config")
    config_parser.add_argument(
        "--set",
        nargs=2,
        metavar=("KEY", "VALUE"),
        help="Set config value"
    )
    config_parser.add_argument("--backup", action="store_true", help="Backup config")

    args = parser.parse_args()

    from .config import load_config
    config = load_config(args.config)

    setup_logging(args.log_level or config.logging.level, config.logging.file or None)
    logger = logging.getLogger("anonbbs")

    if args.command == "config":
        from .cli.config_cmd import run_config
        sys.exit(run_config(args))
    elif args.command == "status":
        from .core.bbs import AnonBBS

        errors = config.validate()
        if errors:
            for err in errors:
                logger.error(f"Config: {err}")
            sys.exit(1)

        bbs = AnonBBS(config)
        print(json.dumps(bbs.get_stats(), indent=2))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
