"""
AnonBBS Configuration Commands

Non-interactive configuration interface.
"""

import logging
import shutil
from dataclasses import fields, is_dataclass
from datetime import datetime
from pathlib import Path

import toml

logger = logging.getLogger(__name__)


def run_config(args) -> int:
    """
    Run configuration command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    from ..config import load_config, create_default_config

    config_path = getattr(args, 'config', Path('config.toml'))

    if getattr(args, 'init', False):
        if config_path.exists():
            print(f"Config file already exists: {config_path}")
            return 1
        create_default_config(config_path)
        print(f"Wrote default config to: {config_path}")
        return 0

    if getattr(args, 'validate', False):
        config = load_config(config_path)
        errors = config.validate()
        if errors:
            print("Configuration errors:")
            for err in errors:
                print(f"  - {err}")
            return 1
        print("Configuration is valid.")
        return 0

    if getattr(args, 'backup', False):
        return backup_config(config_path)

    if getattr(args, 'set', None):
        key, value = args.set
        return set_config_value(config_path, key, value)

    # Default: show
    config = load_config(config_path)
    print(config_to_toml(config))
    return 0


def config_to_toml(config) -> str:
    """Convert config to TOML string representation."""
    data = config._to_dict()

    # Never echo the fingerprint key
    if data["privacy"]["identity_hash_key"]:
        data["privacy"]["identity_hash_key"] = "<set>"

    return "# AnonBBS Configuration\n\n" + toml.dumps(data)


def backup_config(config_path: Path) -> int:
    """Backup configuration file."""
    if not config_path.exists():
        print(f"Config file not found: {config_path}")
        return 1

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = config_path.with_suffix(f".{timestamp}.bak")

    shutil.copy(config_path, backup_path)
    print(f"Backed up to: {backup_path}")
    return 0


def _field_names(obj) -> set[str]:
    return {f.name for f in fields(obj)}


def set_config_value(config_path: Path, key: str, value: str) -> int:
    """Set a specific configuration value."""
    from ..config import load_config

    config = load_config(config_path)

    # Keys are "section.field" (e.g., "rate_limits.window_length")
    parts = key.split(".")
    if len(parts) != 2:
        print(f"Invalid config key: {key}")
        return 1

    section, final_key = parts
    if section not in _field_names(config):
        print(f"Invalid config key: {key}")
        return 1

    obj = getattr(config, section)
    if not is_dataclass(obj) or final_key not in _field_names(obj):
        print(f"Invalid config key: {key}")
        return 1

    # Convert value to appropriate type
    current = getattr(obj, final_key)
    try:
        if isinstance(current, bool):
            value = value.lower() in ('true', '1', 'yes')
        elif isinstance(current, int):
            value = int(value)
    except ValueError:
        print(f"Invalid value for {key}: {value}")
        return 1

    setattr(obj, final_key, value)
    config.save(config_path)

    logger.debug(f"Config {key} updated in {config_path}")
    print(f"Set {key} = {value}")
    return 0
