"""AnonBBS CLI Module - Configuration commands."""

from .config_cmd import run_config

__all__ = ["run_config"]
