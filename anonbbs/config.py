"""
AnonBBS Configuration Module

Handles loading, validation, and management of configuration settings.
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Use tomllib for Python 3.11+, tomli for earlier versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        raise ImportError("Please install tomli: pip install tomli")


@dataclass
class BBSConfig:
    """Board general settings."""
    name: str = "AnonBBS"
    admin: str = ""  # administrator identity, fixed once the board is created


@dataclass
class FeesConfig:
    """Nominal service fee, read by settlement; never collected here."""
    service_fee: int = 0


@dataclass
class RateLimitsConfig:
    """Rate limiting settings, in logical ticks."""
    window_length: int = 86400
    max_posts_per_window: int = 10


@dataclass
class PrivacyConfig:
    """Identity fingerprinting settings."""
    identity_hash_key: str = ""  # hex; empty = random key per process


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    file: str = ""


@dataclass
class Config:
    """Main configuration container."""
    bbs: BBSConfig = field(default_factory=BBSConfig)
    fees: FeesConfig = field(default_factory=FeesConfig)
    rate_limits: RateLimitsConfig = field(default_factory=RateLimitsConfig)
    privacy: PrivacyConfig = field(default_factory=PrivacyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        # BBS validation
        if not self.bbs.name:
            errors.append("bbs.name cannot be empty")
        if not self.bbs.admin:
            errors.append("bbs.admin must be set to the administrator identity")

        # Fee validation
        if self.fees.service_fee < 0:
            errors.append("fees.service_fee cannot be negative")

        # Rate limit validation
        if self.rate_limits.window_length < 1:
            errors.append("rate_limits.window_length must be at least 1")
        if self.rate_limits.max_posts_per_window < 0:
            errors.append("rate_limits.max_posts_per_window cannot be negative")

        # Privacy validation
        key = self.privacy.identity_hash_key
        if key:
            try:
                if len(bytes.fromhex(key)) < 16:
                    errors.append("privacy.identity_hash_key must be at least 16 bytes")
            except ValueError:
                errors.append("privacy.identity_hash_key must be hex")

        # Logging validation
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
        if self.logging.level.upper() not in valid_levels:
            errors.append(f"logging.level must be one of: {valid_levels}")

        return errors

    def save(self, path: Path):
        """Save configuration to TOML file."""
        import toml  # For writing

        # Convert dataclasses to dict
        data = self._to_dict()

        with open(path, "w") as f:
            toml.dump(data, f)

    def _to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        from dataclasses import asdict
        return asdict(self)


def load_config(path: Path) -> Config:
    """Load configuration from TOML file."""
    config = Config()

    if not path.exists():
        return config

    with open(path, "rb") as f:
        data = tomllib.load(f)

    # Map TOML sections to config dataclasses
    if "bbs" in data:
        config.bbs = BBSConfig(**data["bbs"])

    if "fees" in data:
        config.fees = FeesConfig(**data["fees"])

    if "rate_limits" in data:
        config.rate_limits = RateLimitsConfig(**data["rate_limits"])

    if "privacy" in data:
        config.privacy = PrivacyConfig(**data["privacy"])

    if "logging" in data:
        config.logging = LoggingConfig(**data["logging"])

    return config


def create_default_config(path: Path):
    """Create a default configuration file."""
    config = Config()
    config.save(path)
