"""
Tests for AnonBBS Configuration
"""

import argparse
import tempfile
from pathlib import Path

from anonbbs.cli.config_cmd import config_to_toml, run_config, set_config_value
from anonbbs.config import Config, create_default_config, load_config


class TestLoadSave:
    """Tests for TOML load and save."""

    def setup_method(self):
        self.dir = Path(tempfile.mkdtemp())
        self.path = self.dir / "config.toml"

    def test_missing_file_defaults(self):
        """Test a missing file yields defaults."""
        config = load_config(self.path)

        assert config.bbs.name == "AnonBBS"
        assert config.rate_limits.window_length == 86400
        assert config.rate_limits.max_posts_per_window == 10
        assert config.fees.service_fee == 0

    def test_save_and_load(self):
        """Test saved settings load back."""
        config = Config()
        config.bbs.admin = "!admin01"
        config.fees.service_fee = 5
        config.rate_limits.max_posts_per_window = 3
        config.save(self.path)

        loaded = load_config(self.path)

        assert loaded.bbs.admin == "!admin01"
        assert loaded.fees.service_fee == 5
        assert loaded.rate_limits.max_posts_per_window == 3

    def test_partial_file(self):
        """Test sections missing from the file keep defaults."""
        self.path.write_text('[bbs]\nname = "Quiet"\nadmin = "!a"\n')

        config = load_config(self.path)

        assert config.bbs.name == "Quiet"
        assert config.rate_limits.window_length == 86400

    def test_create_default(self):
        """Test the default config file can be created and read."""
        create_default_config(self.path)

        assert self.path.exists()
        assert load_config(self.path).bbs.name == "AnonBBS"


class TestValidation:
    """Tests for config validation."""

    def test_default_needs_admin(self):
        """Test the default config is missing an admin."""
        errors = Config().validate()

        assert any("bbs.admin" in e for e in errors)

    def test_valid(self):
        """Test a filled-in config is valid."""
        config = Config()
        config.bbs.admin = "!admin01"
        config.privacy.identity_hash_key = "ab" * 32

        assert config.validate() == []

    def test_bad_values(self):
        """Test invalid values are all reported."""
        config = Config()
        config.bbs.admin = "!admin01"
        config.fees.service_fee = -1
        config.rate_limits.window_length = 0
        config.privacy.identity_hash_key = "not hex"
        config.logging.level = "LOUD"

        errors = config.validate()

        assert len(errors) == 4

    def test_short_hash_key(self):
        """Test a short hash key is reported."""
        config = Config()
        config.bbs.admin = "!admin01"
        config.privacy.identity_hash_key = "abcd"

        assert any("16 bytes" in e for e in config.validate())


class TestConfigCommands:
    """Tests for the config CLI commands."""

    def setup_method(self):
        self.dir = Path(tempfile.mkdtemp())
        self.path = self.dir / "config.toml"

    def _args(self, **kwargs):
        defaults = dict(config=self.path, init=False, validate=False, backup=False, set=None)
        defaults.update(kwargs)
        return argparse.Namespace(**defaults)

    def test_init_then_validate(self):
        """Test init writes a file that fails validation until admin is set."""
        assert run_config(self._args(init=True)) == 0
        assert run_config(self._args(init=True)) == 1
        assert run_config(self._args(validate=True)) == 1

        assert set_config_value(self.path, "bbs.admin", "!admin01") == 0
        assert run_config(self._args(validate=True)) == 0

    def test_set_int(self):
        """Test integer values are converted."""
        create_default_config(self.path)

        assert set_config_value(self.path, "rate_limits.max_posts_per_window", "4") == 0
        assert load_config(self.path).rate_limits.max_posts_per_window == 4

    def test_set_invalid(self):
        """Test unknown keys and bad values are rejected."""
        create_default_config(self.path)

        assert set_config_value(self.path, "nope.key", "1") == 1
        assert set_config_value(self.path, "fees.service_fee", "lots") == 1

    def test_set_requires_section_and_field(self):
        """Test whole sections and over-long keys cannot be overwritten."""
        create_default_config(self.path)
        before = self.path.read_text()

        assert set_config_value(self.path, "bbs", "foo") == 1
        assert set_config_value(self.path, "bbs.name.extra", "foo") == 1
        assert set_config_value(self.path, "bbs.__doc__", "foo") == 1
        assert set_config_value(self.path, "validate.x", "foo") == 1

        assert self.path.read_text() == before
        assert load_config(self.path).bbs.name == "AnonBBS"

    def test_show_hides_key(self):
        """Test the hash key is not printed."""
        config = Config()
        config.privacy.identity_hash_key = "ab" * 32

        text = config_to_toml(config)

        assert "ab" * 32 not in text
        assert "[rate_limits]" in text

    def test_backup(self):
        """Test backing up an existing config."""
        create_default_config(self.path)

        assert run_config(self._args(backup=True)) == 0
        assert len(list(self.dir.glob("*.bak"))) == 1
