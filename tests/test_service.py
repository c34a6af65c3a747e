"""
Tests for AnonBBS Service Controller

Lifecycle, admin gating, fee and rate limit settings.
"""

import pytest

from anonbbs.config import Config
from anonbbs.core.bbs import AnonBBS
from anonbbs.core.errors import (
    AlreadyInitializedError,
    InvalidSettingError,
    NotInitializedError,
    OwnerOnlyError,
    ServicePausedError,
)
from anonbbs.db.models import ServiceState

ADMIN = "!admin01"
USER = "!user0001"
CONTENT = "A perfectly ordinary message"


def make_bbs() -> AnonBBS:
    config = Config()
    config.bbs.admin = ADMIN
    return AnonBBS(config)


class TestInitialize:
    """Tests for one-time initialization."""

    def setup_method(self):
        self.bbs = make_bbs()

    def test_starts_uninitialized(self):
        """Test a new board is not initialized."""
        assert self.bbs.is_initialized is False
        assert self.bbs.settings().state is ServiceState.UNINITIALIZED

    def test_initialize(self):
        """Test admin can initialize."""
        self.bbs.initialize(ADMIN)

        assert self.bbs.is_initialized is True
        assert self.bbs.settings().initialized is True

    def test_initialize_twice(self):
        """Test second initialize is rejected."""
        self.bbs.initialize(ADMIN)

        with pytest.raises(AlreadyInitializedError):
            self.bbs.initialize(ADMIN)

    def test_initialize_non_admin(self):
        """Test non-admin cannot initialize."""
        with pytest.raises(OwnerOnlyError):
            self.bbs.initialize(USER)

        assert self.bbs.is_initialized is False

    def test_writes_rejected_before_initialize(self):
        """Test every write kind is gated on initialization."""
        with pytest.raises(NotInitializedError):
            self.bbs.post(USER, 0, CONTENT)
        with pytest.raises(NotInitializedError):
            self.bbs.post_plain(0, CONTENT)
        with pytest.raises(NotInitializedError):
            self.bbs.post_bulk(0, CONTENT, CONTENT)
        with pytest.raises(NotInitializedError):
            self.bbs.reply(USER, 0, CONTENT, 0)

        assert self.bbs.count() == 0

    def test_missing_admin_rejected(self):
        """Test a board cannot be built without an admin identity."""
        with pytest.raises(ValueError):
            AnonBBS(Config())


class TestPauseResume:
    """Tests for pausing and resuming."""

    def setup_method(self):
        self.bbs = make_bbs()
        self.bbs.initialize(ADMIN)

    def test_pause_blocks_writes(self):
        """Test writes fail while paused, as not initialized."""
        self.bbs.pause(ADMIN)

        with pytest.raises(NotInitializedError):
            self.bbs.post(USER, 0, CONTENT)
        with pytest.raises(ServicePausedError):
            self.bbs.post_plain(0, CONTENT)

        assert self.bbs.is_initialized is False
        assert self.bbs.settings().state is ServiceState.PAUSED

    def test_pause_keeps_data(self):
        """Test pausing leaves stored messages readable."""
        message_id = self.bbs.post(USER, 0, CONTENT)
        self.bbs.pause(ADMIN)

        assert self.bbs.exists(message_id)
        assert self.bbs.get(message_id).content == CONTENT
        assert self.bbs.count() == 1

    def test_resume(self):
        """Test writes work again after resume."""
        self.bbs.pause(ADMIN)
        self.bbs.resume(ADMIN)

        assert self.bbs.post(USER, 0, CONTENT) == 0

    def test_pause_non_admin(self):
        """Test non-admin cannot pause."""
        with pytest.raises(OwnerOnlyError):
            self.bbs.pause(USER)

        assert self.bbs.is_initialized is True

    def test_resume_non_admin(self):
        """Test non-admin cannot resume."""
        self.bbs.pause(ADMIN)

        with pytest.raises(OwnerOnlyError):
            self.bbs.resume(USER)

    def test_initialize_while_paused(self):
        """Test a paused board still counts as initialized once."""
        self.bbs.pause(ADMIN)

        with pytest.raises(AlreadyInitializedError):
            self.bbs.initialize(ADMIN)

    def test_pause_is_idempotent(self):
        """Test pausing twice is harmless."""
        self.bbs.pause(ADMIN)
        self.bbs.pause(ADMIN)

        assert self.bbs.settings().state is ServiceState.PAUSED

    def test_resume_brings_up_new_board(self):
        """Test resume on a fresh board activates it."""
        bbs = make_bbs()
        bbs.resume(ADMIN)

        assert bbs.is_initialized is True
        with pytest.raises(AlreadyInitializedError):
            bbs.initialize(ADMIN)


class TestSettings:
    """Tests for fee and rate limit settings."""

    def setup_method(self):
        self.bbs = make_bbs()

    def test_update_fee(self):
        """Test admin can set the fee."""
        self.bbs.update_fee(ADMIN, 250)

        assert self.bbs.service_fee == 250
        assert self.bbs.settings().service_fee == 250

    def test_update_fee_non_admin(self):
        """Test non-admin cannot set the fee."""
        with pytest.raises(OwnerOnlyError):
            self.bbs.update_fee(USER, 1)

        assert self.bbs.service_fee == 0

    def test_update_fee_negative(self):
        """Test a negative fee is rejected."""
        with pytest.raises(InvalidSettingError):
            self.bbs.update_fee(ADMIN, -1)

    def test_update_rate_limits(self):
        """Test admin can change rate limits."""
        self.bbs.update_rate_limits(ADMIN, 3600, 5)

        settings = self.bbs.settings()
        assert settings.rate_window_length == 3600
        assert settings.max_posts_per_window == 5

    def test_update_rate_limits_non_admin(self):
        """Test non-admin cannot change rate limits."""
        with pytest.raises(OwnerOnlyError):
            self.bbs.update_rate_limits(USER, 1, 1000)

        assert self.bbs.settings().max_posts_per_window == 10

    def test_update_rate_limits_zero_window(self):
        """Test a zero-length window is rejected."""
        with pytest.raises(InvalidSettingError):
            self.bbs.update_rate_limits(ADMIN, 0, 10)

    def test_settings_admin_works_uninitialized(self):
        """Test settings can be changed before initialization."""
        self.bbs.update_fee(ADMIN, 7)

        assert self.bbs.service_fee == 7
        assert self.bbs.is_initialized is False

    def test_settings_snapshot_counter(self):
        """Test snapshot reports the next id."""
        self.bbs.initialize(ADMIN)
        self.bbs.post_plain(0, CONTENT)

        assert self.bbs.settings().id_counter == 1

    def test_fee_from_config(self):
        """Test the initial fee comes from config."""
        config = Config()
        config.bbs.admin = ADMIN
        config.fees.service_fee = 42

        assert AnonBBS(config).service_fee == 42
