"""Tests for Config."""

from __future__ import annotations

import pytest

from burrow.core.config import DISABLE_ENV_VAR, Config


@pytest.fixture
def clean_env(monkeypatch):
    for name in ["BURROW_MEMORY_SIZE", "BURROW_NO_COLOR", "BURROW_NO_RC"]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestConfig:
    """Tests for Config construction."""

    def test_defaults(self):
        """Defaults match the documented values."""
        config = Config()
        assert config.memory_size == 100
        assert config.color is True
        assert config.should_load_rc is True
        assert config.rc_paths() == ["~/.burrowrc", "./.burrowrc"]

    @pytest.mark.parametrize("size", [0, -5, True, "100"])
    def test_invalid_memory_size(self, size):
        """memory_size must be a positive integer."""
        with pytest.raises(ValueError):
            Config(memory_size=size)

    def test_from_options_keeps_unknown_keys(self):
        """Unrecognized options are collected in extras."""
        config = Config.from_options(memory_size=10, theme="dark", extras={"a": 1})

        assert config.memory_size == 10
        assert config.extras == {"a": 1, "theme": "dark"}

    def test_with_options_splits_known_and_unknown(self):
        """Known fields are replaced; unknown options join extras."""
        config = Config(extras={"a": 1}).with_options(memory_size=5, theme="dark")

        assert config.memory_size == 5
        assert config.extras == {"a": 1, "theme": "dark"}

    def test_with_options_validates(self):
        """Replaced fields go through the usual validation."""
        with pytest.raises(ValueError):
            Config().with_options(memory_size=0)

    def test_rc_paths(self):
        """rc_paths honors both load switches."""
        assert Config(should_load_rc=False).rc_paths() == []
        assert Config(should_load_local_rc=False).rc_paths() == ["~/.burrowrc"]

    def test_replace(self):
        """replace returns an updated copy."""
        config = Config()
        other = config.replace(color=False)

        assert config.color is True
        assert other.color is False


class TestFromEnv:
    """Tests for environment-driven configuration."""

    def test_reads_environment(self, clean_env):
        """BURROW_* variables set the matching fields."""
        clean_env.setenv("BURROW_MEMORY_SIZE", "500")
        clean_env.setenv("BURROW_NO_COLOR", "1")
        clean_env.setenv("BURROW_NO_RC", "true")

        config = Config.from_env()

        assert config.memory_size == 500
        assert config.color is False
        assert config.should_load_rc is False

    def test_options_override_environment(self, clean_env):
        """Explicit options win over the environment."""
        clean_env.setenv("BURROW_MEMORY_SIZE", "500")
        assert Config.from_env(memory_size=20).memory_size == 20

    @pytest.mark.parametrize("value", ["0", "false", "off", ""])
    def test_false_flags(self, clean_env, value):
        """False-like flag values leave defaults alone."""
        clean_env.setenv("BURROW_NO_COLOR", value)
        assert Config.from_env().color is True


class TestDisabled:
    """Tests for the process-wide disable switch."""

    def test_unset(self):
        """Burrow is enabled by default."""
        assert Config().disabled is False

    def test_read_at_call_time(self, monkeypatch):
        """The switch is checked live, not when the config is built."""
        config = Config()
        monkeypatch.setenv(DISABLE_ENV_VAR, "1")
        assert config.disabled is True
