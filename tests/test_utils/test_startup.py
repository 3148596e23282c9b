"""Test startup validation."""

import pytest

from dateprune.errors import ConfigurationError
from dateprune.utils.config import Config
from dateprune.utils.startup import fail_fast_startup, validate_startup


class TestValidateStartup:
    """Tests for validate_startup function."""

    def test_valid_config(self, tmp_path):
        """No errors for an existing directory and default settings."""
        assert validate_startup(Config(source_dir=str(tmp_path))) == []

    def test_collects_all_errors(self, tmp_path):
        """Every problem is reported, not just the first."""
        config = Config(source_dir=str(tmp_path / "missing"), keep_hours=-1, pattern="(")

        errors = validate_startup(config)

        assert len(errors) == 3
        assert any("does not exist" in e for e in errors)
        assert any("keep_hours" in e for e in errors)
        assert any("Invalid snapshot pattern" in e for e in errors)


class TestFailFastStartup:
    """Tests for fail_fast_startup function."""

    def test_raises_on_missing_source(self):
        """Should raise ConfigurationError when no source is configured."""
        with pytest.raises(ConfigurationError, match="Startup validation failed"):
            fail_fast_startup(Config())

    def test_passes_for_valid_config(self, tmp_path):
        """Should not raise for a usable configuration."""
        fail_fast_startup(Config(source_dir=str(tmp_path)))
