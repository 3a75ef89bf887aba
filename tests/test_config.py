"""Tests for configuration models."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from destined.config import (
    DEFAULT_REMOVAL_CONFIG,
    GlobConfig,
    RemovalConfig,
    RemoveConfig,
    WriteConfig,
    coerce_config,
)


class TestRemovalConfig:
    """Tests for removal configuration."""

    def test_default_values(self) -> None:
        """Test the default removal plan."""
        assert DEFAULT_REMOVAL_CONFIG.force is False
        assert DEFAULT_REMOVAL_CONFIG.recursive is False
        assert DEFAULT_REMOVAL_CONFIG.max_retries == 0
        assert DEFAULT_REMOVAL_CONFIG.retry_delay == 100
        assert DEFAULT_REMOVAL_CONFIG.parallel == 10

    def test_camel_case_aliases(self) -> None:
        """Test option names as callers of fs.rm spell them."""
        config = RemovalConfig.model_validate({"maxRetries": 3, "retryDelay": 5})
        assert config.max_retries == 3
        assert config.retry_delay == 5

    def test_forwarded_strips_parallel(self) -> None:
        """Test parallel is dropped for per-path removal."""
        forwarded = RemovalConfig(parallel=3, force=True).forwarded()

        assert type(forwarded) is RemoveConfig
        assert forwarded.force is True
        assert "parallel" not in forwarded.model_dump()

    def test_parallel_must_be_positive(self) -> None:
        """Test a zero batch size is refused."""
        with pytest.raises(ValidationError):
            RemovalConfig(parallel=0)

    def test_defaults_are_frozen(self) -> None:
        """Test default constants cannot be mutated."""
        with pytest.raises(ValidationError):
            DEFAULT_REMOVAL_CONFIG.parallel = 99


class TestCoerceConfig:
    """Tests for coerce_config."""

    def test_none_gives_defaults(self) -> None:
        """Test None yields a default model."""
        assert coerce_config(WriteConfig, None) == WriteConfig()

    def test_instance_passes_through(self) -> None:
        """Test a model instance is returned unchanged."""
        config = WriteConfig(flag="a")
        assert coerce_config(WriteConfig, config) is config

    def test_mapping_is_validated(self) -> None:
        """Test a mapping becomes the model."""
        config = coerce_config(GlobConfig, {"ignore": "node_modules/**", "cwd": Path("/tmp")})
        assert config.ignore == ["node_modules/**"]
        assert config.cwd == "/tmp"

    def test_unknown_keys_are_kept(self) -> None:
        """Test unrecognised options pass through harmlessly."""
        config = coerce_config(WriteConfig, {"signal": "abort-token"})
        assert config.model_extra == {"signal": "abort-token"}

    def test_other_model_is_converted(self) -> None:
        """Test converting between related models."""
        config = coerce_config(RemovalConfig, RemoveConfig(force=True))
        assert config.force is True
        assert config.parallel == 10
