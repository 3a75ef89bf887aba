"""Configuration models for filesystem operations.

Each model mirrors the option set of the call it configures. Unrecognised keys
are kept (``extra="allow"``) so callers can pass options through without this
package knowing about them. Defaults are frozen module constants.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

ModelT = TypeVar("ModelT", bound=BaseModel)

# Concurrent removals when a batch does not say otherwise
DEFAULT_PARALLEL = 10


class ReadConfig(BaseModel):
    """Options for reading a whole file. ``encoding=None`` reads bytes."""

    model_config = ConfigDict(extra="allow", frozen=True)

    encoding: str | None = "utf-8"


class WriteConfig(BaseModel):
    """Options for writing a whole file."""

    model_config = ConfigDict(extra="allow", frozen=True)

    encoding: str | None = "utf-8"
    mode: int = 0o666
    flag: str = "w"


class RemoveConfig(BaseModel):
    """Options for removing a single path."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    force: bool = False
    recursive: bool = False
    max_retries: int = Field(default=0, ge=0, alias="maxRetries")
    retry_delay: int = Field(default=100, ge=0, alias="retryDelay")


class RemovalConfig(RemoveConfig):
    """Options for removing a batch of paths.

    Attributes:
        parallel: Maximum number of removals in flight at once.
    """

    parallel: int = Field(default=DEFAULT_PARALLEL, ge=1)

    def forwarded(self) -> RemoveConfig:
        """Per-path options, without the batch-only ``parallel`` key."""
        data = self.model_dump(by_alias=True)
        data.pop("parallel", None)
        return RemoveConfig.model_validate(data)


class MkdirConfig(BaseModel):
    """Options for creating a directory."""

    model_config = ConfigDict(extra="allow", frozen=True)

    recursive: bool = False
    mode: int = 0o777


class GlobConfig(BaseModel):
    """Options for glob listing.

    ``sync`` is accepted only so that asking for it can be reported as an
    error; listing is always asynchronous.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    ignore: list[str] = Field(default_factory=list)
    sync: bool = False
    cwd: str | None = None
    dot: bool = False
    nodir: bool = False
    mark: bool = False
    absolute: bool = False

    @field_validator("ignore", mode="before")
    @classmethod
    def listify_ignore(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("cwd", mode="before")
    @classmethod
    def stringify_cwd(cls, value: Any) -> Any:
        if isinstance(value, Path):
            return str(value)
        return value


class DigUpConfig(BaseModel):
    """Options for searching upwards through parent directories."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    cwd: str | None = None
    stop_at: str | None = Field(default=None, alias="stopAt")
    kind: Literal["file", "directory", "any"] = Field(default="file", alias="type")

    @field_validator("cwd", "stop_at", mode="before")
    @classmethod
    def stringify_paths(cls, value: Any) -> Any:
        if isinstance(value, Path):
            return str(value)
        return value


def coerce_config(model: type[ModelT], config: ModelT | Mapping[str, Any] | None) -> ModelT:
    """Accept a model instance, a plain mapping, or None for the defaults.

    Args:
        model: Configuration model to produce.
        config: Caller supplied configuration.

    Returns:
        Instance of ``model``.
    """
    if config is None:
        return model()
    if isinstance(config, model):
        return config
    if isinstance(config, BaseModel):
        return model.model_validate(config.model_dump(by_alias=True))
    return model.model_validate(dict(config))


DEFAULT_READ_CONFIG = ReadConfig()
DEFAULT_WRITE_CONFIG = WriteConfig()
DEFAULT_REMOVE_CONFIG = RemoveConfig()
FORCE_REMOVE_CONFIG = RemoveConfig(force=True, recursive=True)
DEFAULT_REMOVAL_CONFIG = RemovalConfig(
    force=False, max_retries=0, recursive=False, retry_delay=100, parallel=DEFAULT_PARALLEL
)
DEFAULT_MKDIR_CONFIG = MkdirConfig()
RECURSIVE_MKDIR_CONFIG = MkdirConfig(recursive=True)
DEFAULT_GLOB_CONFIG = GlobConfig()
DEFAULT_DIG_UP_CONFIG = DigUpConfig()
