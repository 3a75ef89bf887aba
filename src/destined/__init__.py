"""Lazy, cancellable, future-wrapped filesystem operations."""

__version__ = "0.1.0"

from destined.config import (
    DEFAULT_REMOVAL_CONFIG,
    GlobConfig,
    MkdirConfig,
    ReadConfig,
    RemovalConfig,
    RemoveConfig,
    WriteConfig,
)
from destined.errors import DestinedError, GlobConfigError, PathNormalizationError
from destined.fs import (
    access,
    access_with_cancel,
    exists,
    io,
    io_with_cancel,
    mkdir,
    mkdir_with_cancel,
    mkdirp,
    read,
    read_dir,
    read_dir_with_config,
    read_dir_with_config_and_cancel,
    read_file,
    read_file_with_cancel,
    read_file_with_format_and_cancel,
    read_json_file,
    read_json_file_with_cancel,
    read_yaml_file,
    read_yaml_file_with_cancel,
    readable,
    remove_file,
    remove_file_with_config,
    remove_file_with_config_and_cancel,
    remove_files,
    remove_files_with_config,
    remove_files_with_config_and_cancel,
    rimraf,
    rm,
    write,
    write_file,
    write_file_with_auto_path,
    write_file_with_config,
    write_file_with_config_and_cancel,
)
from destined.future import (
    Future,
    Rejection,
    after,
    first_success,
    is_future,
    parallel,
    race,
    race_success,
    reject_after,
)
from destined.interpret import (
    demand,
    demand_with_cancel,
    import_module,
    import_module_with_cancel,
    interpret,
    interpret_with_cancel,
)
from destined.lookup import (
    dig_up,
    dig_up_with_cancel,
    find_file,
    read_any,
    read_any_or,
    require_any_or,
)
from destined.path import directory_only, localize, relative_path_join
from destined.types import NO_OP

__all__ = [
    "__version__",
    "dig_up_with_cancel",
    "dig_up",
    "NO_OP",
    "localize",
    "read_file_with_format_and_cancel",
    "read_file_with_cancel",
    "read_file",
    "read_json_file_with_cancel",
    "read_json_file",
    "read_yaml_file_with_cancel",
    "read_yaml_file",
    "read_dir_with_config_and_cancel",
    "read_dir_with_config",
    "read_dir",
    "write_file_with_config_and_cancel",
    "write_file_with_config",
    "write_file",
    "remove_file_with_config_and_cancel",
    "remove_file_with_config",
    "rm",
    "remove_file",
    "rimraf",
    "DEFAULT_REMOVAL_CONFIG",
    "remove_files_with_config_and_cancel",
    "remove_files_with_config",
    "remove_files",
    "mkdir_with_cancel",
    "mkdir",
    "mkdirp",
    "access_with_cancel",
    "access",
    "exists",
    "readable",
    "directory_only",
    "write_file_with_auto_path",
    "io_with_cancel",
    "io",
    "read",
    "write",
    "find_file",
    "read_any_or",
    "read_any",
    "require_any_or",
    "interpret_with_cancel",
    "interpret",
    "import_module_with_cancel",
    "import_module",
    "demand_with_cancel",
    "demand",
    "relative_path_join",
    "Future",
    "Rejection",
    "after",
    "parallel",
    "race",
    "race_success",
    "first_success",
    "is_future",
    "reject_after",
    "GlobConfig",
    "MkdirConfig",
    "ReadConfig",
    "RemovalConfig",
    "RemoveConfig",
    "WriteConfig",
    "DestinedError",
    "GlobConfigError",
    "PathNormalizationError",
]
