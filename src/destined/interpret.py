"""Load Python code as a deferred computation.

Nothing here caches: every run of :func:`interpret` or :func:`demand` reads
and executes the file again. :func:`import_module` goes through the regular
import system and therefore shares its module cache.
"""

from __future__ import annotations

import importlib
import importlib.machinery
import importlib.util
import logging
import os
import runpy
from functools import partial
from pathlib import Path
from types import ModuleType
from typing import Any

import aiofiles.os

from destined.future import Future
from destined.types import NO_OP, Cancel, PathLike

logger = logging.getLogger(__name__)

# Attribute treated as a module's single exported value
DEFAULT_EXPORT = "default"


def _load_module(path: PathLike) -> Any:
    """Execute the file at ``path`` as a fresh, unregistered module."""
    module_path = Path(path).resolve()
    logger.debug("Interpreting %s", module_path)
    loader = importlib.machinery.SourceFileLoader(module_path.stem, os.fspath(module_path))
    spec = importlib.util.spec_from_loader(module_path.stem, loader)
    if spec is None:
        raise ImportError(f"Cannot load module from {path}", path=os.fspath(path))
    module = importlib.util.module_from_spec(spec)
    loader.exec_module(module)
    return getattr(module, DEFAULT_EXPORT, module)


def _run_script(path: PathLike) -> dict[str, Any]:
    logger.debug("Running %s", path)
    return runpy.run_path(os.fspath(path))


def _import(name: str) -> ModuleType:
    logger.debug("Importing %s", name)
    return importlib.import_module(name)


_load_module_async = aiofiles.os.wrap(_load_module)
_run_script_async = aiofiles.os.wrap(_run_script)
_import_async = aiofiles.os.wrap(_import)


def interpret_with_cancel(cancel: Cancel, path: PathLike) -> Future[BaseException, Any]:
    """Execute a Python file and produce what it exports.

    The success value is the module's ``default`` attribute when it defines
    one, otherwise the module object. A missing file, a syntax error, or an
    exception raised by the module's top level fails the future with that
    error.

    Args:
        cancel: Invoked if loading is abandoned.
        path: Python source file, any extension.

    Returns:
        Future of the exported value.

    Example:
        >>> interpret("./fixture/raw.py")
    """
    return Future.from_coroutine(lambda: _load_module_async(path), cancel)


interpret = partial(interpret_with_cancel, NO_OP)


def demand_with_cancel(cancel: Cancel, path: PathLike) -> Future[BaseException, dict[str, Any]]:
    """Run a Python file as a script and produce its resulting globals."""
    return Future.from_coroutine(lambda: _run_script_async(path), cancel)


demand = partial(demand_with_cancel, NO_OP)


def import_module_with_cancel(cancel: Cancel, name: str) -> Future[BaseException, ModuleType]:
    """Import a module by dotted name."""
    return Future.from_coroutine(lambda: _import_async(name), cancel)


import_module = partial(import_module_with_cancel, NO_OP)
