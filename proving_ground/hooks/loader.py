"""Resolve hook references from the command line or config file.

Accepted forms::

    path/to/hooks.py            # attribute ``hook`` of the file
    path/to/hooks.py:setup      # attribute ``setup`` of the file
    mypackage.hooks             # attribute ``hook`` of an importable module
    mypackage.hooks:teardown
"""

import hashlib
import importlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Callable, Optional, Union

DEFAULT_ATTRIBUTE = "hook"


class HookLoadError(ValueError):
    """A hook reference could not be resolved to a callable."""


def split_ref(ref: str) -> tuple[str, str]:
    """Split ``target[:attr]`` into its parts.

    Only the last colon is significant, and only when what follows it looks
    like an identifier, so Windows drive letters survive.
    """
    target, sep, attr = ref.rpartition(":")
    if sep and attr.isidentifier() and target:
        return target, attr
    return ref, DEFAULT_ATTRIBUTE


def _is_path(target: str) -> bool:
    return target.endswith(".py") or "/" in target or "\\" in target


def _module_name_for(path: Path) -> str:
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    return f"proving_ground_hook_{path.stem}_{digest}"


def load_module_from_path(path: Path) -> ModuleType:
    """Import a Python file as a module, once per resolved path."""
    name = _module_name_for(path)
    if name in sys.modules:
        return sys.modules[name]

    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise HookLoadError(f"Cannot import {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        del sys.modules[name]
        raise HookLoadError(f"Error while importing {path}: {e}") from e
    return module


def load_hook(ref: str, base_dir: Optional[Union[str, Path]] = None) -> Callable:
    """Return the callable a hook reference points at.

    Args:
        ref: Hook reference (see module docstring).
        base_dir: Directory relative file paths resolve against. Defaults
            to the current working directory.

    Raises:
        HookLoadError: the module cannot be found or imported, or the
            attribute is missing or not callable.
    """
    if not ref or not ref.strip():
        raise HookLoadError("Empty hook reference")

    target, attr = split_ref(ref.strip())

    if _is_path(target):
        path = Path(target).expanduser()
        if not path.is_absolute():
            path = Path(base_dir or Path.cwd()) / path
        path = path.resolve()
        if not path.is_file():
            raise HookLoadError(f"Hook file not found: {path}")
        module = load_module_from_path(path)
    else:
        try:
            module = importlib.import_module(target)
        except ImportError as e:
            raise HookLoadError(f"Cannot import hook module '{target}': {e}") from e

    try:
        hook = getattr(module, attr)
    except AttributeError:
        raise HookLoadError(f"'{target}' has no attribute '{attr}'") from None

    if not callable(hook):
        raise HookLoadError(f"'{target}:{attr}' is not callable")
    return hook
