"""Configuration management for proving-ground."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional

import yaml

logger = logging.getLogger(__name__)

PROVE = "prove"
DEFAULT_EXEC = "python"
DEFAULT_NUM_PROCESSES = 1
DEFAULT_CONFIG_FILE = ".proving-ground.yaml"


@dataclass(frozen=True)
class Configuration:
    """Immutable settings for a single orchestration run.

    ``exec`` and ``num_processes`` are handed to ``prove`` untouched;
    ``files`` become its trailing positional arguments.  ``before`` and
    ``after`` are hooks (see :mod:`proving_ground.hooks`).
    """

    exec: str = DEFAULT_EXEC
    num_processes: int = DEFAULT_NUM_PROCESSES
    files: tuple[str, ...] = ()
    before: Optional[Callable] = field(default=None, compare=False)
    after: Optional[Callable] = field(default=None, compare=False)
    hook_timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if not isinstance(self.exec, str) or not self.exec:
            raise ValueError("exec must be a non-empty string")
        if isinstance(self.num_processes, bool) or not isinstance(self.num_processes, int):
            raise ValueError(f"num_processes must be an integer, got {self.num_processes!r}")
        if self.num_processes < 1:
            raise ValueError(f"num_processes must be at least 1, got {self.num_processes}")
        for name in ("before", "after"):
            hook = getattr(self, name)
            if hook is not None and not callable(hook):
                raise TypeError(f"{name} hook must be callable, got {type(hook).__name__}")
        if self.hook_timeout is not None and self.hook_timeout <= 0:
            raise ValueError("hook_timeout must be positive")
        files = (self.files,) if isinstance(self.files, str) else self.files
        # Frozen, so coerce through object.__setattr__.
        object.__setattr__(self, "files", tuple(str(f) for f in files))


def build_prove_args(config: Configuration) -> list[str]:
    """Return the argument list for ``prove`` (program name excluded)."""
    return [
        "--exec",
        config.exec,
        "--jobs",
        str(config.num_processes),
        *config.files,
    ]


class ConfigManager:
    """Load proving-ground settings from a YAML file.

    The file is optional.  Every key maps onto a :class:`Configuration`
    field; hook references are kept as strings here and only resolved in
    :meth:`build_configuration`.
    """

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path or DEFAULT_CONFIG_FILE).expanduser()
        self.data = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from the YAML file, if there is one."""
        if not self.config_path.exists():
            return {}

        return self._read_yaml()

    def _read_yaml(self) -> Dict[str, Any]:
        """Read and parse YAML file."""
        try:
            with open(self.config_path, "r") as f:
                content = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Error reading config %s: %s", self.config_path, e)
            return {}

        if content is None:
            return {}
        if not isinstance(content, dict):
            logger.warning("Ignoring config %s: top level is not a mapping", self.config_path)
            return {}
        return content

    @property
    def base_dir(self) -> Path:
        """Directory that relative hook references in the file resolve against."""
        return self.config_path.resolve().parent

    def _resolve_env_var(self, value: Any) -> Any:
        """Resolve environment variable references like ${VAR_NAME}."""
        if not isinstance(value, str):
            return value
        if not value.startswith("${") or not value.endswith("}"):
            return value

        var_name = value[2:-1]
        return os.getenv(var_name, "")

    def _get(self, key: str, default: Any = None) -> Any:
        value = self._resolve_env_var(self.data.get(key, default))
        return default if value in (None, "") else value

    def get_exec(self) -> str:
        """Get the command handed to ``prove --exec``."""
        return str(self._get("exec", DEFAULT_EXEC))

    def get_num_processes(self) -> int:
        """Get the ``prove --jobs`` value."""
        value = self._get("num_processes", DEFAULT_NUM_PROCESSES)
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValueError(f"num_processes must be an integer, got {value!r}") from None

    def get_files(self) -> tuple[str, ...]:
        """Get the file/glob list (a single string counts as one entry)."""
        files = self.data.get("files") or ()
        if isinstance(files, str):
            files = (files,)
        return tuple(str(self._resolve_env_var(f)) for f in files)

    def get_hook_ref(self, name: str) -> Optional[str]:
        """Get the ``before``/``after`` hook reference, if configured."""
        value = self._get(name)
        return str(value) if value is not None else None

    def get_hook_timeout(self) -> Optional[float]:
        """Get the hook timeout in seconds (None waits forever)."""
        value = self._get("hook_timeout")
        return float(value) if value is not None else None

    def build_configuration(
        self,
        exec: Optional[str] = None,
        num_processes: Optional[int] = None,
        files: Iterable[str] = (),
        before: Optional[str] = None,
        after: Optional[str] = None,
        hook_timeout: Optional[float] = None,
    ) -> Configuration:
        """Merge CLI overrides over file settings into a Configuration.

        Hook references given here resolve against the current directory;
        references from the file resolve against the file's directory.

        Raises:
            HookLoadError: a hook reference cannot be loaded.
            ValueError, TypeError: the merged values are invalid.
        """
        from .hooks.loader import load_hook

        files = tuple(files)

        hooks: Dict[str, Optional[Callable]] = {}
        for name, ref in (("before", before), ("after", after)):
            if ref is not None:
                hooks[name] = load_hook(ref)
                continue
            file_ref = self.get_hook_ref(name)
            hooks[name] = load_hook(file_ref, base_dir=self.base_dir) if file_ref else None

        return Configuration(
            exec=exec if exec is not None else self.get_exec(),
            num_processes=num_processes if num_processes is not None else self.get_num_processes(),
            files=files or self.get_files(),
            before=hooks["before"],
            after=hooks["after"],
            hook_timeout=hook_timeout if hook_timeout is not None else self.get_hook_timeout(),
        )
