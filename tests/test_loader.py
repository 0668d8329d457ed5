"""Tests for resolving hook references to callables."""

import json
import sys

import pytest

from proving_ground.hooks.loader import (
    DEFAULT_ATTRIBUTE,
    HookLoadError,
    load_hook,
    split_ref,
)


class TestSplitRef:
    def test_default_attribute(self):
        assert split_ref("hooks.py") == ("hooks.py", DEFAULT_ATTRIBUTE)

    def test_explicit_attribute(self):
        assert split_ref("hooks.py:setup") == ("hooks.py", "setup")

    def test_module_with_attribute(self):
        assert split_ref("pkg.hooks:teardown") == ("pkg.hooks", "teardown")

    def test_windows_drive(self):
        assert split_ref("C:\\work\\hooks.py") == ("C:\\work\\hooks.py", DEFAULT_ATTRIBUTE)
        assert split_ref("C:\\work\\hooks.py:setup") == ("C:\\work\\hooks.py", "setup")


class TestLoadFromFile:
    def test_default_attribute(self, tmp_path):
        (tmp_path / "hooks.py").write_text("def hook(done):\n    done()\n")
        hook = load_hook("hooks.py", base_dir=tmp_path)
        assert hook.__name__ == "hook"

    def test_named_attribute(self, tmp_path):
        (tmp_path / "grid.py").write_text("def setup(done):\n    done()\n")
        assert load_hook("grid.py:setup", base_dir=tmp_path).__name__ == "setup"

    def test_relative_to_cwd(self, tmp_path, monkeypatch):
        sub = tmp_path / "support"
        sub.mkdir()
        (sub / "hooks.py").write_text("def hook(done):\n    done()\n")
        monkeypatch.chdir(tmp_path)
        assert callable(load_hook("support/hooks.py"))

    def test_absolute_path(self, tmp_path):
        path = tmp_path / "hooks.py"
        path.write_text("def hook(done):\n    done()\n")
        assert callable(load_hook(str(path), base_dir="/nonexistent"))

    def test_module_loaded_once(self, tmp_path):
        (tmp_path / "grid.py").write_text(
            "children = []\n"
            "def setup(done):\n    children.append(1)\n    done()\n"
            "def teardown(done):\n    children.clear()\n    done()\n"
        )
        setup = load_hook("grid.py:setup", base_dir=tmp_path)
        teardown = load_hook(str(tmp_path / "grid.py") + ":teardown")
        assert setup.__globals__ is teardown.__globals__

    def test_missing_file(self, tmp_path):
        with pytest.raises(HookLoadError, match="not found"):
            load_hook("missing.py", base_dir=tmp_path)

    def test_missing_attribute(self, tmp_path):
        (tmp_path / "hooks.py").write_text("def setup(done):\n    done()\n")
        with pytest.raises(HookLoadError, match="no attribute 'hook'"):
            load_hook("hooks.py", base_dir=tmp_path)

    def test_not_callable(self, tmp_path):
        (tmp_path / "hooks.py").write_text("hook = 42\n")
        with pytest.raises(HookLoadError, match="not callable"):
            load_hook("hooks.py", base_dir=tmp_path)

    def test_import_error_is_not_cached(self, tmp_path):
        path = tmp_path / "broken.py"
        path.write_text("raise RuntimeError('bad module')\n")
        with pytest.raises(HookLoadError, match="bad module"):
            load_hook("broken.py", base_dir=tmp_path)
        assert not any(
            getattr(m, "__file__", None) == str(path.resolve())
            for m in list(sys.modules.values())
        )


class TestLoadFromModule:
    def test_importable_module(self):
        assert load_hook("json:dumps") is json.dumps

    def test_missing_module(self):
        with pytest.raises(HookLoadError, match="Cannot import"):
            load_hook("proving_ground_no_such_module:hook")

    def test_empty_reference(self):
        with pytest.raises(HookLoadError):
            load_hook("  ")

    def test_is_value_error(self):
        assert issubclass(HookLoadError, ValueError)
