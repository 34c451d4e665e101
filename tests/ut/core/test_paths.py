"""路径解析测试 — 缓存根目录与安装器查找"""

from __future__ import annotations

from pathlib import Path

import pytest

from nuresolve.core import paths
from nuresolve.core.config import Config
from nuresolve.core.paths import (
    NOT_FOUND,
    ResolverContext,
    build_context,
    find_installer,
    resolve_cache_root,
)


@pytest.fixture(autouse=True)
def _posix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(paths, "is_windows", lambda: False)


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("")
    return path


class TestCacheRoot:
    def test_config_wins(self, tmp_path: Path) -> None:
        cfg = Config(cache_dir=str(tmp_path / "cfg"))
        root = resolve_cache_root(cfg, {"NURESOLVE_NUGET_CACHE": str(tmp_path / "env")})
        assert root == tmp_path / "cfg"
        assert root.is_dir()

    def test_env_override(self, tmp_path: Path) -> None:
        root = resolve_cache_root(None, {"NURESOLVE_NUGET_CACHE": str(tmp_path / "env")})
        assert root == tmp_path / "env"
        assert root.is_dir()

    def test_platform_default(self, tmp_path: Path) -> None:
        root = resolve_cache_root(None, {"XDG_DATA_HOME": str(tmp_path)})
        assert root == tmp_path / "nuresolve" / "nuget"
        assert root.is_dir()


class TestFindInstaller:
    def test_config_path(self, tmp_path: Path) -> None:
        exe = _touch(tmp_path / "custom" / "nuget")
        cfg = Config(installer_path=str(exe))
        assert find_installer(cfg, {}, program_dir=tmp_path) == str(exe)

    def test_program_dir_before_sdk(self, tmp_path: Path) -> None:
        prog = _touch(tmp_path / "prog" / "nuget.exe")
        _touch(tmp_path / "sdk" / "lib" / "nuget")
        env = {"NURESOLVE_DIR": str(tmp_path / "sdk")}
        assert find_installer(None, env, program_dir=tmp_path / "prog") == str(prog)

    def test_sdk_lib(self, tmp_path: Path) -> None:
        sdk = _touch(tmp_path / "sdk" / "lib" / "nuget")
        env = {"NURESOLVE_DIR": str(tmp_path / "sdk")}
        assert find_installer(None, env, program_dir=tmp_path / "empty") == str(sdk)

    def test_path_search(self, tmp_path: Path) -> None:
        exe = _touch(tmp_path / "bin" / "nuget")
        env = {"PATH": str(tmp_path / "bin")}
        assert find_installer(None, env, program_dir=tmp_path / "empty") == str(exe)

    def test_incompatible_host_skips_path(self, tmp_path: Path) -> None:
        _touch(tmp_path / "bin" / "nuget")
        env = {"PATH": str(tmp_path / "bin"), "NUGET_INCOMPATIBLE_HOST": "1"}
        assert find_installer(None, env, program_dir=tmp_path / "empty") == "nuget"

    def test_missing_config_path_falls_through(self, tmp_path: Path, caplog) -> None:
        cfg = Config(installer_path=str(tmp_path / "nope"))
        assert find_installer(cfg, {}, program_dir=tmp_path) == "nuget"
        assert "配置的安装器不存在" in caplog.text


class TestBuildContext:
    def test_from_env(self, tmp_path: Path) -> None:
        env = {
            "NURESOLVE_NUGET_CACHE": str(tmp_path / "cache"),
            "NUGET_INCOMPATIBLE_HOST": "",
        }
        ctx = build_context(Config(host_framework="net472", installer_timeout=30), env)
        assert ctx.cache_root == tmp_path / "cache"
        assert ctx.incompatible_host is True
        assert ctx.host_framework == "net472"
        assert ctx.installer_timeout == 30
        assert ctx.redirect_output is False

    def test_redirect_explicit(self, tmp_path: Path) -> None:
        env = {"NURESOLVE_NUGET_CACHE": str(tmp_path)}
        assert build_context(Config(redirect_output=True), env).redirect_output is True

    def test_redirect_default_on_windows(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(paths, "is_windows", lambda: True)
        env = {"NURESOLVE_NUGET_CACHE": str(tmp_path)}
        assert build_context(Config(), env).redirect_output is True


class TestViews:
    def test_not_found(self, tmp_path: Path) -> None:
        ctx = ResolverContext(cache_root=tmp_path / "none", installer_exe="nuget")
        assert ctx.cache_view == NOT_FOUND
        assert ctx.installer_view == NOT_FOUND

    def test_found(self, tmp_path: Path) -> None:
        exe = _touch(tmp_path / "nuget")
        ctx = ResolverContext(cache_root=tmp_path, installer_exe=str(exe))
        assert ctx.cache_view == str(tmp_path)
        assert ctx.installer_view == str(exe)
