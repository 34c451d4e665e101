"""测试共享 fixture — 磁盘上的 NuGet 缓存树 + fake 安装器

缓存树布局与真实安装器一致:

  <cache_root>/<package>/<name>.<version>/lib/[<moniker>/]*.dll

程序集用最小 PE 头伪造，Machine 默认为 I386（AnyCPU），任何宿主都可加载。
"""

from __future__ import annotations

import struct
from collections.abc import Callable
from pathlib import Path

import pytest

from nuresolve.core.paths import ResolverContext
from nuresolve.utils.pe import MACHINE_I386
from nuresolve.utils.shell import CommandResult


def _write_pe(path: Path, machine: int = MACHINE_I386) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    dos = bytearray(64)
    dos[0:2] = b"MZ"
    struct.pack_into("<I", dos, 0x3C, 64)
    path.write_bytes(bytes(dos) + b"PE\0\0" + struct.pack("<H", machine) + bytes(18))
    return path


class FakeRunner:
    """记录调用的 ProcessRunner；on_run 可在 "安装" 时落地目录"""

    def __init__(
        self,
        on_run: Callable[[list[str]], None] | None = None,
        returncode: int = 0,
        exc: Exception | None = None,
    ) -> None:
        self.on_run = on_run
        self.returncode = returncode
        self.exc = exc
        self.calls: list[list[str]] = []
        self.redirects: list[bool] = []

    def run(
        self, cmd: list[str], *, redirect: bool, timeout: float | None = None,
    ) -> CommandResult:
        self.calls.append(cmd)
        self.redirects.append(redirect)
        if self.exc is not None:
            raise self.exc
        if self.on_run is not None:
            self.on_run(cmd)
        return CommandResult(returncode=self.returncode, duration=0.01)


@pytest.fixture()
def write_pe() -> Callable[..., Path]:
    """写一个最小 PE 文件: write_pe(path, machine=MACHINE_I386)"""
    return _write_pe


@pytest.fixture()
def cache_root(tmp_path: Path) -> Path:
    root = tmp_path / "nuget"
    root.mkdir()
    return root


@pytest.fixture()
def make_package(cache_root: Path) -> Callable[..., Path]:
    """在缓存中落地一个包版本目录，返回版本目录路径

    用法:
        make_package("NLog", "4.5.0", {"lib/net45": ["NLog.dll"]})
        make_package("WixSharp.bin", "1.0.30.4", {...}, package="WixSharp")
    """

    def _make(
        name: str,
        version: str = "1.0.0",
        files: dict[str, list[str]] | None = None,
        package: str | None = None,
    ) -> Path:
        ver_dir = cache_root / (package or name) / f"{name}.{version}"
        ver_dir.mkdir(parents=True, exist_ok=True)
        for sub, names in (files or {}).items():
            d = ver_dir / sub
            d.mkdir(parents=True, exist_ok=True)
            for n in names:
                _write_pe(d / n)
        return ver_dir

    return _make


@pytest.fixture()
def context(cache_root: Path) -> ResolverContext:
    return ResolverContext(
        cache_root=cache_root,
        installer_exe="nuget",
        host_framework="net48",
    )


@pytest.fixture()
def fake_runner_cls() -> type[FakeRunner]:
    return FakeRunner
