"""lib 目录选择 — 按目标框架兼容性挑选程序集目录

选择规则（单个包）:
  1. lib 目录本身直接含程序集 → 收录 lib
  2. 指定了首选运行时 → 只返回同名子目录，忽略以下规则
  3. 在 net* 子目录中按 FRAMEWORK_PRIORITY 顺序取第一个匹配者
  4. 都不匹配 → 取名称中首个数字最小的子目录，收录两次（历史行为）

依赖包以主包目录为根解析，版本取目录名字典序最大者（不做语义版本比较）。
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import NamedTuple

from nuresolve.core.nuget.discovery import discover_dependencies, is_package_dir
from nuresolve.core.nuget.models import PackageRequest

logger = logging.getLogger(__name__)


class FrameworkRule(NamedTuple):
    """优先级表的一行: 目录名包含 moniker 且宿主不低于 min_host 时可选"""

    moniker: str
    min_host: str | None


FRAMEWORK_PRIORITY: tuple[FrameworkRule, ...] = (
    FrameworkRule("net45", "net45"),
    FrameworkRule("net40", "net40"),
    FrameworkRule("net35", "net20"),
    FrameworkRule("net30", "net20"),
    FrameworkRule("net20", "net20"),
    FrameworkRule("netstandard", None),
)

_MONIKER_RE = re.compile(r"^net(\d+(?:\.\d+)*)$", re.IGNORECASE)
_NUMBER_RE = re.compile(r"\d+")


def framework_version(moniker: str) -> tuple[int, ...] | None:
    """解析 .NET 框架 moniker 为版本元组

    net45 → (4, 5)，net472 → (4, 7, 2)，net8.0 → (8, 0)；
    netstandard / netcoreapp 等返回 None。
    """
    m = _MONIKER_RE.match(moniker.strip())
    if m is None:
        return None
    digits = m.group(1)
    if "." in digits:
        return tuple(int(p) for p in digits.split("."))
    return tuple(int(c) for c in digits)


def host_supports(host: str, required: str | None) -> bool:
    """宿主框架是否不低于 required；required 为 None 时恒为真"""
    if required is None:
        return True
    host_ver = framework_version(host)
    req_ver = framework_version(required)
    if host_ver is None or req_ver is None:
        return False
    return host_ver >= req_ver


def _compatible_with(dir_name: str, moniker: str) -> bool:
    name = dir_name.lower()
    return name.startswith(moniker) or moniker in name


def _lowest_number(dir_name: str) -> int:
    m = _NUMBER_RE.search(dir_name)
    return int(m.group()) if m else 0


class LibDirSelector:
    """按宿主框架为包挑选 lib 目录"""

    def __init__(
        self,
        cache_root: Path,
        host_framework: str = "net48",
        assembly_extension: str = ".dll",
    ) -> None:
        self.cache_root = cache_root
        self.host_framework = host_framework
        self.assembly_extension = assembly_extension

    def version_dir(self, request: PackageRequest, root: Path | None = None) -> Path | None:
        """定位包的版本目录

        指定版本时为 <root>/<name>.<version>（不检查是否存在）；
        否则取 root 下符合包目录规则、名称字典序最大的子目录。
        """
        root = root if root is not None else self.cache_root / request.name
        short_name = Path(request.name).name
        if request.version:
            return root / f"{short_name}.{request.version}"
        if not root.is_dir():
            return None
        candidates = sorted(
            (d for d in root.iterdir() if d.is_dir() and is_package_dir(d.name, short_name)),
            key=lambda d: d.name,
            reverse=True,
        )
        return candidates[0] if candidates else None

    def select_single(self, request: PackageRequest, root: Path | None = None) -> list[Path]:
        """挑选单个包（不含依赖）的 lib 目录"""
        ver_dir = self.version_dir(request, root)
        if ver_dir is None:
            return []
        lib = ver_dir / "lib"
        if not lib.is_dir():
            return []

        result: list[Path] = []
        if self._has_assemblies(lib):
            result.append(lib)

        if request.preferred_runtime:
            preferred = lib / request.preferred_runtime
            return [preferred] if preferred.is_dir() else []

        candidates = sorted(
            (d for d in lib.iterdir() if d.is_dir() and d.name.lower().startswith("net")),
            key=lambda d: d.name,
        )
        if not candidates:
            return result

        compatible = self._pick_compatible(candidates)
        if compatible is None:
            compatible = min(candidates, key=lambda d: _lowest_number(d.name))
            logger.debug("无匹配框架，退回最低版本目录: %s", compatible)
            result.append(compatible)
        result.append(compatible)
        return result

    def select(self, request: PackageRequest) -> list[Path]:
        """主包及其依赖包的全部 lib 目录"""
        package_dir = self.cache_root / request.name
        result = self.select_single(request)
        for dep in discover_dependencies(package_dir, request.name):
            result.extend(self.select_single(PackageRequest(name=dep), root=package_dir))
        return result

    def _pick_compatible(self, candidates: list[Path]) -> Path | None:
        for rule in FRAMEWORK_PRIORITY:
            if not host_supports(self.host_framework, rule.min_host):
                continue
            for d in candidates:
                if _compatible_with(d.name, rule.moniker):
                    return d
        return None

    def _has_assemblies(self, directory: Path) -> bool:
        ext = self.assembly_extension.lower()
        return any(
            p.is_file() and p.name.lower().endswith(ext) for p in directory.iterdir()
        )
