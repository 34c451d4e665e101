"""程序集收集

职责:
- 从 lib 目录枚举程序集文件
- 排除资源卫星程序集（*.resources.dll 不参与引用）
- 排除宿主架构无法加载的程序集
- 按规范化路径去重，保持首次出现顺序
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from nuresolve.utils.pe import host_arch, is_loadable

logger = logging.getLogger(__name__)


def normalize_path(path: str | Path) -> str:
    return os.path.normcase(os.path.abspath(path))


def remove_path_duplicates(paths: Iterable[str | Path]) -> list[str]:
    """按规范化路径去重，返回首次出现的原始路径（绝对路径）"""
    seen: set[str] = set()
    result: list[str] = []
    for p in paths:
        key = normalize_path(p)
        if key in seen:
            continue
        seen.add(key)
        result.append(os.path.abspath(p))
    return result


class AssemblyCollector:
    """从 lib 目录收集可引用的程序集"""

    def __init__(
        self,
        extension: str = ".dll",
        resource_suffix: str = ".resources.dll",
        arch: str | None = None,
    ) -> None:
        self.extension = extension.lower()
        self.resource_suffix = resource_suffix.lower()
        self.arch = arch or host_arch()

    def is_runtime_compatible(self, path: Path) -> bool:
        return is_loadable(path, self.arch)

    def list_assemblies(self, directory: Path) -> list[Path]:
        """枚举目录下（不递归）的可引用程序集"""
        if not directory.is_dir():
            return []
        found: list[Path] = []
        for p in sorted(directory.iterdir()):
            name = p.name.lower()
            if not p.is_file() or not name.endswith(self.extension):
                continue
            if name.endswith(self.resource_suffix):
                continue
            if not self.is_runtime_compatible(p):
                logger.debug("跳过不兼容的程序集: %s", p)
                continue
            found.append(p)
        return found

    def collect(self, lib_dirs: Iterable[Path]) -> list[str]:
        """收集多个目录中的程序集并去重"""
        assemblies: list[Path] = []
        for d in lib_dirs:
            assemblies.extend(self.list_assemblies(d))
        return remove_path_duplicates(assemblies)
