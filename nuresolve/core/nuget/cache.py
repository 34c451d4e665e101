"""包缓存检查

职责:
- 判断包（及指定版本）是否已在本地缓存中落地
- 读取 / 刷新缓存条目的最后写入时间（强制刷新的过期时钟）
- 列出已缓存的包

缓存布局:
  <cache_root>/<name>/<name>.<version>/lib/...
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path

from nuresolve.core.nuget.models import PackageRequest

logger = logging.getLogger(__name__)


class CacheInspector:
    """包缓存检查器 - 只读目录，touch 除外"""

    def __init__(self, cache_root: Path) -> None:
        self.cache_root = cache_root

    def package_dir(self, name: str) -> Path:
        return self.cache_root / name

    def version_dir(self, name: str, version: str) -> Path:
        return self.package_dir(name) / f"{Path(name).name}.{version}"

    def is_present(self, name: str, version: str | None = None) -> bool:
        """包是否已落地

        未指定版本: 包目录存在且至少有一个子目录
        指定版本:   <name>/<name>.<version> 目录存在
        """
        pkg_dir = self.package_dir(name)
        if not pkg_dir.is_dir():
            return False
        if version:
            return self.version_dir(name, version).is_dir()
        return any(p.is_dir() for p in pkg_dir.iterdir())

    def age(self, name: str) -> float | None:
        """距包目录最后写入的秒数，目录不存在返回 None"""
        try:
            mtime = self.package_dir(name).stat().st_mtime
        except OSError:
            return None
        return time.time() - mtime

    def is_fresh(self, request: PackageRequest) -> bool:
        """强制刷新请求在超时窗口内视为新鲜，可跳过重装

        超时为 0 时永远过期。
        """
        if not request.force_refresh:
            return True
        age = self.age(request.name)
        if age is None:
            return False
        fresh = age < request.force_timeout
        if fresh:
            logger.info(
                "缓存仍新鲜，跳过强制刷新: %s (%.0fs < %ds)",
                request.name, age, request.force_timeout,
            )
        return fresh

    def touch(self, name: str) -> None:
        """把包目录的最后写入时间更新为当前时间，失败忽略"""
        try:
            os.utime(self.package_dir(name))
        except OSError as e:
            logger.debug("更新缓存时间戳失败（忽略）: %s (%s)", name, e)

    def list_packages(self) -> list[str]:
        """列出所有已缓存的包名"""
        if not self.cache_root.is_dir():
            return []
        return sorted(
            d.name for d in self.cache_root.iterdir()
            if d.is_dir() and not d.name.startswith(".")
        )
