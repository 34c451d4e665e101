"""缓存检查测试 — 存在性规则 + 强制刷新时钟"""

from __future__ import annotations

import os
import time
from pathlib import Path

import pytest

from nuresolve.core.nuget.cache import CacheInspector
from nuresolve.core.nuget.models import PackageRequest


class TestIsPresent:
    def test_missing_package_dir(self, cache_root: Path) -> None:
        assert CacheInspector(cache_root).is_present("NLog") is False

    def test_empty_package_dir_not_present(self, cache_root: Path) -> None:
        """无版本: 包目录必须至少有一个子目录"""
        (cache_root / "NLog").mkdir()
        (cache_root / "NLog" / "readme.txt").write_text("x")
        assert CacheInspector(cache_root).is_present("NLog") is False

    def test_any_subdir_present(self, cache_root: Path) -> None:
        (cache_root / "NLog" / "NLog.4.5.0").mkdir(parents=True)
        assert CacheInspector(cache_root).is_present("NLog") is True

    @pytest.mark.parametrize(("version", "expected"), [
        ("4.5.0", True),
        ("4.6.0", False),
    ])
    def test_exact_version(self, cache_root: Path, version: str, expected: bool) -> None:
        (cache_root / "NLog" / "NLog.4.5.0").mkdir(parents=True)
        assert CacheInspector(cache_root).is_present("NLog", version) is expected


class TestAgeAndFreshness:
    def test_age_missing(self, cache_root: Path) -> None:
        assert CacheInspector(cache_root).age("nope") is None

    def test_fresh_within_timeout(self, cache_root: Path) -> None:
        (cache_root / "NLog").mkdir()
        req = PackageRequest(name="NLog", force_refresh=True, force_timeout=3600)
        assert CacheInspector(cache_root).is_fresh(req) is True

    def test_stale_after_timeout(self, cache_root: Path) -> None:
        pkg = cache_root / "NLog"
        pkg.mkdir()
        old = time.time() - 7200
        os.utime(pkg, (old, old))
        req = PackageRequest(name="NLog", force_refresh=True, force_timeout=3600)
        assert CacheInspector(cache_root).is_fresh(req) is False

    def test_zero_timeout_always_stale(self, cache_root: Path) -> None:
        (cache_root / "NLog").mkdir()
        req = PackageRequest(name="NLog", force_refresh=True, force_timeout=0)
        assert CacheInspector(cache_root).is_fresh(req) is False

    def test_unforced_is_fresh(self, cache_root: Path) -> None:
        assert CacheInspector(cache_root).is_fresh(PackageRequest(name="x")) is True

    def test_touch_updates_mtime(self, cache_root: Path) -> None:
        pkg = cache_root / "NLog"
        pkg.mkdir()
        old = time.time() - 7200
        os.utime(pkg, (old, old))
        cache = CacheInspector(cache_root)
        cache.touch("NLog")
        age = cache.age("NLog")
        assert age is not None and age < 60

    def test_touch_missing_is_swallowed(self, cache_root: Path) -> None:
        CacheInspector(cache_root).touch("nope")


class TestListPackages:
    def test_sorted_and_hidden_ignored(self, cache_root: Path) -> None:
        for n in ("b", "A", ".tmp"):
            (cache_root / n).mkdir()
        (cache_root / "file.txt").write_text("x")
        assert CacheInspector(cache_root).list_packages() == ["A", "b"]
