"""依赖包发现 — 基于目录命名约定

安装器把依赖包与主包一起放在主包目录下:

    <cache_root>/WixSharp/WixSharp.1.0.30.4
    <cache_root>/WixSharp/WixSharp.bin.1.0.30.4

这里不读取任何清单，仅按目录名推断依赖包名，属于启发式规则:

  base_name 语法: 从左到右扫描，第一个紧跟在 '.' 之后的数字是版本起点，
  该 '.' 之前的部分即包名。

已知边界情况:
  - 包名本身含 ".<数字>"（如 Foo.2D.Bar.1.0）会被截成 "Foo"
  - 预发布后缀（如 1.0.30.4-HotFix）随版本一起被剥掉
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

# System.Version 兼容: 2~4 段非负整数
_VERSION_RE = re.compile(r"^\d+(\.\d+){1,3}$")


def base_name(dir_name: str) -> str:
    """剥离目录名中的版本后缀

    >>> base_name("WixSharp.bin.1.0.30.4-HotFix")
    'WixSharp.bin'
    """
    prev = ""
    for i, ch in enumerate(dir_name):
        if prev == "." and ch.isdigit():
            return dir_name[:i - 1]
        prev = ch
    return dir_name


def is_package_dir(dir_name: str, name: str) -> bool:
    """目录名是否为 <name> 或 <name>.<数字版本>（大小写不敏感）"""
    if dir_name.lower() == name.lower():
        return True
    prefix = name.lower() + "."
    if dir_name.lower().startswith(prefix):
        return _VERSION_RE.match(dir_name[len(prefix):]) is not None
    return False


def discover_dependencies(package_dir: Path, primary_name: str) -> list[str]:
    """从主包目录的子目录推断依赖包名（去重，保持首次出现顺序）"""
    if not package_dir.is_dir():
        return []

    primary = base_name(primary_name)
    seen: dict[str, None] = {}
    for d in sorted(package_dir.iterdir()):
        if not d.is_dir():
            continue
        name = base_name(d.name)
        if name and name != primary:
            seen.setdefault(name, None)

    deps = list(seen)
    if deps:
        logger.debug("发现依赖包 %s: %s", primary_name, ", ".join(deps))
    return deps
