"""路径解析 — 缓存根目录与安装器可执行文件定位

build_context() 每次运行构建一次 ResolverContext，显式传给各组件，
不再依赖进程级的惰性全局变量。

缓存根目录优先级:
  1. Config.cache_dir
  2. 环境变量 NURESOLVE_NUGET_CACHE
  3. 平台默认: Windows 为 %ProgramData%/nuresolve/nuget，
     其他为 $XDG_DATA_HOME（缺省 ~/.local/share）/nuresolve/nuget

安装器查找顺序:
  1. Config.installer_path
  2. 当前程序所在目录
  3. $NURESOLVE_DIR/lib
  4. PATH 中的 nuget / nuget.exe（宿主不兼容时跳过）
  5. 裸命令名 nuget
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from nuresolve.core.config import Config

logger = logging.getLogger(__name__)

CACHE_ENV = "NURESOLVE_NUGET_CACHE"
INCOMPATIBLE_HOST_ENV = "NUGET_INCOMPATIBLE_HOST"
SDK_DIR_ENV = "NURESOLVE_DIR"

INSTALLER_NAMES = ("nuget", "nuget.exe")
NOT_FOUND = "<not found>"


@dataclass(frozen=True)
class ResolverContext:
    """一次运行内共享的解析上下文"""

    cache_root: Path
    installer_exe: str
    host_framework: str = "net48"
    incompatible_host: bool = False
    redirect_output: bool = False
    installer_timeout: float | None = None
    assembly_extension: str = ".dll"
    resource_suffix: str = ".resources.dll"

    @property
    def cache_view(self) -> str:
        return str(self.cache_root) if self.cache_root.is_dir() else NOT_FOUND

    @property
    def installer_view(self) -> str:
        if self.installer_exe and Path(self.installer_exe).is_file():
            return self.installer_exe
        return NOT_FOUND


def is_windows() -> bool:
    return sys.platform.startswith("win")


def default_cache_root(env: Mapping[str, str] | None = None) -> Path:
    """平台默认缓存根目录"""
    env = os.environ if env is None else env
    if is_windows():
        base = env.get("ProgramData") or env.get("ALLUSERSPROFILE") or r"C:\ProgramData"
        return Path(base) / "nuresolve" / "nuget"
    data_home = env.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(data_home) / "nuresolve" / "nuget"


def resolve_cache_root(
    config: Config | None = None, env: Mapping[str, str] | None = None,
) -> Path:
    """确定缓存根目录，不存在则创建"""
    env = os.environ if env is None else env
    raw = (config.cache_dir if config else "") or env.get(CACHE_ENV, "")
    root = Path(raw).expanduser() if raw else default_cache_root(env)
    root.mkdir(parents=True, exist_ok=True)
    return root


def find_installer(
    config: Config | None = None,
    env: Mapping[str, str] | None = None,
    program_dir: Path | None = None,
) -> str:
    """按查找顺序定位安装器；全部落空时返回裸命令名 nuget"""
    env = os.environ if env is None else env

    if config and config.installer_path:
        if Path(config.installer_path).is_file():
            return config.installer_path
        logger.warning("配置的安装器不存在: %s", config.installer_path)

    if program_dir is None:
        program_dir = Path(sys.argv[0]).resolve().parent if sys.argv[0] else Path.cwd()
    candidates = [program_dir / n for n in INSTALLER_NAMES]

    sdk_dir = env.get(SDK_DIR_ENV, "")
    if sdk_dir:
        candidates.extend(Path(sdk_dir) / "lib" / n for n in INSTALLER_NAMES)

    for candidate in candidates:
        if candidate.is_file():
            return str(candidate)

    found = _search_path(env)
    if found:
        return found

    logger.warning(
        "未找到 nuget 可执行文件，请放到程序目录或 $%s/lib 下，"
        "或加入 PATH", SDK_DIR_ENV,
    )
    return "nuget"


def _search_path(env: Mapping[str, str]) -> str | None:
    if env.get(INCOMPATIBLE_HOST_ENV) is not None:
        return None
    for directory in env.get("PATH", "").split(os.pathsep):
        if not directory:
            continue
        for n in INSTALLER_NAMES:
            candidate = Path(directory) / n
            if candidate.is_file():
                return str(candidate)
    return None


def build_context(
    config: Config | None = None, env: Mapping[str, str] | None = None,
) -> ResolverContext:
    """根据配置与环境变量构建解析上下文"""
    config = config or Config()
    env = os.environ if env is None else env

    redirect = config.redirect_output
    if redirect is None:
        # Linux 上原生 nuget 与输出重定向配合不好
        redirect = is_windows()

    ctx = ResolverContext(
        cache_root=resolve_cache_root(config, env),
        installer_exe=find_installer(config, env),
        host_framework=config.host_framework,
        incompatible_host=env.get(INCOMPATIBLE_HOST_ENV) is not None,
        redirect_output=redirect,
        installer_timeout=config.installer_timeout,
        assembly_extension=config.assembly_extension,
        resource_suffix=config.resource_suffix,
    )
    logger.debug("解析上下文: cache=%s installer=%s", ctx.cache_root, ctx.installer_exe)
    return ctx
