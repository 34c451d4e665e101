"""NuGet 包解析管理器

把脚本中声明的 NuGet 包引用解析为本地程序集路径列表。

采用 "本地优先" 策略:

  1. 包已在缓存中落地 → 直接使用
  2. 缺失或强制刷新已过期 → 调用外部 nuget 安装到 <cache_root>/<name>
  3. 安装后仍缺失 → 整批中止，返回带包名的失败结果

核心逻辑:
  - 批内严格串行，同一时刻最多一个安装进程
  - 依赖包按目录命名约定从主包目录推断，不读清单
  - lib 目录按宿主框架优先级表挑选
  - suppress_downloading 模式（如编辑器补全）从不失败，缺失的包不贡献程序集

用法:
    from nuresolve.core.nuget_manager import NuGetManager

    nm = NuGetManager()
    result = nm.resolve(["-source https://example/feed", "-ver:13.0.1 Newtonsoft.Json"])
    result.raise_for_failure()
    print(result.assemblies)

    nm.list_packages()
    nm.install_package("1")         # 按 list_packages() 的 1 起序号
    nm.install_package("Newton*")   # 按名称通配
"""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from nuresolve.core.config import Config
from nuresolve.core.nuget.cache import CacheInspector
from nuresolve.core.nuget.collector import AssemblyCollector, remove_path_duplicates
from nuresolve.core.nuget.installer import ExternalInstaller
from nuresolve.core.nuget.lib_selector import LibDirSelector
from nuresolve.core.nuget.models import (
    InstallResult,
    PackageFailure,
    PackageRequest,
    ResolveResult,
)
from nuresolve.core.nuget.spec_parser import parse_references
from nuresolve.core.paths import ResolverContext, build_context
from nuresolve.utils.shell import ProcessRunner

logger = logging.getLogger(__name__)


class NuGetManager:
    """NuGet 包统一解析器

    一个实例对应一次运行的 ResolverContext；
    缓存状态在磁盘上，实例本身只记录本次是否安装过新包。
    """

    def __init__(
        self,
        context: ResolverContext | None = None,
        config: Config | None = None,
        runner: ProcessRunner | None = None,
    ) -> None:
        if context is None:
            from nuresolve.core.config import get_config
            context = build_context(config or get_config())
        self.context = context
        self.cache = CacheInspector(context.cache_root)
        self.installer = ExternalInstaller(context, runner=runner, cache=self.cache)
        self.selector = LibDirSelector(
            context.cache_root,
            host_framework=context.host_framework,
            assembly_extension=context.assembly_extension,
        )
        self.collector = AssemblyCollector(
            extension=context.assembly_extension,
            resource_suffix=context.resource_suffix,
        )
        self.new_package_installed = False

    # ------------------------------------------------------------------
    # 批量解析
    # ------------------------------------------------------------------

    def resolve(
        self,
        references: Iterable[str | Sequence[str]],
        suppress_downloading: bool = False,
    ) -> ResolveResult:
        """解析整批包引用为程序集路径列表

        Raises:
            PackageSpecError: 某条引用缺少包名
        """
        requests = parse_references(references)
        result = ResolveResult()
        assemblies: list[str] = []
        prompt_printed = False

        for req in requests:
            present = self.cache.is_present(req.name, req.version)
            stale = req.force_refresh and not self.cache.is_fresh(req)

            if suppress_downloading:
                # 不下载时缺包也不算错误
                if present and not req.suppress_referencing:
                    assemblies.extend(self.package_assemblies(req))
                continue

            if stale or not present:
                if not self.context.incompatible_host and not prompt_printed:
                    logger.info("NuGet> 正在处理 NuGet 包...")
                    prompt_printed = True
                install = self.installer.install(req)
                if install.ran:
                    self.new_package_installed = True
                    result.installed.append(req.name)

            if not self.cache.is_present(req.name, req.version):
                reason = f"Cannot process NuGet package '{req.name}'"
                logger.error(reason)
                result.failure = PackageFailure(name=req.name, reason=reason)
                break

            if not req.suppress_referencing:
                assemblies.extend(self.package_assemblies(req))

        result.assemblies = remove_path_duplicates(assemblies)
        return result

    def lib_dirs(self, request: PackageRequest) -> list[Path]:
        return self.selector.select(request)

    def package_assemblies(self, request: PackageRequest) -> list[str]:
        """单个包（含依赖）的程序集"""
        return self.collector.collect(self.lib_dirs(request))

    # ------------------------------------------------------------------
    # 缓存维护
    # ------------------------------------------------------------------

    def list_packages(self) -> list[str]:
        return self.cache.list_packages()

    def install_package(self, name_or_index: str) -> list[InstallResult]:
        """重新安装已缓存的包

        name_or_index 为整数时按 list_packages() 的 1 起序号选择，
        否则作为通配符匹配包名。
        """
        packages = self.list_packages()
        try:
            index = int(name_or_index)
        except ValueError:
            names = [n for n in packages if fnmatch.fnmatch(n, name_or_index)]
        else:
            if 0 < index <= len(packages):
                names = [packages[index - 1]]
            else:
                logger.warning("没有序号为 %s 的包", name_or_index)
                names = []

        results: list[InstallResult] = []
        for name in names:
            logger.info("正在安装 %s 包...", name)
            r = self.installer.install_existing(name)
            if r.ran:
                self.new_package_installed = True
            results.append(r)
        return results
