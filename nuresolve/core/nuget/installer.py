"""外部安装器调用

职责:
- 拼装 nuget install 命令
- 运行安装器（继承标准流 / 重定向后逐行写日志）
- 安装结束后刷新缓存条目时间戳

安装器抛出的异常在本地吞掉并记录到 InstallResult，
安装是否成功以调用方的事后存在性检查为准。
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import time

from nuresolve.core.nuget.cache import CacheInspector
from nuresolve.core.nuget.models import InstallResult, PackageRequest
from nuresolve.core.paths import ResolverContext
from nuresolve.utils.shell import LocalRunner, ProcessRunner

logger = logging.getLogger(__name__)

INCOMPATIBLE_HOST_WARNING = (
    "安装 NuGet 包已中止: 宿主与 nuget 的输出重定向不兼容。"
    "请先在终端中运行一次脚本以安装缺失的包。"
)


class ExternalInstaller:
    """nuget 可执行文件的封装"""

    def __init__(
        self,
        context: ResolverContext,
        runner: ProcessRunner | None = None,
        cache: CacheInspector | None = None,
    ) -> None:
        self.context = context
        self.runner = runner or LocalRunner()
        self.cache = cache or CacheInspector(context.cache_root)

    def build_command(self, request: PackageRequest, source: str | None = None) -> list[str]:
        """拼装安装命令

        nuget install <name> [-source <src>] [-version <ver>] <额外参数> -OutputDirectory <dir>
        """
        cmd = [self.context.installer_exe, "install", request.name]
        src = source or request.source
        if src:
            cmd += ["-source", src]
        if request.version:
            cmd += ["-version", request.version]
        if request.installer_args:
            cmd += shlex.split(request.installer_args)
        cmd += ["-OutputDirectory", str(self.cache.package_dir(request.name))]
        return cmd

    def install(self, request: PackageRequest, source: str | None = None) -> InstallResult:
        """安装单个包；宿主不兼容时仅告警，不调用安装器"""
        if self.context.incompatible_host:
            logger.warning(INCOMPATIBLE_HOST_WARNING)
            return InstallResult(name=request.name, error="incompatible host")

        try:
            cmd = self.build_command(request, source)
        except ValueError as e:
            # -ng 参数引号不配对
            logger.warning("无法拼装安装命令 %s: %s", request.name, e)
            result = InstallResult(name=request.name, error=f"安装参数无效: {e}")
        else:
            result = self._run(request.name, cmd)
        self.cache.touch(request.name)
        return result

    def install_existing(self, name: str) -> InstallResult:
        """按名称重新安装已缓存的包（不带版本 / 源 / 额外参数）"""
        return self.install(PackageRequest(name=name))

    def _run(self, name: str, cmd: list[str]) -> InstallResult:
        logger.info("NuGet 命令: %s", shlex.join(cmd))
        start = time.monotonic()
        try:
            r = self.runner.run(
                cmd,
                redirect=self.context.redirect_output,
                timeout=self.context.installer_timeout,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("安装器运行失败 %s: %s", name, e)
            return InstallResult(
                name=name, command=cmd,
                duration=time.monotonic() - start, error=str(e),
            )

        error = ""
        if r.timed_out:
            error = f"安装超时 ({self.context.installer_timeout}s)"
        elif r.returncode != 0:
            error = f"安装器退出码 {r.returncode}"
        if error:
            logger.warning("安装 %s 未正常结束: %s", name, error)
        else:
            logger.info("安装完成: %s (%.1fs)", name, r.duration)
        return InstallResult(
            name=name, command=cmd, returncode=r.returncode,
            duration=r.duration, error=error,
        )
