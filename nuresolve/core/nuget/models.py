"""NuGet 包解析数据模型

数据类:
- PackageRequest: 单条包引用解析后的请求
- InstallResult: 一次安装器调用的结果
- PackageFailure / ResolveResult: 整批解析的显式结果
"""

from __future__ import annotations

from dataclasses import dataclass, field

from nuresolve.core.exceptions import DependencyError


@dataclass
class PackageRequest:
    """单个包引用（每次解析新建，解析完即丢弃）"""

    name: str
    version: str | None = None
    preferred_runtime: str | None = None
    suppress_referencing: bool = False
    installer_args: str = ""
    force_refresh: bool = False
    force_timeout: int = 0     # 秒，解析失败时为 0
    source: str | None = None  # 整批共享的源地址覆盖


@dataclass
class InstallResult:
    """安装器调用结果；returncode 为 None 表示进程未运行"""

    name: str
    command: list[str] = field(default_factory=list)
    returncode: int | None = None
    duration: float = 0.0
    error: str = ""

    @property
    def ran(self) -> bool:
        return self.returncode is not None


@dataclass
class PackageFailure:
    """导致整批中止的单包失败"""

    name: str
    reason: str


@dataclass
class ResolveResult:
    """整批解析结果"""

    assemblies: list[str] = field(default_factory=list)
    failure: PackageFailure | None = None
    installed: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failure is None

    def raise_for_failure(self) -> None:
        """存在失败时抛出 DependencyError"""
        if self.failure is not None:
            raise DependencyError(self.failure.reason, package=self.failure.name)
