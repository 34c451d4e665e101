"""NuGet 包解析模块

拆分说明:
- models.py: 数据模型
- spec_parser.py: 包引用解析
- cache.py: 缓存检查
- installer.py: 外部安装器调用
- discovery.py: 依赖包发现
- lib_selector.py: lib 目录选择
- collector.py: 程序集收集
"""

from nuresolve.core.nuget.cache import CacheInspector
from nuresolve.core.nuget.collector import AssemblyCollector
from nuresolve.core.nuget.installer import ExternalInstaller
from nuresolve.core.nuget.lib_selector import LibDirSelector
from nuresolve.core.nuget.models import (
    InstallResult,
    PackageFailure,
    PackageRequest,
    ResolveResult,
)

__all__ = [
    "AssemblyCollector",
    "CacheInspector",
    "ExternalInstaller",
    "InstallResult",
    "LibDirSelector",
    "PackageFailure",
    "PackageRequest",
    "ResolveResult",
]
