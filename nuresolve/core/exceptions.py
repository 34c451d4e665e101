"""统一异常体系

所有业务异常继承 NuResolveError，替代散落的 ValueError / RuntimeError。
CLI 层可据此输出友好提示并决定退出码。
"""

from __future__ import annotations


class NuResolveError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(NuResolveError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class DependencyError(NuResolveError):
    """依赖包安装或解析失败（整批中止）"""

    code = "DEPENDENCY_ERROR"

    def __init__(self, message: str, package: str = "") -> None:
        super().__init__(message)
        self.package = package


class ValidationError(NuResolveError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class PackageSpecError(ValidationError):
    """包引用无法解析（如缺少包名）"""

    code = "PACKAGE_SPEC_ERROR"
