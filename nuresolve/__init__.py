"""nuresolve - 脚本 NuGet 包引用解析工具"""

__version__ = "0.1.0"
