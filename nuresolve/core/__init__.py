"""核心领域: 配置、路径、异常与 NuGet 包解析"""
