"""通用工具: 日志、YAML、子进程、PE 文件头"""
