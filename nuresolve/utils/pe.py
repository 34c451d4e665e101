"""PE 文件头检查 — 判断程序集能否被宿主加载

只读取 DOS 头、PE 签名和 COFF 头中的 Machine 字段，不解析 CLR 元数据。
托管 AnyCPU 程序集的 Machine 为 I386，任何宿主都可加载。
"""

from __future__ import annotations

import logging
import platform
import struct
from pathlib import Path

logger = logging.getLogger(__name__)

MACHINE_I386 = 0x014C
MACHINE_AMD64 = 0x8664
MACHINE_ARM64 = 0xAA64

_E_LFANEW_OFFSET = 0x3C
_PE_SIGNATURE = b"PE\0\0"

# 宿主架构 -> 可加载的 Machine 类型
_HOST_MACHINES: dict[str, frozenset[int]] = {
    "x86": frozenset({MACHINE_I386}),
    "x64": frozenset({MACHINE_I386, MACHINE_AMD64}),
    "arm64": frozenset({MACHINE_I386, MACHINE_ARM64}),
}

_ARCH_ALIASES = {
    "amd64": "x64", "x86_64": "x64", "x64": "x64",
    "i386": "x86", "i686": "x86", "x86": "x86",
    "arm64": "arm64", "aarch64": "arm64",
}


def host_arch(machine: str | None = None) -> str:
    """把 platform.machine() 归一为 x86 / x64 / arm64，未知架构按 x64 处理"""
    raw = (machine if machine is not None else platform.machine()).lower()
    return _ARCH_ALIASES.get(raw, "x64")


def read_machine(path: str | Path) -> int | None:
    """读取 PE 文件的 COFF Machine 字段，非 PE 文件或读取失败返回 None"""
    try:
        with open(path, "rb") as f:
            dos = f.read(64)
            if len(dos) < 64 or dos[:2] != b"MZ":
                return None
            (pe_offset,) = struct.unpack_from("<I", dos, _E_LFANEW_OFFSET)
            f.seek(pe_offset)
            header = f.read(6)
    except OSError as e:
        logger.debug("无法读取 PE 头: %s (%s)", path, e)
        return None

    if len(header) < 6 or header[:4] != _PE_SIGNATURE:
        return None
    (machine,) = struct.unpack_from("<H", header, 4)
    return machine


def is_loadable(path: str | Path, arch: str | None = None) -> bool:
    """程序集的 Machine 类型是否能被指定宿主架构加载"""
    machine = read_machine(path)
    if machine is None:
        return False
    return machine in _HOST_MACHINES[arch or host_arch()]
