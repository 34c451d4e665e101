"""包引用解析

把脚本中 `//css_nuget` 风格的引用参数转为 PackageRequest。

引用语法:
    [-noref] [-ng:<安装器参数>] [-ver:<版本>] [-rt:<运行时>] [-force[:<秒>]] <包名>

    -source <url>   整批共享，由 split_source() 先行剥离
"""

from __future__ import annotations

import shlex
from collections.abc import Iterable, Sequence

from nuresolve.core.exceptions import PackageSpecError
from nuresolve.core.nuget.models import PackageRequest

SOURCE_FLAG = "-source"


def split_source(
    references: Iterable[str | Sequence[str]],
) -> tuple[str | None, list[str | Sequence[str]]]:
    """剥离 -source 引用，返回 (源地址, 剩余引用)

    引用可以是字符串，也可以是已分好词的序列。多个 -source 时以最后一个为准。
    """
    source: str | None = None
    remaining: list[str | Sequence[str]] = []
    for ref in references:
        stripped = (ref if isinstance(ref, str) else " ".join(ref)).strip()
        if stripped.startswith(SOURCE_FLAG):
            value = stripped[len(SOURCE_FLAG):].strip()
            if value.startswith(":"):
                value = value[1:].strip()
            source = _trim_quotes(value) or None
        else:
            remaining.append(ref)
    return source, remaining


def arg_value(tokens: Sequence[str], flag: str) -> str | None:
    """取 `<flag>:<value>` 形式的参数值；仅出现裸 flag 时返回空字符串"""
    prefix = flag + ":"
    for tok in tokens:
        if tok.startswith(prefix):
            return _trim_quotes(tok[len(prefix):])
        if tok == flag:
            return ""
    return None


def parse_reference(
    reference: str | Sequence[str], source: str | None = None,
) -> PackageRequest:
    """解析单条包引用

    Raises:
        PackageSpecError: 引用中没有包名，或引号不配对
    """
    if isinstance(reference, str):
        try:
            tokens = shlex.split(reference)
        except ValueError as e:
            raise PackageSpecError(f"包引用无法解析: {reference!r} ({e})") from e
    else:
        tokens = list(reference)

    name = next((t for t in tokens if not t.startswith("-")), "")
    if not name:
        raise PackageSpecError(f"包引用缺少包名: {reference!r}")

    force = arg_value(tokens, "-force")

    return PackageRequest(
        name=name,
        version=arg_value(tokens, "-ver") or None,
        preferred_runtime=arg_value(tokens, "-rt") or None,
        suppress_referencing="-noref" in tokens,
        installer_args=arg_value(tokens, "-ng") or "",
        force_refresh=force is not None,
        force_timeout=_parse_timeout(force),
        source=source,
    )


def parse_references(references: Iterable[str | Sequence[str]]) -> list[PackageRequest]:
    """解析整批引用，-source 应用到每个请求"""
    source, remaining = split_source(references)
    return [parse_reference(ref, source=source) for ref in remaining]


def _parse_timeout(value: str | None) -> int:
    # 非法或缺省一律为 0
    if not value:
        return 0
    try:
        seconds = int(value)
    except ValueError:
        return 0
    return seconds if seconds >= 0 else 0


def _trim_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value
