"""CLI — NuGet 包解析与缓存管理命令"""

from __future__ import annotations

import click

from nuresolve.core.exceptions import NuResolveError
from nuresolve.core.nuget_manager import NuGetManager


def register(group: click.Group) -> None:
    group.add_command(resolve)
    group.add_command(install)
    group.add_command(list_packages)
    group.add_command(info)


def _manager() -> NuGetManager:
    """按当前配置构建管理器"""
    from nuresolve.core.config import get_config
    return NuGetManager(config=get_config())


@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("references", nargs=-1, required=True)
@click.option("--no-download", is_flag=True, help="不调用安装器，缺失的包直接跳过")
def resolve(references: tuple[str, ...], no_download: bool) -> None:
    """解析包引用，每行输出一个程序集路径

    每个 REFERENCE 是一条完整引用，如 '-ver:13.0.1 Newtonsoft.Json'。
    """
    try:
        result = _manager().resolve(references, suppress_downloading=no_download)
        result.raise_for_failure()
    except NuResolveError as e:
        raise click.ClickException(str(e)) from e
    for path in result.assemblies:
        click.echo(path)


@click.command()
@click.argument("name_or_index")
def install(name_or_index: str) -> None:
    """重新安装已缓存的包（序号见 list 命令，或名称通配符）"""
    results = _manager().install_package(name_or_index)
    if not results:
        click.echo("没有匹配的包。")
        return
    for r in results:
        status = "失败: " + r.error if r.error else "完成"
        click.echo(f"  {r.name:30s} {status}")


@click.command(name="list")
def list_packages() -> None:
    """列出本地缓存中的所有包"""
    nm = _manager()
    click.echo(f"Repository: {nm.context.cache_view}")
    for i, name in enumerate(nm.list_packages(), start=1):
        click.echo(f"{i}. {name}")


@click.command()
def info() -> None:
    """显示缓存目录与安装器位置"""
    nm = _manager()
    click.echo(f"NuGet 缓存:  {nm.context.cache_view}")
    click.echo(f"NuGet 程序:  {nm.context.installer_view}")
    click.echo(f"宿主框架:    {nm.context.host_framework}")
