"""nuresolve 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import os

import click

from nuresolve import __version__
from nuresolve.core.config import DEFAULT_CONFIG_FILE, init_config
from nuresolve.core.exceptions import ConfigError
from nuresolve.utils.logger import setup_logging

CONFIG_ENV = "NURESOLVE_CONFIG"


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config", "-c", "config_path",
    default=lambda: os.getenv(CONFIG_ENV, DEFAULT_CONFIG_FILE),
    help="配置文件路径",
)
def main(config_path: str) -> None:
    """nuresolve - 脚本 NuGet 包引用解析工具"""
    setup_logging(
        level=os.getenv("NURESOLVE_LOG_LEVEL", "INFO"),
        json_output=os.getenv("NURESOLVE_LOG_JSON", "") == "1",
    )
    try:
        init_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


# 注册各领域子命令
from nuresolve.cli.cmd_packages import register as _reg_packages  # noqa: E402

_reg_packages(main)
