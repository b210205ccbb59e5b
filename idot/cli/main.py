"""idot CLI 主入口"""

import sys
from pathlib import Path

import click

from idot.cli.commands.status import status, run_status
from idot.cli.commands.create import create
from idot.cli.commands.delete import delete
from idot.core.logger import LoggerConfig, configure_logger


@click.group(invoke_without_command=True)
@click.version_option(version="0.1.0")
@click.option(
    '-d',
    '--debug',
    is_flag=True,
    help='显示调试信息',
)
@click.option(
    '-s',
    '--simulate',
    is_flag=True,
    help='不对文件系统做任何修改',
)
@click.option(
    '-w',
    '--workspace',
    default='.',
    show_default=True,
    help='存放 dotfiles 的目录',
)
@click.option(
    '--no-color',
    is_flag=True,
    help='关闭彩色输出',
)
@click.option(
    '--log-dir',
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help='把日志写入该目录下的 idot.log',
)
@click.option(
    '--json-log',
    is_flag=True,
    help='以 JSON 格式输出日志',
)
@click.pass_context
def cli(ctx, debug, simulate, workspace, no_color, log_dir, json_log):
    """idot - 简单的 dotfiles 管理工具

    \b
    命令：
      status            查看符号链接状态（默认）
      create [-f]       按配置创建符号链接
      delete            按配置删除符号链接

    \b
    示例:
      idot -w ~/dotfiles status
      idot -s create --force
      idot delete
      idot --log-dir ~/.cache/idot create
    """
    configure_logger(LoggerConfig(
        log_dir=log_dir,
        level="DEBUG" if debug else "INFO",
        json_output=json_log,
        console_output=debug,
    ))

    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    ctx.obj['simulate'] = simulate
    ctx.obj['workspace'] = workspace
    ctx.obj['formatter_config'] = {'no_color': no_color}

    if ctx.invoked_subcommand is None:
        run_status(ctx)


# 注册命令
cli.add_command(status)
cli.add_command(create)
cli.add_command(delete)


def main():
    """CLI 入口点，处理全局异常"""
    try:
        cli()
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
