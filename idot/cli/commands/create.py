"""idot create 命令实现

按配置创建符号链接。
"""

from typing import List, Optional

import click

from idot.core.data_structures import LinkOutcome
from idot.core.exceptions import IdotException
from idot.core.linker import Linker
from idot.core.logger import get_logger
from idot.cli.utils import OutputFormatter, FormatterConfig, load_workspace_config

logger = get_logger("create_command")


class CreateCommand:
    """创建命令处理器"""

    def __init__(self, workspace: Optional[str] = None, linker: Optional[Linker] = None):
        """初始化命令处理器

        Args:
            workspace: 工作区路径，默认为当前目录
            linker: 链接协调器
        """
        self.workspace, self.configuration = load_workspace_config(workspace)
        self.linker = linker or Linker()

    def execute(self, force: bool = False, simulate: bool = False) -> List[LinkOutcome]:
        """创建链接

        Args:
            force: 覆盖组级 force 设置，允许删除已占用的位置
            simulate: 只计算和记录，不修改文件系统
        """
        configuration = self.configuration
        if force:
            configuration = configuration.with_force(True)

        logger.info(
            "Create command started",
            workspace=str(self.workspace),
            force=force,
            simulate=simulate,
        )
        return self.linker.create(self.workspace, configuration, simulate=simulate)


@click.command()
@click.option(
    "-f",
    "--force",
    is_flag=True,
    help="强制创建符号链接，覆盖已存在的文件",
)
@click.pass_context
def create(ctx: click.Context, force: bool) -> None:
    """按配置创建符号链接"""
    formatter = OutputFormatter(FormatterConfig(**ctx.obj['formatter_config']))
    simulate = ctx.obj['simulate']
    try:
        outcomes = CreateCommand(ctx.obj['workspace']).execute(force=force, simulate=simulate)
    except IdotException as e:
        click.echo(formatter.error(str(e)), err=True)
        ctx.exit(1)

    for outcome in outcomes:
        click.echo(formatter.format_outcome(outcome, "create", simulate=simulate), err=outcome.failed)
