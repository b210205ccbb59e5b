"""idot status 命令实现

显示配置中每个符号链接的状态。
"""

from typing import List, Optional

import click

from idot.core.data_structures import LinkReport
from idot.core.exceptions import IdotException
from idot.core.linker import Linker
from idot.core.logger import get_logger
from idot.cli.utils import OutputFormatter, FormatterConfig, load_workspace_config

logger = get_logger("status_command")


class StatusCommand:
    """状态显示命令处理器"""

    def __init__(self, workspace: Optional[str] = None, linker: Optional[Linker] = None):
        """初始化命令处理器

        Args:
            workspace: 工作区路径，默认为当前目录
            linker: 链接协调器
        """
        self.workspace, self.configuration = load_workspace_config(workspace)
        self.linker = linker or Linker()
        logger.debug("StatusCommand initialized", workspace=str(self.workspace))

    def execute(self) -> List[LinkReport]:
        return self.linker.status(self.workspace, self.configuration)


def run_status(ctx: click.Context) -> None:
    """执行 status 并输出，出错时以状态码 1 退出"""
    formatter = OutputFormatter(FormatterConfig(**ctx.obj['formatter_config']))
    try:
        reports = StatusCommand(ctx.obj['workspace']).execute()
    except IdotException as e:
        click.echo(formatter.error(str(e)), err=True)
        ctx.exit(1)

    for report in reports:
        click.echo(formatter.format_report(report))


@click.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """显示符号链接状态"""
    run_status(ctx)
