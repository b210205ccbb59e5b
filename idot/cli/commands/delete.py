"""idot delete 命令实现

删除配置中处于激活状态、且属于当前工作区的符号链接。
"""

from typing import List, Optional

import click

from idot.core.data_structures import LinkOutcome
from idot.core.exceptions import IdotException
from idot.core.linker import Linker
from idot.core.logger import get_logger
from idot.cli.utils import OutputFormatter, FormatterConfig, load_workspace_config

logger = get_logger("delete_command")


class DeleteCommand:
    """删除命令处理器"""

    def __init__(self, workspace: Optional[str] = None, linker: Optional[Linker] = None):
        self.workspace, self.configuration = load_workspace_config(workspace)
        self.linker = linker or Linker()

    def execute(self, simulate: bool = False) -> List[LinkOutcome]:
        logger.info("Delete command started", workspace=str(self.workspace), simulate=simulate)
        return self.linker.delete(self.workspace, self.configuration, simulate=simulate)


@click.command()
@click.pass_context
def delete(ctx: click.Context) -> None:
    """按配置删除符号链接"""
    formatter = OutputFormatter(FormatterConfig(**ctx.obj['formatter_config']))
    simulate = ctx.obj['simulate']
    try:
        outcomes = DeleteCommand(ctx.obj['workspace']).execute(simulate=simulate)
    except IdotException as e:
        click.echo(formatter.error(str(e)), err=True)
        ctx.exit(1)

    for outcome in outcomes:
        click.echo(formatter.format_outcome(outcome, "delete", simulate=simulate), err=outcome.failed)
