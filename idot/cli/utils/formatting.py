"""CLI 输出格式化工具

提供颜色和单行消息的格式化功能。"""

from typing import Optional

from idot.core.data_structures import LinkOutcome, LinkReport


class Color:
    """ANSI 颜色代码"""
    RESET = '\033[0m'

    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'


class FormatterConfig:
    """格式化配置中心"""

    def __init__(self, no_color: bool = False):
        """初始化配置
        Args:
            no_color: 是否禁用颜色输出
        """
        self.no_color = no_color

    def colorize(self, text: str, color: str) -> str:
        """根据配置为文本添加 ANSI 颜色
        Args:
            text: 目标文本
            color: ANSI 颜色代码
        Returns:
            格式化后的文本
        """
        if self.no_color:
            return text
        return f"{color}{text}{Color.RESET}"


class OutputFormatter:
    """CLI 输出格式化器实现"""

    def __init__(self, config: Optional[FormatterConfig] = None):
        """初始化格式化器
        Args:
            config: 格式化配置
        """
        self.config = config or FormatterConfig()

    def success(self, message: str) -> str:
        """格式化成功消息"""
        prefix = self.config.colorize("+", Color.GREEN)
        return f"{prefix} {message}"

    def error(self, message: str) -> str:
        """格式化错误消息"""
        prefix = self.config.colorize("-", Color.RED)
        return f"{prefix} {message}"

    def info(self, message: str) -> str:
        """格式化普通信息消息"""
        prefix = self.config.colorize("*", Color.BLUE)
        return f"{prefix} {message}"

    def format_report(self, report: LinkReport) -> str:
        """格式化一条状态结果：激活为绿色，未激活为红色"""
        if report.error is not None:
            return self.error(f"`{report.link}`: {report.error}")

        color = Color.GREEN if report.is_active else Color.RED
        line = f"`{self.config.colorize(str(report.path), color)}` -> `{report.target}`."
        if report.needs_update:
            line += " " + self.config.colorize("(need update)", Color.YELLOW)
        return line

    def format_outcome(self, outcome: LinkOutcome, action: str, simulate: bool = False) -> str:
        """格式化一条 create / delete 结果"""
        suffix = " (simulate)" if simulate else ""
        if outcome.failed:
            return self.error(f"Failed to {action} `{outcome.link}`. {outcome.error}")
        if outcome.skipped:
            return self.info(f"Skip `{outcome.path}`: not active.")
        if outcome.target is not None and action == "create":
            return self.success(f"Create `{outcome.path}` -> `{outcome.target}`.{suffix}")
        return self.success(f"{action.capitalize()} `{outcome.path}`.{suffix}")
