"""结构化日志系统

基于 structlog 的日志记录器，所有事件都汇入标准库 ``idot`` 日志命名空间。"""

import logging
from pathlib import Path
from typing import Optional

import structlog


ROOT_LOGGER_NAME = "idot"


class LoggerConfig:
    """日志配置类"""

    def __init__(
        self,
        log_dir: Optional[Path] = None,
        level: str = "INFO",
        json_output: bool = False,
        console_output: bool = False,
    ):
        """初始化日志配置
        Args:
            log_dir: 日志目录，如果为 None 则不写入文件
            level: 日志级别 (DEBUG, INFO, WARNING, ERROR)
            json_output: 是否输出 JSON 格式
            console_output: 是否输出到控制台
        """
        self.log_dir = log_dir
        self.level = level
        self.json_output = json_output
        self.console_output = console_output


def _setup_structlog(config: LoggerConfig) -> None:
    """配置 structlog 以及 ``idot`` 标准库日志记录器"""
    handlers = []

    # 添加控制台处理器
    if config.console_output:
        handlers.append(logging.StreamHandler())

    # 添加文件处理器
    if config.log_dir:
        log_dir = Path(config.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / "idot.log"))

    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if not handlers:
        handlers.append(logging.NullHandler())
    for handler in handlers:
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    root.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
            if config.json_output
            else structlog.dev.ConsoleRenderer(colors=config.console_output),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


class Logger:
    """结构化日志记录器

    对 structlog 的轻量包装，事件名加键值上下文。
    """

    def __init__(self, name: str = ROOT_LOGGER_NAME, logger=None):
        """初始化日志记录器

        Args:
            name: 日志记录器名称，会被放到 ``idot`` 命名空间下
            logger: 已绑定上下文的 structlog 记录器
        """
        if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        self.name = name
        self.logger = logger if logger is not None else structlog.get_logger(name)

    def debug(self, event: str, **kwargs) -> None:
        """记录 DEBUG 级别日志"""
        self.logger.debug(event, **kwargs)

    def info(self, event: str, **kwargs) -> None:
        """记录 INFO 级别日志"""
        self.logger.info(event, **kwargs)

    def warning(self, event: str, **kwargs) -> None:
        """记录 WARNING 级别日志"""
        self.logger.warning(event, **kwargs)

    def error(self, event: str, **kwargs) -> None:
        """记录 ERROR 级别日志"""
        self.logger.error(event, **kwargs)

    def bind(self, **kwargs) -> 'Logger':
        """绑定上下文信息到日志记录器

        Args:
            **kwargs: 要绑定的上下文信息

        Returns:
            新的日志记录器实例，绑定了指定的上下文
        """
        return Logger(self.name, self.logger.bind(**kwargs))


_configured = False


def configure_logger(config: LoggerConfig) -> None:
    """配置全局日志输出
    Args:
        config: 日志配置对象
    """
    global _configured
    _setup_structlog(config)
    _configured = True


def get_logger(name: str = ROOT_LOGGER_NAME) -> Logger:
    """获取日志记录器实例

    首次调用时如果尚未配置，则使用默认配置（不输出）。

    Args:
        name: 日志记录器名称

    Returns:
        日志记录器实例
    """
    if not _configured:
        configure_logger(LoggerConfig())
    return Logger(name)
