"""工作区解析工具

把命令行给出的工作区路径转成绝对路径，并加载其中的配置文件。
"""

from pathlib import Path
from typing import Optional, Tuple

from idot.core.configuration import ConfigManager, GroupConfig
from idot.core.exceptions import InvalidPath
from idot.core.path_resolver import absolutize


def resolve_workspace(path: Optional[str] = None) -> Path:
    """解析工作区目录

    Raises:
        InvalidPath: 路径无法解析或不是目录
    """
    workspace = absolutize(path or ".")
    if not workspace.is_dir():
        raise InvalidPath(f"Invalid workspace path: {workspace}", details="not a directory")
    return workspace


def load_workspace_config(path: Optional[str] = None) -> Tuple[Path, GroupConfig]:
    """解析工作区并加载其配置

    Raises:
        InvalidPath: 工作区无效
        ConfigException: 配置缺失或无效
    """
    workspace = resolve_workspace(path)
    return workspace, ConfigManager(workspace).load_config()
