"""CLI 工具包导出"""

from .formatting import (
    OutputFormatter,
    FormatterConfig,
    Color
)
from .workspace import resolve_workspace, load_workspace_config

__all__ = [
    'OutputFormatter',
    'FormatterConfig',
    'Color',
    'resolve_workspace',
    'load_workspace_config',
]
