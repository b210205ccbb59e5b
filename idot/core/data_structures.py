"""idot 核心数据结构定义

定义链接状态、解析后的链接以及各操作的结果对象。"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class LinkStatus(Enum):
    """链接状态枚举"""
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class ResolvedLink:
    """合并组默认值后的链接

    path 和 target 均为绝对路径。
    """
    link: str
    path: Path
    target: Path
    relative: bool
    force: bool


@dataclass
class LinkReport:
    """status 的单条结果"""
    link: str
    path: Optional[Path]
    target: Optional[Path]
    status: LinkStatus = LinkStatus.INACTIVE
    needs_update: bool = False
    error: Optional[str] = None

    @property
    def is_active(self) -> bool:
        """是否处于激活状态"""
        return self.status == LinkStatus.ACTIVE


@dataclass
class LinkOutcome:
    """create / delete 的单条结果"""
    link: str
    path: Optional[Path]
    target: Optional[Path]
    success: bool = True
    skipped: bool = False
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return not self.success
