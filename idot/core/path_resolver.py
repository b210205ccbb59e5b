"""路径解析工具

展开 ``~``、词法规范化为绝对路径、计算相对路径，
以及能够容忍破损符号链接的存在性判断。
"""

import os
from pathlib import Path
from typing import Optional, Union

from idot.core.exceptions import InvalidPath

PathLike = Union[str, os.PathLike]


def absolutize(path: PathLike) -> Path:
    """将路径转换为规范化的绝对路径

    展开开头的 ``~`` 或 ``~user``，再基于当前目录转为绝对路径并消除
    ``.`` 和 ``..``。不要求路径存在，也不解析符号链接。

    Args:
        path: 待处理的路径

    Returns:
        绝对路径

    Raises:
        InvalidPath: 无法确定用户主目录时抛出
    """
    raw = os.fspath(path)
    if raw.startswith("~"):
        try:
            raw = os.fspath(Path(raw).expanduser())
        except RuntimeError as e:
            raise InvalidPath(f"无法展开主目录: {raw}", details=str(e)) from e
        if raw.startswith("~"):
            raise InvalidPath(f"无法展开主目录: {raw}")
    return Path(os.path.abspath(raw))


def relative_to(path: PathLike, base: PathLike) -> Optional[Path]:
    """计算从 base 到 path 的相对路径

    纯词法计算，path 应为绝对路径，base 会先经过 absolutize。

    Returns:
        相对路径；无法表示时（例如 Windows 上不同盘符）返回 None
    """
    try:
        base = absolutize(base)
    except InvalidPath:
        return None
    try:
        return Path(os.path.relpath(os.fspath(path), os.fspath(base)))
    except ValueError:
        return None


def actually_exists(path: PathLike) -> bool:
    """路径存在，或是一个目标已不存在的符号链接"""
    return os.path.lexists(path)


def is_symbolic(path: PathLike) -> bool:
    """根据条目自身的元数据判断是否为符号链接，不存在时返回 False"""
    return os.path.islink(path)


def resolve_link_content(link: PathLike) -> Path:
    """读取符号链接内容并解析为绝对路径

    相对内容基于链接所在目录的真实路径解析，与内核的解析方式一致。
    """
    link = Path(link)
    content = Path(os.readlink(link))
    if content.is_absolute():
        return absolutize(content)
    return absolutize(canonicalize(link.parent) / content)


def canonicalize(path: PathLike) -> Path:
    """解析路径中所有已存在部分的符号链接"""
    return Path(os.path.realpath(os.fspath(path)))
