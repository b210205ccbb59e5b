"""符号链接协调器

根据 GroupConfig 计算每个链接的状态，并据此创建或删除链接。
create / delete 支持 simulate 模式：所有判断和日志照常进行，但不修改文件系统。
单个链接的失败只记录日志，不会中断整个批次。
"""

import os
import shutil
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from idot.core.configuration import GroupConfig, LinkSpec
from idot.core.data_structures import LinkOutcome, LinkReport, LinkStatus, ResolvedLink
from idot.core.exceptions import (
    IdotException,
    InvalidPath,
    LinkAlreadyExists,
    LinkNotFound,
    LinkOperationError,
    NotASymlink,
    OwnershipViolation,
    ParentPathConflict,
)
from idot.core.logger import get_logger
from idot.core.path_resolver import (
    absolutize,
    actually_exists,
    canonicalize,
    is_symbolic,
    relative_to,
    resolve_link_content,
)

logger = get_logger("linker")


def _canonical_location(path: Path) -> Path:
    # 只解析父目录，最后一级保持原样
    return canonicalize(path.parent) / path.name


def _same_location(first: Path, second: Path) -> bool:
    if first == second:
        return True
    return _canonical_location(first) == _canonical_location(second)


def _is_within(path: Path, root: Path) -> bool:
    try:
        path.relative_to(root)
        return True
    except ValueError:
        return False


def _belongs_to(link_target: Path, workspace: Path) -> bool:
    """链接目标是否位于工作区内

    词法路径或只解析父目录后的路径，落在工作区的词法路径或真实路径下都算。
    """
    roots = (absolutize(workspace), canonicalize(workspace))
    candidates = (link_target, _canonical_location(link_target))
    return any(_is_within(candidate, root) for candidate in candidates for root in roots)


class Linker:
    """符号链接协调器

    负责链接的状态计算、创建和删除。不持有任何状态，每次调用都重新读取文件系统。
    """

    def __init__(self, logger_instance=None):
        """初始化协调器

        Args:
            logger_instance: 日志记录器实例，默认使用模块日志记录器
        """
        self.logger = logger_instance or logger

    # 公共操作

    def status(self, workspace: Path, configuration: GroupConfig) -> List[LinkReport]:
        """报告每个链接是否已激活，不修改文件系统

        Raises:
            InvalidPath: 工作区路径无法解析
        """
        workspace = absolutize(workspace)
        reports = []

        for spec, resolved, error in self._resolve_all(workspace, configuration):
            if error is not None:
                self.logger.error("Invalid link", link=spec.link, error=str(error))
                reports.append(LinkReport(link=spec.link, path=None, target=None, error=str(error)))
                continue

            status, needs_update = self.link_status(resolved)
            if status == LinkStatus.ACTIVE:
                self.logger.info("Link active", link=str(resolved.path), target=str(resolved.target))
            else:
                self.logger.info("Link inactive", link=str(resolved.path), target=str(resolved.target))
            reports.append(LinkReport(
                link=spec.link,
                path=resolved.path,
                target=resolved.target,
                status=status,
                needs_update=needs_update,
            ))

        return reports

    def create(self, workspace: Path, configuration: GroupConfig, simulate: bool = False) -> List[LinkOutcome]:
        """按配置创建链接

        Raises:
            InvalidPath: 工作区路径无法解析
        """
        workspace = absolutize(workspace)
        outcomes = []

        for spec, resolved, error in self._resolve_all(workspace, configuration):
            if error is not None:
                self.logger.error("Failed to create link", link=spec.link, error=str(error))
                outcomes.append(LinkOutcome(
                    link=spec.link, path=None, target=None, success=False, error=str(error)
                ))
                continue

            try:
                self._create_link(resolved, simulate)
            except IdotException as e:
                self.logger.error(
                    "Failed to create link",
                    link=spec.link,
                    error=str(e),
                    simulate=simulate,
                )
                outcomes.append(LinkOutcome(
                    link=spec.link,
                    path=resolved.path,
                    target=resolved.target,
                    success=False,
                    error=str(e),
                ))
                continue

            self.logger.info(
                "Created link",
                link=str(resolved.path),
                target=str(resolved.target),
                simulate=simulate,
            )
            outcomes.append(LinkOutcome(link=spec.link, path=resolved.path, target=resolved.target))

        return outcomes

    def delete(self, workspace: Path, configuration: GroupConfig, simulate: bool = False) -> List[LinkOutcome]:
        """删除属于当前工作区且处于激活状态的链接

        Raises:
            InvalidPath: 工作区路径无法解析
        """
        workspace = absolutize(workspace)
        outcomes = []

        for spec, resolved, error in self._resolve_all(workspace, configuration):
            if error is not None:
                self.logger.error("Failed to delete link", link=spec.link, error=str(error))
                outcomes.append(LinkOutcome(
                    link=spec.link, path=None, target=None, success=False, error=str(error)
                ))
                continue

            status, _ = self.link_status(resolved)
            if status != LinkStatus.ACTIVE:
                self.logger.debug("Don't need delete", link=str(resolved.path))
                outcomes.append(LinkOutcome(
                    link=spec.link, path=resolved.path, target=resolved.target, skipped=True
                ))
                continue

            try:
                self._delete_link(workspace, resolved.path, simulate)
            except IdotException as e:
                self.logger.error(
                    "Failed to delete link",
                    link=spec.link,
                    error=str(e),
                    simulate=simulate,
                )
                outcomes.append(LinkOutcome(
                    link=spec.link,
                    path=resolved.path,
                    target=resolved.target,
                    success=False,
                    error=str(e),
                ))
                continue

            self.logger.info("Deleted link", link=str(resolved.path), simulate=simulate)
            outcomes.append(LinkOutcome(link=spec.link, path=resolved.path, target=resolved.target))

        return outcomes

    def link_status(self, resolved: ResolvedLink) -> Tuple[LinkStatus, bool]:
        """计算单个链接的状态

        Returns:
            (状态, 是否需要更新存储形式)。存储形式（相对/绝对）与配置不符时
            仍然视为 ACTIVE，但第二项为 True。
        """
        path = resolved.path
        if not actually_exists(path):
            self.logger.debug("Link does not exist", link=str(path))
            return LinkStatus.INACTIVE, False
        if not is_symbolic(path):
            self.logger.debug("Not a symbolic link", link=str(path))
            return LinkStatus.INACTIVE, False

        try:
            content = Path(os.readlink(path))
            link_target = resolve_link_content(path)
        except (OSError, InvalidPath) as e:
            self.logger.debug("Failed to read link", link=str(path), error=str(e))
            return LinkStatus.INACTIVE, False

        if not _same_location(link_target, resolved.target):
            self.logger.debug("Link points elsewhere", link=str(path), content=str(content))
            return LinkStatus.INACTIVE, False

        if resolved.relative == (not content.is_absolute()):
            self.logger.debug("Link matches", link=str(path), content=str(content))
            return LinkStatus.ACTIVE, False

        self.logger.debug("Link matches, need update", link=str(path), content=str(content))
        return LinkStatus.ACTIVE, True

    # 私有方法

    def _resolve_all(
        self,
        workspace: Path,
        configuration: GroupConfig,
    ) -> Iterator[Tuple[LinkSpec, Optional[ResolvedLink], Optional[InvalidPath]]]:
        for spec in configuration.links.values():
            try:
                yield spec, self._resolve(workspace, configuration, spec), None
            except InvalidPath as e:
                yield spec, None, e

    @staticmethod
    def _resolve(workspace: Path, configuration: GroupConfig, spec: LinkSpec) -> ResolvedLink:
        return ResolvedLink(
            link=spec.link,
            path=absolutize(spec.link),
            target=absolutize(workspace / spec.target),
            relative=configuration.effective_relative(spec),
            force=configuration.effective_force(spec),
        )

    def _create_link(self, resolved: ResolvedLink, simulate: bool) -> None:
        path = resolved.path
        parent = path.parent
        content = resolved.target

        if not os.path.isdir(parent):
            if actually_exists(parent):
                self.logger.debug("Parent path exists but is not a directory", parent=str(parent))
                if not resolved.force:
                    raise ParentPathConflict(
                        f"`{parent}` exists but is not a directory.", link=resolved.link
                    )
                self.logger.debug("Force clean the parent path", parent=str(parent))
                if not simulate:
                    self._run(resolved.link, "remove parent", os.remove, parent)
            self.logger.debug("Create parent directory", parent=str(parent))
            if not simulate:
                self._run(resolved.link, "create parent", os.makedirs, parent, exist_ok=True)

        if resolved.relative:
            relative = relative_to(resolved.target, canonicalize(parent))
            if relative is not None:
                content = relative

        if actually_exists(path):
            if not resolved.force:
                raise LinkAlreadyExists(f"`{path}` already exists.", link=resolved.link)
            if os.path.isfile(path) or is_symbolic(path):
                self.logger.debug("Force to delete file", path=str(path))
                if not simulate:
                    self._run(resolved.link, "remove existing file", os.remove, path)
            else:
                self.logger.debug("Force to delete directory", path=str(path))
                if not simulate:
                    self._run(resolved.link, "remove existing directory", shutil.rmtree, path)

        self.logger.debug("Create symbolic link", path=str(path), content=str(content))
        if not simulate:
            self._run(resolved.link, "create link", os.symlink, content, path)

    def _delete_link(self, workspace: Path, path: Path, simulate: bool) -> None:
        if not actually_exists(path):
            raise LinkNotFound(f"`{path}` is not exists.", link=str(path))
        if not is_symbolic(path):
            raise NotASymlink(f"`{path}` is not a symbolic link.", link=str(path))

        try:
            link_target = resolve_link_content(path)
        except OSError as e:
            raise LinkOperationError(
                f"Failed to read link `{path}`.", link=str(path), step="read link", details=str(e)
            ) from e

        if not _belongs_to(link_target, workspace):
            raise OwnershipViolation(
                f"`{path}` is not belong to current workspace.",
                link=str(path),
                details=str(link_target),
            )

        if not simulate:
            self._run(str(path), "remove link", os.remove, path)

    @staticmethod
    def _run(link: str, step: str, func, *args, **kwargs) -> None:
        """执行文件系统操作，将 OSError 包装为 LinkOperationError"""
        try:
            func(*args, **kwargs)
        except OSError as e:
            raise LinkOperationError(
                f"Failed to {step} for `{link}`.", link=link, step=step, details=str(e)
            ) from e

