"""配置管理器

在工作区中查找 idot.json / idot.toml / idot.yaml，按扩展名选择反序列化方式，
验证结构并转换为 GroupConfig。
"""

import json
import tomllib
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

from idot.core.exceptions import ConfigurationInvalid, ConfigurationMissing
from idot.core.logger import get_logger
from idot.core.path_resolver import absolutize

logger = get_logger("configuration")


class ConfigFormat(Enum):
    """配置文件格式"""
    JSON = "json"
    TOML = "toml"
    YAML = "yaml"

    @classmethod
    def from_path(cls, path: Path) -> "ConfigFormat":
        """根据扩展名选择格式

        Raises:
            ConfigurationInvalid: 不支持的扩展名
        """
        suffix = Path(path).suffix.lower().lstrip(".")
        if suffix == "yml":
            suffix = "yaml"
        try:
            return cls(suffix)
        except ValueError:
            raise ConfigurationInvalid(
                f"不支持的配置文件格式: {path}",
                details=f"支持的格式: {', '.join(f.value for f in cls)}"
            )


_DESERIALIZERS: Dict[ConfigFormat, Callable[[str], Any]] = {
    ConfigFormat.JSON: json.loads,
    ConfigFormat.TOML: tomllib.loads,
    ConfigFormat.YAML: yaml.safe_load,
}

_PARSE_ERRORS = (json.JSONDecodeError, tomllib.TOMLDecodeError, yaml.YAMLError)


@dataclass(frozen=True)
class LinkSpec:
    """单个链接的期望状态"""
    link: str
    target: str
    relative: Optional[bool] = None
    force: Optional[bool] = None


@dataclass(frozen=True)
class CleanTarget:
    force: Optional[bool] = None


@dataclass(frozen=True)
class CleanConfig:
    """clean 子配置，仅加载保留"""
    targets: Dict[str, CleanTarget] = field(default_factory=dict)
    force: Optional[bool] = None


@dataclass(frozen=True)
class GroupConfig:
    """一组链接及其组级默认值"""
    links: Dict[str, LinkSpec] = field(default_factory=dict)
    clean: Optional[CleanConfig] = None
    relative: Optional[bool] = True
    force: Optional[bool] = None

    def effective_relative(self, spec: LinkSpec) -> bool:
        """链接级 > 组级 > False"""
        if spec.relative is not None:
            return spec.relative
        if self.relative is not None:
            return self.relative
        return False

    def effective_force(self, spec: LinkSpec) -> bool:
        """链接级 > 组级 > False"""
        if spec.force is not None:
            return spec.force
        if self.force is not None:
            return self.force
        return False

    def with_force(self, force: bool) -> "GroupConfig":
        """返回覆盖了组级 force 的副本"""
        return replace(self, force=force)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GroupConfig":
        """从已验证的字典构建配置"""
        links = {
            name: LinkSpec(
                link=name,
                target=entry["target"],
                relative=entry.get("relative"),
                force=entry.get("force"),
            )
            for name, entry in (data.get("links") or {}).items()
        }

        clean = None
        if data.get("clean") is not None:
            raw_clean = data["clean"]
            clean = CleanConfig(
                targets={
                    name: CleanTarget(force=(entry or {}).get("force"))
                    for name, entry in (raw_clean.get("targets") or {}).items()
                },
                force=raw_clean.get("force"),
            )

        return cls(
            links=links,
            clean=clean,
            relative=data.get("relative", True),
            force=data.get("force"),
        )


def _check_optional_bool(errors: List[str], data: Dict[str, Any], key: str, where: str) -> None:
    value = data.get(key)
    if value is not None and not isinstance(value, bool):
        errors.append(f"{where}{key} must be a boolean")


def validate_config(data: Any) -> None:
    """验证配置结构

    Raises:
        ConfigurationInvalid: 结构不合法时抛出，details 中列出所有错误
    """
    errors = []

    if not isinstance(data, dict):
        raise ConfigurationInvalid(
            "Configuration must be a mapping",
            details=f"got {type(data).__name__}"
        )

    _check_optional_bool(errors, data, "relative", "")
    _check_optional_bool(errors, data, "force", "")

    links = data.get("links")
    if links is not None:
        if not isinstance(links, dict):
            errors.append("links must be a mapping")
        else:
            for name, entry in links.items():
                if not isinstance(name, str):
                    errors.append(f"links.{name} must be a string path")
                    continue
                if not isinstance(entry, dict):
                    errors.append(f"links.{name} must be a mapping")
                    continue
                if not isinstance(entry.get("target"), str) or not entry["target"]:
                    errors.append(f"links.{name}.target must be a non-empty string")
                _check_optional_bool(errors, entry, "relative", f"links.{name}.")
                _check_optional_bool(errors, entry, "force", f"links.{name}.")

    clean = data.get("clean")
    if clean is not None:
        if not isinstance(clean, dict):
            errors.append("clean must be a mapping")
        else:
            _check_optional_bool(errors, clean, "force", "clean.")
            targets = clean.get("targets")
            if targets is not None and not isinstance(targets, dict):
                errors.append("clean.targets must be a mapping")
            elif targets:
                for name, entry in targets.items():
                    if entry is None:
                        continue
                    if not isinstance(entry, dict):
                        errors.append(f"clean.targets.{name} must be a mapping")
                        continue
                    _check_optional_bool(errors, entry, "force", f"clean.targets.{name}.")

    if errors:
        logger.error("Configuration validation failed", errors=errors)
        raise ConfigurationInvalid(
            "Configuration validation failed",
            details="; ".join(errors)
        )


class ConfigManager:
    """配置管理器

    负责查找并加载工作区中的 idot 配置文件。
    """

    CONFIG_FILENAMES = ("idot.json", "idot.toml", "idot.yaml", "idot.yml")

    def __init__(self, workspace: Optional[Path] = None):
        """初始化配置管理器

        Args:
            workspace: 工作区目录，默认为当前目录
        """
        self.workspace = absolutize(workspace) if workspace else Path.cwd()

    def detect_config_path(self) -> Optional[Path]:
        """按 json、toml、yaml 的顺序查找第一个存在的配置文件"""
        if not self.workspace.is_dir():
            return None
        for filename in self.CONFIG_FILENAMES:
            candidate = self.workspace / filename
            if candidate.is_file():
                return candidate
        return None

    def load_config(self, config_path: Optional[Path] = None) -> GroupConfig:
        """加载配置文件

        Args:
            config_path: 配置文件路径，如果为 None 则在工作区中查找

        Returns:
            GroupConfig

        Raises:
            ConfigurationMissing: 找不到配置文件
            ConfigurationInvalid: 读取、解析或验证失败
        """
        path = Path(config_path) if config_path else self.detect_config_path()
        if path is None or not path.is_file():
            logger.error("Configuration file not found", workspace=str(self.workspace))
            raise ConfigurationMissing(
                "Not found configuration file",
                details=str(path or self.workspace)
            )

        config_format = ConfigFormat.from_path(path)
        logger.info("Loading configuration", path=str(path), format=config_format.value)

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read configuration file", path=str(path), error=str(e))
            raise ConfigurationInvalid("Failed to load configuration file.", details=str(e)) from e

        try:
            data = _DESERIALIZERS[config_format](content)
        except _PARSE_ERRORS as e:
            logger.error("Failed to parse configuration", path=str(path), error=str(e))
            raise ConfigurationInvalid("Failed to convert configuration.", details=str(e)) from e

        if data is None:
            logger.warning("Configuration file is empty", path=str(path))
            data = {}

        validate_config(data)
        config = GroupConfig.from_dict(data)
        logger.debug("Configuration loaded", path=str(path), links=len(config.links))
        return config


def load_configuration(workspace: Path) -> GroupConfig:
    """查找并加载工作区配置"""
    return ConfigManager(workspace).load_config()
