"""idot 异常体系"""


class IdotException(Exception):
    """基础异常类"""
    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} -> {self.details}"
        return self.message


class InvalidPath(IdotException):
    """路径无法展开或转换为绝对路径"""
    pass


# 配置相关异常
class ConfigException(IdotException):
    """配置异常"""
    pass


class ConfigurationMissing(ConfigException):
    """未找到配置文件"""
    pass


class ConfigurationInvalid(ConfigException):
    """配置文件读取、解析或验证失败"""
    pass


# 符号链接异常
class LinkException(IdotException):
    """符号链接异常"""
    def __init__(self, message: str, link: str = None, details: str = None):
        super().__init__(message, details=details)
        self.link = link


class ParentPathConflict(LinkException):
    """父路径被非目录占用"""
    pass


class LinkAlreadyExists(LinkException):
    """链接位置已被占用"""
    pass


class LinkNotFound(LinkException):
    """符号链接不存在"""
    pass


class NotASymlink(LinkException):
    """路径不是符号链接"""
    pass


class OwnershipViolation(LinkException):
    """链接目标不属于当前工作区"""
    pass


class LinkOperationError(LinkException):
    """文件系统操作失败"""
    def __init__(self, message: str, link: str = None, step: str = None, details: str = None):
        super().__init__(message, link=link, details=details)
        self.step = step
