"""
错误类型定义

所有致命错误都继承自 CheckerError，由 CLI 层统一捕获并转换为退出码。
校验发现的问题（死链、孤立文档等）不是异常，而是以 Finding 的形式返回。
"""

from pathlib import Path


class CheckerError(Exception):
    """检查器基础异常"""


class NotFoundError(CheckerError):
    """根目录不存在或不是目录"""

    def __init__(self, path: Path, reason: str = "Path does not exist"):
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")


class DocumentReadError(CheckerError):
    """Markdown 文件无法读取或无法按 UTF-8 解码"""

    def __init__(self, path: Path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to read {path}: {cause}")
