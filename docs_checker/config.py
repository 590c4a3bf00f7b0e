"""
运行配置

配置只来自命令行参数（根目录另可通过环境变量 DOCS_CHECKER_ROOT 覆盖），
不读取配置文件，不持久化任何状态。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from docs_checker.filters import PathspecFilter

ROOT_ENVVAR = "DOCS_CHECKER_ROOT"

OUTPUT_FORMATS = ("text", "rich", "json")


@dataclass
class CheckerConfig:
    """
    一次检查运行的配置

    Attributes:
        root: 语料库根目录
        hub: 中心文档相对路径，None 时自动查找 README.md / index.md
        warnings_nonfatal: 警告级别问题不影响退出码
        jobs: 并行解析线程数
        exclude: 额外的忽略模式（gitwildmatch）
        use_gitignore: 是否应用根目录的 .gitignore
        output_format: text / rich / json
    """
    root: Path = field(default_factory=lambda: Path("."))
    hub: Optional[str] = None
    warnings_nonfatal: bool = False
    jobs: int = 1
    exclude: list[str] = field(default_factory=list)
    use_gitignore: bool = True
    output_format: str = "text"

    def __post_init__(self) -> None:
        if self.jobs < 1:
            raise ValueError(f"jobs must be >= 1, got {self.jobs}")
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unknown output format '{self.output_format}', expected one of: {', '.join(OUTPUT_FORMATS)}"
            )

    def build_filter(self, root: Path) -> PathspecFilter:
        return PathspecFilter(root, extra_patterns=self.exclude, use_gitignore=self.use_gitignore)
