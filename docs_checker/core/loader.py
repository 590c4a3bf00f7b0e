"""
Markdown 加载器模块 - 发现并解析语料库中的所有 Markdown 文件

加载流程：
1. 校验根目录
2. 遍历目录树，按忽略规则过滤，收集 .md / .markdown 文件
3. 读取并解析每个文件（可并行）
4. 按相对路径的字典序返回 Document 序列
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from docs_checker.core.parser import Heading, Link, ParseIssue, parse_markdown
from docs_checker.errors import DocumentReadError, NotFoundError
from docs_checker.filters import PathspecFilter

logger = logging.getLogger(__name__)


MARKDOWN_SUFFIXES = (".md", ".markdown")


@dataclass(frozen=True)
class Document:
    """
    单个 Markdown 文档

    Attributes:
        path: 相对根目录的 POSIX 路径
        raw_text: 原始内容
        headings: 标题序列
        links: 链接序列
        issues: 解析歧义
    """
    path: str
    raw_text: str
    headings: tuple[Heading, ...] = field(default_factory=tuple)
    links: tuple[Link, ...] = field(default_factory=tuple)
    issues: tuple[ParseIssue, ...] = field(default_factory=tuple)

    @property
    def directory(self) -> str:
        """文档所在目录（根目录为空字符串）"""
        parent = self.path.rpartition("/")[0]
        return parent

    @property
    def slugs(self) -> frozenset[str]:
        return frozenset(h.slug for h in self.headings)


def ensure_root(root: Path) -> Path:
    """
    校验根目录存在且可读

    Raises:
        NotFoundError: 路径不存在或不是目录
    """
    if not root.exists():
        raise NotFoundError(root)
    if not root.is_dir():
        raise NotFoundError(root, "Path is not a directory")
    if not os.access(root, os.R_OK | os.X_OK):
        raise NotFoundError(root, "Directory is not readable")
    return root.resolve()


def _on_walk_error(error: OSError) -> None:
    raise DocumentReadError(Path(error.filename or "."), error)


def discover_markdown_files(root: Path, path_filter: Optional[PathspecFilter] = None) -> list[str]:
    """
    收集根目录下所有 Markdown 文件

    Args:
        root: 根目录
        path_filter: 忽略规则，None 表示不过滤

    Returns:
        相对根目录的 POSIX 路径列表，按字典序排列
    """
    found: list[str] = []

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_walk_error):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else f"{rel_dir}/"

        if path_filter is not None:
            # 原地修改以剪掉被忽略的目录
            dirnames[:] = [d for d in dirnames if not path_filter.should_ignore(f"{prefix}{d}/")]

        for name in filenames:
            if not name.lower().endswith(MARKDOWN_SUFFIXES):
                continue
            relative = f"{prefix}{name}"
            if path_filter is not None and path_filter.should_ignore(relative):
                logger.debug(f"Ignoring {relative}")
                continue
            found.append(relative)

    return sorted(found)


def load_document(root: Path, relative_path: str) -> Document:
    """
    读取并解析单个文档

    Raises:
        DocumentReadError: 文件无法读取或不是合法 UTF-8
    """
    file_path = root / relative_path
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentReadError(file_path, e) from e

    parsed = parse_markdown(content)
    logger.debug(
        f"Parsed {relative_path}: {len(parsed.headings)} headings, "
        f"{len(parsed.links)} links, {len(parsed.issues)} parse issues"
    )
    return Document(
        path=relative_path,
        raw_text=content,
        headings=parsed.headings,
        links=parsed.links,
        issues=parsed.issues,
    )


def load_corpus(
    root: Path,
    path_filter: Optional[PathspecFilter] = None,
    jobs: int = 1,
    on_document: Optional[Callable[[Document], None]] = None,
) -> list[Document]:
    """
    加载整个语料库

    Args:
        root: 根目录
        path_filter: 忽略规则
        jobs: 并行解析的线程数，1 表示串行
        on_document: 每解析完一个文档后的回调（用于 verbose 输出）

    Returns:
        按路径字典序排列的 Document 列表，与并行度无关

    Raises:
        NotFoundError: 根目录无效
        DocumentReadError: 任一文件无法读取
    """
    root = ensure_root(root)
    paths = discover_markdown_files(root, path_filter)
    logger.debug(f"Discovered {len(paths)} Markdown files under {root}")

    if jobs > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            documents = list(pool.map(lambda p: load_document(root, p), paths))
    else:
        documents = [load_document(root, p) for p in paths]

    if on_document:
        for document in documents:
            on_document(document)

    return sorted(documents, key=lambda d: d.path)
