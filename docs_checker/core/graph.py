"""
链接图模块 - 由文档序列构建只读的 CorpusGraph

文档按序存放在元组中，链接边只保存整数下标（源文档、目标文档），
不直接引用 Document 对象。图在一次运行中构建一次，之后只读。
"""

from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from docs_checker.core.loader import MARKDOWN_SUFFIXES, Document
from docs_checker.core.parser import LinkKind

# 链接指向目录时，依次尝试的索引文件（GitHub 会自动渲染）
INDEX_FILES = ("README.md", "readme.md", "index.md", "INDEX.md")


@dataclass(frozen=True)
class LinkEdge:
    """
    链接边

    Attributes:
        source: 源文档下标
        link_index: 链接在源文档 links 中的位置
        kind: 链接类型
        resolved_path: 规范化后的根相对路径；外部链接、越出根目录或空目标为 None
        target: 目标文档下标；未解析到语料库中的文档时为 None
        exists_on_disk: 非 Markdown 目标在磁盘上是否存在
    """
    source: int
    link_index: int
    kind: LinkKind
    resolved_path: Optional[str] = None
    target: Optional[int] = None
    exists_on_disk: bool = False


@dataclass(frozen=True)
class CorpusGraph:
    """
    语料库链接图

    Attributes:
        documents: 按路径排序的文档
        edges: 按 (源文档, 链接位置) 排序的链接边
    """
    documents: tuple[Document, ...]
    edges: tuple[LinkEdge, ...]
    _index: dict[str, int] = field(default_factory=dict, repr=False, compare=False)

    def find(self, path: str) -> Optional[int]:
        """按相对路径查找文档下标"""
        return self._index.get(path)

    def reachable_from(self, start: int) -> set[int]:
        """从 start 出发，沿已解析的文件链接可达的文档下标（含 start）"""
        adjacency: dict[int, set[int]] = {}
        for edge in self.edges:
            if edge.kind is LinkKind.RELATIVE_FILE and edge.target is not None:
                adjacency.setdefault(edge.source, set()).add(edge.target)

        seen = {start}
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for nxt in sorted(adjacency.get(current, ())):
                if nxt not in seen:
                    seen.add(nxt)
                    queue.append(nxt)
        return seen


def normalize_link_path(source_dir: str, link_path: str) -> Optional[str]:
    """
    将链接路径解析为根相对的规范路径

    Args:
        source_dir: 源文档所在目录（根目录为空字符串）
        link_path: 链接中的文件部分（以 / 开头时从根目录解析）

    Returns:
        规范化的 POSIX 路径（根目录本身为空字符串）；越出根目录时返回 None
    """
    if link_path.startswith("/"):
        parts: list[str] = []
    else:
        parts = source_dir.split("/") if source_dir else []

    for segment in link_path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if not parts:
                return None
            parts.pop()
        else:
            parts.append(segment)

    return "/".join(parts)


def _resolve_document(resolved: str, index: dict[str, int]) -> Optional[int]:
    if resolved in index:
        return index[resolved]
    # 目录链接：查找索引文件
    for name in INDEX_FILES:
        candidate = f"{resolved}/{name}" if resolved else name
        if candidate in index:
            return index[candidate]
    return None


def build_graph(documents: Sequence[Document], root: Optional[Path] = None) -> CorpusGraph:
    """
    构建链接图

    Args:
        documents: 文档序列（会按路径重新排序）
        root: 语料库根目录，用于检查非 Markdown 目标；None 时不检查磁盘

    Returns:
        CorpusGraph 对象
    """
    ordered = tuple(sorted(documents, key=lambda d: d.path))
    index = {doc.path: i for i, doc in enumerate(ordered)}
    edges: list[LinkEdge] = []

    for source, doc in enumerate(ordered):
        for link_index, link in enumerate(doc.links):
            if link.kind is LinkKind.EXTERNAL:
                edges.append(LinkEdge(source, link_index, link.kind))
                continue

            if link.kind is LinkKind.ANCHOR:
                edges.append(LinkEdge(source, link_index, link.kind, doc.path, source))
                continue

            if not link.path:
                edges.append(LinkEdge(source, link_index, link.kind))
                continue

            resolved = normalize_link_path(doc.directory, link.path)
            if resolved is None:
                edges.append(LinkEdge(source, link_index, link.kind))
                continue

            target = _resolve_document(resolved, index)
            exists = False
            if target is None and root is not None and not resolved.lower().endswith(MARKDOWN_SUFFIXES):
                exists = (root / resolved).exists()

            edges.append(LinkEdge(
                source=source,
                link_index=link_index,
                kind=link.kind,
                resolved_path=resolved,
                target=target,
                exists_on_disk=exists,
            ))

    return CorpusGraph(documents=ordered, edges=tuple(edges), _index=index)
