"""
链接图验证器模块 - 检查语料库的引用完整性与结构一致性

执行以下验证：
1. 文件链接验证：相对路径链接是否指向语料库中存在的文档
2. 锚点验证：锚点是否对应目标文档（或本文档）中的标题
3. 重复标题检测：同一文档中产生相同基础 slug 的标题
4. 孤立文档检测：从中心文档出发不可达的文档
5. 解析歧义：未闭合的代码围栏、格式错误的链接

所有问题一次性收集并按 (文档路径, 行号, 文档内位置) 排序，不会提前终止。
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal, Optional, Sequence

from docs_checker.core.graph import CorpusGraph, LinkEdge, build_graph, normalize_link_path
from docs_checker.core.loader import Document
from docs_checker.core.parser import LinkKind

logger = logging.getLogger(__name__)


# 未指定中心文档时按顺序查找
DEFAULT_HUB_CANDIDATES = ("README.md", "readme.md", "index.md")


class FindingKind(str, Enum):
    """问题类型"""
    BROKEN_FILE_LINK = "BrokenFileLink"
    BROKEN_ANCHOR_LINK = "BrokenAnchorLink"
    DUPLICATE_SLUG = "DuplicateSlug"
    ORPHAN_DOCUMENT = "OrphanDocument"
    PARSE_WARNING = "ParseWarning"


SEVERITIES: dict[FindingKind, Literal["error", "warning"]] = {
    FindingKind.BROKEN_FILE_LINK: "error",
    FindingKind.BROKEN_ANCHOR_LINK: "error",
    FindingKind.DUPLICATE_SLUG: "warning",
    FindingKind.ORPHAN_DOCUMENT: "warning",
    FindingKind.PARSE_WARNING: "warning",
}


@dataclass(frozen=True)
class Finding:
    """
    检查问题

    Attributes:
        kind: 问题类型
        path: 所在文档的相对路径
        line_number: 行号（孤立文档为 1）
        target: 出问题的链接目标 / slug / 片段
        message: 问题描述
        position: 文档内的顺序号，用于稳定排序
    """
    kind: FindingKind
    path: str
    line_number: int
    target: str
    message: str
    position: int = 0

    @property
    def severity(self) -> Literal["error", "warning"]:
        return SEVERITIES[self.kind]

    @property
    def sort_key(self) -> tuple[str, int, int, str, str]:
        return (self.path, self.line_number, self.position, self.kind.value, self.target)


@dataclass
class ValidationResult:
    """
    验证结果

    Attributes:
        findings: 排序后的问题列表
        stats: 统计信息
        hub: 使用的中心文档（没有则为 None）
    """
    findings: list[Finding] = field(default_factory=list)
    stats: dict[str, int] = field(default_factory=dict)
    hub: Optional[str] = None

    @property
    def errors(self) -> int:
        return sum(1 for f in self.findings if f.severity == "error")

    @property
    def warnings(self) -> int:
        return sum(1 for f in self.findings if f.severity == "warning")

    def counts_by_kind(self) -> dict[str, int]:
        """按问题类型计数（顺序固定，与 FindingKind 一致）"""
        counter = Counter(f.kind for f in self.findings)
        return {kind.value: counter.get(kind, 0) for kind in FindingKind}

    def is_failure(self, warnings_nonfatal: bool = False) -> bool:
        """
        是否应以失败状态退出

        默认任何问题都视为失败；warnings_nonfatal 为 True 时只有 error 级别问题才失败。
        """
        if warnings_nonfatal:
            return self.errors > 0
        return bool(self.findings)


class Validator:
    """验证器"""

    def __init__(self, root: Optional[Path] = None, hub: Optional[str] = None):
        """
        初始化验证器

        Args:
            root: 语料库根目录（用于检查非 Markdown 链接目标）
            hub: 中心文档的相对路径，None 时自动查找
        """
        self.root = root
        self.hub = hub

    def validate(self, documents: Sequence[Document]) -> ValidationResult:
        """
        构建链接图并执行所有检查

        Args:
            documents: 加载器返回的文档序列

        Returns:
            ValidationResult 对象
        """
        graph = build_graph(documents, self.root)
        return self.validate_graph(graph)

    def validate_graph(self, graph: CorpusGraph) -> ValidationResult:
        findings: list[Finding] = []
        findings.extend(self.check_parse_issues(graph))
        findings.extend(self.check_duplicate_slugs(graph))
        findings.extend(self.check_links(graph))

        hub = self.find_hub(graph)
        if hub is None:
            if graph.documents:
                logger.warning("No hub document found, skipping orphan detection")
        else:
            findings.extend(self.check_orphans(graph, hub))

        findings.sort(key=lambda f: f.sort_key)

        result = ValidationResult(
            findings=findings,
            hub=graph.documents[hub].path if hub is not None else None,
        )
        result.stats["documents"] = len(graph.documents)
        result.stats["headings"] = sum(len(d.headings) for d in graph.documents)
        result.stats["links"] = len(graph.edges)
        result.stats["external_links"] = sum(1 for e in graph.edges if e.kind is LinkKind.EXTERNAL)
        result.stats["total_findings"] = len(findings)
        result.stats["errors"] = result.errors
        result.stats["warnings"] = result.warnings
        return result

    def find_hub(self, graph: CorpusGraph) -> Optional[int]:
        """查找中心文档下标"""
        if self.hub is not None:
            hub_path = normalize_link_path("", self.hub)
            hub = graph.find(hub_path) if hub_path else None
            if hub is None:
                logger.warning(f"Hub document not found in corpus: {self.hub}")
            return hub

        for candidate in DEFAULT_HUB_CANDIDATES:
            hub = graph.find(candidate)
            if hub is not None:
                return hub
        return None

    def check_links(self, graph: CorpusGraph) -> list[Finding]:
        """
        验证文件链接和锚点链接

        Args:
            graph: 链接图

        Returns:
            问题列表
        """
        findings: list[Finding] = []

        for edge in graph.edges:
            if edge.kind is LinkKind.EXTERNAL:
                continue

            doc = graph.documents[edge.source]
            link = doc.links[edge.link_index]

            if edge.kind is LinkKind.RELATIVE_FILE:
                problem = self._file_problem(edge, link.path)
                if problem:
                    findings.append(Finding(
                        kind=FindingKind.BROKEN_FILE_LINK,
                        path=doc.path,
                        line_number=link.line_number,
                        target=link.target,
                        message=problem,
                        position=edge.link_index,
                    ))
                    continue

            # 带锚点的链接：目标为 Markdown 文档时验证锚点
            if not link.anchor or edge.target is None:
                continue

            target_doc = graph.documents[edge.target]
            slugs = {slug.lower() for slug in target_doc.slugs}
            if link.anchor.lower() not in slugs:
                where = "this document" if edge.target == edge.source else target_doc.path
                findings.append(Finding(
                    kind=FindingKind.BROKEN_ANCHOR_LINK,
                    path=doc.path,
                    line_number=link.line_number,
                    target=link.target,
                    message=f"Anchor '#{link.anchor}' does not match any heading in {where}",
                    position=edge.link_index,
                ))

        return findings

    def _file_problem(self, edge: LinkEdge, link_path: str) -> Optional[str]:
        if not link_path:
            return "Empty link target"
        if edge.resolved_path is None:
            return "Link target resolves outside the corpus root"
        if edge.target is None and not edge.exists_on_disk:
            return f"Link target does not exist: {edge.resolved_path or '.'}"
        return None

    def check_duplicate_slugs(self, graph: CorpusGraph) -> list[Finding]:
        """
        报告基础 slug 与同文档中更早标题相同的标题（第二次及之后的出现）

        只因后缀撞上已有锚点而被改名的标题（如 "A-1" 遇到自动生成的 a-1）
        不算重复，它们仍会分配到唯一锚点。
        """
        findings: list[Finding] = []
        for doc in graph.documents:
            seen: set[str] = set()
            for position, heading in enumerate(doc.headings):
                if heading.base_slug not in seen:
                    seen.add(heading.base_slug)
                    continue
                findings.append(Finding(
                    kind=FindingKind.DUPLICATE_SLUG,
                    path=doc.path,
                    line_number=heading.line_number,
                    target=heading.base_slug,
                    message=f"Heading '{heading.text}' duplicates an earlier heading, assigned '#{heading.slug}'",
                    position=position,
                ))
        return findings

    def check_orphans(self, graph: CorpusGraph, hub: int) -> list[Finding]:
        """
        检测孤立文档

        从中心文档出发沿文件链接做广度优先遍历，不可达的文档即为孤立文档。
        """
        reachable = graph.reachable_from(hub)
        hub_path = graph.documents[hub].path
        return [
            Finding(
                kind=FindingKind.ORPHAN_DOCUMENT,
                path=doc.path,
                line_number=1,
                target=doc.path,
                message=f"Document is not reachable from {hub_path}",
            )
            for i, doc in enumerate(graph.documents)
            if i not in reachable
        ]

    def check_parse_issues(self, graph: CorpusGraph) -> list[Finding]:
        """将解析歧义转换为 ParseWarning"""
        return [
            Finding(
                kind=FindingKind.PARSE_WARNING,
                path=doc.path,
                line_number=issue.line_number,
                target=issue.target,
                message=issue.message,
                position=position,
            )
            for doc in graph.documents
            for position, issue in enumerate(doc.issues)
        ]
