"""
Core Layer - 核心层

包含 Markdown 解析器、语料库加载器、链接图和验证器。
"""

from docs_checker.core.parser import (
    parse_markdown,
    generate_slug,
    classify_target,
    split_target,
    SlugRegistry,
    Link,
    LinkKind,
    Heading,
    ParseIssue,
    ParsedMarkdown,
)
from docs_checker.core.loader import (
    load_corpus,
    load_document,
    discover_markdown_files,
    ensure_root,
    Document,
)
from docs_checker.core.graph import (
    build_graph,
    normalize_link_path,
    CorpusGraph,
    LinkEdge,
)
from docs_checker.core.validator import (
    Validator,
    Finding,
    FindingKind,
    ValidationResult,
)

__all__ = [
    # parser
    "parse_markdown",
    "generate_slug",
    "classify_target",
    "split_target",
    "SlugRegistry",
    "Link",
    "LinkKind",
    "Heading",
    "ParseIssue",
    "ParsedMarkdown",
    # loader
    "load_corpus",
    "load_document",
    "discover_markdown_files",
    "ensure_root",
    "Document",
    # graph
    "build_graph",
    "normalize_link_path",
    "CorpusGraph",
    "LinkEdge",
    # validator
    "Validator",
    "Finding",
    "FindingKind",
    "ValidationResult",
]
