"""
Markdown 解析器模块 - 解析单个 Markdown 文件并提取结构化信息

使用 markdown-it-py 进行 token 解析，提取 ATX 标题和行内链接。
代码块（围栏和缩进）以及行内代码中的内容不会被当作标题或链接。
支持 GitHub 风格的标题锚点（slug）生成，重复标题自动追加数字后缀。
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from urllib.parse import unquote

from markdown_it import MarkdownIt
from markdown_it.rules_inline import StateInline, backtick
from markdown_it.token import Token


class LinkKind(str, Enum):
    """链接类型"""
    EXTERNAL = "external"
    RELATIVE_FILE = "relative-file"
    ANCHOR = "in-page-anchor"


@dataclass(frozen=True)
class Heading:
    """
    标题数据模型

    Attributes:
        level: 标题级别 (1-6)
        text: 标题纯文本
        slug: 文档内唯一的锚点 ID
        base_slug: 未追加后缀前的锚点 ID
        line_number: 在原文件中的行号
    """
    level: int
    text: str
    slug: str
    base_slug: str
    line_number: int


@dataclass(frozen=True)
class Link:
    """
    链接数据模型

    Attributes:
        text: 链接文本
        target: 完整链接目标（已做百分号解码）
        kind: 链接类型
        line_number: 在原文件中的行号
        path: 文件部分（页内锚点为空字符串）
        anchor: 锚点部分（如 section，不含 #），没有锚点时为 None
    """
    text: str
    target: str
    kind: LinkKind
    line_number: int
    path: str = ""
    anchor: Optional[str] = None


@dataclass(frozen=True)
class ParseIssue:
    """
    解析歧义记录（不会中断解析）

    Attributes:
        line_number: 行号
        message: 问题描述
        target: 相关片段
    """
    line_number: int
    message: str
    target: str = ""


@dataclass(frozen=True)
class ParsedMarkdown:
    """
    解析后的 Markdown 数据模型

    Attributes:
        headings: 按出现顺序排列的 ATX 标题
        links: 按出现顺序排列的链接
        issues: 解析过程中记录的歧义
    """
    headings: tuple[Heading, ...] = field(default_factory=tuple)
    links: tuple[Link, ...] = field(default_factory=tuple)
    issues: tuple[ParseIssue, ...] = field(default_factory=tuple)


# URI scheme，如 http:, https:, mailto:
_SCHEME_RE = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*:')

# slug 中保留字母、数字、下划线、连字符和空格
_SLUG_STRIP_RE = re.compile(r'[^\w\- ]')

# 未被识别为链接的 [text]( 片段
_MALFORMED_LINK_RE = re.compile(r'\[[^\[\]]*\]\(')

# 转义字符在拼接文本时的占位符，避免 \[ \] 被误判为链接
_ESCAPE_PLACEHOLDER = "\x00"

_TEXT_TYPES = ("text", "text_special", "code_inline")


def generate_slug(text: str) -> str:
    """
    生成 GitHub 风格的锚点 ID

    规则：
    1. 转换为小写
    2. 移除标点（保留字母、数字、下划线、连字符和空格）
    3. 每个空格转换为连字符

    Args:
        text: 标题文本

    Returns:
        锚点 ID（不含重复后缀）
    """
    result = text.strip().lower()
    result = _SLUG_STRIP_RE.sub('', result)
    return result.replace(' ', '-')


class SlugRegistry:
    """为同一文档中的标题分配唯一锚点"""

    def __init__(self) -> None:
        self._used: set[str] = set()
        self._counters: dict[str, int] = {}

    def claim(self, base_slug: str) -> str:
        """
        分配锚点：首次出现使用原始 slug，之后依次尝试 -1, -2, ...
        跳过已被其他标题占用的后缀。
        """
        if base_slug not in self._used:
            self._used.add(base_slug)
            return base_slug

        counter = self._counters.get(base_slug, 0)
        while True:
            counter += 1
            candidate = f"{base_slug}-{counter}"
            if candidate not in self._used:
                break

        self._counters[base_slug] = counter
        self._used.add(candidate)
        return candidate


def split_target(target: str) -> tuple[str, Optional[str]]:
    """
    分离路径和锚点

    Args:
        target: 可能包含锚点或查询串的链接目标

    Returns:
        (路径, 锚点) 元组，锚点可能为 None
    """
    path, sep, anchor = target.partition('#')
    path = path.split('?', 1)[0]
    return path, (anchor if sep else None)


def classify_target(target: str) -> LinkKind:
    """判断链接类型"""
    if _SCHEME_RE.match(target) or target.startswith('//'):
        return LinkKind.EXTERNAL
    path, anchor = split_target(target)
    if not path and anchor is not None:
        return LinkKind.ANCHOR
    return LinkKind.RELATIVE_FILE


def _backtick_with_lines(state: StateInline, silent: bool) -> bool:
    # 行内代码会把换行折叠为空格，这里记下原始跨越的行数
    start = state.pos
    count = len(state.tokens)
    if not backtick(state, silent):
        return False
    if not silent:
        for token in state.tokens[count:]:
            if token.type == "code_inline":
                token.meta["newlines"] = state.src.count("\n", start, state.pos)
    return True


def _create_parser() -> MarkdownIt:
    # text_join 会把转义字符合并进普通文本，关闭后才能区分 \[ 和 [
    md = MarkdownIt("commonmark").enable(["table", "strikethrough"])
    md.disable("text_join")
    md.inline.ruler.at("backticks", _backtick_with_lines)
    return md


def _inline_text(children: list[Token]) -> str:
    """从行内 token 中提取纯文本（强调标记被丢弃，行内代码保留内容）"""
    parts: list[str] = []
    for child in children:
        if child.type in _TEXT_TYPES:
            parts.append(child.content)
        elif child.type in ("softbreak", "hardbreak"):
            parts.append(" ")
    return "".join(parts)


def _is_closing_fence(line: str, marker: str) -> bool:
    # 去掉引用块前缀和缩进
    stripped = re.sub(r'^[\s>]*', '', line).rstrip()
    if not marker or not stripped:
        return False
    return stripped.startswith(marker) and set(stripped) == {marker[0]}


def _check_fence(token: Token, lines: list[str]) -> Optional[ParseIssue]:
    """检查围栏代码块是否在文件结束前被关闭"""
    if not token.map:
        return None
    start, end = token.map
    last = end - 1
    if last > start and last < len(lines) and _is_closing_fence(lines[last], token.markup):
        return None
    if end >= len(lines):
        message = "Unterminated code fence; content up to end of file treated as code"
    else:
        message = "Unterminated code fence; closed by the end of its enclosing block"
    return ParseIssue(
        line_number=start + 1,
        message=message,
        target=token.markup,
    )


def _scan_malformed(segment: str, line_number: int, issues: list[ParseIssue]) -> None:
    for match in _MALFORMED_LINK_RE.finditer(segment):
        issues.append(ParseIssue(
            line_number=line_number,
            message="Malformed link syntax",
            target=match.group(0).replace(_ESCAPE_PLACEHOLDER, ""),
        ))


def _line_breaks(token: Token) -> int:
    """行内 token 自身跨越的换行数（行内代码、图片 alt 文本、行内 HTML）"""
    if token.type in ("softbreak", "hardbreak"):
        return 1
    if token.type == "code_inline":
        return token.meta.get("newlines", 0)
    if token.type == "html_inline":
        return token.content.count("\n")
    return sum(_line_breaks(child) for child in token.children or [])


def _extract_links(
    token: Token,
    line_number: int,
    links: list[Link],
    issues: list[ParseIssue],
) -> None:
    """
    从 inline token 中提取链接

    按 token 跨越的换行计数，得到每个链接所在的精确行号。
    链接外残留的 [text]( 片段记录为解析歧义；强调、行内代码等
    非文本 token 以占位符保留在片段中，不打断检测。
    """
    href: Optional[str] = None
    link_line = line_number
    link_text: list[str] = []
    segment: list[str] = []

    for child in token.children or []:
        if child.type == "link_open":
            segment.append(_ESCAPE_PLACEHOLDER)
            href = child.attrGet("href") or ""
            link_line = line_number
            link_text = []
        elif child.type == "link_close":
            if href is not None:
                target = unquote(str(href))
                path, anchor = split_target(target)
                links.append(Link(
                    text="".join(link_text),
                    target=target,
                    kind=classify_target(target),
                    line_number=link_line,
                    path=path,
                    anchor=anchor,
                ))
            href = None
        elif href is not None:
            if child.type in _TEXT_TYPES:
                link_text.append(child.content)
            elif child.type in ("softbreak", "hardbreak"):
                link_text.append(" ")
        elif child.type == "text":
            segment.append(child.content)
        elif child.type not in ("softbreak", "hardbreak"):
            segment.append(_ESCAPE_PLACEHOLDER)

        breaks = _line_breaks(child)
        if breaks:
            _scan_malformed("".join(segment), line_number, issues)
            segment = []
            line_number += breaks

    _scan_malformed("".join(segment), line_number, issues)


def parse_markdown(content: str) -> ParsedMarkdown:
    """
    解析 Markdown 内容

    将 Markdown 内容解析为结构化的 ParsedMarkdown 对象，
    提取 ATX 标题（带唯一 slug）、链接以及解析歧义。

    Args:
        content: Markdown 内容

    Returns:
        ParsedMarkdown 对象
    """
    md = _create_parser()
    tokens = md.parse(content)
    lines = content.splitlines()

    headings: list[Heading] = []
    links: list[Link] = []
    issues: list[ParseIssue] = []
    slugs = SlugRegistry()

    # 表格单元格的 inline token 可能没有 map，沿用最近的块级行号
    last_line = 1

    for i, token in enumerate(tokens):
        if token.map:
            last_line = token.map[0] + 1

        if token.type == 'heading_open':
            # setext 标题（=== / ---）不生成锚点
            if not token.markup.startswith('#'):
                continue
            if i + 1 < len(tokens) and tokens[i + 1].type == 'inline':
                text = _inline_text(tokens[i + 1].children or []).strip()
                base_slug = generate_slug(text)
                headings.append(Heading(
                    level=int(token.tag[1]),
                    text=text,
                    slug=slugs.claim(base_slug),
                    base_slug=base_slug,
                    line_number=last_line,
                ))

        elif token.type == 'fence':
            issue = _check_fence(token, lines)
            if issue:
                issues.append(issue)

        elif token.type == 'inline' and token.children:
            _extract_links(token, last_line, links, issues)

    return ParsedMarkdown(
        headings=tuple(headings),
        links=tuple(links),
        issues=tuple(issues),
    )
