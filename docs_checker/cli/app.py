"""
CLI 入口模块 - 使用 Typer 构建命令行界面

文档一致性检查流程（单次线性流水线，无状态，可重复执行）：
1. 加载语料库（发现并解析 Markdown 文件）
2. 构建链接图并执行验证
3. 生成报告
4. 设置退出码
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from docs_checker.config import OUTPUT_FORMATS, ROOT_ENVVAR, CheckerConfig
from docs_checker.core import Document, ValidationResult, Validator, ensure_root, load_corpus
from docs_checker.errors import CheckerError
from docs_checker.reporters import JsonReporter, Reporter, RichReporter, TextReporter

# 创建 Typer 应用实例
app = typer.Typer(
    name="docs-checker",
    help="Docs-Checker: link and structure integrity checks for Markdown corpora.",
    add_completion=False,
)

# Rich Console 用于输出
console = Console()

# verbose 信息写到 stderr，不污染报告
err_console = Console(stderr=True)

# 致命错误（根目录不存在、文件无法读取）的退出码
EXIT_FATAL = 2


def setup_logging(verbose: bool) -> None:
    """verbose 时把 DEBUG 日志输出到 stderr"""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def run_validation(
    config: CheckerConfig,
    on_document: Optional[Callable[[Document], None]] = None,
) -> ValidationResult:
    """
    执行 Load → Validate 流水线

    Args:
        config: 运行配置
        on_document: 每个文档加载后的回调

    Returns:
        ValidationResult 对象

    Raises:
        CheckerError: 根目录无效或文件无法读取
    """
    root = ensure_root(config.root)
    documents = load_corpus(
        root,
        path_filter=config.build_filter(root),
        jobs=config.jobs,
        on_document=on_document,
    )
    validator = Validator(root, hub=config.hub)
    return validator.validate(documents)


def get_reporter(config: CheckerConfig) -> Reporter:
    """获取对应格式的报告器"""
    if config.output_format == "json":
        return JsonReporter(warnings_nonfatal=config.warnings_nonfatal)
    if config.output_format == "rich":
        return RichReporter(console, warnings_nonfatal=config.warnings_nonfatal)
    return TextReporter()


@app.command()
def validate(
    target: str = typer.Argument(
        ".",
        envvar=ROOT_ENVVAR,
        help="Root directory of the Markdown corpus",
    ),
    hub: Optional[str] = typer.Option(
        None,
        "--hub",
        help="Hub document (relative to root) for orphan detection; default README.md or index.md",
    ),
    warnings_nonfatal: bool = typer.Option(
        False,
        "--warnings-nonfatal",
        "-w",
        help="Do not fail on warnings (OrphanDocument, DuplicateSlug, ParseWarning)",
    ),
    format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: text (default), rich or json",
    ),
    jobs: int = typer.Option(
        1,
        "--jobs",
        "-j",
        min=1,
        help="Number of threads used to parse documents",
    ),
    exclude: Optional[List[str]] = typer.Option(
        None,
        "--exclude",
        "-e",
        help="Gitwildmatch pattern to skip (repeatable)",
    ),
    no_gitignore: bool = typer.Option(
        False,
        "--no-gitignore",
        help="Do not apply the root .gitignore when discovering files",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show detailed output on stderr",
    ),
) -> None:
    """
    Validate links, anchors and structure of a Markdown corpus.

    Examples:
        docs-checker validate
        docs-checker validate ./docs --hub index.md
        docs-checker validate --warnings-nonfatal --format json
    """
    setup_logging(verbose)

    if format not in OUTPUT_FORMATS:
        console.print(f"[red]Error:[/red] Unknown format '{escape(format)}', expected one of: {', '.join(OUTPUT_FORMATS)}")
        raise typer.Exit(EXIT_FATAL)

    config = CheckerConfig(
        root=Path(target),
        hub=hub,
        warnings_nonfatal=warnings_nonfatal,
        jobs=jobs,
        exclude=list(exclude or []),
        use_gitignore=not no_gitignore,
        output_format=format,
    )

    def on_document(document: Document) -> None:
        err_console.print(
            f"[dim]  {escape(document.path)}: {len(document.headings)} headings, "
            f"{len(document.links)} links[/dim]"
        )

    # 1-2. 加载并验证
    if verbose:
        err_console.print(f"[dim]Loading corpus: {escape(target)}[/dim]")

    try:
        result = run_validation(config, on_document if verbose else None)
    except CheckerError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_FATAL)

    if verbose:
        err_console.print(f"[dim]  - {result.stats['documents']} documents[/dim]")
        err_console.print(f"[dim]  - {result.stats['links']} links ({result.stats['external_links']} external, not fetched)[/dim]")
        err_console.print(f"[dim]  - hub: {escape(result.hub or 'none')}[/dim]")

    # 3. 生成报告
    reporter = get_reporter(config)
    reporter.report(result, target)

    # 4. 设置退出码
    if result.is_failure(config.warnings_nonfatal):
        raise typer.Exit(1)
    raise typer.Exit(0)


@app.command()
def version() -> None:
    """Show the version of Docs-Checker."""
    from docs_checker import __version__
    console.print(f"[bold]Docs-Checker[/bold] v{__version__}")


if __name__ == "__main__":
    app()
