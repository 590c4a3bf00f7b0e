"""
Rich 终端报告器 - 使用 Rich 库输出彩色终端格式

问题按 (文档路径, 行号) 排序展示，末尾给出按类型统计和总结面板。
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from docs_checker.core.validator import Finding, FindingKind, ValidationResult


# 每种问题类型的展示信息
KIND_LABELS: dict[FindingKind, tuple[str, str]] = {
    FindingKind.BROKEN_FILE_LINK: ("🔗", "Broken file links"),
    FindingKind.BROKEN_ANCHOR_LINK: ("⚓", "Broken anchors"),
    FindingKind.DUPLICATE_SLUG: ("🔁", "Duplicate headings"),
    FindingKind.ORPHAN_DOCUMENT: ("🏝", "Orphan documents"),
    FindingKind.PARSE_WARNING: ("📝", "Parse warnings"),
}

# 最多展示的问题条数
MAX_ROWS = 50


class RichReporter:
    """Rich 终端报告器"""

    def __init__(self, console: Console | None = None, warnings_nonfatal: bool = False):
        self.console = console or Console()
        self.warnings_nonfatal = warnings_nonfatal

    def report(self, result: ValidationResult, target: str) -> None:
        """生成 Rich 格式报告"""
        self.console.print()
        self.console.print("─" * 80, style="dim")
        self.console.print(
            "📋 Docs-Checker link integrity report 📋",
            style="bold cyan",
            justify="center",
        )
        self.console.print("─" * 80, style="dim")

        if result.findings:
            self._print_findings(result.findings)

        self._print_metrics(result)
        self._print_conclusion(result, target)

    def _print_findings(self, findings: list[Finding]) -> None:
        """打印问题明细"""
        self.console.print()
        self.console.print("[bold]◆ Findings[/bold]")
        self.console.print()

        table = Table(show_header=True, header_style="bold cyan", box=None)
        table.add_column("Location", style="dim", no_wrap=True)
        table.add_column("Kind", no_wrap=True)
        table.add_column("Target")
        table.add_column("Message", style="dim")

        for finding in findings[:MAX_ROWS]:
            style = "red" if finding.severity == "error" else "yellow"
            table.add_row(
                Text(f"{finding.path}:{finding.line_number}"),
                Text(finding.kind.value, style=style),
                Text(finding.target or "-"),
                Text(finding.message),
            )

        self.console.print(table)

        if len(findings) > MAX_ROWS:
            self.console.print(f"  [dim]... {len(findings) - MAX_ROWS} more findings not shown[/dim]")

    def _print_metrics(self, result: ValidationResult) -> None:
        """打印按类型统计"""
        self.console.print()
        self.console.print("[bold]◆ Summary by kind[/bold]")
        self.console.print()

        table = Table(show_header=True, header_style="bold cyan", box=None)
        table.add_column("Check", style="cyan", width=26)
        table.add_column("Count", justify="right", width=8)
        table.add_column("Status", width=16)

        counts = result.counts_by_kind()
        for kind in FindingKind:
            icon, label = KIND_LABELS[kind]
            count = counts[kind.value]
            if count == 0:
                status = "[green]✓ passed[/green]"
            elif kind in (FindingKind.BROKEN_FILE_LINK, FindingKind.BROKEN_ANCHOR_LINK):
                status = f"[red]{count} error(s)[/red]"
            else:
                status = f"[yellow]{count} warning(s)[/yellow]"
            table.add_row(f"{icon} {label}", f"[bold]{count}[/bold]", status)

        self.console.print(table)

    def _print_conclusion(self, result: ValidationResult, target: str) -> None:
        """打印总结"""
        documents = result.stats.get("documents", 0)
        hub = escape(result.hub or "none (orphan check skipped)")
        target = escape(target)

        self.console.print()
        if not result.findings:
            self.console.print(Panel(
                f"[bold green]All links resolve[/bold green]\n"
                f"[dim]{documents} document(s) checked in {target}, hub: {hub}[/dim]",
                border_style="green",
            ))
        else:
            color = "red" if result.is_failure(self.warnings_nonfatal) else "yellow"
            self.console.print(Panel(
                f"Found [red]{result.errors}[/red] error(s), "
                f"[yellow]{result.warnings}[/yellow] warning(s)\n\n"
                f"[dim]{documents} document(s) checked in {target}, hub: {hub}[/dim]",
                border_style=color,
            ))
        self.console.print()
