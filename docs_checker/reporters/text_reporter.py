"""
纯文本报告器 - 每个问题一行，末尾输出按类型统计

输出不含颜色和换行折叠，相同输入的两次运行产生逐字节相同的报告，
适合 CI 日志和 diff。
"""

import sys
from typing import TextIO

from docs_checker.core.validator import Finding, ValidationResult


def format_finding(finding: Finding) -> str:
    """格式化单个问题：path:line: Kind target: message"""
    target = finding.target or "-"
    return f"{finding.path}:{finding.line_number}: {finding.kind.value} {target}: {finding.message}"


class TextReporter:
    """纯文本报告器"""

    def __init__(self, output: TextIO | None = None):
        self.output = output or sys.stdout

    def report(self, result: ValidationResult, target: str) -> None:
        for finding in result.findings:
            print(format_finding(finding), file=self.output)

        if result.findings:
            print(file=self.output)

        print(f"Checked {result.stats.get('documents', 0)} document(s) in {target}", file=self.output)
        for kind, count in result.counts_by_kind().items():
            print(f"  {kind}: {count}", file=self.output)
        print(
            f"Total: {len(result.findings)} finding(s) "
            f"({result.errors} error(s), {result.warnings} warning(s))",
            file=self.output,
        )
