"""
JSON 报告器 - 输出 JSON 格式报告
"""

import json
import sys
from typing import TextIO

from docs_checker.core.validator import ValidationResult


class JsonReporter:
    """JSON 报告器"""

    def __init__(self, output: TextIO | None = None, warnings_nonfatal: bool = False):
        self.output = output or sys.stdout
        self.warnings_nonfatal = warnings_nonfatal

    def report(self, result: ValidationResult, target: str) -> None:
        """生成 JSON 格式报告"""
        report_data = {
            "target": target,
            "hub": result.hub,
            "findings": [
                {
                    "kind": finding.kind.value,
                    "severity": finding.severity,
                    "path": finding.path,
                    "line_number": finding.line_number,
                    "target": finding.target,
                    "message": finding.message,
                }
                for finding in result.findings
            ],
            "counts": result.counts_by_kind(),
            "stats": result.stats,
            "summary": {
                "total_findings": len(result.findings),
                "errors": result.errors,
                "warnings": result.warnings,
                "passed": not result.is_failure(self.warnings_nonfatal),
            },
        }

        json_str = json.dumps(report_data, indent=2, ensure_ascii=False)
        print(json_str, file=self.output)
