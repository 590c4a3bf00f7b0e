"""
Reporters Layer - 报告层

包含纯文本报告器、Rich 终端报告器和 JSON 报告器。
"""

from docs_checker.reporters.base import Reporter
from docs_checker.reporters.text_reporter import TextReporter, format_finding
from docs_checker.reporters.rich_reporter import RichReporter
from docs_checker.reporters.json_reporter import JsonReporter

__all__ = [
    "Reporter",
    "TextReporter",
    "format_finding",
    "RichReporter",
    "JsonReporter",
]
