from __future__ import annotations

import io
import json

from rich.console import Console

from docs_checker.core.validator import Finding, FindingKind, ValidationResult
from docs_checker.reporters import JsonReporter, RichReporter, TextReporter, format_finding


def _result() -> ValidationResult:
    findings = [
        Finding(FindingKind.BROKEN_FILE_LINK, "a.md", 3, "./b.md", "Link target does not exist: b.md"),
        Finding(FindingKind.ORPHAN_DOCUMENT, "e.md", 1, "e.md", "Document is not reachable from README.md"),
    ]
    return ValidationResult(findings=findings, stats={"documents": 3}, hub="README.md")


def test_format_finding() -> None:
    finding = Finding(FindingKind.PARSE_WARNING, "x.md", 7, "", "Malformed link syntax")
    assert format_finding(finding) == "x.md:7: ParseWarning -: Malformed link syntax"


def test_text_reporter_lines_and_counts() -> None:
    output = io.StringIO()
    TextReporter(output).report(_result(), "docs")

    assert output.getvalue().splitlines() == [
        "a.md:3: BrokenFileLink ./b.md: Link target does not exist: b.md",
        "e.md:1: OrphanDocument e.md: Document is not reachable from README.md",
        "",
        "Checked 3 document(s) in docs",
        "  BrokenFileLink: 1",
        "  BrokenAnchorLink: 0",
        "  DuplicateSlug: 0",
        "  OrphanDocument: 1",
        "  ParseWarning: 0",
        "Total: 2 finding(s) (1 error(s), 1 warning(s))",
    ]


def test_json_reporter_respects_warnings_nonfatal() -> None:
    result = ValidationResult(
        findings=[Finding(FindingKind.DUPLICATE_SLUG, "a.md", 5, "overview", "dup")],
        stats={"documents": 1},
    )
    output = io.StringIO()
    JsonReporter(output, warnings_nonfatal=True).report(result, ".")

    data = json.loads(output.getvalue())
    assert data["summary"] == {"total_findings": 1, "errors": 0, "warnings": 1, "passed": True}
    assert data["findings"][0]["severity"] == "warning"


def test_rich_reporter_clean_result() -> None:
    console = Console(file=io.StringIO(), width=100)
    RichReporter(console).report(ValidationResult(stats={"documents": 2}, hub="README.md"), "docs")
    text = console.file.getvalue()
    assert "All links resolve" in text
    assert "hub: README.md" in text
