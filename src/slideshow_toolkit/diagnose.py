"""
Deck Diagnostics

Pre-flight checks that catch source problems before a deck is loaded.
Checks for missing or empty sources, broken front matter, unknown layout
overrides and monotonous layout runs.
"""

import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .analyze import analyze, split_front_matter
from .content import FeatureVector, Layout, ParsedContent
from .errors import FrontMatterError
from .heuristics import classify
from .pipeline import MARKDOWN_SUFFIXES, natural_sort_key

# Runs of this many identical heuristic layouts are reported
MONOTONY_RUN = 3


class Severity(str, Enum):
    """Severity of a diagnostic issue."""
    error = "error"
    warning = "warning"
    info = "info"


@dataclass
class DiagnosticIssue:
    """A single diagnostic finding."""
    code: str
    severity: Severity
    message: str
    source: Optional[str] = None
    category: str = ""
    detail: str = ""


@dataclass
class DiagnosticReport:
    """Aggregated diagnostic results."""
    issues: List[DiagnosticIssue] = field(default_factory=list)
    source_count: int = 0

    @property
    def errors(self) -> List[DiagnosticIssue]:
        return [i for i in self.issues if i.severity == Severity.error]

    @property
    def warnings(self) -> List[DiagnosticIssue]:
        return [i for i in self.issues if i.severity == Severity.warning]

    @property
    def has_blocking_issues(self) -> bool:
        return len(self.errors) > 0

    def print_report(self, file=None) -> None:
        """Print a human-readable diagnostic report."""
        out = file or sys.stdout

        print("=" * 60, file=out)
        print("DECK DIAGNOSTIC REPORT", file=out)
        print("=" * 60, file=out)
        print(f"Sources: {self.source_count}", file=out)
        print(f"Issues: {len(self.errors)} errors, {len(self.warnings)} warnings, "
              f"{len(self.issues) - len(self.errors) - len(self.warnings)} info", file=out)
        print("-" * 60, file=out)

        for issue in self.issues:
            prefix = {
                Severity.error: "ERROR  ",
                Severity.warning: "WARN   ",
                Severity.info: "INFO   ",
            }[issue.severity]

            source_str = f" [{issue.source}]" if issue.source is not None else ""
            print(f"  {prefix} {issue.code}{source_str}: {issue.message}", file=out)
            if issue.detail:
                print(f"         {issue.detail}", file=out)

        print("-" * 60, file=out)
        if self.has_blocking_issues:
            print("RESULT: BLOCKING errors found. Fix before loading.", file=out)
        elif self.warnings:
            print("RESULT: Warnings found. The deck will load but some slides may look off.", file=out)
        else:
            print("RESULT: Deck looks good!", file=out)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "source_count": self.source_count,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "has_blocking_issues": self.has_blocking_issues,
            "issues": [
                {
                    "code": i.code,
                    "severity": i.severity.value,
                    "message": i.message,
                    "source": i.source,
                    "category": i.category,
                    "detail": i.detail,
                }
                for i in self.issues
            ],
        }


# ============================================================
# DIAGNOSTIC CHECKS
# ============================================================

def _check_directory(directory: Path, report: DiagnosticReport) -> bool:
    """DECK-001: Check that the source directory exists."""
    if not directory.is_dir():
        report.issues.append(DiagnosticIssue(
            code="DECK-001",
            severity=Severity.error,
            message="Source directory not found",
            category="file",
            detail=str(directory),
        ))
        return False
    return True


def _find_sources(directory: Path, report: DiagnosticReport) -> List[Path]:
    """DECK-002: Check that the directory holds Markdown files."""
    files = sorted(
        (p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in MARKDOWN_SUFFIXES),
        key=lambda p: natural_sort_key(p.name),
    )
    if not files:
        report.issues.append(DiagnosticIssue(
            code="DECK-002",
            severity=Severity.error,
            message="No Markdown files found",
            category="file",
            detail=str(directory),
        ))
    return files


def _check_front_matter(
    path: Path, text: str, report: DiagnosticReport
) -> Optional[ParsedContent]:
    """DECK-010/011: Parse front matter and validate any layout override."""
    try:
        front_matter, body = split_front_matter(text)
    except FrontMatterError as exc:
        report.issues.append(DiagnosticIssue(
            code="DECK-010",
            severity=Severity.error,
            message="Front matter cannot be parsed",
            source=path.name,
            category="front_matter",
            detail=str(exc),
        ))
        return None

    content = ParsedContent(front_matter=front_matter, raw_markdown=body)
    override = content.layout_override
    if override is not None and Layout.parse(override) is None:
        report.issues.append(DiagnosticIssue(
            code="DECK-011",
            severity=Severity.warning,
            message=f"Unknown layout override '{override}' will be ignored",
            source=path.name,
            category="front_matter",
            detail="Known layouts: " + ", ".join(layout.value for layout in Layout),
        ))

    return content


def _check_empty_body(path: Path, body: str, report: DiagnosticReport) -> None:
    """DECK-020: Warn about slides with no content."""
    if not body.strip():
        report.issues.append(DiagnosticIssue(
            code="DECK-020",
            severity=Severity.warning,
            message="Slide body is empty",
            source=path.name,
            category="content",
        ))


def _check_opening_heading(
    first: Optional[Tuple[str, FeatureVector]], report: DiagnosticReport
) -> None:
    """DECK-030: Note when the first slide cannot become a hero slide."""
    if first is None:
        return
    name, vector = first
    if vector.heading_level != 1:
        report.issues.append(DiagnosticIssue(
            code="DECK-030",
            severity=Severity.info,
            message="First slide has no H1 heading; it will not use the hero layout",
            source=name,
            category="layout",
        ))


def _check_layout_runs(
    layouts: List[Tuple[str, Layout]], report: DiagnosticReport
) -> None:
    """DECK-040: Note runs of consecutive slides sharing one heuristic layout."""
    run_start = 0
    for i in range(1, len(layouts) + 1):
        if i < len(layouts) and layouts[i][1] == layouts[run_start][1]:
            continue
        run_length = i - run_start
        if run_length >= MONOTONY_RUN:
            report.issues.append(DiagnosticIssue(
                code="DECK-040",
                severity=Severity.info,
                message=f"{run_length} consecutive slides use the '{layouts[run_start][1].value}' layout",
                source=layouts[run_start][0],
                category="layout",
                detail=f"{layouts[run_start][0]} .. {layouts[i - 1][0]}",
            ))
        run_start = i


# ============================================================
# PUBLIC API
# ============================================================

def diagnose_sources(directory: Union[str, Path]) -> DiagnosticReport:
    """Run all diagnostic checks on a directory of slide sources.

    Args:
        directory: Directory holding the deck's Markdown files

    Returns:
        DiagnosticReport with all findings
    """
    directory = Path(directory)
    report = DiagnosticReport()

    if not _check_directory(directory, report):
        return report

    files = _find_sources(directory, report)
    report.source_count = len(files)

    first: Optional[Tuple[str, FeatureVector]] = None
    layouts: List[Tuple[str, Layout]] = []

    for position, path in enumerate(files):
        text = path.read_text(encoding="utf-8")
        parsed = _check_front_matter(path, text, report)
        if parsed is None:
            continue
        body = parsed.raw_markdown

        _check_empty_body(path, body, report)

        vector = analyze(body)
        if position == 0:
            first = (path.name, vector)

        manual = Layout.parse(parsed.layout_override)
        layouts.append((path.name, manual or classify(vector, position).layout))

    _check_opening_heading(first, report)
    _check_layout_runs(layouts, report)

    return report
