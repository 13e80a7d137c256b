"""Human-readable, optionally ANSI-coloured report formatter."""

from __future__ import annotations

import os
import sys
from typing import TextIO

from agentaudit.finding import ScanReport, ScanStatus, Severity

BOLD = "1"
DIM = "2"
UNDERLINE = "4"
RED = "31"
GREEN = "32"
YELLOW = "33"
BLUE = "34"
WHITE = "37"
ON_BLUE = "44"

_DISABLED_REASON = "disabled in config"


def should_color(stream: TextIO | None = None) -> bool:
    """Decide whether to emit colour, honouring CLICOLOR_FORCE, NO_COLOR and CLICOLOR."""
    if os.environ.get("CLICOLOR_FORCE", "0") != "0":
        return True
    if "NO_COLOR" in os.environ:
        return False
    if os.environ.get("CLICOLOR") == "0":
        return False
    stream = stream if stream is not None else sys.stdout
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class _Painter:
    def __init__(self, enabled: bool) -> None:
        self.enabled = enabled

    def __call__(self, text: str, *codes: str) -> str:
        if not self.enabled or not codes:
            return text
        return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


def _score_color(score: int) -> str:
    if score >= 90:
        return GREEN
    if score >= 60:
        return YELLOW
    return RED


def format_pretty(report: ScanReport, color: bool | None = None) -> str:
    """Render a report as terminal text.

    Sections: header, per-scanner status, findings (errors first),
    suppressed findings and a one-line summary. ``color=None`` detects
    whether standard output wants colour.
    """
    paint = _Painter(should_color() if color is None else color)
    out: list[str] = []

    header = paint(f"  Skill Scan: {report.skill}  ", BOLD, ON_BLUE, WHITE)
    out.append(f"\n{header}\n")
    out.append(f"  Timestamp: {report.scan_timestamp}\n\n")

    out.append(f"{paint('Scanners', BOLD, UNDERLINE)}\n")
    for result in report.scanner_results:
        disabled = result.skip_reason == _DISABLED_REASON
        if disabled:
            icon = paint(" OFF", DIM)
            detail = paint(_DISABLED_REASON, DIM)
        elif result.skipped:
            icon = paint("SKIP", DIM)
            detail = paint(result.skip_reason or "skipped", DIM)
        else:
            severities = {f.severity for f in result.findings}
            if Severity.ERROR in severities:
                icon = paint("FAIL", RED, BOLD)
            elif Severity.WARNING in severities:
                icon = paint("WARN", YELLOW, BOLD)
            else:
                icon = paint("PASS", GREEN, BOLD)
            detail = f"{len(result.findings)} findings, {result.files_scanned} files scanned"
            if result.scanner_score is not None and result.scanner_grade is not None:
                score_part = f"  Score: {result.scanner_score}/100 ({result.scanner_grade})"
                detail += paint(score_part, _score_color(result.scanner_score))
        out.append(f"  [{icon}] {result.scanner_name:<20} {detail}\n")
    out.append("\n")

    active = sorted(
        (f for f in report.findings if not f.suppressed), key=lambda f: f.severity.rank
    )
    if active:
        out.append(f"{paint('Findings', BOLD, UNDERLINE)}\n")
        severity_labels = {
            Severity.ERROR: paint("ERROR", RED, BOLD),
            Severity.WARNING: paint(" WARN", YELLOW, BOLD),
            Severity.INFO: paint(" INFO", BLUE),
        }
        for finding in active:
            if finding.file is not None and finding.line is not None:
                location = f"{finding.file}:{finding.line}"
            elif finding.file is not None:
                location = str(finding.file)
            else:
                location = ""
            rule_id = paint(finding.rule_id.ljust(25), DIM)
            out.append(f"  [{severity_labels[finding.severity]}] {rule_id} {finding.message}\n")
            if location:
                out.append(f"         {paint(location, DIM)}\n")
            if finding.snippet is not None:
                out.append(f"         > {paint(finding.snippet, DIM)}\n")
        out.append("\n")

    if report.suppressed:
        title = paint("Suppressed", BOLD, UNDERLINE)
        out.append(f"{title} ({len(report.suppressed)} suppressed)\n")
        for finding in report.suppressed:
            reason = finding.suppression_reason or "no reason given"
            out.append(
                f"  [SKIP] {paint(finding.rule_id.ljust(25), DIM)} {paint(reason, DIM)}\n"
            )
        out.append("\n")

    status_str = {
        ScanStatus.PASSED: paint("PASSED", GREEN, BOLD),
        ScanStatus.WARNING: paint("WARNING", YELLOW, BOLD),
        ScanStatus.FAILED: paint("FAILED", RED, BOLD),
    }[report.status]
    score_str = paint(
        f"Score: {report.security_score}/100 ({report.security_grade})",
        _score_color(report.security_score),
        BOLD,
    )
    errors, warnings, info = report.count_by_severity()
    out.append(
        f"Result: {status_str}  |  {score_str}  |  {errors} errors, {warnings} warnings, "
        f"{info} info, {len(report.suppressed)} suppressed\n"
    )
    return "".join(out)