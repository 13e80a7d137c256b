"""Findings, per-scanner results and the aggregated scan report."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from pathlib import PurePath

from agentaudit.config import Suppression

_CRITICAL_PREFIXES = (
    "bash/CAT-A",
    "bash/CAT-D",
    "typescript/CAT-A",
    "typescript/CAT-D",
    "prompt/",
)

_UNSIGNED = re.compile(r"\+?[0-9]+")


class Severity(Enum):
    """Severity of a finding, ordered from most to least critical."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Sort position: errors first, info last."""
        return _SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank

    def __str__(self) -> str:
        return self.value


_SEVERITY_RANK = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFO: 2}


class ScanStatus(Enum):
    """Overall outcome of a scan."""

    PASSED = "passed"
    WARNING = "warning"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


class RiskLevel(Enum):
    """Risk assessment derived from the nature of the findings."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    def __str__(self) -> str:
        return self.value


class SecurityGrade(Enum):
    """Letter grade derived from a security score."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"

    def __str__(self) -> str:
        return self.value


@dataclass
class Finding:
    """A single security issue reported by a scanner."""

    rule_id: str
    message: str
    severity: Severity
    scanner: str
    file: PurePath | None = None
    line: int | None = None
    column: int | None = None
    snippet: str | None = None
    suppressed: bool = False
    suppression_reason: str | None = None
    remediation: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.file, str):
            self.file = PurePath(self.file)

    @property
    def is_critical(self) -> bool:
        """True for rules in the RCE, backdoor and prompt-injection categories."""
        return self.rule_id.startswith(_CRITICAL_PREFIXES)


@dataclass
class ScanResult:
    """Output of one scanner run."""

    scanner_name: str
    findings: list[Finding] = field(default_factory=list)
    files_scanned: int = 0
    skipped: bool = False
    skip_reason: str | None = None
    error: str | None = None
    duration_ms: int = 0
    scanner_score: int | None = None
    scanner_grade: SecurityGrade | None = None


def skipped_result(name: str, reason: str) -> ScanResult:
    """Result for a scanner that did not run."""
    return ScanResult(scanner_name=name, skipped=True, skip_reason=reason)


def error_result(name: str, error: str, duration_ms: int) -> ScanResult:
    """Result for a scanner that failed with an error."""
    return ScanResult(scanner_name=name, error=error, duration_ms=duration_ms)


@dataclass
class ScanReport:
    """The combined report for one scanned skill or agent."""

    skill: str
    scan_timestamp: str
    status: ScanStatus
    risk_level: RiskLevel
    security_score: int
    security_grade: SecurityGrade
    files_scanned: int
    scanner_results: list[ScanResult]
    findings: list[Finding]
    suppressed: list[Finding]
    passed: bool
    version: str | None = None

    def error_count(self) -> int:
        """Number of active error findings."""
        return self.count_by_severity()[0]

    def warning_count(self) -> int:
        """Number of active warning findings."""
        return self.count_by_severity()[1]

    def info_count(self) -> int:
        """Number of active info findings."""
        return self.count_by_severity()[2]

    def count_by_severity(self) -> tuple[int, int, int]:
        """Return ``(errors, warnings, info)`` for the active findings."""
        counts = {severity: 0 for severity in Severity}
        for finding in self.findings:
            counts[finding.severity] += 1
        return counts[Severity.ERROR], counts[Severity.WARNING], counts[Severity.INFO]


def grade_for_score(score: int) -> SecurityGrade:
    """Map a 0-100 score to its letter grade."""
    if score >= 90:
        return SecurityGrade.A
    if score >= 75:
        return SecurityGrade.B
    if score >= 60:
        return SecurityGrade.C
    if score >= 40:
        return SecurityGrade.D
    return SecurityGrade.F


def _deduction(finding: Finding) -> int:
    if finding.severity is Severity.ERROR:
        return 30 if finding.is_critical else 15
    if finding.severity is Severity.WARNING:
        return 5
    return 1


def compute_security_score(findings: Iterable[Finding]) -> tuple[int, SecurityGrade]:
    """Score findings from 100 downwards, clamped at 0, and grade the result."""
    score = max(0, 100 - sum(_deduction(f) for f in findings))
    return score, grade_for_score(score)


def parse_line_range(lines: str) -> tuple[int, int] | None:
    """Parse ``"N"`` or ``"START-END"``; return None when invalid."""
    parts = lines.split("-")
    if len(parts) not in (1, 2) or not all(_UNSIGNED.fullmatch(p) for p in parts):
        return None
    start, end = int(parts[0]), int(parts[-1])
    if start > end:
        return None
    return start, end


def _path_ends_with(path: PurePath, suffix: str) -> bool:
    tail = PurePath(suffix).parts
    if not tail:
        return True
    return len(path.parts) >= len(tail) and path.parts[-len(tail):] == tail


def _matches(finding: Finding, suppression: Suppression) -> bool:
    if suppression.rule != finding.rule_id:
        return False
    if finding.file is not None:
        if not _path_ends_with(finding.file, suppression.file):
            return False
    elif suppression.file:
        return False
    if suppression.lines is not None and finding.line is not None:
        bounds = parse_line_range(suppression.lines)
        if bounds is None or not bounds[0] <= finding.line <= bounds[1]:
            return False
    return True


def find_suppression(
    finding: Finding, suppressions: Sequence[Suppression]
) -> Suppression | None:
    """Return the first suppression that applies to ``finding``, if any.

    File paths match by whole trailing components, so ``test.sh`` matches
    ``scripts/test.sh`` but not ``maltest.sh``.
    """
    return next((s for s in suppressions if _matches(finding, s)), None)


def _status_and_risk(findings: Sequence[Finding], strict: bool) -> tuple[ScanStatus, RiskLevel]:
    has_errors = any(f.severity is Severity.ERROR for f in findings)
    has_warnings = any(f.severity is Severity.WARNING for f in findings)
    has_critical = any(f.severity is Severity.ERROR and f.is_critical for f in findings)

    if has_errors or (has_warnings and strict):
        status = ScanStatus.FAILED
    elif has_warnings:
        status = ScanStatus.WARNING
    else:
        status = ScanStatus.PASSED

    if has_critical:
        risk = RiskLevel.CRITICAL
    elif has_errors:
        risk = RiskLevel.HIGH
    elif has_warnings:
        risk = RiskLevel.MEDIUM
    else:
        risk = RiskLevel.LOW
    return status, risk


def build_report(
    skill: str,
    results: Iterable[ScanResult],
    suppressions: Sequence[Suppression],
    strict: bool,
) -> ScanReport:
    """Aggregate scanner results into a report.

    Each scanner that ran is scored on its raw findings. Findings already
    marked suppressed, or matched by a suppression rule, are moved aside;
    the rest decide the status, risk level and overall score.
    """
    scored: list[ScanResult] = []
    for result in results:
        if not result.skipped and result.error is None:
            score, grade = compute_security_score(result.findings)
            result = replace(result, scanner_score=score, scanner_grade=grade)
        scored.append(result)

    active: list[Finding] = []
    suppressed: list[Finding] = []
    for result in scored:
        for finding in result.findings:
            if finding.suppressed:
                suppressed.append(replace(finding))
                continue
            rule = find_suppression(finding, suppressions)
            if rule is not None:
                suppressed.append(
                    replace(finding, suppressed=True, suppression_reason=rule.reason)
                )
            else:
                active.append(replace(finding))

    status, risk = _status_and_risk(active, strict)
    score, grade = compute_security_score(active)

    return ScanReport(
        skill=skill,
        scan_timestamp=datetime.now(timezone.utc).isoformat(),
        status=status,
        risk_level=risk,
        security_score=score,
        security_grade=grade,
        files_scanned=sum(r.files_scanned for r in scored),
        scanner_results=scored,
        findings=active,
        suppressed=suppressed,
        passed=status is ScanStatus.PASSED,
    )