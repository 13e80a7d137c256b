"""JSON report formatter."""

from __future__ import annotations

import json
from typing import Any

from agentaudit.finding import Finding, ScanReport


def _finding_to_dict(finding: Finding) -> dict[str, Any]:
    return {
        "rule_id": finding.rule_id,
        "message": finding.message,
        "severity": finding.severity.value,
        "file": None if finding.file is None else str(finding.file),
        "line": finding.line,
        "column": finding.column,
        "scanner": finding.scanner,
        "snippet": finding.snippet,
        "suppressed": finding.suppressed,
        "suppression_reason": finding.suppression_reason,
        "remediation": finding.remediation,
    }


def format_json(report: ScanReport) -> str:
    """Render a report as pretty-printed JSON with a severity summary."""
    errors, warnings, info = report.count_by_severity()
    document = {
        "skill": report.skill,
        "version": report.version,
        "scan_timestamp": report.scan_timestamp,
        "status": report.status.value,
        "risk_level": report.risk_level.value,
        "security_score": report.security_score,
        "security_grade": report.security_grade.value,
        "passed": report.passed,
        "summary": {
            "errors": errors,
            "warnings": warnings,
            "info": info,
            "suppressed": len(report.suppressed),
        },
        "findings": [_finding_to_dict(f) for f in report.findings],
        "suppressed": [_finding_to_dict(f) for f in report.suppressed],
    }
    return json.dumps(document, indent=2, ensure_ascii=False)