"""SARIF 2.1.0 report formatter."""

from __future__ import annotations

import json
from typing import Any

from agentaudit.finding import Finding, ScanReport, Severity

TOOL_NAME = "oxidized-agentic-audit"
TOOL_VERSION = "0.5.0"
SARIF_VERSION = "2.1.0"

_LEVELS = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "note",
}


def _rule(rule_id: str, finding: Finding) -> dict[str, Any]:
    rule: dict[str, Any] = {}
    if finding.remediation is not None:
        rule["help"] = {"text": finding.remediation}
    rule["id"] = rule_id
    rule["shortDescription"] = {"text": finding.message}
    return rule


def _result(finding: Finding, rule_index: dict[str, int]) -> dict[str, Any]:
    result: dict[str, Any] = {"level": _LEVELS[finding.severity]}
    if finding.file is not None:
        physical: dict[str, Any] = {
            "artifactLocation": {"uri": str(finding.file).replace("\\", "/")}
        }
        if finding.line is not None:
            physical["region"] = {"startLine": finding.line}
        result["locations"] = [{"physicalLocation": physical}]
    result["message"] = {"text": finding.message}
    result["ruleId"] = finding.rule_id
    result["ruleIndex"] = rule_index[finding.rule_id]
    return result


def format_sarif(report: ScanReport) -> str:
    """Render a report as a SARIF 2.1.0 JSON document.

    Active and suppressed findings are both included; rules are
    deduplicated, sorted by id and referenced by index. The security score
    and grade are carried in the run's property bag.
    """
    all_findings = [*report.findings, *report.suppressed]

    first_by_rule: dict[str, Finding] = {}
    for finding in all_findings:
        first_by_rule.setdefault(finding.rule_id, finding)

    rule_ids = sorted(first_by_rule)
    rule_index = {rule_id: index for index, rule_id in enumerate(rule_ids)}

    run = {
        "properties": {
            "security_grade": report.security_grade.value,
            "security_score": report.security_score,
        },
        "results": [_result(f, rule_index) for f in all_findings],
        "tool": {
            "driver": {
                "name": TOOL_NAME,
                "rules": [_rule(rule_id, first_by_rule[rule_id]) for rule_id in rule_ids],
                "version": TOOL_VERSION,
            }
        },
    }
    document = {"runs": [run], "version": SARIF_VERSION}
    return json.dumps(document, indent=2, ensure_ascii=False)