"""Report format selection."""

from __future__ import annotations

from enum import Enum

from agentaudit.finding import ScanReport
from agentaudit.output.json_report import format_json
from agentaudit.output.pretty import format_pretty
from agentaudit.output.sarif_report import format_sarif


class OutputFormat(Enum):
    """Supported report formats."""

    PRETTY = "pretty"
    JSON = "json"
    SARIF = "sarif"

    def __str__(self) -> str:
        return self.value


def format_report(report: ScanReport, output_format: OutputFormat | str) -> str:
    """Render ``report`` in the requested format.

    A format name such as ``"json"`` is accepted; an unknown name raises
    :class:`ValueError`.
    """
    chosen = OutputFormat(output_format)
    if chosen is OutputFormat.JSON:
        return format_json(report)
    if chosen is OutputFormat.SARIF:
        return format_sarif(report)
    return format_pretty(report)