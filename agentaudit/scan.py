"""Scan orchestration: run scanners over a directory and build the report."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from pathlib import Path

from agentaudit.config import Config, load_suppressions
from agentaudit.finding import ScanReport, ScanResult, build_report, skipped_result

_DISABLED_REASON = "disabled in config"


class ScanMode(Enum):
    """Whether a directory holds a skill or an agent."""

    SKILL = "skill"
    AGENT = "agent"

    @property
    def sentinel(self) -> str:
        """File that marks a directory of this kind."""
        return "SKILL.md" if self is ScanMode.SKILL else "AGENT.md"

    @property
    def article(self) -> str:
        """Indefinite article for the entity name."""
        return "a" if self is ScanMode.SKILL else "an"


class Scanner(ABC):
    """A pluggable scanner over a skill or agent directory."""

    @abstractmethod
    def name(self) -> str:
        """Identifier used in results and configuration."""

    @abstractmethod
    def description(self) -> str:
        """One-line description of what the scanner checks."""

    def is_available(self) -> bool:
        """Whether the scanner can run on this host."""
        return True

    @abstractmethod
    def scan(self, path: Path, config: Config) -> ScanResult:
        """Scan the directory at ``path``."""


def extract_skill_name(path: str | Path) -> str:
    """Return the last path component, or ``"unknown"`` when there is none."""
    name = Path(path).name
    return name if name and name != ".." else "unknown"


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


def run_scan(path: str | Path, config: Config, scanners: Sequence[Scanner]) -> ScanReport:
    """Run ``scanners`` over ``path`` in parallel and build the report.

    Disabled scanners are recorded as skipped with reason
    ``"disabled in config"``; unavailable ones as ``"<name> not found on PATH"``.
    Result order follows ``scanners``. Suppressions are loaded from ``path``.
    """
    path = Path(path)
    n_active = sum(1 for s in scanners if config.is_scanner_enabled(s.name()))
    n_disabled = len(scanners) - n_active

    header = f"Running {n_active} scanner{_plural(n_active)}…"
    if n_disabled:
        header += f" ({n_disabled} disabled)"
    print(header, file=sys.stderr)

    def run_one(scanner: Scanner) -> ScanResult:
        name = scanner.name()
        if not config.is_scanner_enabled(name):
            return skipped_result(name, _DISABLED_REASON)
        if scanner.is_available():
            return scanner.scan(path, config)
        return skipped_result(name, f"{name} not found on PATH")

    if scanners:
        with ThreadPoolExecutor(max_workers=len(scanners)) as pool:
            results = list(pool.map(run_one, scanners))
    else:
        results = []

    suppressions = load_suppressions(path)
    return build_report(
        extract_skill_name(path), results, suppressions, config.strict.enabled
    )