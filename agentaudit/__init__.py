"""Security auditing for AI agent skills and agents: configuration, suppressions, findings, scoring, scan orchestration and report formatting."""

__version__ = "0.5.0"