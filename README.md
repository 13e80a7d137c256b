# agentaudit

Security auditing for AI agent skills and agents.

`agentaudit` runs scanners that you supply over a skill or agent directory,
collects their findings, applies suppression rules, scores the result and
renders a report as terminal text (optionally ANSI-coloured), JSON or
SARIF 2.1.0.

It has no runtime dependencies beyond the Python standard library and
supports Python 3.11 and later.

## What it does not do

- It ships no scanners. Pattern checks, frontmatter validation and wrappers
  around external tools are not part of the package; you implement them
  against the `Scanner` interface.
- It has no command-line program and no rule catalogue to list or explain
  rules. It is a library to be called from Python.

## Concepts

All of these live in `agentaudit.finding`.

- **`Finding`** – one issue reported by a scanner: `rule_id`, `message`, a
  `Severity` (`ERROR`, `WARNING`, `INFO`), `scanner`, an optional `file`,
  `line`, `column` and `snippet`, suppression state and `remediation`.
  Severities order from most to least critical, so sorting puts errors first.
- **`ScanResult`** – everything one scanner produced, including
  `files_scanned`, whether it was `skipped` (with `skip_reason`) or failed
  (`error`), and its own `scanner_score` / `scanner_grade`.
  `skipped_result(name, reason)` and `error_result(name, error, duration_ms)`
  build the two special cases.
- **`ScanReport`** – the combined outcome: active `findings` and `suppressed`
  findings, a `ScanStatus` (passed, warning, failed), a `RiskLevel` (low,
  medium, high, critical), a 0–100 `security_score`, a `SecurityGrade`, a UTC
  timestamp and a `passed` flag. `count_by_severity()` returns
  `(errors, warnings, info)`; `error_count()`, `warning_count()` and
  `info_count()` return each on its own.

### Scoring

Each active finding deducts points from 100:

| Finding                                  | Deduction |
|------------------------------------------|-----------|
| Error whose rule id is in a critical category | 30   |
| Any other error                          | 15        |
| Warning                                  | 5         |
| Info                                     | 1         |

Critical rule ids start with `bash/CAT-A`, `bash/CAT-D`, `typescript/CAT-A`,
`typescript/CAT-D` or `prompt/`. The score never drops below 0. Grades
(`grade_for_score`): A for 90–100, B for 75–89, C for 60–74, D for 40–59, F
below 40. `compute_security_score(findings)` returns `(score, grade)`. Every
scanner that ran (not skipped, no error) also gets its own score, computed on
its findings before suppressions are applied.

### Status and risk

- **failed** – at least one error, or any warning in strict mode;
- **warning** – warnings only, strict mode off;
- **passed** – nothing active left.

The risk level is critical when a critical-category error is present, high for
other errors, medium for warnings only and low otherwise.

## Configuration

Configuration is TOML. Every section is optional:

```toml
[allowlist]
registries = ["registry.npmjs.org", "pypi.org", "files.pythonhosted.org"]
domains = ["github.com", "githubusercontent.com", "pypi.org"]

[strict]
enabled = false

[scanners]
semgrep = false        # every scanner is on unless switched off here

[semgrep]
config = "semgrep.yml"
metrics = false
version_check = false
```

The `[scanners]` switches are `shellcheck`, `semgrep`, `secrets`, `prompt`,
`bash_patterns`, `typescript` (also accepted as `typescript_patterns`),
`package_install`, `frontmatter` and `agent_frontmatter`.

```python
from agentaudit.config import load_config, parse_config

config = load_config(None)   # oxidized-agentic-audit.toml if present, else defaults
config = parse_config('[strict]\nenabled = true\n')
config.is_scanner_enabled("semgrep")   # unknown scanner names count as enabled
```

An explicit path that does not exist, an unreadable file, or content that does
not parse or has wrongly typed values raises `ConfigError`. Allowlist entries
are lower-cased on load.

## Suppressions

A scanned directory may carry an `.oxidized-agentic-audit-ignore` file listing
findings to silence:

```toml
[[suppress]]
rule = "bash/CAT-A1"
file = "scripts/setup.sh"
lines = "10-20"
reason = "Accepted risk for bootstrapping"
ticket = "SEC-1"
```

`rule`, `file` and `reason` are required; `lines` (`"N"` or `"START-END"`) and
`ticket` are optional. A suppression applies when the rule id matches, the
finding's path ends with `file` by whole path components (`test.sh` matches
`scripts/test.sh` but not `maltest.sh`; an empty `file` matches any finding,
including ones without a file), and, if both `lines` and the finding's line
are set, the line lies in the range. An invalid range never matches. Entries
whose `file` is absolute or contains `..` are dropped with a warning on
standard error.

```python
from agentaudit.config import load_suppressions, parse_suppressions

suppressions = load_suppressions("./my-skill")   # [] if absent or invalid
```

`parse_suppressions(text)` raises `ConfigError` for invalid text;
`load_suppressions` prints a warning and returns an empty list instead.
`agentaudit.finding.find_suppression(finding, suppressions)` returns the first
matching entry, or `None`.

## Running a scan

Scanners subclass `agentaudit.scan.Scanner` and implement `name()`,
`description()` and `scan(path, config)`, the last returning a `ScanResult`.
`is_available()` returns `True` unless overridden.

```python
from pathlib import Path

from agentaudit.config import Config, load_config
from agentaudit.finding import Finding, ScanResult, Severity
from agentaudit.output.formats import OutputFormat, format_report
from agentaudit.scan import Scanner, run_scan


class TodoScanner(Scanner):
    def name(self) -> str:
        return "todo"

    def description(self) -> str:
        return "Flags TODO markers in SKILL.md"

    def scan(self, path: Path, config: Config) -> ScanResult:
        skill_md = path / "SKILL.md"
        findings = [
            Finding(
                rule_id="todo/marker",
                message="TODO left in skill",
                severity=Severity.INFO,
                scanner="todo",
                file="SKILL.md",
                line=number,
            )
            for number, text in enumerate(skill_md.read_text().splitlines(), 1)
            if "TODO" in text
        ]
        return ScanResult(scanner_name="todo", findings=findings, files_scanned=1)


report = run_scan("./my-skill", load_config(None), [TodoScanner()])
print(format_report(report, OutputFormat.PRETTY))
if not report.passed:
    raise SystemExit(1)
```

`run_scan` runs the scanners in parallel threads and keeps results in the
order given. Disabled scanners appear in the report as skipped with the reason
`disabled in config`; scanners that are not available are skipped with
`<name> not found on PATH`. Suppressions are loaded from the scanned
directory, and the report is named after its last path component
(`extract_skill_name`, `"unknown"` when there is none). A one-line progress
header is written to standard error so it never mixes with JSON or SARIF
output.

`ScanMode` (`SKILL`, `AGENT`) names the two kinds of directory and gives the
file that marks each (`sentinel`: `SKILL.md` or `AGENT.md`).

To build a report from results you already have, use
`agentaudit.finding.build_report(skill, results, suppressions, strict)`.

## Output formats

- `agentaudit.output.pretty.format_pretty(report, color)` – human-readable
  text: scanner statuses, findings sorted errors first, suppressed findings
  and a summary line. `color=None` decides with `should_color()`, which honours
  `CLICOLOR_FORCE`, `NO_COLOR` and `CLICOLOR` and otherwise checks whether
  standard output is a terminal.
- `agentaudit.output.json_report.format_json(report)` – indented JSON with a
  severity summary and both active and suppressed findings.
- `agentaudit.output.sarif_report.format_sarif(report)` – SARIF 2.1.0 with
  rules deduplicated, sorted by id and referenced by index, and the security
  score and grade in the run's property bag.

`agentaudit.output.formats.format_report(report, output_format)` picks one of
them by `OutputFormat` or by name (`"pretty"`, `"json"`, `"sarif"`); an
unknown name raises `ValueError`.

## Tests

The test suite uses pytest; install the package with its `test` extra and run
`pytest`.