from pathlib import Path, PurePath

import pytest

from agentaudit.config import Config
from agentaudit.finding import Finding, ScanResult, ScanStatus, Severity
from agentaudit.scan import Scanner, extract_skill_name, run_scan


class FakeScanner(Scanner):
    def __init__(self, scanner_name, findings=(), available=True, files=1):
        self._name = scanner_name
        self._findings = list(findings)
        self._available = available
        self._files = files
        self.calls = []

    def name(self):
        return self._name

    def description(self):
        return "fake scanner"

    def is_available(self):
        return self._available

    def scan(self, path, config):
        self.calls.append(Path(path))
        return ScanResult(
            self._name, findings=list(self._findings), files_scanned=self._files
        )


def _finding(rule_id, severity, **kwargs):
    return Finding(rule_id=rule_id, message="m", severity=severity, scanner="fake", **kwargs)


def _skill_dir(tmp_path, name="alpha"):
    directory = tmp_path / name
    directory.mkdir()
    return directory


def test_results_keep_scanner_order(tmp_path):
    scanners = [FakeScanner("one"), FakeScanner("two"), FakeScanner("three")]
    report = run_scan(_skill_dir(tmp_path), Config(), scanners)
    assert [r.scanner_name for r in report.scanner_results] == ["one", "two", "three"]
    assert report.files_scanned == 3


def test_scanner_receives_path(tmp_path):
    directory = _skill_dir(tmp_path)
    scanner = FakeScanner("one")
    run_scan(directory, Config(), [scanner])
    assert scanner.calls == [directory]


def test_disabled_scanner_is_skipped(tmp_path):
    config = Config()
    config.scanners.semgrep = False
    scanner = FakeScanner("semgrep", [_finding("a/x", Severity.ERROR)])
    report = run_scan(_skill_dir(tmp_path), config, [scanner])
    (result,) = report.scanner_results
    assert result.skipped is True
    assert result.skip_reason == "disabled in config"
    assert scanner.calls == []
    assert report.passed is True


def test_unavailable_scanner_is_skipped(tmp_path):
    scanner = FakeScanner("shellcheck", available=False)
    report = run_scan(_skill_dir(tmp_path), Config(), [scanner])
    (result,) = report.scanner_results
    assert result.skipped is True
    assert result.skip_reason == "shellcheck not found on PATH"
    assert scanner.calls == []


def test_skill_name_from_directory(tmp_path):
    report = run_scan(_skill_dir(tmp_path, "beta"), Config(), [FakeScanner("one")])
    assert report.skill == "beta"


def test_findings_fail_the_scan(tmp_path):
    scanner = FakeScanner("bash_patterns", [_finding("bash/CAT-A1", Severity.ERROR)])
    report = run_scan(_skill_dir(tmp_path), Config(), [scanner])
    assert report.status is ScanStatus.FAILED
    assert report.passed is False
    assert [f.rule_id for f in report.findings] == ["bash/CAT-A1"]


def test_suppression_file_applied(tmp_path):
    directory = _skill_dir(tmp_path)
    (directory / ".oxidized-agentic-audit-ignore").write_text(
        '[[suppress]]\nrule = "bash/CAT-A1"\nfile = "run.sh"\nreason = "accepted risk"\n',
        encoding="utf-8",
    )
    finding = _finding("bash/CAT-A1", Severity.ERROR, file=PurePath("scripts/run.sh"), line=2)
    report = run_scan(directory, Config(), [FakeScanner("bash_patterns", [finding])])
    assert report.findings == []
    assert [f.suppression_reason for f in report.suppressed] == ["accepted risk"]
    assert report.passed is True


def test_strict_mode_fails_on_warnings(tmp_path):
    scanner = FakeScanner("bash_patterns", [_finding("bash/CAT-E1", Severity.WARNING)])
    config = Config()
    relaxed = run_scan(_skill_dir(tmp_path, "a"), config, [scanner])
    config.strict.enabled = True
    strict = run_scan(_skill_dir(tmp_path, "b"), config, [scanner])
    assert relaxed.status is ScanStatus.WARNING
    assert strict.status is ScanStatus.FAILED
    assert strict.passed is False


def test_no_scanners_passes(tmp_path):
    report = run_scan(_skill_dir(tmp_path), Config(), [])
    assert report.scanner_results == []
    assert report.passed is True
    assert report.security_score == 100


def test_progress_header_on_stderr(tmp_path, capsys):
    config = Config()
    config.scanners.prompt = False
    run_scan(_skill_dir(tmp_path), config, [FakeScanner("prompt"), FakeScanner("one"), FakeScanner("two")])
    captured = capsys.readouterr()
    assert "Running 2 scanners… (1 disabled)" in captured.err
    assert captured.out == ""


def test_progress_header_singular(tmp_path, capsys):
    run_scan(_skill_dir(tmp_path), Config(), [FakeScanner("one")])
    assert "Running 1 scanner…" in capsys.readouterr().err


def test_extract_skill_name():
    assert extract_skill_name(Path("skills") / "alpha") == "alpha"
    assert extract_skill_name("/") == "unknown"
    assert extract_skill_name("skills/..") == "unknown"


def test_scanner_is_abstract():
    with pytest.raises(TypeError):
        Scanner()