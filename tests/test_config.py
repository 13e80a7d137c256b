from pathlib import Path

import pytest

from agentaudit.config import (
    DEFAULT_CONFIG_FILE,
    IGNORE_FILE,
    AllowlistConfig,
    Config,
    ConfigError,
    ScannersConfig,
    Suppression,
    load_config,
    load_suppressions,
    parse_config,
    parse_suppressions,
)

SCANNER_NAMES = [
    "shellcheck",
    "semgrep",
    "secrets",
    "prompt",
    "bash_patterns",
    "typescript",
    "typescript_patterns",
    "package_install",
    "frontmatter",
    "agent_frontmatter",
]


def test_default_allowlist_values():
    allow = AllowlistConfig()
    assert allow.registries == ["registry.npmjs.org", "pypi.org", "files.pythonhosted.org"]
    assert "github.com" in allow.domains
    assert "githubusercontent.com" in allow.domains


def test_default_config_flags():
    config = Config()
    assert config.strict.enabled is False
    assert config.semgrep.config is None
    assert config.semgrep.metrics is False
    assert config.semgrep.version_check is False


@pytest.mark.parametrize("name", SCANNER_NAMES)
def test_all_scanners_enabled_by_default(name):
    assert Config().is_scanner_enabled(name) is True


def test_unknown_scanner_is_enabled():
    assert Config().is_scanner_enabled("unknown_scanner") is True


def test_disabling_agent_frontmatter():
    config = Config()
    config.scanners.agent_frontmatter = False
    assert config.is_scanner_enabled("agent_frontmatter") is False
    assert config.is_scanner_enabled("frontmatter") is True


def test_typescript_toggle_covers_both_names():
    config = Config(scanners=ScannersConfig(typescript=False))
    assert config.is_scanner_enabled("typescript") is False
    assert config.is_scanner_enabled("typescript_patterns") is False


def test_normalize_lowercases_entries():
    allow = AllowlistConfig(registries=["Registry.NPMJS.org"], domains=["GitHub.com"])
    allow.normalize()
    assert allow.registries == ["registry.npmjs.org"]
    assert allow.domains == ["github.com"]


def test_normalize_default_is_unchanged():
    allow = AllowlistConfig()
    before = (list(allow.registries), list(allow.domains))
    allow.normalize()
    assert (allow.registries, allow.domains) == before


def test_parse_empty_config_equals_default():
    assert parse_config("") == Config()


def test_parse_partial_keeps_defaults():
    config = parse_config("[scanners]\nsemgrep = false\n")
    assert config.is_scanner_enabled("semgrep") is False
    assert config.is_scanner_enabled("shellcheck") is True
    assert config.allowlist == AllowlistConfig()


def test_parse_legacy_typescript_alias():
    config = parse_config("[scanners]\ntypescript_patterns = false\n")
    assert config.scanners.typescript is False


def test_parse_normalizes_allowlist():
    config = parse_config('[allowlist]\ndomains = ["Example.COM"]\n')
    assert config.allowlist.domains == ["example.com"]
    assert config.allowlist.registries == AllowlistConfig().registries


def test_parse_strict_and_semgrep():
    config = parse_config(
        '[strict]\nenabled = true\n[semgrep]\nconfig = "semgrep.yml"\nmetrics = true\n'
    )
    assert config.strict.enabled is True
    assert config.semgrep.config == "semgrep.yml"
    assert config.semgrep.metrics is True
    assert config.semgrep.version_check is False


def test_parse_invalid_toml_raises():
    with pytest.raises(ConfigError):
        parse_config("[scanners\n")


def test_parse_wrong_type_raises():
    with pytest.raises(ConfigError):
        parse_config('[scanners]\nprompt = "yes"\n')


def test_load_explicit_missing_raises(tmp_path):
    missing = tmp_path / "nope.toml"
    with pytest.raises(ConfigError, match="Config file not found"):
        load_config(missing)


def test_load_default_missing_returns_default(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_config() == Config()


def test_load_default_file_in_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / DEFAULT_CONFIG_FILE).write_text("[strict]\nenabled = true\n")
    assert load_config().strict.enabled is True


def test_load_explicit_file(tmp_path):
    path = tmp_path / "custom.toml"
    path.write_text('[allowlist]\nregistries = ["PyPI.org"]\n')
    assert load_config(path).allowlist.registries == ["pypi.org"]


def test_load_parse_failure_message(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("not = [valid\n")
    with pytest.raises(ConfigError, match="Failed to parse config"):
        load_config(path)


def test_parse_suppressions_full_entry():
    text = (
        '[[suppress]]\nrule = "bash/CAT-A-001"\nfile = "setup.sh"\n'
        'lines = "10-20"\nreason = "Accepted risk for bootstrapping"\nticket = "JIRA-1234"\n'
    )
    assert parse_suppressions(text) == [
        Suppression(
            rule="bash/CAT-A-001",
            file="setup.sh",
            reason="Accepted risk for bootstrapping",
            lines="10-20",
            ticket="JIRA-1234",
        )
    ]


def test_parse_suppressions_drops_unsafe_paths(capsys):
    text = (
        '[[suppress]]\nrule = "r1"\nfile = "../outside.sh"\nreason = "x"\n'
        '[[suppress]]\nrule = "r2"\nfile = "/etc/passwd"\nreason = "x"\n'
        '[[suppress]]\nrule = "r3"\nfile = ""\nreason = "x"\n'
    )
    result = parse_suppressions(text)
    assert [s.rule for s in result] == ["r3"]
    assert "unsafe path" in capsys.readouterr().err


def test_parse_suppressions_missing_field_raises():
    with pytest.raises(ConfigError):
        parse_suppressions('[[suppress]]\nrule = "r1"\nreason = "x"\n')


def test_parse_suppressions_missing_table_raises():
    with pytest.raises(ConfigError):
        parse_suppressions("")


def test_load_suppressions_absent_file(tmp_path):
    assert load_suppressions(tmp_path) == []


def test_load_suppressions_reads_file(tmp_path):
    (tmp_path / IGNORE_FILE).write_text(
        '[[suppress]]\nrule = "agent/bare-tool"\nfile = "AGENT.md"\nreason = "ok"\n'
    )
    result = load_suppressions(Path(tmp_path))
    assert [(s.rule, s.file, s.lines) for s in result] == [("agent/bare-tool", "AGENT.md", None)]


def test_load_suppressions_malformed_warns(tmp_path, capsys):
    (tmp_path / IGNORE_FILE).write_text("[[suppress\n")
    assert load_suppressions(tmp_path) == []
    assert "failed to parse" in capsys.readouterr().err