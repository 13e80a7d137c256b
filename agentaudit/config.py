"""Configuration loading and finding-suppression rules.

The scanner configuration is a TOML file (``oxidized-agentic-audit.toml`` in
the working directory by default). Suppressions live in an
``.oxidized-agentic-audit-ignore`` TOML file inside the scanned directory.
"""

from __future__ import annotations

import sys
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path, PurePath
from typing import Any

DEFAULT_CONFIG_FILE = "oxidized-agentic-audit.toml"
IGNORE_FILE = ".oxidized-agentic-audit-ignore"


class ConfigError(Exception):
    """Raised when a configuration or suppression file cannot be used."""


def _default_registries() -> list[str]:
    return ["registry.npmjs.org", "pypi.org", "files.pythonhosted.org"]


def _default_domains() -> list[str]:
    return [
        "registry.npmjs.org",
        "npmjs.org",
        "github.com",
        "githubusercontent.com",
        "pypi.org",
    ]


@dataclass
class AllowlistConfig:
    """Trusted package registries and download domains."""

    registries: list[str] = field(default_factory=_default_registries)
    domains: list[str] = field(default_factory=_default_domains)

    def normalize(self) -> None:
        """Lowercase every entry in place."""
        self.registries = [entry.lower() for entry in self.registries]
        self.domains = [entry.lower() for entry in self.domains]


@dataclass
class StrictConfig:
    """When enabled, warnings make a scan fail."""

    enabled: bool = False


@dataclass
class ScannersConfig:
    """Per-scanner on/off switches; every scanner is enabled by default."""

    shellcheck: bool = True
    semgrep: bool = True
    secrets: bool = True
    prompt: bool = True
    bash_patterns: bool = True
    typescript: bool = True
    package_install: bool = True
    frontmatter: bool = True
    agent_frontmatter: bool = True


@dataclass
class SemgrepConfig:
    """Settings for the semgrep scanner."""

    config: str | None = None
    metrics: bool = False
    version_check: bool = False


@dataclass
class Config:
    """Top-level scanner configuration."""

    allowlist: AllowlistConfig = field(default_factory=AllowlistConfig)
    strict: StrictConfig = field(default_factory=StrictConfig)
    scanners: ScannersConfig = field(default_factory=ScannersConfig)
    semgrep: SemgrepConfig = field(default_factory=SemgrepConfig)

    def is_scanner_enabled(self, name: str) -> bool:
        """Return whether the named scanner is enabled; unknown names are enabled."""
        if name in ("typescript", "typescript_patterns"):
            return self.scanners.typescript
        if name in _SCANNER_FIELDS:
            return getattr(self.scanners, name)
        return True


_SCANNER_FIELDS = frozenset(f.name for f in fields(ScannersConfig))


@dataclass
class Suppression:
    """A rule that silences a specific finding.

    ``file`` is a path relative to the scanned directory, or an empty string
    to match any file. ``lines`` is either ``"N"`` or ``"START-END"``.
    """

    rule: str
    file: str
    reason: str
    lines: str | None = None
    ticket: str | None = None


# --------------------------------------------------------------------------
# Parsing helpers
# --------------------------------------------------------------------------


def _table(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a table")
    return value


def _bool(table: dict[str, Any], key: str, default: bool, where: str) -> bool:
    value = table.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"'{where}.{key}' must be a boolean")
    return value


def _str_list(table: dict[str, Any], key: str, default: list[str], where: str) -> list[str]:
    if key not in table:
        return default
    value = table[key]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{where}.{key}' must be an array of strings")
    return list(value)


def _opt_str(table: dict[str, Any], key: str, where: str) -> str | None:
    value = table.get(key)
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"'{where}.{key}' must be a string")
    return value


def _req_str(table: dict[str, Any], key: str, where: str) -> str:
    if key not in table:
        raise ConfigError(f"missing field '{key}' in {where}")
    value = table[key]
    if not isinstance(value, str):
        raise ConfigError(f"'{where}.{key}' must be a string")
    return value


def _parse_scanners(table: dict[str, Any]) -> ScannersConfig:
    if "typescript" in table and "typescript_patterns" in table:
        raise ConfigError("duplicate field 'typescript' in scanners")
    table = dict(table)
    if "typescript_patterns" in table:
        table["typescript"] = table.pop("typescript_patterns")
    defaults = ScannersConfig()
    values = {
        name: _bool(table, name, getattr(defaults, name), "scanners")
        for name in _SCANNER_FIELDS
    }
    return ScannersConfig(**values)


def parse_config(text: str) -> Config:
    """Parse TOML configuration text; missing settings take their defaults.

    Allowlist entries are normalized to lowercase.
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(str(exc)) from exc

    allow_table = _table(data, "allowlist")
    allowlist = AllowlistConfig(
        registries=_str_list(allow_table, "registries", _default_registries(), "allowlist"),
        domains=_str_list(allow_table, "domains", _default_domains(), "allowlist"),
    )
    allowlist.normalize()

    strict = StrictConfig(enabled=_bool(_table(data, "strict"), "enabled", False, "strict"))
    scanners = _parse_scanners(_table(data, "scanners"))

    semgrep_table = _table(data, "semgrep")
    semgrep = SemgrepConfig(
        config=_opt_str(semgrep_table, "config", "semgrep"),
        metrics=_bool(semgrep_table, "metrics", False, "semgrep"),
        version_check=_bool(semgrep_table, "version_check", False, "semgrep"),
    )

    return Config(allowlist=allowlist, strict=strict, scanners=scanners, semgrep=semgrep)


def load_config(path: str | Path | None = None) -> Config:
    """Load configuration from ``path``, or from the default file if present.

    With no path, a missing default file yields the built-in defaults. An
    explicit path that does not exist, an unreadable file or invalid TOML
    raises :class:`ConfigError`.
    """
    explicit = path is not None
    config_path = Path(path) if explicit else Path(DEFAULT_CONFIG_FILE)

    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        if not explicit:
            return Config()
        raise ConfigError(f"Config file not found: {config_path}") from None
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read config {config_path}: {exc}") from exc

    try:
        return parse_config(text)
    except ConfigError as exc:
        raise ConfigError(f"Failed to parse config {config_path}: {exc}") from exc


def _is_unsafe_path(file: str) -> bool:
    candidate = PurePath(file)
    return ".." in candidate.parts or candidate.is_absolute() or file.startswith("/")


def parse_suppressions(text: str) -> list[Suppression]:
    """Parse suppression TOML text, dropping entries whose ``file`` escapes the directory.

    Raises :class:`ConfigError` when the text is not a valid suppression file.
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(str(exc)) from exc

    if "suppress" not in data:
        raise ConfigError("missing field 'suppress'")
    entries = data["suppress"]
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise ConfigError("'suppress' must be an array of tables")

    parsed = [
        Suppression(
            rule=_req_str(entry, "rule", "suppress"),
            file=_req_str(entry, "file", "suppress"),
            reason=_req_str(entry, "reason", "suppress"),
            lines=_opt_str(entry, "lines", "suppress"),
            ticket=_opt_str(entry, "ticket", "suppress"),
        )
        for entry in entries
    ]

    safe = []
    for suppression in parsed:
        if _is_unsafe_path(suppression.file):
            print(
                "Warning: ignoring suppression with unsafe path in file field: "
                f"{suppression.file}",
                file=sys.stderr,
            )
        else:
            safe.append(suppression)
    return safe


def load_suppressions(skill_path: str | Path) -> list[Suppression]:
    """Load suppressions from the ignore file in ``skill_path``.

    Returns an empty list when the file is absent, unreadable or invalid
    (a warning is printed to stderr for invalid content).
    """
    ignore_path = Path(skill_path) / IGNORE_FILE
    if not ignore_path.exists():
        return []
    try:
        text = ignore_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return []
    try:
        return parse_suppressions(text)
    except ConfigError as exc:
        print(f"Warning: failed to parse {IGNORE_FILE}: {exc}", file=sys.stderr)
        return []