"""
contract-impact — unit tests for config loader

File: tests/unit/config/test_loader.py
Last updated: 2026-10-18

Purpose
- Validate deterministic config loading from defaults, TOML, env overrides, and CLI overrides.

What this test file should cover
- Precedence: CLI > env > file > defaults.
- Deterministic env var path mapping and type coercion (str, bool, comma lists).
- Path normalization relative to the config file.
- Actionable errors for missing files, bad TOML and bad env values.

Functional requirements
- Works offline with no config file present.

Non-functional requirements
- Deterministic output across repeated loads.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path

import pytest

from contract_impact.config import (
    ConfigLoadError,
    ConfigValidationError,
    dump_effective_config,
    env_name_for_path,
    load_config,
)


def _write_config(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _sha256_json(data: dict[str, object]) -> str:
    payload = json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def test_loader_precedence_default_file_env_cli(tmp_path: Path) -> None:
    config_path = tmp_path / "contract_impact.toml"
    default_path = tmp_path / "default.toml"
    _write_config(default_path, "")
    _write_config(
        config_path,
        """
[observability]
log_level = "WARNING"
""".strip(),
    )

    default_loaded = load_config(default_path, environ={})
    file_loaded = load_config(config_path, environ={})
    env_loaded = load_config(
        config_path, environ={"CONTRACT_IMPACT_OBSERVABILITY_LOG_LEVEL": "DEBUG"}
    )
    cli_loaded = load_config(
        config_path,
        environ={"CONTRACT_IMPACT_OBSERVABILITY_LOG_LEVEL": "DEBUG"},
        cli_overrides={"observability.log_level": "ERROR"},
    )

    assert default_loaded["observability"]["log_level"] == "INFO"
    assert file_loaded["observability"]["log_level"] == "WARNING"
    assert env_loaded["observability"]["log_level"] == "DEBUG"
    assert cli_loaded["observability"]["log_level"] == "ERROR"


def test_defaults_when_no_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    loaded = load_config(environ={})

    assert loaded["notifications"] == {
        "storage_root": "management/notifications",
        "design_source": "design-system",
        "design_roles": ["domain-designer", "frontend-developer"],
        "unknown_domain": "unknown",
    }
    assert loaded["watch"]["design_patterns"] == ["**/contracts/standards/design-system.md"]
    assert loaded["observability"]["log_dir"] == (tmp_path.resolve() / "logs").as_posix()


def test_env_coerces_bools_and_comma_lists(tmp_path: Path) -> None:
    config_path = tmp_path / "contract_impact.toml"
    _write_config(config_path, "")

    loaded = load_config(
        config_path,
        environ={
            "CONTRACT_IMPACT_OBSERVABILITY_LOG_TO_STDOUT": "yes",
            "CONTRACT_IMPACT_NOTIFICATIONS_DESIGN_ROLES": " ux-lead, , frontend-developer ",
        },
    )

    assert loaded["observability"]["log_to_stdout"] is True
    assert loaded["notifications"]["design_roles"] == ["ux-lead", "frontend-developer"]


def test_invalid_env_coercion_raises_actionable_error(tmp_path: Path) -> None:
    config_path = tmp_path / "contract_impact.toml"
    _write_config(config_path, "")

    with pytest.raises(ConfigLoadError, match="CONTRACT_IMPACT_OBSERVABILITY_LOG_TO_STDOUT"):
        load_config(config_path, environ={"CONTRACT_IMPACT_OBSERVABILITY_LOG_TO_STDOUT": "maybe"})


def test_explicit_missing_file_and_bad_toml_raise(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="config file not found"):
        load_config(tmp_path / "absent.toml", environ={})

    broken = tmp_path / "broken.toml"
    _write_config(broken, "[watch\n")
    with pytest.raises(ConfigLoadError, match="invalid TOML"):
        load_config(broken, environ={})


def test_invalid_values_surface_structured_issues(tmp_path: Path) -> None:
    config_path = tmp_path / "contract_impact.toml"
    _write_config(
        config_path,
        """
[notifications]
storage_root = "../outside"
design_source = "Design System"
""".strip(),
    )

    with pytest.raises(ConfigValidationError) as excinfo:
        load_config(config_path, environ={})

    paths = [issue.path for issue in excinfo.value.issues]
    assert paths == ["notifications.storage_root", "notifications.design_source"]


def test_loader_is_deterministic_for_same_inputs(tmp_path: Path) -> None:
    config_path = tmp_path / "contract_impact.toml"
    _write_config(config_path, "")

    env = {"CONTRACT_IMPACT_WATCH_DESIGN_PATTERNS": "docs/design.md"}
    cli = {"notifications.unknown_domain": "orphan"}

    first = load_config(config_path, environ=env, cli_overrides=cli)
    second = load_config(config_path, environ=env, cli_overrides=cli)

    assert _sha256_json(first) == _sha256_json(second)
    assert first["watch"]["design_patterns"] == ["docs/design.md"]
    assert dump_effective_config(first) == dump_effective_config(second)


def test_path_normalization_is_relative_to_config_file(tmp_path: Path) -> None:
    config_path = tmp_path / "nested" / "contract_impact.toml"
    _write_config(
        config_path,
        """
[observability]
log_dir = "run-logs"
""".strip(),
    )

    loaded = load_config(config_path, environ={})

    assert loaded["observability"]["log_dir"] == (config_path.parent / "run-logs").as_posix()


def test_env_name_for_path() -> None:
    assert env_name_for_path(("notifications", "storage_root")) == (
        "CONTRACT_IMPACT_NOTIFICATIONS_STORAGE_ROOT"
    )
