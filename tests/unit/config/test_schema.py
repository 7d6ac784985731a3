"""
contract-impact — unit tests for config schema validation

File: tests/unit/config/test_schema.py
Last updated: 2026-10-18

Purpose
- Validate strict config schema behavior and structured errors.

What this test file should cover
- Built-in defaults validate and are returned as independent copies.
- Rejects unknown keys, missing sections and invalid types with actionable paths.
- Schema version mismatch guidance.
- Deterministic deep merge.
"""

from __future__ import annotations

import pytest

from contract_impact.config import (
    ConfigSchemaVersion,
    ConfigValidationError,
    assert_valid_config,
    default_config,
    merge_config,
    migration_guidance,
    validate_config,
)


def test_defaults_validate() -> None:
    result = validate_config(default_config())

    assert result.is_valid
    assert result.issues == ()
    assert result.config is not None
    assert result.config["meta"]["schema_version"] == ConfigSchemaVersion


def test_default_config_returns_independent_copies() -> None:
    first = default_config()
    first["notifications"]["design_roles"].append("mutated")

    assert "mutated" not in default_config()["notifications"]["design_roles"]


def test_unknown_and_missing_keys_are_reported_with_paths() -> None:
    config = merge_config(default_config(), {"watch": {"extra_patterns": ["*.json"]}})
    del config["observability"]

    result = validate_config(config)

    assert not result.is_valid
    assert [(issue.path, issue.message) for issue in result.issues] == [
        ("observability", "missing required field"),
        ("watch.extra_patterns", "unknown field"),
    ]


@pytest.mark.parametrize(
    ("overlay", "path"),
    [
        ({"watch": {"interface_patterns": "contracts/*.yaml"}}, "watch.interface_patterns"),
        ({"watch": {"design_patterns": ["ok", ""]}}, "watch.design_patterns[1]"),
        ({"notifications": {"storage_root": "/abs/path"}}, "notifications.storage_root"),
        ({"notifications": {"storage_root": "a\\b"}}, "notifications.storage_root"),
        ({"notifications": {"design_roles": []}}, "notifications.design_roles"),
        ({"notifications": {"unknown_domain": "-bad"}}, "notifications.unknown_domain"),
        ({"observability": {"log_level": "TRACE"}}, "observability.log_level"),
        ({"observability": {"log_to_stdout": "yes"}}, "observability.log_to_stdout"),
        ({"meta": {"schema_version": True}}, "meta.schema_version"),
    ],
)
def test_invalid_values_are_rejected(overlay: dict[str, object], path: str) -> None:
    result = validate_config(merge_config(default_config(), overlay))

    assert [issue.path for issue in result.issues] == [path]


def test_storage_root_trailing_slash_is_stripped_and_lists_deduplicated() -> None:
    config = merge_config(
        default_config(),
        {
            "notifications": {"storage_root": "ops/inbox/"},
            "watch": {"design_patterns": ["a.md", "a.md", "b.md"]},
        },
    )

    validated = assert_valid_config(config)

    assert validated["notifications"]["storage_root"] == "ops/inbox"
    assert validated["watch"]["design_patterns"] == ["a.md", "b.md"]


def test_schema_version_mismatch_carries_migration_guidance() -> None:
    config = merge_config(default_config(), {"meta": {"schema_version": 99}})

    with pytest.raises(ConfigValidationError, match="newer than supported"):
        assert_valid_config(config)
    assert "older than supported" in migration_guidance(0)
    assert migration_guidance(ConfigSchemaVersion) == "schema version is current"


def test_non_mapping_root_is_rejected() -> None:
    result = validate_config(["not", "a", "mapping"])

    assert result.config is None
    assert result.issues[0].path == "<root>"


def test_merge_config_is_deep_and_non_destructive() -> None:
    base = {"a": {"b": 1, "c": [1, 2]}, "d": "keep"}
    overlay = {"a": {"c": [3]}, "e": True}

    merged = merge_config(base, overlay)

    assert merged == {"a": {"b": 1, "c": [3]}, "d": "keep", "e": True}
    assert base == {"a": {"b": 1, "c": [1, 2]}, "d": "keep"}
