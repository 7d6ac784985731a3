"""
contract-impact — unit tests for the change classification table

File: tests/unit/diffing/test_classification.py
Last updated: 2026-10-18

Purpose
- Pin the breaking/priority/deadline facts every caller reads from one table.

What this test file should cover
- Coverage of every change kind and design detail.
- Breaking entries require deadlines; informational ones never do.
- Token addition breaking vs component addition informational.
- Change record invariants (design detail present exactly for design kinds).
"""

from __future__ import annotations

from types import MappingProxyType

import pytest

from contract_impact.diffing import (
    CHANGE_CLASSIFICATION,
    DESIGN_KINDS,
    Change,
    ChangeDetail,
    ChangeKind,
    batch_priority,
    classify,
    has_breaking_change,
    is_breaking,
)

_BREAKING_HIGH = {
    ChangeKind.FIELD_REMOVE,
    ChangeKind.FIELD_TYPE_CHANGE,
    ChangeKind.ENDPOINT_REMOVE,
}


def test_table_covers_every_kind_and_detail() -> None:
    interface_keys = {(kind, None) for kind in ChangeKind if kind not in DESIGN_KINDS}
    design_keys = {
        (ChangeKind.DESIGN_TOKEN_CHANGE, detail)
        for detail in (
            ChangeDetail.TOKEN_ADDED,
            ChangeDetail.TOKEN_MODIFIED,
            ChangeDetail.TOKEN_REMOVED,
        )
    } | {
        (ChangeKind.DESIGN_COMPONENT_CHANGE, detail)
        for detail in (ChangeDetail.COMPONENT_ADDED, ChangeDetail.COMPONENT_REMOVED)
    }

    assert set(CHANGE_CLASSIFICATION) == interface_keys | design_keys
    assert isinstance(CHANGE_CLASSIFICATION, MappingProxyType)


@pytest.mark.parametrize("kind", [kind for kind in ChangeKind if kind not in DESIGN_KINDS])
def test_interface_kinds(kind: ChangeKind) -> None:
    entry = CHANGE_CLASSIFICATION[(kind, None)]

    assert entry.breaking is (kind in _BREAKING_HIGH)
    assert entry.priority == ("high" if kind in _BREAKING_HIGH else "normal")


def test_deadline_required_exactly_for_breaking_entries() -> None:
    for entry in CHANGE_CLASSIFICATION.values():
        assert entry.deadline_required is entry.breaking


def test_design_asymmetry_is_preserved() -> None:
    token_added = Change(
        kind=ChangeKind.DESIGN_TOKEN_CHANGE,
        field="--color-new",
        new_value="red",
        detail=ChangeDetail.TOKEN_ADDED,
    )
    component_added = Change(
        kind=ChangeKind.DESIGN_COMPONENT_CHANGE,
        field="Modal",
        new_value="Modal",
        detail=ChangeDetail.COMPONENT_ADDED,
    )
    component_removed = Change(
        kind=ChangeKind.DESIGN_COMPONENT_CHANGE,
        field="Card",
        old_value="Card",
        detail=ChangeDetail.COMPONENT_REMOVED,
    )

    assert classify(token_added).breaking is True
    assert classify(token_added).priority == "high"
    assert classify(component_added).breaking is False
    assert classify(component_removed).breaking is True
    assert classify(component_removed).priority == "normal"


def test_batch_helpers() -> None:
    add = Change(kind=ChangeKind.FIELD_ADD, field="GET /a.x", new_value="int")
    remove = Change(kind=ChangeKind.FIELD_REMOVE, field="GET /a.y", old_value="int")

    assert not is_breaking(add)
    assert is_breaking(remove)
    assert not has_breaking_change([add])
    assert has_breaking_change([add, remove])
    assert batch_priority([add]) == "normal"
    assert batch_priority([add, remove]) == "high"
    assert batch_priority([]) == "normal"


def test_change_detail_must_match_kind() -> None:
    with pytest.raises(ValueError, match="requires detail"):
        Change(kind=ChangeKind.DESIGN_TOKEN_CHANGE, field="--color-a")
    with pytest.raises(ValueError, match="requires detail"):
        Change(kind=ChangeKind.FIELD_ADD, field="x", detail=ChangeDetail.TOKEN_ADDED)


def test_change_dict_round_trip_coerces_enums() -> None:
    change = Change.from_dict(
        {
            "kind": "design_token_change",
            "field": "--color-a",
            "old_value": "red",
            "new_value": "blue",
            "detail": "token_modified",
        }
    )

    assert change.kind is ChangeKind.DESIGN_TOKEN_CHANGE
    assert change.detail is ChangeDetail.TOKEN_MODIFIED
    assert Change.from_dict(change.to_dict()) == change
    assert "detail" not in Change(kind="field_add", field="x").to_dict()
