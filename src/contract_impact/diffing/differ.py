"""
contract-impact — schema and design differs

File: src/contract_impact/diffing/differ.py
Last updated: 2026-10-18

Purpose
- Compare two extracted views of a contract (or of the design-system document)
  and emit an ordered list of typed ``Change`` records.

Functional requirements
- Interface order: version bump, removals in old-table order, additions and
  type changes in new-table order, consumer additions, consumer removals.
- Design order: token removals/modifications in old order, token additions in
  new order, component removals, component additions.
- An absent or malformed old snapshot behaves as an empty contract.

Non-functional requirements
- Deterministic: identical inputs always produce identical lists.
"""

from __future__ import annotations

from contract_impact.constants import CONSUMER_FIELD_PREFIX, ENDPOINT_MARKER
from contract_impact.contracts import (
    ContractSpec,
    extract_component_sections,
    extract_consumers,
    extract_design_tokens,
    extract_field_table,
)
from contract_impact.diffing.changes import Change, ChangeDetail, ChangeKind
from contract_impact.document import DocumentValue

SpecInput = ContractSpec | DocumentValue | None


def as_contract_spec(value: SpecInput) -> ContractSpec:
    if isinstance(value, ContractSpec):
        return value
    if value is None:
        return ContractSpec()
    return ContractSpec.from_document(value)


def detect_changes(old: SpecInput, new: SpecInput) -> list[Change]:
    """Diff two contract snapshots into version, field, endpoint and consumer changes."""

    old_spec = as_contract_spec(old)
    new_spec = as_contract_spec(new)
    changes: list[Change] = []

    if (
        old_spec.version is not None
        and new_spec.version is not None
        and old_spec.version != new_spec.version
    ):
        changes.append(
            Change(
                kind=ChangeKind.VERSION_BUMP,
                field="version",
                old_value=old_spec.version,
                new_value=new_spec.version,
            )
        )

    old_fields = extract_field_table(old_spec)
    new_fields = extract_field_table(new_spec)

    for key, old_type in old_fields.items():
        if key in new_fields:
            continue
        if old_type == ENDPOINT_MARKER:
            changes.append(Change(kind=ChangeKind.ENDPOINT_REMOVE, field=key, old_value=key))
        else:
            changes.append(Change(kind=ChangeKind.FIELD_REMOVE, field=key, old_value=old_type))

    for key, new_type in new_fields.items():
        old_type = old_fields.get(key)
        if old_type is None:
            if new_type == ENDPOINT_MARKER:
                changes.append(Change(kind=ChangeKind.ENDPOINT_ADD, field=key, new_value=key))
            else:
                changes.append(Change(kind=ChangeKind.FIELD_ADD, field=key, new_value=new_type))
        elif ENDPOINT_MARKER not in (old_type, new_type) and old_type != new_type:
            changes.append(
                Change(
                    kind=ChangeKind.FIELD_TYPE_CHANGE,
                    field=key,
                    old_value=old_type,
                    new_value=new_type,
                )
            )

    old_consumers = extract_consumers(old_spec)
    new_consumers = extract_consumers(new_spec)
    for domain in new_consumers:
        if domain not in old_consumers:
            changes.append(
                Change(
                    kind=ChangeKind.CONSUMER_ADD,
                    field=f"{CONSUMER_FIELD_PREFIX}{domain}",
                    new_value=domain,
                )
            )
    for domain in old_consumers:
        if domain not in new_consumers:
            changes.append(
                Change(
                    kind=ChangeKind.CONSUMER_REMOVE,
                    field=f"{CONSUMER_FIELD_PREFIX}{domain}",
                    old_value=domain,
                )
            )

    return changes


def detect_design_changes(old_text: object, new_text: object) -> list[Change]:
    """Diff design tokens by exact value and component headings by presence.

    Body edits under an unchanged heading produce no change.
    """

    changes: list[Change] = []
    old_tokens = extract_design_tokens(old_text)
    new_tokens = extract_design_tokens(new_text)

    for name, old_value in old_tokens.items():
        new_value = new_tokens.get(name)
        if new_value is None:
            changes.append(_token_change(name, old_value, None, ChangeDetail.TOKEN_REMOVED))
        elif new_value != old_value:
            changes.append(_token_change(name, old_value, new_value, ChangeDetail.TOKEN_MODIFIED))
    for name, new_value in new_tokens.items():
        if name not in old_tokens:
            changes.append(_token_change(name, None, new_value, ChangeDetail.TOKEN_ADDED))

    old_components = extract_component_sections(old_text)
    new_components = extract_component_sections(new_text)
    for name in old_components:
        if name not in new_components:
            changes.append(
                Change(
                    kind=ChangeKind.DESIGN_COMPONENT_CHANGE,
                    field=name,
                    old_value=name,
                    detail=ChangeDetail.COMPONENT_REMOVED,
                )
            )
    for name in new_components:
        if name not in old_components:
            changes.append(
                Change(
                    kind=ChangeKind.DESIGN_COMPONENT_CHANGE,
                    field=name,
                    new_value=name,
                    detail=ChangeDetail.COMPONENT_ADDED,
                )
            )

    return changes


def _token_change(
    name: str, old_value: str | None, new_value: str | None, detail: ChangeDetail
) -> Change:
    return Change(
        kind=ChangeKind.DESIGN_TOKEN_CHANGE,
        field=name,
        old_value=old_value,
        new_value=new_value,
        detail=detail,
    )


__all__ = ["SpecInput", "as_contract_spec", "detect_changes", "detect_design_changes"]
