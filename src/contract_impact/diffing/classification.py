"""
contract-impact — change classification table

File: src/contract_impact/diffing/classification.py
Last updated: 2026-10-18

Purpose
- Single owned mapping from change kind (and design detail) to breaking flag,
  priority, label, action text and deadline requirement.

Functional requirements
- Impact analysis and notification building both read this table; no caller
  keeps its own copy of these facts.
- Lookups for pairs outside the table raise ``KeyError``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from contract_impact.constants import PRIORITIES, PRIORITY_HIGH, PRIORITY_NORMAL
from contract_impact.diffing.changes import Change, ChangeDetail, ChangeKind


@dataclass(frozen=True, slots=True)
class ChangeClass:
    breaking: bool
    label: str
    action: str
    priority: str = PRIORITY_NORMAL
    deadline_required: bool = False

    def __post_init__(self) -> None:
        if self.priority not in PRIORITIES:
            raise ValueError(f"unknown priority: {self.priority!r}")

    def to_dict(self) -> dict[str, object]:
        return {
            "breaking": self.breaking,
            "label": self.label,
            "action": self.action,
            "priority": self.priority,
            "deadline_required": self.deadline_required,
        }


ClassificationKey = tuple[ChangeKind, ChangeDetail | None]


def _informational(label: str, action: str) -> ChangeClass:
    return ChangeClass(breaking=False, label=label, action=action)


def _breaking(label: str, action: str, *, priority: str = PRIORITY_HIGH) -> ChangeClass:
    return ChangeClass(
        breaking=True, label=label, action=action, priority=priority, deadline_required=True
    )


CHANGE_CLASSIFICATION: Final[Mapping[ClassificationKey, ChangeClass]] = MappingProxyType(
    {
        (ChangeKind.FIELD_ADD, None): _informational(
            "Field Added", "New field available. Update code if needed."
        ),
        (ChangeKind.ENDPOINT_ADD, None): _informational(
            "Endpoint Added", "New endpoint available for consumption."
        ),
        (ChangeKind.VERSION_BUMP, None): _informational(
            "Version Updated", "Contract version updated. Review changelog."
        ),
        (ChangeKind.CONSUMER_ADD, None): _informational(
            "Consumer Added", "New consumer domain registered."
        ),
        (ChangeKind.CONSUMER_REMOVE, None): _informational(
            "Consumer Removed", "Consumer domain unregistered."
        ),
        (ChangeKind.FIELD_REMOVE, None): _breaking(
            "Field Removed", "Field removed. Code update required before deployment."
        ),
        (ChangeKind.FIELD_TYPE_CHANGE, None): _breaking(
            "Field Type Changed", "Field type changed. Code update required before deployment."
        ),
        (ChangeKind.ENDPOINT_REMOVE, None): _breaking(
            "Endpoint Removed", "Endpoint removed. Migration required before deployment."
        ),
        # Token additions are breaking while component additions are not.
        (ChangeKind.DESIGN_TOKEN_CHANGE, ChangeDetail.TOKEN_ADDED): _breaking(
            "Design Token Added", "Design token changed. UI update required."
        ),
        (ChangeKind.DESIGN_TOKEN_CHANGE, ChangeDetail.TOKEN_MODIFIED): _breaking(
            "Design Token Modified", "Design token changed. UI update required."
        ),
        (ChangeKind.DESIGN_TOKEN_CHANGE, ChangeDetail.TOKEN_REMOVED): _breaking(
            "Design Token Removed", "Design token changed. UI update required."
        ),
        (ChangeKind.DESIGN_COMPONENT_CHANGE, ChangeDetail.COMPONENT_REMOVED): _breaking(
            "Design Component Removed",
            "Design component removed. Review and update UI before deployment.",
            priority=PRIORITY_NORMAL,
        ),
        (ChangeKind.DESIGN_COMPONENT_CHANGE, ChangeDetail.COMPONENT_ADDED): _informational(
            "Design Component Added", "Design component updated. Review and update if needed."
        ),
    }
)


def classify(change: Change) -> ChangeClass:
    return CHANGE_CLASSIFICATION[(change.kind, change.detail)]


def is_breaking(change: Change) -> bool:
    return classify(change).breaking


def has_breaking_change(changes: Iterable[Change]) -> bool:
    return any(is_breaking(change) for change in changes)


def batch_priority(changes: Iterable[Change]) -> str:
    """Batch-level priority: high as soon as one change is breaking."""

    return PRIORITY_HIGH if has_breaking_change(changes) else PRIORITY_NORMAL


__all__ = [
    "CHANGE_CLASSIFICATION",
    "ChangeClass",
    "ClassificationKey",
    "batch_priority",
    "classify",
    "has_breaking_change",
    "is_breaking",
]
