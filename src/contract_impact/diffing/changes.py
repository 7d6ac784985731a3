"""Typed change records emitted by the schema and design differs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class ChangeKind(StrEnum):
    FIELD_ADD = "field_add"
    FIELD_REMOVE = "field_remove"
    FIELD_TYPE_CHANGE = "field_type_change"
    ENDPOINT_ADD = "endpoint_add"
    ENDPOINT_REMOVE = "endpoint_remove"
    VERSION_BUMP = "version_bump"
    CONSUMER_ADD = "consumer_add"
    CONSUMER_REMOVE = "consumer_remove"
    DESIGN_TOKEN_CHANGE = "design_token_change"
    DESIGN_COMPONENT_CHANGE = "design_component_change"


class ChangeDetail(StrEnum):
    """Sub-kind carried by design changes."""

    TOKEN_ADDED = "token_added"
    TOKEN_MODIFIED = "token_modified"
    TOKEN_REMOVED = "token_removed"
    COMPONENT_ADDED = "component_added"
    COMPONENT_REMOVED = "component_removed"


ADDITION_KINDS: frozenset[ChangeKind] = frozenset({ChangeKind.FIELD_ADD, ChangeKind.ENDPOINT_ADD})
DESIGN_KINDS: frozenset[ChangeKind] = frozenset(
    {ChangeKind.DESIGN_TOKEN_CHANGE, ChangeKind.DESIGN_COMPONENT_CHANGE}
)


@dataclass(frozen=True, slots=True)
class Change:
    """One detected difference between two snapshots."""

    kind: ChangeKind
    field: str
    old_value: str | None = None
    new_value: str | None = None
    detail: ChangeDetail | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ChangeKind(self.kind))
        if self.detail is not None:
            object.__setattr__(self, "detail", ChangeDetail(self.detail))
        if (self.kind in DESIGN_KINDS) != (self.detail is not None):
            raise ValueError(f"{self.kind.value} change requires detail iff it is a design change")

    @property
    def is_design(self) -> bool:
        return self.kind in DESIGN_KINDS

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "kind": self.kind.value,
            "field": self.field,
            "old_value": self.old_value,
            "new_value": self.new_value,
        }
        if self.detail is not None:
            payload["detail"] = self.detail.value
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Change:
        detail = payload.get("detail")
        return cls(
            kind=ChangeKind(payload["kind"]),
            field=str(payload["field"]),
            old_value=payload.get("old_value"),
            new_value=payload.get("new_value"),
            detail=None if detail is None else ChangeDetail(detail),
        )


__all__ = ["ADDITION_KINDS", "DESIGN_KINDS", "Change", "ChangeDetail", "ChangeKind"]
