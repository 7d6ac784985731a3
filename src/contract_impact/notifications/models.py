"""
contract-impact — notification records

File: src/contract_impact/notifications/models.py
Last updated: 2026-10-18

Purpose
- Addressed notification record with a deterministic identity and storage
  path, plus its plain-dict form used by the YAML serializer.

Functional requirements
- Identity is ``{source}-{target}-{kind}-{date}``; identical inputs always
  yield the identical identity and path.
- ``to_dict``/``from_dict`` preserve every scalar value.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from pathlib import PurePosixPath
from typing import Any

from contract_impact.constants import BROADCAST_TARGET, NOTIFICATIONS_ROOT, PRIORITIES


class NotificationType(StrEnum):
    INTERFACE_CHANGE = "interface_change"
    DESIGN_CHANGE = "design_change"


class SummaryKind(StrEnum):
    """Batch-level change label used in identities and file names."""

    BREAKING_CHANGE = "breaking-change"
    SPEC_UPDATE = "spec-update"
    VERSION_BUMP = "version-bump"
    TOKEN_CHANGE = "token-change"
    COMPONENT_CHANGE = "component-change"


@dataclass(frozen=True, slots=True)
class NotificationDetail:
    field: str
    old_value: str | None = None
    new_value: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {"field": self.field, "old_value": self.old_value, "new_value": self.new_value}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> NotificationDetail:
        return cls(
            field=str(payload["field"]),
            old_value=_optional_text(payload.get("old_value")),
            new_value=_optional_text(payload.get("new_value")),
        )


@dataclass(frozen=True, slots=True)
class Notification:
    """One notification addressed to a consumer domain or to the broadcast channel."""

    type: NotificationType
    source: str
    target: str
    priority: str
    created: str
    date: str
    file: str
    change_type: SummaryKind
    breaking: bool
    description: str
    details: tuple[NotificationDetail, ...] = ()
    field: str | None = None
    roles: tuple[str, ...] = ()
    deadline: str | None = None
    acknowledged: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", NotificationType(self.type))
        object.__setattr__(self, "change_type", SummaryKind(self.change_type))
        if self.priority not in PRIORITIES:
            raise ValueError(f"unknown priority: {self.priority!r}")
        if self.breaking != (self.deadline is not None):
            raise ValueError("deadline must be set exactly when the notification is breaking")

    @property
    def is_broadcast(self) -> bool:
        return self.target == BROADCAST_TARGET

    @property
    def identity(self) -> str:
        return f"{self.source}-{self.target}-{self.change_type.value}-{self.date}"

    @property
    def storage_path(self) -> PurePosixPath:
        return self.storage_path_under(NOTIFICATIONS_ROOT)

    def storage_path_under(self, root: PurePosixPath | str) -> PurePosixPath:
        directory = BROADCAST_TARGET if self.is_broadcast else f"to-{self.target}"
        file_name = f"{self.date}-{self.source}-{self.change_type.value}.yaml"
        return PurePosixPath(root) / directory / file_name

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "type": self.type.value,
            "from": self.source,
            "to": self.target,
        }
        if self.roles:
            payload["roles"] = list(self.roles)
        change: dict[str, object] = {"file": self.file, "type": self.change_type.value}
        if self.field is not None:
            change["field"] = self.field
        change["breaking"] = self.breaking
        change["details"] = [detail.to_dict() for detail in self.details]
        payload.update(
            {
                "priority": self.priority,
                "created": self.created,
                "change": change,
                "action_required": {
                    "description": self.description,
                    "deadline": self.deadline,
                },
                "acknowledged": self.acknowledged,
            }
        )
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Notification:
        change = payload.get("change")
        action = payload.get("action_required")
        if not isinstance(change, Mapping) or not isinstance(action, Mapping):
            raise ValueError("notification requires 'change' and 'action_required' mappings")
        created = str(payload["created"])
        return cls(
            type=NotificationType(payload["type"]),
            source=str(payload["from"]),
            target=str(payload["to"]),
            roles=tuple(str(role) for role in payload.get("roles") or ()),
            priority=str(payload["priority"]),
            created=created,
            date=created[:10],
            file=str(change["file"]),
            change_type=SummaryKind(change["type"]),
            field=_optional_text(change.get("field")),
            breaking=bool(change["breaking"]),
            details=tuple(
                NotificationDetail.from_dict(item) for item in change.get("details") or ()
            ),
            description=str(action["description"]),
            deadline=_optional_text(action.get("deadline")),
            acknowledged=bool(payload.get("acknowledged", False)),
        )


def _optional_text(value: object) -> str | None:
    return None if value is None else str(value)


__all__ = ["Notification", "NotificationDetail", "NotificationType", "SummaryKind"]
