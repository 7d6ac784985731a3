"""
contract-impact — notification builder

File: src/contract_impact/notifications/builder.py
Last updated: 2026-10-18

Purpose
- Turn a change batch plus its impact into addressed ``Notification`` records.

Functional requirements
- Interface path: one notification per affected consumer. Priority, breaking
  flag and deadline are batch-level; ``field`` is set only for a single-change
  batch.
- Design path: one broadcast notification per target group carrying that
  group's changes and roles.
- Deadline is the end of the change date (UTC) and only present when breaking.

Non-functional requirements
- Deterministic for a fixed timestamp; re-running yields identical identities.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from contract_impact.constants import (
    DEADLINE_TIME_SUFFIX,
    DESIGN_ROLES,
    DESIGN_SOURCE_DOMAIN,
    PRIORITY_HIGH,
    PRIORITY_NORMAL,
)
from contract_impact.contracts import ContractSpec
from contract_impact.diffing import ADDITION_KINDS, Change, ChangeDetail, classify
from contract_impact.impact import (
    DesignCategory,
    DesignTarget,
    ImpactReport,
    analyze_impact,
    identify_affected_design_targets,
)
from contract_impact.notifications.models import (
    Notification,
    NotificationDetail,
    NotificationType,
    SummaryKind,
)

_DESIGN_DETAIL_PHRASES: tuple[tuple[ChangeDetail, str], ...] = (
    (ChangeDetail.TOKEN_MODIFIED, "token(s) modified"),
    (ChangeDetail.TOKEN_ADDED, "token(s) added"),
    (ChangeDetail.TOKEN_REMOVED, "token(s) removed"),
    (ChangeDetail.COMPONENT_ADDED, "component(s) added"),
    (ChangeDetail.COMPONENT_REMOVED, "component(s) removed"),
)
_DESIGN_SUMMARY: dict[DesignCategory, SummaryKind] = {
    DesignCategory.TOKEN: SummaryKind.TOKEN_CHANGE,
    DesignCategory.COMPONENT: SummaryKind.COMPONENT_CHANGE,
}


class NotificationBuildError(ValueError):
    """Raised when notification inputs cannot be interpreted."""


def build_notifications(
    changes: Sequence[Change],
    spec: ContractSpec | None,
    file_path: str,
    timestamp: str | datetime | None = None,
    *,
    impact: ImpactReport | None = None,
    design_targets: Sequence[DesignTarget] | None = None,
    design_source: str = DESIGN_SOURCE_DOMAIN,
    design_roles: Sequence[str] = DESIGN_ROLES,
    logger: Any | None = None,
) -> list[Notification]:
    """Build notifications for ``changes``; ``spec=None`` selects the design path."""

    if not changes:
        return []
    created, date = normalize_timestamp(timestamp)
    if spec is not None:
        report = impact if impact is not None else analyze_impact(changes, spec, logger=logger)
        return _interface_notifications(changes, spec, report, file_path, created, date)
    targets = (
        design_targets
        if design_targets is not None
        else identify_affected_design_targets(changes, roles=design_roles, logger=logger)
    )
    return [
        _design_notification(target, design_source, file_path, created, date)
        for target in targets
    ]


def normalize_timestamp(timestamp: str | datetime | None) -> tuple[str, str]:
    """Return ``(created, date)`` in UTC; naive inputs are taken as UTC."""

    if timestamp is None:
        moment = datetime.now(UTC)
    elif isinstance(timestamp, datetime):
        moment = timestamp
    else:
        try:
            moment = datetime.fromisoformat(timestamp.strip())
        except (AttributeError, ValueError) as exc:
            raise NotificationBuildError(f"invalid ISO-8601 timestamp: {timestamp!r}") from exc
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    moment = moment.astimezone(UTC)
    created = f"{moment:%Y-%m-%dT%H:%M:%S}.{moment.microsecond // 1000:03d}Z"
    return created, moment.date().isoformat()


def summarize_interface_kind(changes: Sequence[Change]) -> SummaryKind:
    if any(classify(change).breaking for change in changes):
        return SummaryKind.BREAKING_CHANGE
    if any(change.kind in ADDITION_KINDS for change in changes):
        return SummaryKind.SPEC_UPDATE
    return SummaryKind.VERSION_BUMP


def describe_interface_changes(changes: Sequence[Change], source: str) -> str:
    if len(changes) == 1:
        change = changes[0]
        return f"{source} interface: {classify(change).action} [{change.field}]"
    breaking = sum(1 for change in changes if classify(change).breaking)
    non_breaking = len(changes) - breaking
    parts: list[str] = []
    if breaking:
        parts.append(f"{breaking} breaking")
    if non_breaking:
        parts.append(f"{non_breaking} non-breaking")
    return f"{source} interface: {len(changes)} changes ({', '.join(parts)}). Review required."


def describe_design_changes(changes: Sequence[Change]) -> str:
    parts: list[str] = []
    for detail, phrase in _DESIGN_DETAIL_PHRASES:
        count = sum(1 for change in changes if change.detail is detail)
        if count:
            parts.append(f"{count} {phrase}")
    return f"Design system updated: {', '.join(parts)}. UI review required."


def _interface_notifications(
    changes: Sequence[Change],
    spec: ContractSpec,
    report: ImpactReport,
    file_path: str,
    created: str,
    date: str,
) -> list[Notification]:
    source = spec.source_domain
    breaking = report.has_breaking_changes
    kind = summarize_interface_kind(changes)
    description = describe_interface_changes(changes, source)
    details = _details(changes)
    field = changes[0].field if len(changes) == 1 else None
    return [
        Notification(
            type=NotificationType.INTERFACE_CHANGE,
            source=source,
            target=consumer.domain,
            priority=PRIORITY_HIGH if breaking else PRIORITY_NORMAL,
            created=created,
            date=date,
            file=file_path,
            change_type=kind,
            field=field,
            breaking=breaking,
            details=details,
            description=description,
            deadline=_deadline(date) if breaking else None,
        )
        for consumer in report.affected_consumers
    ]


def _design_notification(
    target: DesignTarget, source: str, file_path: str, created: str, date: str
) -> Notification:
    breaking = target.requires_update
    return Notification(
        type=NotificationType.DESIGN_CHANGE,
        source=source,
        target=target.target,
        roles=target.roles,
        priority=PRIORITY_HIGH if breaking else PRIORITY_NORMAL,
        created=created,
        date=date,
        file=file_path,
        change_type=_DESIGN_SUMMARY[target.category],
        breaking=breaking,
        details=_details(target.changes),
        description=describe_design_changes(target.changes),
        deadline=_deadline(date) if breaking else None,
    )


def _details(changes: Sequence[Change]) -> tuple[NotificationDetail, ...]:
    return tuple(
        NotificationDetail(field=c.field, old_value=c.old_value, new_value=c.new_value)
        for c in changes
    )


def _deadline(date: str) -> str:
    return f"{date}{DEADLINE_TIME_SUFFIX}"


__all__ = [
    "NotificationBuildError",
    "build_notifications",
    "describe_design_changes",
    "describe_interface_changes",
    "normalize_timestamp",
    "summarize_interface_kind",
]
