"""
contract-impact — unit tests for the notification builder

File: tests/unit/notifications/test_builder.py
Last updated: 2026-10-18

Purpose
- Validate addressed notification records derived from change batches.

What this test file should cover
- Interface path: one record per affected consumer with batch-level severity.
- Design path: one broadcast record per target group.
- Deterministic identity and storage path for a fixed timestamp.
- Timestamp normalization and rejection of unparseable timestamps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta, timezone
from pathlib import PurePosixPath

import pytest

from contract_impact.contracts import spec_from_mapping
from contract_impact.diffing import Change, ChangeDetail, ChangeKind
from contract_impact.notifications import (
    Notification,
    NotificationBuildError,
    NotificationType,
    SummaryKind,
    build_notifications,
    describe_design_changes,
    describe_interface_changes,
    normalize_timestamp,
    summarize_interface_kind,
)

TIMESTAMP = "2026-03-01T10:15:30.123456+02:00"
FILE = "contracts/interfaces/members.yaml"

MEMBERS = spec_from_mapping(
    {
        "version": "1.1.0",
        "domain": "members",
        "endpoints": [{"path": "/m/{id}", "method": "GET", "response": {"id": "uuid"}}],
        "consumers": [
            {"domain": "billing", "uses": ["GET /m/{id}"]},
            {"domain": "reporting", "uses": ["GET /reports"]},
        ],
    }
)

EMAIL_REMOVED = Change(kind=ChangeKind.FIELD_REMOVE, field="GET /m/{id}.email", old_value="string")
GRADE_ADDED = Change(kind=ChangeKind.FIELD_ADD, field="GET /m/{id}.grade", new_value="string")


@dataclass
class RecordingLogger:
    events: list[tuple[str, dict[str, object]]] = field(default_factory=list)

    def info(self, event: str, **kwargs: object) -> None:
        self.events.append((event, dict(kwargs)))


def test_breaking_change_notifies_every_consumer() -> None:
    notifications = build_notifications(
        [EMAIL_REMOVED], MEMBERS, FILE, TIMESTAMP, logger=RecordingLogger()
    )

    assert [item.target for item in notifications] == ["billing", "reporting"]
    billing = notifications[0]
    assert billing.type is NotificationType.INTERFACE_CHANGE
    assert billing.source == "members"
    assert billing.priority == "high"
    assert billing.breaking is True
    assert billing.change_type is SummaryKind.BREAKING_CHANGE
    assert billing.field == "GET /m/{id}.email"
    assert billing.created == "2026-03-01T08:15:30.123Z"
    assert billing.deadline == "2026-03-01T23:59:59Z"
    assert billing.description == (
        "members interface: Field removed. Code update required before deployment. "
        "[GET /m/{id}.email]"
    )
    assert [detail.to_dict() for detail in billing.details] == [
        {"field": "GET /m/{id}.email", "old_value": "string", "new_value": None}
    ]
    assert billing.identity == "members-billing-breaking-change-2026-03-01"
    assert billing.storage_path == PurePosixPath(
        "management/notifications/to-billing/2026-03-01-members-breaking-change.yaml"
    )


def test_informational_batch_notifies_direct_users_only() -> None:
    notifications = build_notifications(
        [
            GRADE_ADDED,
            Change(
                kind=ChangeKind.VERSION_BUMP,
                field="version",
                old_value="1.0.0",
                new_value="1.1.0",
            ),
        ],
        MEMBERS,
        FILE,
        TIMESTAMP,
        logger=RecordingLogger(),
    )

    assert len(notifications) == 1
    only = notifications[0]
    assert only.target == "billing"
    assert only.priority == "normal"
    assert only.breaking is False
    assert only.deadline is None
    assert only.field is None
    assert only.change_type is SummaryKind.SPEC_UPDATE
    assert only.description == (
        "members interface: 2 changes (2 non-breaking). Review required."
    )


def test_identity_is_stable_across_rebuilds() -> None:
    first = build_notifications([EMAIL_REMOVED], MEMBERS, FILE, TIMESTAMP, logger=RecordingLogger())
    second = build_notifications(
        [EMAIL_REMOVED], MEMBERS, FILE, TIMESTAMP, logger=RecordingLogger()
    )

    assert first == second
    assert [item.identity for item in first] == [item.identity for item in second]


def test_empty_batch_builds_nothing() -> None:
    assert build_notifications([], MEMBERS, FILE, TIMESTAMP) == []


def test_design_batch_builds_one_broadcast_per_group() -> None:
    changes = [
        Change(
            kind=ChangeKind.DESIGN_TOKEN_CHANGE,
            field="--color-primary",
            old_value="#3b82f6",
            new_value="#2563eb",
            detail=ChangeDetail.TOKEN_MODIFIED,
        ),
        Change(
            kind=ChangeKind.DESIGN_COMPONENT_CHANGE,
            field="Modal",
            new_value="Modal",
            detail=ChangeDetail.COMPONENT_ADDED,
        ),
    ]

    notifications = build_notifications(
        changes, None, "contracts/standards/design-system.md", TIMESTAMP, logger=RecordingLogger()
    )

    tokens, components = notifications
    assert tokens.type is NotificationType.DESIGN_CHANGE
    assert tokens.source == "design-system"
    assert tokens.is_broadcast
    assert tokens.roles == ("domain-designer", "frontend-developer")
    assert tokens.change_type is SummaryKind.TOKEN_CHANGE
    assert tokens.breaking is True
    assert tokens.deadline == "2026-03-01T23:59:59Z"
    assert tokens.description == "Design system updated: 1 token(s) modified. UI review required."
    assert tokens.storage_path == PurePosixPath(
        "management/notifications/broadcast/2026-03-01-design-system-token-change.yaml"
    )
    assert components.change_type is SummaryKind.COMPONENT_CHANGE
    assert components.breaking is False
    assert components.priority == "normal"
    assert tokens.identity != components.identity


def test_summary_kind_precedence() -> None:
    consumer_only = Change(kind=ChangeKind.CONSUMER_ADD, field="consumer:ui", new_value="ui")

    assert summarize_interface_kind([GRADE_ADDED, EMAIL_REMOVED]) is SummaryKind.BREAKING_CHANGE
    assert summarize_interface_kind([consumer_only, GRADE_ADDED]) is SummaryKind.SPEC_UPDATE
    assert summarize_interface_kind([consumer_only]) is SummaryKind.VERSION_BUMP


def test_descriptions() -> None:
    assert describe_interface_changes([GRADE_ADDED, EMAIL_REMOVED], "members") == (
        "members interface: 2 changes (1 breaking, 1 non-breaking). Review required."
    )
    design = [
        Change(
            kind=ChangeKind.DESIGN_COMPONENT_CHANGE,
            field="Card",
            detail=ChangeDetail.COMPONENT_REMOVED,
        ),
        Change(
            kind=ChangeKind.DESIGN_TOKEN_CHANGE,
            field="--space-xl",
            detail=ChangeDetail.TOKEN_ADDED,
        ),
    ]
    assert describe_design_changes(design) == (
        "Design system updated: 1 token(s) added, 1 component(s) removed. UI review required."
    )


@pytest.mark.parametrize(
    ("raw", "created", "date"),
    [
        ("2026-03-01T23:30:00-02:00", "2026-03-02T01:30:00.000Z", "2026-03-02"),
        ("2026-03-01T10:00:00", "2026-03-01T10:00:00.000Z", "2026-03-01"),
        ("2026-03-01T10:00:00Z", "2026-03-01T10:00:00.000Z", "2026-03-01"),
        (
            datetime(2026, 3, 1, 9, 0, 0, 5000, tzinfo=timezone(timedelta(hours=1))),
            "2026-03-01T08:00:00.005Z",
            "2026-03-01",
        ),
    ],
)
def test_normalize_timestamp(raw: str | datetime, created: str, date: str) -> None:
    assert normalize_timestamp(raw) == (created, date)


def test_default_timestamp_is_now_in_utc() -> None:
    created, date = normalize_timestamp(None)

    assert created.endswith("Z")
    assert date == created[:10]
    parsed = datetime.fromisoformat(created.replace("Z", "+00:00"))
    assert abs(datetime.now(UTC) - parsed) < timedelta(minutes=5)


def test_unparseable_timestamp_is_rejected() -> None:
    with pytest.raises(NotificationBuildError, match="invalid ISO-8601 timestamp"):
        build_notifications([EMAIL_REMOVED], MEMBERS, FILE, "yesterday-ish")


def test_record_invariants() -> None:
    base = {
        "type": "interface_change",
        "source": "members",
        "target": "billing",
        "created": "2026-03-01T00:00:00.000Z",
        "date": "2026-03-01",
        "file": FILE,
        "change_type": "breaking-change",
        "description": "d",
    }

    with pytest.raises(ValueError, match="deadline"):
        Notification(priority="high", breaking=True, **base)  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="unknown priority"):
        Notification(priority="urgent", breaking=False, **base)  # type: ignore[arg-type]


def test_offset_timestamp_dates_identity_path_and_deadline_in_utc() -> None:
    notification = build_notifications(
        [EMAIL_REMOVED], MEMBERS, FILE, "2026-01-02T03:04:05+09:00", logger=RecordingLogger()
    )[0]

    assert notification.created == "2026-01-01T18:04:05.000Z"
    assert notification.identity == "members-billing-breaking-change-2026-01-01"
    assert notification.storage_path == PurePosixPath(
        "management/notifications/to-billing/2026-01-01-members-breaking-change.yaml"
    )
    assert notification.deadline == "2026-01-01T23:59:59Z"
