"""
contract-impact — unit tests for notification YAML serialization

File: tests/unit/notifications/test_serialization.py
Last updated: 2026-10-18

Purpose
- Validate the YAML layout of notification records and their on-disk placement.

What this test file should cover
- Stable key order and block style.
- Load round trip back into an identical record.
- Writes land at ``{root}/to-{domain}|broadcast/{date}-{source}-{kind}.yaml`` and
  re-running overwrites instead of duplicating.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
import yaml

from contract_impact.notifications import (
    Notification,
    NotificationDetail,
    load_notification,
    render_notification,
    render_notifications,
    write_notifications,
)


def _interface_notification(target: str = "billing") -> Notification:
    return Notification(
        type="interface_change",  # type: ignore[arg-type]
        source="members",
        target=target,
        priority="high",
        created="2026-03-01T08:15:30.123Z",
        date="2026-03-01",
        file="contracts/interfaces/members.yaml",
        change_type="breaking-change",  # type: ignore[arg-type]
        field="GET /m/{id}.email",
        breaking=True,
        details=(NotificationDetail(field="GET /m/{id}.email", old_value="string"),),
        description="members interface: Field removed. [GET /m/{id}.email]",
        deadline="2026-03-01T23:59:59Z",
    )


def _design_notification() -> Notification:
    return Notification(
        type="design_change",  # type: ignore[arg-type]
        source="design-system",
        target="broadcast",
        roles=("domain-designer", "frontend-developer"),
        priority="normal",
        created="2026-03-01T08:15:30.123Z",
        date="2026-03-01",
        file="contracts/standards/design-system.md",
        change_type="component-change",  # type: ignore[arg-type]
        breaking=False,
        details=(NotificationDetail(field="Modal", new_value="Modal"),),
        description="Design system updated: 1 component(s) added. UI review required.",
    )


def test_rendered_layout_keeps_key_order() -> None:
    payload = yaml.safe_load(render_notification(_interface_notification()))

    assert list(payload) == [
        "type",
        "from",
        "to",
        "priority",
        "created",
        "change",
        "action_required",
        "acknowledged",
    ]
    assert list(payload["change"]) == ["file", "type", "field", "breaking", "details"]
    assert payload["change"]["details"] == [
        {"field": "GET /m/{id}.email", "old_value": "string", "new_value": None}
    ]
    assert payload["action_required"]["deadline"] == "2026-03-01T23:59:59Z"
    assert payload["acknowledged"] is False


def test_design_layout_carries_roles_and_null_deadline() -> None:
    rendered = render_notification(_design_notification())
    payload = yaml.safe_load(rendered)

    assert payload["to"] == "broadcast"
    assert payload["roles"] == ["domain-designer", "frontend-developer"]
    assert "field" not in payload["change"]
    assert payload["action_required"]["deadline"] is None
    assert "{" not in rendered.splitlines()[0]


@pytest.mark.parametrize("factory", [_interface_notification, _design_notification])
def test_load_round_trip(factory: Callable[[], Notification]) -> None:
    notification = factory()

    assert load_notification(render_notification(notification)) == notification


def test_render_many_as_yaml_stream() -> None:
    stream = render_notifications([_interface_notification(), _design_notification()])

    documents = list(yaml.safe_load_all(stream))
    assert [document["to"] for document in documents] == ["billing", "broadcast"]
    assert "\n---\n" in stream


@pytest.mark.parametrize("text", ["- just\n- a list\n", "key: [unclosed\n"])
def test_load_rejects_non_notification_yaml(text: str) -> None:
    with pytest.raises(ValueError):
        load_notification(text)


def test_write_places_records_at_storage_paths(tmp_path: Path) -> None:
    written = write_notifications(
        [_interface_notification(), _interface_notification("shipping"), _design_notification()],
        tmp_path,
    )

    root = tmp_path / "management" / "notifications"
    assert written == [
        root / "to-billing" / "2026-03-01-members-breaking-change.yaml",
        root / "to-shipping" / "2026-03-01-members-breaking-change.yaml",
        root / "broadcast" / "2026-03-01-design-system-component-change.yaml",
    ]
    assert load_notification(written[0].read_text(encoding="utf-8")) == _interface_notification()


def test_rewriting_same_identity_overwrites(tmp_path: Path) -> None:
    first = write_notifications([_interface_notification()], tmp_path, storage_root="inbox")
    second = write_notifications([_interface_notification()], tmp_path, storage_root="inbox")

    expected = tmp_path / "inbox" / "to-billing" / "2026-03-01-members-breaking-change.yaml"
    assert first == second == [expected]
    assert sorted(path.name for path in tmp_path.rglob("*.yaml")) == [
        "2026-03-01-members-breaking-change.yaml"
    ]
