"""
contract-impact — notifications package

Purpose
- Notification records, the builder that derives them from a change batch and
  the YAML serializer.
"""

from contract_impact.notifications.builder import (
    NotificationBuildError,
    build_notifications,
    describe_design_changes,
    describe_interface_changes,
    normalize_timestamp,
    summarize_interface_kind,
)
from contract_impact.notifications.models import (
    Notification,
    NotificationDetail,
    NotificationType,
    SummaryKind,
)
from contract_impact.notifications.serialization import (
    load_notification,
    render_notification,
    render_notifications,
    write_notifications,
)

__all__ = [
    "Notification",
    "NotificationBuildError",
    "NotificationDetail",
    "NotificationType",
    "SummaryKind",
    "build_notifications",
    "describe_design_changes",
    "describe_interface_changes",
    "load_notification",
    "normalize_timestamp",
    "render_notification",
    "render_notifications",
    "summarize_interface_kind",
    "write_notifications",
]
