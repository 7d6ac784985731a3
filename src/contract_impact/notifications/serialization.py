"""YAML rendering, loading and on-disk placement of notification records."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path, PurePosixPath
from typing import cast

import yaml

from contract_impact.constants import NOTIFICATIONS_ROOT
from contract_impact.notifications.models import Notification


def render_notification(notification: Notification) -> str:
    rendered = yaml.safe_dump(
        notification.to_dict(),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=120,
    )
    if not rendered.endswith("\n"):
        rendered = rendered + "\n"
    return rendered


def render_notifications(notifications: Iterable[Notification]) -> str:
    """Render several records as one ``---``-separated YAML stream."""

    return yaml.safe_dump_all(
        [notification.to_dict() for notification in notifications],
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=120,
    )


def load_notification(text: str) -> Notification:
    try:
        loaded = cast("object", yaml.safe_load(text))
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid notification YAML ({exc})") from exc
    if not isinstance(loaded, dict):
        raise ValueError(f"expected a YAML mapping, got {type(loaded).__name__}")
    return Notification.from_dict(loaded)


def write_notifications(
    notifications: Iterable[Notification],
    base_dir: Path,
    *,
    storage_root: PurePosixPath | str = NOTIFICATIONS_ROOT,
) -> list[Path]:
    """Write each record at its storage path below ``base_dir``.

    Records sharing an identity land on the same file, so re-running the same
    input overwrites instead of duplicating.
    """

    written: list[Path] = []
    for notification in notifications:
        destination = base_dir / Path(*notification.storage_path_under(storage_root).parts)
        destination.parent.mkdir(parents=True, exist_ok=True)
        with destination.open("w", encoding="utf-8") as handle:
            handle.write(render_notification(notification))
        written.append(destination)
    return written


__all__ = [
    "load_notification",
    "render_notification",
    "render_notifications",
    "write_notifications",
]
