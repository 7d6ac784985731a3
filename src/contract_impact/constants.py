"""Stable constants shared across the contract-impact pipeline."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Final

# Field-table sentinel recording that an endpoint exists independent of its fields.
ENDPOINT_MARKER: Final[str] = "__endpoint__"
DEFAULT_HTTP_METHOD: Final[str] = "GET"
REQUEST_SEGMENT: Final[str] = "request"
CONSUMER_FIELD_PREFIX: Final[str] = "consumer:"

# Watched document locations (repository-relative globs).
INTERFACE_PATTERNS: Final[tuple[str, ...]] = (
    "**/contracts/interfaces/**/*.yaml",
    "**/contracts/interfaces/**/*.yml",
)
DESIGN_PATTERNS: Final[tuple[str, ...]] = ("**/contracts/standards/design-system.md",)

# Design-system token categories, scanned in this order.
DESIGN_TOKEN_CATEGORIES: Final[tuple[str, ...]] = ("color", "font", "space", "radius", "shadow")

# Notification addressing.
BROADCAST_TARGET: Final[str] = "broadcast"
UNKNOWN_DOMAIN: Final[str] = "unknown"
DESIGN_SOURCE_DOMAIN: Final[str] = "design-system"
DESIGN_ROLES: Final[tuple[str, ...]] = ("domain-designer", "frontend-developer")
NOTIFICATIONS_ROOT: Final[PurePosixPath] = PurePosixPath("management/notifications")
DEADLINE_TIME_SUFFIX: Final[str] = "T23:59:59Z"

PRIORITY_NORMAL: Final[str] = "normal"
PRIORITY_HIGH: Final[str] = "high"
PRIORITIES: Final[tuple[str, ...]] = (PRIORITY_NORMAL, PRIORITY_HIGH)

CONFIG_SCHEMA_VERSION: Final[int] = 1

__all__ = [
    "BROADCAST_TARGET",
    "CONFIG_SCHEMA_VERSION",
    "CONSUMER_FIELD_PREFIX",
    "DEADLINE_TIME_SUFFIX",
    "DEFAULT_HTTP_METHOD",
    "DESIGN_PATTERNS",
    "DESIGN_ROLES",
    "DESIGN_SOURCE_DOMAIN",
    "DESIGN_TOKEN_CATEGORIES",
    "ENDPOINT_MARKER",
    "INTERFACE_PATTERNS",
    "NOTIFICATIONS_ROOT",
    "PRIORITIES",
    "PRIORITY_HIGH",
    "PRIORITY_NORMAL",
    "REQUEST_SEGMENT",
    "UNKNOWN_DOMAIN",
]
