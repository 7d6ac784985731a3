"""
contract-impact — snapshot-pair pipeline

File: src/contract_impact/pipeline.py
Last updated: 2026-10-18

Purpose
- Classify a repository-relative path, run the matching interface or design
  pipeline over an old/new snapshot pair and collect every intermediate result.

Functional requirements
- A blank or missing old snapshot is a first-time creation: interface
  documents get structure validation only, design documents produce nothing.
- ``process_snapshot_pair`` never raises; any failure is logged as
  ``pipeline_failed`` and yields an empty result.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum
from functools import lru_cache
from typing import Any

from contract_impact.constants import (
    DESIGN_PATTERNS,
    DESIGN_ROLES,
    DESIGN_SOURCE_DOMAIN,
    INTERFACE_PATTERNS,
    NOTIFICATIONS_ROOT,
    UNKNOWN_DOMAIN,
)
from contract_impact.contracts import ContractSpec, StructureValidation, validate_contract_structure
from contract_impact.diffing import Change, detect_changes, detect_design_changes
from contract_impact.document import parse_document
from contract_impact.impact import (
    DesignTarget,
    ImpactReport,
    analyze_impact,
    identify_affected_design_targets,
)
from contract_impact.notifications import Notification, build_notifications
from contract_impact.observability import get_decision_logger


class DocumentCategory(StrEnum):
    INTERFACE = "interface"
    DESIGN = "design"


@dataclass(frozen=True, slots=True)
class PipelineSettings:
    """Watched paths and notification addressing used by the pipeline."""

    interface_patterns: tuple[str, ...] = INTERFACE_PATTERNS
    design_patterns: tuple[str, ...] = DESIGN_PATTERNS
    storage_root: str = NOTIFICATIONS_ROOT.as_posix()
    design_source: str = DESIGN_SOURCE_DOMAIN
    design_roles: tuple[str, ...] = DESIGN_ROLES
    unknown_domain: str = UNKNOWN_DOMAIN

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> PipelineSettings:
        watch = config.get("watch", {})
        notifications = config.get("notifications", {})
        defaults = cls()
        return cls(
            interface_patterns=tuple(watch.get("interface_patterns", defaults.interface_patterns)),
            design_patterns=tuple(watch.get("design_patterns", defaults.design_patterns)),
            storage_root=notifications.get("storage_root", defaults.storage_root),
            design_source=notifications.get("design_source", defaults.design_source),
            design_roles=tuple(notifications.get("design_roles", defaults.design_roles)),
            unknown_domain=notifications.get("unknown_domain", defaults.unknown_domain),
        )


@dataclass(frozen=True, slots=True)
class PipelineResult:
    category: DocumentCategory | None = None
    changes: tuple[Change, ...] = ()
    impact: ImpactReport | None = None
    design_targets: tuple[DesignTarget, ...] = ()
    notifications: tuple[Notification, ...] = ()
    validation: StructureValidation | None = None

    @property
    def is_empty(self) -> bool:
        return (
            self.category is None
            and not self.changes
            and not self.notifications
            and self.validation is None
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "category": None if self.category is None else self.category.value,
            "changes": [change.to_dict() for change in self.changes],
            "impact": None if self.impact is None else self.impact.to_dict(),
            "design_targets": [target.to_dict() for target in self.design_targets],
            "notifications": [notification.to_dict() for notification in self.notifications],
            "validation": (
                None
                if self.validation is None
                else {"valid": self.validation.valid, "issues": list(self.validation.issues)}
            ),
        }


def classify_document_path(
    path: str, settings: PipelineSettings | None = None
) -> DocumentCategory | None:
    """Return the watched category for a repository-relative path, if any."""

    active = settings if settings is not None else PipelineSettings()
    normalized = _normalize_path(path)
    if _matches_any(normalized, active.interface_patterns):
        return DocumentCategory.INTERFACE
    if _matches_any(normalized, active.design_patterns):
        return DocumentCategory.DESIGN
    return None


def run_contract_pipeline(
    old_text: str | None,
    new_text: str,
    file_path: str,
    *,
    timestamp: str | datetime | None = None,
    settings: PipelineSettings | None = None,
    logger: Any | None = None,
) -> PipelineResult:
    active = settings if settings is not None else PipelineSettings()
    log = logger if logger is not None else get_decision_logger(__name__)
    new_document = parse_document(new_text)

    if _is_blank(old_text):
        validation = validate_contract_structure(new_document)
        log.info(
            "pipeline_contract_created",
            file_path=file_path,
            valid=validation.valid,
            issues=list(validation.issues),
        )
        return PipelineResult(category=DocumentCategory.INTERFACE, validation=validation)

    new_spec = ContractSpec.from_document(new_document)
    if new_spec.domain is None:
        new_spec = replace(new_spec, domain=active.unknown_domain)
    changes = detect_changes(parse_document(old_text), new_spec)
    if not changes:
        log.info(
            "pipeline_no_changes",
            file_path=file_path,
            category=DocumentCategory.INTERFACE.value,
        )
        return PipelineResult(category=DocumentCategory.INTERFACE)

    impact = analyze_impact(changes, new_spec, logger=logger)
    notifications = build_notifications(
        changes, new_spec, file_path, timestamp, impact=impact, logger=logger
    )
    log.info(
        "pipeline_contract_processed",
        file_path=file_path,
        change_count=len(changes),
        breaking=impact.has_breaking_changes,
        notification_ids=[notification.identity for notification in notifications],
    )
    return PipelineResult(
        category=DocumentCategory.INTERFACE,
        changes=tuple(changes),
        impact=impact,
        notifications=tuple(notifications),
    )


def run_design_pipeline(
    old_text: str | None,
    new_text: str,
    file_path: str,
    *,
    timestamp: str | datetime | None = None,
    settings: PipelineSettings | None = None,
    logger: Any | None = None,
) -> PipelineResult:
    active = settings if settings is not None else PipelineSettings()
    log = logger if logger is not None else get_decision_logger(__name__)

    if _is_blank(old_text):
        log.info("pipeline_design_created", file_path=file_path)
        return PipelineResult(category=DocumentCategory.DESIGN)

    changes = detect_design_changes(old_text, new_text)
    if not changes:
        log.info(
            "pipeline_no_changes",
            file_path=file_path,
            category=DocumentCategory.DESIGN.value,
        )
        return PipelineResult(category=DocumentCategory.DESIGN)

    targets = identify_affected_design_targets(changes, roles=active.design_roles, logger=logger)
    notifications = build_notifications(
        changes,
        None,
        file_path,
        timestamp,
        design_source=active.design_source,
        design_targets=targets,
        logger=logger,
    )
    log.info(
        "pipeline_design_processed",
        file_path=file_path,
        change_count=len(changes),
        notification_ids=[notification.identity for notification in notifications],
    )
    return PipelineResult(
        category=DocumentCategory.DESIGN,
        changes=tuple(changes),
        design_targets=tuple(targets),
        notifications=tuple(notifications),
    )


def process_snapshot_pair(
    old_text: str | None,
    new_text: str,
    file_path: str,
    *,
    timestamp: str | datetime | None = None,
    settings: PipelineSettings | None = None,
    logger: Any | None = None,
) -> PipelineResult:
    """Run whichever pipeline ``file_path`` belongs to; never raises."""

    log = logger if logger is not None else get_decision_logger(__name__)
    try:
        category = classify_document_path(file_path, settings)
        if category is None:
            log.debug("pipeline_path_ignored", file_path=file_path)
            return PipelineResult()
        runner = (
            run_contract_pipeline if category is DocumentCategory.INTERFACE else run_design_pipeline
        )
        return runner(
            old_text,
            new_text,
            file_path,
            timestamp=timestamp,
            settings=settings,
            logger=logger,
        )
    except Exception as exc:  # noqa: BLE001 - the host process must never crash.
        log.warning(
            "pipeline_failed",
            file_path=file_path,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return PipelineResult()


def _is_blank(text: str | None) -> bool:
    return text is None or not text.strip()


def _normalize_path(path: str) -> str:
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


def _matches_any(path: str, patterns: Sequence[str]) -> bool:
    return any(_glob_regex(pattern).fullmatch(path) for pattern in patterns)


@lru_cache(maxsize=64)
def _glob_regex(pattern: str) -> re.Pattern[str]:
    """Compile a glob where ``**/`` spans zero or more directories and ``*`` stays in one.

    ``fnmatch`` lets ``*`` cross ``/`` and cannot match ``**/`` against zero directories.
    """

    parts: list[str] = []
    index = 0
    while index < len(pattern):
        if pattern.startswith("**/", index):
            parts.append("(?:.+/)?")
            index += 3
        elif pattern.startswith("**", index):
            parts.append(".*")
            index += 2
        elif pattern[index] == "*":
            parts.append("[^/]*")
            index += 1
        elif pattern[index] == "?":
            parts.append("[^/]")
            index += 1
        else:
            parts.append(re.escape(pattern[index]))
            index += 1
    return re.compile("".join(parts))


__all__ = [
    "DocumentCategory",
    "PipelineResult",
    "PipelineSettings",
    "classify_document_path",
    "process_snapshot_pair",
    "run_contract_pipeline",
    "run_design_pipeline",
]
