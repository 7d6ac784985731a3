"""
contract-impact — impact resolver

File: src/contract_impact/impact/resolver.py
Last updated: 2026-10-18

Purpose
- Map interface changes onto the consumer graph of the new contract, and
  design changes onto coarse broadcast groups.

Functional requirements
- A change directly affects a consumer when its field equals or starts with
  one of the consumer's ``uses`` entries.
- Any breaking change in the batch includes every registered consumer with
  ``requires_update=True``; without one, only directly affected consumers are
  included and none requires an update.
- Design changes yield at most one token group and one component group.

Non-functional requirements
- No I/O of its own; one decision log per call goes to the package logger,
  which stays silent until logging is set up.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from contract_impact.constants import BROADCAST_TARGET, DESIGN_ROLES
from contract_impact.contracts import Consumer, ContractSpec, extract_consumers
from contract_impact.diffing import Change, ChangeDetail, ChangeKind, classify
from contract_impact.observability import get_decision_logger

_UNKNOWN_VERSION = "unknown"
REASON_DIRECT_USE = "Uses endpoints affected by changes"
REASON_BREAKING = "Breaking change in consumed interface"


class DesignCategory(StrEnum):
    TOKEN = "token"
    COMPONENT = "component"


@dataclass(frozen=True, slots=True)
class AffectedConsumer:
    domain: str
    source_domain: str
    uses: tuple[str, ...]
    affected_fields: tuple[str, ...]
    requires_update: bool
    reason: str
    recommendations: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "domain": self.domain,
            "source_domain": self.source_domain,
            "uses": list(self.uses),
            "affected_fields": list(self.affected_fields),
            "requires_update": self.requires_update,
            "reason": self.reason,
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True, slots=True)
class ImpactReport:
    """Breaking/non-breaking tallies plus the consumers a change batch reaches."""

    domain: str
    version: str
    total_changes: int
    breaking_count: int
    non_breaking_count: int
    has_breaking_changes: bool
    changes: tuple[Change, ...]
    affected_consumers: tuple[AffectedConsumer, ...]

    @property
    def affected_domains(self) -> tuple[str, ...]:
        return tuple(consumer.domain for consumer in self.affected_consumers)

    def to_dict(self) -> dict[str, object]:
        return {
            "domain": self.domain,
            "version": self.version,
            "total_changes": self.total_changes,
            "breaking_count": self.breaking_count,
            "non_breaking_count": self.non_breaking_count,
            "has_breaking_changes": self.has_breaking_changes,
            "changes": [change.to_dict() for change in self.changes],
            "affected_consumers": [consumer.to_dict() for consumer in self.affected_consumers],
        }


@dataclass(frozen=True, slots=True)
class DesignTarget:
    """Broadcast group addressed by a design-system change."""

    category: DesignCategory
    roles: tuple[str, ...]
    reason: str
    requires_update: bool
    changes: tuple[Change, ...]
    target: str = BROADCAST_TARGET

    def to_dict(self) -> dict[str, object]:
        return {
            "target": self.target,
            "category": self.category.value,
            "roles": list(self.roles),
            "reason": self.reason,
            "requires_update": self.requires_update,
            "changes": [change.to_dict() for change in self.changes],
        }


def analyze_impact(
    changes: Sequence[Change],
    new_spec: ContractSpec,
    *,
    logger: Any | None = None,
) -> ImpactReport:
    """Tally the batch and resolve which consumers of ``new_spec`` it affects."""

    log = logger if logger is not None else get_decision_logger(__name__)
    breaking_count = sum(1 for change in changes if classify(change).breaking)
    has_breaking = breaking_count > 0
    source_domain = new_spec.source_domain

    affected: list[AffectedConsumer] = []
    for consumer in extract_consumers(new_spec).values():
        matched = _matching_changes(changes, consumer)
        if not matched and not has_breaking:
            continue
        affected.append(
            AffectedConsumer(
                domain=consumer.domain,
                source_domain=source_domain,
                uses=consumer.uses,
                affected_fields=tuple(dict.fromkeys(change.field for change in matched)),
                requires_update=has_breaking,
                reason=REASON_DIRECT_USE if matched else REASON_BREAKING,
                recommendations=tuple(_recommendation(change) for change in matched),
            )
        )

    report = ImpactReport(
        domain=source_domain,
        version=new_spec.version or _UNKNOWN_VERSION,
        total_changes=len(changes),
        breaking_count=breaking_count,
        non_breaking_count=len(changes) - breaking_count,
        has_breaking_changes=has_breaking,
        changes=tuple(changes),
        affected_consumers=tuple(affected),
    )
    log.info(
        "impact_analyzed",
        domain=report.domain,
        version=report.version,
        total_changes=report.total_changes,
        breaking_count=report.breaking_count,
        affected_domains=list(report.affected_domains),
    )
    return report


def identify_affected_design_targets(
    changes: Sequence[Change],
    *,
    roles: Sequence[str] = DESIGN_ROLES,
    logger: Any | None = None,
) -> list[DesignTarget]:
    """Group design changes into one token and one component broadcast target."""

    log = logger if logger is not None else get_decision_logger(__name__)
    token_changes = tuple(c for c in changes if c.kind is ChangeKind.DESIGN_TOKEN_CHANGE)
    component_changes = tuple(c for c in changes if c.kind is ChangeKind.DESIGN_COMPONENT_CHANGE)
    role_tuple = tuple(roles)

    targets: list[DesignTarget] = []
    if token_changes:
        targets.append(
            DesignTarget(
                category=DesignCategory.TOKEN,
                roles=role_tuple,
                reason=f"Design token(s) changed: {_field_list(token_changes)}",
                requires_update=True,
                changes=token_changes,
            )
        )
    if component_changes:
        targets.append(
            DesignTarget(
                category=DesignCategory.COMPONENT,
                roles=role_tuple,
                reason=f"Design component(s) changed: {_field_list(component_changes)}",
                requires_update=any(
                    c.detail is ChangeDetail.COMPONENT_REMOVED for c in component_changes
                ),
                changes=component_changes,
            )
        )

    log.info(
        "impact_design_targets",
        token_changes=len(token_changes),
        component_changes=len(component_changes),
        categories=[target.category.value for target in targets],
    )
    return targets


def _matching_changes(changes: Sequence[Change], consumer: Consumer) -> list[Change]:
    return [
        change
        for change in changes
        if any(change.field == used or change.field.startswith(used) for used in consumer.uses)
    ]


def _recommendation(change: Change) -> str:
    entry = classify(change)
    marker = "[BREAKING]" if entry.breaking else "[INFO]"
    return f"{marker} {entry.label}: {change.field} - {entry.action}"


def _field_list(changes: Sequence[Change]) -> str:
    return ", ".join(change.field for change in changes)


__all__ = [
    "REASON_BREAKING",
    "REASON_DIRECT_USE",
    "AffectedConsumer",
    "DesignCategory",
    "DesignTarget",
    "ImpactReport",
    "analyze_impact",
    "identify_affected_design_targets",
]
