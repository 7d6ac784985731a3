"""
contract-impact — impact package

Purpose
- Resolve which consumers or broadcast groups a change batch reaches.
"""

from contract_impact.impact.resolver import (
    REASON_BREAKING,
    REASON_DIRECT_USE,
    AffectedConsumer,
    DesignCategory,
    DesignTarget,
    ImpactReport,
    analyze_impact,
    identify_affected_design_targets,
)

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
