"""
contract-impact — diffing package

Purpose
- Change records, the differs that emit them and the table that classifies them.
"""

from contract_impact.diffing.changes import (
    ADDITION_KINDS,
    DESIGN_KINDS,
    Change,
    ChangeDetail,
    ChangeKind,
)
from contract_impact.diffing.classification import (
    CHANGE_CLASSIFICATION,
    ChangeClass,
    batch_priority,
    classify,
    has_breaking_change,
    is_breaking,
)
from contract_impact.diffing.differ import (
    SpecInput,
    as_contract_spec,
    detect_changes,
    detect_design_changes,
)

__all__ = [
    "ADDITION_KINDS",
    "CHANGE_CLASSIFICATION",
    "DESIGN_KINDS",
    "Change",
    "ChangeClass",
    "ChangeDetail",
    "ChangeKind",
    "SpecInput",
    "as_contract_spec",
    "batch_priority",
    "classify",
    "detect_changes",
    "detect_design_changes",
    "has_breaking_change",
    "is_breaking",
]
