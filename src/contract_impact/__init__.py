"""
contract-impact — package root

File: src/contract_impact/__init__.py
Last updated: 2026-10-18

Purpose
- Detect changes between two snapshots of an interface contract or design-system
  document, classify them, resolve the affected consumers and build addressed
  notifications.

Functional requirements
- Must not have side effects at import time (no config loading, no logging init).

Key interfaces / contracts to define here
- ``__version__`` and the library entry points listed in ``__all__``.
"""

from contract_impact.contracts import ContractSpec, validate_contract_structure
from contract_impact.diffing import (
    CHANGE_CLASSIFICATION,
    Change,
    ChangeKind,
    classify,
    detect_changes,
    detect_design_changes,
)
from contract_impact.document import parse_document
from contract_impact.impact import analyze_impact, identify_affected_design_targets
from contract_impact.notifications import Notification, build_notifications
from contract_impact.pipeline import (
    PipelineResult,
    PipelineSettings,
    classify_document_path,
    process_snapshot_pair,
)

__version__ = "0.1.0"

__all__ = [
    "CHANGE_CLASSIFICATION",
    "Change",
    "ChangeKind",
    "ContractSpec",
    "Notification",
    "PipelineResult",
    "PipelineSettings",
    "__version__",
    "analyze_impact",
    "build_notifications",
    "classify",
    "classify_document_path",
    "detect_changes",
    "detect_design_changes",
    "identify_affected_design_targets",
    "parse_document",
    "process_snapshot_pair",
    "validate_contract_structure",
]
