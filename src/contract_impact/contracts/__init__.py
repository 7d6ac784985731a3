"""
contract-impact — contract model package

Purpose
- Typed views over interface contracts and the design-system document.
"""

from contract_impact.contracts.design import extract_component_sections, extract_design_tokens
from contract_impact.contracts.model import (
    Consumer,
    ContractSpec,
    Endpoint,
    FieldTable,
    StructureValidation,
    extract_consumers,
    extract_field_table,
    spec_from_mapping,
    validate_contract_structure,
)

__all__ = [
    "Consumer",
    "ContractSpec",
    "Endpoint",
    "FieldTable",
    "StructureValidation",
    "extract_component_sections",
    "extract_consumers",
    "extract_design_tokens",
    "extract_field_table",
    "spec_from_mapping",
    "validate_contract_structure",
]
