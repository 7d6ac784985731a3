"""
contract-impact — document package

Purpose
- Shared parser, value tree and renderer consumed by both the contract-diff and
  design-diff entry points.
"""

from contract_impact.document.parser import parse_document, parse_inline_value, split_key_value
from contract_impact.document.render import (
    UnsupportedDocumentError,
    render_document,
    render_scalar,
)
from contract_impact.document.values import (
    EMPTY_MAPPING,
    DocumentValue,
    MappingValue,
    Missing,
    ScalarValue,
    SequenceValue,
    from_python,
    stringify_scalar,
    stringify_value,
)

__all__ = [
    "EMPTY_MAPPING",
    "DocumentValue",
    "MappingValue",
    "Missing",
    "ScalarValue",
    "SequenceValue",
    "UnsupportedDocumentError",
    "from_python",
    "parse_document",
    "parse_inline_value",
    "render_document",
    "render_scalar",
    "split_key_value",
    "stringify_scalar",
    "stringify_value",
]
