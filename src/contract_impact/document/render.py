"""Render ``DocumentValue`` trees back into the contract document dialect."""

from __future__ import annotations

import math
from typing import Final

from contract_impact.document.parser import parse_inline_value
from contract_impact.document.values import (
    DocumentValue,
    MappingValue,
    ScalarPrimitive,
    ScalarValue,
    SequenceValue,
)

_INDENT_STEP: Final[int] = 2
_RESERVED_KEY_LEADERS: Final[frozenset[str]] = frozenset({"#", '"', "'", "[", "-"})


class UnsupportedDocumentError(ValueError):
    """Raised when a tree holds a construct the dialect cannot express."""


def render_document(document: MappingValue) -> str:
    """Render a top-level mapping so that ``parse_document`` reads it back unchanged."""

    if not isinstance(document, MappingValue):
        raise UnsupportedDocumentError("top-level document must be a mapping")
    lines: list[str] = []
    _render_mapping(document, 0, lines)
    return "".join(f"{line}\n" for line in lines)


def render_scalar(value: ScalarPrimitive) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        text = repr(value)
        if not math.isfinite(value) or "e" in text or "E" in text:
            raise UnsupportedDocumentError(f"float {text} has no plain decimal spelling")
        return text
    if _is_plain_text(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


def _render_mapping(mapping: MappingValue, indent: int, lines: list[str]) -> None:
    for key, value in mapping.items():
        _render_entry(key, value, " " * indent, indent, lines)


def _render_entry(
    key: str, value: DocumentValue, prefix: str, indent: int, lines: list[str]
) -> None:
    _check_key(key)
    inline = _inline_form(value)
    if inline is not None:
        lines.append(f"{prefix}{key}: {inline}")
        return
    lines.append(f"{prefix}{key}:")
    _render_block(value, indent + _INDENT_STEP, lines)


def _render_block(value: DocumentValue, indent: int, lines: list[str]) -> None:
    if isinstance(value, MappingValue):
        _render_mapping(value, indent, lines)
    elif isinstance(value, SequenceValue):
        _render_sequence(value, indent, lines)


def _render_sequence(sequence: SequenceValue, indent: int, lines: list[str]) -> None:
    pad = " " * indent
    for item in sequence:
        inline = _inline_form(item)
        if inline is not None:
            lines.append(f"{pad}- {inline}")
        elif isinstance(item, MappingValue):
            entries = item.items()
            content_indent = indent + _INDENT_STEP
            first_key, first_value = entries[0]
            _render_entry(first_key, first_value, f"{pad}- ", content_indent, lines)
            for key, value in entries[1:]:
                _render_entry(key, value, " " * content_indent, content_indent, lines)
        else:
            lines.append(f"{pad}-")
            _render_block(item, indent + _INDENT_STEP, lines)


def _inline_form(value: DocumentValue) -> str | None:
    if isinstance(value, ScalarValue):
        return render_scalar(value.value)
    if isinstance(value, SequenceValue) and not value.items:
        return "[]"
    if isinstance(value, MappingValue) and not value.entries:
        raise UnsupportedDocumentError("empty nested mappings cannot be expressed")
    return None


def _check_key(key: str) -> None:
    if (
        not key
        or key != key.strip()
        or ":" in key
        or "\n" in key
        or key[0] in _RESERVED_KEY_LEADERS
    ):
        raise UnsupportedDocumentError(f"mapping key {key!r} cannot be expressed")


def _is_plain_text(text: str) -> bool:
    if not text or text != text.strip():
        return False
    if "\n" in text or ":" in text or text[0] in _RESERVED_KEY_LEADERS:
        return False
    parsed = parse_inline_value(text)
    return isinstance(parsed, ScalarValue) and parsed.value == text


__all__ = ["UnsupportedDocumentError", "render_document", "render_scalar"]
