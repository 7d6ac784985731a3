"""
contract-impact — minimal indentation-driven document parser

File: src/contract_impact/document/parser.py
Last updated: 2026-10-18

Purpose
- Turn the YAML-like text of interface contracts into a ``DocumentValue`` tree
  without a full grammar.

Functional requirements
- Never raise: malformed input degrades to a partial (possibly empty) tree.
- Lines that match no rule are skipped silently.

Supported constructs
- ``key: value`` pairs, nested mappings and sequences chosen by lookahead on
  the next line, sequence items that are scalars, bare ``-`` blocks or item
  mappings folded from the lines indented deeper than the dash.
- Scalars: null markers, booleans, integers/decimals, ``[a, b]`` inline lists,
  single- and double-quoted strings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from contract_impact.document.values import (
    EMPTY_MAPPING,
    DocumentValue,
    MappingValue,
    ScalarValue,
    SequenceValue,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

_NULL_MARKERS: Final[frozenset[str]] = frozenset({"", "~", "null"})
_INTEGER_RE: Final[re.Pattern[str]] = re.compile(r"-?\d+")
_DECIMAL_RE: Final[re.Pattern[str]] = re.compile(r"-?\d+\.\d+")
_DOUBLE_QUOTE_ESCAPES: Final[dict[str, str]] = {'"': '"', "\\": "\\", "n": "\n"}
_NON_KEY_LEADERS: Final[frozenset[str]] = frozenset({'"', "'", "["})


@dataclass(frozen=True, slots=True)
class _Line:
    number: int
    indent: int
    text: str

    @property
    def is_item(self) -> bool:
        return self.text == "-" or self.text.startswith("- ")

    @property
    def item_content(self) -> str:
        return self.text[1:].strip()


def parse_document(text: object) -> MappingValue:
    """Parse contract text into a top-level mapping; never raises."""

    if not isinstance(text, str) or not text.strip():
        return EMPTY_MAPPING
    try:
        return _parse_mapping(_scan(text))
    except RecursionError:
        return EMPTY_MAPPING


def parse_inline_value(raw: str) -> DocumentValue:
    """Parse the inline text to the right of ``key:`` or ``- ``."""

    text = raw.strip()
    if text in _NULL_MARKERS:
        return ScalarValue(None)
    if text == "true":
        return ScalarValue(True)
    if text == "false":
        return ScalarValue(False)
    if text.startswith("[") and text.endswith("]"):
        inner = text[1:-1].strip()
        if not inner:
            return SequenceValue(())
        return SequenceValue(tuple(parse_inline_value(part) for part in inner.split(",")))
    if _INTEGER_RE.fullmatch(text):
        return ScalarValue(int(text))
    if _DECIMAL_RE.fullmatch(text):
        return ScalarValue(float(text))
    if len(text) >= 2 and text[0] == text[-1] == "'":
        return ScalarValue(text[1:-1].replace("''", "'"))
    if len(text) >= 2 and text[0] == text[-1] == '"':
        return ScalarValue(_unescape_double_quoted(text[1:-1]))
    return ScalarValue(text)


def split_key_value(text: str) -> tuple[str, str] | None:
    """Split ``key: value`` at the first colon; ``None`` when there is no key."""

    colon = text.find(":")
    if colon == -1:
        return None
    key = text[:colon].strip()
    if not key:
        return None
    return key, text[colon + 1 :].strip()


def _scan(text: str) -> list[_Line]:
    lines: list[_Line] = []
    for number, raw in enumerate(text.split("\n"), start=1):
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            continue
        indent = len(raw) - len(raw.lstrip())
        lines.append(_Line(number=number, indent=indent, text=stripped))
    return lines


def _parse_mapping(lines: Sequence[_Line]) -> MappingValue:
    entries: dict[str, DocumentValue] = {}
    index = 0
    while index < len(lines):
        line = lines[index]
        if line.is_item:
            # Stray item in mapping context: drop it together with its body.
            index = _item_end(lines, index)
            continue

        split = split_key_value(line.text)
        if split is None:
            index += 1
            continue

        key, raw_value = split
        if raw_value:
            entries[key] = parse_inline_value(raw_value)
            index += 1
            continue

        block, index = _take_child_block(lines, index)
        entries[key] = _parse_block(block)
    return MappingValue(tuple(entries.items()))


def _parse_sequence(lines: Sequence[_Line]) -> SequenceValue:
    items: list[DocumentValue] = []
    index = 0
    while index < len(lines):
        line = lines[index]
        if not line.is_item:
            index += 1
            continue

        end = _item_end(lines, index)
        body = lines[index + 1 : end]
        content = line.item_content
        if not content:
            items.append(_parse_block(body))
        elif _starts_item_mapping(content):
            content_column = line.indent + len(line.text) - len(content)
            head = _Line(number=line.number, indent=content_column, text=content)
            items.append(_parse_mapping([head, *body]))
        else:
            items.append(parse_inline_value(content))
        index = end
    return SequenceValue(tuple(items))


def _parse_block(block: Sequence[_Line]) -> DocumentValue:
    if not block:
        return ScalarValue(None)
    if block[0].is_item:
        return _parse_sequence(block)
    return _parse_mapping(block)


def _take_child_block(lines: Sequence[_Line], index: int) -> tuple[list[_Line], int]:
    """Collect the lines owned by the valueless key at ``index``."""

    owner = lines[index]
    start = index + 1
    if start >= len(lines):
        return [], start

    first = lines[start]
    end = start
    if first.indent > owner.indent:
        child_indent = first.indent
        while end < len(lines) and lines[end].indent >= child_indent:
            end += 1
        return list(lines[start:end]), end

    if first.indent == owner.indent and first.is_item:
        # Sequence written flush with its key.
        while end < len(lines):
            current = lines[end]
            if current.indent < owner.indent:
                break
            if current.indent == owner.indent and not current.is_item:
                break
            end += 1
        return list(lines[start:end]), end

    return [], start


def _item_end(lines: Sequence[_Line], index: int) -> int:
    dash_indent = lines[index].indent
    end = index + 1
    while end < len(lines) and lines[end].indent > dash_indent:
        end += 1
    return end


def _starts_item_mapping(content: str) -> bool:
    if content[0] in _NON_KEY_LEADERS:
        return False
    colon = content.find(":")
    if colon <= 0:
        return False
    rest = content[colon + 1 :]
    return not rest or rest[0].isspace()


def _unescape_double_quoted(inner: str) -> str:
    chars: list[str] = []
    index = 0
    while index < len(inner):
        char = inner[index]
        if char == "\\" and index + 1 < len(inner):
            replacement = _DOUBLE_QUOTE_ESCAPES.get(inner[index + 1])
            if replacement is not None:
                chars.append(replacement)
                index += 2
                continue
        chars.append(char)
        index += 1
    return "".join(chars)


__all__ = ["parse_document", "parse_inline_value", "split_key_value"]
