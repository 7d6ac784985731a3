"""
contract-impact — document value tree

File: src/contract_impact/document/values.py
Last updated: 2026-10-18

Purpose
- Tagged-union value type produced by the document parser.

What should be included in this file
- Scalar, sequence and ordered mapping nodes.
- Typed accessors that report absent keys and wrong node kinds explicitly.
- Conversions to/from plain Python values and canonical stringification.

Non-functional requirements
- Immutable and hashable so trees compare structurally.
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Final, Literal

ScalarPrimitive = str | int | float | bool | None
NodeKind = Literal["scalar", "sequence", "mapping"]

_NULL_TEXT: Final[str] = "null"


@dataclass(frozen=True, slots=True)
class ScalarValue:
    """Leaf node: string, number, boolean or null."""

    value: ScalarPrimitive = None

    @property
    def kind(self) -> NodeKind:
        return "scalar"

    @property
    def is_null(self) -> bool:
        return self.value is None

    def as_text(self) -> str:
        return stringify_scalar(self.value)

    def to_python(self) -> ScalarPrimitive:
        return self.value


@dataclass(frozen=True, slots=True)
class SequenceValue:
    """Ordered list of nodes."""

    items: tuple[DocumentValue, ...] = ()

    @property
    def kind(self) -> NodeKind:
        return "sequence"

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[DocumentValue]:
        return iter(self.items)

    def to_python(self) -> list[object]:
        return [item.to_python() for item in self.items]


@dataclass(frozen=True, slots=True)
class Missing:
    """Accessor result for a key that is absent or holds the wrong node kind."""

    key: str
    reason: Literal["absent", "wrong_kind"]
    expected: NodeKind | Literal["text", "any"]
    found: NodeKind | None = None

    def describe(self) -> str:
        if self.reason == "absent":
            return f"{self.key!r} is absent"
        return f"{self.key!r} is a {self.found}, expected {self.expected}"


@dataclass(frozen=True, slots=True)
class MappingValue:
    """Mapping node with unique keys kept in insertion order."""

    entries: tuple[tuple[str, DocumentValue], ...] = ()

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for key, _ in self.entries:
            if key in seen:
                raise ValueError(f"duplicate mapping key: {key!r}")
            seen.add(key)

    @property
    def kind(self) -> NodeKind:
        return "mapping"

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return any(existing == key for existing, _ in self.entries)

    def keys(self) -> tuple[str, ...]:
        return tuple(key for key, _ in self.entries)

    def items(self) -> tuple[tuple[str, DocumentValue], ...]:
        return self.entries

    def get(self, key: str) -> DocumentValue | None:
        for existing, value in self.entries:
            if existing == key:
                return value
        return None

    def lookup(self, key: str) -> DocumentValue | Missing:
        value = self.get(key)
        if value is None:
            return Missing(key=key, reason="absent", expected="any")
        return value

    def get_mapping(self, key: str) -> MappingValue | Missing:
        return _expect(self.get(key), key, MappingValue, "mapping")

    def get_sequence(self, key: str) -> SequenceValue | Missing:
        return _expect(self.get(key), key, SequenceValue, "sequence")

    def get_scalar(self, key: str) -> ScalarValue | Missing:
        return _expect(self.get(key), key, ScalarValue, "scalar")

    def get_text(self, key: str) -> str | Missing:
        """Return a non-null scalar as text; null counts as absent."""

        scalar = self.get_scalar(key)
        if isinstance(scalar, Missing):
            return Missing(key=key, reason=scalar.reason, expected="text", found=scalar.found)
        if scalar.is_null:
            return Missing(key=key, reason="absent", expected="text")
        return scalar.as_text()

    def to_python(self) -> dict[str, object]:
        return {key: value.to_python() for key, value in self.entries}


DocumentValue = ScalarValue | SequenceValue | MappingValue

EMPTY_MAPPING: Final[MappingValue] = MappingValue()


def _expect(
    value: DocumentValue | None,
    key: str,
    node_type: type[ScalarValue] | type[SequenceValue] | type[MappingValue],
    expected: NodeKind,
) -> ScalarValue | SequenceValue | MappingValue | Missing:
    if value is None:
        return Missing(key=key, reason="absent", expected=expected)
    if not isinstance(value, node_type):
        return Missing(key=key, reason="wrong_kind", expected=expected, found=value.kind)
    return value


def stringify_scalar(value: ScalarPrimitive) -> str:
    """Render a scalar the way contract documents spell it."""

    if value is None:
        return _NULL_TEXT
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def stringify_value(value: DocumentValue) -> str:
    """Stringify any node; collections render as canonical JSON."""

    if isinstance(value, ScalarValue):
        return value.as_text()
    return json.dumps(value.to_python(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def from_python(value: object) -> DocumentValue:
    """Build a value tree from plain dict/list/scalar data."""

    if isinstance(value, Mapping):
        return MappingValue(tuple((str(key), from_python(item)) for key, item in value.items()))
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return SequenceValue(tuple(from_python(item) for item in value))
    if value is None or isinstance(value, (str, bool, int, float)):
        return ScalarValue(value)
    raise TypeError(f"unsupported document value type: {type(value).__name__}")


__all__ = [
    "EMPTY_MAPPING",
    "DocumentValue",
    "MappingValue",
    "Missing",
    "NodeKind",
    "ScalarPrimitive",
    "ScalarValue",
    "SequenceValue",
    "from_python",
    "stringify_scalar",
    "stringify_value",
]
