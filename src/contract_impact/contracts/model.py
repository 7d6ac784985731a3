"""
contract-impact — interface contract model

File: src/contract_impact/contracts/model.py
Last updated: 2026-10-18

Purpose
- Extract the typed contract view (endpoints, field types, consumers) from a
  parsed document and flatten it into the field table the differ compares.

Functional requirements
- Extraction degrades gracefully: absent or wrong-kind nodes yield empty views.
- Consumer registry is last-write-wins on duplicate domain names.
- Structure validation is only meaningful for first-time creation.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Final

from contract_impact.constants import (
    DEFAULT_HTTP_METHOD,
    ENDPOINT_MARKER,
    REQUEST_SEGMENT,
    UNKNOWN_DOMAIN,
)
from contract_impact.document import (
    DocumentValue,
    MappingValue,
    Missing,
    ScalarValue,
    SequenceValue,
    from_python,
    parse_document,
    stringify_value,
)

FieldTable = dict[str, str]

_REQUIRED_TOP_LEVEL: Final[tuple[str, ...]] = ("version", "domain")


@dataclass(frozen=True, slots=True)
class Endpoint:
    """One endpoint with its flattened request/response field types."""

    path: str
    method: str = DEFAULT_HTTP_METHOD
    request_fields: tuple[tuple[str, str], ...] = ()
    response_fields: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())

    @property
    def key(self) -> str:
        return f"{self.method} {self.path}"

    @classmethod
    def from_document(cls, node: MappingValue) -> Endpoint:
        path = node.get_text("path")
        method = node.get_text("method")
        return cls(
            path="" if isinstance(path, Missing) else path,
            method=DEFAULT_HTTP_METHOD if isinstance(method, Missing) else method,
            request_fields=_field_types(node.get_mapping("request")),
            response_fields=_field_types(node.get_mapping("response")),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "path": self.path,
            "method": self.method,
            "request": dict(self.request_fields),
            "response": dict(self.response_fields),
        }


@dataclass(frozen=True, slots=True)
class Consumer:
    """A domain registered as depending on endpoints of this contract."""

    domain: str
    uses: tuple[str, ...] = ()

    @classmethod
    def from_document(cls, node: MappingValue) -> Consumer | None:
        domain = node.get_text("domain")
        if isinstance(domain, Missing) or not domain:
            return None
        return cls(domain=domain, uses=_string_items(node.get("uses")))

    def to_dict(self) -> dict[str, object]:
        return {"domain": self.domain, "uses": list(self.uses)}


@dataclass(frozen=True, slots=True)
class ContractSpec:
    """Typed view over one snapshot of a domain interface contract.

    ``version`` is ``None`` only when the key is absent from the document.
    """

    version: str | None = None
    domain: str | None = None
    endpoints: tuple[Endpoint, ...] = ()
    consumers: tuple[Consumer, ...] = ()

    @property
    def source_domain(self) -> str:
        return self.domain or UNKNOWN_DOMAIN

    @classmethod
    def from_document(cls, document: DocumentValue) -> ContractSpec:
        if not isinstance(document, MappingValue):
            return cls()

        version_node = document.get("version")
        domain = document.get_text("domain")

        endpoints: list[Endpoint] = []
        endpoint_nodes = document.get_sequence("endpoints")
        if not isinstance(endpoint_nodes, Missing):
            endpoints.extend(
                Endpoint.from_document(node)
                for node in endpoint_nodes
                if isinstance(node, MappingValue)
            )

        consumers: list[Consumer] = []
        consumer_nodes = document.get_sequence("consumers")
        if not isinstance(consumer_nodes, Missing):
            for node in consumer_nodes:
                if not isinstance(node, MappingValue):
                    continue
                consumer = Consumer.from_document(node)
                if consumer is not None:
                    consumers.append(consumer)

        return cls(
            version=None if version_node is None else stringify_value(version_node),
            domain=None if isinstance(domain, Missing) else domain,
            endpoints=tuple(endpoints),
            consumers=tuple(consumers),
        )

    @classmethod
    def from_text(cls, text: object) -> ContractSpec:
        return cls.from_document(parse_document(text))

    def to_dict(self) -> dict[str, object]:
        return {
            "version": self.version,
            "domain": self.domain,
            "endpoints": [endpoint.to_dict() for endpoint in self.endpoints],
            "consumers": [consumer.to_dict() for consumer in self.consumers],
        }


@dataclass(frozen=True, slots=True)
class StructureValidation:
    """Outcome of first-creation structure validation."""

    issues: tuple[str, ...] = field(default_factory=tuple)

    @property
    def valid(self) -> bool:
        return not self.issues


def extract_field_table(spec: ContractSpec) -> FieldTable:
    """Flatten endpoints into ``"{METHOD} {path}[.request].{field}" -> type``.

    Each endpoint also gets a sentinel entry so endpoint existence is tracked
    independently of its fields.
    """

    table: FieldTable = {}
    for endpoint in spec.endpoints:
        key = endpoint.key
        table[key] = ENDPOINT_MARKER
        for name, type_name in endpoint.response_fields:
            table[f"{key}.{name}"] = type_name
        for name, type_name in endpoint.request_fields:
            table[f"{key}.{REQUEST_SEGMENT}.{name}"] = type_name
    return table


def extract_consumers(spec: ContractSpec) -> dict[str, Consumer]:
    registry: dict[str, Consumer] = {}
    for consumer in spec.consumers:
        registry[consumer.domain] = consumer
    return registry


def validate_contract_structure(document: DocumentValue) -> StructureValidation:
    """Report missing required contract fields for a newly created document."""

    if not isinstance(document, MappingValue):
        document = MappingValue()

    issues: list[str] = []
    for name in _REQUIRED_TOP_LEVEL:
        if not _is_present(document.get(name)):
            issues.append(f'Missing required field: "{name}"')

    endpoints = document.get_sequence("endpoints")
    if isinstance(endpoints, Missing):
        issues.append('Missing or invalid "endpoints" array')
    else:
        for index, node in enumerate(endpoints):
            endpoint = node if isinstance(node, MappingValue) else MappingValue()
            if not _is_present(endpoint.get("path")):
                issues.append(f'Endpoint [{index}]: missing "path" field')
            if not _is_present(endpoint.get("method")):
                issues.append(f'Endpoint [{index}]: missing "method" field')
            if not _is_present(endpoint.get("response")) and not _is_present(
                endpoint.get("request")
            ):
                issues.append(
                    f'Endpoint [{index}]: must define at least "response" or "request" fields'
                )

    return StructureValidation(issues=tuple(issues))


def _field_types(node: MappingValue | Missing) -> tuple[tuple[str, str], ...]:
    if isinstance(node, Missing):
        return ()
    return tuple((name, stringify_value(value)) for name, value in node.items())


def _string_items(node: DocumentValue | None) -> tuple[str, ...]:
    if isinstance(node, SequenceValue):
        return tuple(stringify_value(item) for item in node if _is_present(item))
    if isinstance(node, ScalarValue) and _is_present(node):
        return (node.as_text(),)
    return ()


def _is_present(node: DocumentValue | None) -> bool:
    if node is None:
        return False
    if isinstance(node, ScalarValue):
        return bool(node.value)
    return True


def spec_from_mapping(payload: Mapping[str, object]) -> ContractSpec:
    """Build a spec from plain Python data, e.g. fixtures loaded elsewhere."""

    return ContractSpec.from_document(from_python(payload))


__all__ = [
    "Consumer",
    "ContractSpec",
    "Endpoint",
    "FieldTable",
    "StructureValidation",
    "extract_consumers",
    "extract_field_table",
    "spec_from_mapping",
    "validate_contract_structure",
]
