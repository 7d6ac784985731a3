"""
contract-impact — design-system document extraction

File: src/contract_impact/contracts/design.py
Last updated: 2026-10-18

Purpose
- Pull CSS-style design tokens and level-2 component headings out of the
  markdown design-system document.

Functional requirements
- Tokens are scanned per category in a fixed order; a later definition of the
  same token name overrides an earlier one.
- Component names keep first-seen order; deeper headings are ignored.
"""

from __future__ import annotations

import re
from typing import Final

from contract_impact.constants import DESIGN_TOKEN_CATEGORIES

_TOKEN_PATTERNS: Final[tuple[tuple[str, re.Pattern[str]], ...]] = tuple(
    (category, re.compile(rf"--{category}-([a-zA-Z0-9-]+)\s*[:=]\s*([^\n;]+)"))
    for category in DESIGN_TOKEN_CATEGORIES
)
_COMPONENT_HEADING: Final[re.Pattern[str]] = re.compile(
    r"^##\s+([A-Z][a-zA-Z0-9 ]*[a-zA-Z0-9])", re.MULTILINE
)


def extract_design_tokens(text: object) -> dict[str, str]:
    """Map ``--{category}-{name}`` token names to their trimmed values."""

    tokens: dict[str, str] = {}
    if not isinstance(text, str) or not text:
        return tokens
    for category, pattern in _TOKEN_PATTERNS:
        for match in pattern.finditer(text):
            tokens[f"--{category}-{match.group(1)}"] = match.group(2).strip()
    return tokens


def extract_component_sections(text: object) -> tuple[str, ...]:
    """Return the distinct ``## Name`` headings in document order."""

    if not isinstance(text, str) or not text:
        return ()
    names: dict[str, None] = {}
    for match in _COMPONENT_HEADING.finditer(text):
        names.setdefault(match.group(1).strip(), None)
    return tuple(names)


__all__ = ["extract_component_sections", "extract_design_tokens"]
