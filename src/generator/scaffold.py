"""
Module 2: Scaffold Builder

Mirrors a schema into an annotation tree marking where directives apply.

Slots in the tree hold one of:
    ObjectScaffold  - an object schema
    ArrayScaffold   - an array schema, one independent copy of the item per element
    Directive       - a scalar schema carrying x-generator-opt
    None            - a scalar schema with nothing to place
After placement, slots may also hold ValueGenerator instances.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from .directives import DIRECTIVE_KEYWORD, Directive, parse_directive
from .models import DirectiveParseError


@dataclass
class ObjectScaffold:
    """Scaffold for an object schema."""
    properties: Dict[str, Any] = field(default_factory=dict)

    # Properties that are pure declarations and must not appear in output
    omitted: Set[str] = field(default_factory=set)


@dataclass
class ArrayScaffold:
    """Scaffold for an array schema with a fixed number of elements."""
    elements: List[Any] = field(default_factory=list)
    directive: Optional[Directive] = None


def schema_kind(schema: Any) -> Optional[str]:
    """Classify a schema as 'object', 'array', or its scalar type."""
    if not isinstance(schema, dict):
        return None
    declared = schema.get("type")
    if isinstance(declared, list):
        declared = next((t for t in declared if t != "null"), None)
    if declared is not None:
        return declared
    if "properties" in schema:
        return "object"
    if "items" in schema:
        return "array"
    return None


def build_scaffold(schema: Dict[str, Any]) -> Any:
    """
    Build the annotation scaffold for a schema.

    Args:
        schema: JSON Schema fragment

    Returns:
        An ObjectScaffold, ArrayScaffold, Directive or None

    Raises:
        DirectiveParseError: On an array without a size directive or an unknown directive
    """
    directive = parse_directive(schema.get(DIRECTIVE_KEYWORD)) if isinstance(schema, dict) else None
    kind = schema_kind(schema)

    if kind == "object":
        properties = schema.get("properties") or {}
        return ObjectScaffold(
            properties={name: build_scaffold(child) for name, child in properties.items()}
        )

    if kind == "array":
        size = directive.size if directive else None
        if size is None:
            raise DirectiveParseError("Encountered array property with unspecified size.")
        if size < 0:
            raise DirectiveParseError(f"Array size must not be negative, got {size}")
        items = schema.get("items")
        item = build_scaffold(items if isinstance(items, dict) else {})
        return ArrayScaffold(
            elements=[copy.deepcopy(item) for _ in range(size)],
            directive=directive,
        )

    return directive
