"""
Assign values to static generators after placement.

A const directive only allocates a StaticStringGenerator; the value comes
from the schema it sits on, or from the fake-data engine when the schema
spells out nothing.
"""

import logging
from typing import Any, Dict

from .faker_engine import FakeDataEngine
from .generators import StaticStringGenerator
from .scaffold import ArrayScaffold, ObjectScaffold

logger = logging.getLogger(__name__)

_MISSING = object()


def static_value_for(schema: Any) -> Any:
    """Return the value a schema declares for itself, or _MISSING."""
    if not isinstance(schema, dict):
        return _MISSING
    if "const" in schema:
        return schema["const"]
    if "default" in schema:
        return schema["default"]
    if schema.get("examples") and isinstance(schema["examples"], list):
        return schema["examples"][0]
    if "example" in schema:
        return schema["example"]
    if schema.get("enum"):
        return schema["enum"][0]
    return _MISSING


def assign_static_values(
    scaffold: Any,
    schema: Any,
    engine: FakeDataEngine,
    root: Any = None,
) -> int:
    """
    Give every unassigned static generator in a scaffold its value.

    Args:
        scaffold: Placed scaffold
        schema: Schema the scaffold mirrors
        engine: Engine used when the schema declares no value
        root: Document for reference resolution (defaults to schema)

    Returns:
        Number of generators assigned
    """
    root = schema if root is None else root

    if isinstance(scaffold, StaticStringGenerator):
        if scaffold.assigned:
            return 0
        value = static_value_for(schema)
        if value is _MISSING:
            logger.debug("Static value not declared by schema, faking one")
            value = engine.generate(schema, root=root)
        scaffold.assign(value)
        return 1

    if not isinstance(schema, dict):
        return 0

    assigned = 0
    if isinstance(scaffold, ObjectScaffold):
        properties: Dict[str, Any] = schema.get("properties") or {}
        for name, slot in scaffold.properties.items():
            # Properties stripped from the schema are never generated
            if name in properties:
                assigned += assign_static_values(slot, properties[name], engine, root)
    elif isinstance(scaffold, ArrayScaffold):
        items = schema.get("items") or {}
        for slot in scaffold.elements:
            assigned += assign_static_values(slot, items, engine, root)

    return assigned
