"""
Remove writeOnly properties from a schema before generating a response body.
"""

import copy
from typing import Any, Dict, Optional

COMBINATOR_KEYWORDS = ("allOf", "oneOf", "anyOf")


def _is_write_only(schema: Any) -> bool:
    return isinstance(schema, dict) and schema.get("writeOnly") is True


def _strip(schema: Dict[str, Any]) -> Dict[str, Any]:
    properties = schema.get("properties")
    if isinstance(properties, dict):
        removed = {name for name, child in properties.items() if _is_write_only(child)}
        schema["properties"] = {
            name: _strip(child) if isinstance(child, dict) else child
            for name, child in properties.items()
            if name not in removed
        }
        if removed and isinstance(schema.get("required"), list):
            schema["required"] = [name for name in schema["required"] if name not in removed]

    items = schema.get("items")
    if isinstance(items, dict):
        schema["items"] = _strip(items)
    elif isinstance(items, list):
        schema["items"] = [_strip(item) if isinstance(item, dict) else item for item in items]

    additional = schema.get("additionalProperties")
    if isinstance(additional, dict):
        schema["additionalProperties"] = _strip(additional)

    for keyword in COMBINATOR_KEYWORDS:
        members = schema.get(keyword)
        if isinstance(members, list):
            schema[keyword] = [_strip(m) if isinstance(m, dict) else m for m in members]

    return schema


def strip_write_only_properties(schema: Any) -> Optional[Dict[str, Any]]:
    """
    Return a copy of a schema without writeOnly properties.

    Args:
        schema: JSON Schema

    Returns:
        The stripped copy, or None when the schema is not an object schema
        or is itself writeOnly
    """
    if not isinstance(schema, dict) or _is_write_only(schema):
        return None
    return _strip(copy.deepcopy(schema))
