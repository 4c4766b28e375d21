"""
Structural sampler: a representative value for a schema without faking data.

Prefers values the schema already carries (const, examples, default, enum),
then falls back to fixed placeholders per type. Work is bounded by a tick
budget so adversarially recursive schemas fail fast instead of exploding.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from .faker_engine import merge_all_of, resolve_pointer

logger = logging.getLogger(__name__)

DEFAULT_TICKS = 2500

FORMAT_SAMPLES: Dict[str, str] = {
    "email": "user@example.com",
    "idn-email": "user@example.com",
    "hostname": "example.com",
    "idn-hostname": "example.com",
    "ipv4": "192.168.0.1",
    "ipv6": "2001:db8::ff00:42:8329",
    "uri": "http://example.com",
    "url": "http://example.com",
    "uri-reference": "../dictionary",
    "uuid": "095be615-a8ad-4c33-8e9c-c7612fbf6c9f",
    "date-time": "2019-08-24T14:15:22Z",
    "date": "2019-08-24",
    "time": "14:15:22Z",
    "password": "pa$$word",
    "byte": "U3dhZ2dlciByb2Nrcw==",
    "binary": "string",
}


class SchemaSizeExceededError(Exception):
    """Raised when sampling a schema needs more ticks than its budget."""

    def __init__(self, ticks: int):
        super().__init__(f"Schema size exceeded: sampling needed more than {ticks} ticks")
        self.ticks = ticks


class Sampler:
    """Samples one schema document within a tick budget."""

    def __init__(self, ticks: int = DEFAULT_TICKS, spec: Any = None):
        """
        Initialize the sampler.

        Args:
            ticks: Number of schema nodes that may be visited
            spec: Fallback document for references the schema cannot resolve itself
        """
        self.ticks = ticks
        self.remaining = ticks
        self.spec = spec
        self._root: Any = None

    def sample(self, schema: Any) -> Any:
        self._root = schema
        return self._sample(schema, ())

    def _tick(self) -> None:
        self.remaining -= 1
        if self.remaining < 0:
            raise SchemaSizeExceededError(self.ticks)

    def _resolve(self, ref: str) -> Any:
        target = resolve_pointer(self._root, ref)
        if target is None and self.spec is not None:
            target = resolve_pointer(self.spec, ref)
        return target

    def _sample(self, schema: Any, stack: Tuple[str, ...]) -> Any:
        self._tick()
        if not isinstance(schema, dict):
            return None

        if "$ref" in schema:
            ref = schema["$ref"]
            target = self._resolve(ref)
            if target is None:
                logger.warning(f"Reference not found while sampling: {ref}")
                return None
            if ref in stack:
                return _empty_value(target)
            return self._sample(target, stack + (ref,))

        if "allOf" in schema:
            members = []
            for member in schema["allOf"]:
                if isinstance(member, dict) and "$ref" in member:
                    member = self._resolve(member["$ref"]) or {}
                members.append(member)
            rest = {k: v for k, v in schema.items() if k != "allOf"}
            return self._sample(merge_all_of(members + [rest]), stack)

        for keyword in ("oneOf", "anyOf"):
            if schema.get(keyword):
                rest = {k: v for k, v in schema.items() if k != keyword}
                first = schema[keyword][0]
                if isinstance(first, dict) and "$ref" not in first:
                    return self._sample(merge_all_of([rest, first]), stack)
                return self._sample(first, stack)

        found, value = _declared_value(schema)
        if found:
            return value

        schema_type = schema.get("type")
        if isinstance(schema_type, list):
            schema_type = next((t for t in schema_type if t != "null"), "null")
        if schema_type is None:
            if "properties" in schema:
                schema_type = "object"
            elif "items" in schema:
                schema_type = "array"

        if schema_type == "object":
            return {
                name: self._sample(child, stack)
                for name, child in (schema.get("properties") or {}).items()
                if not (isinstance(child, dict) and child.get("writeOnly") is True)
            }
        if schema_type == "array":
            items = schema.get("items", {})
            if isinstance(items, list):
                return [self._sample(item, stack) for item in items]
            count = max(schema.get("minItems", 0), 1)
            return [self._sample(items, stack) for _ in range(count)]
        if schema_type == "string":
            value = FORMAT_SAMPLES.get(schema.get("format"), "string")
            min_length = schema.get("minLength", 0)
            if len(value) < min_length:
                value = (value * (min_length // len(value) + 1))[:min_length]
            return value
        if schema_type in ("integer", "number"):
            return _sample_number(schema, schema_type)
        if schema_type == "boolean":
            return True
        return None


def _declared_value(schema: Dict[str, Any]) -> Tuple[bool, Any]:
    """Return (found, value) for a value the schema spells out itself."""
    if "const" in schema:
        return True, schema["const"]
    if "example" in schema:
        return True, schema["example"]
    if schema.get("examples") and isinstance(schema["examples"], list):
        return True, schema["examples"][0]
    if "default" in schema:
        return True, schema["default"]
    if schema.get("enum"):
        return True, schema["enum"][0]
    return False, None


def _sample_number(schema: Dict[str, Any], schema_type: str) -> Any:
    step = 1 if schema_type == "integer" else 0.1
    minimum = schema.get("minimum")
    exclusive = schema.get("exclusiveMinimum")
    if isinstance(exclusive, (int, float)) and not isinstance(exclusive, bool):
        return exclusive + step
    if minimum is not None:
        return minimum + step if exclusive is True else minimum
    maximum = schema.get("maximum")
    if maximum is not None and maximum < 0:
        return maximum
    return 0


def _empty_value(schema: Any) -> Any:
    if not isinstance(schema, dict):
        return None
    if schema.get("type") == "array" or "items" in schema:
        return []
    if schema.get("type") == "object" or "properties" in schema:
        return {}
    return None


def sample(schema: Any, ticks: int = DEFAULT_TICKS, spec: Optional[Any] = None) -> Any:
    """
    Sample a schema within a tick budget.

    Args:
        schema: JSON Schema
        ticks: Maximum number of schema nodes to visit
        spec: Fallback document for reference resolution

    Returns:
        A representative value

    Raises:
        SchemaSizeExceededError: If the budget runs out
    """
    return Sampler(ticks=ticks, spec=spec).sample(schema)
