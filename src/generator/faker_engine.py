"""
FakeDataEngine: Synthesize schema-conformant values with Faker.

Walks a JSON Schema and fakes every leaf. When a placed scaffold is passed as
overrides, generator slots are read instead of faked, array scaffolds fix the
array length, and omitted properties are left out.
"""

import base64
import logging
import math
import random
from datetime import timezone
from typing import Any, Callable, Dict, List, Optional

from faker import Faker
from referencing import Registry
from referencing.exceptions import Unresolvable
from referencing.jsonschema import DRAFT202012

from .generators import ValueGenerator
from .models import FakeDataError
from .options import FakerOptions
from .scaffold import ArrayScaffold, ObjectScaffold

logger = logging.getLogger(__name__)

BUNDLE_KEY = "__bundled__"

DEFAULT_NUMBER_SPAN = 1000

FORMAT_PROVIDERS: Dict[str, Callable[[Faker], Any]] = {
    "email": lambda fake: fake.email(),
    "idn-email": lambda fake: fake.email(),
    "hostname": lambda fake: fake.hostname(),
    "idn-hostname": lambda fake: fake.hostname(),
    "ipv4": lambda fake: fake.ipv4(),
    "ipv6": lambda fake: fake.ipv6(),
    "uri": lambda fake: fake.uri(),
    "url": lambda fake: fake.url(),
    "iri": lambda fake: fake.uri(),
    "uri-reference": lambda fake: fake.uri_path(),
    "iri-reference": lambda fake: fake.uri_path(),
    "uuid": lambda fake: fake.uuid4(),
    "date-time": lambda fake: fake.date_time(tzinfo=timezone.utc).isoformat(),
    "date": lambda fake: fake.date(),
    "time": lambda fake: fake.time(),
    "password": lambda fake: fake.password(),
    "byte": lambda fake: base64.b64encode(fake.binary(length=12)).decode("ascii"),
    "binary": lambda fake: fake.pystr(),
    "int32": lambda fake: fake.pyint(),
    "int64": lambda fake: fake.pyint(),
}


def resolve_pointer(document: Any, ref: str) -> Any:
    """
    Resolve a local JSON reference ("#/a/b") against a document.

    Returns:
        The referenced node, or None when the reference is not local or missing
    """
    if not isinstance(ref, str) or not ref.startswith("#"):
        return None
    if not isinstance(document, (dict, bool)):
        return None
    resource = DRAFT202012.create_resource(document)
    resolver = Registry().with_resource(uri="", resource=resource).resolver()
    try:
        return resolver.lookup(ref).contents
    except (Unresolvable, LookupError, TypeError, ValueError) as e:
        logger.debug(f"Unresolvable reference {ref}: {e!r}")
        return None


def merge_all_of(schemas: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Combine allOf members: properties and required are unioned, other keys overwrite."""
    merged: Dict[str, Any] = {}
    for member in schemas:
        if not isinstance(member, dict):
            continue
        for key, value in member.items():
            if key == "properties":
                merged.setdefault("properties", {}).update(value)
            elif key == "required":
                merged["required"] = list(dict.fromkeys(merged.get("required", []) + list(value)))
            else:
                merged[key] = value
    return merged


class FakeDataEngine:
    """
    Produces fake values for JSON Schemas.

    One engine holds one Faker instance and one random source; seed the
    options to make output reproducible.
    """

    def __init__(
        self,
        options: Optional[FakerOptions] = None,
        faker: Optional[Faker] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the engine.

        Args:
            options: Option record (mocking preset if omitted)
            faker: Faker instance to draw values from
            rng: Random source for structural choices
        """
        self.options = options or FakerOptions.mocking()
        self.rng = rng or random.Random(self.options.seed)
        self.faker = faker or Faker()
        if self.options.seed is not None:
            self.faker.seed_instance(self.options.seed)
        self._root: Any = None

    def generate(self, schema: Any, overrides: Any = None, root: Any = None) -> Any:
        """
        Generate a value for a schema.

        Args:
            schema: The schema to fake
            overrides: Placed scaffold mirroring the schema
            root: Document local references resolve against (defaults to schema)

        Returns:
            The generated value

        Raises:
            FakeDataError: If the schema cannot be satisfied
        """
        self._root = schema if root is None else root
        return self._generate(schema, overrides, ref_depth=0)

    def _generate(self, schema: Any, slot: Any, ref_depth: int) -> Any:
        if isinstance(slot, ValueGenerator):
            return slot.read()

        if schema is False:
            raise FakeDataError("Cannot generate a value for the 'false' schema")
        if not isinstance(schema, dict):
            return self._fake_string({})

        if "$ref" in schema:
            return self._generate_ref(schema, slot, ref_depth)

        if "allOf" in schema:
            members = [self._deref(member) for member in schema["allOf"]]
            rest = {k: v for k, v in schema.items() if k != "allOf"}
            return self._generate(merge_all_of(members + [rest]), slot, ref_depth)

        for keyword in ("oneOf", "anyOf"):
            if schema.get(keyword):
                choice = self._deref(self.rng.choice(schema[keyword]))
                rest = {k: v for k, v in schema.items() if k != keyword}
                return self._generate(merge_all_of([rest, choice]), slot, ref_depth)

        if "const" in schema:
            return schema["const"]
        if schema.get("enum"):
            return self.rng.choice(schema["enum"])
        if self.options.use_examples_value:
            if schema.get("examples"):
                return self.rng.choice(schema["examples"])
            if "example" in schema:
                return schema["example"]
        if self.options.use_default_value and "default" in schema:
            return schema["default"]

        schema_type = self._pick_type(schema, slot)
        if schema_type == "object":
            return self._fake_object(schema, slot, ref_depth)
        if schema_type == "array":
            return self._fake_array(schema, slot, ref_depth)
        if schema_type == "string":
            return self._fake_string(schema)
        if schema_type == "integer":
            return self._fake_integer(schema)
        if schema_type == "number":
            return self._fake_number(schema)
        if schema_type == "boolean":
            return self.faker.pybool()
        if schema_type == "null":
            return None
        if schema_type is None:
            return self.faker.word()

        if self.options.fail_on_invalid_types:
            raise FakeDataError(f"Invalid type: {schema_type}")
        logger.warning(f"Invalid type '{schema_type}', using default product")
        return self.options.default_invalid_type_product

    def _deref(self, schema: Any) -> Any:
        if isinstance(schema, dict) and "$ref" in schema:
            target = resolve_pointer(self._root, schema["$ref"])
            if target is not None:
                return target
        return schema

    def _generate_ref(self, schema: Dict[str, Any], slot: Any, ref_depth: int) -> Any:
        ref = schema["$ref"]
        target = resolve_pointer(self._root, ref)
        if target is None:
            if self.options.ignore_missing_refs:
                logger.warning(f"Reference not found: {ref}")
                return None
            raise FakeDataError(f"Reference not found: {ref}")

        if ref_depth >= self.options.ref_depth_max:
            logger.debug(f"Reference depth {ref_depth} reached at {ref}, not expanding")
            return None

        siblings = {k: v for k, v in schema.items() if k != "$ref"}
        merged = {**target, **siblings} if isinstance(target, dict) else target
        return self._generate(merged, slot, ref_depth + 1)

    def _pick_type(self, schema: Dict[str, Any], slot: Any) -> Optional[str]:
        declared = schema.get("type")
        if isinstance(declared, list):
            if not declared:
                return None
            non_null = [t for t in declared if t != "null"]
            return self.rng.choice(non_null) if non_null else "null"
        if declared is not None:
            return declared
        if "properties" in schema or isinstance(slot, ObjectScaffold):
            return "object"
        if "items" in schema or isinstance(slot, ArrayScaffold):
            return "array"
        return None

    def _choose_properties(self, schema: Dict[str, Any], slot: Any, ref_depth: int) -> List[str]:
        properties = schema.get("properties") or {}
        required = set(schema.get("required") or [])
        names = [n for n in properties if n not in self.options.ignore_properties]

        if isinstance(slot, ObjectScaffold):
            names = [n for n in names if n not in slot.omitted]
            # Properties carrying generators are always produced
            required |= {n for n in names if slot.properties.get(n) is not None}

        optional = [n for n in names if n not in required]
        if self.options.required_only:
            chosen: List[str] = []
        elif self.options.always_fake_optionals or ref_depth < self.options.ref_depth_min:
            chosen = optional
        else:
            probability = self.options.optionals_probability
            if probability is None:
                count = self.rng.randint(0, len(optional))
            elif self.options.fixed_probabilities:
                count = round(probability * len(optional))
            else:
                count = sum(1 for _ in optional if self.rng.random() < probability)
            chosen = self.rng.sample(optional, count)

        keep = required | set(chosen)
        return [n for n in names if n in keep]

    def _fake_object(self, schema: Dict[str, Any], slot: Any, ref_depth: int) -> Dict[str, Any]:
        properties = schema.get("properties") or {}
        value: Dict[str, Any] = {}
        for name in self._choose_properties(schema, slot, ref_depth):
            child_slot = slot.properties.get(name) if isinstance(slot, ObjectScaffold) else None
            child = self._generate(properties[name], child_slot, ref_depth)
            if child is None and self.options.omit_nulls:
                continue
            value[name] = child

        for name in self.options.prune_properties:
            value.pop(name, None)
        return value

    def _fake_array(self, schema: Dict[str, Any], slot: Any, ref_depth: int) -> List[Any]:
        items = schema.get("items", {})

        if isinstance(slot, ArrayScaffold):
            slots: List[Any] = list(slot.elements)
        else:
            low = max(schema.get("minItems", 0), self.options.min_items)
            high = schema.get("maxItems")
            if self.options.max_items is not None:
                high = self.options.max_items if high is None else min(high, self.options.max_items)
            if high is None:
                high = low + self.options.array_length_cap
            slots = [None] * self.rng.randint(low, max(low, high))

        result = []
        for index, element_slot in enumerate(slots):
            if isinstance(items, list):
                item_schema = items[index] if index < len(items) else schema.get("additionalItems", {})
            else:
                item_schema = items
            result.append(self._generate(item_schema, element_slot, ref_depth))
        return result

    def _fake_string(self, schema: Dict[str, Any]) -> str:
        fmt = schema.get("format")
        if fmt:
            provider = FORMAT_PROVIDERS.get(fmt)
            if provider is not None:
                return provider(self.faker)
            if self.options.fail_on_invalid_format:
                raise FakeDataError(f"Unknown string format: {fmt}")
            logger.warning(f"Unknown string format '{fmt}', generating plain text")

        if "pattern" in schema:
            logger.debug(f"Pattern {schema['pattern']!r} is not enforced for fake strings")

        low = max(schema.get("minLength", 0), self.options.min_length)
        high = schema.get("maxLength")
        if self.options.max_length is not None:
            high = self.options.max_length if high is None else min(high, self.options.max_length)
        if high is None:
            high = max(low, self.options.string_length_cap)
        target = self.rng.randint(low, max(low, high))

        words: List[str] = []
        length = 0
        while True:
            word = self.faker.word()
            needed = len(word) + (1 if words else 0)
            if length + needed > target:
                break
            words.append(word)
            length += needed

        # Whole words only, topped up with letters to the exact length
        text = " ".join(words)
        return text + "".join(self.faker.random_letter() for _ in range(target - len(text)))

    def _bounds(self, schema: Dict[str, Any], step: float) -> Any:
        low = schema.get("minimum")
        high = schema.get("maximum")

        # Draft 4 uses booleans, later drafts carry the bound itself
        exclusive_low = schema.get("exclusiveMinimum")
        exclusive_high = schema.get("exclusiveMaximum")
        if exclusive_low is True and low is not None:
            low += step
        elif isinstance(exclusive_low, (int, float)) and not isinstance(exclusive_low, bool):
            low = exclusive_low + step
        if exclusive_high is True and high is not None:
            high -= step
        elif isinstance(exclusive_high, (int, float)) and not isinstance(exclusive_high, bool):
            high = exclusive_high - step

        if low is None and high is None:
            low, high = 0, DEFAULT_NUMBER_SPAN
        elif low is None:
            low = high - DEFAULT_NUMBER_SPAN
        elif high is None:
            high = low + DEFAULT_NUMBER_SPAN

        if low > high:
            raise FakeDataError(f"Empty numeric range [{low}, {high}]")
        return low, high

    def _fake_integer(self, schema: Dict[str, Any]) -> int:
        low, high = self._bounds(schema, step=1)
        low, high = math.ceil(low), math.floor(high)
        multiple = schema.get("multipleOf")
        if multiple:
            first, last = math.ceil(low / multiple), math.floor(high / multiple)
            if first > last:
                raise FakeDataError(f"No multiple of {multiple} in [{low}, {high}]")
            return int(self.rng.randint(first, last) * multiple)
        if low > high:
            raise FakeDataError(f"Empty integer range [{low}, {high}]")
        return self.faker.pyint(min_value=low, max_value=high)

    def _fake_number(self, schema: Dict[str, Any]) -> float:
        low, high = self._bounds(schema, step=1e-6)
        multiple = schema.get("multipleOf")
        if multiple:
            first, last = math.ceil(low / multiple), math.floor(high / multiple)
            if first > last:
                raise FakeDataError(f"No multiple of {multiple} in [{low}, {high}]")
            return self.rng.randint(first, last) * multiple
        return round(self.rng.uniform(low, high), 4)
