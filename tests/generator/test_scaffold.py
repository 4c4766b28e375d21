"""
Tests for scaffold construction.
"""

import random

import pytest

from src.generator.directives import Directive, DirectiveKind
from src.generator.models import DirectiveParseError
from src.generator.scaffold import ArrayScaffold, ObjectScaffold, build_scaffold, schema_kind


def _random_schema(rng: random.Random, depth: int) -> dict:
    """Random object/array/scalar tree where every array carries a size."""
    choice = rng.choice(["object", "array", "scalar"]) if depth > 0 else "scalar"
    if choice == "object":
        return {
            "type": "object",
            "properties": {
                f"p{i}": _random_schema(rng, depth - 1) for i in range(rng.randint(0, 3))
            },
        }
    if choice == "array":
        return {
            "type": "array",
            "x-generator-opt": f"sum {rng.randint(0, 3)}",
            "items": _random_schema(rng, depth - 1),
        }
    schema = {"type": rng.choice(["string", "integer", "boolean"])}
    if rng.random() < 0.3:
        schema["x-generator-opt"] = "const"
    return schema


def _same_shape(schema: dict, scaffold) -> bool:
    kind = schema_kind(schema)
    if kind == "object":
        return isinstance(scaffold, ObjectScaffold) and all(
            _same_shape(child, scaffold.properties[name])
            for name, child in schema["properties"].items()
        )
    if kind == "array":
        size = int(schema["x-generator-opt"].split()[1])
        return (
            isinstance(scaffold, ArrayScaffold)
            and len(scaffold.elements) == size
            and all(_same_shape(schema["items"], e) for e in scaffold.elements)
        )
    return scaffold is None or isinstance(scaffold, Directive)


class TestObjects:
    """Object schemas mirror their properties."""

    def test_object_mirrors_properties(self):
        scaffold = build_scaffold({
            "type": "object",
            "properties": {
                "a": {"type": "string", "x-generator-opt": "const"},
                "b": {"type": "integer"},
            },
        })
        assert isinstance(scaffold, ObjectScaffold)
        assert set(scaffold.properties) == {"a", "b"}
        assert scaffold.properties["a"].kind == DirectiveKind.CONST
        assert scaffold.properties["b"] is None
        assert scaffold.omitted == set()

    def test_untyped_schema_with_properties_is_an_object(self):
        scaffold = build_scaffold({"properties": {"a": {"type": "string"}}})
        assert isinstance(scaffold, ObjectScaffold)

    def test_scalar_leaves(self):
        assert build_scaffold({"type": "string"}) is None
        leaf = build_scaffold({"type": "integer", "x-generator-opt": "incremental"})
        assert leaf.kind == DirectiveKind.INCREMENTAL


class TestArrays:
    """Array schemas need an explicit size."""

    def test_array_is_replicated_to_size(self):
        scaffold = build_scaffold({
            "type": "array",
            "x-generator-opt": "sum 3",
            "items": {
                "type": "object",
                "properties": {"id": {"type": "integer", "x-generator-opt": "incremental"}},
            },
        })
        assert isinstance(scaffold, ArrayScaffold)
        assert len(scaffold.elements) == 3
        assert scaffold.directive.size == 3

    def test_elements_are_independent_copies(self):
        scaffold = build_scaffold({
            "type": "array",
            "x-generator-opt": "sum 2",
            "items": {"type": "object", "properties": {"x": {"type": "string"}}},
        })
        first, second = scaffold.elements
        assert first == second
        assert first is not second

    def test_zero_size_array(self):
        scaffold = build_scaffold({
            "type": "array",
            "x-generator-opt": "sum 0",
            "items": {"type": "string"},
        })
        assert scaffold.elements == []

    def test_array_without_directive_fails(self):
        with pytest.raises(DirectiveParseError, match="unspecified size"):
            build_scaffold({"type": "array", "items": {"type": "string"}})

    def test_array_with_sizeless_directive_fails(self):
        with pytest.raises(DirectiveParseError, match="unspecified size"):
            build_scaffold({
                "type": "array",
                "x-generator-opt": "incremental",
                "items": {"type": "string"},
            })

    def test_nested_array_without_size_fails(self):
        schema = {
            "type": "object",
            "properties": {"tags": {"type": "array", "items": {"type": "string"}}},
        }
        with pytest.raises(DirectiveParseError, match="unspecified size"):
            build_scaffold(schema)

    def test_negative_size_fails(self):
        with pytest.raises(DirectiveParseError, match="negative"):
            build_scaffold({"type": "array", "x-generator-opt": "sum -1", "items": {}})


def test_unknown_directive_fails_construction():
    with pytest.raises(DirectiveParseError, match="foo"):
        build_scaffold({
            "type": "object",
            "properties": {"a": {"type": "string", "x-generator-opt": "foo"}},
        })


@pytest.mark.parametrize("seed", range(25))
def test_sized_schemas_always_build_with_matching_shape(seed):
    rng = random.Random(seed)
    schema = _random_schema(rng, depth=4)
    scaffold = build_scaffold(schema)
    assert _same_shape(schema, scaffold)
