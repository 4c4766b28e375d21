"""
End-to-end tests for generate and generate_static.
"""

import logging
import random

import pytest
from jsonschema import Draft7Validator

from src.generator.json_schema import generate, generate_static
from src.generator.models import (
    DirectiveParseError,
    FakeDataError,
    GeneratorError,
    HttpOperation,
    SchemaTooComplexGeneratorError,
)
from src.generator.options import FakerOptions
from src.generator.sampler import SchemaSizeExceededError


def _wide_tree(depth: int, width: int = 8) -> dict:
    if depth == 0:
        return {"type": "string"}
    child = _wide_tree(depth - 1, width)
    return {"type": "object", "properties": {f"p{i}": child for i in range(width)}}


def _seeded(seed: int = 5) -> dict:
    return {"options": FakerOptions.mocking(seed=seed), "rng": random.Random(seed)}


class TestGenerate:
    """Full generation with directives."""

    def test_const_property_is_present(self):
        schema = {
            "type": "object",
            "properties": {"a": {"type": "string", "x-generator-opt": "const"}},
        }
        result = generate(schema, **_seeded())
        assert result.ok
        assert list(result.value) == ["a"]
        assert isinstance(result.value["a"], str)

    @pytest.mark.parametrize("seed", range(5))
    def test_output_validates_against_schema(self, seed):
        schema = {
            "type": "object",
            "required": ["name", "count", "orders"],
            "properties": {
                "name": {"type": "string", "minLength": 2, "maxLength": 10},
                "count": {"type": "integer", "minimum": 0, "maximum": 5},
                "price": {"type": "number", "minimum": 0, "maximum": 10},
                "orders": {
                    "type": "array",
                    "x-generator-opt": "sum 3",
                    "items": {
                        "type": "object",
                        "required": ["id", "tag"],
                        "properties": {
                            "id": {"type": "integer", "x-generator-opt": "incremental"},
                            "tag": {"type": "string", "enum": ["a", "b"]},
                        },
                    },
                },
            },
        }
        result = generate(schema, **_seeded(seed))
        assert result.ok
        assert list(Draft7Validator(schema).iter_errors(result.value)) == []

    def test_const_uses_declared_example(self):
        schema = {
            "type": "object",
            "properties": {"a": {"type": "string", "example": "fixed", "x-generator-opt": "const"}},
        }
        assert generate(schema, **_seeded()).value == {"a": "fixed"}

    @pytest.mark.parametrize("size", [1, 3, 7])
    def test_incremental_ids_follow_element_order(self, size):
        schema = {
            "type": "object",
            "properties": {
                "orders": {
                    "type": "array",
                    "x-generator-opt": f"sum {size}",
                    "items": {
                        "type": "object",
                        "properties": {
                            "note": {"type": "string"},
                            "id": {"type": "integer", "x-generator-opt": "incremental"},
                            "amount": {"type": "number"},
                        },
                    },
                },
            },
        }
        result = generate(schema, **_seeded())
        assert result.ok
        assert [order["id"] for order in result.value["orders"]] == list(range(size))

    @pytest.mark.parametrize("seed", range(10))
    def test_val_budget_is_distributed(self, seed):
        schema = {
            "type": "object",
            "properties": {
                "budget": {"type": "integer", "x-generator-opt": 'val "budget" 100'},
                "rent": {"type": "integer", "x-generator-opt": 'sum 0 "budget"'},
                "food": {"type": "integer", "x-generator-opt": 'sum 0 "budget"'},
                "fun": {"type": "integer", "x-generator-opt": 'sum 0 "budget"'},
            },
        }
        result = generate(schema, **_seeded(seed))
        assert result.ok
        value = result.value
        assert "budget" not in value
        parts = [value["rent"], value["food"], value["fun"]]
        assert all(0 <= part <= 100 for part in parts)
        assert sum(parts) <= 100

    def test_write_only_properties_are_stripped(self):
        schema = {
            "type": "object",
            "required": ["name", "password"],
            "properties": {
                "name": {"type": "string"},
                "password": {"type": "string", "writeOnly": True, "x-generator-opt": "const"},
            },
        }
        result = generate(schema, **_seeded())
        assert result.ok
        assert set(result.value) == {"name"}

    def test_output_keys_are_sorted(self):
        schema = {
            "type": "object",
            "properties": {
                "zeta": {"type": "integer"},
                "alpha": {
                    "type": "object",
                    "properties": {"y": {"type": "string"}, "b": {"type": "string"}},
                },
                "mid": {"type": "boolean"},
            },
        }
        value = generate(schema, **_seeded()).value
        assert list(value) == ["alpha", "mid", "zeta"]
        assert list(value["alpha"]) == ["b", "y"]

    def test_bundle_resolves_references(self):
        schema = {
            "type": "object",
            "properties": {"pet": {"$ref": "#/__bundled__/Pet"}},
        }
        bundle = {"Pet": {"type": "object", "properties": {"kind": {"const": "dog"}}}}
        assert generate(schema, bundle=bundle, **_seeded()).value == {"pet": {"kind": "dog"}}

    def test_seeded_runs_agree(self):
        schema = {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "tags": {"type": "array", "x-generator-opt": "sum 2", "items": {"type": "string"}},
            },
        }
        assert generate(schema, **_seeded(3)).value == generate(schema, **_seeded(3)).value

    def test_debug_log_reports_options_and_placed_slots(self, caplog):
        schema = {
            "type": "array",
            "x-generator-opt": "sum 3",
            "items": {"type": "integer", "x-generator-opt": "incremental"},
        }
        with caplog.at_level(logging.DEBUG, logger="src.generator"):
            assert generate(schema, **_seeded()).value == [0, 1, 2]
        assert "'seed': 5" in caplog.text
        assert "Placed 3 generator slots" in caplog.text
        assert "(depth 1)" in caplog.text

    def test_default_options_are_not_shared_between_calls(self):
        schema = {"type": "object", "properties": {"a": {"type": "integer"}}}
        assert generate(schema).ok
        assert generate(schema).ok


class TestGenerateFailures:
    """Failures come back as results, never as exceptions."""

    def test_array_without_size(self):
        result = generate({"type": "array", "items": {"type": "string"}})
        assert not result.ok
        assert isinstance(result.error, DirectiveParseError)
        assert "unspecified size" in str(result.error)

    def test_unknown_directive(self):
        result = generate({
            "type": "object",
            "properties": {"a": {"type": "string", "x-generator-opt": "foo"}},
        })
        assert isinstance(result.error, DirectiveParseError)
        assert "foo" in str(result.error)

    def test_write_only_root(self):
        result = generate({"type": "object", "writeOnly": True, "properties": {}})
        assert isinstance(result.error, GeneratorError)
        assert str(result.error) == "Cannot strip writeOnly properties"

    def test_engine_failure_is_captured(self):
        result = generate({"type": "galaxy"}, options=FakerOptions.defaults())
        assert isinstance(result.error, FakeDataError)

    def test_malformed_required_list_is_captured(self):
        result = generate({
            "type": "object",
            "required": [["a"]],
            "properties": {"a": {"type": "string", "writeOnly": True}},
        })
        assert not result.ok
        assert isinstance(result.error, GeneratorError)
        assert "Malformed schema" in str(result.error)
        assert isinstance(result.error.__cause__, TypeError)

    def test_sum_reference_on_object_items_fails(self):
        result = generate({
            "type": "object",
            "properties": {
                "parts": {
                    "type": "array",
                    "x-generator-opt": 'sum 2 "total"',
                    "items": {"type": "object", "properties": {"q": {"type": "integer"}}},
                },
                "total": {"type": "integer", "x-generator-opt": 'val "total" 50'},
            },
        }, **_seeded())
        assert not result.ok
        assert isinstance(result.error, DirectiveParseError)

    def test_unwrap_raises_stored_error(self):
        result = generate({"type": "array", "items": {}})
        with pytest.raises(DirectiveParseError):
            result.unwrap()


class TestGenerateStatic:
    """Structural sampling with a complexity budget."""

    def test_sample_success(self):
        operation = HttpOperation(method="get", path="/pets")
        result = generate_static(operation, {"type": "object", "properties": {"id": {"type": "integer"}}})
        assert result.ok
        assert result.value == {"id": 0}

    def test_too_complex_names_operation(self):
        operation = HttpOperation(method="get", path="/pets")
        result = generate_static(operation, _wide_tree(4))

        assert isinstance(result.error, SchemaTooComplexGeneratorError)
        assert "GET /pets" in str(result.error)
        assert result.error.operation is operation
        assert isinstance(result.error.cause, SchemaSizeExceededError)
        assert result.error.__cause__ is result.error.cause

    def test_mutually_recursive_definitions_exhaust_budget(self):
        definitions = {
            f"N{i}": {
                "type": "object",
                "properties": {f"p{j}": {"$ref": f"#/definitions/N{j}"} for j in range(8)},
            }
            for i in range(8)
        }
        schema = {"$ref": "#/definitions/N0", "definitions": definitions}

        result = generate_static(HttpOperation(method="get", path="/graph"), schema)

        assert isinstance(result.error, SchemaTooComplexGeneratorError)
        assert "GET /graph" in str(result.error)
        assert isinstance(result.error.cause, SchemaSizeExceededError)
        assert result.error.__cause__ is result.error.cause

    def test_operation_dictionary_accepted(self):
        result = generate_static({"method": "post", "path": "/orders"}, _wide_tree(2), ticks=10)
        assert "POST /orders" in str(result.error)

    def test_other_sampler_errors_pass_through(self):
        operation = HttpOperation(method="get", path="/pets")
        result = generate_static(operation, {"type": "array", "minItems": "two", "items": {}})
        assert not result.ok
        assert isinstance(result.error, TypeError)
        assert not isinstance(result.error, SchemaTooComplexGeneratorError)
