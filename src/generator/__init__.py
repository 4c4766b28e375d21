"""
Example payload generation for JSON-Schema-described APIs.

Two independent paths:
- generate: full fake data, with x-generator-opt directives placing shared,
  stateful generators (counters, sum budgets, static values)
- generate_static: bounded structural sampling
"""

from .models import (
    GeneratorError,
    DirectiveParseError,
    FakeDataError,
    SchemaTooComplexGeneratorError,
    HttpOperation,
    Result,
)
from .directives import DIRECTIVE_KEYWORD, Directive, DirectiveKind, parse_directive
from .scaffold import ArrayScaffold, ObjectScaffold, build_scaffold
from .context import ContextLevel
from .generators import (
    ValueGenerator,
    StaticStringGenerator,
    IncrementalIntGenerator,
    SumToNGenerator,
    ValueHolderGenerator,
)
from .placement import place_generators
from .options import FakerOptions
from .faker_engine import FakeDataEngine
from .sampler import SchemaSizeExceededError, sample
from .sorting import sort_alphabetically
from .write_only import strip_write_only_properties
from .json_schema import generate, generate_static

__all__ = [
    # Errors and results
    "GeneratorError",
    "DirectiveParseError",
    "FakeDataError",
    "SchemaTooComplexGeneratorError",
    "SchemaSizeExceededError",
    "HttpOperation",
    "Result",
    # Directives and placement
    "DIRECTIVE_KEYWORD",
    "Directive",
    "DirectiveKind",
    "parse_directive",
    "ArrayScaffold",
    "ObjectScaffold",
    "build_scaffold",
    "ContextLevel",
    "place_generators",
    # Generators
    "ValueGenerator",
    "StaticStringGenerator",
    "IncrementalIntGenerator",
    "SumToNGenerator",
    "ValueHolderGenerator",
    # Collaborators
    "FakerOptions",
    "FakeDataEngine",
    "sample",
    "sort_alphabetically",
    "strip_write_only_properties",
    # Entry points
    "generate",
    "generate_static",
]
