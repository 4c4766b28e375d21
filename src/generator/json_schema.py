"""
Module 6: Generation Orchestrator

Entry points for producing example payloads from JSON Schemas:

    generate         - full fake data, honoring x-generator-opt directives
    generate_static  - structural sample within a complexity budget

Both return a Result and never raise.
"""

import copy
import logging
import random
from typing import Any, Dict, Optional, Union

from .assignment import assign_static_values
from .faker_engine import BUNDLE_KEY, FakeDataEngine
from .models import (
    FakeDataError,
    GeneratorError,
    HttpOperation,
    Result,
    SchemaTooComplexGeneratorError,
)
from .options import FakerOptions
from .placement import iter_generators, place_generators
from .sampler import DEFAULT_TICKS, SchemaSizeExceededError, sample
from .scaffold import build_scaffold
from .sorting import sort_alphabetically
from .write_only import strip_write_only_properties

logger = logging.getLogger(__name__)


def generate(
    source: Dict[str, Any],
    bundle: Any = None,
    options: Optional[FakerOptions] = None,
    rng: Optional[random.Random] = None,
) -> Result:
    """
    Generate a fake value for a schema.

    Args:
        source: JSON Schema, possibly carrying x-generator-opt directives
        bundle: Reference resolution context merged into the schema as __bundled__
        options: Engine options (a fresh mocking preset when omitted)
        rng: Random source shared by placement and the engine

    Returns:
        Result holding the key-sorted value, or the error that stopped generation
    """
    options = options if options is not None else FakerOptions.mocking()
    rng = rng or random.Random(options.seed)

    logger.debug(f"Generating with options {options.to_dict()}")

    try:
        scaffold = place_generators(build_scaffold(source), rng=rng)
        logger.debug(f"Placed {len(list(iter_generators(scaffold)))} generator slots")
        stripped = strip_write_only_properties(source)
    except GeneratorError as e:
        logger.error(f"Generator directives rejected: {e}")
        return Result.failure(e)
    except Exception as e:
        return Result.failure(_malformed(e))

    if stripped is None:
        return Result.failure(GeneratorError("Cannot strip writeOnly properties"))

    document = {**copy.deepcopy(stripped), BUNDLE_KEY: bundle}
    engine = FakeDataEngine(options, rng=rng)

    try:
        assigned = assign_static_values(scaffold, document, engine)
        if assigned:
            logger.debug(f"Assigned {assigned} static values")
        value = engine.generate(document, overrides=scaffold)
    except GeneratorError as e:
        logger.error(f"Fake data generation failed: {e}")
        return Result.failure(e)
    except Exception as e:
        logger.error(f"Fake data generation failed: {e}")
        error = FakeDataError(str(e))
        error.__cause__ = e
        return Result.failure(error)

    try:
        return Result.success(sort_alphabetically(value))
    except Exception as e:
        return Result.failure(_malformed(e))


def _malformed(cause: Exception) -> GeneratorError:
    logger.error(f"Malformed schema: {cause}")
    error = GeneratorError(f"Malformed schema: {cause}")
    error.__cause__ = cause
    return error


def generate_static(
    operation: Union[HttpOperation, Dict[str, Any]],
    source: Dict[str, Any],
    bundle: Any = None,
    ticks: int = DEFAULT_TICKS,
) -> Result:
    """
    Sample a representative value for a schema without faking data.

    Args:
        operation: Operation the schema belongs to, named in complexity errors
        source: JSON Schema
        bundle: Fallback document for reference resolution
        ticks: Complexity budget handed to the sampler

    Returns:
        Result holding the sample, or SchemaTooComplexGeneratorError when the
        budget runs out, or the sampler's own error otherwise
    """
    if isinstance(operation, dict):
        operation = HttpOperation.from_dict(operation)

    try:
        return Result.success(sample(source, ticks=ticks, spec=bundle))
    except SchemaSizeExceededError as e:
        error = SchemaTooComplexGeneratorError(operation, e)
        error.__cause__ = e
        logger.warning(str(error))
        return Result.failure(error)
    except Exception as e:
        logger.error(f"Sampling failed for {operation.method.upper()} {operation.path}: {e}")
        return Result.failure(e)


__all__ = ["generate", "generate_static", "sort_alphabetically"]
