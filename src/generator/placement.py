"""
Module 4: Placement Engine

Second pass over a scaffold: turns directives into generator instances and
writes them into the tree, possibly into slots other than the directive's own.

Placement shares identity. An incremental directive inside an array puts one
counter into every element; a val directive puts one budget into every
sibling that refers to it.
"""

import logging
import random
from typing import Any, Callable, Dict, List, Optional

from .context import ContextLevel, Key
from .directives import Directive, DirectiveKind
from .generators import (
    IncrementalIntGenerator,
    StaticStringGenerator,
    SumToNGenerator,
    ValueGenerator,
    ValueHolderGenerator,
)
from .models import DirectiveParseError
from .scaffold import ArrayScaffold, ObjectScaffold

logger = logging.getLogger(__name__)

PlacementPolicy = Callable[[Directive, ContextLevel, random.Random], None]


def place_generators(scaffold: Any, rng: Optional[random.Random] = None) -> Any:
    """
    Replace directives in a scaffold with generator instances.

    The scaffold is modified in place. The root is returned because a scalar
    root schema can itself be replaced by a generator.

    Args:
        scaffold: Output of build_scaffold
        rng: Random source for sum budgets

    Returns:
        The scaffold root after placement

    Raises:
        DirectiveParseError: On a directive that cannot be placed
    """
    rng = rng or random.Random()
    root = ContextLevel(node=scaffold)
    _walk(root, rng)
    return root.node


def _walk(level: ContextLevel, rng: random.Random) -> None:
    node = level.node

    if isinstance(node, ArrayScaffold):
        # Read slots at visit time: earlier placements may have filled them
        for index in range(len(node.elements)):
            _walk(level.child(node.elements[index], index), rng)
    elif isinstance(node, ObjectScaffold):
        for name in list(node.properties):
            _walk(level.child(node.properties[name], name), rng)
    elif isinstance(node, Directive):
        logger.debug(f"Placing '{node}' at {level.path()} (depth {level.depth})")
        policy = PLACEMENT_POLICIES.get(node.kind)
        if policy is None:
            raise DirectiveParseError(f"Unhandled generator directive: {node.kind.value}")
        policy(node, level, rng)


def _write(level: ContextLevel, value: Any) -> None:
    """Write a value into the slot a context level was reached through."""
    parent = level.parent
    if parent is None:
        level.node = value
    elif isinstance(parent.node, ObjectScaffold):
        parent.node.properties[level.key] = value
    elif isinstance(parent.node, ArrayScaffold):
        parent.node.elements[level.key] = value
    level.node = value


def _relative_keys(level: ContextLevel, ancestor: ContextLevel) -> List[Key]:
    """Keys leading from `ancestor` down to `level`."""
    keys: List[Key] = []
    for step in level.lineage():
        if step is ancestor:
            break
        keys.append(step.key)
    return list(reversed(keys))


def _set_at(node: Any, keys: List[Key], value: Any) -> None:
    for key in keys[:-1]:
        node = node.properties[key] if isinstance(node, ObjectScaffold) else node.elements[key]
    if isinstance(node, ObjectScaffold):
        node.properties[keys[-1]] = value
    else:
        node.elements[keys[-1]] = value


def _slot_directive(slot: Any) -> Optional[Directive]:
    if isinstance(slot, Directive):
        return slot
    if isinstance(slot, ArrayScaffold):
        return slot.directive
    return None


def _is_scalar_slot(slot: Any) -> bool:
    return slot is None or isinstance(slot, (Directive, ValueGenerator))


def place_incremental(directive: Directive, level: ContextLevel, rng: random.Random) -> None:
    """Share one counter across every element of the enclosing array."""
    generator = IncrementalIntGenerator()
    array_level = level.enclosing_array()

    if array_level is None:
        logger.debug(f"Incremental at {level.path()} has no enclosing array, placing locally")
        _write(level, generator)
        return

    # Keys from the array down: [element index, property, ...]
    keys = _relative_keys(level, array_level)
    array = array_level.node
    for index in range(len(array.elements)):
        _set_at(array, [index] + keys[1:], generator)
    level.node = generator

    logger.debug(
        f"Placed shared counter at {level.path()} across {len(array.elements)} elements"
    )


def place_value_sum(directive: Directive, level: ContextLevel, rng: random.Random) -> None:
    """Distribute a total across sibling properties that refer to the target key."""
    scope = level.enclosing_object
    if scope is None:
        raise DirectiveParseError(
            f"Directive '{directive}' at {level.path()} must be an object property"
        )

    holder = ValueHolderGenerator(directive.total)
    generator = SumToNGenerator.from_holder(holder, rng=rng)
    target = directive.target_key

    matched = 0
    for name, slot in list(scope.properties.items()):
        if name == level.key:
            continue
        sibling = _slot_directive(slot)
        if sibling is None or sibling.reference_key != target:
            continue
        if isinstance(slot, ArrayScaffold):
            if not all(_is_scalar_slot(element) for element in slot.elements):
                raise DirectiveParseError(
                    f"Sum reference '{sibling}' on {name} needs scalar items "
                    f"to share the {target} budget"
                )
            slot.elements = [generator] * len(slot.elements)
        else:
            scope.properties[name] = generator
        matched += 1

    if matched == 0:
        logger.warning(f"Directive '{directive}' at {level.path()} matched no sibling properties")
    else:
        logger.debug(f"Placed sum budget {holder.value} at {level.path()} into {matched} siblings")

    # The declaring property is not an output field
    scope.properties[level.key] = None
    scope.omitted.add(level.key)
    level.node = None


def place_static(directive: Directive, level: ContextLevel, rng: random.Random) -> None:
    """Allocate a static value holder at the directive's own position."""
    _write(level, StaticStringGenerator())
    logger.debug(f"Placed static value at {level.path()}")


def place_sum_reference(directive: Directive, level: ContextLevel, rng: random.Random) -> None:
    """Sum references are filled in by the val directive that names them."""
    pass


PLACEMENT_POLICIES: Dict[DirectiveKind, PlacementPolicy] = {
    DirectiveKind.CONST: place_static,
    DirectiveKind.INCREMENTAL: place_incremental,
    DirectiveKind.SUM: place_sum_reference,
    DirectiveKind.VAL: place_value_sum,
}


def iter_generators(scaffold: Any):
    """Yield every generator slot in a scaffold (shared instances repeat)."""
    if isinstance(scaffold, ValueGenerator):
        yield scaffold
    elif isinstance(scaffold, ObjectScaffold):
        for slot in scaffold.properties.values():
            yield from iter_generators(slot)
    elif isinstance(scaffold, ArrayScaffold):
        for slot in scaffold.elements:
            yield from iter_generators(slot)
