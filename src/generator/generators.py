"""
Module 5: Generator Instances

Stateful value producers placed into a scaffold. One instance may sit in
several slots at once; every slot observes the same state.
"""

import random
from abc import ABC, abstractmethod
from typing import Any, Optional, Union

from .models import GeneratorError

Number = Union[int, float]


class ValueGenerator(ABC):
    """A value producer read once per output position."""

    @abstractmethod
    def read(self) -> Any:
        """Produce the next value."""
        pass


class StaticStringGenerator(ValueGenerator):
    """Holds a value assigned after placement and returns it on every read."""

    def __init__(self):
        self._value: Any = None
        self.assigned = False

    def assign(self, value: Any) -> None:
        self._value = value
        self.assigned = True

    def read(self) -> Any:
        if not self.assigned:
            raise GeneratorError("Static value read before it was assigned")
        return self._value

    def __repr__(self) -> str:
        if not self.assigned:
            return "StaticStringGenerator(<unassigned>)"
        return f"StaticStringGenerator({self._value!r})"


class IncrementalIntGenerator(ValueGenerator):
    """Returns the counter, then increments it."""

    def __init__(self, counter: int = 0):
        self.counter = counter

    def read(self) -> int:
        value = self.counter
        self.counter += 1
        return value

    def __repr__(self) -> str:
        return f"IncrementalIntGenerator(counter={self.counter})"


class SumToNGenerator(ValueGenerator):
    """
    Draws values from a shared budget.

    Each read takes a uniform draw in [0, remaining] and subtracts it. Reads
    drain the budget toward zero; K reads are not forced to sum to exactly n.
    """

    def __init__(self, n: Number, rng: Optional[random.Random] = None):
        self.n = n
        self.remaining = n
        self.rng = rng or random.Random()

    @classmethod
    def from_holder(
        cls,
        holder: "ValueHolderGenerator",
        rng: Optional[random.Random] = None,
    ) -> "SumToNGenerator":
        """Seed the budget from a value holder."""
        return cls(holder.read(), rng=rng)

    def _rand_int(self, maximum: Number) -> Number:
        # Rounding can overshoot a fractional budget
        return min(round(self.rng.random() * maximum), maximum)

    def read(self) -> Number:
        drawn = self._rand_int(self.remaining)
        self.remaining -= drawn
        return drawn

    def __repr__(self) -> str:
        return f"SumToNGenerator(n={self.n}, remaining={self.remaining})"


class ValueHolderGenerator(ValueGenerator):
    """Holds a fixed number used to seed a SumToNGenerator."""

    def __init__(self, value: Number):
        self.value = value

    def read(self) -> Number:
        return self.value

    def __repr__(self) -> str:
        return f"ValueHolderGenerator({self.value!r})"
