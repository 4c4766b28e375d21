"""
Data models and errors for example generation.

Every public entry point returns a Result instead of raising, so callers can
tell "schema too complex" apart from "genuinely broken" without try/except.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


class GeneratorError(Exception):
    """Base exception for example generation failures."""
    pass


class DirectiveParseError(GeneratorError):
    """Raised when a generator directive or the schema shape around it is invalid."""
    pass


class FakeDataError(GeneratorError):
    """Raised when the fake-data engine cannot produce a value for a schema."""
    pass


@dataclass
class HttpOperation:
    """The HTTP operation a schema belongs to."""
    method: str
    path: str
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HttpOperation":
        """Create from an OpenAPI-style operation dictionary."""
        return cls(
            method=data.get("method", "get"),
            path=data.get("path", "/"),
            id=data.get("id"),
        )


class SchemaTooComplexGeneratorError(GeneratorError):
    """Raised when a schema exceeds the sampler's complexity budget."""

    def __init__(self, operation: HttpOperation, cause: Exception):
        super().__init__(
            f"The operation {operation.method.upper()} {operation.path} "
            "references a JSON Schema that is too complex to generate."
        )
        self.operation = operation
        self.cause = cause


@dataclass
class Result:
    """Outcome of a generation call: either a value or an error."""
    value: Any = None
    error: Optional[Exception] = None

    @classmethod
    def success(cls, value: Any) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> "Result":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return the value, raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return self.value
