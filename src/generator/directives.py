"""
Module 1: Directive Parser

Parses the x-generator-opt extension keyword into a typed directive.

Grammar (space separated, positional):
    const
    incremental
    sum <childArraySize> ["<referenceKey>"]
    val "<targetKey>" <total>
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from .models import DirectiveParseError

DIRECTIVE_KEYWORD = "x-generator-opt"

QUOTE_CHARS = "\"'"


class DirectiveKind(Enum):
    """Closed set of generator directive kinds."""
    CONST = "const"
    INCREMENTAL = "incremental"
    SUM = "sum"
    VAL = "val"


def _strip_quotes(token: str) -> str:
    """Strip one leading and one trailing quote character."""
    if token[:1] in QUOTE_CHARS:
        token = token[1:]
    if token[-1:] in QUOTE_CHARS:
        token = token[:-1]
    return token


@dataclass
class Directive:
    """A parsed directive. Tokens keep the full sequence, kind included."""
    kind: DirectiveKind
    tokens: List[str] = field(default_factory=list)

    def _token(self, index: int) -> Optional[str]:
        if index < len(self.tokens):
            return self.tokens[index]
        return None

    @property
    def size(self) -> Optional[int]:
        """Array length carried by the second token, if it is an integer."""
        token = self._token(1)
        if token is None:
            return None
        try:
            return int(token)
        except ValueError:
            return None

    @property
    def target_key(self) -> Optional[str]:
        """Key named by a val directive (second token, unquoted)."""
        token = self._token(1)
        return _strip_quotes(token) if token is not None else None

    @property
    def reference_key(self) -> Optional[str]:
        """Key a directive refers back to (third token, unquoted)."""
        token = self._token(2)
        return _strip_quotes(token) if token is not None else None

    @property
    def total(self) -> Union[int, float]:
        """Numeric total of a val directive."""
        token = self._token(2)
        if token is None:
            raise DirectiveParseError(f"Directive '{self}' is missing its total")
        try:
            return int(token)
        except ValueError:
            pass
        try:
            return float(token)
        except ValueError:
            raise DirectiveParseError(
                f"Directive '{self}' has a non-numeric total: {token}"
            ) from None

    def __str__(self) -> str:
        return " ".join(self.tokens)


def parse_directive(raw: Optional[str]) -> Optional[Directive]:
    """
    Parse an extension keyword value.

    Args:
        raw: The raw x-generator-opt string, or None when the keyword is absent

    Returns:
        The parsed Directive, or None if there is no directive

    Raises:
        DirectiveParseError: If the first token is not a known directive kind
    """
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise DirectiveParseError(f"Directive must be a string, got {type(raw).__name__}")

    tokens = raw.split()
    if not tokens:
        return None

    try:
        kind = DirectiveKind(tokens[0])
    except ValueError:
        raise DirectiveParseError(f"Unknown generator directive: {tokens[0]}") from None

    return Directive(kind=kind, tokens=tokens)
