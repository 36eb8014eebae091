"""Token types and token representation for config source text."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class RVConfigTokenType(Enum):
    """Token types for config source text."""
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"
    MACRO_CALL = "MACRO_CALL"
    DIRECTIVE = "DIRECTIVE"
    LBRACE = "{"
    RBRACE = "}"
    SEMICOLON = ";"
    COLON = ":"
    COMMA = ","
    EQUALS = "="
    PLUS_EQUALS = "+="
    ARRAY_MARKER = "[]"


@dataclass(frozen=True)
class RVConfigToken:
    """
    Represents a single token in config source text.

    Tokens produced by macro expansion remember the raw macro text they replaced in
    `expanded_from`.  If the macro could not be resolved, `unresolved` is set.
    """
    type: RVConfigTokenType
    value: Any
    position: int
    length: int = 1
    line: int = 1  # Line number (1-indexed)
    column: int = 1  # Column number (1-indexed)
    expanded_from: str | None = None
    unresolved: bool = False

    def __repr__(self) -> str:
        return f"RVConfigToken({self.type.name}, {self.value!r}, line={self.line}, col={self.column})"
