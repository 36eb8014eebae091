"""Class declaration tree built by the parser."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List

from rvconfig.rvconfig_value import RVConfigValue


QUALIFIED_NAME_SEPARATOR = "/"


def qualify(scope: str | None, name: str) -> str:
    """Join a scope's qualified name and a leaf class name."""
    if not scope:
        return name

    return f"{scope}{QUALIFIED_NAME_SEPARATOR}{name}"


def parent_scope(qualified_name: str) -> str | None:
    """Return the qualified name of the enclosing class, or None at the top level."""
    if QUALIFIED_NAME_SEPARATOR not in qualified_name:
        return None

    return qualified_name.rsplit(QUALIFIED_NAME_SEPARATOR, 1)[0]


def leaf_name(qualified_name: str) -> str:
    """Return the last component of a qualified name."""
    return qualified_name.rsplit(QUALIFIED_NAME_SEPARATOR, 1)[-1]


class RVConfigAssignKind(Enum):
    """How an assignment combines with an inherited value."""
    SET = "="
    APPEND = "+="


@dataclass(frozen=True)
class RVConfigSourcePosition:
    """Where a declaration was written."""
    source_id: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.source_id}:{self.line}:{self.column}"


@dataclass(frozen=True)
class RVConfigPropertyAssignment:
    """A `name = value;`, `name[] = {...};` or `name[] += {...};` member."""
    name: str
    value: RVConfigValue
    kind: RVConfigAssignKind
    is_array: bool
    position: RVConfigSourcePosition


@dataclass(frozen=True)
class RVConfigDeleteStatement:
    """A `delete name;` member, removing an inherited property or nested class."""
    name: str
    position: RVConfigSourcePosition


@dataclass
class RVConfigClassNode:
    """
    One class declaration as written in a source.

    A forward declaration (`class Name;` or `class Name: Base;`) has `is_forward` set and no
    members.  A full definition has a body, which may be empty.
    """
    name: str
    qualified_name: str
    base: str | None
    is_forward: bool
    position: RVConfigSourcePosition
    properties: Dict[str, RVConfigPropertyAssignment] = field(default_factory=dict)
    classes: List['RVConfigClassNode'] = field(default_factory=list)
    deletes: List[RVConfigDeleteStatement] = field(default_factory=list)

    @property
    def source_id(self) -> str:
        """Identifier of the source this declaration came from."""
        return self.position.source_id

    def walk(self) -> Iterator['RVConfigClassNode']:
        """Yield this node and every nested node, depth first, in source order."""
        yield self
        for child in self.classes:
            yield from child.walk()

    def __repr__(self) -> str:
        kind = "forward" if self.is_forward else "definition"
        base = f": {self.base}" if self.base else ""
        return f"RVConfigClassNode({self.qualified_name}{base}, {kind})"
