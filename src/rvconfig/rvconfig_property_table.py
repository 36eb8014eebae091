"""Resolved, inheritance-merged property tables."""

from typing import Any, Dict, Iterator, List, Tuple

from rvconfig.rvconfig_value import RVConfigValue


class RVConfigPropertyTable:
    """
    The effective properties of one class after inheritance has been applied.

    A table holds the class's properties in order, its nested class tables by name, and its
    lineage: the qualified names of its base chain, nearest base first.  Tables are built
    by the resolver and must be treated as immutable once returned.
    """

    def __init__(
        self,
        qualified_name: str,
        lineage: Tuple[str, ...] = (),
        properties: Dict[str, RVConfigValue] | None = None,
        nested: Dict[str, 'RVConfigPropertyTable'] | None = None
    ) -> None:
        """
        Initialize property table.

        Args:
            qualified_name: Qualified name of the class this table describes
            lineage: Qualified names of the base chain, nearest first
            properties: Property values by name, in order
            nested: Nested class tables by leaf name, in order
        """
        self.qualified_name = qualified_name
        self.lineage = lineage
        self._properties: Dict[str, RVConfigValue] = dict(properties) if properties else {}
        self._nested: Dict[str, RVConfigPropertyTable] = dict(nested) if nested else {}

    def items(self) -> List[Tuple[str, RVConfigValue]]:
        """Return the (name, value) pairs in order."""
        return list(self._properties.items())

    def names(self) -> List[str]:
        """Return the property names in order."""
        return list(self._properties)

    def get(self, name: str) -> RVConfigValue | None:
        """Return the value of a property, or None if the class has no such property."""
        return self._properties.get(name)

    def nested(self, name: str) -> 'RVConfigPropertyTable | None':
        """Return the table of a nested class, or None if there is no such nested class."""
        return self._nested.get(name)

    def nested_names(self) -> List[str]:
        """Return the nested class names in order."""
        return list(self._nested)

    def nested_tables(self) -> List['RVConfigPropertyTable']:
        """Return the nested class tables in order."""
        return list(self._nested.values())

    def inherits_from(self, qualified_name: str) -> bool:
        """Check if the given class appears anywhere in this table's base chain."""
        return qualified_name in self.lineage

    def is_empty(self) -> bool:
        """Check if the table has neither properties nor nested classes."""
        return not self._properties and not self._nested

    def to_python(self) -> Dict[str, Any]:
        """Convert to a plain dictionary; nested classes become nested dictionaries."""
        result: Dict[str, Any] = {name: value.to_python() for name, value in self._properties.items()}
        for name, table in self._nested.items():
            result[name] = table.to_python()

        return result

    def __contains__(self, name: object) -> bool:
        return name in self._properties

    def __iter__(self) -> Iterator[str]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RVConfigPropertyTable):
            return NotImplemented

        return (
            self.qualified_name == other.qualified_name
            and self.lineage == other.lineage
            and list(self._properties.items()) == list(other._properties.items())
            and list(self._nested.items()) == list(other._nested.items())
        )

    def __hash__(self) -> int:
        return hash((self.qualified_name, self.lineage))

    def __repr__(self) -> str:
        return (
            f"RVConfigPropertyTable({self.qualified_name}, lineage={list(self.lineage)}, "
            f"properties={self.names()}, nested={self.nested_names()})"
        )
