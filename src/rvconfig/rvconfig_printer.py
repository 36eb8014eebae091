"""Render resolved property tables back to config text."""

from typing import List

from rvconfig.rvconfig_ast import leaf_name
from rvconfig.rvconfig_property_table import RVConfigPropertyTable
from rvconfig.rvconfig_value import (
    RVConfigArray, RVConfigNumber, RVConfigString, RVConfigUnresolved, RVConfigValue
)


class RVConfigPrinter:
    """
    Formats a resolved table as a flattened class definition.

    The output has no base class: every inherited property is written out, so two tables
    that compare equal print identically.  Unresolved macros are written as the raw call.
    """

    def __init__(self, indent: int = 4) -> None:
        self.indent = indent

    def format_table(self, table: RVConfigPropertyTable) -> str:
        """
        Format a table and its nested classes.

        Args:
            table: The table to format

        Returns:
            Config text, ending in a newline
        """
        lines: List[str] = []
        self._format_class(leaf_name(table.qualified_name), table, 0, lines)
        return "\n".join(lines) + "\n"

    def _format_class(self, name: str, table: RVConfigPropertyTable, depth: int, lines: List[str]) -> None:
        pad = " " * (self.indent * depth)
        if table.is_empty():
            lines.append(f"{pad}class {name} {{}};")
            return

        lines.append(f"{pad}class {name} {{")
        inner = " " * (self.indent * (depth + 1))
        for prop_name, value in table.items():
            marker = "[]" if isinstance(value, RVConfigArray) else ""
            lines.append(f"{inner}{prop_name}{marker} = {self.format_value(value)};")

        for nested_name in table.nested_names():
            nested = table.nested(nested_name)
            assert nested is not None, "Nested names must map to tables"
            self._format_class(nested_name, nested, depth + 1, lines)

        lines.append(f"{pad}}};")

    def format_value(self, value: RVConfigValue) -> str:
        """Format a single value the way it would be written in a source."""
        if isinstance(value, RVConfigNumber):
            number = value.value
            if number.is_integer():
                return str(int(number))

            return repr(number)

        if isinstance(value, RVConfigString):
            escaped = value.value.replace('"', '""')
            return f'"{escaped}"'

        if isinstance(value, RVConfigUnresolved):
            return value.raw

        if isinstance(value, RVConfigArray):
            return "{" + ", ".join(self.format_value(item) for item in value.items) + "}"

        raise TypeError(f"Cannot format value of type {value.type_name()}")
