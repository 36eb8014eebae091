"""Symbol Table for config class declarations.

The symbol table collects every class declaration seen in a resolution session, keyed by
qualified name, so that the resolver can find base classes declared in other sources.  A
class may be forward-declared in one source and defined in another, or defined more than
once; every occurrence is kept in ingestion order.
"""

from dataclasses import dataclass, field
import logging
from typing import Dict, List

from rvconfig.rvconfig_ast import RVConfigClassNode, RVConfigSourcePosition, leaf_name, parent_scope, qualify
from rvconfig.rvconfig_diagnostic import RVConfigDiagnostic, RVConfigDiagnosticKind, RVConfigSeverity
from rvconfig.rvconfig_value import RVConfigValue


@dataclass
class RVConfigSymbolEntry:
    """All declarations of one qualified class name."""
    qualified_name: str
    declarations: List[RVConfigClassNode] = field(default_factory=list)
    base: str | None = None  # First non-empty base seen
    base_declared_at: RVConfigSourcePosition | None = None

    @property
    def name(self) -> str:
        """Leaf name of the class."""
        return leaf_name(self.qualified_name)

    def definitions(self) -> List[RVConfigClassNode]:
        """Return the full definitions (declarations with a body) in ingestion order."""
        return [d for d in self.declarations if not d.is_forward]

    def is_defined(self) -> bool:
        """Check if any declaration supplied a body."""
        return any(not d.is_forward for d in self.declarations)

    def __repr__(self) -> str:
        base = f": {self.base}" if self.base else ""
        return f"RVConfigSymbolEntry({self.qualified_name}{base}, declarations={len(self.declarations)})"


class RVConfigSymbolTable:
    """
    Maps qualified class names to their declarations across all ingested sources.

    Top-level classes and the members of each class body are separate namespaces, so the
    table also keeps, per scope, the ordered names of the classes declared in it.

    Example usage:
        table = RVConfigSymbolTable()
        table.ingest(classes, "addons/main/config.cpp")

        entry = table.get("CfgWeapons/ItemCore")
        children = table.children("CfgWeapons")
    """

    def __init__(self) -> None:
        """Initialize an empty symbol table."""
        self._entries: Dict[str, RVConfigSymbolEntry] = {}
        self._children: Dict[str | None, List[str]] = {}
        self._by_leaf: Dict[str, List[str]] = {}
        self._enums: Dict[str, RVConfigValue] = {}
        self._logger = logging.getLogger("RVConfigSymbolTable")

    def ingest(
        self,
        classes: List[RVConfigClassNode],
        source_id: str = "",
        enums: Dict[str, RVConfigValue] | None = None
    ) -> List[RVConfigDiagnostic]:
        """
        Add the class trees parsed from one source.

        Args:
            classes: Top-level class nodes in source order
            source_id: Identifier of the source the nodes came from
            enums: Enum constants declared in the source

        Returns:
            Diagnostics for base class conflicts found while merging
        """
        diagnostics: List[RVConfigDiagnostic] = []
        count = 0

        for top in classes:
            for node in top.walk():
                self._add(node, diagnostics)
                count += 1

        if enums:
            self._enums.update(enums)

        self._logger.debug("Ingested %d class declarations from %s", count, source_id or "<unnamed>")
        return diagnostics

    def _add(self, node: RVConfigClassNode, diagnostics: List[RVConfigDiagnostic]) -> None:
        """Add one declaration, merging it with earlier declarations of the same name."""
        qualified_name = node.qualified_name
        entry = self._entries.get(qualified_name)
        if entry is None:
            entry = RVConfigSymbolEntry(qualified_name)
            self._entries[qualified_name] = entry
            self._children.setdefault(parent_scope(qualified_name), []).append(qualified_name)
            self._by_leaf.setdefault(node.name, []).append(qualified_name)

        entry.declarations.append(node)

        if not node.base:
            return

        if entry.base is None:
            entry.base = node.base
            entry.base_declared_at = node.position
            return

        if entry.base != node.base:
            diagnostics.append(RVConfigDiagnostic(
                RVConfigDiagnosticKind.CONFLICTING_BASE,
                RVConfigSeverity.ERROR,
                f"Class {qualified_name} declares base {node.base}, but base {entry.base} was already "
                f"declared at {entry.base_declared_at}; keeping {entry.base}",
                node.source_id,
                node.position.line,
                node.position.column
            ))

    def get(self, qualified_name: str) -> RVConfigSymbolEntry | None:
        """Look up the entry for a qualified name."""
        return self._entries.get(qualified_name)

    def children(self, scope: str | None) -> List[str]:
        """
        Return the qualified names of classes declared directly inside a scope.

        Args:
            scope: Qualified name of the enclosing class, or None for the top level

        Returns:
            Qualified names in first-declaration order
        """
        return list(self._children.get(scope, []))

    def lookup(self, scope: str | None, name: str, exclude: str | None = None) -> str | None:
        """
        Find the class a name refers to when written inside a scope.

        The scope itself is searched first, then each enclosing scope out to the top level.

        Args:
            scope: Qualified name of the scope to start in, or None for the top level
            name: Leaf class name to find
            exclude: Qualified name that must not be returned, such as the class naming `name`

        Returns:
            The qualified name of the nearest matching class, or None if there is none
        """
        while True:
            candidate = qualify(scope, name)
            if candidate != exclude and candidate in self._entries:
                return candidate

            if scope is None:
                return None

            scope = parent_scope(scope)

    def find_by_leaf(self, name: str) -> List[str]:
        """Return the qualified names of every class whose leaf name is `name`."""
        return list(self._by_leaf.get(name, []))

    def qualified_names(self) -> List[str]:
        """Return every qualified class name in first-declaration order."""
        return list(self._entries)

    def enum_constants(self) -> Dict[str, RVConfigValue]:
        """Return the enum constants declared across all ingested sources."""
        return dict(self._enums)

    def clear(self) -> None:
        """Remove every declaration."""
        self._entries.clear()
        self._children.clear()
        self._by_leaf.clear()
        self._enums.clear()

    def __contains__(self, qualified_name: object) -> bool:
        return qualified_name in self._entries

    def __len__(self) -> int:
        return len(self._entries)
