"""Inheritance resolver - merges base class chains into property tables."""

import logging
import threading
from typing import Dict, List, Set, Tuple

from rvconfig.rvconfig_ast import RVConfigAssignKind, leaf_name, parent_scope, qualify
from rvconfig.rvconfig_error import RVConfigCycleError, RVConfigUnknownClassError
from rvconfig.rvconfig_property_table import RVConfigPropertyTable
from rvconfig.rvconfig_symbol_table import RVConfigSymbolEntry, RVConfigSymbolTable
from rvconfig.rvconfig_value import RVConfigArray, RVConfigValue


class RVConfigResolver:
    """
    Computes the effective property table of a class on demand.

    Resolution walks the base chain, starting each class from a copy of its base's table,
    then applying its own deletes, assignments and nested classes.  Results are cached per
    qualified name until `invalidate()` is called, and each class is computed only once
    even when `resolve()` is called from several threads.

    A single re-entrant lock covers the whole resolution of a query, including the bases
    and nested classes it pulls in.  Concurrent queries are therefore serialized; once a
    table is cached, later queries for it only hold the lock for the cache lookup.

    Base lookup for a class `S/C` declared with base `B` tries, in order:
    - the sibling class `S/B` (unless `B` is `C` itself);
    - the nested class `B` that `S` inherits from its own base;
    - `B` in each enclosing scope, out to the top level.
    """

    def __init__(self, symbol_table: RVConfigSymbolTable) -> None:
        """
        Initialize resolver.

        Args:
            symbol_table: The declarations to resolve against
        """
        self._symbols = symbol_table
        self._cache: Dict[str, RVConfigPropertyTable] = {}
        self._lock = threading.RLock()
        self._logger = logging.getLogger("RVConfigResolver")

    def resolve(self, qualified_name: str) -> RVConfigPropertyTable:
        """
        Resolve a class to its effective property table.

        Args:
            qualified_name: Qualified name of the class

        Returns:
            The merged property table

        Raises:
            RVConfigUnknownClassError: If the class, or a base class it names, is not declared
            RVConfigCycleError: If the base chain loops back on itself
        """
        with self._lock:
            return self._resolve(qualified_name, [])

    def invalidate(self) -> None:
        """Discard every cached table."""
        with self._lock:
            if self._cache:
                self._logger.debug("Discarding %d cached tables", len(self._cache))

            self._cache.clear()

    def is_cached(self, qualified_name: str) -> bool:
        """Check if a class's table has already been computed."""
        with self._lock:
            return qualified_name in self._cache

    def _resolve(self, qualified_name: str, stack: List[str]) -> RVConfigPropertyTable:
        cached = self._cache.get(qualified_name)
        if cached is not None:
            return cached

        if qualified_name in stack:
            raise RVConfigCycleError(chain=stack[stack.index(qualified_name):] + [qualified_name])

        entry = self._symbols.get(qualified_name)
        if entry is None:
            raise RVConfigUnknownClassError(qualified_name)

        stack.append(qualified_name)
        try:
            table = self._build(entry, stack)

        finally:
            stack.pop()

        self._logger.debug("Resolved %s (lineage: %s)", qualified_name, " -> ".join(table.lineage) or "none")
        self._cache[qualified_name] = table
        return table

    def _build(self, entry: RVConfigSymbolEntry, stack: List[str]) -> RVConfigPropertyTable:
        """Build the table for one class whose name is already on the resolution stack."""
        properties: Dict[str, RVConfigValue] = {}
        nested: Dict[str, RVConfigPropertyTable] = {}
        lineage: Tuple[str, ...] = ()

        if entry.base:
            base_table = self._base_table(entry, stack)
            properties.update(base_table.items())
            for name in base_table.nested_names():
                inherited = base_table.nested(name)
                assert inherited is not None, "Nested names must map to tables"
                nested[name] = inherited

            lineage = (base_table.qualified_name,) + base_table.lineage

        # Nested classes removed by a later definition and not declared again after it
        deleted_classes: Set[str] = set()

        # Full definitions amend each other in ingestion order
        for definition in entry.definitions():
            for delete in definition.deletes:
                properties.pop(delete.name, None)
                nested.pop(delete.name, None)
                deleted_classes.add(delete.name)

            for child_node in definition.classes:
                deleted_classes.discard(child_node.name)

            for assignment in definition.properties.values():
                if assignment.kind == RVConfigAssignKind.SET:
                    properties[assignment.name] = assignment.value
                    continue

                addition = assignment.value
                if not isinstance(addition, RVConfigArray):
                    addition = RVConfigArray((addition,))

                existing = properties.get(assignment.name)
                if isinstance(existing, RVConfigArray):
                    properties[assignment.name] = existing.extend(addition)

                else:
                    properties[assignment.name] = addition

        # Nested classes declared here replace inherited ones of the same name
        for child in self._symbols.children(entry.qualified_name):
            if leaf_name(child) in deleted_classes:
                continue

            nested[leaf_name(child)] = self._resolve(child, stack)

        return RVConfigPropertyTable(entry.qualified_name, lineage, properties, nested)

    def _base_table(self, entry: RVConfigSymbolEntry, stack: List[str]) -> RVConfigPropertyTable:
        """
        Find and resolve the base class of an entry.

        Raises:
            RVConfigUnknownClassError: If no candidate class exists
            RVConfigCycleError: If the only candidate is the class itself
        """
        qualified_name = entry.qualified_name
        base = entry.base
        assert base, "Only entries with a base have a base table"

        scope = parent_scope(qualified_name)

        sibling = qualify(scope, base)
        if sibling != qualified_name and sibling in self._symbols:
            return self._resolve(sibling, stack)

        if scope is not None:
            # A nested class may name a nested class its enclosing class inherits
            scope_entry = self._symbols.get(scope)
            if scope_entry is not None and scope_entry.base:
                inherited = self._base_table(scope_entry, stack).nested(base)
                if inherited is not None:
                    return inherited

            candidate = self._symbols.lookup(parent_scope(scope), base, exclude=qualified_name)
            if candidate is not None:
                return self._resolve(candidate, stack)

        if base == leaf_name(qualified_name):
            raise RVConfigCycleError(chain=[qualified_name, qualified_name])

        raise RVConfigUnknownClassError(base, referenced_by=qualified_name)
