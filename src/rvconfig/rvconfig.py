"""Main RVConfig class - a resolution session over a set of config sources."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import logging
import threading
from typing import Dict, List, Sequence, Tuple

from rvconfig.rvconfig_ast import QUALIFIED_NAME_SEPARATOR, RVConfigClassNode
from rvconfig.rvconfig_diagnostic import RVConfigDiagnostic, RVConfigDiagnosticKind, RVConfigSeverity
from rvconfig.rvconfig_error import RVConfigAmbiguousClassError, RVConfigLexError, RVConfigUnknownClassError
from rvconfig.rvconfig_macro_expander import RVConfigMacroExpander, RVConfigMacroResolver
from rvconfig.rvconfig_parser import RVConfigParser
from rvconfig.rvconfig_patch import RVConfigPatch
from rvconfig.rvconfig_property_table import RVConfigPropertyTable
from rvconfig.rvconfig_resolver import RVConfigResolver
from rvconfig.rvconfig_symbol_table import RVConfigSymbolTable
from rvconfig.rvconfig_tokenizer import RVConfigTokenizer
from rvconfig.rvconfig_value import RVConfigValue


@dataclass
class RVConfigParsedSource:
    """The result of tokenizing, expanding and parsing one source, before it is merged."""
    source_id: str
    classes: List[RVConfigClassNode] = field(default_factory=list)
    enums: Dict[str, RVConfigValue] = field(default_factory=dict)
    diagnostics: List[RVConfigDiagnostic] = field(default_factory=list)


class RVConfig:
    """
    A resolution session: ingests config sources, then answers queries for the effective
    properties of any class declared in them.

    Problems found while reading a source never stop ingestion; they are returned as
    diagnostics and the rest of the source (or, for lexical errors, every other source) is
    still used.  Problems found while resolving a class are raised to the caller.

    Example usage:
        config = RVConfig(resolve_macro=lookup_stringtable)
        config.ingest("cba_main/config.cpp", cba_text)
        config.ingest("ace_medical/config.cpp", ace_text)

        table = config.resolve("CfgWeapons/ACE_fieldDressing")
        mass = table.nested("ItemInfo").get("mass")
    """

    def __init__(
        self,
        resolve_macro: RVConfigMacroResolver | None = None,
        max_workers: int = 4,
        report_unquoted_strings: bool = True
    ) -> None:
        """
        Initialize resolution session.

        Args:
            resolve_macro: Called as resolve_macro(name, args) for each macro call; returns the
                replacement text, or None if the macro is unknown
            max_workers: Maximum number of threads used to parse sources in `ingest_many`
            report_unquoted_strings: Whether bare-word values produce a warning
        """
        self.resolve_macro = resolve_macro
        self.max_workers = max_workers
        self.report_unquoted_strings = report_unquoted_strings

        self._symbols = RVConfigSymbolTable()
        self._resolver = RVConfigResolver(self._symbols)
        self._diagnostics: List[RVConfigDiagnostic] = []
        self._sources: List[str] = []
        self._ingest_lock = threading.Lock()
        self._logger = logging.getLogger("RVConfig")

    @property
    def diagnostics(self) -> List[RVConfigDiagnostic]:
        """Every diagnostic produced since the session was created or last reset."""
        return list(self._diagnostics)

    @property
    def sources(self) -> List[str]:
        """Identifiers of the ingested sources, in ingestion order."""
        return list(self._sources)

    def parse_source(self, source_id: str, text: str) -> RVConfigParsedSource:
        """
        Tokenize, expand and parse one source without touching the session's declarations.

        Safe to call from several threads at once.

        Args:
            source_id: Identifier of the source, used in diagnostics
            text: Source text

        Returns:
            The parsed class trees, enum constants and diagnostics
        """
        try:
            tokens = RVConfigTokenizer().tokenize(text, source_id)

        except RVConfigLexError as e:
            return RVConfigParsedSource(source_id, diagnostics=[RVConfigDiagnostic(
                RVConfigDiagnosticKind.LEX_ERROR,
                RVConfigSeverity.ERROR,
                e.message,
                source_id,
                e.line or 0,
                e.column or 0
            )])

        expander = RVConfigMacroExpander(self.resolve_macro, source_id)
        expanded = expander.expand(tokens)

        parser = RVConfigParser(expanded, source_id, self.report_unquoted_strings)
        classes, parse_diagnostics = parser.parse()

        return RVConfigParsedSource(source_id, classes, parser.enums, expander.diagnostics + parse_diagnostics)

    def ingest(self, source_id: str, text: str) -> List[RVConfigDiagnostic]:
        """
        Add one source's declarations to the session.

        Args:
            source_id: Identifier of the source, used in diagnostics
            text: Source text

        Returns:
            Diagnostics for this source
        """
        parsed = self.parse_source(source_id, text)
        with self._ingest_lock:
            return self._merge(parsed)

    def ingest_many(self, sources: Sequence[Tuple[str, str]]) -> Dict[str, List[RVConfigDiagnostic]]:
        """
        Add several sources, parsing them in parallel.

        Declarations are merged strictly in the order the sources are given, so the result is
        the same as calling `ingest` for each source in turn.

        Args:
            sources: (source_id, text) pairs

        Returns:
            Diagnostics for each source, keyed by source id
        """
        sources = list(sources)
        if not sources:
            return {}

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            parsed_sources = list(executor.map(lambda source: self.parse_source(*source), sources))

        results: Dict[str, List[RVConfigDiagnostic]] = {}
        with self._ingest_lock:
            for parsed in parsed_sources:
                results.setdefault(parsed.source_id, []).extend(self._merge(parsed))

        return results

    def _merge(self, parsed: RVConfigParsedSource) -> List[RVConfigDiagnostic]:
        """Merge a parsed source into the symbol table.  The caller holds the ingest lock."""
        diagnostics = list(parsed.diagnostics)
        diagnostics.extend(self._symbols.ingest(parsed.classes, parsed.source_id, parsed.enums))
        self._resolver.invalidate()

        self._sources.append(parsed.source_id)
        self._diagnostics.extend(diagnostics)

        class_count = sum(1 for top in parsed.classes for _node in top.walk())
        self._logger.info(
            "Ingested %s: %d classes, %d diagnostics", parsed.source_id, class_count, len(diagnostics)
        )

        for diagnostic in diagnostics:
            if diagnostic.is_error():
                self._logger.warning("%s", diagnostic)

            else:
                self._logger.debug("%s", diagnostic)

        return diagnostics

    def qualify_name(self, name: str) -> str:
        """
        Turn a class name given by a caller into a declared qualified name.

        A qualified name is used as is.  A bare name (with no '/') that is not itself a
        top-level class is accepted if exactly one declared class has that leaf name.

        Raises:
            RVConfigUnknownClassError: If no class matches
            RVConfigAmbiguousClassError: If a bare name matches classes in several scopes
        """
        if name in self._symbols:
            return name

        if QUALIFIED_NAME_SEPARATOR not in name:
            candidates = self._symbols.find_by_leaf(name)
            if len(candidates) == 1:
                return candidates[0]

            if candidates:
                raise RVConfigAmbiguousClassError(name, candidates)

        raise RVConfigUnknownClassError(name)

    def resolve(self, name: str) -> RVConfigPropertyTable:
        """
        Resolve a class to its effective property table.

        Args:
            name: Qualified class name (e.g. 'CfgWeapons/ItemCore'), or an unambiguous bare name

        Returns:
            The merged property table

        Raises:
            RVConfigUnknownClassError: If the class, or a base class it names, is not declared
            RVConfigAmbiguousClassError: If a bare name matches classes in several scopes
            RVConfigCycleError: If the base chain loops back on itself
        """
        return self._resolver.resolve(self.qualify_name(name))

    def reset(self) -> None:
        """Discard every ingested declaration and diagnostic."""
        with self._ingest_lock:
            self._symbols.clear()
            self._resolver.invalidate()
            self._diagnostics.clear()
            self._sources.clear()

        self._logger.debug("Session reset")

    def class_names(self) -> List[str]:
        """Return every declared qualified class name, in first-declaration order."""
        return self._symbols.qualified_names()

    def enum_constants(self) -> Dict[str, RVConfigValue]:
        """Return the enum constants declared across all ingested sources."""
        return self._symbols.enum_constants()

    def patches(self) -> List[RVConfigPatch]:
        """
        Return the addons declared under top-level `CfgPatches` classes.

        The `CfgPatches` name is matched without regard to case.

        Raises:
            RVConfigResolutionError: If a patch class cannot be resolved
        """
        patches: List[RVConfigPatch] = []
        for top in self._symbols.children(None):
            if top.lower() != "cfgpatches":
                continue

            for child in self._symbols.children(top):
                patches.append(RVConfigPatch.from_table(self._resolver.resolve(child)))

        return patches
