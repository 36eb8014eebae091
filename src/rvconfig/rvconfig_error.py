"""Exception classes for config parsing and inheritance resolution with detailed context."""

from typing import Any, List


class RVConfigError(Exception):
    """Base exception for config errors with detailed context information."""

    def __init__(
        self,
        message: str,
        context: str | None = None,
        expected: str | None = None,
        received: str | None = None,
        suggestion: str | None = None,
        source_id: str | None = None,
        line: int | None = None,
        column: int | None = None,
        source: str | None = None
    ):
        """
        Initialize detailed error.

        Args:
            message: Core error description
            context: Additional context information
            expected: What was expected
            received: What was actually received
            suggestion: Suggestion for fixing the error
            source_id: Identifier of the source the error was found in
            line: Line number (1-indexed)
            column: Column number (1-indexed)
            source: Source text for context display
        """
        self.message = message
        self.context = context
        self.expected = expected
        self.received = received
        self.suggestion = suggestion
        self.source_id = source_id
        self.line = line
        self.column = column
        self.source = source

        super().__init__(self._format_detailed_message())

    def _format_source_line(self, source: str, line_num: int, column: int) -> str:
        """
        Format the offending source line with a marker under the error column.

        Args:
            source: The source text
            line_num: Line number (1-indexed)
            column: Column number (1-indexed)

        Returns:
            Two-line string: the source line and a marker line
        """
        lines = source.split('\n')
        if not 1 <= line_num <= len(lines):
            return "(no context available)"

        prefix = f"  {line_num}: "
        return f"{prefix}{lines[line_num - 1]}\n{' ' * (len(prefix) + column - 1)}^"

    def _format_detailed_message(self) -> str:
        """Format the error message with all available details."""
        parts = [f"Error: {self.message}"]

        # Add position information if available
        if self.line is not None and self.column is not None:
            where = f"{self.source_id}: " if self.source_id else ""
            parts.append(f"Location: {where}Line {self.line}, Column {self.column}")

            if self.source is not None:
                parts.append(f"\nSource Context:\n{self._format_source_line(self.source, self.line, self.column)}")

        # Add received/expected information
        if self.received:
            parts.append(f"Received: {self.received}")

        if self.expected:
            parts.append(f"Expected: {self.expected}")

        # Add context
        if self.context:
            parts.append(f"Context: {self.context}")

        # Add suggestion
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")

        return "\n".join(parts)


class RVConfigLexError(RVConfigError):
    """Tokenization errors with detailed context."""


class RVConfigResolutionError(RVConfigError):
    """Inheritance resolution errors with detailed context."""


class RVConfigUnknownClassError(RVConfigResolutionError):
    """A class, or a base class it names, has no declaration anywhere in the session."""

    def __init__(
        self,
        name: str,
        referenced_by: str | None = None,
        **kwargs: Any
    ) -> None:
        """
        Initialize unknown class error.

        Args:
            name: Name of the class that could not be found
            referenced_by: Qualified name of the class naming it as a base, if any
            **kwargs: Additional error context
        """
        self.name = name
        self.referenced_by = referenced_by

        if referenced_by is None:
            context = "No source ingested into this session declares this class"

        else:
            context = f"Base class of '{referenced_by}'"

        super().__init__(
            message=f"Unknown class '{name}'",
            context=context,
            suggestion="Ingest the source defining it, or add a forward declaration (class Name;) for an engine class",
            **kwargs
        )


class RVConfigCycleError(RVConfigResolutionError):
    """Following base class references revisited a class already being resolved."""

    def __init__(
        self,
        chain: List[str],
        **kwargs: Any
    ) -> None:
        """
        Initialize cycle error.

        Args:
            chain: Qualified class names showing the cycle, first and last are the same class
            **kwargs: Additional error context
        """
        self.chain = chain
        chain_str = " -> ".join(chain)

        super().__init__(
            message="Inheritance cycle detected",
            context=f"Base chain:\n    {chain_str}",
            suggestion="Break the cycle by changing one of the base classes",
            **kwargs
        )


class RVConfigAmbiguousClassError(RVConfigResolutionError):
    """A bare class name matches classes in more than one scope."""

    def __init__(
        self,
        name: str,
        candidates: List[str],
        **kwargs: Any
    ) -> None:
        """
        Initialize ambiguous class error.

        Args:
            name: The bare name that was looked up
            candidates: Qualified names of every matching class
            **kwargs: Additional error context
        """
        self.name = name
        self.candidates = candidates
        matches = "\n    - ".join(candidates)

        super().__init__(
            message=f"Ambiguous class name '{name}'",
            context=f"Matches:\n    - {matches}",
            suggestion="Use the qualified name, for example 'CfgWeapons/ItemCore'",
            **kwargs
        )
