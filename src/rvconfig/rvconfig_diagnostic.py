"""Non-fatal diagnostics collected while ingesting config sources."""

from dataclasses import dataclass
from enum import Enum


class RVConfigDiagnosticKind(Enum):
    """Kinds of diagnostic."""
    LEX_ERROR = "LexError"
    SYNTAX_ERROR = "SyntaxError"
    UNRESOLVED_MACRO = "UnresolvedMacro"
    DUPLICATE_PROPERTY = "DuplicateProperty"
    CONFLICTING_BASE = "ConflictingBase"
    UNQUOTED_STRING = "UnquotedString"
    ARRAY_MISMATCH = "ArrayMismatch"
    IGNORED_DIRECTIVE = "IgnoredDirective"


class RVConfigSeverity(Enum):
    """How serious a diagnostic is."""
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


@dataclass(frozen=True)
class RVConfigDiagnostic:
    """A problem found in a source that did not stop ingestion."""
    kind: RVConfigDiagnosticKind
    severity: RVConfigSeverity
    message: str
    source_id: str = ""
    line: int = 0
    column: int = 0

    def is_error(self) -> bool:
        """Check if this diagnostic is an error rather than a warning or note."""
        return self.severity == RVConfigSeverity.ERROR

    def __str__(self) -> str:
        location = f"{self.source_id}:{self.line}:{self.column}" if self.line else self.source_id
        return f"{location}: {self.severity.value} [{self.kind.value}] {self.message}"
