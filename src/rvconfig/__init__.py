"""RVConfig - class-inheritance resolver for Real Virtuality engine config files."""

# Main API
from rvconfig.rvconfig import RVConfig, RVConfigParsedSource
from rvconfig.rvconfig_patch import RVConfigPatch
from rvconfig.rvconfig_printer import RVConfigPrinter

# Exceptions and diagnostics
from rvconfig.rvconfig_error import (
    RVConfigError, RVConfigLexError, RVConfigResolutionError, RVConfigUnknownClassError, RVConfigCycleError,
    RVConfigAmbiguousClassError
)
from rvconfig.rvconfig_diagnostic import RVConfigDiagnostic, RVConfigDiagnosticKind, RVConfigSeverity

# Value types
from rvconfig.rvconfig_value import RVConfigValue, RVConfigNumber, RVConfigString, RVConfigArray, RVConfigUnresolved
from rvconfig.rvconfig_property_table import RVConfigPropertyTable

# Lower-level components (for advanced usage)
from rvconfig.rvconfig_token import RVConfigToken, RVConfigTokenType
from rvconfig.rvconfig_tokenizer import RVConfigTokenizer
from rvconfig.rvconfig_define import RVConfigDefine, RVConfigDirective, RVConfigDirectiveKind
from rvconfig.rvconfig_macro_expander import RVConfigMacroExpander, RVConfigMacroResolver, split_macro_call
from rvconfig.rvconfig_ast import (
    QUALIFIED_NAME_SEPARATOR, RVConfigAssignKind, RVConfigClassNode, RVConfigDeleteStatement,
    RVConfigPropertyAssignment, RVConfigSourcePosition
)
from rvconfig.rvconfig_parser import RVConfigParser
from rvconfig.rvconfig_symbol_table import RVConfigSymbolEntry, RVConfigSymbolTable
from rvconfig.rvconfig_resolver import RVConfigResolver


__all__ = [
    # Main API
    "RVConfig", "RVConfigParsedSource", "RVConfigPatch", "RVConfigPrinter",

    # Exceptions and diagnostics
    "RVConfigError", "RVConfigLexError", "RVConfigResolutionError", "RVConfigUnknownClassError",
    "RVConfigCycleError", "RVConfigAmbiguousClassError",
    "RVConfigDiagnostic", "RVConfigDiagnosticKind", "RVConfigSeverity",

    # Value types
    "RVConfigValue", "RVConfigNumber", "RVConfigString", "RVConfigArray", "RVConfigUnresolved",
    "RVConfigPropertyTable",

    # Lower-level components
    "RVConfigToken", "RVConfigTokenType", "RVConfigTokenizer",
    "RVConfigDefine", "RVConfigDirective", "RVConfigDirectiveKind",
    "RVConfigMacroExpander", "RVConfigMacroResolver", "split_macro_call",
    "QUALIFIED_NAME_SEPARATOR", "RVConfigAssignKind", "RVConfigClassNode", "RVConfigDeleteStatement",
    "RVConfigPropertyAssignment", "RVConfigSourcePosition",
    "RVConfigParser", "RVConfigSymbolEntry", "RVConfigSymbolTable", "RVConfigResolver"
]
