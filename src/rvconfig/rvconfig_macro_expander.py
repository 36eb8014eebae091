"""Macro expansion pass - rewrites macro calls in a token stream into literal tokens."""

import dataclasses
import logging
from typing import Callable, Dict, List, Optional, Tuple

from rvconfig.rvconfig_define import RVConfigDefine, RVConfigDirectiveKind, parse_directive
from rvconfig.rvconfig_diagnostic import RVConfigDiagnostic, RVConfigDiagnosticKind, RVConfigSeverity
from rvconfig.rvconfig_error import RVConfigLexError
from rvconfig.rvconfig_token import RVConfigToken, RVConfigTokenType
from rvconfig.rvconfig_tokenizer import RVConfigTokenizer


# Resolver capability supplied by the caller: (macro name, argument texts) -> expanded text or None
RVConfigMacroResolver = Callable[[str, List[str]], Optional[str]]


def split_macro_call(raw: str) -> Tuple[str, List[str]]:
    """
    Split the raw text of a macro call into its name and arguments.

    Arguments are split only on top-level commas; commas inside nested parentheses or
    string literals do not split.  Each argument is stripped of surrounding whitespace.

    Args:
        raw: Macro call text such as `ECSTRING(common,ACETeam)`

    Returns:
        Tuple of (macro name, argument texts)
    """
    paren = raw.index('(')
    name = raw[:paren]
    inner = raw[paren + 1:-1]
    if not inner.strip():
        return name, []

    args: List[str] = []
    current: List[str] = []
    depth = 0
    in_string = False

    for char in inner:
        if in_string:
            current.append(char)
            if char == '"':
                in_string = False

            continue

        if char == '"':
            in_string = True

        elif char == '(':
            depth += 1

        elif char == ')':
            depth -= 1

        elif char == ',' and depth == 0:
            args.append(''.join(current).strip())
            current = []
            continue

        current.append(char)

    args.append(''.join(current).strip())
    return name, args


class RVConfigMacroExpander:
    """
    Rewrites macro calls in a token stream.

    Each `Name(arg1, arg2, ...)` call is passed to the caller's resolver.  If that returns
    text, the call becomes a single STRING token holding it.  Otherwise a function-like
    #define from the same source is tried, and failing that the call becomes a STRING token
    holding its arguments concatenated, with an UNRESOLVED_MACRO diagnostic.

    Expansion is single-pass: tokens produced by an expansion are never expanded again.
    """

    def __init__(self, resolve_macro: RVConfigMacroResolver | None = None, source_id: str = "") -> None:
        """
        Initialize macro expander.

        Args:
            resolve_macro: Resolver capability queried for every macro call; None resolves nothing
            source_id: Identifier of the source being expanded, used in diagnostics
        """
        self._resolve_macro = resolve_macro
        self._source_id = source_id
        self._defines: Dict[str, RVConfigDefine] = {}
        self._diagnostics: List[RVConfigDiagnostic] = []
        self._logger = logging.getLogger("RVConfigMacroExpander")

    @property
    def diagnostics(self) -> List[RVConfigDiagnostic]:
        """Diagnostics recorded so far."""
        return self._diagnostics

    @property
    def defines(self) -> Dict[str, RVConfigDefine]:
        """Defines currently in effect, by name."""
        return self._defines

    def expand(self, tokens: List[RVConfigToken]) -> List[RVConfigToken]:
        """
        Expand every macro call and directive in a token stream.

        Args:
            tokens: Tokens as produced by the tokenizer

        Returns:
            New token list with no DIRECTIVE tokens and every MACRO_CALL rewritten
        """
        result: List[RVConfigToken] = []

        for token in tokens:
            if token.type == RVConfigTokenType.DIRECTIVE:
                self._handle_directive(token)
                continue

            if token.type == RVConfigTokenType.MACRO_CALL:
                result.extend(self._expand_call(token))
                continue

            if token.type == RVConfigTokenType.IDENTIFIER:
                define = self._defines.get(token.value)
                if define is not None and not define.is_function_like():
                    replacement = self._retokenize(define.body, token)
                    if replacement is not None:
                        result.extend(replacement)
                        continue

            result.append(token)

        return result

    def _handle_directive(self, token: RVConfigToken) -> None:
        """Apply a preprocessor directive to the set of defines."""
        directive = parse_directive(token.value)

        if directive.kind == RVConfigDirectiveKind.DEFINE:
            assert directive.define is not None, "Define directives must carry a define"
            self._defines[directive.name] = directive.define
            self._logger.debug("%s: defined macro %s", self._source_id, directive.name)
            return

        if directive.kind == RVConfigDirectiveKind.UNDEF:
            self._defines.pop(directive.name, None)
            return

        self._record(
            token,
            RVConfigDiagnosticKind.IGNORED_DIRECTIVE,
            RVConfigSeverity.NOTE,
            f"Directive '#{directive.keyword}' is not processed"
        )

    def _expand_call(self, token: RVConfigToken) -> List[RVConfigToken]:
        """Expand one MACRO_CALL token."""
        raw = token.value
        name, args = split_macro_call(raw)

        if self._resolve_macro is not None:
            text = self._resolve_macro(name, args)
            if text is not None:
                return [dataclasses.replace(token, type=RVConfigTokenType.STRING, value=text, expanded_from=raw)]

        define = self._defines.get(name)
        if define is not None and define.params is not None:
            if len(define.params) == len(args):
                replacement = self._retokenize(define.substitute(args), token)
                if replacement is not None:
                    return replacement

        message = f"Macro {name} with {len(args)} argument(s) could not be resolved: {raw}"
        self._record(token, RVConfigDiagnosticKind.UNRESOLVED_MACRO, RVConfigSeverity.WARNING, message)
        return [dataclasses.replace(
            token, type=RVConfigTokenType.STRING, value=''.join(args), expanded_from=raw, unresolved=True
        )]

    def _retokenize(self, text: str, origin: RVConfigToken) -> List[RVConfigToken] | None:
        """
        Tokenize replacement text, locating every resulting token at the call site.

        Returns:
            The replacement tokens, or None if the text does not tokenize
        """
        try:
            tokens = RVConfigTokenizer().tokenize(text, self._source_id)

        except RVConfigLexError as e:
            self._record(
                origin,
                RVConfigDiagnosticKind.UNRESOLVED_MACRO,
                RVConfigSeverity.WARNING,
                f"Expansion of {origin.value} is not valid config text: {e.message}"
            )
            return None

        raw = origin.value if origin.expanded_from is None else origin.expanded_from
        return [
            dataclasses.replace(
                t,
                position=origin.position,
                length=origin.length,
                line=origin.line,
                column=origin.column,
                expanded_from=raw
            )
            for t in tokens
        ]

    def _record(
        self,
        token: RVConfigToken,
        kind: RVConfigDiagnosticKind,
        severity: RVConfigSeverity,
        message: str
    ) -> None:
        self._diagnostics.append(RVConfigDiagnostic(
            kind, severity, message, self._source_id, token.line, token.column
        ))
