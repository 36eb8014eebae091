"""Parser for config token streams with error recovery."""

from typing import Dict, List, Tuple

from rvconfig.rvconfig_ast import (
    RVConfigAssignKind, RVConfigClassNode, RVConfigDeleteStatement, RVConfigPropertyAssignment,
    RVConfigSourcePosition, qualify
)
from rvconfig.rvconfig_diagnostic import RVConfigDiagnostic, RVConfigDiagnosticKind, RVConfigSeverity
from rvconfig.rvconfig_macro_expander import split_macro_call
from rvconfig.rvconfig_token import RVConfigToken, RVConfigTokenType
from rvconfig.rvconfig_value import (
    RVConfigArray, RVConfigNumber, RVConfigString, RVConfigUnresolved, RVConfigValue
)


class RVConfigSyntaxProblem(Exception):
    """Raised inside the parser to abandon the current statement."""

    def __init__(self, message: str, token: RVConfigToken | None) -> None:
        super().__init__(message)
        self.message = message
        self.token = token


class RVConfigParser:
    """
    Parses an expanded token stream into class declaration trees.

    The parser never resolves class names; base classes are kept as written.  Syntax errors
    do not stop parsing: each one is recorded as a diagnostic and the parser skips to the
    end of the offending statement before carrying on.
    """

    def __init__(self, tokens: List[RVConfigToken], source_id: str = "", report_unquoted_strings: bool = True):
        """
        Initialize parser with tokens.

        Args:
            tokens: Tokens to parse, normally after macro expansion
            source_id: Identifier of the source, recorded on every declaration
            report_unquoted_strings: Whether bare-word values produce a warning
        """
        self.tokens = tokens
        self.pos = 0
        self.current_token: RVConfigToken | None = tokens[0] if tokens else None
        self.source_id = source_id
        self.report_unquoted_strings = report_unquoted_strings
        self.enums: Dict[str, RVConfigValue] = {}
        self._diagnostics: List[RVConfigDiagnostic] = []

    def parse(self) -> Tuple[List[RVConfigClassNode], List[RVConfigDiagnostic]]:
        """
        Parse all tokens.

        Returns:
            Tuple of (top-level class nodes in source order, diagnostics)
        """
        classes: List[RVConfigClassNode] = []

        while self.current_token is not None:
            token = self.current_token

            if token.type == RVConfigTokenType.RBRACE:
                self._record_syntax_error(token, "Unexpected '}' at top level")
                self._advance()
                continue

            try:
                if self._is_keyword(token, 'class'):
                    classes.append(self._parse_class(None))

                elif self._is_keyword(token, 'enum'):
                    self._parse_enum()

                else:
                    raise RVConfigSyntaxProblem(
                        f"Unexpected {self._describe(token)} at top level, expected a class or enum declaration",
                        token
                    )

            except RVConfigSyntaxProblem as e:
                self._record_syntax_error(e.token, e.message)
                self._synchronize()

        return classes, self._diagnostics

    def _advance(self) -> None:
        """Move to the next token."""
        self.pos += 1
        self.current_token = self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _is_keyword(self, token: RVConfigToken | None, keyword: str) -> bool:
        return token is not None and token.type == RVConfigTokenType.IDENTIFIER and token.value == keyword

    def _describe(self, token: RVConfigToken | None) -> str:
        if token is None:
            return "end of input"

        return f"'{token.value}'" if token.type != RVConfigTokenType.STRING else "string"

    def _expect(self, token_type: RVConfigTokenType, message: str) -> RVConfigToken:
        """Consume a token of the given type or abandon the statement."""
        token = self.current_token
        if token is None or token.type != token_type:
            raise RVConfigSyntaxProblem(f"{message}, found {self._describe(token)}", token)

        self._advance()
        return token

    def _position(self, token: RVConfigToken) -> RVConfigSourcePosition:
        return RVConfigSourcePosition(self.source_id, token.line, token.column)

    def _record(
        self,
        token: RVConfigToken | None,
        kind: RVConfigDiagnosticKind,
        severity: RVConfigSeverity,
        message: str
    ) -> None:
        if token is None and self.tokens:
            token = self.tokens[-1]

        line = token.line if token is not None else 0
        column = token.column if token is not None else 0
        self._diagnostics.append(RVConfigDiagnostic(kind, severity, message, self.source_id, line, column))

    def _record_syntax_error(self, token: RVConfigToken | None, message: str) -> None:
        self._record(token, RVConfigDiagnosticKind.SYNTAX_ERROR, RVConfigSeverity.ERROR, message)

    def _synchronize(self) -> None:
        """
        Skip to the end of the current statement.

        Stops after the next `;` at the current nesting level, or before a `}` that closes
        the enclosing body.
        """
        depth = 0
        while self.current_token is not None:
            token_type = self.current_token.type
            if token_type == RVConfigTokenType.LBRACE:
                depth += 1

            elif token_type == RVConfigTokenType.RBRACE:
                if depth == 0:
                    return

                depth -= 1

            elif token_type == RVConfigTokenType.SEMICOLON and depth == 0:
                self._advance()
                return

            self._advance()

    def _parse_class(self, scope: str | None) -> RVConfigClassNode:
        """Parse a class declaration; the current token is the `class` keyword."""
        class_token = self.current_token
        assert class_token is not None, "Current token must not be None here"
        self._advance()

        name = self._expect(RVConfigTokenType.IDENTIFIER, "Expected a class name after 'class'").value
        base = None
        if self.current_token is not None and self.current_token.type == RVConfigTokenType.COLON:
            self._advance()
            base = self._expect(RVConfigTokenType.IDENTIFIER, f"Expected a base class name after '{name}:'").value

        token = self.current_token
        if token is not None and token.type == RVConfigTokenType.SEMICOLON:
            self._advance()
            return RVConfigClassNode(name, qualify(scope, name), base, True, self._position(class_token))

        if token is None or token.type != RVConfigTokenType.LBRACE:
            raise RVConfigSyntaxProblem(
                f"Expected ';' or '{{' after class {name}, found {self._describe(token)}", token
            )

        self._advance()
        node = RVConfigClassNode(name, qualify(scope, name), base, False, self._position(class_token))
        self._parse_body(node)
        return node

    def _parse_body(self, node: RVConfigClassNode) -> None:
        """Parse class members up to and including the closing `};`."""
        while True:
            token = self.current_token
            if token is None:
                self._record_syntax_error(None, f"Unterminated body of class {node.qualified_name}")
                return

            if token.type == RVConfigTokenType.RBRACE:
                self._advance()
                if self.current_token is not None and self.current_token.type == RVConfigTokenType.SEMICOLON:
                    self._advance()

                else:
                    self._record_syntax_error(token, f"Missing ';' after body of class {node.qualified_name}")

                return

            try:
                self._parse_member(node)

            except RVConfigSyntaxProblem as e:
                self._record_syntax_error(e.token, e.message)
                self._synchronize()

    def _parse_member(self, node: RVConfigClassNode) -> None:
        """Parse one member of a class body."""
        token = self.current_token
        assert token is not None, "Current token must not be None here"

        if self._is_keyword(token, 'class'):
            node.classes.append(self._parse_class(node.qualified_name))
            return

        if self._is_keyword(token, 'delete'):
            self._advance()
            name = self._expect(RVConfigTokenType.IDENTIFIER, "Expected a name after 'delete'").value
            self._expect(RVConfigTokenType.SEMICOLON, f"Missing ';' after delete {name}")
            node.deletes.append(RVConfigDeleteStatement(name, self._position(token)))
            return

        if self._is_keyword(token, 'enum'):
            self._parse_enum()
            return

        if token.type != RVConfigTokenType.IDENTIFIER:
            raise RVConfigSyntaxProblem(
                f"Unexpected {self._describe(token)} in class {node.qualified_name}", token
            )

        self._parse_property(node, token)

    def _parse_property(self, node: RVConfigClassNode, name_token: RVConfigToken) -> None:
        """Parse `name[] = value;` or `name[] += value;` into the class's properties."""
        name = name_token.value
        self._advance()

        is_array = False
        if self.current_token is not None and self.current_token.type == RVConfigTokenType.ARRAY_MARKER:
            is_array = True
            self._advance()

        op_token = self.current_token
        if op_token is not None and op_token.type == RVConfigTokenType.EQUALS:
            kind = RVConfigAssignKind.SET

        elif op_token is not None and op_token.type == RVConfigTokenType.PLUS_EQUALS:
            kind = RVConfigAssignKind.APPEND

        else:
            raise RVConfigSyntaxProblem(
                f"Expected '=' or '+=' after property {name}, found {self._describe(op_token)}", op_token
            )

        self._advance()
        value = self._parse_value()
        self._expect(RVConfigTokenType.SEMICOLON, f"Missing ';' after property {name}")

        if is_array and not isinstance(value, RVConfigArray):
            self._record(
                name_token, RVConfigDiagnosticKind.ARRAY_MISMATCH, RVConfigSeverity.WARNING,
                f"Property {name}[] is assigned a {value.type_name()}, not an array"
            )

        elif not is_array and (isinstance(value, RVConfigArray) or kind == RVConfigAssignKind.APPEND):
            self._record(
                name_token, RVConfigDiagnosticKind.ARRAY_MISMATCH, RVConfigSeverity.WARNING,
                f"Array property {name} should be written {name}[]"
            )

        previous = node.properties.pop(name, None)
        if previous is not None:
            self._record(
                name_token, RVConfigDiagnosticKind.DUPLICATE_PROPERTY, RVConfigSeverity.WARNING,
                f"Property {name} is assigned more than once in class {node.qualified_name}; "
                f"the assignment at line {previous.position.line} is shadowed"
            )

        node.properties[name] = RVConfigPropertyAssignment(name, value, kind, is_array, self._position(name_token))

    def _parse_value(self) -> RVConfigValue:
        """Parse a number, string, bare word, macro or array value."""
        token = self.current_token
        if token is None:
            raise RVConfigSyntaxProblem("Expected a value, found end of input", None)

        if token.type == RVConfigTokenType.NUMBER:
            self._advance()
            return RVConfigNumber(token.value)

        if token.type == RVConfigTokenType.STRING:
            self._advance()
            if token.unresolved:
                assert token.expanded_from is not None, "Unresolved tokens must come from a macro"
                return RVConfigUnresolved(token.expanded_from, token.value, "Macro could not be resolved")

            return RVConfigString(token.value)

        if token.type == RVConfigTokenType.MACRO_CALL:
            self._advance()
            _name, args = split_macro_call(token.value)
            return RVConfigUnresolved(token.value, ''.join(args), "Macro was not expanded")

        if token.type == RVConfigTokenType.IDENTIFIER:
            self._advance()
            if self.report_unquoted_strings:
                self._record(
                    token, RVConfigDiagnosticKind.UNQUOTED_STRING, RVConfigSeverity.WARNING,
                    f"Unquoted string value {token.value}; use quotes"
                )

            return RVConfigString(token.value)

        if token.type == RVConfigTokenType.LBRACE:
            return self._parse_array()

        raise RVConfigSyntaxProblem(f"Expected a value, found {self._describe(token)}", token)

    def _parse_array(self) -> RVConfigArray:
        """
        Parse `{value, value, ...}`; a trailing comma is allowed.

        If the array is malformed, its closing `}` is consumed before the problem is passed
        on, so that recovery resumes at the nesting level of the enclosing statement.
        """
        self._advance()
        items: List[RVConfigValue] = []

        try:
            while True:
                token = self.current_token
                if token is not None and token.type == RVConfigTokenType.RBRACE:
                    self._advance()
                    return RVConfigArray(tuple(items))

                items.append(self._parse_value())

                token = self.current_token
                if token is not None and token.type == RVConfigTokenType.COMMA:
                    self._advance()
                    continue

                if token is None or token.type != RVConfigTokenType.RBRACE:
                    raise RVConfigSyntaxProblem(
                        f"Expected ',' or '}}' in array, found {self._describe(token)}", token
                    )

        except RVConfigSyntaxProblem:
            self._skip_array_remainder()
            raise

    def _skip_array_remainder(self) -> None:
        """
        Skip past the `}` closing the array being parsed.

        Arrays never hold `;`, so a `;` means the array was left open; skipping stops before
        it and leaves the statement end for `_synchronize`.
        """
        depth = 0
        while self.current_token is not None:
            token_type = self.current_token.type
            if token_type == RVConfigTokenType.SEMICOLON:
                return

            if token_type == RVConfigTokenType.LBRACE:
                depth += 1

            elif token_type == RVConfigTokenType.RBRACE:
                if depth == 0:
                    self._advance()
                    return

                depth -= 1

            self._advance()

    def _parse_enum(self) -> None:
        """
        Parse `enum { name = value, name, ... };` into the parser's enum constants.

        An entry without a value takes the previous numeric value plus one, starting at 0.
        """
        self._advance()
        self._expect(RVConfigTokenType.LBRACE, "Expected '{' after 'enum'")
        next_value = 0.0

        while True:
            token = self.current_token
            if token is not None and token.type == RVConfigTokenType.RBRACE:
                self._advance()
                break

            name = self._expect(RVConfigTokenType.IDENTIFIER, "Expected an enum entry name").value
            value: RVConfigValue = RVConfigNumber(next_value)
            if self.current_token is not None and self.current_token.type == RVConfigTokenType.EQUALS:
                self._advance()
                value = self._parse_value()

            if isinstance(value, RVConfigNumber):
                next_value = value.value + 1

            self.enums[name] = value

            token = self.current_token
            if token is not None and token.type == RVConfigTokenType.COMMA:
                self._advance()
                continue

            if token is None or token.type != RVConfigTokenType.RBRACE:
                raise RVConfigSyntaxProblem(f"Expected ',' or '}}' in enum, found {self._describe(token)}", token)

        self._expect(RVConfigTokenType.SEMICOLON, "Missing ';' after enum")
