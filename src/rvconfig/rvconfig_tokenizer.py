"""Tokenizer for config source text with detailed error messages."""

import re
from typing import List, Tuple

from rvconfig.rvconfig_error import RVConfigLexError
from rvconfig.rvconfig_token import RVConfigToken, RVConfigTokenType


class RVConfigTokenizer:
    """
    Tokenizes config source text.

    Whitespace and comments are discarded.  An identifier immediately followed by `(` is read,
    with balanced parentheses, as a single MACRO_CALL token so that macro arguments may hold
    text that is not otherwise valid (file paths with backslashes, for instance).  A `#` that
    starts a line begins a DIRECTIVE token running to the end of the line.
    """

    _NUMBER_PATTERN = re.compile(
        r'[+-]?(?:0[xX][0-9a-fA-F]+|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)'
    )

    _PUNCTUATION = {
        '{': RVConfigTokenType.LBRACE,
        '}': RVConfigTokenType.RBRACE,
        ';': RVConfigTokenType.SEMICOLON,
        ':': RVConfigTokenType.COLON,
        ',': RVConfigTokenType.COMMA,
        '=': RVConfigTokenType.EQUALS,
    }

    def __init__(self) -> None:
        self._text = ""
        self._source_id = ""
        self._line = 1
        self._line_start = 0
        self._scanned_to = 0

    def tokenize(self, text: str, source_id: str = "") -> List[RVConfigToken]:
        """
        Tokenize config source text.

        Args:
            text: The source text to tokenize
            source_id: Identifier of the source, used in error messages

        Returns:
            List of tokens

        Raises:
            RVConfigLexError: If the text holds an unterminated literal or an invalid character
        """
        self._text = text
        self._source_id = source_id
        self._line = 1
        self._line_start = 0
        self._scanned_to = 0

        tokens: List[RVConfigToken] = []
        i = 0

        while i < len(text):
            char = text[i]

            # Skip whitespace
            if char.isspace():
                i += 1
                continue

            # Comments
            if text.startswith('//', i):
                while i < len(text) and text[i] != '\n':
                    i += 1

                continue

            if text.startswith('/*', i):
                end = text.find('*/', i + 2)
                if end == -1:
                    raise self._error(
                        i,
                        "Unterminated block comment",
                        expected="Closing */ at end of comment",
                        suggestion="Add */ to close the comment"
                    )

                i = end + 2
                continue

            # Preprocessor directives are only recognized at the start of a line
            if char == '#':
                self._sync_position(i)
                if text[self._line_start:i].strip():
                    raise self._error(
                        i,
                        "Invalid character: #",
                        context="Preprocessor directives must start a line"
                    )

                directive, length = self._read_directive(i)
                tokens.append(self._make_token(RVConfigTokenType.DIRECTIVE, directive, i, length))
                i += length
                continue

            if char in self._PUNCTUATION:
                tokens.append(self._make_token(self._PUNCTUATION[char], char, i, 1))
                i += 1
                continue

            if text.startswith('+=', i):
                tokens.append(self._make_token(RVConfigTokenType.PLUS_EQUALS, '+=', i, 2))
                i += 2
                continue

            if char == '[':
                if not text.startswith('[]', i):
                    raise self._error(
                        i,
                        "Invalid character: [",
                        expected="[] after an array property name",
                        suggestion="Array properties are written name[] = {...};"
                    )

                tokens.append(self._make_token(RVConfigTokenType.ARRAY_MARKER, '[]', i, 2))
                i += 2
                continue

            if char == '"':
                value, length = self._read_string(i)
                tokens.append(self._make_token(RVConfigTokenType.STRING, value, i, length))
                i += length
                continue

            # Numbers, checked before identifiers so that signed and dotted forms are found
            if self._is_number_start(i):
                value, length = self._read_number(i)
                tokens.append(self._make_token(RVConfigTokenType.NUMBER, value, i, length))
                i += length
                continue

            if char.isalpha() or char == '_':
                end = i + 1
                while end < len(text) and (text[end].isalnum() or text[end] == '_'):
                    end += 1

                if end < len(text) and text[end] == '(':
                    length = self._read_macro_call(i, end)
                    tokens.append(self._make_token(RVConfigTokenType.MACRO_CALL, text[i:i + length], i, length))
                    i += length
                    continue

                tokens.append(self._make_token(RVConfigTokenType.IDENTIFIER, text[i:end], i, end - i))
                i = end
                continue

            char_code = ord(char)
            if char_code < 32:
                raise self._error(
                    i,
                    f"Invalid control character in source text: \\u{char_code:04x}",
                    received=f"Control character (code {char_code})"
                )

            raise self._error(
                i,
                f"Invalid character: {char}",
                received=f"Character: {char} (code {char_code})",
                expected="Identifiers, numbers, strings, or one of { } ; : = , += []"
            )

        return tokens

    def _sync_position(self, offset: int) -> None:
        """Advance line tracking up to `offset`.  Offsets only ever move forwards."""
        newline = self._text.find('\n', self._scanned_to, offset)
        while newline != -1:
            self._line += 1
            self._line_start = newline + 1
            newline = self._text.find('\n', newline + 1, offset)

        self._scanned_to = max(self._scanned_to, offset)

    def _make_token(self, token_type: RVConfigTokenType, value: object, offset: int, length: int) -> RVConfigToken:
        self._sync_position(offset)
        return RVConfigToken(
            token_type, value, offset, length, line=self._line, column=offset - self._line_start + 1
        )

    def _error(self, offset: int, message: str, **kwargs: str) -> RVConfigLexError:
        """Build a lex error located at `offset`."""
        self._sync_position(offset)
        return RVConfigLexError(
            message=message,
            source_id=self._source_id or None,
            line=self._line,
            column=offset - self._line_start + 1,
            source=self._text,
            **kwargs
        )

    def _read_string(self, start: int) -> Tuple[str, int]:
        """
        Read a string literal.

        The content is kept exactly as written; the only escape is a doubled quote (""),
        which stands for one quote character.  Backslashes are ordinary characters.

        Returns:
            Tuple of (string_value, length_consumed)

        Raises:
            RVConfigLexError: If the string is not terminated
        """
        text = self._text
        i = start + 1
        result: List[str] = []

        while i < len(text):
            char = text[i]
            if char == '"':
                if i + 1 < len(text) and text[i + 1] == '"':
                    result.append('"')
                    i += 2
                    continue

                return ''.join(result), i + 1 - start

            result.append(char)
            i += 1

        raise self._error(
            start,
            "Unterminated string literal",
            received=f"String starting with: {text[start:start + 20]}...",
            expected="Closing quote \" at end of string",
            suggestion="Add the closing quote; write \"\" for a quote inside a string"
        )

    def _is_number_start(self, pos: int) -> bool:
        """Check if position starts a number literal."""
        text = self._text
        char = text[pos]

        if char.isdigit():
            return True

        if char == '.' and pos + 1 < len(text) and text[pos + 1].isdigit():
            return True

        if char in '+-' and pos + 1 < len(text):
            next_char = text[pos + 1]
            if next_char.isdigit():
                return True

            if next_char == '.' and pos + 2 < len(text) and text[pos + 2].isdigit():
                return True

        return False

    def _read_number(self, start: int) -> Tuple[float, int]:
        """
        Read a number literal.

        Returns:
            Tuple of (value, length_consumed)

        Raises:
            RVConfigLexError: If the literal runs straight into other word characters
        """
        text = self._text
        match = self._NUMBER_PATTERN.match(text, start)
        assert match is not None, "Number start must match the number pattern"

        end = match.end()
        if end < len(text) and (text[end].isalnum() or text[end] in '_.'):
            bad_end = end
            while bad_end < len(text) and (text[bad_end].isalnum() or text[bad_end] in '_.'):
                bad_end += 1

            raise self._error(
                start,
                f"Invalid number: {text[start:bad_end]}",
                expected="A decimal number such as 0.6, -3, 1e-2, or a hexadecimal number such as 0xFF",
                suggestion="Quote the value if it is meant to be a string"
            )

        literal = match.group(0)
        unsigned = literal.lstrip('+-')
        if unsigned[:2] in ('0x', '0X'):
            value = float(int(unsigned, 16))
            if literal.startswith('-'):
                value = -value

        else:
            value = float(literal)

        return value, end - start

    def _read_macro_call(self, start: int, paren: int) -> int:
        """
        Find the end of a macro call whose opening parenthesis is at `paren`.

        Returns:
            Length of the whole call, from the name to the closing parenthesis

        Raises:
            RVConfigLexError: If the parentheses are never balanced
        """
        text = self._text
        depth = 0
        i = paren

        while i < len(text):
            char = text[i]
            if char == '"':
                close = i + 1
                while close < len(text):
                    if text[close] == '"':
                        if close + 1 < len(text) and text[close + 1] == '"':
                            close += 2
                            continue

                        break

                    close += 1

                i = close + 1
                continue

            if char == '(':
                depth += 1

            elif char == ')':
                depth -= 1
                if depth == 0:
                    return i + 1 - start

            i += 1

        raise self._error(
            start,
            f"Unterminated macro call: {text[start:paren]}(",
            expected="Closing ) at end of macro arguments",
            suggestion="Balance the parentheses in the macro call"
        )

    def _read_directive(self, start: int) -> Tuple[str, int]:
        """
        Read a preprocessor directive up to the end of its line.

        A backslash at the end of a line continues the directive on the next one.

        Returns:
            Tuple of (directive text with continuations joined, length_consumed)
        """
        text = self._text
        i = start
        while i < len(text):
            if text[i] == '\n':
                if text[start:i].rstrip('\r').endswith('\\'):
                    i += 1
                    continue

                break

            i += 1

        raw = text[start:i]
        joined = re.sub(r'\\\r?\n', ' ', raw).rstrip()
        return joined, i - start
