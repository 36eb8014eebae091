"""Preprocessor directives declared inside a config source."""

from dataclasses import dataclass
from enum import Enum
import re
from typing import Dict, List


class RVConfigDirectiveKind(Enum):
    """Kinds of preprocessor directive."""
    DEFINE = "define"
    UNDEF = "undef"
    INCLUDE = "include"
    OTHER = "other"


@dataclass(frozen=True)
class RVConfigDefine:
    """
    A #define directive.

    Object-like defines (`#define NAME body`) have `params` set to None; function-like
    defines (`#define NAME(a, b) body`) list their parameter names.
    """
    name: str
    params: List[str] | None
    body: str

    def is_function_like(self) -> bool:
        """Check if the define takes arguments."""
        return self.params is not None

    def substitute(self, args: List[str]) -> str:
        """
        Substitute arguments into a function-like define's body.

        Parameters are replaced as whole words; `##` paste operators are then removed so
        the pieces either side join up.

        Args:
            args: Argument texts, one per parameter

        Returns:
            The substituted body text
        """
        assert self.params is not None, "Only function-like defines take arguments"
        bindings: Dict[str, str] = dict(zip(self.params, args))
        if not bindings:
            return self.body.replace('##', '')

        pattern = re.compile(r'\b(' + '|'.join(re.escape(p) for p in bindings) + r')\b')
        substituted = pattern.sub(lambda m: bindings[m.group(1)], self.body)
        return substituted.replace('##', '')


@dataclass(frozen=True)
class RVConfigDirective:
    """A parsed preprocessor directive line."""
    kind: RVConfigDirectiveKind
    keyword: str
    name: str = ""
    define: RVConfigDefine | None = None


_DIRECTIVE_PATTERN = re.compile(r'#\s*(\w+)\s*(.*)', re.DOTALL)
_DEFINE_PATTERN = re.compile(r'([A-Za-z_]\w*)(\(([^)]*)\))?\s*(.*)', re.DOTALL)


def parse_directive(text: str) -> RVConfigDirective:
    """
    Parse the text of a DIRECTIVE token.

    Args:
        text: Directive text starting with `#`, continuation lines already joined

    Returns:
        The parsed directive; unknown or malformed directives have kind OTHER
    """
    match = _DIRECTIVE_PATTERN.match(text)
    if match is None:
        return RVConfigDirective(RVConfigDirectiveKind.OTHER, text.strip())

    keyword, rest = match.group(1), match.group(2).strip()

    if keyword == 'define':
        define_match = _DEFINE_PATTERN.match(rest)
        if define_match is None:
            return RVConfigDirective(RVConfigDirectiveKind.OTHER, keyword)

        name = define_match.group(1)
        params = None
        if define_match.group(2) is not None:
            params = [p.strip() for p in define_match.group(3).split(',') if p.strip()]

        define = RVConfigDefine(name, params, define_match.group(4).strip())
        return RVConfigDirective(RVConfigDirectiveKind.DEFINE, keyword, name, define)

    if keyword == 'undef':
        return RVConfigDirective(RVConfigDirectiveKind.UNDEF, keyword, rest.split()[0] if rest else "")

    if keyword == 'include':
        return RVConfigDirective(RVConfigDirectiveKind.INCLUDE, keyword, rest.strip('"<>'))

    return RVConfigDirective(RVConfigDirectiveKind.OTHER, keyword)
