"""
Tokenizer of the constraint language.
"""

import re
from dataclasses import dataclass
from typing import List

from ecore_dl.core.exceptions import ConstraintSyntaxError


@dataclass(frozen=True)
class Token:
    kind: str
    value: str
    position: int


NAME = "NAME"
NUMBER = "NUMBER"
STRING = "STRING"
SYMBOL = "SYMBOL"
EOF_KIND = "EOF"

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<WS>\s+)
  | (?P<COMMENT>--[^\n]*)
  | (?P<NUMBER>\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)
  | (?P<STRING>'(?:[^'\\]|\\.)*')
  | (?P<SYMBOL>->|::|<>|<=|>=|[=<>+\-*/.()|,:{}])
  | (?P<NAME>[A-Za-z_][A-Za-z0-9_]*)
    """,
    re.VERBOSE,
)

KEYWORDS = frozenset({
    "and", "or", "xor", "not", "implies", "true", "false", "null", "self",
    "if", "then", "else", "endif", "let", "in",
})


def tokenize(text: str) -> List[Token]:
    """
    Split constraint text into tokens.

    Raises:
        ConstraintSyntaxError: On a character no token starts with.
    """
    tokens: List[Token] = []
    position = 0
    while position < len(text):
        match = _TOKEN_PATTERN.match(text, position)
        if match is None:
            raise ConstraintSyntaxError(
                f"Unexpected character {text[position]!r}", expression=text, position=position
            )
        kind = match.lastgroup
        if kind not in ("WS", "COMMENT"):
            tokens.append(Token(kind, match.group(), position))
        position = match.end()
    tokens.append(Token(EOF_KIND, "", len(text)))
    return tokens


def unquote(literal: str) -> str:
    """Body of a quoted string literal with escapes resolved."""
    body = literal[1:-1]
    return re.sub(r"\\(.)", lambda m: {"n": "\n", "t": "\t"}.get(m.group(1), m.group(1)), body)


def quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n").replace("\t", "\\t")
    return f"'{escaped}'"
