"""
Recursive-descent parser of the constraint language.

Supported grammar (lowest precedence first):

    implies  := xor ('implies' xor)*
    xor      := or ('xor' or)*
    or       := and ('or' and)*
    and      := equality ('and' equality)*
    equality := relational (('=' | '<>') relational)*
    relational := additive (('<' | '>' | '<=' | '>=') additive)*
    additive := multiplicative (('+' | '-') multiplicative)*
    multiplicative := unary (('*' | '/') unary)*
    unary    := ('not' | '-') unary | postfix
    postfix  := primary ('.' NAME [args] | '->' NAME '(' iterator-or-args ')')*

Implicit sources are made explicit while parsing: a bare feature name
navigates from the innermost implicit iterator variable, or from ``self``;
an iterator without a declared variable gets a generated one (``temp1``,
``temp2``... by nesting depth). The printed form of the tree therefore
parses back to an equal tree.

Usage:
    parser = ConstraintParser()
    tree = parser.parse("self.items->forAll(i | i.active)")
"""

import logging
from typing import List, Optional, Tuple

from ecore_dl.constants import NormalizerLimits
from ecore_dl.core.exceptions import ConstraintSyntaxError, UnsupportedConstraintError
from ecore_dl.formats.ocl.ast import (
    COLLECTION_KINDS,
    TYPE_ARGUMENT_OPERATIONS,
    CollectionLiteralExp,
    IteratorExp,
    IteratorKind,
    LiteralExp,
    OclExpression,
    OperationCallExp,
    PropertyCallExp,
    TypeExp,
    VariableExp,
    expression_depth,
)
from ecore_dl.formats.ocl.lexer import EOF_KIND, NAME, NUMBER, STRING, Token, tokenize, unquote

logger = logging.getLogger(__name__)

SELF = "self"
IMPLICIT_VARIABLE_PREFIX = "temp"

# Binary operator levels, lowest first.
BINARY_LEVELS: Tuple[Tuple[str, ...], ...] = (
    ("implies",),
    ("xor",),
    ("or",),
    ("and",),
    ("=", "<>"),
    ("<", ">", "<=", ">="),
    ("+", "-"),
    ("*", "/"),
)

UNSUPPORTED_KEYWORDS = frozenset({"if", "then", "else", "endif", "let", "in"})


class ConstraintParser:
    """
    Parse constraint text into an ``OclExpression`` tree.

    The parser is not reentrant: one ``parse`` call at a time per instance.

    Args:
        max_depth: Maximum nesting of parentheses, unary operators and
            iterator bodies while parsing.
        max_tree_depth: Maximum depth of the resulting tree. Long operator
            or navigation chains parse without nesting but still produce
            deep trees.
    """

    def __init__(
        self,
        max_depth: int = NormalizerLimits.MAX_PARSE_DEPTH,
        max_tree_depth: int = NormalizerLimits.MAX_EXPRESSION_DEPTH,
    ):
        self.max_depth = max_depth
        self.max_tree_depth = max_tree_depth
        self._text = ""
        self._tokens: List[Token] = []
        self._index = 0
        self._depth = 0
        # (name, implicit) for each bound iterator variable, innermost last
        self._variables: List[Tuple[str, bool]] = []

    def parse(self, text: str) -> OclExpression:
        """
        Parse one boolean constraint expression.

        Args:
            text: Constraint text.

        Returns:
            The expression tree.

        Raises:
            ConstraintSyntaxError: If the text is not a valid expression.
            UnsupportedConstraintError: If the tree is deeper than ``max_tree_depth``.
        """
        self._text = text
        self._tokens = tokenize(text)
        self._index = 0
        self._depth = 0
        self._variables = []

        if self._peek().kind == EOF_KIND:
            raise ConstraintSyntaxError("Empty constraint", expression=text, position=0)

        expression = self._expression()
        if self._peek().kind != EOF_KIND:
            self._error(f"Unexpected token '{self._peek().value}'")

        depth = expression_depth(expression)
        if depth > self.max_tree_depth:
            raise UnsupportedConstraintError(
                f"Expression is {depth} levels deep (limit {self.max_tree_depth})", expression=text
            )
        return expression

    # -------------------------------------------------------------------------
    # Token helpers
    # -------------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> Token:
        index = min(self._index + offset, len(self._tokens) - 1)
        return self._tokens[index]

    def _advance(self) -> Token:
        token = self._tokens[self._index]
        if token.kind != EOF_KIND:
            self._index += 1
        return token

    def _at(self, value: str, offset: int = 0) -> bool:
        token = self._peek(offset)
        return token.kind != STRING and token.value == value

    def _accept(self, value: str) -> bool:
        if self._at(value):
            self._advance()
            return True
        return False

    def _expect(self, value: str) -> Token:
        if not self._at(value):
            found = self._peek().value or "end of input"
            self._error(f"Expected '{value}' but found '{found}'")
        return self._advance()

    def _expect_name(self) -> str:
        token = self._peek()
        if token.kind != NAME:
            self._error(f"Expected a name but found '{token.value or 'end of input'}'")
        return self._advance().value

    def _error(self, message: str):
        raise ConstraintSyntaxError(message, expression=self._text, position=self._peek().position)

    # -------------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------------

    def _expression(self) -> OclExpression:
        self._depth += 1
        if self._depth > self.max_depth:
            self._error("Expression nested too deeply")
        try:
            return self._binary(0)
        finally:
            self._depth -= 1

    def _binary(self, level: int) -> OclExpression:
        if level == len(BINARY_LEVELS):
            return self._unary()
        left = self._binary(level + 1)
        operators = BINARY_LEVELS[level]
        while self._peek().kind != STRING and self._peek().value in operators:
            operator = self._advance().value
            right = self._binary(level + 1)
            left = OperationCallExp(left, operator, (right,))
        return left

    def _unary(self) -> OclExpression:
        if self._accept("not"):
            return OperationCallExp(self._nested_unary(), "not")
        if self._accept("-"):
            return OperationCallExp(self._nested_unary(), "-")
        return self._postfix()

    def _nested_unary(self) -> OclExpression:
        self._depth += 1
        if self._depth > self.max_depth:
            self._error("Expression nested too deeply")
        try:
            return self._unary()
        finally:
            self._depth -= 1

    def _postfix(self) -> OclExpression:
        expression = self._primary()
        while True:
            if self._accept("."):
                name = self._expect_name()
                if self._at("("):
                    arguments = self._arguments(name)
                    expression = OperationCallExp(expression, name, arguments)
                else:
                    expression = PropertyCallExp(expression, name)
            elif self._accept("->"):
                name = self._expect_name()
                if IteratorKind.lookup(name) is not None:
                    expression = self._iterator(expression, name)
                else:
                    arguments = self._arguments(name)
                    expression = OperationCallExp(expression, name, arguments, arrow=True)
            else:
                return expression

    def _arguments(self, operation: str) -> Tuple[OclExpression, ...]:
        self._expect("(")
        arguments: List[OclExpression] = []
        if not self._at(")"):
            while True:
                if operation in TYPE_ARGUMENT_OPERATIONS:
                    arguments.append(self._type_path())
                else:
                    arguments.append(self._expression())
                if not self._accept(","):
                    break
        self._expect(")")
        return tuple(arguments)

    def _iterator(self, source: OclExpression, name: str) -> IteratorExp:
        self._expect("(")
        variable, variable_type, implicit = self._iterator_declaration()
        self._variables.append((variable, implicit))
        try:
            body = self._expression()
        finally:
            self._variables.pop()
        self._expect(")")
        return IteratorExp(source, name, variable, body, variable_type)

    def _iterator_declaration(self) -> Tuple[str, Optional[str], bool]:
        # v | ...   or   v : Type | ...
        if self._peek().kind == NAME and self._at("|", 1):
            variable = self._advance().value
            self._expect("|")
            return variable, None, False
        if self._peek().kind == NAME and self._at(":", 1):
            variable = self._advance().value
            self._expect(":")
            variable_type = self._type_path().name
            self._expect("|")
            return variable, variable_type, False
        if self._peek().kind == NAME and self._at(",", 1):
            self._error("Iterators with several variables are not supported")
        return f"{IMPLICIT_VARIABLE_PREFIX}{len(self._variables) + 1}", None, True

    def _type_path(self) -> TypeExp:
        parts = [self._expect_name()]
        while self._accept("::"):
            parts.append(self._expect_name())
        return TypeExp("::".join(parts))

    # -------------------------------------------------------------------------
    # Primaries
    # -------------------------------------------------------------------------

    def _implicit_source(self) -> VariableExp:
        for name, implicit in reversed(self._variables):
            if implicit:
                return VariableExp(name)
        return VariableExp(SELF)

    def _is_bound(self, name: str) -> bool:
        return any(bound == name for bound, _ in self._variables)

    def _primary(self) -> OclExpression:
        token = self._peek()

        if token.kind == NUMBER:
            self._advance()
            text = token.value
            if "." in text or "e" in text or "E" in text:
                return LiteralExp(float(text))
            return LiteralExp(int(text))

        if token.kind == STRING:
            self._advance()
            return LiteralExp(unquote(token.value))

        if self._accept("("):
            expression = self._expression()
            self._expect(")")
            return expression

        if token.kind != NAME:
            self._error(f"Unexpected token '{token.value or 'end of input'}'")

        value = token.value
        if value == "true" or value == "false":
            self._advance()
            return LiteralExp(value == "true")
        if value == "null":
            self._advance()
            return LiteralExp(None)
        if value == SELF:
            self._advance()
            return VariableExp(SELF)
        if value in UNSUPPORTED_KEYWORDS:
            self._error(f"'{value}' expressions are not supported")
        if value in ("and", "or", "xor", "implies"):
            self._error(f"Missing left operand of '{value}'")

        self._advance()
        if value in COLLECTION_KINDS and self._at("{"):
            return self._collection_literal(value)
        if self._at("::"):
            parts = [value]
            while self._accept("::"):
                parts.append(self._expect_name())
            return TypeExp("::".join(parts))
        if self._is_bound(value):
            return VariableExp(value)
        if self._at("("):
            arguments = self._arguments(value)
            return OperationCallExp(self._implicit_source(), value, arguments)
        return PropertyCallExp(self._implicit_source(), value)

    def _collection_literal(self, kind: str) -> CollectionLiteralExp:
        self._expect("{")
        items: List[OclExpression] = []
        if not self._at("}"):
            while True:
                items.append(self._expression())
                if not self._accept(","):
                    break
        self._expect("}")
        return CollectionLiteralExp(kind, tuple(items))
