"""
Printer of constraint trees.

The printed text is the observable "constraint report" of the normalizer
and the input of its next re-parse, so it must parse back to an equal tree.
Parentheses are emitted only where operator precedence requires them.
"""

from ecore_dl.formats.ocl.ast import (
    CollectionLiteralExp,
    IteratorExp,
    LiteralExp,
    OclExpression,
    OperationCallExp,
    PropertyCallExp,
    TypeExp,
    VariableExp,
)
from ecore_dl.formats.ocl.lexer import quote
from ecore_dl.formats.ocl.parser import BINARY_LEVELS

_BINARY_PRECEDENCE = {
    operator: level + 1
    for level, operators in enumerate(BINARY_LEVELS)
    for operator in operators
}
UNARY_PRECEDENCE = len(BINARY_LEVELS) + 1
POSTFIX_PRECEDENCE = UNARY_PRECEDENCE + 1
PRIMARY_PRECEDENCE = POSTFIX_PRECEDENCE + 1


def _is_binary(expr: OclExpression) -> bool:
    return (
        isinstance(expr, OperationCallExp)
        and not expr.arrow
        and len(expr.arguments) == 1
        and expr.name in _BINARY_PRECEDENCE
    )


def _is_unary(expr: OclExpression) -> bool:
    return isinstance(expr, OperationCallExp) and not expr.arguments and expr.name in ("not", "-")


def precedence(expr: OclExpression) -> int:
    if _is_binary(expr):
        return _BINARY_PRECEDENCE[expr.name]
    if _is_unary(expr):
        return UNARY_PRECEDENCE
    if isinstance(expr, (PropertyCallExp, OperationCallExp, IteratorExp)):
        return POSTFIX_PRECEDENCE
    return PRIMARY_PRECEDENCE


def _wrap(expr: OclExpression, minimum: int) -> str:
    text = print_expression(expr)
    if precedence(expr) < minimum:
        return f"({text})"
    return text


def _literal(value) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    return quote(value)


def print_expression(expr: OclExpression) -> str:
    """Render a tree as constraint text."""
    if isinstance(expr, VariableExp):
        return expr.name

    if isinstance(expr, LiteralExp):
        return _literal(expr.value)

    if isinstance(expr, TypeExp):
        return expr.name

    if isinstance(expr, CollectionLiteralExp):
        items = ", ".join(print_expression(item) for item in expr.items)
        return f"{expr.kind}{{{items}}}"

    if isinstance(expr, PropertyCallExp):
        return f"{_wrap(expr.source, POSTFIX_PRECEDENCE)}.{expr.name}"

    if isinstance(expr, IteratorExp):
        declaration = expr.variable
        if expr.variable_type:
            declaration = f"{declaration} : {expr.variable_type}"
        source = _wrap(expr.source, POSTFIX_PRECEDENCE)
        return f"{source}->{expr.name}({declaration} | {print_expression(expr.body)})"

    if isinstance(expr, OperationCallExp):
        if _is_binary(expr):
            level = _BINARY_PRECEDENCE[expr.name]
            left = _wrap(expr.source, level)
            right = _wrap(expr.arguments[0], level + 1)
            return f"{left} {expr.name} {right}"
        if _is_unary(expr):
            operand = _wrap(expr.source, UNARY_PRECEDENCE)
            if expr.name == "not":
                return f"not {operand}"
            if operand.startswith("-"):
                # "--" would start a comment
                operand = f"({operand})"
            return f"-{operand}"
        arguments = ", ".join(print_expression(argument) for argument in expr.arguments)
        separator = "->" if expr.arrow else "."
        return f"{_wrap(expr.source, POSTFIX_PRECEDENCE)}{separator}{expr.name}({arguments})"

    raise TypeError(f"Cannot print {type(expr).__name__}")
