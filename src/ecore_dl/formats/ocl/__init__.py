"""Constraint language (OCL subset): tree, tokenizer, parser and printer."""

from .ast import (
    CollectionLiteralExp,
    IteratorExp,
    IteratorKind,
    LiteralExp,
    OclExpression,
    OperationCallExp,
    OperationKind,
    PropertyCallExp,
    TypeExp,
    VariableExp,
)
from .parser import ConstraintParser
from .printer import print_expression

__all__ = [
    "CollectionLiteralExp",
    "IteratorExp",
    "IteratorKind",
    "LiteralExp",
    "OclExpression",
    "OperationCallExp",
    "OperationKind",
    "PropertyCallExp",
    "TypeExp",
    "VariableExp",
    "ConstraintParser",
    "print_expression",
]
