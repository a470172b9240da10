"""Constraint normalization: rewriting, scopes and resolution to class expressions."""

from .constraint_normalizer import ConstraintNormalizer, NormalizedConstraint
from .frames import IteratorFrame, LiteralFrame, OperationFrame, PropertyFrame, Scope, ScopeBuilder
from .resolver import resolve
from .rewriter import negate, rewrite

__all__ = [
    "ConstraintNormalizer",
    "NormalizedConstraint",
    "IteratorFrame",
    "LiteralFrame",
    "OperationFrame",
    "PropertyFrame",
    "Scope",
    "ScopeBuilder",
    "resolve",
    "negate",
    "rewrite",
]
