"""
Exception hierarchy for metamodel translation.

Three families are distinguished:

- ``ModelError``: fatal defects in the metamodel (untyped attributes,
  missing opposites, invalid multiplicities...). They abort compilation and
  each cause has its own subclass so callers can react per kind.
- ``ConstraintError``: a constraint expression that cannot be parsed,
  normalized or resolved. The compiler skips the constraint and records it.
- ``ContractViolationError``: the compiler received a model that should have
  been rejected by the well-formedness check.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ModelErrorKind(str, Enum):
    """Cause of a fatal model error."""
    TYPELESS_ATTRIBUTE = "typeless_attribute"
    TYPELESS_PARAMETER = "typeless_parameter"
    MISSING_OPPOSITE = "missing_opposite"
    INVALID_MULTIPLICITY = "invalid_multiplicity"
    OPPOSITE_MISMATCH = "opposite_mismatch"
    DUPLICATE_NAME = "duplicate_name"


class ModelError(Exception):
    """Base class for unrecoverable metamodel defects."""

    kind: ModelErrorKind = ModelErrorKind.INVALID_MULTIPLICITY

    def __init__(
        self,
        message: str,
        element: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.element = element
        self.details = details or {}
        super().__init__(message)


class TypelessAttributeError(ModelError):
    """An attribute has no resolvable type."""
    kind = ModelErrorKind.TYPELESS_ATTRIBUTE


class TypelessParameterError(ModelError):
    """An operation parameter or return type cannot be resolved."""
    kind = ModelErrorKind.TYPELESS_PARAMETER


class MissingOppositeError(ModelError):
    """An association end has no opposite."""
    kind = ModelErrorKind.MISSING_OPPOSITE


class InvalidMultiplicityError(ModelError):
    """Lower/upper bounds violate the multiplicity invariants."""
    kind = ModelErrorKind.INVALID_MULTIPLICITY


class OppositeMismatchError(ModelError):
    """Two association ends are not each other's opposite."""
    kind = ModelErrorKind.OPPOSITE_MISMATCH


class DuplicateNameError(ModelError):
    """Two classifiers share a name after repair."""
    kind = ModelErrorKind.DUPLICATE_NAME


class ConstraintError(Exception):
    """Base class for constraint expressions outside the supported fragment."""

    def __init__(self, message: str, expression: Optional[str] = None):
        self.message = message
        self.expression = expression
        super().__init__(message)


class ConstraintSyntaxError(ConstraintError):
    """The constraint text could not be parsed."""

    def __init__(self, message: str, expression: Optional[str] = None, position: Optional[int] = None):
        self.position = position
        if position is not None:
            message = f"{message} (at offset {position})"
        super().__init__(message, expression)


class UnsupportedConstraintError(ConstraintError):
    """The constraint uses an operator or shape with no DL counterpart."""


class FixpointNotReachedError(ConstraintError):
    """Normalization did not converge within the iteration bound."""

    def __init__(self, message: str, expression: Optional[str] = None, iterations: int = 0):
        self.iterations = iterations
        super().__init__(message, expression)


class ContractViolationError(RuntimeError):
    """The compiler was handed a model that breaks its preconditions."""


class ConfigurationError(ValueError):
    """Invalid converter configuration."""
