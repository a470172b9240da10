"""
Scopes and frames: the working structure between a normalized constraint
tree and its class expression.

A ``Scope`` holds the frames of one navigation chain in visiting order
(source before the operation applied to it) and points to its parent.
Iterator bodies and the right operand of ``and``/``or``/``xor``/``implies``
get their own nested scope, so each side resolves independently:

    self.children->select(c | not c.active)->isEmpty()

    scope(self):  [Property(children), Iterator(scope c), Operation(isEmpty)]
    scope(c):     [Property(active), Operation(not)]

``ScopeBuilder`` walks the tree once, checking feature names against the
model and choosing the role identifier of every navigation. Scopes are
built per constraint and discarded after resolution.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from ecore_dl.constants import NormalizerLimits
from ecore_dl.core.exceptions import UnsupportedConstraintError
from ecore_dl.core.naming import NamingScheme
from ecore_dl.formats.ocl.ast import (
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
from ecore_dl.formats.ocl.parser import SELF
from ecore_dl.shared.models.axioms import ClassExpression, DataProperty, ObjectProperty
from ecore_dl.shared.models.entity_model import (
    AttributeEntity,
    ClassEntity,
    EntityModel,
    ResolvedType,
    TypeKind,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Frames
# =============================================================================

@dataclass(frozen=True)
class PropertyFrame:
    """Navigation through a role."""
    role: Union[ObjectProperty, DataProperty]

    @property
    def is_data(self) -> bool:
        return isinstance(self.role, DataProperty)


@dataclass(frozen=True)
class OperationFrame:
    """
    Operation applied to the chain before it.

    Attributes:
        kind: Operation kind.
        nested: Scope of the right operand of a boolean combinator.
        concept: Type argument of ``oclIsTypeOf``/``oclIsKindOf``/``oclAsType``.
    """
    kind: OperationKind
    nested: Optional["Scope"] = None
    concept: Optional[ClassExpression] = None


@dataclass(frozen=True)
class IteratorFrame:
    """``select`` whose condition lives in ``nested``."""
    nested: "Scope"


@dataclass(frozen=True)
class LiteralFrame:
    value: bool


Frame = Union[PropertyFrame, OperationFrame, IteratorFrame, LiteralFrame]


@dataclass(eq=False)
class Scope:
    """
    Ordered frames of one chain.

    Attributes:
        variable: Variable the chain starts from (``self`` or an iterator variable).
        variable_type: Static type of that variable.
        parent: Enclosing scope, None for the constraint's root.
        frames: Frames in visiting order.
        depth: Nesting depth, 0 for the root.
    """
    variable: str
    variable_type: Optional[ResolvedType]
    parent: Optional["Scope"] = field(default=None, repr=False)
    frames: List[Frame] = field(default_factory=list)
    depth: int = 0

    def push(self, frame: Frame) -> None:
        self.frames.append(frame)

    def child(self, variable: Optional[str] = None, variable_type: Optional[ResolvedType] = None) -> "Scope":
        """Open a nested scope; it inherits the variable unless a new one is given."""
        if variable is None:
            variable, variable_type = self.variable, self.variable_type
        return Scope(variable, variable_type, parent=self, depth=self.depth + 1)


def _declaring_class(cls: ClassEntity, attribute: AttributeEntity) -> ClassEntity:
    for candidate in [cls] + cls.all_supertypes():
        if any(a is attribute for a in candidate.attributes):
            return candidate
    return cls


_COMBINATORS = frozenset({OperationKind.AND, OperationKind.OR, OperationKind.XOR, OperationKind.IMPLIES})
_EMPTINESS = frozenset({OperationKind.NOT_EMPTY, OperationKind.IS_EMPTY})
_TYPE_TESTS = frozenset({OperationKind.OCL_IS_TYPE_OF, OperationKind.OCL_IS_KIND_OF})


# =============================================================================
# Builder
# =============================================================================

class ScopeBuilder:
    """
    Build the scope tree of a normalized constraint.

    Args:
        model: Model the constraint's features are looked up in.
        naming: Naming scheme producing role and concept identifiers.
        context: Class the constraint is attached to (the type of ``self``).
        max_depth: Maximum scope nesting.
    """

    def __init__(
        self,
        model: EntityModel,
        naming: NamingScheme,
        context: ClassEntity,
        max_depth: int = NormalizerLimits.MAX_SCOPE_DEPTH,
    ):
        self.model = model
        self.naming = naming
        self.context = context
        self.max_depth = max_depth

    def build(self, expression: OclExpression) -> Scope:
        """
        Build the root scope of ``expression``.

        Raises:
            UnsupportedConstraintError: If the expression leaves the resolvable fragment.
        """
        root = Scope(SELF, ResolvedType(TypeKind.CLASS, self.context.name or "", self.context))
        self._visit(expression, root)
        return root

    def _open(self, scope: Scope, variable: Optional[str] = None,
              variable_type: Optional[ResolvedType] = None) -> Scope:
        nested = scope.child(variable, variable_type)
        if nested.depth > self.max_depth:
            raise UnsupportedConstraintError(f"Constraint nests more than {self.max_depth} scopes")
        return nested

    def _visit(self, expr: OclExpression, scope: Scope) -> Optional[ResolvedType]:
        """Push the frames of ``expr``; return its static type (None for booleans)."""
        if isinstance(expr, VariableExp):
            return self._visit_variable(expr, scope)
        if isinstance(expr, PropertyCallExp):
            return self._visit_property(expr, scope)
        if isinstance(expr, OperationCallExp):
            return self._visit_operation(expr, scope)
        if isinstance(expr, IteratorExp):
            return self._visit_iterator(expr, scope)
        if isinstance(expr, LiteralExp) and expr.type_name == "Boolean":
            scope.push(LiteralFrame(bool(expr.value)))
            return None
        if isinstance(expr, CollectionLiteralExp) and len(expr.items) == 1:
            return self._visit(expr.items[0], scope)
        raise UnsupportedConstraintError(f"Unsupported expression: {type(expr).__name__}")

    @staticmethod
    def _visit_variable(expr: VariableExp, scope: Scope) -> Optional[ResolvedType]:
        if expr.name != scope.variable:
            raise UnsupportedConstraintError(
                f"Navigation from '{expr.name}' inside the scope of '{scope.variable}' has no DL counterpart"
            )
        return scope.variable_type

    def _visit_property(self, expr: PropertyCallExp, scope: Scope) -> ResolvedType:
        source_type = self._visit(expr.source, scope)
        if source_type is None or source_type.kind != TypeKind.CLASS:
            raise UnsupportedConstraintError(f"Cannot navigate '{expr.name}' from a non-class value")

        cls = source_type.entity
        feature = cls.find_feature(expr.name)
        if feature is None:
            raise UnsupportedConstraintError(f"Class {cls.name} has no feature '{expr.name}'")

        if isinstance(feature, AttributeEntity):
            resolved = self.model.resolve_type(feature.type)
            if resolved is None:
                raise UnsupportedConstraintError(f"Attribute {cls.name}.{expr.name} has no resolvable type")
            owner = _declaring_class(cls, feature).name
            if resolved.is_datatype:
                scope.push(PropertyFrame(self.naming.data_role(owner, feature.name)))
            else:
                scope.push(PropertyFrame(self.naming.object_role(owner, feature.name)))
            return resolved

        owner = feature.owner.name if feature.owner is not None else cls.name
        scope.push(PropertyFrame(self.naming.object_role(owner, feature.name)))
        target = feature.target
        return ResolvedType(TypeKind.CLASS, target.name or "", target)

    def _visit_operation(self, expr: OperationCallExp, scope: Scope) -> Optional[ResolvedType]:
        kind = expr.kind
        if kind == OperationKind.NOT:
            self._visit(expr.source, scope)
            scope.push(OperationFrame(kind))
            return None

        if kind in _COMBINATORS:
            self._visit(expr.source, scope)
            nested = self._open(scope)
            self._visit(expr.arguments[0], nested)
            scope.push(OperationFrame(kind, nested=nested))
            return None

        if kind in _EMPTINESS:
            self._visit(expr.source, scope)
            scope.push(OperationFrame(kind))
            return None

        if kind in _TYPE_TESTS or kind == OperationKind.OCL_AS_TYPE:
            self._visit(expr.source, scope)
            resolved = self._type_argument(expr)
            scope.push(OperationFrame(kind, concept=self.naming.type_concept(resolved)))
            if kind == OperationKind.OCL_AS_TYPE:
                return resolved
            return None

        raise UnsupportedConstraintError(f"Operation '{expr.name}' is not supported")

    def _type_argument(self, expr: OperationCallExp) -> ResolvedType:
        if len(expr.arguments) != 1 or not isinstance(expr.arguments[0], TypeExp):
            raise UnsupportedConstraintError(f"'{expr.name}' expects one type argument")
        name = expr.arguments[0].simple_name
        resolved = self.model.resolve_type(name)
        if resolved is None or resolved.is_datatype:
            raise UnsupportedConstraintError(f"Unknown class or enumeration '{name}' in '{expr.name}'")
        return resolved

    def _visit_iterator(self, expr: IteratorExp, scope: Scope) -> Optional[ResolvedType]:
        if expr.kind != IteratorKind.SELECT:
            raise UnsupportedConstraintError(f"Iterator '{expr.name}' is not supported")

        element_type = self._visit(expr.source, scope)
        if expr.variable_type:
            declared = self.model.resolve_type(expr.variable_type.rsplit("::", 1)[-1])
            if declared is not None and not declared.is_datatype:
                element_type = declared
        nested = self._open(scope, expr.variable, element_type)
        self._visit(expr.body, nested)
        scope.push(IteratorFrame(nested))
        return element_type
