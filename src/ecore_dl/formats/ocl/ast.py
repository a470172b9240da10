"""
Abstract syntax tree of the constraint language (an OCL subset).

Nodes are immutable and compare structurally, so a tree printed and parsed
again compares equal to the original. Binary and unary operators are
represented as ``OperationCallExp`` whose source is the left operand:

    a and b      OperationCallExp(a, "and", (b,))
    not a        OperationCallExp(a, "not")
    s->size()    OperationCallExp(s, "size", (), arrow=True)
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Tuple, Union


class OperationKind(str, Enum):
    """Operations with a meaning in the rewrite and resolution tables."""
    NOT = "not"
    AND = "and"
    OR = "or"
    XOR = "xor"
    IMPLIES = "implies"
    NOT_EMPTY = "notEmpty"
    IS_EMPTY = "isEmpty"
    SIZE = "size"
    OCL_IS_TYPE_OF = "oclIsTypeOf"
    OCL_IS_KIND_OF = "oclIsKindOf"
    OCL_AS_TYPE = "oclAsType"
    EQUAL = "="
    NOT_EQUAL = "<>"
    LESS = "<"
    GREATER = ">"
    LESS_EQUAL = "<="
    GREATER_EQUAL = ">="

    @classmethod
    def lookup(cls, name: str) -> Optional["OperationKind"]:
        return _OPERATION_KINDS.get(name)


_OPERATION_KINDS = {kind.value: kind for kind in OperationKind}


class IteratorKind(str, Enum):
    SELECT = "select"
    REJECT = "reject"
    EXISTS = "exists"
    FOR_ALL = "forAll"
    COLLECT = "collect"
    ANY = "any"
    ONE = "one"
    IS_UNIQUE = "isUnique"
    CLOSURE = "closure"

    @classmethod
    def lookup(cls, name: str) -> Optional["IteratorKind"]:
        return _ITERATOR_KINDS.get(name)


_ITERATOR_KINDS = {kind.value: kind for kind in IteratorKind}

TYPE_ARGUMENT_OPERATIONS = frozenset({
    OperationKind.OCL_IS_TYPE_OF.value,
    OperationKind.OCL_IS_KIND_OF.value,
    OperationKind.OCL_AS_TYPE.value,
})
"""Operations whose single argument is a type name."""

COLLECTION_KINDS = frozenset({"Set", "Bag", "Sequence", "OrderedSet"})


# =============================================================================
# Nodes
# =============================================================================

@dataclass(frozen=True)
class OclExpression:
    """Base of all nodes."""


@dataclass(frozen=True)
class VariableExp(OclExpression):
    name: str


@dataclass(frozen=True)
class PropertyCallExp(OclExpression):
    source: OclExpression
    name: str


@dataclass(frozen=True)
class OperationCallExp(OclExpression):
    source: OclExpression
    name: str
    arguments: Tuple[OclExpression, ...] = ()
    arrow: bool = False

    @property
    def kind(self) -> Optional[OperationKind]:
        return OperationKind.lookup(self.name)


@dataclass(frozen=True)
class IteratorExp(OclExpression):
    source: OclExpression
    name: str
    variable: str
    body: OclExpression
    variable_type: Optional[str] = None

    @property
    def kind(self) -> Optional[IteratorKind]:
        return IteratorKind.lookup(self.name)


@dataclass(frozen=True)
class LiteralExp(OclExpression):
    """A primitive literal; ``type_name`` keeps ``true`` and ``1`` apart."""
    value: Union[bool, int, float, str, None]
    type_name: str = ""

    def __post_init__(self):
        if not self.type_name:
            object.__setattr__(self, "type_name", literal_type_name(self.value))


def literal_type_name(value) -> str:
    if value is None:
        return "OclVoid"
    if isinstance(value, bool):
        return "Boolean"
    if isinstance(value, int):
        return "Integer"
    if isinstance(value, float):
        return "Real"
    return "String"


@dataclass(frozen=True)
class TypeExp(OclExpression):
    """A (possibly qualified) type or enumeration literal path."""
    name: str

    @property
    def simple_name(self) -> str:
        return self.name.rsplit("::", 1)[-1]


@dataclass(frozen=True)
class CollectionLiteralExp(OclExpression):
    kind: str
    items: Tuple[OclExpression, ...] = ()


# =============================================================================
# Helpers
# =============================================================================

def not_(expr: OclExpression) -> OperationCallExp:
    return OperationCallExp(expr, OperationKind.NOT.value)


def binary(left: OclExpression, operator: str, right: OclExpression) -> OperationCallExp:
    return OperationCallExp(left, operator, (right,))


def arrow_call(source: OclExpression, name: str, *arguments: OclExpression) -> OperationCallExp:
    return OperationCallExp(source, name, tuple(arguments), arrow=True)


def map_children(expr: OclExpression, fn: Callable[[OclExpression], OclExpression]) -> OclExpression:
    """Return ``expr`` with ``fn`` applied to each direct child."""
    if isinstance(expr, PropertyCallExp):
        return replace(expr, source=fn(expr.source))
    if isinstance(expr, OperationCallExp):
        return replace(expr, source=fn(expr.source), arguments=tuple(fn(a) for a in expr.arguments))
    if isinstance(expr, IteratorExp):
        return replace(expr, source=fn(expr.source), body=fn(expr.body))
    if isinstance(expr, CollectionLiteralExp):
        return replace(expr, items=tuple(fn(i) for i in expr.items))
    return expr


def free_variables(expr: OclExpression) -> frozenset:
    """Names of variables used but not bound inside ``expr``."""
    if isinstance(expr, VariableExp):
        return frozenset({expr.name})
    if isinstance(expr, IteratorExp):
        return free_variables(expr.source) | (free_variables(expr.body) - {expr.variable})
    if isinstance(expr, PropertyCallExp):
        return free_variables(expr.source)
    if isinstance(expr, OperationCallExp):
        result = free_variables(expr.source)
        for argument in expr.arguments:
            result |= free_variables(argument)
        return result
    if isinstance(expr, CollectionLiteralExp):
        result = frozenset()
        for item in expr.items:
            result |= free_variables(item)
        return result
    return frozenset()


def substitute(expr: OclExpression, name: str, replacement: OclExpression) -> OclExpression:
    """Replace free occurrences of variable ``name``."""
    if isinstance(expr, VariableExp):
        return replacement if expr.name == name else expr
    if isinstance(expr, IteratorExp) and expr.variable == name:
        return replace(expr, source=substitute(expr.source, name, replacement))
    return map_children(expr, lambda child: substitute(child, name, replacement))


def children(expr: OclExpression) -> Tuple[OclExpression, ...]:
    """Direct children of ``expr``, sources first."""
    if isinstance(expr, PropertyCallExp):
        return (expr.source,)
    if isinstance(expr, OperationCallExp):
        return (expr.source,) + expr.arguments
    if isinstance(expr, IteratorExp):
        return (expr.source, expr.body)
    if isinstance(expr, CollectionLiteralExp):
        return expr.items
    return ()


def expression_depth(expr: OclExpression) -> int:
    """Number of nodes on the longest root-to-leaf path, computed without recursion."""
    deepest = 0
    pending = [(expr, 1)]
    while pending:
        node, depth = pending.pop()
        deepest = max(deepest, depth)
        pending.extend((child, depth + 1) for child in children(node))
    return deepest
