"""
Resolution of a scope tree into a DL class expression.

Frames are consumed from the end of a scope towards its start, carrying
an accumulated filler built by the frames already consumed:

    Property(r)          ∃r.(filler or ⊤), then continue
    Iterator(nested)     filler := resolve(nested) (⊓ filler), then continue
    not                  ¬(rest)
    and / or             rest ⊓ nested / rest ⊔ nested
    implies              ¬rest ⊔ nested
    xor                  (rest ⊓ ¬nested) ⊔ (¬rest ⊓ nested)
    notEmpty             rest
    isEmpty              ¬rest
    oclIsTypeOf(T)       filler := T, then continue
    oclAsType(T)         filler := T ⊓ filler, then continue
    true / false         ⊤ / ⊥

where "rest" is the resolution of the frames before the current one.
The functions hold no state; resolving the same scope twice gives equal
expressions.
"""

from typing import Callable, Dict, Optional, Sequence

from ecore_dl.constants import NormalizerLimits
from ecore_dl.core.exceptions import UnsupportedConstraintError
from ecore_dl.formats.ocl.ast import OperationKind
from ecore_dl.normalizer.frames import Frame, IteratorFrame, LiteralFrame, OperationFrame, PropertyFrame, Scope
from ecore_dl.shared.models.axioms import (
    NOTHING,
    THING,
    ClassExpression,
    DataSomeValuesFrom,
    ObjectSomeValuesFrom,
    complement_of,
    intersection_of,
    union_of,
)

Filler = Optional[ClassExpression]


def resolve(scope: Scope, max_depth: int = NormalizerLimits.MAX_SCOPE_DEPTH) -> ClassExpression:
    """
    Resolve ``scope`` and its nested scopes.

    Raises:
        UnsupportedConstraintError: If the frames do not form a resolvable shape.
    """
    if scope.depth > max_depth:
        raise UnsupportedConstraintError(f"Constraint nests more than {max_depth} scopes")
    return _resolve_frames(tuple(scope.frames), None, max_depth)


def _resolve_frames(frames: Sequence[Frame], filler: Filler, max_depth: int) -> ClassExpression:
    if not frames:
        return filler if filler is not None else THING
    top, rest = frames[-1], frames[:-1]

    if isinstance(top, PropertyFrame):
        return _resolve_frames(rest, _navigate(top, filler), max_depth)

    if isinstance(top, IteratorFrame):
        condition = resolve(top.nested, max_depth)
        combined = intersection_of(condition, filler) if filler is not None else condition
        return _resolve_frames(rest, combined, max_depth)

    if isinstance(top, LiteralFrame):
        if rest:
            raise UnsupportedConstraintError("A boolean literal cannot be navigated")
        return THING if top.value else NOTHING

    handler = _OPERATION_HANDLERS.get(top.kind)
    if handler is None:
        raise UnsupportedConstraintError(f"Operation '{top.kind.value}' cannot be resolved")
    return handler(top, rest, filler, max_depth)


def _navigate(frame: PropertyFrame, filler: Filler) -> ClassExpression:
    if frame.is_data:
        if filler is not None:
            raise UnsupportedConstraintError("Navigation continues past a datatype-valued attribute")
        return DataSomeValuesFrom(frame.role)
    return ObjectSomeValuesFrom(frame.role, filler if filler is not None else THING)


def _boolean_rest(frame: OperationFrame, rest: Sequence[Frame], filler: Filler, max_depth: int) -> ClassExpression:
    if filler is not None:
        raise UnsupportedConstraintError(f"The result of '{frame.kind.value}' cannot be navigated")
    return _resolve_frames(rest, None, max_depth)


# =============================================================================
# Operation handlers
# =============================================================================

def _not(frame, rest, filler, max_depth):
    return complement_of(_boolean_rest(frame, rest, filler, max_depth))


def _and(frame, rest, filler, max_depth):
    return intersection_of(_boolean_rest(frame, rest, filler, max_depth), resolve(frame.nested, max_depth))


def _or(frame, rest, filler, max_depth):
    return union_of(_boolean_rest(frame, rest, filler, max_depth), resolve(frame.nested, max_depth))


def _implies(frame, rest, filler, max_depth):
    premise = _boolean_rest(frame, rest, filler, max_depth)
    return union_of(complement_of(premise), resolve(frame.nested, max_depth))


def _xor(frame, rest, filler, max_depth):
    left = _boolean_rest(frame, rest, filler, max_depth)
    right = resolve(frame.nested, max_depth)
    return union_of(
        intersection_of(left, complement_of(right)),
        intersection_of(complement_of(left), right),
    )


def _not_empty(frame, rest, filler, max_depth):
    return _resolve_frames(rest, filler, max_depth)


def _is_empty(frame, rest, filler, max_depth):
    return complement_of(_resolve_frames(rest, filler, max_depth))


def _is_type_of(frame, rest, filler, max_depth):
    return _resolve_frames(rest, frame.concept, max_depth)


def _as_type(frame, rest, filler, max_depth):
    narrowed = intersection_of(frame.concept, filler) if filler is not None else frame.concept
    return _resolve_frames(rest, narrowed, max_depth)


_OPERATION_HANDLERS: Dict[OperationKind, Callable[..., ClassExpression]] = {
    OperationKind.NOT: _not,
    OperationKind.AND: _and,
    OperationKind.OR: _or,
    OperationKind.IMPLIES: _implies,
    OperationKind.XOR: _xor,
    OperationKind.NOT_EMPTY: _not_empty,
    OperationKind.IS_EMPTY: _is_empty,
    OperationKind.OCL_IS_TYPE_OF: _is_type_of,
    OperationKind.OCL_IS_KIND_OF: _is_type_of,
    OperationKind.OCL_AS_TYPE: _as_type,
}
