"""
Rewrite rules bringing a constraint tree into the resolvable fragment.

    src->exists(x | c)              src->select(x | c)->notEmpty()
    src->forAll(x | c)              src->select(x | not c)->isEmpty()
    src->reject(x | c)              src->select(x | not c)
    src->select(a | c1)->select(b | c2)
                                    src->select(a | c1 and c2[b := a])
    src->size() > n                 src->notEmpty()
    src->size() <op> n              src->isEmpty()   (any other comparison)
    not src->isEmpty()              src->notEmpty()
    not src->notEmpty()             src->isEmpty()
    not not c                       c

With ``sound_size=True`` only the size comparisons that are equivalent to
an emptiness test are rewritten:

    src->size() > 0  (>= 1, <> 0)   src->notEmpty()
    src->size() = 0  (< 1, <= 0)    src->isEmpty()

and every other size comparison is left in place, so the constraint is
later rejected as unsupported.

Negation never stacks on an emptiness test: negating ``notEmpty`` gives
``isEmpty`` and the other way round. ``rewrite`` is one bottom-up pass;
the normalizer repeats it through print and re-parse until the text is
stable.
"""

from dataclasses import replace
from functools import partial
from typing import Callable, Dict, Optional, Tuple

from ecore_dl.formats.ocl.ast import (
    IteratorExp,
    IteratorKind,
    LiteralExp,
    OclExpression,
    OperationCallExp,
    OperationKind,
    VariableExp,
    arrow_call,
    binary,
    free_variables,
    map_children,
    not_,
    substitute,
)

_EMPTINESS_FLIP = {
    OperationKind.NOT_EMPTY.value: OperationKind.IS_EMPTY.value,
    OperationKind.IS_EMPTY.value: OperationKind.NOT_EMPTY.value,
}

# Sound subset: (comparison operator, integer operand) -> emptiness test of ``size()``
_SIZE_COMPARISONS: Dict[Tuple[str, int], OperationKind] = {
    (">", 0): OperationKind.NOT_EMPTY,
    (">=", 1): OperationKind.NOT_EMPTY,
    ("<>", 0): OperationKind.NOT_EMPTY,
    ("=", 0): OperationKind.IS_EMPTY,
    ("<", 1): OperationKind.IS_EMPTY,
    ("<=", 0): OperationKind.IS_EMPTY,
}


def negate(expr: OclExpression) -> OclExpression:
    """Negation of ``expr`` without stacking redundant ``not``."""
    if isinstance(expr, OperationCallExp):
        if expr.name in _EMPTINESS_FLIP and not expr.arguments:
            return replace(expr, name=_EMPTINESS_FLIP[expr.name])
        if expr.kind == OperationKind.NOT:
            return expr.source
    return not_(expr)


# =============================================================================
# Iterator rules
# =============================================================================

def _rewrite_exists(expr: IteratorExp) -> OclExpression:
    selection = replace(expr, name=IteratorKind.SELECT.value)
    return arrow_call(selection, OperationKind.NOT_EMPTY.value)


def _rewrite_for_all(expr: IteratorExp) -> OclExpression:
    selection = replace(expr, name=IteratorKind.SELECT.value, body=negate(expr.body))
    return arrow_call(selection, OperationKind.IS_EMPTY.value)


def _rewrite_reject(expr: IteratorExp) -> OclExpression:
    return replace(expr, name=IteratorKind.SELECT.value, body=negate(expr.body))


def _rewrite_select(expr: IteratorExp) -> OclExpression:
    inner = expr.source
    if not (isinstance(inner, IteratorExp) and inner.kind == IteratorKind.SELECT):
        return expr
    # Renaming the outer variable must not capture an unrelated binding.
    if inner.variable != expr.variable and inner.variable in free_variables(expr.body):
        return expr
    body = substitute(expr.body, expr.variable, VariableExp(inner.variable))
    merged = binary(inner.body, OperationKind.AND.value, body)
    return replace(inner, body=merged)


_ITERATOR_RULES: Dict[IteratorKind, Callable[[IteratorExp], OclExpression]] = {
    IteratorKind.EXISTS: _rewrite_exists,
    IteratorKind.FOR_ALL: _rewrite_for_all,
    IteratorKind.REJECT: _rewrite_reject,
    IteratorKind.SELECT: _rewrite_select,
}


# =============================================================================
# Operation rules
# =============================================================================

_COMPARISONS = frozenset({
    OperationKind.GREATER,
    OperationKind.GREATER_EQUAL,
    OperationKind.NOT_EQUAL,
    OperationKind.EQUAL,
    OperationKind.LESS,
    OperationKind.LESS_EQUAL,
})


def _size_source(expr: OclExpression) -> Optional[OclExpression]:
    if isinstance(expr, OperationCallExp) and expr.kind == OperationKind.SIZE and not expr.arguments:
        return expr.source
    return None


def _size_test(operator: str, operand: int, sound: bool) -> Optional[OperationKind]:
    if sound:
        return _SIZE_COMPARISONS.get((operator, operand))
    if operator == OperationKind.GREATER.value:
        return OperationKind.NOT_EMPTY
    return OperationKind.IS_EMPTY


def _rewrite_comparison(expr: OperationCallExp, sound_size: bool) -> OclExpression:
    if len(expr.arguments) != 1:
        return expr
    source = _size_source(expr.source)
    operand = expr.arguments[0]
    if source is None or not isinstance(operand, LiteralExp) or operand.type_name != "Integer":
        return expr
    target = _size_test(expr.name, operand.value, sound_size)
    if target is None:
        return expr
    return arrow_call(source, target.value)


def _rewrite_not(expr: OperationCallExp) -> OclExpression:
    if expr.arguments:
        return expr
    return negate(expr.source)


def rewrite(expr: OclExpression, sound_size: bool = False) -> OclExpression:
    """
    Apply every rule once, children before parents.

    Args:
        expr: Expression to rewrite.
        sound_size: Rewrite only the size comparisons equivalent to an
            emptiness test instead of the whole historical table.
    """
    expr = map_children(expr, partial(rewrite, sound_size=sound_size))
    if isinstance(expr, IteratorExp):
        rule = _ITERATOR_RULES.get(expr.kind)
        if rule is not None:
            return rule(expr)
    elif isinstance(expr, OperationCallExp):
        if expr.kind == OperationKind.NOT:
            return _rewrite_not(expr)
        if expr.kind in _COMPARISONS:
            return _rewrite_comparison(expr, sound_size)
    return expr
