"""
Constraint normalizer.

Turns the text of one class invariant into a DL class expression:

1. parse the text;
2. rewrite, print and re-parse until the printed text no longer changes
   (bounded by ``max_iterations``; a repeated earlier text is reported as
   oscillation);
3. build the scope tree of the normalized expression against the model;
4. resolve the scopes into a class expression.

Usage:
    normalizer = ConstraintNormalizer(model, naming)
    result = normalizer.normalize("self.children->forAll(c | c.active)")
    result.text        # "self.children->select(c | not c.active)->isEmpty()"
    expression = normalizer.to_class_expression(result.source, order_class)
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ecore_dl.constants import NormalizerLimits
from ecore_dl.core.exceptions import ConstraintError, FixpointNotReachedError
from ecore_dl.core.naming import NamingScheme
from ecore_dl.formats.ocl.ast import OclExpression
from ecore_dl.formats.ocl.parser import ConstraintParser
from ecore_dl.formats.ocl.printer import print_expression
from ecore_dl.normalizer.frames import Scope, ScopeBuilder
from ecore_dl.normalizer.resolver import resolve
from ecore_dl.normalizer.rewriter import rewrite
from ecore_dl.shared.models.axioms import ClassExpression
from ecore_dl.shared.models.entity_model import ClassEntity, EntityModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedConstraint:
    """
    Fixpoint of the rewrite loop.

    Attributes:
        source: Original constraint text.
        text: Printed normalized form.
        expression: Normalized tree (parsed from ``text``).
        iterations: Number of rewrite rounds that changed the text.
    """
    source: str
    text: str
    expression: OclExpression
    iterations: int


class ConstraintNormalizer:
    """
    Normalize and resolve constraints of one model.

    Args:
        model: Model whose features constraints navigate.
        naming: Naming scheme shared with the compiler.
        max_iterations: Bound of the normalize/print/reparse loop.
        max_depth: Bound of scope nesting.
        sound_size_rewrite: Rewrite only the size comparisons equivalent to an
            emptiness test; other size comparisons become unsupported.
    """

    def __init__(
        self,
        model: EntityModel,
        naming: NamingScheme,
        max_iterations: int = NormalizerLimits.MAX_FIXPOINT_ITERATIONS,
        max_depth: int = NormalizerLimits.MAX_SCOPE_DEPTH,
        parser: Optional[ConstraintParser] = None,
        sound_size_rewrite: bool = False,
    ):
        self.model = model
        self.naming = naming
        self.max_iterations = max_iterations
        self.max_depth = max_depth
        self.parser = parser or ConstraintParser()
        self.sound_size_rewrite = sound_size_rewrite

    def normalize(self, text: str) -> NormalizedConstraint:
        """
        Rewrite ``text`` to its fixpoint.

        Raises:
            ConstraintSyntaxError: If the text (or a printed intermediate) does not parse.
            FixpointNotReachedError: If the text keeps changing after ``max_iterations``
                rounds or comes back to an earlier form.
        """
        expression = self.parser.parse(text)
        current = print_expression(expression)
        seen = {current}

        for iteration in range(self.max_iterations):
            printed = print_expression(rewrite(expression, sound_size=self.sound_size_rewrite))
            if printed == current:
                logger.debug(f"Constraint normalized after {iteration} round(s): {printed}")
                return NormalizedConstraint(text, printed, expression, iteration)
            if printed in seen:
                raise FixpointNotReachedError(
                    f"Normalization oscillates between earlier forms: {printed}",
                    expression=text,
                    iterations=iteration + 1,
                )
            seen.add(printed)
            current = printed
            expression = self.parser.parse(printed)

        raise FixpointNotReachedError(
            f"Normalization did not reach a fixpoint within {self.max_iterations} rounds",
            expression=text,
            iterations=self.max_iterations,
        )

    def build_scope(self, normalized: NormalizedConstraint, context: ClassEntity) -> Scope:
        return ScopeBuilder(self.model, self.naming, context, self.max_depth).build(normalized.expression)

    def to_class_expression(self, text: str, context: ClassEntity) -> ClassExpression:
        """
        Normalize ``text`` in the context of ``context`` and resolve it.

        Raises:
            ConstraintError: If the constraint cannot be expressed.
        """
        return self.resolve_normalized(self.normalize(text), context)

    def resolve_normalized(self, normalized: NormalizedConstraint, context: ClassEntity) -> ClassExpression:
        """Resolve an already normalized constraint in the context of ``context``."""
        try:
            scope = self.build_scope(normalized, context)
            return resolve(scope, self.max_depth)
        except ConstraintError as e:
            if e.expression is None:
                e.expression = normalized.source
            raise
