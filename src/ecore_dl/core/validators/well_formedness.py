"""
Well-formedness validation of an EntityModel.

The check runs before compilation and repairs what can be repaired:

- nameless classes, enumerations, attributes, operations, parameters and
  association ends receive generated names (``class_0``, ``enumeration_0``,
  ``attribute_0``, ``method_0``, ``parameter_0``, ``association_0``) and a
  diagnostic is recorded;
- embedded spaces are removed from every name.

Anything else is fatal and raised as a ``ModelError`` subclass:

- attribute without a resolvable type (``TypelessAttributeError``);
- operation parameter or return type that cannot be resolved
  (``TypelessParameterError``);
- association end without opposite (``MissingOppositeError``) or whose
  opposite does not point back (``OppositeMismatchError``);
- multiplicity violations (``InvalidMultiplicityError``): upper bound 0 or
  below -1, negative lower bound, finite upper bound below the lower bound;
- two classifiers sharing a name after repair (``DuplicateNameError``).

Usage:
    checker = WellFormednessChecker()
    diagnostics = checker.check(model)
    for message in diagnostics:
        print(message)
"""

import logging
from typing import List, Optional, Union

from ecore_dl.constants import GeneratedNames
from ecore_dl.core.exceptions import (
    DuplicateNameError,
    InvalidMultiplicityError,
    MissingOppositeError,
    OppositeMismatchError,
    TypelessAttributeError,
    TypelessParameterError,
)
from ecore_dl.shared.models.entity_model import (
    UNBOUNDED,
    AttributeEntity,
    ClassEntity,
    EntityModel,
    OperationEntity,
    ReferenceEntity,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Diagnostic messages
# =============================================================================

NAMELESS_CLASS = "There was a nameless class, the name {name} was assigned to it"
NAMELESS_ATTRIBUTE = "There was a nameless attribute in class {owner}, the name {name} was assigned to it"
NAMELESS_METHOD = "There was a nameless operation in class {owner}, the name {name} was assigned to it"
NAMELESS_PARAMETER = "There was a nameless parameter in operation {owner}, the name {name} was assigned to it"
NAMELESS_ASSOCIATION = "There was a nameless association end in class {owner}, the name {name} was assigned to it"
NAMELESS_ENUMERATION = "There was a nameless enumeration, the name {name} was assigned to it"


def is_blank_name(name: Optional[str]) -> bool:
    """True for names treated as missing."""
    return name is None or name in GeneratedNames.BLANK_NAMES or not name.strip()


def strip_spaces(name: str) -> str:
    return name.replace(" ", "")


class WellFormednessChecker:
    """
    Validate and repair an EntityModel in place.

    Each call to ``check`` starts its name counters at zero, so checking two
    models with one checker gives the same generated names as two checkers.
    """

    def __init__(self):
        self._counters = {}
        self.diagnostics: List[str] = []

    def check(self, model: EntityModel) -> List[str]:
        """
        Validate ``model``.

        Args:
            model: The model to validate; repaired names are written back.

        Returns:
            Recoverable diagnostics, in discovery order.

        Raises:
            ModelError: On the first unrecoverable defect.
        """
        self._counters = {}
        self.diagnostics = []

        classes = model.translatable_classes()
        logger.debug(f"Checking well-formedness of {len(classes)} classes in package '{model.package}'")

        for cls in classes:
            self._check_class(model, cls)
        for cls in classes:
            for reference in cls.references:
                self._check_reference(cls, reference)
        self._check_enumerations(model)
        self._check_unique_names(model)

        if self.diagnostics:
            logger.info(f"Well-formedness check repaired {len(self.diagnostics)} defect(s)")
        return list(self.diagnostics)

    # -------------------------------------------------------------------------
    # Naming
    # -------------------------------------------------------------------------

    def _generated(self, prefix: str) -> str:
        count = self._counters.get(prefix, 0)
        self._counters[prefix] = count + 1
        return f"{prefix}{count}"

    def _repair_name(self, element, prefix: str, template: str, owner: Optional[str] = None) -> None:
        if is_blank_name(element.name):
            element.name = self._generated(prefix)
            message = template.format(name=element.name, owner=owner)
            self.diagnostics.append(message)
            logger.warning(message, extra={"element": element.name})
        element.name = strip_spaces(element.name)

    # -------------------------------------------------------------------------
    # Classes
    # -------------------------------------------------------------------------

    def _check_class(self, model: EntityModel, cls: ClassEntity) -> None:
        self._repair_name(cls, GeneratedNames.CLASS, NAMELESS_CLASS)

        for attribute in cls.attributes:
            self._repair_name(attribute, GeneratedNames.ATTRIBUTE, NAMELESS_ATTRIBUTE, cls.name)
            if model.resolve_type(attribute.type) is None:
                raise TypelessAttributeError(
                    f"Attribute {cls.name}.{attribute.name} has no resolvable type",
                    element=f"{cls.name}.{attribute.name}",
                    details={"type": repr(attribute.type)},
                )
            self._check_multiplicity(f"{cls.name}.{attribute.name}", attribute)

        for operation in cls.operations:
            self._check_operation(model, cls, operation)

    def _check_operation(self, model: EntityModel, cls: ClassEntity, operation: OperationEntity) -> None:
        self._repair_name(operation, GeneratedNames.METHOD, NAMELESS_METHOD, cls.name)
        qualified = f"{cls.name}.{operation.name}"

        if model.resolve_type(operation.return_type) is None:
            raise TypelessParameterError(
                f"Operation {qualified} has no resolvable return type",
                element=qualified,
                details={"type": repr(operation.return_type)},
            )
        for parameter in operation.parameters:
            self._repair_name(parameter, GeneratedNames.PARAMETER, NAMELESS_PARAMETER, qualified)
            if model.resolve_type(parameter.type) is None:
                raise TypelessParameterError(
                    f"Parameter {parameter.name} of operation {qualified} has no resolvable type",
                    element=f"{qualified}({parameter.name})",
                    details={"type": repr(parameter.type)},
                )

    # -------------------------------------------------------------------------
    # Associations
    # -------------------------------------------------------------------------

    def _check_reference(self, cls: ClassEntity, reference: ReferenceEntity) -> None:
        self._repair_name(reference, GeneratedNames.ASSOCIATION, NAMELESS_ASSOCIATION, cls.name)
        qualified = f"{cls.name}.{reference.name}"

        if reference.opposite is None:
            raise MissingOppositeError(
                f"Association end {qualified} has no opposite",
                element=qualified,
            )
        if reference.opposite.opposite is not reference:
            raise OppositeMismatchError(
                f"Association ends {qualified} and {reference.opposite.name} are not opposite to each other",
                element=qualified,
            )
        if reference.target is None:
            raise MissingOppositeError(
                f"Association end {qualified} has no target class",
                element=qualified,
            )
        self._check_multiplicity(qualified, reference)

    @staticmethod
    def _check_multiplicity(qualified: str, element: Union[AttributeEntity, ReferenceEntity]) -> None:
        lower, upper = element.lower, element.upper
        problem = None
        if upper == 0:
            problem = "upper bound is 0"
        elif upper < UNBOUNDED:
            problem = f"upper bound {upper} is below -1"
        elif lower < 0:
            problem = f"lower bound {lower} is negative"
        elif upper > 0 and lower > 0 and upper < lower:
            problem = f"upper bound {upper} is below lower bound {lower}"

        if problem:
            raise InvalidMultiplicityError(
                f"Multiplicity error in {qualified}: {problem}",
                element=qualified,
                details={"lower": lower, "upper": upper},
            )

    # -------------------------------------------------------------------------
    # Enumerations and uniqueness
    # -------------------------------------------------------------------------

    def _check_enumerations(self, model: EntityModel) -> None:
        for enum in model.enumerations:
            self._repair_name(enum, GeneratedNames.ENUMERATION, NAMELESS_ENUMERATION)
            enum.literals = [strip_spaces(literal) for literal in enum.literals]

    @staticmethod
    def _check_unique_names(model: EntityModel) -> None:
        seen = set()
        for classifier in list(model.translatable_classes()) + list(model.enumerations):
            if classifier.name in seen:
                raise DuplicateNameError(
                    f"Classifier name '{classifier.name}' is used more than once in package '{model.package}'",
                    element=classifier.name,
                )
            seen.add(classifier.name)
