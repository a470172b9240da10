"""
Metamodel to Description Logic axiom compiler.

This module walks a (validated) EntityModel and emits the axiom set that
describes it:

- attributes: a typing axiom ``C ⊑ ∀a.T`` plus cardinality restrictions;
- operations: a return role for parameterless operations, a reified tuple
  concept with "this" and parameter roles otherwise;
- enumerations: a concept equivalent to the nominal of its literals;
- invariants: ``C ⊑ E`` where ``E`` is the normalized constraint;
- inheritance: ``S ⊑ P`` (plus sibling disjointness and covering in
  ``GeneralizationMode.DISJOINT_COVERING``);
- associations: range axioms, inverse roles and cardinality restrictions
  taken from the opposite end.

Axioms are collected in a set, so compiling the same model twice yields
the same result. Constraints outside the supported fragment are skipped
and reported; model defects propagate as ``ModelError``.

Usage:
    compiler = AxiomCompiler(ConverterConfig(ontology_iri="http://example.org/onto"))
    result = compiler.compile(model)
    print(result.get_summary())
    for axiom in result.axioms:
        print(axiom)
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Set, Tuple, Union

from tqdm import tqdm

from ecore_dl.constants import InstanceLimits
from ecore_dl.core.config import ConverterConfig, GeneralizationMode
from ecore_dl.core.exceptions import (
    ConstraintError,
    ContractViolationError,
    MissingOppositeError,
    OppositeMismatchError,
)
from ecore_dl.core.naming import NamingScheme
from ecore_dl.normalizer.constraint_normalizer import ConstraintNormalizer
from ecore_dl.shared.models.axioms import (
    NOTHING,
    THING,
    Axiom,
    ClassExpression,
    DataAllValuesFrom,
    DataMaxCardinality,
    DataMinCardinality,
    DataProperty,
    DataSomeValuesFrom,
    ObjectAllValuesFrom,
    ObjectInverseOf,
    ObjectMaxCardinality,
    ObjectMinCardinality,
    ObjectProperty,
    ObjectSomeValuesFrom,
    SubClassOf,
    complement_of,
    disjoint_classes,
    equivalent_classes,
    intersection_of,
    inverse_properties,
    one_of,
    union_of,
)
from ecore_dl.shared.models.entity_model import (
    UNBOUNDED,
    AttributeEntity,
    ClassEntity,
    EntityModel,
    EnumEntity,
    OperationEntity,
    ReferenceEntity,
    ResolvedType,
    TypeRef,
)

logger = logging.getLogger(__name__)

Role = Union[ObjectProperty, DataProperty]


# =============================================================================
# Results
# =============================================================================

@dataclass
class SkippedConstraint:
    """An invariant that contributed no axiom."""
    class_name: str
    name: str
    expression: str
    reason: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "class": self.class_name,
            "name": self.name,
            "expression": self.expression,
            "reason": self.reason,
        }


@dataclass
class CompilationResult:
    """
    Output of one compilation.

    Attributes:
        axioms: The axiom set.
        diagnostics: Recoverable defects reported before compilation.
        skipped_constraints: Invariants that could not be translated.
        constraint_reports: Normalized text per ``(class, invariant)``.
    """
    axioms: FrozenSet[Axiom]
    diagnostics: List[str] = field(default_factory=list)
    skipped_constraints: List[SkippedConstraint] = field(default_factory=list)
    constraint_reports: Dict[Tuple[str, str], str] = field(default_factory=dict)

    @property
    def axiom_count(self) -> int:
        return len(self.axioms)

    def axioms_of_type(self, axiom_type: type) -> List[Axiom]:
        return [a for a in self.axioms if isinstance(a, axiom_type)]

    def get_summary(self) -> str:
        """Generate human-readable summary of the compilation."""
        counts: Dict[str, int] = {}
        for axiom in self.axioms:
            name = type(axiom).__name__
            counts[name] = counts.get(name, 0) + 1

        lines = [
            "Compilation Summary:",
            f"  ✓ Axioms: {len(self.axioms)}",
        ]
        for name in sorted(counts):
            lines.append(f"      - {name}: {counts[name]}")
        lines.append(f"  ✓ Constraints translated: {len(self.constraint_reports)}")

        if self.skipped_constraints:
            lines.append(f"  ⚠ Skipped constraints: {len(self.skipped_constraints)}")
            for item in self.skipped_constraints[:5]:
                lines.append(f"      - {item.class_name}::{item.name}: {item.reason}")
            if len(self.skipped_constraints) > 5:
                lines.append(f"      ... and {len(self.skipped_constraints) - 5} more")

        if self.diagnostics:
            lines.append(f"  ⚠ Diagnostics: {len(self.diagnostics)}")
            for message in self.diagnostics[:3]:
                lines.append(f"      - {message}")
            if len(self.diagnostics) > 3:
                lines.append(f"      ... and {len(self.diagnostics) - 3} more")

        return "\n".join(lines)


# =============================================================================
# Compiler
# =============================================================================

class AxiomCompiler:
    """
    Compile an EntityModel into a set of DL axioms.

    The compiler is stateless between calls; every ``compile`` builds its
    own naming scheme, normalizer and axiom accumulator.

    Args:
        config: Converter settings; defaults to ``ConverterConfig()``.
    """

    def __init__(self, config: Optional[ConverterConfig] = None):
        self.config = config or ConverterConfig()

    def naming_for(self, model: EntityModel) -> NamingScheme:
        return NamingScheme(self.config.ontology_iri, model.package)

    def compile(self, model: EntityModel, diagnostics: Optional[List[str]] = None) -> CompilationResult:
        """
        Translate ``model`` into axioms.

        Args:
            model: A model that passed ``WellFormednessChecker.check``.
            diagnostics: Recoverable diagnostics to carry into the result.

        Returns:
            CompilationResult holding the axiom set and skipped constraints.

        Raises:
            ModelError: If association ends are missing or not mutually opposite.
            ContractViolationError: If a type reference cannot be resolved.
        """
        run = _CompilationRun(model, self.config, self.naming_for(model))
        run.execute()

        logger.info(
            f"Compiled package '{model.package}': {len(run.axioms)} axioms, "
            f"{len(run.reports)} constraints translated, {len(run.skipped)} skipped"
        )
        return CompilationResult(
            axioms=frozenset(run.axioms),
            diagnostics=list(diagnostics or []),
            skipped_constraints=run.skipped,
            constraint_reports=run.reports,
        )


class _CompilationRun:
    """Mutable state of one ``AxiomCompiler.compile`` call."""

    def __init__(self, model: EntityModel, config: ConverterConfig, naming: NamingScheme):
        self.model = model
        self.config = config
        self.naming = naming
        self.normalizer = ConstraintNormalizer(
            model,
            naming,
            max_iterations=config.max_fixpoint_iterations,
            max_depth=config.max_scope_depth,
            sound_size_rewrite=config.sound_size_rewrite,
        )
        self.axioms: Set[Axiom] = set()
        self.skipped: List[SkippedConstraint] = []
        self.reports: Dict[Tuple[str, str], str] = {}

    def execute(self) -> None:
        classes = self.model.translatable_classes()
        for cls in tqdm(
            classes,
            desc="Compiling classes",
            unit="class",
            disable=not self.config.show_progress or len(classes) < InstanceLimits.PROGRESS_THRESHOLD,
        ):
            logger.debug(f"Compiling class {cls.name}")
            self.compile_attributes(cls)
            self.compile_operations(cls)
            self.compile_invariants(cls)
            self.compile_inheritance(cls)

        if self.config.generalization_mode == GeneralizationMode.DISJOINT_COVERING:
            for cls in classes:
                self.compile_covering(cls)

        for enum in self.model.enumerations:
            self.compile_enumeration(enum)

        self.compile_associations()

    def add(self, axiom: Axiom) -> None:
        self.axioms.add(axiom)

    # -------------------------------------------------------------------------
    # Types and roles
    # -------------------------------------------------------------------------

    def resolve(self, ref: TypeRef, element: str) -> ResolvedType:
        resolved = self.model.resolve_type(ref)
        if resolved is None:
            raise ContractViolationError(f"Type of {element} cannot be resolved: {ref!r}")
        return resolved

    def typed_role(self, iri, resolved: ResolvedType) -> Role:
        if resolved.is_datatype:
            return DataProperty(iri)
        return ObjectProperty(iri)

    def all_values(self, role: Role, resolved: ResolvedType) -> ClassExpression:
        if isinstance(role, DataProperty):
            return DataAllValuesFrom(role, self.naming.datatype(resolved))
        return ObjectAllValuesFrom(role, self.naming.type_concept(resolved))

    def some_values(self, role: Role, resolved: Optional[ResolvedType] = None) -> ClassExpression:
        if isinstance(role, DataProperty):
            if resolved is None:
                return DataSomeValuesFrom(role)
            return DataSomeValuesFrom(role, self.naming.datatype(resolved))
        if resolved is None:
            return ObjectSomeValuesFrom(role, THING)
        return ObjectSomeValuesFrom(role, self.naming.type_concept(resolved))

    @staticmethod
    def min_cardinality(role: Role, n: int) -> ClassExpression:
        if isinstance(role, DataProperty):
            return DataMinCardinality(role, n)
        return ObjectMinCardinality(role, n)

    @staticmethod
    def max_cardinality(role: Role, n: int) -> ClassExpression:
        if isinstance(role, DataProperty):
            return DataMaxCardinality(role, n)
        return ObjectMaxCardinality(role, n)

    # -------------------------------------------------------------------------
    # Attributes
    # -------------------------------------------------------------------------

    def compile_attributes(self, cls: ClassEntity) -> None:
        concept = self.naming.class_concept(cls.name)
        for attribute in cls.attributes:
            resolved = self.resolve(attribute.type, f"attribute {cls.name}.{attribute.name}")
            iri = self.naming.role_iri(cls.name, attribute.name)
            role = self.typed_role(iri, resolved)

            self.add(SubClassOf(concept, self.all_values(role, resolved)))
            restriction = self.attribute_cardinality(attribute, role, resolved)
            if restriction is not None:
                self.add(SubClassOf(concept, restriction))

    def attribute_cardinality(
        self,
        attribute: AttributeEntity,
        role: Role,
        resolved: ResolvedType,
    ) -> Optional[ClassExpression]:
        """
        Cardinality restriction of an attribute, or None.

        ``[l..*]`` and ``[0..u]`` produce independent restrictions, which
        are intersected only when both exist. ``[1..1]`` produces existence
        plus functionality. Other bounded ranges produce ``≥n ⊓ ≤upper``
        where ``n`` is the upper bound unless
        ``attribute_min_from_lower_bound`` is set.
        """
        lower, upper = attribute.lower, attribute.upper

        if lower == 0 or upper == UNBOUNDED:
            parts = []
            if lower > 0:
                parts.append(self.min_cardinality(role, lower))
            if upper != UNBOUNDED:
                parts.append(self.max_cardinality(role, upper))
            return intersection_of(*parts) if parts else None

        if lower == 1 and upper == 1:
            return intersection_of(self.some_values(role, resolved), self.max_cardinality(role, 1))

        minimum = lower if self.config.attribute_min_from_lower_bound else upper
        return intersection_of(self.min_cardinality(role, minimum), self.max_cardinality(role, upper))

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def compile_operations(self, cls: ClassEntity) -> None:
        for operation in cls.operations:
            if operation.parameters:
                self.compile_reified_operation(cls, operation)
            else:
                self.compile_simple_operation(cls, operation)

    def compile_simple_operation(self, cls: ClassEntity, operation: OperationEntity) -> None:
        """``C ⊑ ∀r_f.R ⊓ ≤1 r_f`` through the return role."""
        returned = self.resolve(operation.return_type, f"return type of {cls.name}.{operation.name}")
        role = self.typed_role(
            self.naming.return_role_iri(cls.name, operation.name, returned.name), returned
        )
        self.add(SubClassOf(
            self.naming.class_concept(cls.name),
            intersection_of(self.all_values(role, returned), self.max_cardinality(role, 1)),
        ))

    def compile_reified_operation(self, cls: ClassEntity, operation: OperationEntity) -> None:
        """
        Reify ``f(p1, ..., pn): R`` of ``C`` as the tuple concept ``C_f``.

        - ``C_f ⊑ ∃this.C ⊓ ≤1 this``
        - ``C_f ⊑ ∃p_i ⊓ ≤1 p_i`` for each parameter
        - ``C_f ⊑ ∀p_1.T_1 ⊓ ... ⊓ ∀p_n.T_n``
        - ``C ⊑ ∀this⁻.(¬C_f ⊔ ∀ret.R)``
        """
        qualified = f"{cls.name}.{operation.name}"
        returned = self.resolve(operation.return_type, f"return type of {qualified}")
        concept = self.naming.class_concept(cls.name)
        tuple_concept = self.naming.operation_concept(cls.name, operation.name, returned.name)

        this_role = self.naming.this_role(cls.name)
        self.add(SubClassOf(
            tuple_concept,
            intersection_of(ObjectSomeValuesFrom(this_role, concept), ObjectMaxCardinality(this_role, 1)),
        ))

        typing = []
        for parameter in operation.parameters:
            resolved = self.resolve(parameter.type, f"parameter {parameter.name} of {qualified}")
            role = self.typed_role(
                self.naming.parameter_role_iri(cls.name, operation.name, parameter.name), resolved
            )
            self.add(SubClassOf(
                tuple_concept,
                intersection_of(self.some_values(role), self.max_cardinality(role, 1)),
            ))
            typing.append(self.all_values(role, resolved))
        self.add(SubClassOf(tuple_concept, intersection_of(*typing)))

        return_role = self.typed_role(
            self.naming.return_role_iri(cls.name, operation.name, returned.name), returned
        )
        implication = union_of(complement_of(tuple_concept), self.all_values(return_role, returned))
        self.add(SubClassOf(concept, ObjectAllValuesFrom(ObjectInverseOf(this_role), implication)))

    # -------------------------------------------------------------------------
    # Enumerations
    # -------------------------------------------------------------------------

    def compile_enumeration(self, enum: EnumEntity) -> None:
        concept = self.naming.enumeration_concept(enum.name)
        if not enum.literals:
            self.add(equivalent_classes(concept, NOTHING))
            return
        individuals = [self.naming.literal_individual(literal) for literal in enum.literals]
        self.add(equivalent_classes(concept, one_of(individuals)))

    # -------------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------------

    def compile_invariants(self, cls: ClassEntity) -> None:
        concept = self.naming.class_concept(cls.name)
        for name, text in cls.invariants():
            try:
                normalized = self.normalizer.normalize(text)
                expression = self.normalizer.resolve_normalized(normalized, cls)
            except ConstraintError as e:
                logger.warning(
                    f"Skipping constraint {cls.name}::{name}: {e}",
                    extra={"class_name": cls.name, "constraint": name},
                )
                self.skipped.append(SkippedConstraint(cls.name, name, text, str(e)))
                continue
            self.reports[(cls.name, name)] = normalized.text
            self.add(SubClassOf(concept, expression))
            logger.debug(f"Constraint {cls.name}::{name} normalized to {normalized.text}")

    # -------------------------------------------------------------------------
    # Inheritance
    # -------------------------------------------------------------------------

    def compile_inheritance(self, cls: ClassEntity) -> None:
        concept = self.naming.class_concept(cls.name)
        translatable = self.model.translatable_classes()
        for supertype in cls.supertypes:
            if not any(supertype is c for c in translatable):
                continue
            self.add(SubClassOf(concept, self.naming.class_concept(supertype.name)))

    def compile_covering(self, cls: ClassEntity) -> None:
        """Sibling disjointness and covering of ``cls`` by its direct subclasses."""
        subclasses = [self.naming.class_concept(s.name) for s in self.model.direct_subclasses(cls)]
        if len(subclasses) >= 2:
            self.add(disjoint_classes(*subclasses))
        if subclasses:
            self.add(SubClassOf(self.naming.class_concept(cls.name), union_of(*subclasses)))

    # -------------------------------------------------------------------------
    # Associations
    # -------------------------------------------------------------------------

    def compile_associations(self) -> None:
        references = self.model.references()
        processed: Set[int] = set()

        for reference in tqdm(
            references,
            desc="Compiling associations",
            unit="reference",
            disable=not self.config.show_progress or len(references) < InstanceLimits.PROGRESS_THRESHOLD,
        ):
            if id(reference) in processed:
                continue
            opposite = self.opposite_of(reference)
            processed.add(id(reference))
            processed.add(id(opposite))
            self.compile_association(reference, opposite)

    @staticmethod
    def opposite_of(reference: ReferenceEntity) -> ReferenceEntity:
        qualified = f"{reference.owner.name if reference.owner else '?'}.{reference.name}"
        opposite = reference.opposite
        if opposite is None:
            raise MissingOppositeError(f"Association end {qualified} has no opposite", element=qualified)
        if opposite.opposite is not reference:
            raise OppositeMismatchError(
                f"Association ends {qualified} and {opposite.name} are not opposite to each other",
                element=qualified,
            )
        return opposite

    def end_role(self, reference: ReferenceEntity) -> ObjectProperty:
        if reference.owner is None or reference.target is None:
            raise ContractViolationError(f"Association end {reference.name} is not attached to two classes")
        return self.naming.object_role(reference.owner.name, reference.name)

    def compile_association(self, left: ReferenceEntity, right: ReferenceEntity) -> None:
        """
        Emit the axioms of the association ``left``/``right``.

        Both roles are typed by their target class and declared inverse.
        The class owning each end is restricted on that end's role with the
        bounds of the opposite end.
        """
        left_role = self.end_role(left)
        right_role = self.end_role(right)

        self.add(SubClassOf(THING, intersection_of(
            ObjectAllValuesFrom(left_role, self.naming.class_concept(left.target.name)),
            ObjectAllValuesFrom(right_role, self.naming.class_concept(right.target.name)),
        )))
        self.add(inverse_properties(left_role, right_role))

        for end, bounds in ((left, right), (right, left)):
            restriction = self.association_cardinality(self.end_role(end), bounds.lower, bounds.upper)
            if restriction is not None:
                self.add(SubClassOf(self.naming.class_concept(end.owner.name), restriction))

    @staticmethod
    def association_cardinality(role: ObjectProperty, lower: int, upper: int) -> Optional[ClassExpression]:
        parts = []
        if lower > 0:
            parts.append(ObjectMinCardinality(role, lower))
        if upper != UNBOUNDED:
            parts.append(ObjectMaxCardinality(role, upper))
        if not parts:
            return None
        return intersection_of(*parts)
