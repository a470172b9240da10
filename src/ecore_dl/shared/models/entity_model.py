"""
In-memory metamodel consumed by the validator and the axiom compiler.

The model mirrors the subset of Ecore the translation understands: classes
with attributes, operations, references (association ends) and supertypes,
plus enumerations. It is populated by an external loader (see
``ecore_dl.core.interfaces.ModelLoader``) or built directly in code:

    order = ClassEntity("Order")
    item = ClassEntity("Item")
    items = ReferenceEntity("items", target=item, lower=0, upper=UNBOUNDED)
    order_ref = ReferenceEntity("order", target=order, lower=1, upper=1)
    link_opposites(items, order_ref)
    order.add_reference(items)
    item.add_reference(order_ref)
    model = EntityModel("shop", classes=[order, item])

Entities compare by identity: opposites and supertypes form cycles, and
the well-formedness check repairs names in place.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union

from ecore_dl.constants import DATATYPE_TAGS, XSD_NAMESPACE, ConstraintSources, ReservedNames

UNBOUNDED = -1
"""Upper bound value meaning "many"."""


# =============================================================================
# Classifiers
# =============================================================================

@dataclass(eq=False)
class EnumEntity:
    """
    An enumeration.

    Attributes:
        name: Enumeration name.
        literals: Ordered literal names.
    """
    name: Optional[str]
    literals: List[str] = field(default_factory=list)


TypeRef = Union[str, "ClassEntity", EnumEntity, None]
"""A declared type: a primitive tag or classifier name, a classifier, or nothing."""


@dataclass(eq=False)
class AttributeEntity:
    """
    A typed attribute of a class.

    Attributes:
        name: Attribute name.
        type: Declared type (primitive tag such as ``EInt``, class or enum).
        lower: Lower bound (>= 0).
        upper: Upper bound (``UNBOUNDED`` or >= lower).
    """
    name: Optional[str]
    type: TypeRef = None
    lower: int = 0
    upper: int = 1


@dataclass(eq=False)
class ParameterEntity:
    """An operation parameter."""
    name: Optional[str]
    type: TypeRef = None


@dataclass(eq=False)
class OperationEntity:
    """
    An operation signature.

    Attributes:
        name: Operation name.
        return_type: Declared return type.
        parameters: Ordered parameter list.
    """
    name: Optional[str]
    return_type: TypeRef = None
    parameters: List[ParameterEntity] = field(default_factory=list)


@dataclass(eq=False)
class ReferenceEntity:
    """
    One end of a bidirectional association.

    Attributes:
        name: Reference name.
        target: Class reached by navigating the reference.
        lower: Lower bound.
        upper: Upper bound.
        opposite: The reference navigating back.
        owner: Class declaring the reference, set by ``ClassEntity``.
    """
    name: Optional[str]
    target: Optional["ClassEntity"] = field(default=None, repr=False)
    lower: int = 0
    upper: int = UNBOUNDED
    opposite: Optional["ReferenceEntity"] = field(default=None, repr=False)
    owner: Optional["ClassEntity"] = field(default=None, repr=False)


AssociationEntity = ReferenceEntity


def link_opposites(first: ReferenceEntity, second: ReferenceEntity) -> None:
    """Make two references each other's opposite."""
    first.opposite = second
    second.opposite = first


@dataclass
class ConstraintAnnotation:
    """
    Annotation attached to a class.

    Only annotations whose ``source`` is an OCL delegate URI carry
    invariants; each ``details`` entry maps an invariant name to its text.
    """
    source: str
    details: Dict[str, str] = field(default_factory=dict)

    @property
    def holds_constraints(self) -> bool:
        return self.source in ConstraintSources.ACCEPTED


@dataclass(eq=False)
class ClassEntity:
    """
    A class of the metamodel.

    Attributes:
        name: Class name, unique within the package.
        attributes: Own attributes.
        operations: Own operations.
        references: Own association ends.
        supertypes: Direct superclasses.
        annotations: Annotations, some of which hold invariants.
        abstract: Whether the class is abstract (informational).
    """
    name: Optional[str]
    attributes: List[AttributeEntity] = field(default_factory=list)
    operations: List[OperationEntity] = field(default_factory=list)
    references: List[ReferenceEntity] = field(default_factory=list)
    supertypes: List["ClassEntity"] = field(default_factory=list, repr=False)
    annotations: List[ConstraintAnnotation] = field(default_factory=list)
    abstract: bool = False

    def __post_init__(self):
        for reference in self.references:
            reference.owner = self

    def add_attribute(self, attribute: AttributeEntity) -> AttributeEntity:
        self.attributes.append(attribute)
        return attribute

    def add_operation(self, operation: OperationEntity) -> OperationEntity:
        self.operations.append(operation)
        return operation

    def add_reference(self, reference: ReferenceEntity) -> ReferenceEntity:
        reference.owner = self
        self.references.append(reference)
        return reference

    def add_invariant(self, name: str, expression: str, source: str = ConstraintSources.OCL_PIVOT) -> None:
        """Attach an invariant, grouping it with existing details of the same source."""
        for annotation in self.annotations:
            if annotation.source == source:
                annotation.details[name] = expression
                return
        self.annotations.append(ConstraintAnnotation(source, {name: expression}))

    def invariants(self) -> Iterator[Tuple[str, str]]:
        """Yield ``(name, expression)`` for every constraint-bearing detail."""
        for annotation in self.annotations:
            if annotation.holds_constraints:
                yield from annotation.details.items()

    # -------------------------------------------------------------------------
    # Inheritance closure
    # -------------------------------------------------------------------------

    def all_supertypes(self) -> List["ClassEntity"]:
        """Transitive superclasses, nearest first, without repetition."""
        result: List[ClassEntity] = []
        queue = list(self.supertypes)
        while queue:
            current = queue.pop(0)
            if current is self or any(current is seen for seen in result):
                continue
            result.append(current)
            queue.extend(current.supertypes)
        return result

    def find_feature(self, name: str) -> Union[AttributeEntity, ReferenceEntity, None]:
        """Look up an attribute or reference by name, own features first."""
        for cls in [self] + self.all_supertypes():
            for attribute in cls.attributes:
                if attribute.name == name:
                    return attribute
            for reference in cls.references:
                if reference.name == name:
                    return reference
        return None


# =============================================================================
# Type resolution
# =============================================================================

class TypeKind(str, Enum):
    DATATYPE = "datatype"
    CLASS = "class"
    ENUM = "enum"


@dataclass(frozen=True)
class ResolvedType:
    """
    A declared type after lookup.

    Attributes:
        kind: Datatype, class or enumeration.
        name: Classifier name or primitive tag.
        entity: The classifier, for classes and enumerations.
        xsd_iri: Full XSD datatype IRI, for datatypes.
    """
    kind: TypeKind
    name: str
    entity: Union[ClassEntity, EnumEntity, None] = field(default=None, compare=False)
    xsd_iri: Optional[str] = None

    @property
    def is_datatype(self) -> bool:
        return self.kind == TypeKind.DATATYPE


@dataclass
class EntityModel:
    """
    A package of classes and enumerations.

    Attributes:
        package: Package name, the ``P`` of every generated identifier.
        classes: Classes of the package.
        enumerations: Enumerations of the package.
    """
    package: str
    classes: List[ClassEntity] = field(default_factory=list)
    enumerations: List[EnumEntity] = field(default_factory=list)

    def find_class(self, name: str) -> Optional[ClassEntity]:
        for cls in self.classes:
            if cls.name == name:
                return cls
        return None

    def find_enum(self, name: str) -> Optional[EnumEntity]:
        for enum in self.enumerations:
            if enum.name == name:
                return enum
        return None

    def translatable_classes(self) -> List[ClassEntity]:
        """Classes except reserved container classes."""
        return [c for c in self.classes if c.name not in ReservedNames.CONTAINER_CLASSES]

    def references(self) -> List[ReferenceEntity]:
        """Every association end declared by a translatable class."""
        result: List[ReferenceEntity] = []
        for cls in self.translatable_classes():
            result.extend(cls.references)
        return result

    def direct_subclasses(self, cls: ClassEntity) -> List[ClassEntity]:
        return [c for c in self.translatable_classes() if any(s is cls for s in c.supertypes)]

    def resolve_type(self, ref: TypeRef) -> Optional[ResolvedType]:
        """
        Resolve a declared type.

        Strings are looked up as primitive tags first, then as class and
        enumeration names of this package.

        Returns:
            The resolved type, or None when the type is missing or unknown.
        """
        if ref is None:
            return None
        if isinstance(ref, ClassEntity):
            return ResolvedType(TypeKind.CLASS, ref.name or "", ref)
        if isinstance(ref, EnumEntity):
            return ResolvedType(TypeKind.ENUM, ref.name or "", ref)
        if isinstance(ref, str):
            if ref in DATATYPE_TAGS:
                return ResolvedType(TypeKind.DATATYPE, ref, None, XSD_NAMESPACE + DATATYPE_TAGS[ref])
            cls = self.find_class(ref)
            if cls is not None:
                return ResolvedType(TypeKind.CLASS, cls.name or "", cls)
            enum = self.find_enum(ref)
            if enum is not None:
                return ResolvedType(TypeKind.ENUM, enum.name or "", enum)
        return None
