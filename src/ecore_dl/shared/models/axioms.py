"""
Description Logic class expressions, entities and axioms.

All values are immutable and hashable so that an axiom set can be a plain
``set`` (no duplicates, order irrelevant). Identifiers are rdflib
``URIRef`` values built by ``ecore_dl.core.naming.NamingScheme``.

Constructors of n-ary expressions go through the helper functions at the
bottom of the module (``intersection_of``, ``union_of``, ``complement_of``)
which collapse degenerate cases: a one-operand intersection is the operand
itself and a double complement cancels out.
"""

from dataclasses import dataclass, fields, is_dataclass
from typing import FrozenSet, Iterable, Iterator, Optional, Union

from rdflib import OWL, RDFS, URIRef


# =============================================================================
# Entities
# =============================================================================

@dataclass(frozen=True)
class DLObject:
    """Common base of every expression, entity and axiom."""

    def __str__(self) -> str:
        from ecore_dl.formats.owl.renderer import render_dl
        return render_dl(self)


@dataclass(frozen=True)
class ObjectProperty(DLObject):
    iri: URIRef


@dataclass(frozen=True)
class ObjectInverseOf(DLObject):
    property: ObjectProperty


ObjectPropertyExpression = Union[ObjectProperty, ObjectInverseOf]


@dataclass(frozen=True)
class DataProperty(DLObject):
    iri: URIRef


@dataclass(frozen=True)
class Datatype(DLObject):
    iri: URIRef


@dataclass(frozen=True)
class NamedIndividual(DLObject):
    iri: URIRef


RDFS_LITERAL = Datatype(URIRef(RDFS.Literal))


# =============================================================================
# Class expressions
# =============================================================================

@dataclass(frozen=True)
class ClassExpression(DLObject):
    """Base of all class expressions."""


@dataclass(frozen=True)
class NamedClass(ClassExpression):
    iri: URIRef


THING = NamedClass(URIRef(OWL.Thing))
NOTHING = NamedClass(URIRef(OWL.Nothing))


@dataclass(frozen=True)
class ObjectComplementOf(ClassExpression):
    operand: ClassExpression


@dataclass(frozen=True)
class ObjectIntersectionOf(ClassExpression):
    operands: FrozenSet[ClassExpression]


@dataclass(frozen=True)
class ObjectUnionOf(ClassExpression):
    operands: FrozenSet[ClassExpression]


@dataclass(frozen=True)
class ObjectOneOf(ClassExpression):
    individuals: FrozenSet[NamedIndividual]


@dataclass(frozen=True)
class ObjectSomeValuesFrom(ClassExpression):
    property: ObjectPropertyExpression
    filler: ClassExpression = THING


@dataclass(frozen=True)
class ObjectAllValuesFrom(ClassExpression):
    property: ObjectPropertyExpression
    filler: ClassExpression


@dataclass(frozen=True)
class ObjectMinCardinality(ClassExpression):
    property: ObjectPropertyExpression
    cardinality: int
    filler: Optional[ClassExpression] = None


@dataclass(frozen=True)
class ObjectMaxCardinality(ClassExpression):
    property: ObjectPropertyExpression
    cardinality: int
    filler: Optional[ClassExpression] = None


@dataclass(frozen=True)
class ObjectExactCardinality(ClassExpression):
    property: ObjectPropertyExpression
    cardinality: int
    filler: Optional[ClassExpression] = None


@dataclass(frozen=True)
class DataSomeValuesFrom(ClassExpression):
    property: DataProperty
    filler: Datatype = RDFS_LITERAL


@dataclass(frozen=True)
class DataAllValuesFrom(ClassExpression):
    property: DataProperty
    filler: Datatype


@dataclass(frozen=True)
class DataMinCardinality(ClassExpression):
    property: DataProperty
    cardinality: int
    filler: Optional[Datatype] = None


@dataclass(frozen=True)
class DataMaxCardinality(ClassExpression):
    property: DataProperty
    cardinality: int
    filler: Optional[Datatype] = None


CARDINALITY_TYPES = (
    ObjectMinCardinality, ObjectMaxCardinality, ObjectExactCardinality,
    DataMinCardinality, DataMaxCardinality,
)


# =============================================================================
# Axioms
# =============================================================================

@dataclass(frozen=True)
class Axiom(DLObject):
    """Base of the four axiom kinds."""


@dataclass(frozen=True)
class SubClassOf(Axiom):
    sub: ClassExpression
    sup: ClassExpression


@dataclass(frozen=True)
class EquivalentClasses(Axiom):
    expressions: FrozenSet[ClassExpression]


@dataclass(frozen=True)
class DisjointClasses(Axiom):
    expressions: FrozenSet[ClassExpression]


@dataclass(frozen=True)
class InverseObjectProperties(Axiom):
    properties: FrozenSet[ObjectProperty]


# =============================================================================
# Construction helpers
# =============================================================================

def intersection_of(*operands: ClassExpression) -> ClassExpression:
    """``A ⊓ B ⊓ ...``; a single distinct operand is returned unchanged."""
    unique = frozenset(operands)
    if not unique:
        return THING
    if len(unique) == 1:
        return next(iter(unique))
    return ObjectIntersectionOf(unique)


def union_of(*operands: ClassExpression) -> ClassExpression:
    """``A ⊔ B ⊔ ...``; a single distinct operand is returned unchanged."""
    unique = frozenset(operands)
    if not unique:
        return NOTHING
    if len(unique) == 1:
        return next(iter(unique))
    return ObjectUnionOf(unique)


def complement_of(operand: ClassExpression) -> ClassExpression:
    if isinstance(operand, ObjectComplementOf):
        return operand.operand
    return ObjectComplementOf(operand)


def one_of(individuals: Iterable[NamedIndividual]) -> ObjectOneOf:
    return ObjectOneOf(frozenset(individuals))


def equivalent_classes(*expressions: ClassExpression) -> EquivalentClasses:
    return EquivalentClasses(frozenset(expressions))


def disjoint_classes(*expressions: ClassExpression) -> DisjointClasses:
    return DisjointClasses(frozenset(expressions))


def inverse_properties(first: ObjectProperty, second: ObjectProperty) -> InverseObjectProperties:
    return InverseObjectProperties(frozenset((first, second)))


def iter_entities(obj: DLObject) -> Iterator[DLObject]:
    """Yield every named entity referenced by an expression or axiom."""
    if isinstance(obj, (NamedClass, ObjectProperty, DataProperty, Datatype, NamedIndividual)):
        yield obj
        return
    for f in fields(obj):
        value = getattr(obj, f.name)
        if isinstance(value, frozenset):
            for item in value:
                yield from iter_entities(item)
        elif is_dataclass(value) and isinstance(value, DLObject):
            yield from iter_entities(value)
