"""
Textual rendering of class expressions and axioms.

Two notations are available:

- ``render_dl``: Description Logic symbols (``⊑ ⊓ ⊔ ¬ ∃ ∀ ≥ ≤``), used
  for reports and ``str()`` of every DL value;
- ``render_manchester``: Manchester syntax keywords (``SubClassOf``,
  ``and``, ``some``, ``only``...), used when printing reasoner
  explanations.

Identifiers are printed through the same naming scheme that built them:
with ``short=True`` (default) only the local name after ``#`` is shown,
otherwise the full IRI in angle brackets. Operands of n-ary expressions are
sorted by their rendering, so equal sets always render the same text.
"""

from typing import Callable, Iterable

from rdflib import OWL, RDFS, XSD

from ecore_dl.core.naming import NamingScheme
from ecore_dl.shared.models.axioms import (
    DataAllValuesFrom,
    DataMaxCardinality,
    DataMinCardinality,
    DataProperty,
    DataSomeValuesFrom,
    Datatype,
    DisjointClasses,
    DLObject,
    EquivalentClasses,
    InverseObjectProperties,
    NamedClass,
    NamedIndividual,
    ObjectAllValuesFrom,
    ObjectComplementOf,
    ObjectExactCardinality,
    ObjectIntersectionOf,
    ObjectInverseOf,
    ObjectMaxCardinality,
    ObjectMinCardinality,
    ObjectOneOf,
    ObjectProperty,
    ObjectSomeValuesFrom,
    ObjectUnionOf,
    SubClassOf,
)

_NARY = (ObjectIntersectionOf, ObjectUnionOf)


def _identifier(iri: str, short: bool) -> str:
    if str(iri).startswith(str(XSD)):
        return f"xsd:{str(iri)[len(str(XSD)):]}"
    if iri == RDFS.Literal:
        return "rdfs:Literal"
    if short:
        return NamingScheme.short_name(iri)
    return f"<{iri}>"


def _sorted(parts: Iterable[str]) -> list:
    return sorted(parts)


class _Renderer:
    """Shared traversal; subclasses supply the notation."""

    def __init__(self, short: bool):
        self.short = short

    def render(self, obj: DLObject) -> str:
        method: Callable = getattr(self, f"_{type(obj).__name__}", None)
        if method is None:
            raise TypeError(f"Cannot render {type(obj).__name__}")
        return method(obj)

    def wrap(self, obj: DLObject) -> str:
        text = self.render(obj)
        if isinstance(obj, _NARY):
            return f"({text})"
        return text

    def name(self, iri) -> str:
        return _identifier(iri, self.short)

    def _ObjectProperty(self, obj: ObjectProperty) -> str:
        return self.name(obj.iri)

    def _DataProperty(self, obj: DataProperty) -> str:
        return self.name(obj.iri)

    def _Datatype(self, obj: Datatype) -> str:
        return self.name(obj.iri)

    def _NamedIndividual(self, obj: NamedIndividual) -> str:
        return self.name(obj.iri)

    def _ObjectOneOf(self, obj: ObjectOneOf) -> str:
        return "{" + ", ".join(_sorted(self.render(i) for i in obj.individuals)) + "}"


class DLRenderer(_Renderer):
    """Description Logic notation."""

    def _NamedClass(self, obj: NamedClass) -> str:
        if obj.iri == OWL.Thing:
            return "⊤"
        if obj.iri == OWL.Nothing:
            return "⊥"
        return self.name(obj.iri)

    def _ObjectInverseOf(self, obj: ObjectInverseOf) -> str:
        return f"{self.render(obj.property)}⁻"

    def _ObjectComplementOf(self, obj: ObjectComplementOf) -> str:
        return f"¬{self.wrap(obj.operand)}"

    def _ObjectIntersectionOf(self, obj: ObjectIntersectionOf) -> str:
        return " ⊓ ".join(_sorted(self.wrap(o) for o in obj.operands))

    def _ObjectUnionOf(self, obj: ObjectUnionOf) -> str:
        return " ⊔ ".join(_sorted(self.wrap(o) for o in obj.operands))

    def _ObjectSomeValuesFrom(self, obj: ObjectSomeValuesFrom) -> str:
        return f"∃{self.render(obj.property)}.{self.wrap(obj.filler)}"

    def _ObjectAllValuesFrom(self, obj: ObjectAllValuesFrom) -> str:
        return f"∀{self.render(obj.property)}.{self.wrap(obj.filler)}"

    def _DataSomeValuesFrom(self, obj: DataSomeValuesFrom) -> str:
        return f"∃{self.render(obj.property)}.{self.render(obj.filler)}"

    def _DataAllValuesFrom(self, obj: DataAllValuesFrom) -> str:
        return f"∀{self.render(obj.property)}.{self.render(obj.filler)}"

    def _cardinality(self, symbol: str, obj) -> str:
        text = f"{symbol}{obj.cardinality} {self.render(obj.property)}"
        if obj.filler is not None:
            text += f".{self.wrap(obj.filler)}"
        return text

    def _ObjectMinCardinality(self, obj) -> str:
        return self._cardinality("≥", obj)

    def _ObjectMaxCardinality(self, obj) -> str:
        return self._cardinality("≤", obj)

    def _ObjectExactCardinality(self, obj) -> str:
        return self._cardinality("=", obj)

    def _DataMinCardinality(self, obj) -> str:
        return self._cardinality("≥", obj)

    def _DataMaxCardinality(self, obj) -> str:
        return self._cardinality("≤", obj)

    def _SubClassOf(self, obj: SubClassOf) -> str:
        return f"{self.render(obj.sub)} ⊑ {self.render(obj.sup)}"

    def _EquivalentClasses(self, obj: EquivalentClasses) -> str:
        return " ≡ ".join(_sorted(self.wrap(e) for e in obj.expressions))

    def _DisjointClasses(self, obj: DisjointClasses) -> str:
        return "Disjoint(" + ", ".join(_sorted(self.render(e) for e in obj.expressions)) + ")"

    def _InverseObjectProperties(self, obj: InverseObjectProperties) -> str:
        names = _sorted(self.render(p) for p in obj.properties)
        if len(names) == 1:
            return f"{names[0]} ≡ {names[0]}⁻"
        return f"{names[0]} ≡ {names[1]}⁻"


class ManchesterRenderer(_Renderer):
    """Manchester OWL syntax."""

    def _NamedClass(self, obj: NamedClass) -> str:
        if obj.iri == OWL.Thing:
            return "owl:Thing"
        if obj.iri == OWL.Nothing:
            return "owl:Nothing"
        return self.name(obj.iri)

    def _ObjectInverseOf(self, obj: ObjectInverseOf) -> str:
        return f"inverse ({self.render(obj.property)})"

    def _ObjectComplementOf(self, obj: ObjectComplementOf) -> str:
        return f"not {self.wrap(obj.operand)}"

    def _ObjectIntersectionOf(self, obj: ObjectIntersectionOf) -> str:
        return " and ".join(_sorted(self.wrap(o) for o in obj.operands))

    def _ObjectUnionOf(self, obj: ObjectUnionOf) -> str:
        return " or ".join(_sorted(self.wrap(o) for o in obj.operands))

    def _restriction(self, obj, keyword: str) -> str:
        return f"{self.render(obj.property)} {keyword} {self.wrap(obj.filler)}"

    def _ObjectSomeValuesFrom(self, obj) -> str:
        return self._restriction(obj, "some")

    def _ObjectAllValuesFrom(self, obj) -> str:
        return self._restriction(obj, "only")

    def _DataSomeValuesFrom(self, obj) -> str:
        return self._restriction(obj, "some")

    def _DataAllValuesFrom(self, obj) -> str:
        return self._restriction(obj, "only")

    def _cardinality(self, keyword: str, obj) -> str:
        text = f"{self.render(obj.property)} {keyword} {obj.cardinality}"
        if obj.filler is not None:
            text += f" {self.wrap(obj.filler)}"
        return text

    def _ObjectMinCardinality(self, obj) -> str:
        return self._cardinality("min", obj)

    def _ObjectMaxCardinality(self, obj) -> str:
        return self._cardinality("max", obj)

    def _ObjectExactCardinality(self, obj) -> str:
        return self._cardinality("exactly", obj)

    def _DataMinCardinality(self, obj) -> str:
        return self._cardinality("min", obj)

    def _DataMaxCardinality(self, obj) -> str:
        return self._cardinality("max", obj)

    def _SubClassOf(self, obj: SubClassOf) -> str:
        return f"{self.render(obj.sub)} SubClassOf {self.render(obj.sup)}"

    def _EquivalentClasses(self, obj: EquivalentClasses) -> str:
        return " EquivalentTo ".join(_sorted(self.wrap(e) for e in obj.expressions))

    def _DisjointClasses(self, obj: DisjointClasses) -> str:
        return "DisjointClasses: " + ", ".join(_sorted(self.render(e) for e in obj.expressions))

    def _InverseObjectProperties(self, obj: InverseObjectProperties) -> str:
        names = _sorted(self.render(p) for p in obj.properties)
        return f"{names[0]} InverseOf {names[-1]}"


def render_dl(obj: DLObject, short: bool = True) -> str:
    """Render an expression or axiom in DL notation."""
    return DLRenderer(short).render(obj)


def render_manchester(obj: DLObject, short: bool = True) -> str:
    """Render an expression or axiom in Manchester syntax."""
    return ManchesterRenderer(short).render(obj)


def render_axioms(axioms: Iterable[DLObject], short: bool = True, manchester: bool = False) -> list:
    """Render a collection of axioms as a sorted list of lines."""
    renderer = ManchesterRenderer(short) if manchester else DLRenderer(short)
    return sorted(renderer.render(a) for a in axioms)
