"""
OWL 2 RDF graph of an axiom set.

``AxiomGraphBuilder`` maps axioms and class expressions to triples with the
standard OWL 2 RDF mapping, producing an in-memory rdflib ``Graph`` that a
reasoner adapter can load directly:

    C ⊑ ∃r.D       C rdfs:subClassOf [ a owl:Restriction ;
                                       owl:onProperty r ;
                                       owl:someValuesFrom D ]
    A ⊓ B          [ a owl:Class ; owl:intersectionOf ( A B ) ]
    ≤1 r           [ a owl:Restriction ; owl:onProperty r ;
                     owl:maxCardinality "1"^^xsd:nonNegativeInteger ]

Named entities are declared (``owl:Class``, ``owl:ObjectProperty``,
``owl:DatatypeProperty``, ``owl:NamedIndividual``). Operands of n-ary
constructs are listed in rendering order, so the same axiom set always
yields isomorphic graphs.

Usage:
    builder = AxiomGraphBuilder("http://example.org/onto")
    graph = builder.build(result.axioms)
    print(len(graph))
"""

import logging
from typing import Iterable, Optional

from rdflib import OWL, RDF, RDFS, XSD, BNode, Graph, Literal, Namespace, URIRef
from rdflib.collection import Collection
from rdflib.term import Node

from ecore_dl.constants import NamingConfig
from ecore_dl.formats.owl.renderer import render_dl
from ecore_dl.shared.models.axioms import (
    CARDINALITY_TYPES,
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
    iter_entities,
)

logger = logging.getLogger(__name__)

# (unqualified predicate, qualified predicate) per cardinality constructor
_CARDINALITY_PREDICATES = {
    ObjectMinCardinality: (OWL.minCardinality, OWL.minQualifiedCardinality),
    ObjectMaxCardinality: (OWL.maxCardinality, OWL.maxQualifiedCardinality),
    ObjectExactCardinality: (OWL.cardinality, OWL.qualifiedCardinality),
    DataMinCardinality: (OWL.minCardinality, OWL.minQualifiedCardinality),
    DataMaxCardinality: (OWL.maxCardinality, OWL.maxQualifiedCardinality),
}

_DECLARATIONS = {
    NamedClass: OWL.Class,
    ObjectProperty: OWL.ObjectProperty,
    DataProperty: OWL.DatatypeProperty,
    NamedIndividual: OWL.NamedIndividual,
}

_BUILTIN_CLASSES = frozenset({OWL.Thing, OWL.Nothing})


def _ordered(items: Iterable[DLObject]) -> list:
    return sorted(items, key=lambda item: render_dl(item, short=False))


class AxiomGraphBuilder:
    """
    Build an rdflib Graph from DL axioms.

    Args:
        ontology_iri: IRI of the ontology header, also bound as the default prefix.
        graph: Graph to add triples to; a new one is created when omitted.
    """

    def __init__(self, ontology_iri: str = NamingConfig.DEFAULT_ONTOLOGY_IRI, graph: Optional[Graph] = None):
        self.ontology_iri = ontology_iri.rstrip(NamingConfig.POUND_SIGN)
        self.graph = graph if graph is not None else Graph()
        self._setup_namespaces()

    def _setup_namespaces(self) -> None:
        self.graph.bind("", Namespace(f"{self.ontology_iri}{NamingConfig.POUND_SIGN}"))
        self.graph.bind("owl", OWL)
        self.graph.bind("rdfs", RDFS)
        self.graph.bind("rdf", RDF)
        self.graph.bind("xsd", XSD)

    def build(self, axioms: Iterable[DLObject]) -> Graph:
        """Add the ontology header and every axiom; return the graph."""
        self.graph.add((URIRef(self.ontology_iri), RDF.type, OWL.Ontology))
        count = 0
        for axiom in _ordered(axioms):
            self.add_axiom(axiom)
            count += 1
        logger.info(f"Built OWL graph with {len(self.graph)} triples from {count} axioms")
        return self.graph

    # =========================================================================
    # Axioms
    # =========================================================================

    def add_axiom(self, axiom: DLObject) -> None:
        for entity in iter_entities(axiom):
            self.declare(entity)

        if isinstance(axiom, SubClassOf):
            self.graph.add((self.class_node(axiom.sub), RDFS.subClassOf, self.class_node(axiom.sup)))
        elif isinstance(axiom, EquivalentClasses):
            nodes = [self.class_node(e) for e in _ordered(axiom.expressions)]
            for other in nodes[1:]:
                self.graph.add((nodes[0], OWL.equivalentClass, other))
        elif isinstance(axiom, DisjointClasses):
            nodes = [self.class_node(e) for e in _ordered(axiom.expressions)]
            if len(nodes) == 2:
                self.graph.add((nodes[0], OWL.disjointWith, nodes[1]))
            elif len(nodes) > 2:
                node = BNode()
                self.graph.add((node, RDF.type, OWL.AllDisjointClasses))
                self.graph.add((node, OWL.members, self.list_node(nodes)))
        elif isinstance(axiom, InverseObjectProperties):
            properties = [p.iri for p in _ordered(axiom.properties)]
            self.graph.add((properties[0], OWL.inverseOf, properties[-1]))
        else:
            raise TypeError(f"Not an axiom: {type(axiom).__name__}")

    def declare(self, entity: DLObject) -> None:
        declared_type = _DECLARATIONS.get(type(entity))
        if declared_type is None or entity.iri in _BUILTIN_CLASSES:
            return
        self.graph.add((entity.iri, RDF.type, declared_type))

    # =========================================================================
    # Expressions
    # =========================================================================

    def list_node(self, items: list) -> BNode:
        head = BNode()
        Collection(self.graph, head, items)
        return head

    def property_node(self, prop: DLObject) -> Node:
        if isinstance(prop, ObjectInverseOf):
            node = BNode()
            self.graph.add((node, OWL.inverseOf, prop.property.iri))
            return node
        return prop.iri

    def class_node(self, expr: DLObject) -> Node:
        """Node standing for a class expression, adding its triples."""
        if isinstance(expr, NamedClass):
            return expr.iri

        node = BNode()
        if isinstance(expr, ObjectComplementOf):
            self.graph.add((node, RDF.type, OWL.Class))
            self.graph.add((node, OWL.complementOf, self.class_node(expr.operand)))
        elif isinstance(expr, (ObjectIntersectionOf, ObjectUnionOf)):
            predicate = OWL.intersectionOf if isinstance(expr, ObjectIntersectionOf) else OWL.unionOf
            members = [self.class_node(o) for o in _ordered(expr.operands)]
            self.graph.add((node, RDF.type, OWL.Class))
            self.graph.add((node, predicate, self.list_node(members)))
        elif isinstance(expr, ObjectOneOf):
            members = [i.iri for i in _ordered(expr.individuals)]
            self.graph.add((node, RDF.type, OWL.Class))
            self.graph.add((node, OWL.oneOf, self.list_node(members)))
        elif isinstance(expr, (ObjectSomeValuesFrom, DataSomeValuesFrom)):
            self._restriction(node, expr.property)
            self.graph.add((node, OWL.someValuesFrom, self.range_node(expr.filler)))
        elif isinstance(expr, (ObjectAllValuesFrom, DataAllValuesFrom)):
            self._restriction(node, expr.property)
            self.graph.add((node, OWL.allValuesFrom, self.range_node(expr.filler)))
        elif isinstance(expr, CARDINALITY_TYPES):
            self._restriction(node, expr.property)
            unqualified, qualified = _CARDINALITY_PREDICATES[type(expr)]
            value = Literal(expr.cardinality, datatype=XSD.nonNegativeInteger)
            if expr.filler is None:
                self.graph.add((node, unqualified, value))
            else:
                on_range = OWL.onDataRange if isinstance(expr.filler, Datatype) else OWL.onClass
                self.graph.add((node, qualified, value))
                self.graph.add((node, on_range, self.range_node(expr.filler)))
        else:
            raise TypeError(f"Not a class expression: {type(expr).__name__}")
        return node

    def range_node(self, filler: DLObject) -> Node:
        if isinstance(filler, Datatype):
            return filler.iri
        return self.class_node(filler)

    def _restriction(self, node: BNode, prop: DLObject) -> None:
        self.graph.add((node, RDF.type, OWL.Restriction))
        self.graph.add((node, OWL.onProperty, self.property_node(prop)))
