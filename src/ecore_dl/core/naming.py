"""
Deterministic identifier scheme.

Every concept and role produced by the compiler and the instance extension
is named here, so textual rendering and downstream explanation printing see
stable identifiers:

    class concept        <IRI>#P(C[class])
    attribute/assoc role <IRI>#P C a role
    enumeration concept  <IRI>#P E enumeration
    literal individual   <IRI>#P L individual
    instance concept     <IRI>#P id object
    operation tuple      <IRI>#P(C f R[class])
    "this" role          <IRI>#P C C role
    parameter role       <IRI>#P C f p role
    return role          <IRI>#ret P C f R retrole

(names are concatenated without separators; spaces above are for reading).
"""

from typing import Optional

from rdflib import URIRef

from ecore_dl.constants import NamingConfig
from ecore_dl.core.exceptions import ContractViolationError
from ecore_dl.shared.models.axioms import (
    ClassExpression,
    DataProperty,
    Datatype,
    NamedClass,
    NamedIndividual,
    ObjectProperty,
)
from ecore_dl.shared.models.entity_model import ResolvedType, TypeKind


class NamingScheme:
    """
    Build concept, role and individual identifiers for one package.

    Args:
        ontology_iri: Ontology IRI, without the trailing ``#``.
        package: Package name prefixed to every local name.
    """

    def __init__(self, ontology_iri: str = NamingConfig.DEFAULT_ONTOLOGY_IRI, package: str = ""):
        self.ontology_iri = ontology_iri.rstrip(NamingConfig.POUND_SIGN)
        self.package = package or ""

    def _iri(self, local_name: str) -> URIRef:
        return URIRef(f"{self.ontology_iri}{NamingConfig.POUND_SIGN}{local_name}")

    # -------------------------------------------------------------------------
    # Concepts
    # -------------------------------------------------------------------------

    def class_iri(self, class_name: str) -> URIRef:
        return self._iri(f"{self.package}({class_name}[{NamingConfig.CLASS_SUFFIX}])")

    def class_concept(self, class_name: str) -> NamedClass:
        return NamedClass(self.class_iri(class_name))

    def enumeration_concept(self, enum_name: str) -> NamedClass:
        return NamedClass(self._iri(f"{self.package}{enum_name}{NamingConfig.ENUMERATION_SUFFIX}"))

    def literal_individual(self, literal: str) -> NamedIndividual:
        return NamedIndividual(self._iri(f"{self.package}{literal}{NamingConfig.INDIVIDUAL_SUFFIX}"))

    def instance_concept(self, instance_id: str) -> NamedClass:
        return NamedClass(self._iri(f"{self.package}{instance_id}{NamingConfig.OBJECT_SUFFIX}"))

    def operation_concept(self, class_name: str, operation: str, return_type: str) -> NamedClass:
        return self.class_concept(f"{class_name}{operation}{return_type}")

    # -------------------------------------------------------------------------
    # Roles
    # -------------------------------------------------------------------------

    def role_iri(self, class_name: str, feature_name: str) -> URIRef:
        return self._iri(f"{self.package}{class_name}{feature_name}{NamingConfig.ROLE_SUFFIX}")

    def object_role(self, class_name: str, feature_name: str) -> ObjectProperty:
        return ObjectProperty(self.role_iri(class_name, feature_name))

    def data_role(self, class_name: str, feature_name: str) -> DataProperty:
        return DataProperty(self.role_iri(class_name, feature_name))

    def this_role(self, class_name: str) -> ObjectProperty:
        return self.object_role(class_name, class_name)

    def parameter_role_iri(self, class_name: str, operation: str, parameter: str) -> URIRef:
        return self._iri(f"{self.package}{class_name}{operation}{parameter}{NamingConfig.ROLE_SUFFIX}")

    def return_role_iri(self, class_name: str, operation: str, return_type: str) -> URIRef:
        ret = NamingConfig.RETURN_MARKER
        return URIRef(
            f"{self.ontology_iri}{NamingConfig.POUND_SIGN}{ret}{self.package}"
            f"{class_name}{operation}{return_type}{ret}{NamingConfig.ROLE_SUFFIX}"
        )

    # -------------------------------------------------------------------------
    # Types
    # -------------------------------------------------------------------------

    def type_concept(self, resolved: Optional[ResolvedType]) -> ClassExpression:
        """Concept standing for a class or enumeration type."""
        if resolved is None or resolved.kind == TypeKind.DATATYPE:
            raise ContractViolationError(f"Expected a class or enumeration type, got {resolved!r}")
        if resolved.kind == TypeKind.ENUM:
            return self.enumeration_concept(resolved.name)
        return self.class_concept(resolved.name)

    @staticmethod
    def datatype(resolved: ResolvedType) -> Datatype:
        if resolved.xsd_iri is None:
            raise ContractViolationError(f"Type {resolved.name} is not a datatype")
        return Datatype(URIRef(resolved.xsd_iri))

    @staticmethod
    def short_name(iri: str) -> str:
        """Local part of an identifier (after ``#``)."""
        return iri.rsplit(NamingConfig.POUND_SIGN, 1)[-1]
