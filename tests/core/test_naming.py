"""
Tests for the deterministic naming scheme.

Run with:
    pytest tests/core/test_naming.py -v
"""

import pytest
from rdflib import URIRef, XSD

from ecore_dl.constants import NamingConfig
from ecore_dl.core.exceptions import ContractViolationError
from ecore_dl.core.naming import NamingScheme
from ecore_dl.shared.models import ClassEntity, EntityModel, EnumEntity
from ecore_dl.shared.models.axioms import DataProperty, Datatype, NamedClass, ObjectProperty

IRI = NamingConfig.DEFAULT_ONTOLOGY_IRI


@pytest.mark.unit
class TestIdentifiers:
    """Identifier shapes of every generated entity."""

    def test_class_concept(self, naming):
        assert naming.class_concept("Order") == NamedClass(URIRef(f"{IRI}#shop(Order[class])"))

    def test_role(self, naming):
        assert naming.role_iri("Order", "items") == URIRef(f"{IRI}#shopOrderitemsrole")
        assert naming.object_role("Order", "items") == ObjectProperty(URIRef(f"{IRI}#shopOrderitemsrole"))
        assert naming.data_role("Order", "total") == DataProperty(URIRef(f"{IRI}#shopOrdertotalrole"))

    def test_enumeration_and_literal(self, naming):
        assert str(naming.enumeration_concept("Status").iri) == f"{IRI}#shopStatusenumeration"
        assert str(naming.literal_individual("OPEN").iri) == f"{IRI}#shopOPENindividual"

    def test_instance_concept(self, naming):
        assert str(naming.instance_concept("Object3").iri) == f"{IRI}#shopObject3object"

    def test_operation_identifiers(self, naming):
        assert str(naming.operation_concept("Order", "pay", "EBoolean").iri) == f"{IRI}#shop(OrderpayEBoolean[class])"
        assert str(naming.this_role("Order").iri) == f"{IRI}#shopOrderOrderrole"
        assert naming.parameter_role_iri("Order", "pay", "amount") == URIRef(f"{IRI}#shopOrderpayamountrole")
        assert naming.return_role_iri("Order", "pay", "EBoolean") == URIRef(f"{IRI}#retshopOrderpayEBooleanretrole")

    def test_custom_iri_drops_trailing_pound(self):
        naming = NamingScheme("http://example.org/onto#", "p")
        assert str(naming.class_concept("A").iri) == "http://example.org/onto#p(A[class])"

    def test_empty_package(self):
        naming = NamingScheme(package="")
        assert str(naming.class_concept("A").iri) == f"{IRI}#(A[class])"

    def test_short_name(self, naming):
        assert NamingScheme.short_name(naming.class_iri("Order")) == "shop(Order[class])"


@pytest.mark.unit
class TestStability:
    """Identifiers are stable and do not collide across kinds."""

    @pytest.mark.parametrize("package, name", [("shop", "Order"), ("p", "A"), ("", "Item"), ("x", "role")])
    def test_class_and_role_identifiers_differ(self, package, name):
        naming = NamingScheme(package=package)
        concept = naming.class_iri(name)
        identifiers = {
            naming.role_iri(name, name),
            naming.enumeration_concept(name).iri,
            naming.literal_individual(name).iri,
            naming.instance_concept(name).iri,
        }
        assert concept not in identifiers

    def test_same_inputs_same_identifier(self):
        assert NamingScheme(package="shop").class_iri("Order") == NamingScheme(package="shop").class_iri("Order")


@pytest.mark.unit
class TestTypeConcepts:
    """Mapping of resolved types to concepts and datatypes."""

    def test_class_type(self, naming):
        order = ClassEntity("Order")
        model = EntityModel("shop", classes=[order])
        assert naming.type_concept(model.resolve_type(order)) == naming.class_concept("Order")

    def test_enum_type(self, naming):
        status = EnumEntity("Status", ["OPEN"])
        model = EntityModel("shop", enumerations=[status])
        assert naming.type_concept(model.resolve_type("Status")) == naming.enumeration_concept("Status")

    def test_datatype_is_not_a_concept(self, naming):
        resolved = EntityModel("shop").resolve_type("EInt")
        with pytest.raises(ContractViolationError):
            naming.type_concept(resolved)

    def test_missing_type_is_not_a_concept(self, naming):
        with pytest.raises(ContractViolationError):
            naming.type_concept(None)

    @pytest.mark.parametrize("tag, expected", [
        ("EInt", XSD.integer),
        ("OWLint", XSD.integer),
        ("EString", XSD.string),
        ("EBoolean", XSD.boolean),
        ("EDouble", XSD.double),
        ("OWLfloat", XSD.float),
    ])
    def test_datatype(self, tag, expected):
        resolved = EntityModel("shop").resolve_type(tag)
        assert NamingScheme.datatype(resolved) == Datatype(URIRef(expected))
