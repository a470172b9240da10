"""
Protocol definitions for the external collaborators of the translation.

The core never reads files or decides satisfiability itself. Loading the
metamodel and the object model, and reasoning over the produced axioms,
are delegated to objects satisfying these protocols:

Protocols:
    ModelLoader: Build an EntityModel from a metamodel source.
    InstanceLoader: Build the instance and link pools of an object model.
    ReasonerAdapter: Decide consistency of an axiom set and explain it.

Usage:
    class OwlApiReasoner:
        def check(self, axioms, ontology_iri):
            ...
            return ReasonerVerdict(consistent=True)

    assert isinstance(OwlApiReasoner(), ReasonerAdapter)
"""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Protocol, Tuple, runtime_checkable

from ecore_dl.shared.models.axioms import Axiom
from ecore_dl.shared.models.entity_model import EntityModel
from ecore_dl.shared.models.instance_model import InstancePool, LinkPool

__all__ = [
    "ModelLoader",
    "InstanceLoader",
    "ReasonerAdapter",
    "ReasonerVerdict",
]


@dataclass
class ReasonerVerdict:
    """
    Answer of a reasoner for one axiom set.

    Attributes:
        consistent: Whether the axiom set has a model.
        explanations: Minimal inconsistent axiom subsets (justifications).
        equivalence_groups: Named concepts found equivalent to each other.
        unsatisfiable: Named concepts that can have no instance.
    """
    consistent: bool
    explanations: List[FrozenSet[Axiom]] = field(default_factory=list)
    equivalence_groups: List[FrozenSet[str]] = field(default_factory=list)
    unsatisfiable: List[str] = field(default_factory=list)

    def get_summary(self) -> str:
        lines = [f"Consistent: {'yes' if self.consistent else 'no'}"]
        if self.unsatisfiable:
            lines.append(f"  Unsatisfiable concepts: {len(self.unsatisfiable)}")
        if self.explanations:
            lines.append(f"  Explanations: {len(self.explanations)}")
        if self.equivalence_groups:
            lines.append(f"  Equivalence groups: {len(self.equivalence_groups)}")
        return "\n".join(lines)


@runtime_checkable
class ModelLoader(Protocol):
    """
    Protocol for metamodel loaders.

    Example implementation:
        class EcoreFileLoader:
            def load(self, path: str) -> EntityModel:
                resource = read_ecore(path)
                return to_entity_model(resource)
    """

    def load(self, path: str) -> EntityModel:
        """
        Load the metamodel at ``path``.

        Raises:
            FileNotFoundError: If the source doesn't exist.
            ValueError: If the source cannot be parsed.
        """
        ...


@runtime_checkable
class InstanceLoader(Protocol):
    """Protocol for object model loaders."""

    def load(self, path: str, model: EntityModel) -> Tuple[InstancePool, LinkPool]:
        """
        Load the objects at ``path``, typed against ``model``.

        Returns:
            Tuple of (instance pool, link pool).
        """
        ...


@runtime_checkable
class ReasonerAdapter(Protocol):
    """
    Protocol for satisfiability engines.

    Implementations translate the axiom set into their own representation
    (``ecore_dl.formats.owl.AxiomGraphBuilder`` gives an rdflib Graph in
    the OWL 2 RDF mapping) and run the consistency check.
    """

    def check(self, axioms: FrozenSet[Axiom], ontology_iri: Optional[str] = None) -> ReasonerVerdict:
        """
        Decide consistency of ``axioms``.

        Args:
            axioms: Complete axiom set.
            ontology_iri: IRI of the ontology the axioms belong to.

        Returns:
            The reasoner verdict.
        """
        ...
