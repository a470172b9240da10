"""
Closed-world completion axioms for a concrete object population.

DL reasoning is open-world: an absent link is merely unknown. Given the
instances and links of an object model, ``InstanceAxiomGenerator`` adds the
axioms that close the population:

- typing: ``o ⊑ C`` for each instance ``o`` of most specific type ``C``;
- disjointness: the instances grouped under a type are pairwise disjoint
  when there are at least two of them;
- exhaustiveness: ``C ⊑ o1 ⊔ ... ⊔ on`` over every instance grouped under
  ``C`` (its own and its subtypes' instances);
- links: for every association end, ``s ⊑ =1 r.t`` for each recorded link
  ``s -> t`` and ``s ⊑ ¬∃r.t`` for every candidate target ``t`` that ``s``
  is not linked to.

Cost:
    Negative link axioms are generated for every (source, non-linked target)
    pair, i.e. up to ``|sources| x |targets|`` axioms per association end.
    The cost is quadratic in the population size and only suited to small
    object models. ``estimate_negative_axioms`` reports the count up front
    and the memory guard refuses generations that would not fit in memory
    unless ``force`` is given.

Usage:
    generator = InstanceAxiomGenerator(config)
    axioms = generator.extend(result.axioms, model, pool, links)
"""

import logging
from typing import FrozenSet, Iterable, List, Optional, Set

from tqdm import tqdm

from ecore_dl.constants import InstanceLimits, ReservedNames
from ecore_dl.core.config import ConverterConfig
from ecore_dl.core.memory import MemoryManager
from ecore_dl.core.naming import NamingScheme
from ecore_dl.shared.models.axioms import (
    Axiom,
    ObjectExactCardinality,
    ObjectProperty,
    ObjectSomeValuesFrom,
    SubClassOf,
    complement_of,
    disjoint_classes,
    union_of,
)
from ecore_dl.shared.models.entity_model import EntityModel, ReferenceEntity
from ecore_dl.shared.models.instance_model import Instance, InstancePool, LinkPool

logger = logging.getLogger(__name__)


class InstanceAxiomGenerator:
    """
    Generate closed-world axioms over an instance pool and a link pool.

    Args:
        config: Converter settings; defaults to ``ConverterConfig()``.
    """

    def __init__(self, config: Optional[ConverterConfig] = None):
        self.config = config or ConverterConfig()

    def extend(
        self,
        axioms: Iterable[Axiom],
        model: EntityModel,
        pool: InstancePool,
        links: LinkPool,
        naming: Optional[NamingScheme] = None,
        force: bool = False,
    ) -> FrozenSet[Axiom]:
        """Return ``axioms`` together with the completion axioms of the population."""
        return frozenset(axioms) | self.generate(model, pool, links, naming=naming, force=force)

    def generate(
        self,
        model: EntityModel,
        pool: InstancePool,
        links: LinkPool,
        naming: Optional[NamingScheme] = None,
        force: bool = False,
    ) -> FrozenSet[Axiom]:
        """
        Generate the completion axioms.

        Args:
            model: Model the instances conform to.
            pool: Typed instances.
            links: Recorded links per association end.
            naming: Naming scheme; built from the config and package when omitted.
            force: Proceed even when the memory guard advises against it.

        Returns:
            The completion axioms.

        Raises:
            MemoryError: If the estimated axiom count does not fit in memory and
                ``force`` is False.
            KeyError: If a positional link target does not exist.
        """
        naming = naming or NamingScheme(self.config.ontology_iri, model.package)
        self._check_cost(model, pool, force)

        axioms: Set[Axiom] = set()
        self._typing(pool, naming, axioms)
        self._closure(pool, naming, axioms)

        references = model.references()
        for reference in tqdm(
            references,
            desc="Completing links",
            unit="reference",
            disable=not self.config.show_progress or len(references) < InstanceLimits.PROGRESS_THRESHOLD,
        ):
            self._links(reference, pool, links, naming, axioms)

        logger.info(f"Generated {len(axioms)} instance axioms for {len(pool)} instances")
        return frozenset(axioms)

    # =========================================================================
    # Cost
    # =========================================================================

    @staticmethod
    def estimate_negative_axioms(model: EntityModel, pool: InstancePool) -> int:
        """Upper bound of the negative link axioms: sources x targets per association end."""
        total = 0
        for reference in model.references():
            if reference.owner is None or reference.target is None:
                continue
            sources = len(pool.instances_of(reference.owner.name))
            targets = len(pool.instances_of(reference.target.name))
            total += sources * targets
        return total

    def _check_cost(self, model: EntityModel, pool: InstancePool, force: bool) -> None:
        estimated = self.estimate_negative_axioms(model, pool)
        if estimated > InstanceLimits.NEGATIVE_AXIOM_WARNING:
            logger.warning(
                f"Closed-world completion may generate up to {estimated:,} negative link axioms "
                f"for {len(pool):,} instances; the cost is quadratic in the population size"
            )

        if not self.config.check_memory:
            return
        total = estimated + 2 * len(pool)
        can_proceed, message = MemoryManager.check_memory_available(total, force=force)
        if not can_proceed:
            MemoryManager.log_memory_status("Before instance completion")
            raise MemoryError(message)
        logger.debug(message)

    # =========================================================================
    # Typing and closure
    # =========================================================================

    @staticmethod
    def _typing(pool: InstancePool, naming: NamingScheme, axioms: Set[Axiom]) -> None:
        for instance in pool:
            axioms.add(SubClassOf(
                naming.instance_concept(instance.id),
                naming.class_concept(instance.type_name),
            ))

    @staticmethod
    def _closure(pool: InstancePool, naming: NamingScheme, axioms: Set[Axiom]) -> None:
        for type_name in pool.type_names():
            if type_name in ReservedNames.CONTAINER_CLASSES:
                continue
            instances = [naming.instance_concept(i.id) for i in pool.instances_of(type_name)]
            if len(instances) >= 2:
                axioms.add(disjoint_classes(*instances))
            if instances:
                axioms.add(SubClassOf(naming.class_concept(type_name), union_of(*instances)))

    # =========================================================================
    # Links
    # =========================================================================

    @staticmethod
    def _links(
        reference: ReferenceEntity,
        pool: InstancePool,
        links: LinkPool,
        naming: NamingScheme,
        axioms: Set[Axiom],
    ) -> None:
        if reference.owner is None or reference.target is None:
            return
        role = naming.object_role(reference.owner.name, reference.name)
        recorded = links.links_for(reference)
        targets = pool.instances_of(reference.target.name)

        for source in pool.instances_of(reference.owner.name):
            subject = naming.instance_concept(source.id)
            linked: List[Instance] = []
            if source in recorded:
                linked = [pool.resolve(target) for target in recorded[source]]
                for target in linked:
                    axioms.add(SubClassOf(
                        subject,
                        ObjectExactCardinality(role, 1, naming.instance_concept(target.id)),
                    ))
            for target in targets:
                if any(target is t for t in linked):
                    continue
                axioms.add(_negative_link(subject, role, naming.instance_concept(target.id)))


def _negative_link(subject, role: ObjectProperty, target) -> SubClassOf:
    return SubClassOf(subject, complement_of(ObjectSomeValuesFrom(role, target)))
