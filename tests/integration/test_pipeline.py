"""
End-to-end tests of the consistency pipeline with a stub reasoner.

Run with:
    pytest tests/integration/test_pipeline.py -v
"""

import pytest

from ecore_dl.core.exceptions import InvalidMultiplicityError, ModelError
from ecore_dl.core.interfaces import ReasonerAdapter, ReasonerVerdict
from ecore_dl.core.services import ConsistencyPipeline, PipelineState
from ecore_dl.formats.owl import AxiomGraphBuilder, render_axioms
from ecore_dl.shared.models import AttributeEntity, ClassEntity, EntityModel, InstancePool, LinkPool
from ecore_dl.shared.models.axioms import NOTHING, EquivalentClasses


class RecordingReasoner:
    """Reports inconsistency when some enumeration is equivalent to owl:Nothing."""

    def __init__(self):
        self.calls = []

    def check(self, axioms, ontology_iri=None):
        self.calls.append((axioms, ontology_iri))
        empty = [a for a in axioms if isinstance(a, EquivalentClasses) and NOTHING in a.expressions]
        return ReasonerVerdict(consistent=not empty, explanations=[frozenset(empty)] if empty else [])


@pytest.mark.integration
class TestConsistencyPipeline:

    def test_stub_satisfies_protocol(self):
        assert isinstance(RecordingReasoner(), ReasonerAdapter)

    def test_compile_only(self, shop_model, config):
        result = ConsistencyPipeline(config).run(shop_model)
        assert result.state == PipelineState.COMPILED
        assert result.verdict is None
        assert result.consistent is None
        assert set(result.timings) == {"validate", "compile"}
        assert result.axioms

    def test_full_run(self, animal_model, config):
        reasoner = RecordingReasoner()
        pool = InstancePool()
        dog = pool.add(animal_model.find_class("Dog"))
        person = pool.add(animal_model.find_class("Person"))
        links = LinkPool()
        links.link(animal_model.find_class("Person").find_feature("pets"), person, dog)

        result = ConsistencyPipeline(config, reasoner=reasoner).run(animal_model, pool=pool, links=links)

        assert result.state == PipelineState.REASONED
        assert result.consistent is True
        assert len(reasoner.calls) == 1
        axioms, ontology_iri = reasoner.calls[0]
        assert axioms == result.axioms
        assert ontology_iri == config.ontology_iri
        assert set(result.timings) == {"validate", "compile", "extend", "reason"}
        assert "Consistent: yes" in result.get_summary()

    def test_extension_adds_instance_axioms(self, animal_model, config):
        pipeline = ConsistencyPipeline(config)
        compiled = pipeline.run(animal_model).axioms

        pool = InstancePool()
        pool.add(animal_model.find_class("Cat"))
        extended = pipeline.run(animal_model, pool=pool)
        assert extended.state == PipelineState.EXTENDED
        assert compiled < extended.axioms

    def test_inconsistent_verdict(self, shop_model, config):
        shop_model.enumerations[0].literals.clear()
        result = ConsistencyPipeline(config, reasoner=RecordingReasoner()).run(shop_model)
        assert result.consistent is False
        assert len(result.verdict.explanations) == 1
        assert "Consistent: no" in result.get_summary()

    def test_repairs_are_reported(self, shop_model, config):
        shop_model.find_class("Item").add_attribute(AttributeEntity(None, "EString"))
        result = ConsistencyPipeline(config).run(shop_model)
        assert result.diagnostics
        assert result.state == PipelineState.COMPILED

    def test_model_errors_stop_the_pipeline(self, shop_model, config):
        shop_model.find_class("Order").add_attribute(AttributeEntity("broken", "EInt", lower=3, upper=1))
        reasoner = RecordingReasoner()
        with pytest.raises(InvalidMultiplicityError) as exc_info:
            ConsistencyPipeline(config, reasoner=reasoner).run(shop_model)
        assert isinstance(exc_info.value, ModelError)
        assert reasoner.calls == []

    def test_skipped_constraints_are_carried(self, shop_model, config):
        shop_model.find_class("Order").add_invariant("collected", "self.items->collect(i | i.active)->notEmpty()")
        result = ConsistencyPipeline(config).run(shop_model)
        assert [s.name for s in result.skipped_constraints] == ["collected"]

    def test_axioms_export_to_rdf(self, shop_model, config):
        result = ConsistencyPipeline(config).run(shop_model)
        graph = AxiomGraphBuilder(config.ontology_iri).build(result.axioms)
        assert len(graph) > len(result.axioms)
        assert len(render_axioms(result.axioms)) == len(result.axioms)

    def test_container_only_model(self, config):
        model = EntityModel("empty", classes=[ClassEntity("XMIContainer")])
        result = ConsistencyPipeline(config).run(model)
        assert result.axioms == frozenset()
