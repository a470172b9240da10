"""
End-to-end consistency pipeline.

Stages, strictly in this order:

    1. validate  WellFormednessChecker repairs names, raises ModelError
    2. compile   AxiomCompiler (with ConstraintNormalizer per invariant)
    3. extend    InstanceAxiomGenerator, when an object model is given
    4. reason    ReasonerAdapter, when one is injected

Each stage is timed and the results are collected in a ``PipelineResult``.
Collaborators are passed in by the caller; the pipeline keeps no global
state and can be reused across models.

Usage:
    pipeline = ConsistencyPipeline(config, reasoner=my_reasoner)
    result = pipeline.run(model, pool=pool, links=links)
    print(result.get_summary())
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from ecore_dl.converters.axiom_compiler import AxiomCompiler, CompilationResult, SkippedConstraint
from ecore_dl.converters.instance_generator import InstanceAxiomGenerator
from ecore_dl.core.config import ConverterConfig
from ecore_dl.core.interfaces import ReasonerAdapter, ReasonerVerdict
from ecore_dl.core.validators import WellFormednessChecker
from ecore_dl.shared.models.axioms import Axiom
from ecore_dl.shared.models.entity_model import EntityModel
from ecore_dl.shared.models.instance_model import InstancePool, LinkPool

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    """Last stage reached by a pipeline run."""
    IDLE = "idle"
    VALIDATED = "validated"
    COMPILED = "compiled"
    EXTENDED = "extended"
    REASONED = "reasoned"


@dataclass
class PipelineResult:
    """
    Result of one pipeline run.

    Attributes:
        axioms: Final axiom set (compiled plus instance axioms).
        diagnostics: Recoverable defects repaired during validation.
        skipped_constraints: Invariants that contributed no axiom.
        constraint_reports: Normalized constraint text per ``(class, invariant)``.
        verdict: Reasoner answer, None when no reasoner was used.
        state: Last completed stage.
        timings: Seconds spent per stage.
    """
    axioms: FrozenSet[Axiom] = frozenset()
    diagnostics: List[str] = field(default_factory=list)
    skipped_constraints: List[SkippedConstraint] = field(default_factory=list)
    constraint_reports: Dict[tuple, str] = field(default_factory=dict)
    verdict: Optional[ReasonerVerdict] = None
    state: PipelineState = PipelineState.IDLE
    timings: Dict[str, float] = field(default_factory=dict)

    @property
    def consistent(self) -> Optional[bool]:
        return None if self.verdict is None else self.verdict.consistent

    def get_summary(self) -> str:
        lines = [
            "Pipeline Summary:",
            f"  State: {self.state.value}",
            f"  Axioms: {len(self.axioms)}",
            f"  Diagnostics: {len(self.diagnostics)}",
            f"  Skipped constraints: {len(self.skipped_constraints)}",
        ]
        for stage, seconds in self.timings.items():
            lines.append(f"  {stage}: {seconds:.3f}s")
        if self.verdict is not None:
            lines.append(f"  {self.verdict.get_summary()}")
        return "\n".join(lines)


class ConsistencyPipeline:
    """
    Validate, compile, extend and optionally reason over one model.

    Args:
        config: Settings shared by every stage.
        reasoner: Satisfiability engine; the reasoning stage is skipped when None.
        checker: Well-formedness checker; a new one is created when None.
    """

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        reasoner: Optional[ReasonerAdapter] = None,
        checker: Optional[WellFormednessChecker] = None,
    ):
        self.config = config or ConverterConfig()
        self.reasoner = reasoner
        self.checker = checker or WellFormednessChecker()
        self.compiler = AxiomCompiler(self.config)
        self.generator = InstanceAxiomGenerator(self.config)

    def run(
        self,
        model: EntityModel,
        pool: Optional[InstancePool] = None,
        links: Optional[LinkPool] = None,
        force: bool = False,
    ) -> PipelineResult:
        """
        Run every stage on ``model``.

        Args:
            model: Metamodel to translate; names are repaired in place.
            pool: Object population; the extension stage runs only when given.
            links: Links of the population; an empty pool is used when omitted.
            force: Passed to the memory guard of the extension stage.

        Raises:
            ModelError: If the model is not well formed.
            MemoryError: If the instance completion would not fit in memory.
        """
        result = PipelineResult()

        started = time.perf_counter()
        result.diagnostics = self.checker.check(model)
        result.state = PipelineState.VALIDATED
        result.timings["validate"] = time.perf_counter() - started

        started = time.perf_counter()
        compiled: CompilationResult = self.compiler.compile(model, result.diagnostics)
        result.axioms = compiled.axioms
        result.skipped_constraints = compiled.skipped_constraints
        result.constraint_reports = compiled.constraint_reports
        result.state = PipelineState.COMPILED
        result.timings["compile"] = time.perf_counter() - started

        if pool is not None:
            started = time.perf_counter()
            result.axioms = self.generator.extend(
                result.axioms,
                model,
                pool,
                links if links is not None else LinkPool(),
                naming=self.compiler.naming_for(model),
                force=force,
            )
            result.state = PipelineState.EXTENDED
            result.timings["extend"] = time.perf_counter() - started

        if self.reasoner is not None:
            started = time.perf_counter()
            result.verdict = self.reasoner.check(result.axioms, self.config.ontology_iri)
            result.state = PipelineState.REASONED
            result.timings["reason"] = time.perf_counter() - started
            verdict = "consistent" if result.verdict.consistent else "inconsistent"
            logger.info(f"Reasoner verdict: {verdict}", extra={"stage": result.state.value})

        logger.info(
            f"Pipeline finished at stage '{result.state.value}' with {len(result.axioms)} axioms",
            extra={"stage": result.state.value},
        )
        return result
