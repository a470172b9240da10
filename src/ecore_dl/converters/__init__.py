"""Translation of models and object populations into DL axioms."""

from .axiom_compiler import AxiomCompiler, CompilationResult, SkippedConstraint
from .instance_generator import InstanceAxiomGenerator

__all__ = [
    "AxiomCompiler",
    "CompilationResult",
    "SkippedConstraint",
    "InstanceAxiomGenerator",
]
