"""
Ecore to Description Logic converter.

Translates a class-diagram metamodel (classes, attributes, associations,
inheritance, operations, enumerations and OCL invariants), optionally with
an object population, into a set of Description Logic axioms for an
external reasoner.

Usage:
    from ecore_dl import AxiomCompiler, ConverterConfig, WellFormednessChecker

    diagnostics = WellFormednessChecker().check(model)
    result = AxiomCompiler(ConverterConfig()).compile(model, diagnostics)
    print(result.get_summary())
"""

from .converters import AxiomCompiler, CompilationResult, InstanceAxiomGenerator
from .core import ConverterConfig, GeneralizationMode, NamingScheme, WellFormednessChecker
from .normalizer import ConstraintNormalizer

__version__ = "0.1.0"

__all__ = [
    "AxiomCompiler",
    "CompilationResult",
    "InstanceAxiomGenerator",
    "ConverterConfig",
    "GeneralizationMode",
    "NamingScheme",
    "WellFormednessChecker",
    "ConstraintNormalizer",
    "__version__",
]
