"""
Core infrastructure of the Ecore to Description Logic converter.

This package provides the cross-cutting pieces every stage relies on:

- Exceptions (ModelError and its per-cause subclasses, ConstraintError family)
- Configuration (ConverterConfig, GeneralizationMode, load_config)
- Naming scheme (NamingScheme)
- Logging setup (setup_logging, JSONFormatter)
- Memory guard (MemoryManager)
- Model validation (WellFormednessChecker)
- External collaborator protocols (ModelLoader, InstanceLoader, ReasonerAdapter)

Usage:
    from ecore_dl.core import ConverterConfig, NamingScheme, WellFormednessChecker
    from ecore_dl.core.services import ConsistencyPipeline
"""

from .config import ConverterConfig, GeneralizationMode, load_config
from .exceptions import (
    ConfigurationError,
    ConstraintError,
    ConstraintSyntaxError,
    ContractViolationError,
    DuplicateNameError,
    FixpointNotReachedError,
    InvalidMultiplicityError,
    MissingOppositeError,
    ModelError,
    ModelErrorKind,
    OppositeMismatchError,
    TypelessAttributeError,
    TypelessParameterError,
    UnsupportedConstraintError,
)
from .interfaces import InstanceLoader, ModelLoader, ReasonerAdapter, ReasonerVerdict
from .logging_setup import JSONFormatter, setup_logging
from .memory import MemoryManager
from .naming import NamingScheme
from .validators import WellFormednessChecker

__all__ = [
    # Configuration
    "ConverterConfig",
    "GeneralizationMode",
    "load_config",
    # Exceptions
    "ConfigurationError",
    "ConstraintError",
    "ConstraintSyntaxError",
    "ContractViolationError",
    "DuplicateNameError",
    "FixpointNotReachedError",
    "InvalidMultiplicityError",
    "MissingOppositeError",
    "ModelError",
    "ModelErrorKind",
    "OppositeMismatchError",
    "TypelessAttributeError",
    "TypelessParameterError",
    "UnsupportedConstraintError",
    # Protocols
    "InstanceLoader",
    "ModelLoader",
    "ReasonerAdapter",
    "ReasonerVerdict",
    # Infrastructure
    "JSONFormatter",
    "setup_logging",
    "MemoryManager",
    "NamingScheme",
    "WellFormednessChecker",
]
