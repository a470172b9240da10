"""
Centralized configuration constants for the Ecore to Description Logic converter.

This module provides a single source of truth for the naming scheme suffixes,
normalizer limits, datatype tags and logging defaults used throughout the
package.
"""

from typing import Final

# ============================================================================
# Naming Scheme
# ============================================================================

class NamingConfig:
    """Identifier building blocks shared by every generated concept and role."""

    DEFAULT_ONTOLOGY_IRI: Final[str] = "http://lse.ic.uff.br/ontology"
    """Ontology IRI used when the caller does not provide one."""

    POUND_SIGN: Final[str] = "#"
    """Separator between the ontology IRI and the local name."""

    CLASS_SUFFIX: Final[str] = "class"
    """Marker inside the bracket of a class concept: ``P(C[class])``."""

    ROLE_SUFFIX: Final[str] = "role"
    """Suffix of attribute, association, parameter and "this" roles."""

    ENUMERATION_SUFFIX: Final[str] = "enumeration"
    """Suffix of enumeration concepts."""

    INDIVIDUAL_SUFFIX: Final[str] = "individual"
    """Suffix of enumeration literal individuals."""

    OBJECT_SUFFIX: Final[str] = "object"
    """Suffix of instance concepts produced by the closed-world extension."""

    RETURN_MARKER: Final[str] = "ret"
    """Prefix and infix of operation return roles."""

    OBJECT_ID_PREFIX: Final[str] = "Object"
    """Prefix of generated instance identifiers (``Object0``, ``Object1``...)."""


class GeneratedNames:
    """Prefixes for names assigned to nameless model elements."""

    CLASS: Final[str] = "class_"
    ATTRIBUTE: Final[str] = "attribute_"
    METHOD: Final[str] = "method_"
    ASSOCIATION: Final[str] = "association_"
    PARAMETER: Final[str] = "parameter_"
    ENUMERATION: Final[str] = "enumeration_"

    BLANK_NAMES: Final[tuple[str, ...]] = ("", " ", "null")
    """Values treated as a missing name (besides ``None``)."""


class ReservedNames:
    """Model element names that are never translated."""

    CONTAINER_CLASSES: Final[tuple[str, ...]] = ("XMIContainer",)
    """Synthetic root classes introduced by XMI serializers."""


# ============================================================================
# Constraint Sources
# ============================================================================

class ConstraintSources:
    """Annotation sources whose details hold constraint expressions."""

    OCL_PIVOT: Final[str] = "http://www.eclipse.org/emf/2002/Ecore/OCL/Pivot"
    """Eclipse OCL pivot delegate annotation source."""

    OCL_DELEGATE: Final[str] = "http://www.eclipse.org/emf/2002/Ecore/OCL"
    """Plain Eclipse OCL delegate annotation source."""

    ACCEPTED: Final[tuple[str, ...]] = (OCL_PIVOT, OCL_DELEGATE)
    """All sources honoured by the compiler."""


# ============================================================================
# Datatypes
# ============================================================================

XSD_NAMESPACE: Final[str] = "http://www.w3.org/2001/XMLSchema#"

DATATYPE_TAGS: Final[dict[str, str]] = {
    "EInt": "integer",
    "OWLInteger": "integer",
    "OWLint": "integer",
    "EBigInteger": "integer",
    "ELong": "long",
    "EShort": "short",
    "EByte": "byte",
    "EFloat": "float",
    "OWLfloat": "float",
    "EDouble": "double",
    "OWLdouble": "double",
    "EBigDecimal": "decimal",
    "EBoolean": "boolean",
    "OWLboolean": "boolean",
    "EString": "string",
    "EChar": "string",
    "EDate": "dateTime",
}
"""Primitive type tag -> XSD local name."""


# ============================================================================
# Normalizer Limits
# ============================================================================

class NormalizerLimits:
    """Bounds that keep constraint normalization terminating."""

    MAX_FIXPOINT_ITERATIONS: Final[int] = 16
    """Maximum normalize -> print -> reparse rounds per constraint."""

    MAX_SCOPE_DEPTH: Final[int] = 64
    """Maximum nesting of scopes while building or resolving frames."""

    MAX_PARSE_DEPTH: Final[int] = 50
    """Maximum recursion depth of the constraint parser."""

    MAX_EXPRESSION_DEPTH: Final[int] = 200
    """Maximum depth of a parsed constraint tree (operator and navigation chains included)."""


# ============================================================================
# Instance Extension
# ============================================================================

class InstanceLimits:
    """Cost thresholds of the closed-world completion."""

    NEGATIVE_AXIOM_WARNING: Final[int] = 100_000
    """Estimated negative axioms above which a warning is logged."""

    BYTES_PER_AXIOM: Final[int] = 1_200
    """Rough in-memory footprint of one generated axiom (bytes)."""

    LOAD_FACTOR: Final[float] = 0.7
    """Share of available memory the generator may use."""

    MIN_AVAILABLE_MEMORY_MB: Final[int] = 256
    """Minimum available memory required before generation (MB)."""

    PROGRESS_THRESHOLD: Final[int] = 10
    """Collections smaller than this never show a progress bar."""


# ============================================================================
# Logging
# ============================================================================

class LoggingConfig:
    """Logging configuration."""

    DEFAULT_LOG_LEVEL: Final[str] = "INFO"
    """Default logging level."""

    LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    """Default log format string."""

    DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"
    """Default date format for logs."""

    SUPPORTED_FORMATS: Final[tuple[str, ...]] = ("text", "json")
    """Supported formatter styles."""

    MAX_LOG_FILE_MB: Final[int] = 10
    """Maximum log file size before rotation (MB)."""

    LOG_BACKUP_COUNT: Final[int] = 5
    """Number of backup log files to keep."""
