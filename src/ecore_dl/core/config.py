"""
Converter configuration.

``ConverterConfig`` gathers every tunable of the translation. It can be
built in code, from a dictionary or from a JSON file:

    config = load_config("converter.json")
    compiler = AxiomCompiler(config=config)

Example JSON:
    {
        "ontology_iri": "http://example.org/onto",
        "generalization_mode": "disjoint_covering",
        "max_fixpoint_iterations": 8
    }
"""

import json
import logging
from dataclasses import asdict, dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Union

from ecore_dl.constants import NamingConfig, NormalizerLimits
from ecore_dl.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class GeneralizationMode(str, Enum):
    """How inheritance edges are translated."""
    SUBCLASS = "subclass"
    DISJOINT_COVERING = "disjoint_covering"


@dataclass
class ConverterConfig:
    """
    Settings shared by the compiler, the normalizer and the instance extension.

    Attributes:
        ontology_iri: IRI prefix of every generated identifier.
        generalization_mode: Plain subclass axioms, or subclass axioms plus
            sibling disjointness and covering.
        max_fixpoint_iterations: Bound of the normalize/print/reparse loop.
        max_scope_depth: Bound of scope nesting during resolution.
        attribute_min_from_lower_bound: When False, the min-cardinality of a
            bounded attribute (not [1..1]) uses the upper bound, mirroring
            the historical mapping. When True, the lower bound is used.
        sound_size_rewrite: When False, ``size() > n`` becomes ``notEmpty`` and
            every other size comparison ``isEmpty``, mirroring the historical
            rewrite table. When True, only comparisons equivalent to an
            emptiness test are rewritten and the others are skipped.
        show_progress: Show tqdm progress bars over large collections.
        check_memory: Run the memory guard before instance completion.
    """
    ontology_iri: str = NamingConfig.DEFAULT_ONTOLOGY_IRI
    generalization_mode: GeneralizationMode = GeneralizationMode.SUBCLASS
    max_fixpoint_iterations: int = NormalizerLimits.MAX_FIXPOINT_ITERATIONS
    max_scope_depth: int = NormalizerLimits.MAX_SCOPE_DEPTH
    attribute_min_from_lower_bound: bool = False
    sound_size_rewrite: bool = False
    show_progress: bool = False
    check_memory: bool = True

    def __post_init__(self):
        if isinstance(self.generalization_mode, str) and not isinstance(
            self.generalization_mode, GeneralizationMode
        ):
            try:
                self.generalization_mode = GeneralizationMode(self.generalization_mode)
            except ValueError:
                allowed = ", ".join(m.value for m in GeneralizationMode)
                raise ConfigurationError(
                    f"Unknown generalization_mode '{self.generalization_mode}' (expected one of: {allowed})"
                )
        if not self.ontology_iri or not str(self.ontology_iri).strip():
            raise ConfigurationError("ontology_iri must not be empty")
        if self.ontology_iri.endswith(NamingConfig.POUND_SIGN):
            self.ontology_iri = self.ontology_iri.rstrip(NamingConfig.POUND_SIGN)
        for name in ("max_fixpoint_iterations", "max_scope_depth"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConverterConfig":
        """
        Build a configuration from a plain dictionary.

        Raises:
            ConfigurationError: If an unknown key is present or a value is invalid.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["generalization_mode"] = self.generalization_mode.value
        return data


def load_config(config_path: Union[str, Path]) -> ConverterConfig:
    """
    Load a ``ConverterConfig`` from a JSON file.

    Args:
        config_path: Path to the configuration file.

    Returns:
        The parsed configuration.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the file is not a JSON object or holds invalid values.
    """
    path = Path(config_path)
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in configuration file {config_path}: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {config_path} must contain a JSON object")

    logger.debug(f"Loaded configuration from {config_path}")
    return ConverterConfig.from_dict(data)
