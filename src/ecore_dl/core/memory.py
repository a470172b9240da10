"""
Memory guard for the closed-world instance extension.

Negative link axioms grow with the product of source and target instance
counts per association, so large object populations can exhaust memory.
``MemoryManager`` estimates the footprint of a planned generation and
compares it with the memory psutil reports as available.
"""

import logging
from typing import Tuple

import psutil

from ecore_dl.constants import InstanceLimits

logger = logging.getLogger(__name__)


class MemoryManager:
    """Pre-flight memory checks before generating large axiom sets."""

    MIN_AVAILABLE_MB = InstanceLimits.MIN_AVAILABLE_MEMORY_MB
    LOAD_FACTOR = InstanceLimits.LOAD_FACTOR
    BYTES_PER_AXIOM = InstanceLimits.BYTES_PER_AXIOM

    @staticmethod
    def get_available_memory_mb() -> float:
        """
        Get available system memory in MB.

        Returns:
            Available memory in MB, or MIN_AVAILABLE_MB if detection fails.
        """
        try:
            return psutil.virtual_memory().available / (1024 * 1024)
        except (OSError, RuntimeError) as e:
            logger.warning(f"Could not determine available memory: {e}")
            return float(MemoryManager.MIN_AVAILABLE_MB)

    @staticmethod
    def get_memory_usage_mb() -> float:
        """Current process resident memory in MB."""
        try:
            return psutil.Process().memory_info().rss / (1024 * 1024)
        except (OSError, psutil.Error):
            return 0.0

    @classmethod
    def estimate_memory_mb(cls, axiom_count: int) -> float:
        return axiom_count * cls.BYTES_PER_AXIOM / (1024 * 1024)

    @classmethod
    def check_memory_available(cls, axiom_count: int, force: bool = False) -> Tuple[bool, str]:
        """
        Check whether ``axiom_count`` axioms fit in memory.

        Args:
            axiom_count: Estimated number of axioms to generate.
            force: If True, report a warning instead of refusing.

        Returns:
            Tuple of (can_proceed, message).
        """
        estimated_mb = cls.estimate_memory_mb(axiom_count)
        available_mb = cls.get_available_memory_mb()

        if available_mb < cls.MIN_AVAILABLE_MB and not force:
            return False, (
                f"Insufficient free memory. Available: {available_mb:.0f}MB, "
                f"minimum required: {cls.MIN_AVAILABLE_MB}MB."
            )

        safe_threshold_mb = available_mb * cls.LOAD_FACTOR
        if estimated_mb > safe_threshold_mb:
            message = (
                f"Instance completion may exceed safe memory limits. "
                f"Estimated axioms: {axiom_count:,} (~{estimated_mb:.0f}MB), "
                f"safe threshold: {safe_threshold_mb:.0f}MB of {available_mb:.0f}MB available."
            )
            if force:
                return True, f"WARNING: {message} Proceeding because force was requested."
            return False, f"{message} Reduce the object population or force the generation."

        return True, (
            f"Memory OK: ~{estimated_mb:.1f}MB estimated for {axiom_count:,} axioms, "
            f"{available_mb:.0f}MB available"
        )

    @classmethod
    def log_memory_status(cls, context: str = "") -> None:
        prefix = f"[{context}] " if context else ""
        logger.debug(
            f"{prefix}Memory status: process using {cls.get_memory_usage_mb():.0f}MB, "
            f"system available: {cls.get_available_memory_mb():.0f}MB"
        )
