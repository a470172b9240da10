"""
Runtime services composed from the converters.

This package provides:
- ConsistencyPipeline: validate -> compile -> extend -> reason
"""

from .pipeline import ConsistencyPipeline, PipelineResult, PipelineState

__all__ = [
    "ConsistencyPipeline",
    "PipelineResult",
    "PipelineState",
]
