"""
PipelineLib - Comparison pipeline

This module wires file loading, image comparison and result writing into a
single call.
"""

from VD_Libs.PipelineLib.compare_pipeline import (
    ComparisonOutcome,
    ComparisonRequest,
    run_comparison,
)

__all__ = [
    "ComparisonOutcome",
    "ComparisonRequest",
    "run_comparison",
]
