"""Parallel aggregation engine."""

from .aggregator import Aggregator, AggregationResult, WorkerResult
from .pipeline import SummaryPipeline, SummaryResult, run_summary

__all__ = [
    "Aggregator",
    "AggregationResult",
    "WorkerResult",
    "SummaryPipeline",
    "SummaryResult",
    "run_summary",
]
