"""Finding models and aggregation."""

from .finding import Finding, Severity, Category
from .result_aggregator import FindingAggregator

__all__ = [
    "Finding",
    "Severity",
    "Category",
    "FindingAggregator",
]
