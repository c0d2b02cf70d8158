"""Plan execution: engine, parameter resolution and aggregation."""

from .results import ResultsTable
from .resolver import VariableResolver, VARIABLE_PATTERN
from .aggregator import ResultAggregator
from .engine import ExecutionEngine

__all__ = [
    "ExecutionEngine",
    "ResultsTable",
    "VariableResolver",
    "VARIABLE_PATTERN",
    "ResultAggregator",
]
