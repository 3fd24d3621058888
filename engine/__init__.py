"""
Concurrent benchmark execution engine.
"""

from .errors import ConfigurationError, OrchestrationError
from .run_config import RunConfiguration
from .result import AggregateResult
from .executor import OperationExecutor
from .aggregator import ResultAggregator
from .completion import CompletionTracker
from .scheduler import Scheduler, run_sync
from .statistics import percentiles

__all__ = [
    'AggregateResult',
    'CompletionTracker',
    'ConfigurationError',
    'OperationExecutor',
    'OrchestrationError',
    'ResultAggregator',
    'RunConfiguration',
    'Scheduler',
    'percentiles',
    'run_sync',
]
