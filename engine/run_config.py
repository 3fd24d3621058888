"""
Run configuration for the execution engine.
"""

import inspect
from dataclasses import dataclass
from typing import Any, Callable

from configuration import DEFAULT_CONCURRENCY
from engine.errors import ConfigurationError, OrchestrationError


def _index_as_input(index: int) -> int:
    return index


def is_int(value: Any) -> bool:
    """True for real integers; bools are rejected."""
    return isinstance(value, int) and not isinstance(value, bool)


def _is_coroutine_operation(operation: Callable[[Any], Any]) -> bool:
    return inspect.iscoroutinefunction(operation) or inspect.iscoroutinefunction(
        getattr(operation, "__call__", None)
    )


@dataclass(frozen=True)
class RunConfiguration:
    """Immutable description of one load test run.

    Attributes:
        total: Number of operations to attempt
        operation: Backend operation, called with the input descriptor of an index
        concurrency: Requested number of lanes (clamped to total)
        input_supplier: Maps an operation index to its input descriptor
        name: Label used in logs and exports
        blocking: Run a plain blocking operation on a thread pool instead of awaiting it
    """

    total: int
    operation: Callable[[Any], Any]
    concurrency: int = DEFAULT_CONCURRENCY
    input_supplier: Callable[[int], Any] = _index_as_input
    name: str = "run"
    blocking: bool = False

    def __post_init__(self):
        if not is_int(self.total) or self.total <= 0:
            raise ConfigurationError(f"total must be a positive integer, got {self.total!r}")
        if not is_int(self.concurrency) or self.concurrency < 1:
            raise ConfigurationError(f"concurrency must be an integer >= 1, got {self.concurrency!r}")
        if not callable(self.operation):
            raise ConfigurationError(f"operation must be callable, got {type(self.operation).__name__}")
        if not callable(self.input_supplier):
            raise ConfigurationError(
                f"input_supplier must be callable, got {type(self.input_supplier).__name__}"
            )
        if self.blocking and _is_coroutine_operation(self.operation):
            raise ConfigurationError(
                "blocking=True needs a plain callable; coroutine operations are awaited "
                "on the event loop"
            )

    @property
    def effective_concurrency(self) -> int:
        """Number of lanes actually started."""
        return min(self.concurrency, self.total)

    def lane_indices(self, lane_id: int) -> range:
        """Indices statically assigned to a lane: lane_id, lane_id + C, lane_id + 2C, ..."""
        stride = self.effective_concurrency
        if not 0 <= lane_id < stride:
            raise OrchestrationError(f"lane {lane_id} outside [0, {stride})")
        return range(lane_id, self.total, stride)
