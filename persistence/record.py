"""
Basic data structures for the load test.
"""

import time
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class OperationRecord:
    """Outcome of one attempted operation index.

    Attributes:
        index: 0-based operation index within the run
        lane: Lane that attempted the index
        units_processed: Rows written or read (0 on failure)
        latency_ms: Time spent inside the backend call
        success: Whether the backend call succeeded
        error: Human-readable failure message, set iff success is False
        started_at: Epoch seconds when the call started
        completed_at: Epoch seconds when the outcome was observed
    """

    index: int
    lane: int
    units_processed: int
    latency_ms: float
    success: bool
    error: Optional[str] = None
    started_at: float = field(default_factory=time.time)
    completed_at: float = field(default_factory=time.time)

    def __post_init__(self):
        if self.index < 0:
            raise ValueError(f"Record index must be non-negative, got {self.index}")
        if self.units_processed < 0:
            raise ValueError(f"units_processed must be non-negative, got {self.units_processed}")
        if self.latency_ms < 0:
            raise ValueError(f"latency_ms must be non-negative, got {self.latency_ms}")
        if self.success and self.error is not None:
            raise ValueError(f"Successful record {self.index} cannot carry an error")
        if not self.success and not self.error:
            raise ValueError(f"Failed record {self.index} must carry an error message")

    def to_dict(self) -> Dict[str, Any]:
        """Export row for persistence and reporting."""
        return asdict(self)
