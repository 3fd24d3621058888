"""
Aggregate result of a finished run.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from persistence.record import OperationRecord


@dataclass(frozen=True)
class AggregateResult:
    """Throughput and latency summary of one run, built once at completion.

    Field names and units (milliseconds, units/sec, operations/sec) are part
    of the export contract read by reporters.
    """

    name: str
    total_attempted: int
    total_units: int
    wall_clock_ms: float
    rate: float
    error_count: int
    success_count: int
    min_latency_ms: float
    max_latency_ms: float
    avg_latency_ms: float
    p50_latency_ms: float
    p95_latency_ms: float
    p99_latency_ms: float
    concurrency: int
    peak_in_flight: int
    operation_rate: float
    avg_units_per_operation: float
    records: Tuple[OperationRecord, ...] = ()

    @property
    def success_rate(self) -> float:
        if self.total_attempted == 0:
            return 0.0
        return self.success_count / self.total_attempted

    @property
    def error_rate(self) -> float:
        if self.total_attempted == 0:
            return 0.0
        return self.error_count / self.total_attempted

    def to_dict(self, include_records: bool = False) -> Dict[str, Any]:
        """Stable export mapping of the summary fields.

        Args:
            include_records: Also export every OperationRecord as a dict under 'records'

        Returns:
            Dictionary keyed by field name
        """
        data = {
            'name': self.name,
            'total_attempted': self.total_attempted,
            'total_units': self.total_units,
            'wall_clock_ms': self.wall_clock_ms,
            'rate': self.rate,
            'error_count': self.error_count,
            'success_count': self.success_count,
            'success_rate': self.success_rate,
            'min_latency_ms': self.min_latency_ms,
            'max_latency_ms': self.max_latency_ms,
            'avg_latency_ms': self.avg_latency_ms,
            'p50_latency_ms': self.p50_latency_ms,
            'p95_latency_ms': self.p95_latency_ms,
            'p99_latency_ms': self.p99_latency_ms,
            'concurrency': self.concurrency,
            'peak_in_flight': self.peak_in_flight,
            'operation_rate': self.operation_rate,
            'avg_units_per_operation': self.avg_units_per_operation,
        }
        if include_records:
            data['records'] = [record.to_dict() for record in self.records]
        return data
