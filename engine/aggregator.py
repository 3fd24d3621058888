"""
Result aggregator for operation records of a single run.
"""

import math
import threading
import logging
from typing import Dict, List, Optional

from configuration import PROGRESS_REPORT_STEPS
from engine.errors import OrchestrationError
from engine.result import AggregateResult
from engine.statistics import calculate_average, calculate_rate, percentiles
from persistence.record import OperationRecord

logger = logging.getLogger(__name__)


class ResultAggregator:
    """Accumulates counts, latency extremes and sums as records arrive."""

    def __init__(self, total: int, name: str = "run", concurrency: int = 0):
        """Initialize the aggregator.

        Args:
            total: Number of operation indices in the run
            name: Run label copied into the result
            concurrency: Effective concurrency copied into the result
        """
        self.total = total
        self.name = name
        self.concurrency = concurrency
        self.records: Dict[int, OperationRecord] = {}
        self.lock = threading.Lock()

        self.success_count = 0
        self.error_count = 0
        self.total_units = 0
        self.total_latency_ms = 0.0
        self.min_latency_ms = math.inf
        self.max_latency_ms = 0.0
        self._successful_latencies: List[float] = []
        self._progress_step = max(1, total // PROGRESS_REPORT_STEPS)
        self._result: Optional[AggregateResult] = None

    @property
    def produced(self) -> int:
        return len(self.records)

    def record(self, record: OperationRecord) -> None:
        """Add a produced record.

        Args:
            record: Record of one attempted index, in any completion order

        Raises:
            OrchestrationError: Index out of range, recorded twice, or run already finalized
        """
        with self.lock:
            if self._result is not None:
                raise OrchestrationError(f"Record {record.index} arrived after finalize")
            if not 0 <= record.index < self.total:
                raise OrchestrationError(f"Record index {record.index} outside [0, {self.total})")
            if record.index in self.records:
                raise OrchestrationError(f"Index {record.index} was attempted twice")

            self.records[record.index] = record
            self.min_latency_ms = min(self.min_latency_ms, record.latency_ms)
            self.max_latency_ms = max(self.max_latency_ms, record.latency_ms)

            if record.success:
                self.success_count += 1
                self.total_units += record.units_processed
                self.total_latency_ms += record.latency_ms
                self._successful_latencies.append(record.latency_ms)
            else:
                self.error_count += 1

            produced = len(self.records)

        if produced % self._progress_step == 0 or produced == self.total:
            progress = produced / self.total * 100
            logger.info(
                f"Progress: {progress:.1f}% ({produced}/{self.total} operations, "
                f"{self.error_count} errors)"
            )

    def finalize(self, wall_clock_ms: float, peak_in_flight: int = 0) -> AggregateResult:
        """Build the AggregateResult once every index has a record.

        Args:
            wall_clock_ms: Duration of the whole run in milliseconds
            peak_in_flight: Highest number of simultaneous operations observed

        Returns:
            Immutable AggregateResult with records ordered by index
        """
        with self.lock:
            if self._result is not None:
                raise OrchestrationError(f"Run '{self.name}' finalized twice")
            if len(self.records) != self.total:
                raise OrchestrationError(
                    f"Run '{self.name}' finalized with {len(self.records)}/{self.total} records"
                )

            latency_stats = percentiles(self._successful_latencies)
            avg_latency_ms = (
                self.total_latency_ms / self.success_count if self.success_count else 0.0
            )
            units_per_success = [
                r.units_processed for r in self.records.values() if r.success
            ]

            self._result = AggregateResult(
                name=self.name,
                total_attempted=len(self.records),
                total_units=self.total_units,
                wall_clock_ms=wall_clock_ms,
                rate=calculate_rate(self.total_units, wall_clock_ms),
                error_count=self.error_count,
                success_count=self.success_count,
                min_latency_ms=0.0 if math.isinf(self.min_latency_ms) else self.min_latency_ms,
                max_latency_ms=self.max_latency_ms,
                avg_latency_ms=avg_latency_ms,
                p50_latency_ms=latency_stats['p50'],
                p95_latency_ms=latency_stats['p95'],
                p99_latency_ms=latency_stats['p99'],
                concurrency=self.concurrency,
                peak_in_flight=peak_in_flight,
                operation_rate=calculate_rate(self.success_count, wall_clock_ms),
                avg_units_per_operation=calculate_average(units_per_success),
                records=tuple(self.records[i] for i in sorted(self.records)),
            )

        logger.debug(
            f"Finalized {self.name}: {self._result.success_count}/{self._result.total_attempted} "
            f"succeeded, {self._result.rate:.2f} units/sec"
        )
        return self._result
