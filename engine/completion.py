"""
Completion tracking for a run: produced records and in-flight operations.
"""

import time
import logging
from typing import Optional

from engine.errors import OrchestrationError

logger = logging.getLogger(__name__)


class CompletionTracker:
    """Resolves a run once every index produced a record and no lane is in flight.

    The completion check runs after every produced record, so the run
    completes as soon as the last record arrives and exactly once.
    """

    def __init__(self, total: int, limit: int):
        """Initialize the tracker.

        Args:
            total: Number of records the run must produce
            limit: Maximum number of operations allowed in flight at once
        """
        self.total = total
        self.limit = limit
        self.produced_count = 0
        self.in_flight = 0
        self.peak_in_flight = 0
        self.completed_at: Optional[float] = None
        self.completed = False

    @property
    def is_complete(self) -> bool:
        return self.completed

    def dispatch(self) -> None:
        """Account for an operation about to start."""
        if self.is_complete:
            raise OrchestrationError("Operation dispatched after the run completed")
        if self.in_flight >= self.limit:
            raise OrchestrationError(
                f"In-flight limit exceeded: {self.in_flight + 1} > {self.limit}"
            )
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)

    def produced(self) -> bool:
        """Account for a produced record and check for completion.

        Returns:
            True if this record completed the run
        """
        if self.in_flight <= 0:
            raise OrchestrationError("Record produced with no operation in flight")
        if self.produced_count >= self.total:
            raise OrchestrationError(
                f"Produced more records than operations: {self.produced_count + 1} > {self.total}"
            )

        self.in_flight -= 1
        self.produced_count += 1

        if self.produced_count == self.total and self.in_flight == 0:
            self.completed_at = time.perf_counter()
            self.completed = True
            logger.debug(f"Run complete after {self.produced_count} records")
            return True
        return False
