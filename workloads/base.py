"""
Async base class for message stores exercised by the load test workloads.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

Message = Dict[str, Any]


class MessageStore(ABC):
    """Async contract of a chat-message backend.

    Concrete drivers (PostgreSQL, MySQL, ...) live outside this project.
    Every method suspends inside the backend call and reports failure by
    raising, never by returning an empty result.
    """

    name: str = "store"

    async def connect(self) -> None:
        """Open the connection pool."""

    async def close(self) -> None:
        """Release the connection pool."""

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    @abstractmethod
    async def insert_batch(self, messages: Sequence[Message]) -> int:
        """Insert messages in one transaction and return how many were persisted."""

    @abstractmethod
    async def insert_message(self, message: Message) -> Any:
        """Insert a single message."""

    @abstractmethod
    async def get_messages_by_user(self, user_id: str, limit: int) -> List[Message]:
        """Return up to limit most recent messages of a user."""

    async def get_table_stats(self) -> Optional[Dict[str, Any]]:
        """Return table statistics (total_records, unique_users, ...).

        Optional for drivers: the default returns None, meaning the store
        does not report stats.
        """
        return None


def log_summary(result, title: str, unit_label: str = "units") -> None:
    """Log the headline numbers of a finished workload run."""
    logger.info(f"=== {title} ===")
    logger.info(f"Operations: {result.total_attempted} ({result.error_count} errors)")
    logger.info(f"Total {unit_label}: {result.total_units}")
    logger.info(f"Total time: {result.wall_clock_ms:.0f} ms")
    logger.info(f"Throughput: {result.rate:.2f} {unit_label}/sec, {result.operation_rate:.2f} ops/sec")
    logger.info(
        f"Latency: avg {result.avg_latency_ms:.2f} ms, min {result.min_latency_ms:.2f} ms, "
        f"max {result.max_latency_ms:.2f} ms"
    )
    logger.info(
        f"Percentiles: p50 {result.p50_latency_ms:.2f} ms, p95 {result.p95_latency_ms:.2f} ms, "
        f"p99 {result.p99_latency_ms:.2f} ms"
    )
    logger.info(f"Success rate: {result.success_rate:.2%}")
