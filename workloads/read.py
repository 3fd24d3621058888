"""
Read workload: per-user message lookups through the execution engine.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from configuration import DEFAULT_READ_QUERIES, DEFAULT_READ_LIMIT, DEFAULT_CONCURRENCY
from engine.errors import ConfigurationError
from engine.result import AggregateResult
from engine.run_config import RunConfiguration
from engine.scheduler import Scheduler
from workloads.base import Message, MessageStore, log_summary

logger = logging.getLogger(__name__)

# query index -> user id to look up; supplied by the caller
KeySupplier = Callable[[int], str]


class ReadWorkload:
    """Read performance test: one lookup query per operation."""

    def __init__(
        self,
        store: MessageStore,
        key_supplier: KeySupplier,
        total_queries: int = DEFAULT_READ_QUERIES,
        concurrency: int = DEFAULT_CONCURRENCY,
        read_limit: int = DEFAULT_READ_LIMIT,
        name: Optional[str] = None,
    ):
        """Initialize the read workload.

        Args:
            store: Backend serving the lookups
            key_supplier: Maps a query index to the user id it looks up
            total_queries: Number of queries to execute
            concurrency: Number of lanes
            read_limit: Maximum rows returned per query
            name: Run label (default: '<store name>-read')
        """
        if read_limit <= 0:
            raise ConfigurationError(f"read_limit must be positive, got {read_limit}")

        self.store = store
        self.key_supplier = key_supplier
        self.total_queries = total_queries
        self.concurrency = concurrency
        self.read_limit = read_limit
        self.name = name or f"{store.name}-read"

    def _query_for(self, index: int) -> Tuple[str, int]:
        return self.key_supplier(index), self.read_limit

    async def _read(self, query: Tuple[str, int]) -> List[Message]:
        user_id, limit = query
        return await self.store.get_messages_by_user(user_id, limit)

    def build_configuration(self) -> RunConfiguration:
        return RunConfiguration(
            total=self.total_queries,
            operation=self._read,
            concurrency=self.concurrency,
            input_supplier=self._query_for,
            name=self.name,
        )

    async def get_pre_test_stats(self) -> Optional[Dict[str, Any]]:
        """Log table statistics before the read test; None if the store cannot report them."""
        try:
            stats = await self.store.get_table_stats()
        except Exception as e:
            logger.warning(f"Failed to get pre-test stats: {e}")
            return None
        if stats is None:
            logger.warning(f"Table stats not reported by {self.store.name}")
            return None

        logger.info("=== Pre-Read Test Database Stats ===")
        for key, value in stats.items():
            logger.info(f"{key}: {value}")
        return stats

    async def run(self) -> AggregateResult:
        """Run the complete read test."""
        config = self.build_configuration()
        await self.get_pre_test_stats()

        logger.info(
            f"Starting read test: {self.total_queries} queries with {self.concurrency} "
            f"concurrent workers, max {self.read_limit} records per query"
        )
        result = await Scheduler().run(config)
        log_summary(result, "Read Test Results", unit_label="records")
        logger.info(f"Average records per query: {result.avg_units_per_operation:.2f}")
        return result
