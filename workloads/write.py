"""
Write workload: inserts generated message batches through the execution engine.
"""

import math
import logging
from typing import Callable, List, Optional, Sequence

from configuration import (
    DEFAULT_TOTAL_RECORDS,
    DEFAULT_BATCH_SIZE,
    DEFAULT_CONCURRENCY,
    DEFAULT_USE_BATCH_INSERT,
)
from engine.errors import ConfigurationError
from engine.result import AggregateResult
from engine.run_config import RunConfiguration, is_int
from engine.scheduler import Scheduler
from workloads.base import Message, MessageStore, log_summary

logger = logging.getLogger(__name__)

# (batch size, batch index) -> messages; supplied by the caller
BatchFactory = Callable[[int, int], List[Message]]


class WriteWorkload:
    """Write performance test: one operation per batch of messages."""

    def __init__(
        self,
        store: MessageStore,
        batch_factory: BatchFactory,
        total_records: int = DEFAULT_TOTAL_RECORDS,
        batch_size: int = DEFAULT_BATCH_SIZE,
        concurrency: int = DEFAULT_CONCURRENCY,
        use_batch_insert: bool = DEFAULT_USE_BATCH_INSERT,
        name: Optional[str] = None,
    ):
        """Initialize the write workload.

        Args:
            store: Backend receiving the inserts
            batch_factory: Builds the messages of a batch from its size and index
            total_records: Number of messages to insert across all batches
            batch_size: Messages per batch (the last batch may be smaller)
            concurrency: Number of lanes
            use_batch_insert: Insert each batch in one call instead of message by message
            name: Run label (default: '<store name>-write')
        """
        if not is_int(total_records) or total_records <= 0:
            raise ConfigurationError(f"total_records must be a positive integer, got {total_records!r}")
        if not is_int(batch_size) or batch_size <= 0:
            raise ConfigurationError(f"batch_size must be a positive integer, got {batch_size!r}")

        self.store = store
        self.batch_factory = batch_factory
        self.total_records = total_records
        self.batch_size = batch_size
        self.concurrency = concurrency
        self.use_batch_insert = use_batch_insert
        self.name = name or f"{store.name}-write"
        self.total_batches = math.ceil(total_records / batch_size)

    def batch_size_for(self, index: int) -> int:
        """Number of messages in the batch at index."""
        return min(self.batch_size, self.total_records - index * self.batch_size)

    def _batch_for(self, index: int) -> List[Message]:
        return self.batch_factory(self.batch_size_for(index), index)

    async def _write_batch(self, messages: Sequence[Message]) -> int:
        if self.use_batch_insert:
            return await self.store.insert_batch(messages)

        for message in messages:
            await self.store.insert_message(message)
        return len(messages)

    def build_configuration(self) -> RunConfiguration:
        return RunConfiguration(
            total=self.total_batches,
            operation=self._write_batch,
            concurrency=self.concurrency,
            input_supplier=self._batch_for,
            name=self.name,
        )

    async def run(self) -> AggregateResult:
        """Run the complete write test."""
        logger.info(
            f"Starting write test: {self.total_records} records in {self.total_batches} batches "
            f"with {self.concurrency} concurrent workers"
        )
        result = await Scheduler().run(self.build_configuration())
        log_summary(result, "Write Test Results", unit_label="records")
        return result
