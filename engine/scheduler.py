"""
Striped lane scheduler: runs a fixed number of operations across bounded concurrent lanes.
"""

import asyncio
import time
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import uvloop

from configuration import MS_PER_SECOND
from engine.aggregator import ResultAggregator
from engine.completion import CompletionTracker
from engine.errors import OrchestrationError
from engine.executor import OperationExecutor
from engine.result import AggregateResult
from engine.run_config import RunConfiguration

logger = logging.getLogger(__name__)


class Scheduler:
    """Dispatches operation indices over statically striped lanes.

    Lane i of C handles indices i, i+C, i+2C, ... strictly in that order and
    never has more than one operation in flight. Lanes never take work from
    each other. Every run owns its aggregator, completion tracker and thread
    pool, so one Scheduler can run any number of configurations.
    """

    async def run(self, config: RunConfiguration) -> AggregateResult:
        """Run every operation of the configuration and aggregate the results.

        Args:
            config: Validated run configuration

        Returns:
            AggregateResult built once all indices produced a record

        Raises:
            OrchestrationError: Engine bookkeeping was violated
        """
        lanes = config.effective_concurrency
        if lanes < config.concurrency:
            logger.info(
                f"Clamping concurrency for {config.name} from {config.concurrency} "
                f"to {lanes} (total operations)"
            )
        logger.info(f"Starting {config.name}: {config.total} operations across {lanes} lanes")

        aggregator = ResultAggregator(config.total, name=config.name, concurrency=lanes)
        tracker = CompletionTracker(config.total, limit=lanes)

        thread_pool: Optional[ThreadPoolExecutor] = None
        if config.blocking:
            thread_pool = ThreadPoolExecutor(
                max_workers=lanes, thread_name_prefix=f"{config.name}-lane"
            )
        executor = OperationExecutor(thread_pool)

        start = time.perf_counter()
        lane_tasks: List[asyncio.Task] = [
            asyncio.create_task(
                self._lane_task(lane_id, config, executor, aggregator, tracker),
                name=f"{config.name}-lane-{lane_id}",
            )
            for lane_id in range(lanes)
        ]

        try:
            await asyncio.gather(*lane_tasks)
        except Exception as e:
            logger.error(f"Run {config.name} aborted: {e}")
            raise
        finally:
            await self._cancel_lanes(lane_tasks)
            if thread_pool is not None:
                thread_pool.shutdown(wait=False, cancel_futures=True)

        if not tracker.is_complete:
            raise OrchestrationError(
                f"Lanes of {config.name} finished with {tracker.produced_count}/{config.total} "
                f"records and {tracker.in_flight} in flight"
            )

        wall_clock_ms = (tracker.completed_at - start) * MS_PER_SECOND
        result = aggregator.finalize(wall_clock_ms, peak_in_flight=tracker.peak_in_flight)

        logger.info(
            f"Finished {config.name}: {result.success_count}/{result.total_attempted} succeeded "
            f"in {result.wall_clock_ms:.0f} ms, {result.rate:.2f} units/sec, "
            f"p95 {result.p95_latency_ms:.2f} ms"
        )
        return result

    async def _lane_task(
        self,
        lane_id: int,
        config: RunConfiguration,
        executor: OperationExecutor,
        aggregator: ResultAggregator,
        tracker: CompletionTracker,
    ):
        """Work through the lane's stride one operation at a time."""
        completed = 0
        for index in config.lane_indices(lane_id):
            tracker.dispatch()
            try:
                descriptor = config.input_supplier(index)
            except Exception as e:
                record = executor.failed_input(index, lane_id, e)
            else:
                record = await executor.execute(index, descriptor, config.operation, lane=lane_id)

            aggregator.record(record)
            tracker.produced()
            completed += 1

        logger.debug(f"Lane {lane_id} of {config.name} finished {completed} operations")

    async def _cancel_lanes(self, lane_tasks: List[asyncio.Task]):
        """Cancel lanes still running after another lane failed."""
        pending = [task for task in lane_tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)


def run_sync(config: RunConfiguration) -> AggregateResult:
    """Run a configuration to completion on a fresh uvloop event loop.

    Args:
        config: Run configuration

    Returns:
        AggregateResult of the run
    """
    # Set up logging (only if not already configured)
    if not logging.root.handlers:
        logging.basicConfig(
            level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
        )
    return uvloop.run(Scheduler().run(config))
