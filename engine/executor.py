"""
Operation executor: times one backend call and turns its outcome into a record.
"""

import asyncio
import inspect
import time
import logging
from collections.abc import Sized
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional

from configuration import MS_PER_SECOND
from persistence.record import OperationRecord

logger = logging.getLogger(__name__)


def describe_error(error: BaseException) -> str:
    """Human-readable message for a failed operation."""
    message = str(error)
    if message:
        return f"{type(error).__name__}: {message}"
    return type(error).__name__


def units_from_result(result: Any) -> int:
    """Normalize a backend operation result to a unit count.

    Accepts a non-negative integer (units written) or a sized collection
    (rows read). Anything else is a contract violation by the backend and is
    reported as a failure of that operation.

    Raises:
        TypeError: Result is None, a bool, text, or has no length
        ValueError: Result is a negative count
    """
    if result is None or isinstance(result, (bool, str, bytes)):
        raise TypeError(f"operation returned {result!r} instead of a unit count")
    if isinstance(result, int):
        if result < 0:
            raise ValueError(f"operation returned a negative unit count: {result}")
        return result
    if isinstance(result, Sized):
        return len(result)
    raise TypeError(f"operation returned unsupported result type {type(result).__name__}")


class OperationExecutor:
    """Runs single backend operations and never lets their failures escape."""

    def __init__(self, thread_pool: Optional[ThreadPoolExecutor] = None):
        """Initialize the executor.

        Args:
            thread_pool: Pool for blocking operations; when None operations are
                called on the event loop and awaited if they return an awaitable
        """
        self.thread_pool = thread_pool

    async def _call(self, operation: Callable[[Any], Any], descriptor: Any) -> Any:
        if self.thread_pool is not None:
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(self.thread_pool, operation, descriptor)

        result = operation(descriptor)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def execute(
        self,
        index: int,
        descriptor: Any,
        operation: Callable[[Any], Any],
        lane: int = 0,
    ) -> OperationRecord:
        """Execute one operation and record its outcome.

        Latency covers only the call to the operation. A failure is recorded
        with the latency until it was observed and zero units.

        Args:
            index: Operation index
            descriptor: Input handed to the operation
            operation: Backend operation function
            lane: Lane that dispatched the index

        Returns:
            OperationRecord for the index
        """
        started_at = time.time()
        start = time.perf_counter()
        try:
            result = await self._call(operation, descriptor)
        except Exception as e:
            latency_ms = (time.perf_counter() - start) * MS_PER_SECOND
            return self._failed_record(index, lane, latency_ms, started_at, e)

        latency_ms = (time.perf_counter() - start) * MS_PER_SECOND

        # Operations may return their backend error instead of raising it
        if isinstance(result, BaseException):
            return self._failed_record(index, lane, latency_ms, started_at, result)

        try:
            units = units_from_result(result)
        except (TypeError, ValueError) as e:
            return self._failed_record(index, lane, latency_ms, started_at, e)

        return OperationRecord(
            index=index,
            lane=lane,
            units_processed=units,
            latency_ms=latency_ms,
            success=True,
            started_at=started_at,
            completed_at=time.time(),
        )

    def failed_input(self, index: int, lane: int, error: Exception) -> OperationRecord:
        """Record for an index whose input descriptor could not be produced."""
        now = time.time()
        return self._failed_record(index, lane, 0.0, now, error, prefix="input supplier failed: ")

    def _failed_record(
        self,
        index: int,
        lane: int,
        latency_ms: float,
        started_at: float,
        error: BaseException,
        prefix: str = "",
    ) -> OperationRecord:
        message = prefix + describe_error(error)
        logger.warning(f"Operation {index} failed on lane {lane}: {message}")
        return OperationRecord(
            index=index,
            lane=lane,
            units_processed=0,
            latency_ms=latency_ms,
            success=False,
            error=message,
            started_at=started_at,
            completed_at=time.time(),
        )
