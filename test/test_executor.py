"""
Tests for the operation executor and run configuration.
"""

import asyncio
import unittest
import sys
import os

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from engine.errors import ConfigurationError, OrchestrationError
from engine.executor import OperationExecutor, units_from_result, describe_error
from engine.run_config import RunConfiguration
from persistence.record import OperationRecord


async def noop(_):
    return 1


class TestOperationExecutor(unittest.IsolatedAsyncioTestCase):
    """Test timing and failure conversion of single operations."""

    async def test_success_record(self):
        async def write(batch):
            await asyncio.sleep(0.01)
            return len(batch)

        record = await OperationExecutor().execute(3, [1, 2, 3, 4], write, lane=1)

        self.assertTrue(record.success)
        self.assertIsNone(record.error)
        self.assertEqual(record.index, 3)
        self.assertEqual(record.lane, 1)
        self.assertEqual(record.units_processed, 4)
        self.assertGreaterEqual(record.latency_ms, 8.0)
        self.assertGreaterEqual(record.completed_at, record.started_at)

    async def test_failure_is_converted_to_record(self):
        async def write(_):
            await asyncio.sleep(0.01)
            raise ConnectionError("connection reset by peer")

        with self.assertLogs('engine.executor', level='WARNING'):
            record = await OperationExecutor().execute(0, None, write)

        self.assertFalse(record.success)
        self.assertEqual(record.units_processed, 0)
        self.assertEqual(record.error, "ConnectionError: connection reset by peer")
        self.assertGreaterEqual(record.latency_ms, 8.0)

    async def test_returned_exception_is_a_failure(self):
        async def write(_):
            return ConnectionError("connection refused by backend")

        with self.assertLogs('engine.executor', level='WARNING'):
            record = await OperationExecutor().execute(3, None, write, lane=1)

        self.assertFalse(record.success)
        self.assertEqual(record.units_processed, 0)
        self.assertEqual(record.error, "ConnectionError: connection refused by backend")

    async def test_sized_result_counts_rows(self):
        async def read(query):
            return [{"id": 1}, {"id": 2}]

        record = await OperationExecutor().execute(0, ("user_1", 100), read)

        self.assertEqual(record.units_processed, 2)

    async def test_empty_result_is_a_failure(self):
        async def read(_):
            return None

        with self.assertLogs('engine.executor', level='WARNING'):
            record = await OperationExecutor().execute(0, None, read)

        self.assertFalse(record.success)
        self.assertIn("TypeError", record.error)

    async def test_plain_function_result(self):
        record = await OperationExecutor().execute(0, 5, lambda n: n * 2)

        self.assertTrue(record.success)
        self.assertEqual(record.units_processed, 10)

    async def test_cancellation_is_not_an_operation_failure(self):
        async def cancelled(_):
            raise asyncio.CancelledError()

        with self.assertRaises(asyncio.CancelledError):
            await OperationExecutor().execute(0, None, cancelled)

    async def test_failed_input(self):
        with self.assertLogs('engine.executor', level='WARNING'):
            record = OperationExecutor().failed_input(7, 2, KeyError("user"))

        self.assertFalse(record.success)
        self.assertEqual(record.latency_ms, 0.0)
        self.assertTrue(record.error.startswith("input supplier failed: KeyError"))


class TestUnitNormalization(unittest.TestCase):
    """Test how backend results become unit counts."""

    def test_int(self):
        self.assertEqual(units_from_result(20), 20)
        self.assertEqual(units_from_result(0), 0)

    def test_sized(self):
        self.assertEqual(units_from_result([1, 2, 3]), 3)
        self.assertEqual(units_from_result(()), 0)

    def test_rejected_results(self):
        for value in (None, True, "rows", b"rows", 1.5, object()):
            with self.assertRaises(TypeError):
                units_from_result(value)
        with self.assertRaises(ValueError):
            units_from_result(-1)

    def test_describe_error_without_message(self):
        self.assertEqual(describe_error(TimeoutError()), "TimeoutError")


class TestRunConfiguration(unittest.TestCase):
    """Test configuration validation."""

    def test_effective_concurrency_clamps_to_total(self):
        config = RunConfiguration(total=1, operation=noop, concurrency=5)
        self.assertEqual(config.effective_concurrency, 1)

    def test_lane_indices_are_striped(self):
        config = RunConfiguration(total=10, operation=noop, concurrency=3)

        self.assertEqual(list(config.lane_indices(0)), [0, 3, 6, 9])
        self.assertEqual(list(config.lane_indices(1)), [1, 4, 7])
        self.assertEqual(list(config.lane_indices(2)), [2, 5, 8])
        with self.assertRaises(OrchestrationError):
            config.lane_indices(3)

    def test_invalid_total(self):
        for total in (0, -1, 2.5, True, None):
            with self.assertRaises(ConfigurationError):
                RunConfiguration(total=total, operation=noop)

    def test_invalid_concurrency(self):
        for concurrency in (0, -3, 1.0):
            with self.assertRaises(ConfigurationError):
                RunConfiguration(total=5, operation=noop, concurrency=concurrency)

    def test_operation_must_be_callable(self):
        with self.assertRaises(ConfigurationError):
            RunConfiguration(total=5, operation="insert")
        with self.assertRaises(ConfigurationError):
            RunConfiguration(total=5, operation=noop, input_supplier=[1, 2])

    def test_blocking_rejects_coroutine_operation(self):
        with self.assertRaises(ConfigurationError):
            RunConfiguration(total=3, operation=noop, concurrency=2, blocking=True)

        config = RunConfiguration(total=3, operation=len, concurrency=2, blocking=True)
        self.assertTrue(config.blocking)

    def test_configuration_error_is_value_error(self):
        with self.assertRaises(ValueError):
            RunConfiguration(total=0, operation=noop)

    def test_default_input_is_index(self):
        config = RunConfiguration(total=3, operation=noop)
        self.assertEqual(config.input_supplier(2), 2)


class TestOperationRecord(unittest.TestCase):
    """Test record invariants."""

    def test_error_present_iff_failed(self):
        with self.assertRaises(ValueError):
            OperationRecord(index=0, lane=0, units_processed=0, latency_ms=1.0, success=False)
        with self.assertRaises(ValueError):
            OperationRecord(index=0, lane=0, units_processed=1, latency_ms=1.0,
                            success=True, error="boom")

    def test_negative_values_rejected(self):
        with self.assertRaises(ValueError):
            OperationRecord(index=0, lane=0, units_processed=-1, latency_ms=1.0, success=True)
        with self.assertRaises(ValueError):
            OperationRecord(index=0, lane=0, units_processed=1, latency_ms=-1.0, success=True)

    def test_to_dict(self):
        record = OperationRecord(index=4, lane=1, units_processed=20, latency_ms=3.5, success=True)
        data = record.to_dict()

        self.assertEqual(data['index'], 4)
        self.assertEqual(data['units_processed'], 20)
        self.assertIsNone(data['error'])


if __name__ == '__main__':
    unittest.main()
