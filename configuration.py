"""
Configuration constants for the database load test.

This module contains all configuration parameters including:
- Run shaping defaults (concurrency, totals, batch sizes)
- Read test parameters (query counts, result limits)
- Statistics parameters (percentile points, progress reporting)
- Persistence locations and time conversion factors
"""

import os
from typing import Dict

# =============================================================================
# RUN CONFIGURATION
# =============================================================================

# Number of lanes (concurrent workers) used when a workload does not set one
DEFAULT_CONCURRENCY: int = int(os.getenv("LOADTEST_CONCURRENCY", "10"))

# =============================================================================
# WRITE TEST PARAMETERS
# =============================================================================

DEFAULT_TOTAL_RECORDS: int = int(os.getenv("LOADTEST_TOTAL_RECORDS", "1000000"))
DEFAULT_BATCH_SIZE: int = int(os.getenv("LOADTEST_BATCH_SIZE", "20"))
DEFAULT_USE_BATCH_INSERT: bool = os.getenv("LOADTEST_BATCH_INSERT", "true").lower() == "true"

# =============================================================================
# READ TEST PARAMETERS
# =============================================================================

DEFAULT_READ_QUERIES: int = int(os.getenv("LOADTEST_READ_QUERIES", "10000"))
DEFAULT_READ_LIMIT: int = int(os.getenv("LOADTEST_READ_LIMIT", "100"))

# =============================================================================
# STATISTICS PARAMETERS
# =============================================================================

# Percentile points reported for successful latencies (index-based, not interpolated)
PERCENTILE_POINTS: Dict[str, float] = {
    "p50": 0.50,
    "p95": 0.95,
    "p99": 0.99,
}

PROGRESS_REPORT_STEPS: int = 10  # Log progress every 1/N of the run

# =============================================================================
# PERSISTENCE
# =============================================================================

DEFAULT_OUTPUT_DIR: str = "results"

# =============================================================================
# TIME CONSTANTS
# =============================================================================

MS_PER_SECOND: int = 1000
