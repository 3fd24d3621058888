"""
Parquet persistence for load test records.
"""

import os
import logging
from typing import Iterable, List, Optional
from datetime import datetime

import pandas as pd

from configuration import DEFAULT_OUTPUT_DIR
from persistence.record import OperationRecord

logger = logging.getLogger(__name__)

RECORD_COLUMNS: List[str] = [
    'run_name',
    'index',
    'lane',
    'units_processed',
    'latency_ms',
    'success',
    'error',
    'started_at',
    'completed_at',
]


def records_to_dataframe(records: Iterable[OperationRecord], run_name: str = "") -> pd.DataFrame:
    """Convert operation records to a DataFrame with one column per record field.

    Args:
        records: Records to convert
        run_name: Label stored in the run_name column

    Returns:
        DataFrame with RECORD_COLUMNS, empty if there are no records
    """
    data = []
    for record in records:
        row = record.to_dict()
        row['run_name'] = run_name
        data.append(row)

    if not data:
        return pd.DataFrame(columns=RECORD_COLUMNS)

    return pd.DataFrame(data, columns=RECORD_COLUMNS)


class ParquetPersistence:
    """Parquet file persistence for operation records.

    Records of one or more finished runs are kept in memory and written to
    a single Parquet file for later analysis.

    Attributes:
        output_dir: Directory where Parquet files will be saved
        frames: Per-run DataFrames accumulated so far
    """

    def __init__(self, output_dir: str = DEFAULT_OUTPUT_DIR):
        """Initialize Parquet persistence.

        Args:
            output_dir: Directory for saving Parquet files (default: 'results')
        """
        self.output_dir: str = output_dir
        self.frames: List[pd.DataFrame] = []

        # Ensure output directory exists
        os.makedirs(output_dir, exist_ok=True)

    def store_result(self, result) -> None:
        """Keep all records of a finished run.

        Args:
            result: AggregateResult whose records should be persisted
        """
        frame = records_to_dataframe(result.records, run_name=result.name)
        if len(frame) > 0:
            self.frames.append(frame)

    @property
    def record_count(self) -> int:
        return sum(len(frame) for frame in self.frames)

    def save_to_file(self, filename_prefix: str = "loadtest") -> Optional[str]:
        """Save all stored records to a Parquet file.

        Args:
            filename_prefix: Prefix for the generated filename (default: 'loadtest')

        Returns:
            Path to the saved file, or None if no records to save
        """
        if not self.frames:
            return None

        df = pd.concat(self.frames, ignore_index=True)
        logger.info(f"Saving {len(df)} records to file")

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{filename_prefix}_{timestamp}.parquet"
        filepath = os.path.join(self.output_dir, filename)

        df.to_parquet(filepath, index=False)

        return filepath

    @staticmethod
    def load_from_file(filepath: str) -> pd.DataFrame:
        """Load records previously written by save_to_file."""
        return pd.read_parquet(filepath)
