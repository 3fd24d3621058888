"""
Record types and persistence for the load test.
"""

from .record import OperationRecord
from .parquet import ParquetPersistence, records_to_dataframe

__all__ = ['OperationRecord', 'ParquetPersistence', 'records_to_dataframe']
