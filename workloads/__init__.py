"""
Write and read workloads driven by the execution engine.
"""

from .base import MessageStore
from .write import WriteWorkload
from .read import ReadWorkload

__all__ = ['MessageStore', 'ReadWorkload', 'WriteWorkload']
