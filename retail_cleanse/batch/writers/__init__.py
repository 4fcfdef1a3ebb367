"""
Batch data sink writers.
"""

from .file_writer import BatchFileWriter
from .warehouse_writer import BatchWarehouseWriter

__all__ = [
    "BatchFileWriter",
    "BatchWarehouseWriter",
]
