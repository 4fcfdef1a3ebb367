"""
Batch cleaning module.
"""

from .pipeline import BatchPipeline, CleaningPipeline
from .readers import CSVReader, FileReader
from .writers import BatchFileWriter, BatchWarehouseWriter

__all__ = [
    "CleaningPipeline",
    "BatchPipeline",
    "CSVReader",
    "FileReader",
    "BatchFileWriter",
    "BatchWarehouseWriter",
]
