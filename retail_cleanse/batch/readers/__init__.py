"""
Batch data source readers.
"""

from .csv_reader import CSVReader
from .file_reader import FileReader

__all__ = [
    "CSVReader",
    "FileReader",
]
