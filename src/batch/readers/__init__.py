"""
Batch data source readers.
"""

from .csv_reader import CSVReader
from .raw_store_reader import RawStoreReader

__all__ = [
    "CSVReader",
    "RawStoreReader",
]
