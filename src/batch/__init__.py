"""
Spark batch processing module.
"""

from .pipeline import WarehousePipeline
from .readers import CSVReader, RawStoreReader
from .writers import BatchWarehouseWriter

__all__ = [
    "WarehousePipeline",
    "CSVReader",
    "RawStoreReader",
    "BatchWarehouseWriter",
]
