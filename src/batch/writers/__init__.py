"""
Batch data sink writers.
"""

from .warehouse_writer import BatchWarehouseWriter

__all__ = [
    "BatchWarehouseWriter",
]
