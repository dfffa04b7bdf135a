"""
Dimensional modeling layer (conformed dimensions and facts).
"""

from .dimensions import build_dim_customers, build_dim_products
from .facts import build_fact_sales
from .model import DimensionalModel

__all__ = [
    "DimensionalModel",
    "build_dim_customers",
    "build_dim_products",
    "build_fact_sales",
]
