"""
Raw -> canonical transformation engine.
"""

from .customers import transform_customers
from .engine import TransformationEngine
from .erp import transform_erp_categories, transform_erp_customers, transform_erp_locations
from .products import transform_products
from .sales import transform_sales

__all__ = [
    "TransformationEngine",
    "transform_customers",
    "transform_products",
    "transform_sales",
    "transform_erp_customers",
    "transform_erp_locations",
    "transform_erp_categories",
]
