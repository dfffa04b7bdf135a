"""
Lookup table configuration for value normalization.
"""

from .mapping_config import (
    CanonicalMappings,
    MappingConfigBuilder,
    MappingConfigLoader,
    parse_mappings,
)

__all__ = [
    "CanonicalMappings",
    "MappingConfigBuilder",
    "MappingConfigLoader",
    "parse_mappings",
]
