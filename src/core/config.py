"""
Pipeline configuration.

Loads the raw source locations and lookup table overrides from a YAML file
and falls back to the standard ``datasets/`` layout when no file is given.

Expected YAML format:
```yaml
base_path: datasets
as_of: 2025-11-12          # optional, pins the engine's "current date"
sources:
  crm_cust_info:
    source_system: crm
    source_path: source_crm/cust_info.csv
    field_delimiter: ","
    header_row_present: true
mappings:
  country:
    NL: Netherlands
```
"""

import os
from datetime import date
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from src.core.models import RawSource
from src.core.rules import CanonicalMappings, parse_mappings
from src.core.schema import RAW_SCHEMAS

DEFAULT_BASE_PATH = "datasets"
DEFAULT_CONFIG_PATH = "config/pipeline.yaml"

# Raw table -> (source system, file path relative to the base path)
DEFAULT_SOURCE_FILES: dict[str, tuple[str, str]] = {
    "crm_cust_info": ("crm", "source_crm/cust_info.csv"),
    "crm_prd_info": ("crm", "source_crm/prd_info.csv"),
    "crm_sales_details": ("crm", "source_crm/sales_details.csv"),
    "erp_cust_az12": ("erp", "source_erp/CUST_AZ12.csv"),
    "erp_loc_a101": ("erp", "source_erp/LOC_A101.csv"),
    "erp_px_cat_g1v2": ("erp", "source_erp/PX_CAT_G1V2.csv"),
}


class PipelineConfig(BaseModel):
    """
    Everything a run needs besides the database connection.

    Attributes:
        base_path: Directory relative source paths resolve against
        sources: Raw table name -> RawSource
        mappings: Lookup tables for the transformation engine
        as_of: Date treated as "today" by the engine (None = actual today)
    """

    base_path: str = DEFAULT_BASE_PATH
    sources: dict[str, RawSource] = Field(default_factory=dict)
    mappings: CanonicalMappings = Field(default_factory=CanonicalMappings)
    as_of: date | None = None

    def source_for(self, table: str) -> RawSource:
        """Return the source of ``table`` with its path resolved against base_path."""
        source = self.sources[table]
        path = Path(source.source_path)
        if not path.is_absolute():
            path = Path(self.base_path) / path
        return source.model_copy(update={"source_path": str(path)})


def default_sources() -> dict[str, RawSource]:
    """Build the standard six sources of the CRM/ERP extract layout."""
    return {
        table: RawSource(table=table, source_system=system, source_path=path)
        for table, (system, path) in DEFAULT_SOURCE_FILES.items()
    }


class PipelineConfigLoader:
    """
    Loads a PipelineConfig from a YAML file.
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the pipeline config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Pipeline configuration file not found: {config_path}")

    def load(self) -> PipelineConfig:
        """
        Parse the configuration file.

        Returns:
            PipelineConfig with unspecified sources filled from the defaults

        Raises:
            ValueError: If a source names an unknown raw table
        """
        with open(self.config_path) as f:
            config = yaml.safe_load(f) or {}

        return build_config(config)


def build_config(config: dict[str, Any]) -> PipelineConfig:
    """
    Build a PipelineConfig from a parsed configuration dictionary.

    Args:
        config: Parsed YAML content

    Returns:
        PipelineConfig
    """
    sources = default_sources()
    for table, source_def in (config.get("sources") or {}).items():
        if table not in RAW_SCHEMAS:
            raise ValueError(f"Unknown raw table '{table}' in sources")
        merged = {**sources[table].model_dump(), **(source_def or {}), "table": table}
        sources[table] = RawSource(**merged)

    return PipelineConfig(
        base_path=str(config.get("base_path", DEFAULT_BASE_PATH)),
        sources=sources,
        mappings=parse_mappings(config.get("mappings") or {}),
        as_of=config.get("as_of"),
    )


def load_pipeline_config(config_path: str | Path | None = None) -> PipelineConfig:
    """
    Load the pipeline configuration.

    Uses ``config_path`` (or config/pipeline.yaml) when it exists, the
    defaults otherwise. PIPELINE_AS_OF overrides the file's ``as_of``.

    Args:
        config_path: Optional path to the YAML file

    Returns:
        PipelineConfig
    """
    path = Path(config_path or DEFAULT_CONFIG_PATH)
    if path.exists():
        config = PipelineConfigLoader(path).load()
    elif config_path is not None:
        raise FileNotFoundError(f"Pipeline configuration file not found: {config_path}")
    else:
        config = build_config({})

    as_of = os.getenv("PIPELINE_AS_OF")
    if as_of:
        config = config.model_copy(update={"as_of": date.fromisoformat(as_of)})

    return config
