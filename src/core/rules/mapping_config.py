"""
Lookup tables used to normalize coded source values.

The tables are plain configuration data passed into the transformation
engine, so they can be extended from YAML without touching the rules.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

UNKNOWN_LABEL = "N/A"

DEFAULT_MARITAL_STATUS = {"S": "Single", "M": "Married"}
DEFAULT_CUSTOMER_GENDER = {"M": "Male", "F": "Female"}
DEFAULT_PRODUCT_LINE = {"M": "Mountain", "R": "Road", "S": "Other Sales", "T": "Touring"}
DEFAULT_ERP_GENDER = {"M": "Male", "MALE": "Male", "F": "Female", "FEMALE": "Female"}
DEFAULT_COUNTRY = {
    "USA": "USA",
    "UNITED STATES": "USA",
    "US": "USA",
    "DE": "Germany",
    "GERMANY": "Germany",
    "FRANCE": "France",
    "CANADA": "Canada",
    "UNITED KINGDOM": "UK",
    "AUSTRALIA": "Australia",
}


class CanonicalMappings(BaseModel):
    """
    Code -> label lookup tables applied by the transformation engine.

    Attributes:
        marital_status: CRM marital codes, matched exactly as given
        customer_gender: CRM gender codes, matched exactly as given
        product_line: CRM product line codes, matched after upper/trim
        erp_gender: ERP gender text, matched after upper/trim
        country: ERP country text, matched after upper/trim
        unknown_label: Label for any value not found in its table
    """

    marital_status: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_MARITAL_STATUS))
    customer_gender: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_CUSTOMER_GENDER))
    product_line: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_PRODUCT_LINE))
    erp_gender: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_ERP_GENDER))
    country: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_COUNTRY))
    unknown_label: str = Field(UNKNOWN_LABEL, min_length=1)

    def allowed_values(self, table: str) -> set[str]:
        """Return the labels a normalized column may hold, including the unknown label."""
        return set(getattr(self, table).values()) | {self.unknown_label}


# Tables whose keys are matched after UPPER(TRIM(value))
NORMALIZED_TABLES = ("product_line", "erp_gender", "country")
MAPPING_TABLES = ("marital_status", "customer_gender", "product_line", "erp_gender", "country")


class MappingConfigLoader:
    """
    Loads lookup table overrides from a YAML configuration file.

    Expected YAML format:
    ```yaml
    mappings:
      country:
        NL: Netherlands
        NETHERLANDS: Netherlands
      product_line:
        X: Extreme
      unknown_label: N/A
    ```

    Entries are merged over the defaults. With ``replace: true`` in the
    section, every table listed replaces its default outright.
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the mapping config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Mapping configuration file not found: {config_path}")

    def load(self) -> CanonicalMappings:
        """
        Load mappings from the file's ``mappings`` section.

        Returns:
            CanonicalMappings with the file's overrides applied

        Raises:
            ValueError: If the section is malformed
        """
        with open(self.config_path) as f:
            config = yaml.safe_load(f) or {}

        return parse_mappings(config.get("mappings") or {})


def parse_mappings(section: dict[str, Any]) -> CanonicalMappings:
    """
    Build CanonicalMappings from a ``mappings`` configuration section.

    Args:
        section: Parsed ``mappings`` dictionary

    Returns:
        CanonicalMappings merged over the defaults

    Raises:
        ValueError: If a table is not a mapping or an unknown table is named
    """
    builder = MappingConfigBuilder()
    replace = bool(section.get("replace", False))

    for name, entries in section.items():
        if name in ("replace", "unknown_label"):
            continue
        if name not in MAPPING_TABLES:
            raise ValueError(f"Unknown mapping table '{name}'")
        if not isinstance(entries, dict):
            raise ValueError(f"Mapping table '{name}' must be a mapping of code to label")
        if replace:
            builder.clear(name)
        for code, label in entries.items():
            builder.add(name, str(code), str(label))

    if "unknown_label" in section:
        builder.unknown_label(str(section["unknown_label"]))

    return builder.build()


class MappingConfigBuilder:
    """
    Programmatically build lookup tables (for testing or dynamic rules).
    """

    def __init__(self, base: CanonicalMappings | None = None):
        """Start from ``base`` or from the default tables."""
        self._data = (base or CanonicalMappings()).model_dump()

    def add(self, table: str, code: str, label: str) -> "MappingConfigBuilder":
        """Add or override one code in a table."""
        if table not in MAPPING_TABLES:
            raise ValueError(f"Unknown mapping table '{table}'")
        if table in NORMALIZED_TABLES:
            code = code.strip().upper()
        self._data[table][code] = label
        return self

    def clear(self, table: str) -> "MappingConfigBuilder":
        """Drop every entry of a table."""
        self._data[table] = {}
        return self

    def unknown_label(self, label: str) -> "MappingConfigBuilder":
        """Set the label used for unmatched values."""
        self._data["unknown_label"] = label
        return self

    def build(self) -> CanonicalMappings:
        """Build and return the mappings."""
        return CanonicalMappings(**self._data)
