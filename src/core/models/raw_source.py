"""
RawSource model describing where one raw table is ingested from.
"""

from pydantic import BaseModel, Field


class RawSource(BaseModel):
    """
    Delimited text file feeding one raw (bronze) table.

    Attributes:
        table: Raw table name (e.g. "crm_cust_info")
        source_system: Originating system, "crm" or "erp"
        source_path: Path to the delimited file
        field_delimiter: Field separator character(s)
        header_row_present: Whether the first row is a header to skip
    """

    table: str = Field(..., min_length=1, max_length=255)
    source_system: str = Field("crm", pattern="^(crm|erp)$")
    source_path: str = Field(..., min_length=1)
    field_delimiter: str = Field(",", min_length=1)
    header_row_present: bool = True

    class Config:
        json_schema_extra = {
            "example": {
                "table": "crm_cust_info",
                "source_system": "crm",
                "source_path": "datasets/source_crm/cust_info.csv",
                "field_delimiter": ",",
                "header_row_present": True
            }
        }
