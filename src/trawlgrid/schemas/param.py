"""ParamConfig: Expert defaults for the trawlgrid pipeline.

This module defines the complete default configuration. ALL pipeline
parameters must have defaults here. No runtime code should define fallback
values - this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator, model_validator
from trawlgrid.schemas.base import TrawlBaseModel


# =============================================================================
# Nested Configuration Models
# =============================================================================

class InputsConfig(TrawlBaseModel):
    """Source CSV files."""
    haul_file: Optional[str] = None
    catch_file: Optional[str] = None
    taxonomy_file: Optional[str] = None
    encoding: str = "utf-8"
    na_values: list[str] = Field(default_factory=lambda: ["", "NA", "NaN", "-9999"])


class ColumnNamesConfig(TrawlBaseModel):
    """Source column name mappings (defaults follow AFSC RACE exports)."""
    haul_id: str = "HAULJOIN"
    year: str = "YEAR"
    haul_date: Optional[str] = Field(
        None, description="Date column used to derive the year when the year column is absent"
    )
    lat: str = "START_LATITUDE"
    lon: str = "START_LONGITUDE"
    depth: str = "BOTTOM_DEPTH"
    performance: str = "PERFORMANCE"
    effort: str = "AREA_SWEPT_HA"
    species_code: str = "SPECIES_CODE"
    weight: str = "WEIGHT"
    count: str = "NUMBER_FISH"
    group_code: str = "GROUP_CODE"
    group_name: str = "GROUP_NAME"


class FiltersConfig(TrawlBaseModel):
    """Haul selection."""
    min_performance: float = Field(
        0.0, description="Tows with PERFORMANCE below this value are unsatisfactory"
    )
    year_start: Optional[int] = None
    year_end: Optional[int] = None

    @field_validator("min_performance", mode="before")
    @classmethod
    def coerce_min_performance(cls, v):
        """Allow int or float for min_performance."""
        return float(v)

    @model_validator(mode="after")
    def check_year_range(self):
        """year_start must not be after year_end."""
        if self.year_start is not None and self.year_end is not None:
            if self.year_start > self.year_end:
                raise ValueError(
                    f"year_start ({self.year_start}) is after year_end ({self.year_end})"
                )
        return self


class TaxonomyConfig(TrawlBaseModel):
    """Species to functional-group join."""
    unmapped_policy: Literal["drop", "error"] = "drop"

    @field_validator("unmapped_policy", mode="before")
    @classmethod
    def normalize_policy(cls, v):
        """Normalize policy names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v


class CpueConfig(TrawlBaseModel):
    """Catch-per-unit-effort normalization."""
    effort_to_area: float = Field(
        0.01, gt=0, description="Multiplier from the effort column unit to the CPUE area unit (ha -> km2)"
    )
    area_unit: str = "km2"


class OutputConfig(TrawlBaseModel):
    """Output file configuration."""
    format: Literal["parquet", "csv", "netcdf"] = "parquet"
    compression: Literal["snappy", "gzip", "lz4", "none"] = "snappy"
    filename_pattern: str = "{survey_id}_dense_cpue"


class LoggingConfig(TrawlBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(TrawlBaseModel):
    """Complete expert configuration with all defaults.

    This is the single source of truth for all pipeline parameters.
    Every tunable parameter MUST have a default here.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)

    Runtime code only sees InternalConfig.
    """

    survey_id: str = "SURVEY"
    base_dir: Optional[str] = None
    inputs: InputsConfig = Field(default_factory=InputsConfig)
    columns: ColumnNamesConfig = Field(default_factory=ColumnNamesConfig)
    filters: FiltersConfig = Field(default_factory=FiltersConfig)
    taxonomy: TaxonomyConfig = Field(default_factory=TaxonomyConfig)
    cpue: CpueConfig = Field(default_factory=CpueConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
