"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and frozen. Fallback defaults and .get() calls are not used in
runtime code - everything is explicit here.
"""

from typing import Literal, Optional
from pydantic import ConfigDict
from trawlgrid.schemas.base import TrawlBaseModel


class InternalInputsConfig(TrawlBaseModel):
    """Runtime input files.

    Paths may be None during merging; SurveyProcessor requires them.
    """
    haul_file: Optional[str]
    catch_file: Optional[str]
    taxonomy_file: Optional[str]
    encoding: str
    na_values: list[str]


class InternalColumnNamesConfig(TrawlBaseModel):
    """Runtime source column names."""
    haul_id: str
    year: str
    haul_date: Optional[str]
    lat: str
    lon: str
    depth: str
    performance: str
    effort: str
    species_code: str
    weight: str
    count: str
    group_code: str
    group_name: str


class InternalFiltersConfig(TrawlBaseModel):
    """Runtime haul filters."""
    min_performance: float
    year_start: Optional[int]
    year_end: Optional[int]


class InternalTaxonomyConfig(TrawlBaseModel):
    """Runtime taxonomy join settings."""
    unmapped_policy: Literal["drop", "error"]


class InternalCpueConfig(TrawlBaseModel):
    """Runtime CPUE settings."""
    effort_to_area: float
    area_unit: str


class InternalOutputConfig(TrawlBaseModel):
    """Runtime output configuration."""
    format: Literal["parquet", "csv", "netcdf"]
    compression: Literal["snappy", "gzip", "lz4", "none"]
    filename_pattern: str


class InternalLoggingConfig(TrawlBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class InternalConfig(TrawlBaseModel):
    """Authoritative runtime configuration.

    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.policy = config.taxonomy.unmapped_policy  # NOT .get()

    ``output_dirs`` and ``run_id`` are filled in by runtime initialization
    (see trawlgrid.cli.run_survey) and stay None for library use.
    """

    survey_id: str
    base_dir: Optional[str]
    inputs: InternalInputsConfig
    columns: InternalColumnNamesConfig
    filters: InternalFiltersConfig
    taxonomy: InternalTaxonomyConfig
    cpue: InternalCpueConfig
    output: InternalOutputConfig
    logging: InternalLoggingConfig
    output_dirs: Optional[dict[str, str]] = None
    run_id: Optional[str] = None

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,
    )
